"""Built-in CLI commands for schemacache.

Each module defines Typer commands or a sub-application that
:mod:`schemacache.app` registers on the root app.

Modules:
    schemas: ``fetch``, ``register``, ``subjects``, ``versions``, ``show``
        and ``check``.
    config: ``config show``, ``config set`` and ``config reset``.
"""

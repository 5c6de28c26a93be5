"""Synchronous client for the Confluent Schema Registry REST API.

This module provides :class:`RegistryClient`, the blocking upstream that
:class:`~schemacache.cache.CachingRegistry` usually wraps. It sits on
:class:`httpx.Client` and adds:

- **Registry endpoints** -- ``fetch`` and ``register`` (the two calls the
  cache consumes) plus ``subjects``, ``subject_versions``,
  ``subject_version`` and ``check``.
- **Basic auth** -- from :class:`~schemacache.models.RegistryConfig`.
- **Retry with backoff** -- retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...).
- **Error mapping** -- HTTP status codes become the exception types in
  :mod:`schemacache.exceptions`.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from schemacache.exceptions import (
    AuthError,
    ConfigError,
    ConnectionError_,
    NotFoundError,
    SchemaValidationError,
    ServerError,
)
from schemacache.models import RegistryConfig, SubjectVersion
from schemacache.output import get_output

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/vnd.schemaregistry.v1+json"


class RegistryClient:
    """Synchronous HTTP client for a schema registry.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        config: Registry URL, credentials and request settings (timeout,
            retries, SSL verify).

    Example::

        with RegistryClient(RegistryConfig(url="http://localhost:8081")) as client:
            schema_id = client.register("orders-value", schema_json)
            assert client.fetch(schema_id) == schema_json
    """

    def __init__(self, config: RegistryConfig) -> None:
        self._config = config
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> RegistryClient:
        if not self._config.url:
            raise ConfigError(
                "No schema registry URL configured. "
                "Pass --registry-url or set SCHEMACACHE_REGISTRY_URL."
            )
        auth: Optional[tuple[str, str]] = None
        if self._config.username is not None:
            auth = (self._config.username, self._config.password or "")
        self._client = httpx.Client(
            base_url=self._config.url,
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            auth=auth,
            follow_redirects=True,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Registry operations
    # ------------------------------------------------------------------ #

    def fetch(self, schema_id: int) -> str:
        """Return the schema document with the given global id.

        Raises:
            NotFoundError: The registry has no schema with that id.
        """
        body = self._request("GET", f"/schemas/ids/{schema_id}")
        return _field(body, "schema", str)

    def register(self, subject: str, schema: str) -> int:
        """Register *schema* under *subject* and return its global id.

        Registering a document that already exists under the subject returns
        the existing id.

        Raises:
            SchemaValidationError: The schema is malformed or incompatible
                with the subject's compatibility setting.
        """
        body = self._request(
            "POST",
            f"/subjects/{_quote(subject)}/versions",
            json_body={"schema": schema},
        )
        return _field(body, "id", int)

    def subjects(self) -> list[str]:
        """List all registered subjects."""
        return self._request("GET", "/subjects")

    def subject_versions(self, subject: str) -> list[int]:
        """List the version numbers registered under *subject*."""
        return self._request("GET", f"/subjects/{_quote(subject)}/versions")

    def subject_version(self, subject: str, version: int | str = "latest") -> SubjectVersion:
        """Return one version of *subject*; ``"latest"`` by default."""
        body = self._request("GET", f"/subjects/{_quote(subject)}/versions/{version}")
        return _subject_version(body)

    def check(self, subject: str, schema: str) -> SubjectVersion:
        """Look up *schema* under *subject* without registering it.

        Raises:
            NotFoundError: The schema is not registered under the subject.
        """
        body = self._request(
            "POST",
            f"/subjects/{_quote(subject)}",
            json_body={"schema": schema},
        )
        return _subject_version(body)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _request(self, method: str, path: str, json_body: Optional[Any] = None) -> Any:
        """Send a request, map error statuses, and return the decoded JSON body."""
        logger.debug("%s %s", method, path)
        response = self._execute_with_retry(method, path, json_body)
        self._map_response_error(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError(
                f"Unexpected registry response from {method} {path}: "
                f"{response.text[:200]!r}"
            ) from exc

    def _execute_with_retry(
        self,
        method: str,
        path: str,
        json_body: Optional[Any],
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": path,
                    "headers": {"Accept": CONTENT_TYPE},
                }
                if json_body is not None:
                    kwargs["json"] = json_body
                    kwargs["headers"]["Content-Type"] = CONTENT_TYPE

                response = self._client.request(**kwargs)

                # Only retry on 5xx (server errors)
                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt  # 1, 2, 4, ...
                    output.debug(
                        f"Server error {response.status_code}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue

                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for error HTTP status codes.

        The registry reports errors as ``{"error_code": 40403, "message": ...}``;
        the ``message`` is carried into the exception text.
        """
        status = response.status_code
        if status < 400:
            return

        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        if status in (409, 422):
            raise SchemaValidationError(full_msg)
        raise ServerError(full_msg)


def _field(body: Any, name: str, expected: type) -> Any:
    """Return ``body[name]``, raising :class:`ServerError` if it is missing or mistyped."""
    value = body.get(name) if isinstance(body, dict) else None
    # bool is an int subclass but never a valid id
    if not isinstance(value, expected) or isinstance(value, bool):
        raise ServerError(f"Unexpected registry response: no {name!r} in {body!r:.200}")
    return value


def _subject_version(body: Any) -> SubjectVersion:
    try:
        return SubjectVersion.model_validate(body)
    except ValidationError as exc:
        raise ServerError(f"Unexpected registry response: {exc}") from exc


def _quote(subject: str) -> str:
    """Percent-encode a subject name for use as a single path segment."""
    return quote(subject, safe="")

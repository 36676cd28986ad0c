"""Client for the Azure instance and load-balancer metadata services."""

from __future__ import annotations

import os
import threading
import time
from enum import Enum

import httpx
import structlog
from pydantic import BaseModel

from . import _defaults
from .exceptions import MetadataReadError
from .keys import LookupKind, LookupRequest, classify_key
from .options import ClientOptions
from .parsing import extract_json_value, extract_tag_value
from .utils.retries import RetryCancelled, exponential_backoff

logger = structlog.get_logger(module=__name__)


class LookupOutcome(str, Enum):
    FOUND = "found"
    DEFAULTED = "defaulted"


class LookupResult(BaseModel):
    """Result of a single lookup.

    ``DEFAULTED`` means the metadata service could not be used and the
    caller's default was substituted.
    """

    value: str
    outcome: LookupOutcome


class _RetryableStatus(Exception):
    def __init__(self, status_code: int):
        super().__init__(f"retryable HTTP status {status_code}")
        self.status_code = status_code


def _resolve_endpoint() -> str:
    for name in _defaults.ENDPOINT_ENV_VARS:
        endpoint = os.getenv(name, "")
        if endpoint != "":
            return endpoint
    return _defaults.DEFAULT_ENDPOINT


def _is_retryable_status(status_code: int) -> bool:
    if status_code == _defaults.TOO_MANY_REQUESTS:
        return True
    return (
        status_code >= 500
        and status_code not in _defaults.NON_RETRYABLE_SERVER_STATUS_CODES
    )


def _read_body(response: httpx.Response, deadline: float) -> bytes:
    """Reads the streamed body, giving up once the attempt deadline has passed.

    httpx timeouts apply to each socket operation, so a body that keeps
    trickling in would otherwise never time out.
    """
    chunks = []
    for chunk in response.iter_bytes():
        if time.monotonic() > deadline:
            raise httpx.ReadTimeout(
                "response body not received within the request timeout",
                request=response.request,
            )
        chunks.append(chunk)
    return b"".join(chunks)


def _first_default(defaults: tuple[str, ...]) -> str:
    if len(defaults) > 0:
        return defaults[0]
    return ""


class MetaClient:
    """Reads values from the Azure Instance Metadata Service.

    Lookups are best effort: when the service is unreachable or answers with
    an error status the caller's default is returned. The HTTP client is
    created on the first lookup and shared by all later ones, including
    concurrent ones.
    """

    def __init__(
        self,
        options: ClientOptions,
        endpoint: str | None = None,
        cancel_event: threading.Event | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Args:
            options: Process-wide client options.
            endpoint: Instance metadata base URL. Read from AZURE_META_ENDPOINT
                (or GCP_META_ENDPOINT) when omitted, else DEFAULT_ENDPOINT.
            cancel_event: Once set, pending retries are abandoned and lookups
                return their defaults.
            transport: httpx transport override, for tests.
        """
        self._options: ClientOptions = options
        self._endpoint: str = endpoint if endpoint else _resolve_endpoint()
        self._cancel_event: threading.Event | None = cancel_event
        self._transport: httpx.BaseTransport | None = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    @property
    def endpoint(self) -> str:
        return self._endpoint

    def __enter__(self) -> "MetaClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        """Close the HTTP client if it was created."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _http_client(self) -> httpx.Client:
        client = self._client
        if client is not None:
            return client

        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self._options.timeout_sec,
                    follow_redirects=True,
                    transport=self._transport,
                )
            return self._client

    def meta(self, key: str, *defaults: str) -> str:
        """Returns the metadata value for key, or the first default if the service can't be used.

        Raises:
            MetadataReadError: If the service answered successfully but the
                response body could not be read.
        """
        return self.lookup(key, *defaults).value

    def lookup(self, key: str, *defaults: str) -> LookupResult:
        """Same as meta() but also reports whether the default was substituted."""
        request = classify_key(key, self._endpoint)
        try:
            response, deadline = self._send(request)
        except (
            httpx.HTTPError,
            httpx.InvalidURL,
            _RetryableStatus,
            RetryCancelled,
        ) as e:
            return self._fallback(request, defaults, repr(e))

        try:
            if response.status_code >= 400:
                return self._fallback(
                    request, defaults, f"HTTP status {response.status_code}"
                )
            try:
                body = _read_body(response, deadline)
            except (httpx.HTTPError, httpx.StreamError) as e:
                raise MetadataReadError(request.url, str(e)) from e
        finally:
            response.close()

        text = body.decode(response.encoding or "utf-8", errors="replace")
        return LookupResult(
            value=self._interpret(request, text),
            outcome=LookupOutcome.FOUND,
        )

    def _send(self, request: LookupRequest) -> tuple[httpx.Response, float]:
        """Sends the GET request, retrying transient failures.

        The returned response is streamed; its body is not read yet. It comes
        with the monotonic deadline of the attempt that produced it, by which
        the body has to be read in full.
        """
        client = self._http_client()
        http_request = client.build_request(
            "GET", request.url, headers=[_defaults.METADATA_HEADER]
        )

        @exponential_backoff(
            max_retries=_defaults.MAX_RETRIES,
            initial_delay_seconds=_defaults.RETRY_INITIAL_DELAY_SEC,
            max_delay_seconds=_defaults.RETRY_MAX_DELAY_SEC,
            retryable_exceptions=(httpx.TransportError, _RetryableStatus),
            is_retryable=lambda e: not isinstance(e, httpx.UnsupportedProtocol),
            on_retry=self._log_retry if self._options.debug else None,
            cancel_event=self._cancel_event,
        )
        def attempt() -> tuple[httpx.Response, float]:
            deadline = time.monotonic() + self._options.timeout_sec
            response = client.send(http_request, stream=True)
            if time.monotonic() > deadline:
                response.close()
                raise httpx.ReadTimeout(
                    "response headers not received within the request timeout",
                    request=http_request,
                )
            if _is_retryable_status(response.status_code):
                response.close()
                raise _RetryableStatus(response.status_code)
            return response, deadline

        return attempt()

    def _interpret(self, request: LookupRequest, body: str) -> str:
        if request.kind == LookupKind.LOAD_BALANCER:
            return extract_json_value(body, request.key)
        if request.kind == LookupKind.TAG:
            return extract_tag_value(request.tag, body)
        return body

    def _fallback(
        self, request: LookupRequest, defaults: tuple[str, ...], reason: str
    ) -> LookupResult:
        if self._options.debug:
            logger.debug(
                "metadata unavailable, using default",
                url=request.url,
                reason=reason,
            )
        return LookupResult(
            value=_first_default(defaults), outcome=LookupOutcome.DEFAULTED
        )

    def _log_retry(self, e: BaseException, sleep_time: float, retries: int):
        logger.info(
            "retrying metadata request",
            retry=retries,
            sleep_sec=round(sleep_time, 3),
            error=repr(e),
        )

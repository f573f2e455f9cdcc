"""
HTTP Transport for repodesk.

Handles HTTP communication with the GitHub REST API: token authentication,
opt-in retries for reads, and mapping of error responses to typed exceptions.
"""

import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import httpx

from repodesk.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    RateLimitedError,
    RepoDeskError,
    ServerError,
    ValidationError,
)
from repodesk.logging import log_http_request, log_http_response

API_VERSION = "2022-11-28"

# Only reads are ever retried.
_RETRYABLE_METHODS = frozenset({"GET", "HEAD"})

_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
    429: "RATE_LIMITED",
}


@dataclass
class RetryConfig:
    """
    Caller-supplied retry policy for read requests.

    Retries are off by default. Even when enabled they only apply to GET and
    HEAD requests; mutating requests are always issued exactly once.
    """

    max_retries: int = 0
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503])
    respect_retry_after: bool = True
    max_backoff: float = 60.0  # Maximum backoff time in seconds
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


def error_from_status(
    status_code: int,
    message: str,
    request_id: str | None = None,
    headers: "httpx.Headers | dict[str, str] | None" = None,
) -> RepoDeskError:
    """
    Map an HTTP error status to the matching exception.

    Args:
        status_code: HTTP status code of the response
        message: Error message reported by the store
        request_id: Store request id for diagnostics (optional)
        headers: Response headers, used to recognise rate limiting (optional)

    Returns:
        Appropriate RepoDeskError subclass
    """
    headers = headers or {}
    code = _STATUS_CODES.get(status_code, "SERVER_ERROR" if status_code >= 500 else "HTTP_ERROR")

    if status_code == 429 or (
        status_code == 403
        and (headers.get("x-ratelimit-remaining") == "0" or "retry-after" in headers)
    ):
        return RateLimitedError("RATE_LIMITED", message, _retry_after(headers), request_id)
    if status_code == 401:
        return AuthenticationError(code, message, request_id)
    if status_code == 403:
        return AuthorizationError(code, message, request_id)
    if status_code == 404:
        return NotFoundError(code, message, request_id)
    if status_code == 409:
        return ConflictError(code, message, request_id)
    if status_code >= 500:
        return ServerError(code, message, request_id)
    return ValidationError(code, message, request_id)


def _retry_after(headers: "httpx.Headers | dict[str, str]") -> int:
    """Seconds until the rate limit resets, from Retry-After or X-RateLimit-Reset."""
    retry_after = headers.get("retry-after")
    if retry_after:
        try:
            return int(retry_after)
        except ValueError:
            pass
    reset = headers.get("x-ratelimit-reset")
    if reset:
        try:
            return max(0, int(reset) - int(time.time()))
        except ValueError:
            pass
    return 60


class HTTPTransport:
    """
    HTTP transport layer for the GitHub REST API.

    Handles:
    - Token authentication and API version headers
    - Opt-in exponential backoff with jitter for read requests
    - Retry-After header respect for rate limiting
    - Error response parsing into typed exceptions
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 30.0,
        retry_config: RetryConfig | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: Base URL for API requests (e.g., "https://api.github.com")
            token: Personal access or app token
            timeout: Request timeout in seconds
            retry_config: Retry policy for reads (default: no retries)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_config = retry_config or RetryConfig()

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {token}",
                "X-GitHub-Api-Version": API_VERSION,
            },
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        body: dict[str, Any] | None = None,
    ) -> Any:
        """
        Make a request against the API.

        Args:
            method: HTTP method
            path: API path (e.g., "/repos/octo/site/contents/index.md")
            params: Query parameters
            body: JSON request body

        Returns:
            Parsed JSON response, or None for empty responses

        Raises:
            RepoDeskError: On API errors
        """
        method = method.upper()

        def make_request() -> httpx.Response:
            log_http_request(method, path, params, body)
            started = time.monotonic()
            response = self._client.request(method, path, params=params, json=body)
            log_http_response(
                response.status_code,
                path,
                elapsed_ms=(time.monotonic() - started) * 1000,
                request_id=response.headers.get("x-github-request-id"),
            )
            return response

        return self._execute(make_request, retryable=method in _RETRYABLE_METHODS)

    def _execute(
        self, request_fn: Callable[[], httpx.Response], retryable: bool
    ) -> Any:
        """
        Execute a request, retrying retryable failures when allowed.

        Args:
            request_fn: Function that makes the HTTP request
            retryable: Whether this request may be retried at all

        Returns:
            Parsed JSON response

        Raises:
            RepoDeskError: On non-retryable errors or after max retries
        """
        max_retries = self.retry_config.max_retries if retryable else 0

        for attempt in range(max_retries + 1):
            try:
                response = request_fn()
            except httpx.TimeoutException as e:
                if attempt >= max_retries:
                    raise ServerError("TIMEOUT", str(e)) from e
                time.sleep(self._get_backoff_time(attempt, None))
                continue
            except httpx.RequestError as e:
                if attempt >= max_retries:
                    raise ServerError("CONNECTION_ERROR", str(e)) from e
                time.sleep(self._get_backoff_time(attempt, None))
                continue

            if response.status_code < 400:
                if response.status_code == 204 or not response.content:
                    return None
                return response.json()

            error = self._parse_error_response(response)

            if not self._should_retry(response.status_code, attempt, max_retries):
                raise error

            retry_after = response.headers.get("Retry-After")
            time.sleep(self._get_backoff_time(attempt, retry_after))

        raise ServerError("UNKNOWN_ERROR", "Request failed with no error details")

    def _should_retry(self, status_code: int, attempt: int, max_retries: int) -> bool:
        """
        Determine if a request should be retried.

        Args:
            status_code: HTTP status code
            attempt: Current attempt number (0-indexed)
            max_retries: Retries allowed for this request

        Returns:
            True if the request should be retried
        """
        if attempt >= max_retries:
            return False

        return status_code in self.retry_config.retry_on

    def _get_backoff_time(
        self, attempt: int, retry_after: str | None
    ) -> float:
        """
        Calculate backoff time for retry.

        Uses exponential backoff with jitter, respecting Retry-After header
        if present.

        Args:
            attempt: Current attempt number (0-indexed)
            retry_after: Value of Retry-After header (if present)

        Returns:
            Time to wait in seconds
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                return float(retry_after)
            except ValueError:
                pass  # Fall through to exponential backoff

        base_wait = self.retry_config.backoff_factor ** attempt

        jitter_range = base_wait * self.retry_config.jitter
        jitter = random.uniform(-jitter_range, jitter_range)
        wait_time = base_wait + jitter

        return min(wait_time, self.retry_config.max_backoff)

    def _parse_error_response(self, response: httpx.Response) -> RepoDeskError:
        """
        Parse an error response into a typed exception.

        Args:
            response: HTTP response with error status

        Returns:
            Appropriate RepoDeskError subclass
        """
        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        message = data.get("message") or f"HTTP {response.status_code}"
        return error_from_status(
            response.status_code,
            message,
            request_id=response.headers.get("x-github-request-id"),
            headers=response.headers,
        )

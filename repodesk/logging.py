"""
repodesk logging utilities.

Provides configurable logging for HTTP requests/responses and for failed
calls against the remote store. Ensures no sensitive data (tokens,
Authorization headers) and no file bodies are logged.
"""

import logging
import re
from typing import Any

# Create package-specific loggers
_sdk_logger = logging.getLogger("repodesk")
_http_logger = logging.getLogger("repodesk.http")
_core_logger = logging.getLogger("repodesk.core")

# Patterns for sensitive data that should be masked
_SENSITIVE_PATTERNS = [
    # Authorization header values
    (re.compile(r"(Bearer|token)\s+[A-Za-z0-9_\-.]+", re.IGNORECASE), r"\1 [REDACTED]"),
    # GitHub personal access tokens, OAuth and app tokens
    (re.compile(r"github_pat_[A-Za-z0-9_]{20,}"), "[TOKEN_REDACTED]"),
    (re.compile(r"gh[pousr]_[A-Za-z0-9]{20,}"), "[TOKEN_REDACTED]"),
    # Secret/token patterns
    (re.compile(r"(secret|token|password|api_key)['\"]?\s*[:=]\s*['\"][^'\"]+['\"]", re.IGNORECASE), r"\1: [REDACTED]"),
]

# Keys whose values are file bodies; logged as their length only
_BODY_KEYS = {"content"}


def configure_logging(
    level: int = logging.INFO,
    http_level: int | None = None,
    core_level: int | None = None,
    handler: logging.Handler | None = None,
    format_string: str | None = None,
) -> None:
    """
    Configure repodesk logging.

    Args:
        level: Default log level for all repodesk loggers (default: INFO)
        http_level: Log level for HTTP request/response logging (default: same as level)
        core_level: Log level for store failure logging (default: same as level)
        handler: Custom handler to use (default: StreamHandler to stderr)
        format_string: Custom format string (default: includes timestamp, level, logger name)

    Example:
        ```python
        import logging
        from repodesk.logging import configure_logging

        # Enable debug logging for HTTP requests
        configure_logging(level=logging.INFO, http_level=logging.DEBUG)
        ```
    """
    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    formatter = logging.Formatter(format_string)

    if handler is None:
        handler = logging.StreamHandler()

    handler.setFormatter(formatter)

    _sdk_logger.setLevel(level)
    _sdk_logger.addHandler(handler)

    _http_logger.setLevel(http_level if http_level is not None else level)
    _core_logger.setLevel(core_level if core_level is not None else level)


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Get a repodesk logger.

    Args:
        name: Logger name suffix (e.g., "http", "core"). If None, returns the main logger.

    Returns:
        Logger instance
    """
    if name is None:
        return _sdk_logger
    return logging.getLogger(f"repodesk.{name}")


def mask_sensitive_data(text: str) -> str:
    """
    Mask sensitive data in a string.

    Args:
        text: Text that may contain tokens or credentials

    Returns:
        Text with sensitive data masked
    """
    result = text
    for pattern, replacement in _SENSITIVE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def safe_log_dict(data: dict[str, Any], sensitive_keys: set[str] | None = None) -> dict[str, Any]:
    """
    Create a copy of a dictionary with sensitive values masked.

    File bodies under a ``content`` key are replaced by their length.

    Args:
        data: Dictionary that may contain sensitive values
        sensitive_keys: Set of keys to mask (default: authorization, token, secret, password)

    Returns:
        Dictionary with sensitive values replaced with "[REDACTED]"
    """
    if sensitive_keys is None:
        sensitive_keys = {"authorization", "token", "secret", "password", "api_key"}

    result: dict[str, Any] = {}
    for key, value in data.items():
        key_lower = key.lower()
        if any(sk in key_lower for sk in sensitive_keys):
            result[key] = "[REDACTED]"
        elif key_lower in _BODY_KEYS and isinstance(value, str):
            result[key] = f"<{len(value)} chars>"
        elif isinstance(value, dict):
            result[key] = safe_log_dict(value, sensitive_keys)
        elif isinstance(value, list):
            result[key] = [
                safe_log_dict(item, sensitive_keys) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def log_http_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> None:
    """Log an HTTP request at DEBUG level with sensitive data masked."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"{method} {url}"]

    if params:
        log_parts.append(f"params={params}")

    if body:
        log_parts.append(f"body={safe_log_dict(body)}")

    _http_logger.debug(mask_sensitive_data(" | ".join(log_parts)))


def log_http_response(
    status_code: int,
    url: str,
    elapsed_ms: float | None = None,
    request_id: str | None = None,
) -> None:
    """Log an HTTP response at DEBUG level."""
    if not _http_logger.isEnabledFor(logging.DEBUG):
        return

    log_parts = [f"Response {status_code} from {url}"]

    if elapsed_ms is not None:
        log_parts.append(f"elapsed={elapsed_ms:.2f}ms")

    if request_id:
        log_parts.append(f"request_id={request_id}")

    _http_logger.debug(" | ".join(log_parts))


def log_remote_failure(operation: str, resource: Any, error: Exception) -> None:
    """
    Log a failed store call at WARNING level.

    Args:
        operation: Operation name (e.g., "read", "write", "revert")
        resource: What the call addressed, usually a ResourceId
        error: The exception raised by the store call
    """
    path = getattr(resource, "path", None)
    ref = getattr(resource, "ref", None)
    repository = getattr(resource, "repository", resource)
    _core_logger.warning(
        mask_sensitive_data(
            f"{operation} failed: repo={repository}, path={path}, ref={ref} | "
            f"{type(error).__name__}: {error}"
        )
    )


__all__ = [
    "configure_logging",
    "get_logger",
    "mask_sensitive_data",
    "safe_log_dict",
    "log_http_request",
    "log_http_response",
    "log_remote_failure",
]

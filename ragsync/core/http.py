# ragsync/core/http.py
"""
HTTP client factory for API-backed collaborators (embedding services).

Usage:
    from ragsync.core.http import create_api_client, raise_for_status

    client = create_api_client(
        base_url="https://api.openai.com/v1",
        api_key="your-key",
        timeout=30.0,
    )
    response = client.post("/embeddings", json=payload)
    raise_for_status(response, provider="openai", endpoint="/embeddings")

Connection failures and timeouts map to the same APIError class so callers
treat them as one failure category.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Errors
# =============================================================================


@dataclass
class APIError(Exception):
    """
    Structured API error with details.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (if available)
        provider: API provider name (e.g., "openai")
        endpoint: API endpoint that failed
        details: Additional error details from the API response
        original_error: The original exception that caused this error
    """

    message: str
    status_code: Optional[int] = None
    provider: Optional[str] = None
    endpoint: Optional[str] = None
    details: Optional[str] = None
    original_error: Optional[Exception] = None

    def __str__(self) -> str:
        parts = [self.message]

        if self.status_code:
            parts.append(f"(HTTP {self.status_code})")

        if self.details:
            parts.append(f"- {self.details}")

        return " ".join(parts)


class RateLimitError(APIError):
    """Raised when API rate limit is exceeded."""

    pass


class AuthenticationError(APIError):
    """Raised when API authentication fails."""

    pass


class ModelNotFoundError(APIError):
    """Raised when requested model doesn't exist."""

    pass


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_TIMEOUTS = {
    "default": 30.0,
    "embedding": 30.0,
}

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


# =============================================================================
# Client Factory
# =============================================================================


def create_api_client(
    base_url: str,
    api_key: Optional[str] = None,
    timeout: Optional[float] = None,
    timeout_type: str = "default",
    headers: Optional[Dict[str, str]] = None,
    auth_header: str = "Authorization",
    auth_scheme: str = "Bearer",
    **kwargs: Any,
) -> httpx.Client:
    """
    Create a configured HTTP client for API calls.

    Args:
        base_url: Base URL for the API
        api_key: API key for authentication (optional)
        timeout: Request timeout in seconds (or use timeout_type)
        timeout_type: Preset timeout type ("default", "embedding", ...)
        headers: Additional headers to include
        auth_header: Header name for authentication
        auth_scheme: Authentication scheme
        **kwargs: Passed to httpx.Client (e.g. transport=... in tests)
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUTS.get(timeout_type, DEFAULT_TIMEOUTS["default"])

    final_headers = dict(DEFAULT_HEADERS)

    if api_key:
        final_headers[auth_header] = f"{auth_scheme} {api_key}"

    if headers:
        final_headers.update(headers)

    client = httpx.Client(
        base_url=base_url,
        headers=final_headers,
        timeout=timeout,
        **kwargs,
    )

    logger.debug(f"Created HTTP client for {base_url} (timeout={timeout}s)")

    return client


# =============================================================================
# Error Handling
# =============================================================================


def handle_api_error(
    exc: Exception,
    provider: str = "unknown",
    endpoint: str = "",
) -> APIError:
    """Convert an httpx exception to a structured APIError."""
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code

        details = None
        try:
            error_data = exc.response.json()
            error_field = error_data.get("error")
            if isinstance(error_field, dict):
                details = error_field.get("message")
            details = details or error_data.get("message") or (
                error_field if isinstance(error_field, str) else None
            )
        except ValueError:
            details = exc.response.text[:200] if exc.response.text else None

        if status_code == 401:
            error_cls = AuthenticationError
            message = f"{provider} authentication failed"
        elif status_code == 429:
            error_cls = RateLimitError
            message = f"{provider} rate limit exceeded"
        elif status_code == 404:
            error_cls = ModelNotFoundError
            message = f"{provider} resource not found"
        else:
            error_cls = APIError
            message = f"{provider} API request failed"

        return error_cls(
            message=message,
            status_code=status_code,
            provider=provider,
            endpoint=endpoint,
            details=details,
            original_error=exc,
        )

    if isinstance(exc, httpx.TimeoutException):
        return APIError(
            message=f"{provider} request timed out",
            provider=provider,
            endpoint=endpoint,
            details="Consider increasing the timeout for this operation",
            original_error=exc,
        )

    if isinstance(exc, httpx.TransportError):
        return APIError(
            message=f"Failed to connect to {provider}",
            provider=provider,
            endpoint=endpoint,
            details=str(exc),
            original_error=exc,
        )

    return APIError(
        message=f"{provider} request failed: {exc}",
        provider=provider,
        endpoint=endpoint,
        original_error=exc,
    )


def raise_for_status(
    response: httpx.Response,
    provider: str = "unknown",
    endpoint: str = "",
) -> None:
    """Check response status and raise the matching APIError if it failed."""
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise handle_api_error(exc, provider=provider, endpoint=endpoint) from exc


__all__ = [
    "APIError",
    "RateLimitError",
    "AuthenticationError",
    "ModelNotFoundError",
    "DEFAULT_TIMEOUTS",
    "create_api_client",
    "handle_api_error",
    "raise_for_status",
]

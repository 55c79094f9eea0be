"""
Base classes for AgentChain HTTP integrations.

Every HTTP collaborator (LLM backends, price oracle, liquidity oracle,
confidential-compute bridge) goes through IntegrationClient so that
errors, retries and logging behave the same way everywhere.

Design Principles:
1. Async-first: All I/O operations are async
2. Typed failures: status codes map to IntegrationError subtypes
3. Resilient: Built-in retry with exponential backoff

Retry Strategy:
    - Retryable errors: timeouts, network errors, 429, 5xx
    - Non-retryable: 4xx (except 429), auth errors, refused connections
    - Backoff: exponential with jitter
"""

from __future__ import annotations

import asyncio
import logging
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class IntegrationError(Exception):
    """Base exception for integration errors."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        status_code: int | None = None,
        response_body: str | None = None,
        retryable: bool = False,
    ):
        super().__init__(message)
        self.integration = integration
        self.status_code = status_code
        self.response_body = response_body
        self.retryable = retryable

    def __str__(self) -> str:
        text = f"[{self.integration}] {self.args[0]}"
        if self.status_code:
            text = f"{text} (status={self.status_code})"
        return text


class PermanentIntegrationError(IntegrationError):
    """An error that retrying the same request cannot fix."""

    def __init__(self, message: str, integration: str, **kwargs):
        kwargs["retryable"] = False
        super().__init__(message, integration, **kwargs)


class ServiceUnreachableError(PermanentIntegrationError):
    """The service refused the connection (nothing is listening)."""


class AuthenticationError(PermanentIntegrationError):
    """Credentials were rejected (401/403)."""


class NotFoundError(PermanentIntegrationError):
    """The resource does not exist (404)."""


class ValidationError(PermanentIntegrationError):
    """The request was rejected as malformed (400/422)."""


class RateLimitError(IntegrationError):
    """Rate limit exceeded (429); retried after Retry-After when given."""

    def __init__(
        self,
        message: str,
        integration: str,
        *,
        retry_after: float | None = None,
        **kwargs,
    ):
        kwargs["retryable"] = True
        super().__init__(message, integration, **kwargs)
        self.retry_after = retry_after


#: Status codes with a dedicated error type and message label
_STATUS_ERRORS: dict[int, tuple[type[PermanentIntegrationError], str]] = {
    400: (ValidationError, "Validation error"),
    401: (AuthenticationError, "Authentication failed"),
    403: (AuthenticationError, "Authentication failed"),
    404: (NotFoundError, "Resource not found"),
    422: (ValidationError, "Validation error"),
}


def _parse_retry_after(value: str | None) -> float | None:
    # Only the delta-seconds form is honoured; HTTP dates fall back to backoff
    if not value:
        return None
    try:
        return max(float(value), 0.0)
    except ValueError:
        return None


def error_for_response(integration: str, response: httpx.Response) -> IntegrationError:
    """
    Map a non-2xx response to an IntegrationError subtype.

    5xx answers are retryable; other unlisted statuses are not.
    """
    status = response.status_code
    body = response.text

    if status == 429:
        return RateLimitError(
            "Rate limit exceeded",
            integration,
            status_code=status,
            response_body=body,
            retry_after=_parse_retry_after(response.headers.get("Retry-After")),
        )

    if status in _STATUS_ERRORS:
        error_cls, label = _STATUS_ERRORS[status]
        return error_cls(f"{label}: {body}", integration, status_code=status, response_body=body)

    return IntegrationError(
        f"Request failed: {body}",
        integration,
        status_code=status,
        response_body=body,
        retryable=status >= 500,
    )


def error_for_transport(integration: str, exc: httpx.TransportError) -> IntegrationError:
    """Map an httpx transport failure (no response at all) to an IntegrationError."""
    if isinstance(exc, httpx.ConnectError):
        return ServiceUnreachableError(f"Connection failed: {exc}", integration)
    if isinstance(exc, httpx.TimeoutException):
        return IntegrationError(f"Request timeout: {exc}", integration, retryable=True)
    return IntegrationError(f"Network error: {exc}", integration, retryable=True)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True, slots=True)
class IntegrationConfig:
    """Connection settings shared by all HTTP integrations."""

    base_url: str = ""
    timeout: float = 30.0
    api_key: str | None = None

    max_retries: int = 2
    retry_delay: float = 0.5
    max_retry_delay: float = 30.0

    log_requests: bool = False
    log_responses: bool = False


# =============================================================================
# Base Client
# =============================================================================


class IntegrationClient(ABC):
    """
    Abstract base class for HTTP integration clients.

    Provides:
    - Lazily created httpx.AsyncClient
    - Authentication header injection
    - Error mapping and retry with backoff

    Subclasses must implement:
    - name: Integration identifier
    """

    def __init__(
        self,
        config: IntegrationConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            config: Integration configuration
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.config = config
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this integration."""
        ...

    def _get_auth_headers(self) -> dict[str, str]:
        """Return authentication headers for requests (none by default)."""
        return {}

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    **self._get_auth_headers(),
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Send a request, retrying retryable failures with backoff.

        Raises:
            IntegrationError: First non-retryable failure, or the last
                failure once max_retries is used up
        """
        retries = 0
        while True:
            try:
                return await self._send(method, path, params=params, json=json)
            except IntegrationError as e:
                if not e.retryable:
                    raise
                if retries >= self.config.max_retries:
                    logger.warning(
                        f"[{self.name}] Giving up on {method} {path} "
                        f"after {retries + 1} attempts: {e}"
                    )
                    raise

                delay = self._retry_delay(retries, e)
                retries += 1
                logger.info(
                    f"[{self.name}] Retry {retries}/{self.config.max_retries} "
                    f"for {method} {path} in {delay:.2f}s"
                )
                await asyncio.sleep(delay)

    def _retry_delay(self, retries: int, error: IntegrationError) -> float:
        """Retry-After when the server gave one, else exponential backoff with ±25% jitter."""
        if isinstance(error, RateLimitError) and error.retry_after is not None:
            return min(error.retry_after, self.config.max_retry_delay)

        delay = self.config.retry_delay * (2**retries)
        delay *= 1 + random.uniform(-0.25, 0.25)
        return min(delay, self.config.max_retry_delay)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        client = await self._get_client()

        if self.config.log_requests:
            logger.debug(f"[{self.name}] {method} {path} params={params} body={json}")

        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.TransportError as e:
            raise error_for_transport(self.name, e) from e

        if self.config.log_responses:
            logger.debug(
                f"[{self.name}] {response.status_code} {method} {path}: "
                f"{response.text[:500] or 'empty'}"
            )

        if not response.is_success:
            raise error_for_response(self.name, response)
        return response

    async def __aenter__(self) -> IntegrationClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


__all__ = [
    "IntegrationError",
    "PermanentIntegrationError",
    "ServiceUnreachableError",
    "AuthenticationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "IntegrationConfig",
    "IntegrationClient",
    "error_for_response",
    "error_for_transport",
]

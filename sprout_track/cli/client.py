"""
HTTP Client for CLI.

Provides async HTTP client for communicating with the Sprout-Track API.
Every endpoint answers with the {success, data, error} envelope; call()
unwraps it and maps failures onto the application error taxonomy.
"""

from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from sprout_track.cli.schemas import ApiEnvelope
from sprout_track.core.exceptions import (
    LOGIN_HINT,
    AuthenticationError,
    ExternalServiceError,
)
from sprout_track.core.logging import get_logger

logger = get_logger(__name__)

_STATUS_MESSAGES = {
    403: "Access denied",
    404: "Resource not found",
    429: "Too many requests. Please try again later.",
}


class APIClient:
    """
    HTTP client for Sprout-Track API communication.

    Features:
    - Bearer token authentication
    - Structured logging of requests/responses
    - Envelope unwrapping with error mapping

    Usage:
        client = APIClient("https://tracker.example.com", token="...")
        babies = await client.call("GET", "/api/baby", params={"active": True})
        await client.close()
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Server origin, e.g. https://tracker.example.com
            token: Bearer token; omitted for unauthenticated calls
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the server.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path (e.g., /api/baby)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On transport failure
        """
        client = await self._get_client()

        logger.debug("API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.debug("API request failed", method=method, path=path, error=str(e))
            raise

        logger.debug(
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def call(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        """
        Issue a request and return the envelope's data.

        Raises:
            AuthenticationError: On HTTP 401
            ExternalServiceError: On any other failure, including transport errors
        """
        try:
            response = await self.request(method, path, params=_query(params), json=json)
        except httpx.TimeoutException as e:
            raise ExternalServiceError(f"Network error: request timed out ({e})") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Network error: {e}") from e

        envelope = _parse_envelope(response)

        if response.status_code == 401:
            raise AuthenticationError(f"Authentication failed or expired. {LOGIN_HINT}")

        if response.is_error:
            message = _STATUS_MESSAGES.get(response.status_code)
            if message is None and envelope is not None:
                message = envelope.error or envelope.message
            raise ExternalServiceError(
                message or response.reason_phrase or f"HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if envelope is None:
            raise ExternalServiceError("Invalid response from server", status_code=response.status_code)

        if not envelope.success:
            raise ExternalServiceError(envelope.error or "Request failed", status_code=response.status_code)

        return envelope.data

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self.call("GET", path, params=params)

    async def post(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self.call("POST", path, json=json)

    async def put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self.call("PUT", path, json=json)

    async def delete(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return await self.call("DELETE", path, json=json)


def _query(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop None values and spell booleans the way the server expects."""
    if not params:
        return None
    query: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        query[key] = ("true" if value else "false") if isinstance(value, bool) else value
    return query


def _parse_envelope(response: httpx.Response) -> ApiEnvelope | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        return ApiEnvelope.model_validate(body)
    except PydanticValidationError:
        return None

"""Unit tests for CLI HTTP client."""

import httpx
import pytest

from sprout_track.cli.client import APIClient
from sprout_track.core.exceptions import AuthenticationError, ExternalServiceError


def client_for(handler, token: str | None = "secret") -> APIClient:
    return APIClient("http://tracker.test", token=token, transport=httpx.MockTransport(handler))


def respond(status_code: int, body=None, **kwargs):
    def handler(request: httpx.Request) -> httpx.Response:
        if body is None:
            return httpx.Response(status_code, **kwargs)
        return httpx.Response(status_code, json=body)

    return handler


class TestAPIClient:
    """Tests for APIClient class."""

    def test_client_initialization(self) -> None:
        """Test client initializes with correct base URL."""
        client = APIClient(base_url="http://tracker.test")
        assert client.base_url == "http://tracker.test"
        assert client.timeout == 30.0

    def test_client_strips_trailing_slash(self) -> None:
        """Test client strips trailing slash from base URL."""
        client = APIClient(base_url="http://tracker.test/")
        assert client.base_url == "http://tracker.test"

    @pytest.mark.asyncio
    async def test_sends_bearer_token(self, server, api_client) -> None:
        """Test every request carries the stored token."""
        await api_client.get("/api/baby")

        request = server.requests[0]
        assert request.headers["Authorization"] == "Bearer test-token-0123456789abcdef"
        assert request.headers["Content-Type"] == "application/json"

    @pytest.mark.asyncio
    async def test_no_token_no_authorization_header(self) -> None:
        """Test unauthenticated clients send no Authorization header."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"success": True, "data": {}})

        client = client_for(handler, token=None)
        await client.post("/api/auth", json={"securityPin": "1"})

        assert "Authorization" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_close_client(self, api_client) -> None:
        """Test closing client."""
        await api_client.get("/api/baby")
        assert api_client._client is not None

        await api_client.close()

        assert api_client._client is None

    @pytest.mark.asyncio
    async def test_close_without_requests(self) -> None:
        """Test close is safe before any request."""
        client = APIClient(base_url="http://tracker.test")
        await client.close()
        assert client._client is None


class TestEnvelope:
    """Tests for unwrapping the {success, data, error} envelope."""

    @pytest.mark.asyncio
    async def test_returns_data(self) -> None:
        client = client_for(respond(200, {"success": True, "data": [{"id": "b1"}]}))
        assert await client.get("/api/baby") == [{"id": "b1"}]

    @pytest.mark.asyncio
    async def test_missing_data_is_none(self) -> None:
        client = client_for(respond(200, {"success": True}))
        assert await client.delete("/api/baby", json={"id": "b1"}) is None

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_uses_error_text(self) -> None:
        client = client_for(respond(200, {"success": False, "error": "Baby is inactive"}))

        with pytest.raises(ExternalServiceError, match="Baby is inactive"):
            await client.get("/api/baby")

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_without_text(self) -> None:
        client = client_for(respond(200, {"success": False}))

        with pytest.raises(ExternalServiceError, match="Request failed"):
            await client.get("/api/baby")

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        client = client_for(respond(200, content=b"<html>proxy</html>"))

        with pytest.raises(ExternalServiceError, match="Invalid response from server"):
            await client.get("/api/baby")

    @pytest.mark.asyncio
    async def test_json_array_body_is_invalid(self) -> None:
        client = client_for(respond(200, [1, 2]))

        with pytest.raises(ExternalServiceError, match="Invalid response from server"):
            await client.get("/api/baby")


class TestErrorMapping:
    """Tests for mapping HTTP failures onto application errors."""

    @pytest.mark.asyncio
    async def test_unauthorized(self) -> None:
        client = client_for(respond(401, {"success": False, "error": "Invalid token"}))

        with pytest.raises(AuthenticationError) as exc_info:
            await client.get("/api/baby")

        assert exc_info.value.message == (
            "Authentication failed or expired. Please run: sprout-track auth login"
        )

    @pytest.mark.parametrize(
        ("status_code", "message"),
        [
            (403, "Access denied"),
            (404, "Resource not found"),
            (429, "Too many requests. Please try again later."),
        ],
    )
    @pytest.mark.asyncio
    async def test_known_statuses(self, status_code: int, message: str) -> None:
        client = client_for(respond(status_code, {"success": False, "error": "ignored"}))

        with pytest.raises(ExternalServiceError) as exc_info:
            await client.get("/api/baby")

        assert exc_info.value.message == message
        assert exc_info.value.status_code == status_code

    @pytest.mark.asyncio
    async def test_other_status_prefers_envelope_error(self) -> None:
        client = client_for(respond(400, {"success": False, "error": "Start time is required"}))

        with pytest.raises(ExternalServiceError, match="Start time is required"):
            await client.post("/api/sleep-log", json={})

    @pytest.mark.asyncio
    async def test_other_status_falls_back_to_envelope_message(self) -> None:
        client = client_for(respond(400, {"success": False, "message": "Bad input"}))

        with pytest.raises(ExternalServiceError, match="Bad input"):
            await client.post("/api/sleep-log", json={})

    @pytest.mark.asyncio
    async def test_other_status_falls_back_to_reason_phrase(self) -> None:
        client = client_for(respond(500, content=b"boom"))

        with pytest.raises(ExternalServiceError, match="Internal Server Error"):
            await client.get("/api/baby")

    @pytest.mark.asyncio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = client_for(handler)

        with pytest.raises(ExternalServiceError, match="Network error: connection refused"):
            await client.get("/api/baby")

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        client = client_for(handler)

        with pytest.raises(ExternalServiceError, match="request timed out"):
            await client.get("/api/baby")


class TestQueryParameters:
    """Tests for query string encoding."""

    @pytest.mark.asyncio
    async def test_none_values_are_dropped(self, server, api_client) -> None:
        await api_client.get("/api/sleep-log", params={"babyId": "baby-1", "startDate": None})

        params = server.requests[0].url.params
        assert params["babyId"] == "baby-1"
        assert "startDate" not in params

    @pytest.mark.asyncio
    async def test_booleans_are_lowercase(self, server, api_client) -> None:
        await api_client.get("/api/baby", params={"active": True})

        assert server.requests[0].url.params["active"] == "true"

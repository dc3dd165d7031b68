"""Unit tests for the per-invocation CLI context."""

from datetime import datetime, timezone

import pytest

from sprout_track.cli.context import CliContext
from sprout_track.core.config import Settings
from sprout_track.core.config_schema import OutputMode
from sprout_track.core.exceptions import (
    AuthenticationError,
    ConfigurationError,
    ValidationError,
)


class TestClient:
    """Tests for lazy client construction."""

    def test_missing_server(self, config_store) -> None:
        cli = CliContext(config_store, Settings())

        with pytest.raises(ConfigurationError, match="Server not configured"):
            cli.client

    def test_client_uses_stored_server_and_token(self, cli_context) -> None:
        client = cli_context.client

        assert client.base_url == "http://tracker.test"
        assert client.token == "test-token-0123456789abcdef"
        assert cli_context.client is client

    def test_reset_client_picks_up_new_token(self, cli_context) -> None:
        first = cli_context.client
        cli_context.store.update(token="other")
        cli_context.reset_client()

        assert cli_context.client is not first
        assert cli_context.client.token == "other"

    def test_run_closes_client(self, cli_context) -> None:
        async def operation():
            await cli_context.client.get("/api/baby")
            return "done"

        assert cli_context.run(operation()) == "done"
        assert cli_context.client._client is None


class TestRequireAuth:
    """Tests for the credential check."""

    def test_without_token(self, config_store) -> None:
        config_store.update(server="http://tracker.test")
        cli = CliContext(config_store, Settings())

        with pytest.raises(AuthenticationError, match="Authentication required"):
            cli.require_auth()

    def test_with_expired_token(self, logged_in_store, clock) -> None:
        logged_in_store.update(token_expires=datetime(2024, 1, 15, 14, 0, tzinfo=timezone.utc))
        cli = CliContext(logged_in_store, Settings(), clock=clock)

        with pytest.raises(AuthenticationError, match="Token has expired"):
            cli.require_auth()

    def test_token_without_expiry_is_valid(self, logged_in_store) -> None:
        logged_in_store.update(token_expires=None)
        CliContext(logged_in_store, Settings()).require_auth()

    def test_records_requires_auth(self, config_store) -> None:
        config_store.update(server="http://tracker.test")
        cli = CliContext(config_store, Settings())

        with pytest.raises(AuthenticationError):
            cli.records("/api/baby")


class TestResolution:
    """Tests for output mode and baby id resolution."""

    def test_explicit_output_wins(self, cli_context) -> None:
        cli_context.store.update(output_format=OutputMode.PLAIN)
        assert cli_context.resolve_mode("json") == OutputMode.JSON

    def test_stored_output_used_by_default(self, cli_context) -> None:
        cli_context.store.update(output_format=OutputMode.PLAIN)
        assert cli_context.resolve_mode(None) == OutputMode.PLAIN

    def test_default_output_is_table(self, config_store) -> None:
        assert CliContext(config_store, Settings()).resolve_mode(None) == OutputMode.TABLE

    def test_invalid_output(self, cli_context) -> None:
        with pytest.raises(ValidationError):
            cli_context.resolve_mode("yaml")

    def test_explicit_baby_wins(self, cli_context) -> None:
        assert cli_context.resolve_baby_id("baby-9") == "baby-9"

    def test_default_baby(self, cli_context) -> None:
        assert cli_context.resolve_baby_id(None) == "baby-1"

    def test_no_baby(self, config_store) -> None:
        cli = CliContext(config_store, Settings())

        with pytest.raises(ValidationError, match="Baby ID is required"):
            cli.resolve_baby_id(None)

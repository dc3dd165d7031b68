"""
CLI Context.

One CliContext is built per process by the root callback and handed to
every command through ctx.obj. It owns the settings store and the lazily
built API client; run() executes one async operation and always closes
the client afterwards.
"""

import asyncio
from collections.abc import Callable, Coroutine
from datetime import datetime, timezone
from typing import Any, TypeVar

import httpx
import typer

from sprout_track.cli.client import APIClient
from sprout_track.cli.records import RecordStore
from sprout_track.cli.validation import validate_output_format
from sprout_track.core.config import ConfigStore, Settings, get_settings
from sprout_track.core.config_schema import OutputMode
from sprout_track.core.exceptions import (
    LOGIN_HINT,
    AuthenticationError,
    ConfigurationError,
    ValidationError,
)

T = TypeVar("T")


class CliContext:
    """Per-invocation state shared by all commands."""

    def __init__(
        self,
        store: ConfigStore,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_settings()
        self.transport = transport
        self.clock = clock or (lambda: datetime.now(timezone.utc))
        self._client: APIClient | None = None

    @classmethod
    def from_environment(cls) -> "CliContext":
        settings = get_settings()
        return cls(ConfigStore.default(settings), settings)

    @property
    def client(self) -> APIClient:
        """API client for the configured server, built on first use."""
        if self._client is None:
            config = self.store.config
            if not config.server:
                raise ConfigurationError()
            self._client = APIClient(
                config.server,
                token=config.token,
                timeout=self.settings.timeout,
                transport=self.transport,
            )
        return self._client

    def reset_client(self) -> None:
        """Forget the client so the next use picks up a new server or token."""
        self._client = None

    def require_auth(self) -> None:
        """
        Raises:
            AuthenticationError: If no token is stored or it has expired
        """
        config = self.store.config
        if not config.token:
            raise AuthenticationError()
        if self.store.is_token_expired(self.clock()):
            raise AuthenticationError(f"Token has expired. {LOGIN_HINT}")

    def records(self, path: str) -> RecordStore:
        """Authenticated store for one resource path."""
        self.require_auth()
        return RecordStore(self.client, path)

    def resolve_mode(self, output: str | None) -> OutputMode:
        """Explicit --output flag, else the persisted preference."""
        if output is not None:
            return validate_output_format(output)
        return self.store.config.output_format

    def resolve_baby_id(self, baby: str | None) -> str:
        baby_id = baby or self.store.config.default_baby_id
        if not baby_id:
            raise ValidationError("Baby ID is required. Use --baby <id> or run: sprout-track baby select <id>")
        return baby_id

    def run(self, operation: Coroutine[Any, Any, T]) -> T:
        """Run one async operation to completion, then close the client."""

        async def _run() -> T:
            try:
                return await operation
            finally:
                if self._client is not None:
                    await self._client.close()

        return asyncio.run(_run())


def get_context(ctx: typer.Context) -> CliContext:
    """The CliContext attached to the root command."""
    obj = ctx.find_root().obj
    if obj is None:
        obj = CliContext.from_environment()
        ctx.find_root().obj = obj
    return obj

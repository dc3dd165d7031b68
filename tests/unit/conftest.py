"""
Unit Test Fixtures.

Fixtures for unit tests - the server is replaced by an in-memory fake
behind httpx.MockTransport. Unit tests should be fast and isolated, never
touching the network.
"""

import json
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import httpx
import pytest
from click.testing import Result
from typer.testing import CliRunner

from sprout_track.cli.app import app
from sprout_track.cli.client import APIClient
from sprout_track.cli.context import CliContext
from sprout_track.core.config import ConfigStore, Settings

SERVER_URL = "http://tracker.test"
TEST_TOKEN = "test-token-0123456789abcdef"
VALID_PIN = "111222"
BABY_ID = "baby-1"


# =============================================================================
# Fake Server
# =============================================================================


class FakeServer:
    """
    In-memory stand-in for the Sprout-Track REST API.

    Answers every request with the {success, data, error} envelope and
    keeps every request it saw, so tests can assert on what was sent.

    Usage:
        server.seed("/api/sleep-log", {"id": "s1", "babyId": "baby-1", ...})
        server.fail("GET", "/api/baby", 403)
        server.calls("PUT", "/api/sleep-log")
    """

    def __init__(self) -> None:
        self.records: dict[str, list[dict[str, Any]]] = defaultdict(list)
        self.requests: list[httpx.Request] = []
        self.settings: dict[str, Any] = {
            "id": "settings-1",
            "familyName": "Smith",
            "defaultBottleUnit": "ML",
            "defaultSolidsUnit": "TBSP",
            "defaultHeightUnit": "CM",
            "defaultWeightUnit": "KG",
            "defaultTempUnit": "C",
        }
        self.timeline: list[dict[str, Any]] = []
        self._failures: dict[tuple[str, str], tuple[int, Any]] = {}
        self._next_id = 1

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def seed(self, path: str, *records: dict[str, Any]) -> None:
        self.records[path].extend(dict(record) for record in records)

    def fail(self, method: str, path: str, status_code: int, body: Any = None) -> None:
        """Answer method+path with a fixed status and body from now on."""
        self._failures[(method, path)] = (status_code, body)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and (path is None or request.url.path == path)
        ]

    def body(self, request: httpx.Request) -> dict[str, Any]:
        return json.loads(request.content) if request.content else {}

    # -------------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        failure = self._failures.get((request.method, path))
        if failure is not None:
            status_code, body = failure
            return httpx.Response(status_code, json=body) if body is not None else httpx.Response(status_code)

        if path == "/api/auth":
            return self._login(self.body(request))
        if path == "/api/auth/refresh":
            return self._ok({"token": "refreshed-token", "name": "Admin"})
        if path == "/api/settings":
            if request.method == "PUT":
                self.settings.update(self.body(request))
            return self._ok(self.settings)
        if path == "/api/timeline":
            return self._ok(self.timeline)

        handler = {
            "GET": self._get,
            "POST": self._create,
            "PUT": self._update,
            "DELETE": self._delete,
        }[request.method]
        return handler(request)

    def _ok(self, data: Any, status_code: int = 200) -> httpx.Response:
        return httpx.Response(status_code, json={"success": True, "data": data})

    def _error(self, status_code: int, message: str) -> httpx.Response:
        return httpx.Response(status_code, json={"success": False, "error": message})

    def _login(self, body: dict[str, Any]) -> httpx.Response:
        if body.get("securityPin") != VALID_PIN:
            return self._error(401, "Invalid PIN")
        return self._ok({
            "id": "caretaker-1",
            "name": "Admin",
            "role": "ADMIN",
            "token": TEST_TOKEN,
            "familySlug": body.get("familySlug") or "smith",
        })

    def _find(self, path: str, record_id: str | None) -> dict[str, Any] | None:
        return next((r for r in self.records[path] if r.get("id") == record_id), None)

    def _get(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        params = request.url.params
        if "id" in params:
            record = self._find(path, params["id"])
            if record is None:
                return self._error(404, "Record not found")
            return self._ok(record)

        records = self.records[path]
        if "babyId" in params:
            records = [r for r in records if r.get("babyId") == params["babyId"]]
        if "type" in params:
            records = [r for r in records if r.get("type") == params["type"]]
        return self._ok(records)

    def _create(self, request: httpx.Request) -> httpx.Response:
        record = {"id": f"rec-{self._next_id}", **self.body(request)}
        self._next_id += 1
        self.records[request.url.path].append(record)
        return self._ok(record, status_code=201)

    def _update(self, request: httpx.Request) -> httpx.Response:
        body = self.body(request)
        record = self._find(request.url.path, body.get("id"))
        if record is None:
            return self._error(404, "Record not found")
        record.update(body)
        return self._ok(record)

    def _delete(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        record = self._find(path, self.body(request).get("id"))
        if record is None:
            return self._error(404, "Record not found")
        self.records[path].remove(record)
        return self._ok(None)


class FixedClock:
    """Callable clock whose time tests set explicitly."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2024, 1, 15, 14, 30, tzinfo=timezone.utc))


@pytest.fixture
def api_client(server: FakeServer) -> APIClient:
    """APIClient wired to the fake server."""
    return APIClient(SERVER_URL, token=TEST_TOKEN, transport=server.transport)


@pytest.fixture
def config_store(tmp_path: Path) -> ConfigStore:
    """Empty settings file in a temporary directory."""
    return ConfigStore(tmp_path / "config.yaml")


@pytest.fixture
def logged_in_store(config_store: ConfigStore) -> ConfigStore:
    """Settings file with a server, a valid token, and a selected baby."""
    config_store.update(
        server=SERVER_URL,
        token=TEST_TOKEN,
        token_expires=datetime(2099, 1, 1, tzinfo=timezone.utc),
        family_slug="smith",
        default_baby_id=BABY_ID,
    )
    return config_store


@pytest.fixture
def cli_context(logged_in_store: ConfigStore, server: FakeServer, clock: FixedClock) -> CliContext:
    return CliContext(logged_in_store, Settings(), transport=server.transport, clock=clock)


@pytest.fixture
def invoke(cli_context: CliContext) -> Callable[..., Result]:
    """
    Run the CLI against the fake server.

    Usage:
        result = invoke(["sleep", "list", "-o", "json"])
    """
    runner = CliRunner()

    def _invoke(args: list[str], input: str | None = None) -> Result:
        return runner.invoke(app, args, obj=cli_context, input=input)

    return _invoke

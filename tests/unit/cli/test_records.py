"""Unit tests for the remote record store."""

import pytest

from sprout_track.cli.records import RecordStore
from sprout_track.core.exceptions import ExternalServiceError

PATH = "/api/diaper-log"


@pytest.fixture
def store(api_client) -> RecordStore:
    return RecordStore(api_client, PATH)


class TestRecordStore:
    """Tests for RecordStore CRUD."""

    @pytest.mark.asyncio
    async def test_list_keeps_server_order(self, server, store) -> None:
        server.seed(PATH, {"id": "d2", "babyId": "baby-1"}, {"id": "d1", "babyId": "baby-1"})

        records = await store.list(babyId="baby-1")

        assert [r["id"] for r in records] == ["d2", "d1"]

    @pytest.mark.asyncio
    async def test_list_drops_none_filters(self, server, store) -> None:
        await store.list(babyId="baby-1", startDate=None, endDate=None)

        assert dict(server.requests[0].url.params) == {"babyId": "baby-1"}

    @pytest.mark.asyncio
    async def test_list_null_data_is_empty(self, server, store) -> None:
        server.fail("GET", PATH, 200, {"success": True, "data": None})
        assert await store.list() == []

    @pytest.mark.asyncio
    async def test_get_passes_id_as_query(self, server, store) -> None:
        server.seed(PATH, {"id": "d1", "type": "WET"})

        record = await store.get("d1")

        assert record["type"] == "WET"
        assert server.requests[0].url.params["id"] == "d1"

    @pytest.mark.asyncio
    async def test_get_unknown_id(self, store) -> None:
        with pytest.raises(ExternalServiceError, match="Resource not found"):
            await store.get("missing")

    @pytest.mark.asyncio
    async def test_create_posts_fields(self, server, store) -> None:
        record = await store.create({"babyId": "baby-1", "type": "WET"})

        assert record["id"] == "rec-1"
        assert server.body(server.calls("POST", PATH)[0]) == {"babyId": "baby-1", "type": "WET"}

    @pytest.mark.asyncio
    async def test_update_sends_id_in_body(self, server, store) -> None:
        server.seed(PATH, {"id": "d1", "type": "WET"})

        record = await store.update("d1", {"type": "BOTH"})

        assert record["type"] == "BOTH"
        assert server.body(server.calls("PUT", PATH)[0]) == {"id": "d1", "type": "BOTH"}

    @pytest.mark.asyncio
    async def test_delete_sends_id_in_body(self, server, store) -> None:
        server.seed(PATH, {"id": "d1"})

        await store.delete("d1")

        assert server.body(server.calls("DELETE", PATH)[0]) == {"id": "d1"}
        assert server.records[PATH] == []

"""
Record Store.

CRUD over one REST resource path. Single-record reads pass the id as a
query parameter; updates and deletes carry it in the request body.
"""

from typing import Any

from sprout_track.cli.client import APIClient


class RecordStore:
    """
    Remote collection of records of one kind.

    Usage:
        sleeps = RecordStore(client, "/api/sleep-log")
        logs = await sleeps.list(babyId=baby_id)
        await sleeps.update(logs[0]["id"], {"endTime": now()})
    """

    def __init__(self, client: APIClient, path: str) -> None:
        self.client = client
        self.path = path

    async def list(self, **filters: Any) -> list[dict[str, Any]]:
        """All records matching the filters, in server order. None filters are dropped."""
        data = await self.client.get(self.path, params=filters)
        return list(data or [])

    async def get(self, record_id: str) -> dict[str, Any]:
        return await self.client.get(self.path, params={"id": record_id})

    async def create(self, fields: dict[str, Any]) -> dict[str, Any]:
        return await self.client.post(self.path, json=fields)

    async def update(self, record_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        return await self.client.put(self.path, json={"id": record_id, **fields})

    async def delete(self, record_id: str) -> None:
        await self.client.delete(self.path, json={"id": record_id})

"""Tests for the Supabase store client and its table helpers."""

import json
from typing import List
from unittest.mock import patch

import httpx
import pytest

from storage.client import StoreClient, get_store
from storage.memories import delete_memory, insert_memories, list_memories
from storage.models import MemoryCategory, Profile, ValidatedMemory
from storage.profile import load_profile, save_profile


def make_store(handler, requests: List[httpx.Request]) -> StoreClient:
    def record(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return handler(request)

    return StoreClient(
        "https://demo.supabase.co/",
        "service-key",
        owner_id="household",
        transport=httpx.MockTransport(record),
    )


class TestGetStore:
    def test_missing_credentials(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.setenv("SUPABASE_KEY", "k")
        assert get_store() is None

    def test_configured(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://demo.supabase.co")
        monkeypatch.setenv("SUPABASE_KEY", "k")

        store = get_store(owner_id="judy")

        assert store.base_url == "https://demo.supabase.co/rest/v1"
        assert store.owner_id == "judy"


class TestConnectionReuse:
    @pytest.mark.asyncio
    async def test_one_client_for_all_calls(self):
        requests: List[httpx.Request] = []
        with patch("storage.client.httpx.AsyncClient", wraps=httpx.AsyncClient) as client_cls:
            store = make_store(lambda r: httpx.Response(200, json=[]), requests)
            await list_memories(store)
            await load_profile(store)
            await delete_memory(store, "3")

        assert client_cls.call_count == 1
        assert len(requests) == 3
        assert store.http.is_closed is False

    @pytest.mark.asyncio
    async def test_aclose(self):
        store = make_store(lambda r: httpx.Response(200, json=[]), [])

        await store.aclose()

        assert store.http.is_closed is True


class TestMemories:
    @pytest.mark.asyncio
    async def test_batch_insert(self):
        requests: List[httpx.Request] = []
        store = make_store(lambda r: httpx.Response(201), requests)

        await insert_memories(
            store,
            [
                ValidatedMemory(user_id="household", fact="Jake loves pizza", category=MemoryCategory.FAVORITE),
                ValidatedMemory(user_id="household", fact="No peanuts", category=MemoryCategory.ALLERGY),
            ],
        )

        assert len(requests) == 1
        request = requests[0]
        assert request.method == "POST"
        assert request.url.path == "/rest/v1/memories"
        assert request.headers["apikey"] == "service-key"
        assert request.headers["authorization"] == "Bearer service-key"
        assert request.headers["prefer"] == "return=minimal"
        assert json.loads(request.content) == [
            {"user_id": "household", "fact": "Jake loves pizza", "category": "favorite"},
            {"user_id": "household", "fact": "No peanuts", "category": "allergy"},
        ]

    @pytest.mark.asyncio
    async def test_empty_insert_skips_request(self):
        requests: List[httpx.Request] = []
        store = make_store(lambda r: httpx.Response(201), requests)

        await insert_memories(store, [])

        assert requests == []

    @pytest.mark.asyncio
    async def test_insert_failure_raises(self):
        requests: List[httpx.Request] = []
        store = make_store(lambda r: httpx.Response(500, json={"message": "down"}), requests)

        with pytest.raises(httpx.HTTPStatusError):
            await insert_memories(
                store,
                [ValidatedMemory(user_id="household", fact="x", category=MemoryCategory.BUDGET)],
            )

    @pytest.mark.asyncio
    async def test_list_newest_first_for_owner(self):
        requests: List[httpx.Request] = []
        rows = [
            {"id": 2, "fact": "Tacos on Tuesday", "category": "schedule", "created_at": "2025-02-01T00:00:00Z"},
            {"id": 1, "fact": "Jake loves pizza", "category": "favorite", "created_at": "2025-01-01T00:00:00Z"},
        ]
        store = make_store(lambda r: httpx.Response(200, json=rows), requests)

        memories = await list_memories(store)

        assert [m.id for m in memories] == [2, 1]
        params = requests[0].url.params
        assert params["user_id"] == "eq.household"
        assert params["order"] == "created_at.desc"

    @pytest.mark.asyncio
    async def test_delete_scoped_to_owner(self):
        requests: List[httpx.Request] = []
        store = make_store(lambda r: httpx.Response(204), requests)

        await delete_memory(store, "17")

        request = requests[0]
        assert request.method == "DELETE"
        assert request.url.params["id"] == "eq.17"
        assert request.url.params["user_id"] == "eq.household"


class TestProfile:
    @pytest.mark.asyncio
    async def test_load_missing(self):
        requests: List[httpx.Request] = []
        store = make_store(lambda r: httpx.Response(200, json=[]), requests)

        assert await load_profile(store) is None

    @pytest.mark.asyncio
    async def test_load_existing(self):
        requests: List[httpx.Request] = []
        row = {"user_id": "household", "family_size": "4", "budget": "$150/week"}
        store = make_store(lambda r: httpx.Response(200, json=[row]), requests)

        profile = await load_profile(store)

        assert profile.family_size == "4"
        assert profile.budget == "$150/week"
        assert requests[0].url.params["user_id"] == "eq.household"

    @pytest.mark.asyncio
    async def test_save_upserts_on_owner(self):
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(201, json=[json.loads(request.content)])

        store = make_store(handler, requests)

        saved = await save_profile(store, Profile(family_size="5", equipment="Instant Pot"))

        request = requests[0]
        body = json.loads(request.content)
        assert request.url.params["on_conflict"] == "user_id"
        assert "merge-duplicates" in request.headers["prefer"]
        assert body["user_id"] == "household"
        assert saved.family_size == "5"
        assert saved.equipment == "Instant Pot"

from typing import List

from .client import StoreClient
from .models import Memory, ValidatedMemory


MEMORIES_TABLE = "memories"


async def insert_memories(store: StoreClient, memories: List[ValidatedMemory]) -> None:
    if not memories:
        return
    await store.insert(MEMORIES_TABLE, [mem.to_row() for mem in memories])


async def list_memories(store: StoreClient) -> List[Memory]:
    rows = await store.select(
        MEMORIES_TABLE,
        {
            "select": "id,fact,category,created_at",
            "user_id": f"eq.{store.owner_id}",
            "order": "created_at.desc",
        },
    )
    return [Memory(**row) for row in rows]


async def delete_memory(store: StoreClient, memory_id: str) -> None:
    await store.delete(
        MEMORIES_TABLE,
        {"id": f"eq.{memory_id}", "user_id": f"eq.{store.owner_id}"},
    )

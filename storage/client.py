import logging
import os
from typing import Any, Dict, List, Optional

import httpx


logger = logging.getLogger(__name__)

DEFAULT_OWNER_ID = "household"


class StoreClient:
    """Thin async client for a Supabase project's PostgREST endpoint.

    One instance is built at startup and shared by every request, reusing a
    single pooled ``httpx.AsyncClient`` until ``aclose`` is called on shutdown.
    All records are scoped to ``owner_id``; there is no other tenant.
    """

    def __init__(
        self,
        url: str,
        key: str,
        owner_id: str = DEFAULT_OWNER_ID,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.owner_id = owner_id
        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self.http.aclose()

    async def select(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        r = await self.http.get(f"/{table}", params=params)
        r.raise_for_status()
        return r.json()

    async def insert(self, table: str, rows: List[Dict[str, Any]]) -> None:
        r = await self.http.post(f"/{table}", json=rows, headers={"Prefer": "return=minimal"})
        r.raise_for_status()

    async def upsert(self, table: str, row: Dict[str, Any], on_conflict: str) -> List[Dict[str, Any]]:
        r = await self.http.post(
            f"/{table}",
            json=row,
            params={"on_conflict": on_conflict},
            headers={"Prefer": "resolution=merge-duplicates,return=representation"},
        )
        r.raise_for_status()
        return r.json()

    async def delete(self, table: str, params: Dict[str, str]) -> None:
        r = await self.http.delete(f"/{table}", params=params)
        r.raise_for_status()


def get_store(owner_id: str = DEFAULT_OWNER_ID) -> Optional[StoreClient]:
    url = os.environ.get("SUPABASE_URL")
    key = os.environ.get("SUPABASE_KEY")

    if not url or not key:
        logger.warning("SUPABASE_URL/SUPABASE_KEY not set; profile and memory persistence disabled")
        return None

    return StoreClient(url=url, key=key, owner_id=owner_id)

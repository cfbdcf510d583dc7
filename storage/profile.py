from typing import Optional

from .client import StoreClient
from .models import Profile


PROFILES_TABLE = "profiles"


async def load_profile(store: StoreClient) -> Optional[Profile]:
    rows = await store.select(
        PROFILES_TABLE,
        {"select": "*", "user_id": f"eq.{store.owner_id}", "limit": "1"},
    )
    if not rows:
        return None
    return Profile(**rows[0])


async def save_profile(store: StoreClient, profile: Profile) -> Profile:
    row = profile.model_dump()
    row["user_id"] = store.owner_id

    saved = await store.upsert(PROFILES_TABLE, row, on_conflict="user_id")
    if saved:
        return Profile(**saved[0])
    return profile

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from .adapters import ExtractionClient, get_extraction_adapter
from .parser import parse_candidates
from .prompts import build_extraction_prompt
from chat.adapters import AnthropicChatAdapter
from storage.client import DEFAULT_OWNER_ID, StoreClient
from storage.memories import insert_memories
from storage.models import CATEGORY_VALUES, ChatExchange, MemoryCategory, ValidatedMemory


logger = logging.getLogger(__name__)


def user_text_from_content(content: Union[str, List[Dict[str, Any]], None]) -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    return "\n".join(
        block["text"]
        for block in content
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    )


def validate_candidates(candidates: List[Any], owner_id: str = DEFAULT_OWNER_ID) -> List[ValidatedMemory]:
    validated = []
    for item in candidates:
        if not isinstance(item, dict):
            logger.debug(f"Dropping non-object candidate: {item!r}")
            continue

        fact = item.get("memory")
        category = item.get("category")
        if not isinstance(fact, str) or not fact:
            logger.debug(f"Dropping candidate without text: {item!r}")
            continue
        if not isinstance(category, str) or category not in CATEGORY_VALUES:
            logger.debug(f"Dropping candidate with unknown category: {item!r}")
            continue

        validated.append(
            ValidatedMemory(user_id=owner_id, fact=fact, category=MemoryCategory(category))
        )
    return validated


async def extract_memories(
    client: ExtractionClient,
    store: StoreClient,
    exchange: ChatExchange,
) -> List[ValidatedMemory]:
    user_text = user_text_from_content(exchange.user_content)
    if not user_text.strip():
        return []

    prompt = build_extraction_prompt(user_text, exchange.assistant_reply)

    try:
        reply = await client.complete(prompt)
    except httpx.HTTPError as e:
        logger.warning(f"Extraction call could not reach the API: {e}")
        return []

    if reply is None:
        return []

    memories = validate_candidates(parse_candidates(reply), owner_id=store.owner_id)
    if not memories:
        return []

    try:
        await insert_memories(store, memories)
    except httpx.HTTPError as e:
        logger.error(f"Failed to store {len(memories)} memories: {e}")
        return []

    return memories


async def run_memory_pipeline(
    adapter: AnthropicChatAdapter,
    store: Optional[StoreClient],
    exchange: ChatExchange,
    config: Dict[str, Dict[str, Any]],
) -> None:
    """Background entry point: runs after the chat response is sent and never raises."""
    if store is None:
        return

    try:
        client = get_extraction_adapter(adapter, config)
        saved = await extract_memories(client, store, exchange)
    except Exception:
        logger.exception("Memory extraction crashed")
        return

    if saved:
        logger.info(f"Stored {len(saved)} memories: {[mem.fact for mem in saved]}")

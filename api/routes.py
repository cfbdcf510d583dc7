import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import FileResponse, JSONResponse

from storage.client import StoreClient
from storage.models import ChatRequest, MemoriesResponse, Profile, ProfileResponse
from storage.memories import delete_memory, list_memories
from storage.profile import load_profile, save_profile
from chat.conversation import exchange_from, get_chat_adapter, load_chat_config, relay_chat
from extraction.extractor import run_memory_pipeline


logger = logging.getLogger(__name__)

PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


def get_api_key() -> Optional[str]:
    return os.environ.get("ANTHROPIC_API_KEY")


def get_store_handle(request: Request) -> Optional[StoreClient]:
    return getattr(request.app.state, "store", None)


def get_config(request: Request) -> Dict[str, Dict[str, Any]]:
    config = getattr(request.app.state, "chat_config", None)
    if config is None:
        config = load_chat_config()
        request.app.state.chat_config = config
    return config


router = APIRouter()


@router.post("/api/chat")
async def chat(
    req: ChatRequest,
    background_tasks: BackgroundTasks,
    api_key: Optional[str] = Depends(get_api_key),
    store: Optional[StoreClient] = Depends(get_store_handle),
    config: Dict[str, Dict[str, Any]] = Depends(get_config),
) -> JSONResponse:
    if not api_key:
        return JSONResponse(status_code=503, content={"error": "ANTHROPIC_API_KEY not configured"})

    adapter = get_chat_adapter(api_key, config)

    try:
        response = await relay_chat(adapter, req, config)
    except httpx.HTTPError as e:
        logger.error(f"Anthropic API error: {e!r}")
        return JSONResponse(status_code=500, content={"error": "Failed to reach Anthropic API"})

    if not response.ok:
        return JSONResponse(status_code=response.status_code, content=response.body)

    if store is not None:
        exchange = exchange_from(req, response)
        if exchange is not None:
            background_tasks.add_task(run_memory_pipeline, adapter, store, exchange, config)

    return JSONResponse(content=response.body)


@router.get("/api/profile")
async def get_profile(store: Optional[StoreClient] = Depends(get_store_handle)) -> ProfileResponse:
    if store is None:
        return ProfileResponse(profile=None)
    try:
        profile = await load_profile(store)
    except httpx.HTTPError as e:
        logger.error(f"Profile load failed: {e!r}")
        raise HTTPException(status_code=502, detail="Failed to load profile")
    return ProfileResponse(profile=profile)


@router.put("/api/profile")
async def put_profile(
    profile: Profile,
    store: Optional[StoreClient] = Depends(get_store_handle),
) -> ProfileResponse:
    if store is None:
        return ProfileResponse(profile=None)
    try:
        saved = await save_profile(store, profile)
    except httpx.HTTPError as e:
        logger.error(f"Profile save failed: {e!r}")
        raise HTTPException(status_code=502, detail="Failed to save profile")
    return ProfileResponse(profile=saved)


@router.get("/api/memories")
async def get_memories(store: Optional[StoreClient] = Depends(get_store_handle)) -> MemoriesResponse:
    if store is None:
        return MemoriesResponse(memories=[])
    try:
        memories = await list_memories(store)
    except httpx.HTTPError as e:
        logger.error(f"Memory listing failed: {e!r}")
        raise HTTPException(status_code=502, detail="Failed to load memories")
    return MemoriesResponse(memories=memories)


@router.delete("/api/memories/{memory_id}")
async def remove_memory(
    memory_id: str,
    store: Optional[StoreClient] = Depends(get_store_handle),
) -> dict:
    if store is None:
        return {"deleted": False}
    try:
        await delete_memory(store, memory_id)
    except httpx.HTTPError as e:
        logger.error(f"Memory delete failed: {e!r}")
        raise HTTPException(status_code=502, detail="Failed to delete memory")
    return {"deleted": True}


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return frontend("")


@router.get("/{full_path:path}", include_in_schema=False)
async def spa(full_path: str) -> FileResponse:
    return frontend(full_path)


def frontend(full_path: str) -> FileResponse:
    """Serve a file from public/, falling back to index.html for client-side routes."""
    public = PUBLIC_DIR.resolve()
    if full_path:
        candidate = (public / full_path).resolve()
        if candidate.is_file() and public in candidate.parents:
            return FileResponse(candidate)

    index_path = public / "index.html"
    if not index_path.exists():
        raise HTTPException(status_code=404, detail="Front-end not found")
    return FileResponse(index_path)

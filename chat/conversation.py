import logging
from pathlib import Path
from typing import Any, Dict, List, Optional
import yaml

from .adapters import ANTHROPIC_BASE_URL, ANTHROPIC_VERSION, AnthropicChatAdapter, UpstreamResponse, text_from_blocks
from storage.models import ChatExchange, ChatRequest, MessageTurn


logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent
CONFIG_PATH = BASE_DIR / "config" / "chat_models.yaml"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "chat": {
        "model": "claude-sonnet-4-20250514",
        "max_tokens": 1500,
        "base_url": ANTHROPIC_BASE_URL,
        "anthropic_version": ANTHROPIC_VERSION,
    },
    "extraction": {
        "model": "claude-haiku-4-5-20251001",
        "max_tokens": 300,
    },
    "storage": {
        "owner_id": "household",
    },
}


def load_chat_config(path: Path = CONFIG_PATH) -> Dict[str, Dict[str, Any]]:
    loaded: Dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
    else:
        logger.info(f"No config at {path}; using built-in defaults")

    config = {}
    for section, defaults in DEFAULT_CONFIG.items():
        overrides = loaded.get(section) or {}
        config[section] = {**defaults, **overrides}
    return config


def get_chat_adapter(api_key: str, config: Dict[str, Dict[str, Any]]) -> AnthropicChatAdapter:
    chat_cfg = config["chat"]
    return AnthropicChatAdapter(
        api_key=api_key,
        base_url=chat_cfg.get("base_url", ANTHROPIC_BASE_URL),
        version=chat_cfg.get("anthropic_version", ANTHROPIC_VERSION),
    )


def build_chat_payload(req: ChatRequest, config: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    chat_cfg = config["chat"]
    return {
        "model": req.model or chat_cfg["model"],
        "max_tokens": req.max_tokens or chat_cfg["max_tokens"],
        "system": req.system or "",
        "messages": [msg.model_dump() for msg in req.messages],
    }


async def relay_chat(
    adapter: AnthropicChatAdapter,
    req: ChatRequest,
    config: Dict[str, Dict[str, Any]],
) -> UpstreamResponse:
    return await adapter.create_message(build_chat_payload(req, config))


def last_user_turn(messages: List[MessageTurn]) -> Optional[MessageTurn]:
    for msg in reversed(messages):
        if msg.role == "user":
            return msg
    return None


def exchange_from(req: ChatRequest, response: UpstreamResponse) -> Optional[ChatExchange]:
    """The exchange to mine for memories, or None when there is nothing to extract from."""
    if not response.ok or not isinstance(response.body, dict):
        return None

    user_turn = last_user_turn(req.messages)
    if user_turn is None:
        return None

    assistant_text = text_from_blocks(response.body.get("content"), separator="\n")
    if not assistant_text:
        return None

    return ChatExchange(user_content=user_turn.content, assistant_reply=assistant_text)

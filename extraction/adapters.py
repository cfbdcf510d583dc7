import logging
from typing import Any, Dict, Optional

from chat.adapters import AnthropicChatAdapter, text_from_blocks


logger = logging.getLogger(__name__)


class ExtractionClient:
    """Runs the small, cheap completion used for memory extraction."""

    def __init__(self, adapter: AnthropicChatAdapter, model: str, max_tokens: int) -> None:
        self.adapter = adapter
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str) -> Optional[str]:
        response = await self.adapter.create_message(
            {
                "model": self.model,
                "max_tokens": self.max_tokens,
                "messages": [{"role": "user", "content": prompt}],
            }
        )

        if not response.ok:
            logger.warning(f"Extraction call failed with status {response.status_code}")
            return None

        body = response.body if isinstance(response.body, dict) else {}
        return text_from_blocks(body.get("content"))


def get_extraction_adapter(adapter: AnthropicChatAdapter, config: Dict[str, Dict[str, Any]]) -> ExtractionClient:
    extraction_cfg = config["extraction"]
    return ExtractionClient(
        adapter=adapter,
        model=extraction_cfg["model"],
        max_tokens=extraction_cfg["max_tokens"],
    )

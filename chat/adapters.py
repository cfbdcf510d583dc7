from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx


ANTHROPIC_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class UpstreamResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def text_from_blocks(content: Any, separator: str = "") -> str:
    if isinstance(content, str):
        return content
    if not isinstance(content, list):
        return ""
    texts: List[str] = [
        block.get("text", "")
        for block in content
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    return separator.join(t for t in texts if isinstance(t, str))


class AnthropicChatAdapter:
    def __init__(
        self,
        api_key: str,
        base_url: str = ANTHROPIC_BASE_URL,
        version: str = ANTHROPIC_VERSION,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.version = version
        self.timeout = timeout
        self.transport = transport

    async def create_message(self, payload: Dict[str, Any]) -> UpstreamResponse:
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.version,
        }

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            r = await client.post(f"{self.base_url}/messages", json=payload, headers=headers)

        try:
            body = r.json()
        except ValueError:
            body = {"error": r.text}

        return UpstreamResponse(status_code=r.status_code, body=body)

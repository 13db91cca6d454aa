"""Short generated facts about a country.

The provider never raises: any failure ends up as a fixed fallback sentence.
"""
from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx

from config import settings
from .config import FACT_FALLBACK_TEXT, FACT_PENDING_TEXT, FACT_PROMPT

logger = logging.getLogger(__name__)

# country name -> fact text
FactSource = Callable[[str], Awaitable[str]]


def _extract_text(payload: Dict[str, Any]) -> str:
    candidates = payload.get("candidates") or []
    if not candidates:
        return ""
    parts = (candidates[0].get("content") or {}).get("parts") or []
    return "".join(p.get("text", "") for p in parts).strip()


class GeminiFactProvider:
    """Asks the Gemini ``generateContent`` endpoint for one fact per call."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.api_base = (api_base or settings.GEMINI_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.FACT_TIMEOUT
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"

    async def _request(self, country_name: str) -> str:
        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY is not set")
        body = {
            "contents": [{"parts": [{"text": FACT_PROMPT.format(name=country_name)}]}],
            "generationConfig": {"temperature": settings.FACT_TEMPERATURE},
        }
        headers = {"x-goog-api-key": self.api_key}
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            r = await client.post(self.url, json=body, headers=headers)
            r.raise_for_status()
            return _extract_text(r.json())

    async def __call__(self, country_name: str) -> str:
        try:
            text = await self._request(country_name)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Fact lookup for %s failed: %s", country_name, exc)
            return FACT_FALLBACK_TEXT
        return text or FACT_PENDING_TEXT


_default_provider: Optional[GeminiFactProvider] = None


async def get_country_fact(country_name: str) -> str:
    global _default_provider
    if _default_provider is None:
        _default_provider = GeminiFactProvider()
    return await _default_provider(country_name)

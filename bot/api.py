import asyncio
import math
from typing import Dict, Any, Optional

import httpx

from config import settings
from backend.config import FACT_FALLBACK_TEXT

# как часто спрашивать backend, готов ли факт о стране
FACT_POLL_DELAY = 0.5
# запас сверх таймаута провайдера фактов
FACT_POLL_MARGIN = 5.0


def fact_poll_attempts(timeout: Optional[float] = None, delay: float = FACT_POLL_DELAY) -> int:
    """Enough polls to outlast the fact provider's own timeout."""
    timeout = settings.FACT_TIMEOUT if timeout is None else timeout
    return max(1, math.ceil((timeout + FACT_POLL_MARGIN) / delay))


def build_url(path: str) -> str:
    if path.startswith("http://") or path.startswith("https://"):
        return path
    return settings.API_BASE.rstrip("/") + "/" + path.lstrip("/")


def _headers() -> Dict[str, str]:
    headers = {}
    if settings.API_TOKEN:
        headers["Authorization"] = f"Bearer {settings.API_TOKEN}"
    return headers


async def api_get(path: str) -> Dict[str, Any]:
    async with httpx.AsyncClient(timeout=20.0) as client:
        r = await client.get(build_url(path), headers=_headers())
        r.raise_for_status()
        return r.json()


async def api_post(path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    async with httpx.AsyncClient(timeout=20.0) as client:
        r = await client.post(build_url(path), json=payload or {}, headers=_headers())
        r.raise_for_status()
        return r.json()


async def wait_for_fact(session_id: str, attempts: Optional[int] = None) -> str:
    attempts = fact_poll_attempts() if attempts is None else attempts
    for _ in range(attempts):
        q = await api_get(f"/quiz/question/{session_id}")
        if not q.get("fact_loading"):
            return q.get("fact") or FACT_FALLBACK_TEXT
        await asyncio.sleep(FACT_POLL_DELAY)
    return FACT_FALLBACK_TEXT

import asyncio
import json

import httpx

from backend.config import FACT_FALLBACK_TEXT, FACT_PENDING_TEXT
from backend.facts import GeminiFactProvider


def _provider(handler, api_key="test-key"):
    return GeminiFactProvider(
        api_key=api_key,
        model="test-model",
        api_base="https://gemini.test/v1beta",
        transport=httpx.MockTransport(handler),
    )


def _ok(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_returns_generated_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=_ok("  Egypt has pyramids.  "))

    text = asyncio.run(_provider(handler)("مصر"))

    assert text == "Egypt has pyramids."
    assert seen["url"] == "https://gemini.test/v1beta/models/test-model:generateContent"
    assert seen["key"] == "test-key"
    assert "مصر" in seen["body"]["contents"][0]["parts"][0]["text"]
    assert seen["body"]["generationConfig"]["temperature"] == 0.7


def test_http_error_falls_back():
    def handler(request):
        return httpx.Response(500, json={"error": "boom"})

    assert asyncio.run(_provider(handler)("مصر")) == FACT_FALLBACK_TEXT


def test_network_error_falls_back():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    assert asyncio.run(_provider(handler)("مصر")) == FACT_FALLBACK_TEXT


def test_missing_key_falls_back_without_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=_ok("never"))

    assert asyncio.run(_provider(handler, api_key="")("مصر")) == FACT_FALLBACK_TEXT
    assert calls == []


def test_empty_text_uses_pending_message():
    def handler(request):
        return httpx.Response(200, json={"candidates": []})

    assert asyncio.run(_provider(handler)("مصر")) == FACT_PENDING_TEXT


def test_malformed_payload_falls_back():
    def handler(request):
        return httpx.Response(200, content=b"not json")

    assert asyncio.run(_provider(handler)("مصر")) == FACT_FALLBACK_TEXT

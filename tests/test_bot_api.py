import asyncio

from bot import api
from backend.config import FACT_FALLBACK_TEXT
from config import settings


def _fake_api(responses, calls):
    async def fake_get(path):
        calls.append(path)
        return responses.pop(0) if responses else {"fact_loading": True}
    return fake_get


async def _no_sleep(delay):
    return None


def test_poll_budget_outlasts_provider_timeout():
    attempts = api.fact_poll_attempts()
    assert attempts * api.FACT_POLL_DELAY > settings.FACT_TIMEOUT
    assert api.fact_poll_attempts(timeout=15.0, delay=0.5) == 40


def test_wait_for_fact_returns_fact_once_loaded(monkeypatch):
    calls = []
    responses = [{"fact_loading": True}, {"fact_loading": True}, {"fact_loading": False, "fact": "Fun"}]
    monkeypatch.setattr(api, "api_get", _fake_api(responses, calls))
    monkeypatch.setattr(api.asyncio, "sleep", _no_sleep)

    assert asyncio.run(api.wait_for_fact("sid")) == "Fun"
    assert calls == ["/quiz/question/sid"] * 3


def test_wait_for_fact_falls_back_when_budget_runs_out(monkeypatch):
    calls = []
    monkeypatch.setattr(api, "api_get", _fake_api([], calls))
    monkeypatch.setattr(api.asyncio, "sleep", _no_sleep)

    assert asyncio.run(api.wait_for_fact("sid", attempts=3)) == FACT_FALLBACK_TEXT
    assert len(calls) == 3


def test_wait_for_fact_falls_back_when_round_moved_on(monkeypatch):
    # fact cleared because the player already advanced
    monkeypatch.setattr(api, "api_get", _fake_api([{"fact_loading": False, "fact": None}], []))
    monkeypatch.setattr(api.asyncio, "sleep", _no_sleep)

    assert asyncio.run(api.wait_for_fact("sid")) == FACT_FALLBACK_TEXT

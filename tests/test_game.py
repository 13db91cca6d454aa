import asyncio
import random

import pytest

from backend.config import RANK_BEGINNER, RANK_EXPERT, RANK_EXPLORER, RANK_GENIUS
from backend.game import GameSession, rank_for
from backend.schemas import Country, GameMode, Phase


CATALOG = [
    Country(name=n, capital=f"{n}-city", area=a, code=n[:2].lower())
    for n, a in [("Aland", 10), ("Borduria", 20), ("Carpania", 30), ("Dorne", 40), ("Elbonia", 50)]
]


class FakeFacts:
    def __init__(self, text="A fact.", delay=0.0):
        self.text = text
        self.delay = delay
        self.calls = []

    async def __call__(self, name):
        self.calls.append(name)
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.text


def _session(facts=None):
    return GameSession(fact_source=facts or FakeFacts(), catalog=CATALOG, rng=random.Random(11))


def _wrong(session):
    q = session.current_question
    return next(o for o in q.options if o != q.correct_answer)


def test_starts_in_setup():
    s = _session()
    assert s.phase is Phase.SETUP
    assert s.current_question is None


def test_start_game_resets_state():
    s = _session()
    assert s.start_game(3, GameMode.CAPITALS)
    assert s.phase is Phase.IN_PROGRESS
    assert s.state.score == 0
    assert s.state.current_index == 0
    assert s.state.total_questions == 3
    assert s.state.mode is GameMode.CAPITALS
    assert not s.round.is_answered
    assert s.current_question.id == 0


def test_start_game_ignored_while_playing():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    first = s.questions
    assert not s.start_game(5, GameMode.AREA)
    assert s.questions is first


def test_total_is_truncated_to_catalog():
    s = _session()
    s.start_game(10, GameMode.FLAGS)
    assert s.state.total_questions == 5


def test_setup_selections_are_used_by_start():
    s = _session()
    assert s.select_mode("AREA")
    assert s.select_question_count(2)
    s.start_game()
    assert s.state.mode is GameMode.AREA
    assert len(s.questions) == 2
    assert not s.select_mode(GameMode.FLAGS)


def test_correct_answer_scores_and_fetches_fact():
    facts = FakeFacts(text="Fun fact")
    s = _session(facts)
    s.start_game(3, GameMode.FLAGS)
    q = s.current_question

    result = asyncio.run(s.answer(q.correct_answer))

    assert result.accepted and result.correct
    assert s.state.score == 1
    assert facts.calls == [q.country.name]
    assert s.round.fact == "Fun fact"
    assert not s.round.fact_loading


def test_wrong_answer_makes_no_fact_call():
    facts = FakeFacts()
    s = _session(facts)
    s.start_game(3, GameMode.CAPITALS)
    result = asyncio.run(s.answer(_wrong(s)))
    assert result.accepted and not result.correct
    assert s.state.score == 0
    assert facts.calls == []
    assert s.round.fact is None
    assert not s.round.fact_loading


def test_second_submission_is_ignored():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    q = s.current_question
    wrong = _wrong(s)
    s.submit_answer(q.correct_answer)
    again = s.submit_answer(wrong)
    assert not again.accepted
    assert s.state.score == 1
    assert s.round.selected_answer == q.correct_answer


def test_fact_loading_is_set_until_resolved():
    facts = FakeFacts(text="Slow fact", delay=0.01)
    s = _session(facts)
    s.start_game(2, GameMode.AREA)

    async def scenario():
        result = s.submit_answer(s.current_question.correct_answer)
        assert s.round.fact_loading
        assert s.round.fact is None
        await s.resolve_fact(result.fact_request)

    asyncio.run(scenario())
    assert s.round.fact == "Slow fact"
    assert not s.round.fact_loading


def test_stale_fact_after_advance_is_discarded():
    facts = FakeFacts(text="Late fact", delay=0.01)
    s = _session(facts)
    s.start_game(3, GameMode.FLAGS)

    async def scenario():
        result = s.submit_answer(s.current_question.correct_answer)
        pending = asyncio.ensure_future(s.resolve_fact(result.fact_request))
        await asyncio.sleep(0)
        s.advance()
        return await pending

    applied = asyncio.run(scenario())
    assert applied is False
    assert s.state.current_index == 1
    assert s.round.fact is None
    assert not s.round.fact_loading


def test_stale_fact_after_reset_is_discarded():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    request = s.submit_answer(s.current_question.correct_answer).fact_request
    s.reset()
    assert not s.apply_fact(request, "Late")
    assert s.round.fact is None


def test_advance_requires_an_answer():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    assert not s.advance()
    assert s.state.current_index == 0


def test_advance_clears_round_state():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    asyncio.run(s.answer(s.current_question.correct_answer))
    assert s.advance()
    assert s.state.current_index == 1
    assert s.round.selected_answer is None
    assert not s.round.is_answered
    assert s.round.fact is None


def test_advance_on_last_question_finishes():
    s = _session()
    s.start_game(2, GameMode.CAPITALS)
    for _ in range(2):
        asyncio.run(s.answer(s.current_question.correct_answer))
        s.advance()
    assert s.phase is Phase.FINISHED
    assert s.state.is_finished
    assert (s.state.score, s.state.current_index) == (2, 1)

    assert not s.advance()
    assert s.submit_answer("anything").accepted is False
    assert (s.state.score, s.state.current_index) == (2, 1)


def test_new_game_after_finish():
    s = _session()
    s.start_game(1, GameMode.FLAGS)
    s.submit_answer(_wrong(s))
    s.advance()
    assert s.start_game(2, GameMode.AREA)
    assert s.phase is Phase.IN_PROGRESS
    assert s.state.total_questions == 2


def test_reset_returns_to_setup():
    s = _session()
    s.start_game(3, GameMode.FLAGS)
    asyncio.run(s.answer(s.current_question.correct_answer))
    s.reset()
    assert s.phase is Phase.SETUP
    assert s.questions == []
    assert (s.state.score, s.state.current_index, s.state.is_finished) == (0, 0, False)


@pytest.mark.parametrize(
    "score,total,expected",
    [
        (10, 10, RANK_GENIUS),
        (8, 10, RANK_EXPERT),
        (9, 10, RANK_EXPERT),
        (5, 10, RANK_EXPLORER),
        (7, 10, RANK_EXPLORER),
        (4, 10, RANK_BEGINNER),
        (0, 5, RANK_BEGINNER),
    ],
)
def test_rank_thresholds(score, total, expected):
    assert rank_for(score, total) == expected


def test_session_rank_and_percentage():
    s = _session()
    s.start_game(4, GameMode.FLAGS)
    for _ in range(4):
        asyncio.run(s.answer(s.current_question.correct_answer))
        s.advance()
    assert s.percentage == 100
    assert s.rank == RANK_GENIUS

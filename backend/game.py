"""Play-session state machine.

SETUP -> IN_PROGRESS (unanswered <-> answered per question) -> FINISHED.
Calls that do not fit the current state are ignored instead of raising, so
duplicate clicks and late events from a client cannot break a session.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from config import settings
from .config import RANK_BEGINNER, RANK_EXPERT, RANK_EXPLORER, RANK_GENIUS
from .facts import FactSource, get_country_fact
from .generator import generate_questions
from .schemas import Country, GameMode, Phase, Question, RoundState, SessionState

logger = logging.getLogger(__name__)


def rank_for(score: int, total: int) -> str:
    """Rank label for a final score; thresholds are inclusive."""
    percentage = score / total * 100 if total else 0.0
    if percentage == 100:
        return RANK_GENIUS
    if percentage >= 80:
        return RANK_EXPERT
    if percentage >= 50:
        return RANK_EXPLORER
    return RANK_BEGINNER


@dataclass(frozen=True)
class FactRequest:
    token: int
    question_id: int
    country_name: str


@dataclass(frozen=True)
class AnswerResult:
    accepted: bool
    correct: bool = False
    fact_request: Optional[FactRequest] = None


class GameSession:
    """One player's game: the question list plus score and per-round state."""

    def __init__(
        self,
        fact_source: FactSource = get_country_fact,
        catalog: Optional[Sequence[Country]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.fact_source = fact_source
        self.catalog = catalog
        self.rng = rng
        self.state = SessionState(
            mode=GameMode(settings.DEFAULT_MODE),
            total_questions=settings.N_QUESTIONS,
        )
        self.round = RoundState()
        self.questions: List[Question] = []
        self.answers: Dict[int, bool] = {}
        self._playing = False
        # bumped whenever the current round ends, so late facts can be recognised
        self._token = 0

    # === queries ===

    @property
    def phase(self) -> Phase:
        if not self._playing:
            return Phase.SETUP
        if self.state.is_finished:
            return Phase.FINISHED
        return Phase.IN_PROGRESS

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase is not Phase.IN_PROGRESS:
            return None
        return self.questions[self.state.current_index]

    @property
    def percentage(self) -> float:
        if not self.state.total_questions:
            return 0.0
        return self.state.score / self.state.total_questions * 100

    @property
    def progress(self) -> float:
        if not self.state.total_questions:
            return 0.0
        return (self.state.current_index + 1) / self.state.total_questions

    @property
    def rank(self) -> str:
        return rank_for(self.state.score, self.state.total_questions)

    # === setup screen ===

    def select_mode(self, mode: GameMode | str) -> bool:
        if self.phase is not Phase.SETUP:
            return False
        self.state.mode = GameMode(mode)
        return True

    def select_question_count(self, count: int) -> bool:
        if self.phase is not Phase.SETUP or count <= 0:
            return False
        self.state.total_questions = count
        return True

    # === transitions ===

    def start_game(self, count: Optional[int] = None, mode: GameMode | str | None = None) -> bool:
        if self.phase is Phase.IN_PROGRESS:
            return False
        count = self.state.total_questions if count is None else count
        mode = self.state.mode if mode is None else GameMode(mode)
        questions = generate_questions(count, mode, catalog=self.catalog, rng=self.rng)
        if len(questions) < count:
            logger.info("Requested %d questions, catalog only has %d", count, len(questions))

        self.questions = questions
        self.answers = {}
        self.state = SessionState(
            score=0,
            current_index=0,
            total_questions=len(questions),
            is_finished=False,
            mode=mode,
        )
        self._new_round()
        self._playing = True
        logger.info("Game started: mode=%s questions=%d", mode.value, len(questions))
        return True

    def submit_answer(self, value: str) -> AnswerResult:
        question = self.current_question
        if question is None or self.round.is_answered:
            return AnswerResult(accepted=False)

        self.round.selected_answer = value
        self.round.is_answered = True
        correct = value == question.correct_answer
        self.answers[question.id] = correct
        if not correct:
            return AnswerResult(accepted=True, correct=False)

        self.state.score += 1
        self.round.fact_loading = True
        request = FactRequest(
            token=self._token,
            question_id=question.id,
            country_name=question.country.name,
        )
        return AnswerResult(accepted=True, correct=True, fact_request=request)

    def apply_fact(self, request: FactRequest, text: str) -> bool:
        """Store a resolved fact unless the round it was asked for is over."""
        if request.token != self._token or request.question_id != self.state.current_index:
            logger.debug("Discarding stale fact for question %d", request.question_id)
            return False
        self.round.fact = text
        self.round.fact_loading = False
        return True

    async def resolve_fact(self, request: FactRequest) -> bool:
        text = await self.fact_source(request.country_name)
        return self.apply_fact(request, text)

    async def answer(self, value: str) -> AnswerResult:
        """Submit an answer and wait for the fact lookup it triggers, if any."""
        result = self.submit_answer(value)
        if result.fact_request is not None:
            await self.resolve_fact(result.fact_request)
        return result

    def advance(self) -> bool:
        if self.phase is not Phase.IN_PROGRESS or not self.round.is_answered:
            return False
        if self.state.current_index + 1 < self.state.total_questions:
            self.state.current_index += 1
            self._new_round()
        else:
            self.state.is_finished = True
            self._token += 1
            self.round.fact_loading = False
            logger.info(
                "Game finished: score=%d/%d", self.state.score, self.state.total_questions
            )
        return True

    def reset(self) -> None:
        self._playing = False
        self.questions = []
        self.answers = {}
        self.state.is_finished = False
        self.state.current_index = 0
        self.state.score = 0
        self._new_round()

    def _new_round(self) -> None:
        self._token += 1
        self.round = RoundState()

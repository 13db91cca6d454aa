from __future__ import annotations
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from typing import Dict
from uuid import uuid4, UUID
import logging

from ...facts import FactSource, get_country_fact
from ...game import GameSession
from ...schemas import (
    AnswerIn,
    AnswerOut,
    QuestionOut,
    StartQuizIn,
    StartQuizOut,
    StateOut,
    SummaryOut,
)

router = APIRouter()
logger = logging.getLogger(__name__)

# Session storage is module-local
SESSIONS: Dict[UUID, GameSession] = {}


def get_fact_source() -> FactSource:
    return get_country_fact


def _get_session_or_404(sid: UUID) -> GameSession:
    s = SESSIONS.get(sid)
    if not s:
        raise HTTPException(404, "Session not found")
    return s


def _state_out(sid: UUID, session: GameSession) -> StateOut:
    st = session.state
    return StateOut(
        session_id=sid,
        phase=session.phase,
        mode=st.mode,
        score=st.score,
        index=st.current_index,
        total=st.total_questions,
        finished=st.is_finished,
        answered=session.round.is_answered,
    )


@router.post("/quiz/start", response_model=StartQuizOut)
async def start_quiz(payload: StartQuizIn, fact_source: FactSource = Depends(get_fact_source)):
    # a known session in SETUP or FINISHED is replayed instead of creating a new one
    if payload.session_id is not None:
        sid = payload.session_id
        session = _get_session_or_404(sid)
    else:
        sid = uuid4()
        session = GameSession(fact_source=fact_source)
    try:
        started = session.start_game(payload.n_questions, payload.mode)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    if not started:
        raise HTTPException(409, "Game already in progress")

    SESSIONS[sid] = session
    logger.info("Session %s started for user %s", sid, payload.user_id)
    return StartQuizOut(
        session_id=sid,
        total=session.state.total_questions,
        mode=session.state.mode,
        first_question_id=session.questions[0].id,
    )


@router.get("/quiz/question/{session_id}", response_model=QuestionOut)
async def get_question(session_id: UUID):
    session = _get_session_or_404(session_id)
    q = session.current_question
    if q is None:
        raise HTTPException(400, "No question in progress")
    rnd = session.round
    return QuestionOut(
        session_id=session_id,
        index=session.state.current_index,
        total=session.state.total_questions,
        question_id=q.id,
        mode=q.mode,
        prompt_text=q.prompt_text,
        image_url=q.image,
        options=q.options,
        score=session.state.score,
        progress=session.progress,
        answered=rnd.is_answered,
        selected_answer=rnd.selected_answer,
        correct_answer=q.correct_answer if rnd.is_answered else None,
        fact=rnd.fact,
        fact_loading=rnd.fact_loading,
        finished=session.state.is_finished,
    )


@router.post("/quiz/answer", response_model=AnswerOut)
async def submit_answer(payload: AnswerIn, background_tasks: BackgroundTasks):
    session = _get_session_or_404(payload.session_id)
    q = session.current_question
    if q is None:
        raise HTTPException(400, "No question in progress")

    # answers for another question are stale clicks: ignore them
    if q.id == payload.question_id:
        result = session.submit_answer(payload.answer)
    else:
        result = None
    if result is not None and result.fact_request is not None:
        background_tasks.add_task(session.resolve_fact, result.fact_request)

    return AnswerOut(
        accepted=bool(result and result.accepted),
        correct=session.answers.get(q.id, False),
        correct_answer=q.correct_answer,
        country=q.country.name,
        score=session.state.score,
        index=session.state.current_index,
        total=session.state.total_questions,
        fact_loading=session.round.fact_loading,
    )


@router.post("/quiz/next/{session_id}", response_model=StateOut)
async def next_question(session_id: UUID):
    session = _get_session_or_404(session_id)
    session.advance()
    return _state_out(session_id, session)


@router.post("/quiz/reset/{session_id}", response_model=StateOut)
async def reset_quiz(session_id: UUID):
    session = _get_session_or_404(session_id)
    session.reset()
    return _state_out(session_id, session)


@router.get("/quiz/state/{session_id}", response_model=StateOut)
async def get_state(session_id: UUID):
    return _state_out(session_id, _get_session_or_404(session_id))


@router.get("/quiz/summary/{session_id}", response_model=SummaryOut)
async def summary(session_id: UUID):
    session = _get_session_or_404(session_id)
    return SummaryOut(
        session_id=session_id,
        score=session.state.score,
        total=session.state.total_questions,
        percentage=session.percentage,
        rank=session.rank,
        finished=session.state.is_finished,
        details=[
            {
                "question_id": str(q.id),
                "country": q.country.name,
                "result": "correct" if session.answers.get(q.id) else "wrong",
            }
            for q in session.questions
        ],
    )

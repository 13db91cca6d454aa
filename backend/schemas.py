from __future__ import annotations
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Dict, Optional
from uuid import UUID

from config import settings


class GameMode(str, Enum):
    FLAGS = "FLAGS"
    CAPITALS = "CAPITALS"
    AREA = "AREA"


class Phase(str, Enum):
    SETUP = "SETUP"
    IN_PROGRESS = "IN_PROGRESS"
    FINISHED = "FINISHED"


class Country(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    capital: str
    area: float = Field(gt=0)  # км²
    flag: str = ""  # эмодзи флага
    code: str


class Question(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    mode: GameMode
    prompt_text: str
    correct_answer: str
    options: List[str]
    country: Country
    image: Optional[str] = None  # ссылка на флаг, только для FLAGS


class SessionState(BaseModel):
    score: int = 0
    current_index: int = 0
    total_questions: int = 0
    is_finished: bool = False
    mode: GameMode = GameMode.FLAGS


class RoundState(BaseModel):
    """Per-question data, cleared every time a new question begins."""
    selected_answer: Optional[str] = None
    is_answered: bool = False
    fact: Optional[str] = None
    fact_loading: bool = False


# === HTTP bodies ===

class ModeOut(BaseModel):
    slug: str
    title: str
    icon: Optional[str] = None


class ModulesOut(BaseModel):
    modes: List[ModeOut]
    question_counts: List[int]


class StartQuizIn(BaseModel):
    user_id: str = "anonymous"
    # replay an existing session instead of opening a new one
    session_id: Optional[UUID] = None
    # Default number of questions may be set via env N_QUESTIONS
    n_questions: int = Field(default=settings.N_QUESTIONS, ge=1)
    mode: GameMode = GameMode(settings.DEFAULT_MODE)


class StartQuizOut(BaseModel):
    session_id: UUID
    total: int
    mode: GameMode
    first_question_id: int


class QuestionOut(BaseModel):
    session_id: UUID
    index: int
    total: int
    question_id: int
    mode: GameMode
    prompt_text: str
    image_url: Optional[str] = None
    options: List[str]
    score: int
    progress: float
    answered: bool
    selected_answer: Optional[str] = None
    correct_answer: Optional[str] = None  # раскрывается только после ответа
    fact: Optional[str] = None
    fact_loading: bool = False
    finished: bool = False


class AnswerIn(BaseModel):
    session_id: UUID
    question_id: int
    answer: str


class AnswerOut(BaseModel):
    accepted: bool
    correct: bool
    correct_answer: str
    country: str
    score: int
    index: int
    total: int
    fact_loading: bool


class StateOut(BaseModel):
    session_id: UUID
    phase: Phase
    mode: GameMode
    score: int
    index: int
    total: int
    finished: bool
    answered: bool


class SummaryOut(BaseModel):
    session_id: UUID
    score: int
    total: int
    percentage: float
    rank: str
    finished: bool
    details: List[Dict[str, str]]  # {question_id, country, result}

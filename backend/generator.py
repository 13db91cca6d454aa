"""Question generation for the three game modes.

Every generated question has exactly four distinct options, one of which is
the correct answer. Subject countries are drawn without replacement, so no
country is asked about twice in one game.
"""
from __future__ import annotations

import random
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from .catalog import flag_url, get_catalog
from .config import AREA_PROMPT, CAPITAL_PROMPT, FLAG_PROMPT
from .schemas import Country, GameMode, Question

OPTIONS_PER_QUESTION = 4
DISTRACTORS = OPTIONS_PER_QUESTION - 1


def _distinct(values: Iterable[str], exclude: str) -> List[str]:
    """Unique values in first-seen order, without `exclude`."""
    seen = {exclude}
    out: List[str] = []
    for v in values:
        if v not in seen:
            seen.add(v)
            out.append(v)
    return out


def _with_distractors(correct: str, candidates: List[str], rng: random.Random) -> List[str]:
    if len(candidates) < DISTRACTORS:
        raise ValueError(
            f"Need at least {DISTRACTORS} distinct distractors for '{correct}', got {len(candidates)}"
        )
    options = [correct] + rng.sample(candidates, DISTRACTORS)
    rng.shuffle(options)
    return options


def _flag_question(qid: int, country: Country, catalog: Sequence[Country], rng: random.Random) -> Question:
    names = _distinct((c.name for c in catalog), exclude=country.name)
    return Question(
        id=qid,
        mode=GameMode.FLAGS,
        prompt_text=FLAG_PROMPT,
        correct_answer=country.name,
        options=_with_distractors(country.name, names, rng),
        country=country,
        image=flag_url(country.code),
    )


def _capital_question(qid: int, country: Country, catalog: Sequence[Country], rng: random.Random) -> Question:
    # dedupe by value: two countries may share a capital string
    capitals = _distinct(
        (c.capital for c in catalog if c.name != country.name), exclude=country.capital
    )
    return Question(
        id=qid,
        mode=GameMode.CAPITALS,
        prompt_text=CAPITAL_PROMPT.format(name=country.name),
        correct_answer=country.capital,
        options=_with_distractors(country.capital, capitals, rng),
        country=country,
    )


def _area_question(qid: int, country: Country, catalog: Sequence[Country], rng: random.Random) -> Question:
    others = [c for c in catalog if c.name != country.name]
    pool = [country] + rng.sample(others, DISTRACTORS)
    # ties on area go to whichever country comes first in the catalog
    order = {c.name: i for i, c in enumerate(catalog)}
    largest = min(pool, key=lambda c: (-c.area, order[c.name]))
    options = [c.name for c in pool]
    rng.shuffle(options)
    return Question(
        id=qid,
        mode=GameMode.AREA,
        prompt_text=AREA_PROMPT,
        correct_answer=largest.name,
        options=options,
        country=country,
    )


_BUILDERS: Dict[GameMode, Callable[[int, Country, Sequence[Country], random.Random], Question]] = {
    GameMode.FLAGS: _flag_question,
    GameMode.CAPITALS: _capital_question,
    GameMode.AREA: _area_question,
}


def generate_questions(
    count: int,
    mode: GameMode | str,
    catalog: Optional[Sequence[Country]] = None,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """Build `min(count, len(catalog))` questions for `mode`.

    Args:
        count: Requested number of questions, must be positive.
        mode: Game mode (enum member or its name).
        catalog: Countries to draw from. Defaults to the bundled catalog.
        rng: Random source, pass a seeded ``random.Random`` for reproducible games.

    Returns:
        Questions with ids 0..n-1; list order is play order.

    Raises:
        ValueError: on a non-positive count, an unknown mode, or a catalog too
            small to fill four options.
    """
    if count <= 0:
        raise ValueError(f"count must be positive, got {count}")
    catalog = list(get_catalog() if catalog is None else catalog)
    if not catalog:
        raise ValueError("Country catalog is empty")
    if len(catalog) < OPTIONS_PER_QUESTION:
        raise ValueError(
            f"Country catalog needs at least {OPTIONS_PER_QUESTION} countries, got {len(catalog)}"
        )
    build = _BUILDERS[GameMode(mode)]
    rng = rng or random.Random()

    subjects = list(catalog)
    rng.shuffle(subjects)
    return [build(qid, country, catalog, rng) for qid, country in enumerate(subjects[:count])]

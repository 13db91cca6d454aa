"""Country catalog: the fixed set of countries the quiz is built from."""
from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence

from config import settings
from .schemas import Country

logger = logging.getLogger(__name__)


def parse_catalog(items: Sequence[dict]) -> List[Country]:
    countries: List[Country] = []
    seen: set = set()
    for it in items:
        country = Country(**it)
        if country.name in seen:
            raise ValueError(f"Duplicate country name in catalog: {country.name}")
        seen.add(country.name)
        countries.append(country)
    return countries


def load_catalog(path: Optional[Path] = None) -> List[Country]:
    path = Path(path or settings.COUNTRIES_FILE)
    with path.open(encoding="utf-8") as f:
        raw = json.load(f)
    # Support both a bare list and {"countries": [...]}
    items = raw.get("countries", []) if isinstance(raw, dict) else raw
    countries = parse_catalog(items)
    logger.info("Loaded %d countries from %s", len(countries), path)
    return countries


@lru_cache()
def get_catalog() -> tuple[Country, ...]:
    return tuple(load_catalog())


def flag_url(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return f"{settings.FLAG_CDN_BASE.rstrip('/')}/{code.lower()}.png"

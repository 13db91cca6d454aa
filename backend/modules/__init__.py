from __future__ import annotations
from typing import Any, Dict, List


def get_router_for(slug: str):
    """Return an APIRouter for given module slug.
    Currently supports 'countries'. Extend by adding new modules package.
    """
    if slug == "countries":
        # Local import to avoid importing heavy dependencies at package import time
        from .countries.router import router as countries_router
        return countries_router
    raise ValueError(f"Unknown module slug: {slug}")


def list_modes(order: List[str], meta: Dict[str, Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Return ordered list of game mode metadata for the setup screen."""
    items: List[Dict[str, Any]] = []
    for slug in order:
        m = dict(meta.get(slug, {}))
        m.setdefault("slug", slug)
        m.setdefault("title", slug)
        items.append(m)
    return items

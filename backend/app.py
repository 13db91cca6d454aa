from __future__ import annotations
from fastapi import FastAPI
import logging

from config import settings

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="Countries Quiz API")

from .config import MODES_ORDER, MODES_META, QUESTION_COUNTS
from .modules import get_router_for, list_modes
from .schemas import ModulesOut

# Modules served by this API
MODULES = ["countries"]


@app.get("/health")
def health():
    return {"ok": True}


@app.get("/modules", response_model=ModulesOut)
def list_available_modes():
    return {
        "modes": list_modes(MODES_ORDER, MODES_META),
        "question_counts": QUESTION_COUNTS,
    }


for slug in MODULES:
    app.include_router(get_router_for(slug))
    logger.debug("Included module %s", slug)

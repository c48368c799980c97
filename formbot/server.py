"""
HTTP answer API for browser extensions and other form drivers.

The driver sends the question text it found on the page and gets back the
answer to type or select. Nobody can be prompted from here, so questions
without a rule or stored answer come back as UNAVAILABLE.

Run: uvicorn formbot.server:app --port 3000
Config is read from $FORMBOT_CONFIG (default: config.yaml, optional).
"""

from __future__ import annotations

import os
import threading
from typing import Dict, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from formbot.errors import InvalidProfileConfig
from formbot.models import AppConfig, Category, ResolveStatus
from formbot.services.engine import AnswerEngine
from formbot.services.prompt import UnavailablePrompter
from formbot.utils.logger import setup_logger
from formbot.utils.options import best_option_match

app = FastAPI(title="formbot answer API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


_engine: Optional[AnswerEngine] = None
_engine_lock = threading.Lock()


def _build_engine() -> AnswerEngine:
    config = AppConfig.load(os.environ.get("FORMBOT_CONFIG", "config.yaml"), missing_ok=True)
    logger = setup_logger(config.log_file)
    return AnswerEngine.from_config(config, prompter=UnavailablePrompter(), logger=logger)


def get_engine() -> AnswerEngine:
    """Engine shared by all requests, built once even when the first requests race."""
    global _engine
    if _engine is None:
        with _engine_lock:
            if _engine is None:
                _engine = _build_engine()
    return _engine


# ── Request / Response models ──


class AnswerRequest(BaseModel):
    category: Category
    question: str
    options: Optional[list[str]] = None
    profile: Optional[str] = None


class AnswerResponse(BaseModel):
    status: ResolveStatus
    value: Optional[str] = None
    source: str = "none"
    score: Optional[float] = None


class LearnRequest(BaseModel):
    category: Category
    question: str
    answer: str


# ── Endpoints ──


@app.post("/api/answer", response_model=AnswerResponse)
def answer_question(req: AnswerRequest, engine: AnswerEngine = Depends(get_engine)):
    """Resolve one form question; map the answer onto the offered options."""
    profile = None
    if req.profile:
        try:
            profile = engine.profiles[req.profile]
        except KeyError:
            raise HTTPException(status_code=404, detail=f"Unknown profile: {req.profile}")

    resolution = engine.resolve_answer(req.category, req.question, profile=profile)
    value = resolution.value
    if resolution.resolved and req.options:
        value = best_option_match(value, req.options)
        if value is None:
            return AnswerResponse(status=ResolveStatus.UNAVAILABLE, source=resolution.source)

    return AnswerResponse(
        status=resolution.status,
        value=value,
        source=resolution.source,
        score=resolution.score,
    )


@app.post("/api/learn", response_model=AnswerResponse)
def learn_answer(req: LearnRequest, engine: AnswerEngine = Depends(get_engine)):
    """Store the answer a human gave for a question the engine could not resolve."""
    try:
        resolution = engine.learn(req.category, req.question, req.answer)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return AnswerResponse(status=resolution.status, value=resolution.value, source=resolution.source)


@app.get("/api/stores")
def store_sizes(engine: AnswerEngine = Depends(get_engine)) -> Dict[str, int]:
    return engine.stats()


@app.exception_handler(InvalidProfileConfig)
async def invalid_profiles(_request, exc: InvalidProfileConfig):
    return JSONResponse(status_code=500, content={"detail": str(exc)})

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Category(str, Enum):
    NUMERIC = "numeric"
    BINARY = "binary"
    DROPDOWN = "dropdown"


class ResolveStatus(str, Enum):
    MATCHED = "MATCHED"
    LEARNED = "LEARNED"
    UNAVAILABLE = "UNAVAILABLE"


class Resolution(BaseModel):
    """Outcome of resolving one form question."""

    category: Category
    question: str
    status: ResolveStatus
    value: Optional[str] = None
    source: str = Field("none", description="exact, similar, rule, profile, default, prompt or none")
    matched_question: Optional[str] = None
    score: Optional[float] = None
    rule: Optional[str] = None

    @property
    def resolved(self) -> bool:
        return self.status is not ResolveStatus.UNAVAILABLE

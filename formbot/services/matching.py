"""Find the stored question closest to a new one.

Stored questions that mention a technology keyword are searched first; when
the new question mentions one too, their scores are boosted so that a
"years with Kubernetes" question prefers another Kubernetes question over a
generic one. Only when no keyword-bearing question scores at all are the
remaining questions searched.

Stored questions whose answer is empty count as unanswered and are skipped.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol, Sequence, Tuple

from formbot.models.config import CategoryConfig, MatchingConfig
from formbot.utils.similarity import contains_keyword, score as tfidf_score

Scorer = Callable[[str, str], float]


class QuestionLookup(Protocol):
    def get(self, question: str) -> Optional[str]:
        ...

    def __contains__(self, question: object) -> bool:
        ...

    def __iter__(self):
        ...


@dataclass(frozen=True)
class Match:
    question: str
    answer: str
    score: float
    exact: bool = False


def _answered(answer: Optional[str]) -> bool:
    return bool(answer and answer.strip())


class MatchResolver:
    def __init__(
        self,
        threshold: float,
        keywords: Sequence[str] = (),
        keyword_boost: float = 1.2,
        scorer: Scorer = tfidf_score,
    ) -> None:
        self.threshold = threshold
        self.keywords = tuple(keywords)
        self.keyword_boost = keyword_boost
        self.scorer = scorer

    @classmethod
    def for_category(cls, category: CategoryConfig, matching: MatchingConfig) -> "MatchResolver":
        return cls(
            threshold=category.threshold,
            keywords=matching.keywords,
            keyword_boost=matching.keyword_boost,
        )

    def has_keyword(self, text: str) -> bool:
        return contains_keyword(text, self.keywords)

    def best_candidate(self, raw_question: str, store: QuestionLookup) -> Optional[Match]:
        """Highest-scoring stored question, ignoring the threshold."""
        if raw_question in store and _answered(store.get(raw_question)):
            return Match(raw_question, store.get(raw_question), 1.0, exact=True)

        keyword_keys: List[str] = []
        plain_keys: List[str] = []
        for key in store:
            if not _answered(store.get(key)):
                continue
            (keyword_keys if self.has_keyword(key) else plain_keys).append(key)

        boost = self.keyword_boost if self.has_keyword(raw_question) else 1.0
        best = self._maximize(raw_question, keyword_keys, boost)
        if best is None:
            best = self._maximize(raw_question, plain_keys, 1.0)
        if best is None:
            return None
        key, similarity = best
        return Match(key, store.get(key), similarity)

    def resolve(self, raw_question: str, store: QuestionLookup) -> Optional[Match]:
        """Stored answer for the closest question, or None below the threshold.

        A score equal to the threshold is accepted.
        """
        candidate = self.best_candidate(raw_question, store)
        if candidate is None:
            return None
        if candidate.exact or candidate.score >= self.threshold:
            return candidate
        return None

    def _maximize(self, question: str, keys: Iterable[str], boost: float) -> Optional[Tuple[str, float]]:
        best_key: Optional[str] = None
        best_score = 0.0
        for key in keys:
            similarity = self.scorer(question, key) * boost
            if similarity > best_score:
                best_key, best_score = key, similarity
        if best_key is None:
            return None
        return best_key, best_score

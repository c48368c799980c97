"""TF-IDF similarity between two questions, plus keyword detection.

The corpus is only ever the two questions being compared, so the IDF term
does one thing: terms shared by both documents are damped relative to terms
found in one. Stop words are dropped before counting. ``tf`` is the raw
count and ``idf = 1 + ln(N / (1 + df))``.
"""
from __future__ import annotations

import math
import re
from collections import Counter
from functools import lru_cache
from typing import Iterable, Optional, Pattern, Tuple

from .text import content_terms, normalize


def _idf(term: str, docs: Tuple[Counter, ...]) -> float:
    df = sum(1 for doc in docs if term in doc)
    return 1 + math.log(len(docs) / (1 + df))


def score(question_a: str, question_b: str) -> float:
    """Sum of tfidf(t, a) * tfidf(t, b) over the distinct terms of *a*."""
    doc_a = Counter(content_terms(normalize(question_a)))
    doc_b = Counter(content_terms(normalize(question_b)))
    docs = (doc_a, doc_b)

    similarity = 0.0
    for term, tf_a in doc_a.items():
        tf_b = doc_b.get(term, 0)
        if not tf_b:
            continue
        idf = _idf(term, docs)
        similarity += (tf_a * idf) * (tf_b * idf)
    return similarity


@lru_cache(maxsize=32)
def _compile(keywords: Tuple[str, ...]) -> Optional[Pattern[str]]:
    terms = sorted({k.strip().lower() for k in keywords if k and k.strip()}, key=len, reverse=True)
    if not terms:
        return None
    # Whole-term match: "c" must not hit every word containing a c,
    # and "java" must not hit "javascript".
    alternation = "|".join(re.escape(t) for t in terms)
    return re.compile(rf"(?<![\w+#])(?:{alternation})(?![\w+#])")


def keyword_pattern(keywords: Iterable[str]) -> Optional[Pattern[str]]:
    return _compile(tuple(keywords))


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    pattern = keyword_pattern(keywords)
    if pattern is None:
        return False
    return pattern.search((text or "").lower()) is not None

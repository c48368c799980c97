"""Question normalization: strip lead-in phrasing, tokenize, stem."""
from __future__ import annotations

import re
from functools import lru_cache
from typing import List

from nltk.stem import PorterStemmer

# Longest alternatives first so the regex strips as much as it can.
BOILERPLATE_PATTERNS: List[str] = [
    r"how many years of work experience do you have (?:with|in|using)",
    r"how many years of experience do you have (?:with|in|using)",
    r"how many years of work experience do you have",
    r"how many years of experience do you have",
    r"how many years of do you have with",
    r"how many years of do you have",
    r"do you have (?:any )?experience (?:with|in|using)",
]

_BOILERPLATE_RE = re.compile(r"^\s*(?:" + "|".join(BOILERPLATE_PATTERNS) + r")", re.IGNORECASE)
_TOKEN_RE = re.compile(r"\w+")
_stemmer = PorterStemmer()

# Filler words ignored when scoring similarity
STOP_WORDS = frozenset({
    "a", "about", "above", "after", "again", "all", "am", "an", "and", "any",
    "are", "as", "at", "be", "been", "before", "being", "below", "between",
    "both", "but", "by", "can", "could", "did", "do", "does", "doing", "down",
    "during", "each", "few", "for", "from", "further", "had", "has", "have",
    "having", "he", "her", "here", "hers", "him", "his", "how", "i", "if",
    "in", "into", "is", "it", "its", "me", "might", "more", "most", "must",
    "my", "no", "nor", "not", "of", "off", "on", "once", "only", "or",
    "other", "our", "ours", "out", "over", "own", "same", "shall", "she",
    "should", "so", "some", "such", "than", "that", "the", "their", "them",
    "then", "there", "these", "they", "this", "those", "through", "to", "too",
    "under", "until", "up", "very", "was", "we", "were", "what", "when",
    "where", "which", "while", "who", "whom", "why", "will", "with", "would",
    "you", "your", "yours",
})


def strip_boilerplate(text: str) -> str:
    return _BOILERPLATE_RE.sub("", text or "", count=1)


@lru_cache(maxsize=4096)
def stem(token: str) -> str:
    # Porter is not idempotent on its own output ("agreed" -> "agre" -> "agr"),
    # so stem until the token stops changing.
    current = token
    for _ in range(8):
        nxt = _stemmer.stem(current)
        if nxt == current:
            break
        current = nxt
    return current


def tokenize(text: str) -> List[str]:
    """Stemmed word tokens of *text* after boilerplate removal."""
    body = strip_boilerplate(text).lower()
    return [stem(tok) for tok in _TOKEN_RE.findall(body)]


@lru_cache(maxsize=4096)
def normalize(text: str) -> str:
    return " ".join(tokenize(text))


@lru_cache(maxsize=1)
def _stemmed_stop_words() -> frozenset:
    return frozenset(stem(w) for w in STOP_WORDS) | STOP_WORDS


def content_terms(canonical: str) -> List[str]:
    """Terms of an already-normalized question with stop words removed."""
    stop = _stemmed_stop_words()
    return [t for t in canonical.split() if t not in stop]

from __future__ import annotations

from difflib import SequenceMatcher
from typing import Optional, Sequence

_SYNONYMS = {
    "yes": ("yes", "y", "true", "sim", "oui"),
    "no": ("no", "n", "false", "não", "nao", "non"),
}


def best_option_match(answer: Optional[str], options: Sequence[str], min_ratio: float = 0.3) -> Optional[str]:
    """Pick the option closest to *answer*: exact, then yes/no synonyms, then edit distance."""
    if not answer or not options:
        return None
    wanted = answer.strip().lower()

    for opt in options:
        if opt.strip().lower() == wanted:
            return opt

    for variants in _SYNONYMS.values():
        if wanted in variants:
            for opt in options:
                if opt.strip().lower() in variants:
                    return opt

    best_score = 0.0
    best_option = None
    for opt in options:
        score = SequenceMatcher(None, wanted, opt.strip().lower()).ratio()
        if score > best_score:
            best_score = score
            best_option = opt
    return best_option if best_score > min_ratio else None

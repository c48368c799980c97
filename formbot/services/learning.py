from __future__ import annotations

import logging
from typing import Optional

from formbot.services.answer_store import AnswerStore
from formbot.utils.logger import get_logger


def record(question: str, answer: str, store: AnswerStore, logger: Optional[logging.Logger] = None) -> bool:
    """Remember an answer so the same question never needs resolving again.

    The store keeps the answer in memory even when the file write fails;
    the return value only says whether it reached disk.
    """
    logger = logger or get_logger()
    previous = store.get(question)
    durable = store.put(question, answer)
    if previous is None:
        logger.info(f"Learned {store.category.value} answer \"{answer}\" for \"{question}\"")
    elif previous != answer:
        logger.info(f"Updated {store.category.value} answer for \"{question}\": \"{previous}\" -> \"{answer}\"")
    return durable

"""Answer engine: the single entry point form drivers call.

``resolve_answer`` looks the question up in the category's store, falls back
to rules, profile values and finally a human, and writes whatever it settles
on back to the store. Drivers only ever see a ``Resolution``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from formbot.errors import FallbackUnavailable, InvalidProfileConfig
from formbot.models.answer import Category, Resolution, ResolveStatus
from formbot.models.config import AppConfig
from formbot.models.profile import Profile, load_profiles
from formbot.services.answer_store import AnswerStore, JsonFileBackend, StoreBackend
from formbot.services.fallback import FallbackPolicy
from formbot.services.learning import record
from formbot.services.matching import MatchResolver
from formbot.services.prompt import Prompter, UnavailablePrompter
from formbot.utils.logger import get_logger

CategoryLike = Union[Category, str]


def _encodable(text: str) -> bool:
    """Store files are UTF-8; text with lone surrogates cannot be written."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


class AnswerEngine:
    def __init__(
        self,
        stores: Dict[Category, AnswerStore],
        config: Optional[AppConfig] = None,
        prompter: Optional[Prompter] = None,
        profile: Optional[Profile] = None,
        profiles: Optional[Dict[str, Profile]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.stores = {Category(c): s for c, s in stores.items()}
        self.prompter: Prompter = prompter or UnavailablePrompter()
        self.profile = profile
        self.profiles: Dict[str, Profile] = dict(profiles or {})
        self.logger = logger or get_logger()
        self.reload(config or AppConfig())

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        prompter: Optional[Prompter] = None,
        profile: Optional[Profile] = None,
        backend: Optional[StoreBackend] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "AnswerEngine":
        logger = logger or get_logger()
        backend = backend or JsonFileBackend.from_config(config.stores, logger=logger)
        stores = {c: AnswerStore(c, backend, logger=logger) for c in Category}

        profiles: Dict[str, Profile] = {}
        profiles_path = config.profiles.path
        if profiles_path and Path(profiles_path).exists():
            profiles = load_profiles(profiles_path)
            logger.info(f"Loaded {len(profiles)} job profiles from {profiles_path}")
        elif config.profiles.active:
            raise InvalidProfileConfig(
                f"Profile {config.profiles.active!r} requested but {profiles_path} does not exist"
            )

        engine = cls(stores, config=config, prompter=prompter, profiles=profiles, logger=logger)
        if profile is not None:
            engine.profile = profile
        elif config.profiles.active:
            engine.profile = engine.select_profile(config.profiles.active)
        return engine

    def reload(self, config: AppConfig) -> None:
        """Swap thresholds, keywords and rules; stores are left alone."""
        self.config = config
        self._resolvers = {
            c: MatchResolver.for_category(config.category(c), config.matching) for c in Category
        }
        self._policies = {
            c: FallbackPolicy(config.category(c), logger=self.logger) for c in Category
        }

    def select_profile(self, key: str) -> Profile:
        try:
            profile = self.profiles[key]
        except KeyError:
            known = ", ".join(sorted(self.profiles)) or "none"
            raise InvalidProfileConfig(f"Profile {key!r} not found (known: {known})") from None
        self.profile = profile
        self.logger.info(f"Switched to job profile: {profile.title}")
        return profile

    # ── public API ──────────────────────────────────────────────

    def store(self, category: CategoryLike) -> AnswerStore:
        return self.stores[Category(category)]

    def resolve_answer(
        self,
        category: CategoryLike,
        question: str,
        profile: Optional[Profile] = None,
    ) -> Resolution:
        category = Category(category)
        text = (question or "").strip()
        if not text:
            return Resolution(category=category, question=text, status=ResolveStatus.UNAVAILABLE)
        if not _encodable(text):
            self.logger.warning(f"Question is not valid UTF-8 text, skipping: {text!r}")
            return Resolution(category=category, question=text, status=ResolveStatus.UNAVAILABLE)

        store = self.stores[category]
        match = self._resolvers[category].resolve(text, store)
        if match is not None:
            if not match.exact:
                self.logger.info(
                    f"Matched \"{text}\" to \"{match.question}\" (similarity {match.score:.2f})"
                )
                record(text, match.answer, store, logger=self.logger)
            return Resolution(
                category=category,
                question=text,
                status=ResolveStatus.MATCHED,
                value=match.answer,
                source="exact" if match.exact else "similar",
                matched_question=match.question,
                score=match.score,
            )

        self.logger.info(f"No sufficiently similar {category.value} question found for: \"{text}\"")
        try:
            fallback = self._policies[category].resolve(text, profile or self.profile, self.prompter)
        except FallbackUnavailable as e:
            self.logger.warning(str(e))
            return Resolution(category=category, question=text, status=ResolveStatus.UNAVAILABLE)

        record(text, fallback.answer, store, logger=self.logger)
        return Resolution(
            category=category,
            question=text,
            status=ResolveStatus.LEARNED,
            value=fallback.answer,
            source=fallback.source,
            rule=fallback.rule,
        )

    def learn(self, category: CategoryLike, question: str, answer: str) -> Resolution:
        """Store a human-supplied answer, overwriting any previous one."""
        category = Category(category)
        text = question.strip()
        value = (answer or "").strip()
        if not text:
            raise ValueError("question must not be empty")
        if not value:
            raise ValueError("answer must not be empty")
        if not (_encodable(text) and _encodable(value)):
            raise ValueError("question and answer must be valid UTF-8 text")
        record(text, value, self.stores[category], logger=self.logger)
        return Resolution(
            category=category,
            question=text,
            status=ResolveStatus.LEARNED,
            value=value,
            source="prompt",
        )

    def stats(self) -> Dict[str, int]:
        return {c.value: len(s) for c, s in self.stores.items()}

    def clear(self, category: Optional[CategoryLike] = None) -> None:
        targets = [Category(category)] if category is not None else list(self.stores)
        for c in targets:
            self.stores[c].clear()
            self.logger.info(f"Cleared all {c.value} answers")

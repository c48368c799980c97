"""Answers for questions nothing in the store resembles.

Rules are checked in order against the lower-cased question. A rule either
carries a literal answer or names a profile value (experience, salary); a
profile rule with no value in the profile falls through to the next rule.
After the rules come the category default and finally a human.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Pattern, Tuple

from formbot.errors import FallbackUnavailable
from formbot.models.config import CategoryConfig, RuleConfig
from formbot.models.profile import Profile
from formbot.services.prompt import Prompter
from formbot.utils.logger import get_logger
from formbot.utils.similarity import keyword_pattern
from formbot.utils.text import normalize


@dataclass(frozen=True)
class FallbackAnswer:
    answer: str
    source: str
    rule: Optional[str] = None


_PLAIN_SKILL_RE = re.compile(r"[a-z0-9 ]+")


def _flip(answer: str) -> str:
    return "No" if answer == "Yes" else "Yes"


def experience_from_profile(question: str, profile: Profile) -> Optional[str]:
    """Years for the skill the question mentions, else the profile default."""
    canonical = f" {normalize(question)} "
    # Longest skill first so "spring boot" wins over "spring".
    skills = sorted(profile.skill_years().items(), key=lambda kv: len(kv[0]), reverse=True)
    for skill, years in skills:
        if _mentions_skill(question, canonical, skill):
            return years
    return profile.default_years()


def _mentions_skill(question: str, canonical: str, skill: str) -> bool:
    name = skill.strip().lower()
    if not name:
        return False
    if _PLAIN_SKILL_RE.fullmatch(name):
        # plain words compare stemmed, so "databases" finds "database"
        return f" {normalize(name)} " in canonical
    # "c++", "c#", "node.js" lose their symbols when tokenized
    return keyword_pattern([name]).search(question.lower()) is not None


class FallbackPolicy:
    def __init__(self, config: CategoryConfig, logger: Optional[logging.Logger] = None) -> None:
        self.config = config
        self.logger = logger or get_logger()
        self._compiled: List[Tuple[RuleConfig, List[Pattern[str]]]] = [
            (rule, [re.compile(p, re.IGNORECASE) for p in rule.patterns] if rule.match == "regex" else [])
            for rule in config.rules
        ]

    def resolve(self, question: str, profile: Optional[Profile], prompter: Prompter) -> FallbackAnswer:
        lowered = question.lower()
        for rule, regexes in self._compiled:
            if not self._hits(rule, regexes, lowered):
                continue
            if rule.answer is not None:
                return self._confirm(question, FallbackAnswer(rule.answer, "rule", rule.name), prompter)
            value = self._from_profile(rule, question, profile)
            if value is not None:
                self.logger.info(f"Using profile-based {rule.source} for \"{question}\": {value}")
                return FallbackAnswer(value, "profile", rule.name)
            self.logger.debug(f"Rule {rule.name} matched but the profile has no {rule.source} value")

        if self.config.default_answer is not None:
            return self._confirm(question, FallbackAnswer(self.config.default_answer, "default"), prompter)
        return self._ask(question, prompter)

    @staticmethod
    def _hits(rule: RuleConfig, regexes: List[Pattern[str]], lowered: str) -> bool:
        if rule.match == "regex":
            return any(r.search(lowered) for r in regexes)
        return any(p.lower() in lowered for p in rule.patterns)

    @staticmethod
    def _from_profile(rule: RuleConfig, question: str, profile: Optional[Profile]) -> Optional[str]:
        if profile is None:
            return None
        if rule.source == "experience":
            return experience_from_profile(question, profile)
        if rule.source == "salary":
            return profile.salary()
        return None

    def _confirm(self, question: str, proposed: FallbackAnswer, prompter: Prompter) -> FallbackAnswer:
        if not (self.config.confirm_defaults and prompter.interactive):
            return proposed
        try:
            reply = prompter.ask(f'Use "{proposed.answer}" for "{question}"? (Y/n/custom answer): ')
        except FallbackUnavailable:
            return proposed
        if not reply or reply.lower() == "y":
            return proposed
        if reply.lower() == "n":
            return FallbackAnswer(_flip(proposed.answer), "prompt", proposed.rule)
        return FallbackAnswer(reply, "prompt", proposed.rule)

    def _ask(self, question: str, prompter: Prompter) -> FallbackAnswer:
        try:
            reply = prompter.ask(f'Answer for "{question}": ')
        except FallbackUnavailable as e:
            raise FallbackUnavailable(question, e.reason) from e
        if not reply:
            raise FallbackUnavailable(question, "empty reply")
        return FallbackAnswer(reply, "prompt")

from formbot.services.answer_store import AnswerStore, JsonFileBackend
from formbot.services.engine import AnswerEngine
from formbot.services.fallback import FallbackPolicy
from formbot.services.learning import record
from formbot.services.matching import Match, MatchResolver
from formbot.services.prompt import ConsolePrompter, ScriptedPrompter, UnavailablePrompter

__all__ = [
    "AnswerEngine",
    "AnswerStore",
    "ConsolePrompter",
    "FallbackPolicy",
    "JsonFileBackend",
    "Match",
    "MatchResolver",
    "ScriptedPrompter",
    "UnavailablePrompter",
    "record",
]

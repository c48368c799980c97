"""Ways of asking a human for an answer.

The fallback policy only sees the ``Prompter`` protocol, so it runs the same
from a terminal, from a scripted test or inside a server that can never ask.
"""
from __future__ import annotations

from collections import deque
from typing import Callable, Iterable, List, Optional, Protocol

from formbot.errors import FallbackUnavailable


class Prompter(Protocol):
    interactive: bool

    def ask(self, prompt_text: str) -> str:
        ...


class ConsolePrompter:
    """Blocks on stdin until the user replies."""

    interactive = True

    def __init__(self, input_fn: Optional[Callable[[str], str]] = None) -> None:
        self._input = input_fn

    def ask(self, prompt_text: str) -> str:
        read = self._input or input
        try:
            return read(prompt_text).strip()
        except (EOFError, KeyboardInterrupt) as e:
            raise FallbackUnavailable(prompt_text, "input closed") from e


class ScriptedPrompter:
    """Replies from a fixed queue; records every prompt it was shown."""

    interactive = True

    def __init__(self, replies: Iterable[str] = ()) -> None:
        self._replies = deque(replies)
        self.prompts: List[str] = []

    def ask(self, prompt_text: str) -> str:
        self.prompts.append(prompt_text)
        if not self._replies:
            raise FallbackUnavailable(prompt_text, "no scripted reply left")
        return self._replies.popleft().strip()


class UnavailablePrompter:
    """For headless runs: there is nobody to ask."""

    interactive = False

    def ask(self, prompt_text: str) -> str:
        raise FallbackUnavailable(prompt_text, "no interactive channel")

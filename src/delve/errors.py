from __future__ import annotations

from typing import Iterable, List


class DelveError(Exception):
    """Base exception for the delve dungeon generator."""


class ConfigurationError(DelveError, ValueError):
    """Raised when generation settings cannot produce a valid dungeon.

    ``problems`` lists every violated constraint so callers can report them
    all at once instead of fixing one value per run.
    """

    def __init__(self, problems: Iterable[str] | str) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems: List[str] = list(problems)
        super().__init__("; ".join(self.problems) or "invalid configuration")

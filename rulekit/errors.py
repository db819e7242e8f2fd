from __future__ import annotations

from typing import Sequence, Tuple


class RuleError(ValueError):
    """Base class for rule construction errors."""


class IncompleteRuleError(RuleError):
    """A full render was requested before all mandatory clauses were supplied.

    ``partial_text`` holds a best-effort rendering of the clauses set so far,
    so callers can show how far construction got. Recoverable: keep supplying
    clauses and build again.
    """

    def __init__(self, partial_text: str, missing: Sequence[str] = ()) -> None:
        self.partial_text = partial_text
        self.missing: Tuple[str, ...] = tuple(missing)
        what = ", ".join(self.missing) if self.missing else "final phase not reached"
        super().__init__(
            f"Not all data for the rule was specified ({what}). "
            f"Current rule shape is\n{partial_text}"
        )


class RuleDefinitionError(RuleError):
    """A rule definition document entry cannot be turned into a rule."""

    def __init__(self, index: int, name: str | None, reason: str) -> None:
        self.index = index
        self.name = name
        self.reason = reason
        label = f"rule #{index}" + (f" '{name}'" if name else "")
        super().__init__(f"{label}: {reason}")

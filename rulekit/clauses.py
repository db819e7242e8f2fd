"""Clause state for a rule under construction.

The accumulator is a plain data holder shared by every phase object of one
builder. Setters never fail; emptiness is only checked when rendering.
"""

from __future__ import annotations

import enum
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

CONSTRUCTOR_METHOD = "<init>"
CLASS_INIT_METHOD = "<clinit>"

LINEBREAKS = {
    "native": os.linesep,
    "lf": "\n",
    "crlf": "\r\n",
}
LINEBREAK_ENV = "RULEKIT_LINEBREAK"

NameOrType = Union[str, type]
Occurrence = Union[int, str, None]


class TargetKind(enum.Enum):
    CLASS = "CLASS"
    INTERFACE = "INTERFACE"


class CompileMode(enum.Enum):
    UNSET = ""
    COMPILE = "COMPILE"
    NOCOMPILE = "NOCOMPILE"


def resolve_linebreak(linebreak: str | None = None) -> str:
    """Return the line separator to render with.

    An explicit separator wins; otherwise RULEKIT_LINEBREAK selects one of
    native|lf|crlf, defaulting to the platform separator.
    """
    if linebreak is not None:
        return linebreak
    choice = os.environ.get(LINEBREAK_ENV, "native").strip().lower() or "native"
    if choice not in LINEBREAKS:
        raise ValueError(
            f"{LINEBREAK_ENV}={choice!r} is not one of {', '.join(sorted(LINEBREAKS))}"
        )
    return LINEBREAKS[choice]


def type_name(target: NameOrType) -> str:
    if isinstance(target, type):
        if target.__module__ == "builtins":
            return target.__qualname__
        return f"{target.__module__}.{target.__qualname__}"
    return target


def format_method_signature(name: str, arg_types: Optional[Sequence[NameOrType]] = None) -> str:
    # None keeps the bare name; an empty sequence still renders "()"
    if arg_types is None:
        return name
    return name + "(" + ",".join(type_name(t) for t in arg_types) + ")"


def location_specifier(
    keyword: str,
    subject: str | None = None,
    occurrence: Occurrence = None,
    *,
    after: bool = False,
) -> str:
    parts = ["AFTER" if after else "AT", keyword]
    if subject is not None:
        parts.append(subject)
    if occurrence is not None:
        parts.append(str(occurrence))
    return " ".join(parts)


def join_statements(statements: Iterable[str], linebreak: str) -> str:
    """Join statements, adding ';' only where the caller did not supply one.

    >>> join_statements(["a", "b;", "c"], "\\n")
    'a;\\nb;\\nc'
    """
    out: List[str] = []
    for stmt in statements:
        text = stmt.strip()
        if out:
            if not out[-1].endswith(";"):
                out[-1] += ";"
            out[-1] += linebreak
        out.append(text)
    return "".join(out)


def import_lines(names: Iterable[str]) -> List[str]:
    return [f"IMPORT {name}" for name in names]


@dataclass
class ClauseAccumulator:
    rule_name: str
    linebreak: str = field(default_factory=resolve_linebreak)
    target_kind: TargetKind = TargetKind.CLASS
    target_name: Optional[str] = None
    include_subclasses: bool = False
    method_signature: Optional[str] = None
    location: Optional[str] = None
    helper_name: Optional[str] = None
    import_names: List[str] = field(default_factory=list)
    compile_mode: CompileMode = CompileMode.UNSET
    bind_statements: List[str] = field(default_factory=list)
    condition: Optional[str] = None
    action_statements: List[str] = field(default_factory=list)

    def set_target(self, target: NameOrType, kind: TargetKind) -> None:
        self.target_name = type_name(target)
        self.target_kind = kind

    def set_method(self, name: str, arg_types: Optional[Sequence[NameOrType]] = None) -> None:
        self.method_signature = format_method_signature(name, arg_types)

    def set_location(self, specifier: str) -> None:
        self.location = specifier

    def set_helper(self, helper: NameOrType) -> None:
        self.helper_name = type_name(helper)

    def add_imports(self, names: Iterable[str]) -> None:
        self.import_names.extend(names)

    def add_bind(self, statements: Iterable[str]) -> None:
        self.bind_statements.extend(statements)

    def add_actions(self, statements: Iterable[str]) -> None:
        self.action_statements.extend(statements)

    def set_condition(self, condition: Union[str, bool]) -> None:
        if isinstance(condition, bool):
            condition = "true" if condition else "false"
        self.condition = condition

    @property
    def bind_clause(self) -> str | None:
        if not self.bind_statements:
            return None
        return join_statements(self.bind_statements, self.linebreak)

    @property
    def action_clause(self) -> str | None:
        if not self.action_statements:
            return None
        return join_statements(self.action_statements, self.linebreak)

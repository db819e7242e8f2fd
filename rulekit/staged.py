"""Staged, phase-ordered rule builder.

Example::

    rule = (
        RuleConstructor("myRule")
        .on_class("org.example.ExampleClass")
        .in_method("doInterestingStuff")
        .at_entry()
        .if_true()
        .action("myAction()")
        .build()
    )

Each phase object only offers the calls that are legal at that point and
hands back the next phase. All phases share one ClauseAccumulator.
"""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence, Type, TypeVar, Union

from .clauses import (
    CLASS_INIT_METHOD,
    CONSTRUCTOR_METHOD,
    ClauseAccumulator,
    CompileMode,
    NameOrType,
    Occurrence,
    TargetKind,
    location_specifier,
    resolve_linebreak,
)
from .errors import IncompleteRuleError
from .render import missing_clauses, render_partial, render_rule

LOG = logging.getLogger(__name__)

P = TypeVar("P", bound="_Phase")


class RuleConstructor:
    """Top-level handle; also the Target phase."""

    def __init__(self, rule_name: str, linebreak: str | None = None) -> None:
        self._acc = ClauseAccumulator(rule_name, linebreak=resolve_linebreak(linebreak))
        self._phases: Dict[type, _Phase] = {}

    @property
    def rule_name(self) -> str:
        return self._acc.rule_name

    @property
    def clauses(self) -> ClauseAccumulator:
        return self._acc

    def _enter(self, phase: Type[P]) -> P:
        # phase objects are created once, on first entry
        existing = self._phases.get(phase)
        if existing is None:
            LOG.debug("rule %r: entering %s", self._acc.rule_name, phase.__name__)
            existing = self._phases[phase] = phase(self)
        return existing  # type: ignore[return-value]

    def _reached(self, phase: Type[P]) -> Optional[P]:
        return self._phases.get(phase)  # type: ignore[return-value]

    def method_clause(self) -> Optional[MethodClause]:
        return self._reached(MethodClause)

    def location_clause(self) -> Optional[LocationClause]:
        return self._reached(LocationClause)

    def condition_clause(self) -> Optional[ConditionClause]:
        return self._reached(ConditionClause)

    def action_clause(self) -> Optional[ActionClause]:
        return self._reached(ActionClause)

    def on_class(self, target: NameOrType) -> MethodClause:
        self._acc.set_target(target, TargetKind.CLASS)
        return self._enter(MethodClause)

    def on_interface(self, target: NameOrType) -> MethodClause:
        self._acc.set_target(target, TargetKind.INTERFACE)
        return self._enter(MethodClause)

    def build(self) -> str:
        """Render the rule, or raise IncompleteRuleError with the partial text."""
        builder = self._reached(Builder)
        if builder is None:
            raise IncompleteRuleError(render_partial(self._acc), missing_clauses(self._acc))
        return builder.build()

    def __repr__(self) -> str:
        return f"RuleConstructor({self._acc.rule_name!r})"


class _Phase:
    __slots__ = ("_owner",)

    def __init__(self, owner: RuleConstructor) -> None:
        self._owner = owner

    @property
    def _acc(self) -> ClauseAccumulator:
        return self._owner._acc

    def parent(self) -> RuleConstructor:
        return self._owner


class MethodClause(_Phase):
    __slots__ = ()

    def include_subclasses(self) -> MethodClause:
        self._acc.include_subclasses = True
        return self

    def in_method(
        self, method_name: str, arg_types: Optional[Sequence[NameOrType]] = None
    ) -> LocationClause:
        """Set the method; pass ``arg_types`` (possibly empty) to pin the overload."""
        self._acc.set_method(method_name, arg_types)
        return self._owner._enter(LocationClause)

    def in_constructor(self, arg_types: Optional[Sequence[NameOrType]] = None) -> LocationClause:
        return self.in_method(CONSTRUCTOR_METHOD, arg_types)

    def in_class_init(self, arg_types: Optional[Sequence[NameOrType]] = None) -> LocationClause:
        return self.in_method(CLASS_INIT_METHOD, arg_types)


class LocationClause(_Phase):
    __slots__ = ()

    def where(self, specifier: str) -> ConditionClause:
        """Raw location, stored verbatim (must carry its own AT/AFTER)."""
        self._acc.set_location(specifier)
        return self._owner._enter(ConditionClause)

    def at(self, location: str) -> ConditionClause:
        return self.where(f"AT {location}")

    def after(self, location: str) -> ConditionClause:
        return self.where(f"AFTER {location}")

    def _spec(
        self, keyword: str, subject: str | None = None, occurrence: Occurrence = None, after: bool = False
    ) -> ConditionClause:
        return self.where(location_specifier(keyword, subject, occurrence, after=after))

    def at_entry(self) -> ConditionClause:
        return self._spec("ENTRY")

    def at_exit(self) -> ConditionClause:
        return self._spec("EXIT")

    def at_line(self, line: int) -> ConditionClause:
        return self._spec("LINE", str(line))

    def at_read(self, variable: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("READ", variable, occurrence)

    def after_read(self, variable: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("READ", variable, occurrence, after=True)

    def at_write(self, variable: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("WRITE", variable, occurrence)

    def after_write(self, variable: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("WRITE", variable, occurrence, after=True)

    def at_invoke(self, method: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("INVOKE", method, occurrence)

    def after_invoke(self, method: str, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("INVOKE", method, occurrence, after=True)

    def at_synchronize(self, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("SYNCHRONIZE", occurrence=occurrence)

    def after_synchronize(self, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("SYNCHRONIZE", occurrence=occurrence, after=True)

    def at_throw(self, occurrence: Occurrence = None) -> ConditionClause:
        return self._spec("THROW", occurrence=occurrence)

    def at_exception_exit(self) -> ConditionClause:
        return self._spec("EXCEPTION EXIT")


class ConditionClause(_Phase):
    __slots__ = ()

    def helper(self, helper: NameOrType) -> ConditionClause:
        self._acc.set_helper(helper)
        return self

    def bind(self, *statements: str) -> ConditionClause:
        self._acc.add_bind(statements)
        return self

    def imports(self, *names: str) -> ConditionClause:
        self._acc.add_imports(names)
        return self

    def compile(self) -> ConditionClause:
        self._acc.compile_mode = CompileMode.COMPILE
        return self

    def nocompile(self) -> ConditionClause:
        self._acc.compile_mode = CompileMode.NOCOMPILE
        return self

    def when(self, condition: Union[str, bool]) -> ActionClause:
        self._acc.set_condition(condition)
        return self._owner._enter(ActionClause)

    def if_true(self) -> ActionClause:
        return self.when(True)

    def if_false(self) -> ActionClause:
        return self.when(False)


class ActionClause(_Phase):
    __slots__ = ()

    def action(self, *statements: str) -> Builder:
        # zero statements still advances; build() then reports the missing DO
        self._acc.add_actions(statements)
        return self._owner._enter(Builder)


class Builder(_Phase):
    __slots__ = ()

    def action(self, *statements: str) -> Builder:
        self._acc.add_actions(statements)
        return self

    def build(self) -> str:
        text = render_rule(self._acc)
        LOG.debug("rule %r: rendered %d chars", self._acc.rule_name, len(text))
        return text

    def __str__(self) -> str:
        if missing_clauses(self._acc):
            return render_partial(self._acc)
        return self.build()

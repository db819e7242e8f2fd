from __future__ import annotations

from typing import Optional, Sequence, Union

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
from .render import missing_clauses, render_partial, render_rule


class RuleBuilder:
    """Order-free variant of RuleConstructor.

    Every method returns the builder itself, so clauses may be given in any
    order. The location defaults to ``AT ENTRY`` and the condition to
    ``true``. Rendering goes through the same grammar as the staged builder.
    """

    def __init__(self, rule_name: str, linebreak: str | None = None) -> None:
        self._acc = ClauseAccumulator(rule_name, linebreak=resolve_linebreak(linebreak))
        self._acc.set_location(location_specifier("ENTRY"))

    @property
    def clauses(self) -> ClauseAccumulator:
        return self._acc

    def on_class(self, target: NameOrType) -> RuleBuilder:
        self._acc.set_target(target, TargetKind.CLASS)
        return self

    def on_interface(self, target: NameOrType) -> RuleBuilder:
        self._acc.set_target(target, TargetKind.INTERFACE)
        return self

    def include_subclasses(self) -> RuleBuilder:
        self._acc.include_subclasses = True
        return self

    def in_method(self, method_name: str, arg_types: Optional[Sequence[NameOrType]] = None) -> RuleBuilder:
        self._acc.set_method(method_name, arg_types)
        return self

    def in_constructor(self, arg_types: Optional[Sequence[NameOrType]] = None) -> RuleBuilder:
        return self.in_method(CONSTRUCTOR_METHOD, arg_types)

    def in_class_init(self, arg_types: Optional[Sequence[NameOrType]] = None) -> RuleBuilder:
        return self.in_method(CLASS_INIT_METHOD, arg_types)

    def using_helper(self, helper: NameOrType) -> RuleBuilder:
        self._acc.set_helper(helper)
        return self

    def where(self, specifier: str) -> RuleBuilder:
        self._acc.set_location(specifier)
        return self

    def at(self, location: str) -> RuleBuilder:
        return self.where(f"AT {location}")

    def after(self, location: str) -> RuleBuilder:
        return self.where(f"AFTER {location}")

    def at_entry(self) -> RuleBuilder:
        return self.where(location_specifier("ENTRY"))

    def at_exit(self) -> RuleBuilder:
        return self.where(location_specifier("EXIT"))

    def at_line(self, line: int) -> RuleBuilder:
        return self.where(location_specifier("LINE", str(line)))

    def at_throw(self, occurrence: Occurrence = None) -> RuleBuilder:
        return self.where(location_specifier("THROW", occurrence=occurrence))

    def at_exception_exit(self) -> RuleBuilder:
        return self.where(location_specifier("EXCEPTION EXIT"))

    def when(self, condition: Union[str, bool]) -> RuleBuilder:
        self._acc.set_condition(condition)
        return self

    def when_true(self) -> RuleBuilder:
        return self.when(True)

    def when_false(self) -> RuleBuilder:
        return self.when(False)

    def bind(self, *statements: str) -> RuleBuilder:
        self._acc.add_bind(statements)
        return self

    def do_action(self, *statements: str) -> RuleBuilder:
        self._acc.add_actions(statements)
        return self

    def add_import(self, *names: str) -> RuleBuilder:
        self._acc.add_imports(names)
        return self

    def compile(self) -> RuleBuilder:
        self._acc.compile_mode = CompileMode.COMPILE
        return self

    def nocompile(self) -> RuleBuilder:
        self._acc.compile_mode = CompileMode.NOCOMPILE
        return self

    def build(self) -> str:
        return render_rule(self._acc)

    def __str__(self) -> str:
        if missing_clauses(self._acc):
            return render_partial(self._acc)
        return self.build()

from .clauses import (
    CLASS_INIT_METHOD,
    CONSTRUCTOR_METHOD,
    ClauseAccumulator,
    CompileMode,
    TargetKind,
    join_statements,
)
from .errors import IncompleteRuleError, RuleDefinitionError, RuleError
from .freeform import RuleBuilder
from .staged import (
    ActionClause,
    Builder,
    ConditionClause,
    LocationClause,
    MethodClause,
    RuleConstructor,
)

__all__ = [
    "CLASS_INIT_METHOD",
    "CONSTRUCTOR_METHOD",
    "ActionClause",
    "Builder",
    "ClauseAccumulator",
    "CompileMode",
    "ConditionClause",
    "IncompleteRuleError",
    "LocationClause",
    "MethodClause",
    "RuleBuilder",
    "RuleConstructor",
    "RuleDefinitionError",
    "RuleError",
    "TargetKind",
    "join_statements",
]

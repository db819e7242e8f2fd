from __future__ import annotations

import logging
from typing import List

from .clauses import ClauseAccumulator, CompileMode, import_lines
from .errors import IncompleteRuleError

LOG = logging.getLogger(__name__)


def missing_clauses(acc: ClauseAccumulator) -> List[str]:
    """Names of the mandatory clauses that are unset or empty."""
    checks = (
        ("RULE", acc.rule_name),
        (acc.target_kind.value, acc.target_name),
        ("METHOD", acc.method_signature),
        ("location", acc.location),
        ("DO", acc.action_clause),
    )
    return [label for label, value in checks if not value]


def _head_lines(acc: ClauseAccumulator) -> List[str]:
    # Everything up to (not including) IF; unset mandatory fields are skipped
    lines = [f"RULE {acc.rule_name}"]
    if acc.target_name is not None:
        marker = "^" if acc.include_subclasses else ""
        lines.append(f"{acc.target_kind.value} {marker}{acc.target_name}")
    if acc.method_signature is not None:
        lines.append(f"METHOD {acc.method_signature}")
    if acc.location is not None:
        lines.append(acc.location)
    if acc.helper_name is not None:
        lines.append(f"HELPER {acc.helper_name}")
    lines.extend(import_lines(acc.import_names))
    if acc.compile_mode is not CompileMode.UNSET:
        lines.append(acc.compile_mode.value)
    bind = acc.bind_clause
    if bind is not None:
        lines.append(f"BIND {bind}")
    return lines


def _join(lines: List[str], linebreak: str) -> str:
    return "".join(line + linebreak for line in lines)


def render_partial(acc: ClauseAccumulator) -> str:
    """Best-effort text of whatever has been set, without ENDRULE."""
    lines = _head_lines(acc)
    if acc.condition is not None:
        lines.append(f"IF {acc.condition}")
    action = acc.action_clause
    if action is not None:
        lines.append(f"DO {action}")
    return _join(lines, acc.linebreak)


def render_rule(acc: ClauseAccumulator) -> str:
    """Render the complete rule text.

    Raises IncompleteRuleError (carrying the partial text) when any
    mandatory clause is missing or empty.
    """
    missing = missing_clauses(acc)
    if missing:
        LOG.debug("render: rule %r incomplete, missing %s", acc.rule_name, missing)
        raise IncompleteRuleError(render_partial(acc), missing)
    lines = _head_lines(acc)
    lines.append(f"IF {acc.condition if acc.condition is not None else 'true'}")
    lines.append(f"DO {acc.action_clause}")
    lines.append("ENDRULE")
    return _join(lines, acc.linebreak)

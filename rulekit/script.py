# MIT License — see LICENSE in repo root
# Copyright (c) 2025 rulekit contributors
"""
Turn a YAML rule definition document into an agent rule script.
- Every rule is built through the staged RuleConstructor.
- Output is deterministic: same document, same bytes, same hash.
"""

from __future__ import annotations

import hashlib
import logging
import os
from typing import Any, Dict, List, Sequence, Tuple

import yaml

from .clauses import resolve_linebreak
from .errors import RuleDefinitionError
from .staged import LocationClause, MethodClause, RuleConstructor

LOG = logging.getLogger(__name__)

Definition = Dict[str, Any]

LOCATION_KEYS = ("at", "after", "where")
METHOD_KEYS = ("method", "constructor", "class_init")


def read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def sha256_bytes(b: bytes) -> str:
    return hashlib.sha256(b).hexdigest()


def load_definitions(text: str) -> List[Definition]:
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"rule document is not valid YAML: {e}") from e
    if isinstance(data, list):
        rules = data
    elif isinstance(data, dict):
        rules = data.get("rules") or []
    else:
        raise ValueError("rule document must be a mapping with a 'rules' list")
    if not isinstance(rules, list):
        raise ValueError("'rules' must be a list")
    return rules


def _strings(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value]
    return [str(value)]


def _only_one(d: Definition, keys: Sequence[str], index: int, name: str) -> Tuple[str, Any] | None:
    present = [k for k in keys if k in d]
    if len(present) > 1:
        raise RuleDefinitionError(index, name, f"give only one of {', '.join(present)}")
    if not present:
        return None
    return present[0], d[present[0]]


def _text(key: str, value: Any, index: int, name: str) -> str:
    # a key left empty in YAML loads as None
    if value is None or not str(value).strip():
        raise RuleDefinitionError(index, name, f"'{key}' must not be empty")
    return str(value)


def _method(methods: MethodClause, d: Definition, index: int, name: str) -> LocationClause:
    picked = _only_one(d, METHOD_KEYS, index, name)
    if picked is None:
        raise RuleDefinitionError(index, name, f"one of {', '.join(METHOD_KEYS)} is required")
    key, value = picked
    if key == "method":
        args = d.get("args")
        return methods.in_method(_text(key, value, index, name), None if args is None else _strings(args))
    # constructor/class_init: `true` for the bare pseudo-name, a list for arg types
    args = None if value is True or value is None else _strings(value)
    if key == "constructor":
        return methods.in_constructor(args)
    return methods.in_class_init(args)


def build_rule(d: Definition, index: int = 0, linebreak: str | None = None) -> str:
    if not isinstance(d, dict):
        raise RuleDefinitionError(index, None, "rule definition must be a mapping")
    name = d.get("name")
    if name is not None and not isinstance(name, str):
        raise RuleDefinitionError(index, None, "'name' must be a string")
    if not name or not name.strip():
        raise RuleDefinitionError(index, None, "'name' is required")

    rule = RuleConstructor(name, linebreak=linebreak)
    picked_target = _only_one(d, ("class", "interface"), index, name)
    if picked_target is None:
        raise RuleDefinitionError(index, name, "one of class, interface is required")
    kind, value = picked_target
    target = _text(kind, value, index, name)
    methods = rule.on_class(target) if kind == "class" else rule.on_interface(target)
    if d.get("subclasses"):
        methods.include_subclasses()

    locations = _method(methods, d, index, name)
    picked = _only_one(d, LOCATION_KEYS, index, name)
    if picked is None:
        conditions = locations.at_entry()
    else:
        key, value = picked
        conditions = getattr(locations, key)(_text(key, value, index, name))

    if d.get("helper") is not None:
        conditions.helper(str(d["helper"]))
    if d.get("imports"):
        conditions.imports(*_strings(d["imports"]))
    if "compile" in d and d["compile"] is not None:
        if d["compile"]:
            conditions.compile()
        else:
            conditions.nocompile()
    if d.get("bind"):
        conditions.bind(*_strings(d["bind"]))

    cond = d.get("if")
    if cond is None:
        cond = True
    actions = conditions.when(cond if isinstance(cond, bool) else str(cond))
    return actions.action(*_strings(d.get("do"))).build()


def render_script(definitions: Sequence[Definition], linebreak: str | None = None) -> str:
    sep = resolve_linebreak(linebreak)
    return sep.join(build_rule(d, i, sep) for i, d in enumerate(definitions))


def emit_script(rules_path: str, out_path: str, linebreak: str | None = None) -> Tuple[str, int]:
    """Write the script for ``rules_path`` to ``out_path``.

    Returns (hash, rule count); hash is ``sha256:<hex>`` of the written bytes.
    """
    definitions = load_definitions(read(rules_path))
    text = render_script(definitions, linebreak)
    data = text.encode("utf-8")
    parent = os.path.dirname(out_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(out_path, "wb") as f:
        f.write(data)
    digest = f"sha256:{sha256_bytes(data)}"
    LOG.info("script: wrote %s (%d rule(s), %s)", out_path, len(definitions), digest)
    return digest, len(definitions)

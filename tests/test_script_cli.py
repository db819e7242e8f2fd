# ruff: noqa: I001
from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from rulekit import IncompleteRuleError, RuleDefinitionError
from rulekit.cli import main
from rulekit.script import build_rule, emit_script, load_definitions, render_script


FIX = Path(__file__).parent / "fixtures"
RULES = FIX / "rules.yaml"


def _expected() -> str:
    return (FIX / "rules.btm").read_text(encoding="utf-8")


def test_render_script_matches_golden() -> None:
    defs = load_definitions(RULES.read_text(encoding="utf-8"))
    assert [d["name"] for d in defs] == ["basic rule", "bind rule", "compile import example"]
    assert render_script(defs, "\n") == _expected()


def test_emit_is_deterministic(tmp_path: Path) -> None:
    out = tmp_path / "build" / "rules.btm"
    digest, count = emit_script(str(RULES), str(out), "\n")
    data = out.read_bytes()
    assert count == 3
    assert data.decode("utf-8") == _expected()
    assert digest == "sha256:" + hashlib.sha256(data).hexdigest()
    digest2, _ = emit_script(str(RULES), str(out), "\n")
    assert digest2 == digest
    assert out.read_bytes() == data


def test_build_rule_defaults_location_and_condition() -> None:
    text = build_rule({"name": "r", "class": "X", "method": "m", "do": ["a()"]}, linebreak="\n")
    assert text == "RULE r\nCLASS X\nMETHOD m\nAT ENTRY\nIF true\nDO a()\nENDRULE\n"


def test_build_rule_class_init_and_raw_where() -> None:
    text = build_rule(
        {"name": "r", "class": "X", "class_init": True, "where": "AT READ state", "if": False, "do": "a()"},
        linebreak="\n",
    )
    assert "METHOD <clinit>\nAT READ state\nIF false\n" in text


@pytest.mark.parametrize(
    "definition, reason",
    [
        ({"class": "X", "method": "m"}, "'name' is required"),
        ({"name": "r", "method": "m"}, "one of class, interface is required"),
        ({"name": "r", "class": "X", "interface": "Y", "method": "m"}, "give only one of class, interface"),
        ({"name": "r", "class": "X"}, "one of method, constructor, class_init is required"),
        ({"name": "r", "class": "X", "method": "m", "at": "ENTRY", "after": "EXIT"}, "give only one of at, after"),
        ({"name": 42, "class": "X", "method": "m"}, "'name' must be a string"),
        ({"name": "r", "class": None, "method": "m"}, "'class' must not be empty"),
        ({"name": "r", "interface": "  ", "method": "m"}, "'interface' must not be empty"),
        ({"name": "r", "class": "X", "method": None}, "'method' must not be empty"),
        ({"name": "r", "class": "X", "method": "m", "at": None}, "'at' must not be empty"),
        ({"name": "r", "class": "X", "method": "m", "where": ""}, "'where' must not be empty"),
    ],
)
def test_build_rule_rejects_bad_definitions(definition: dict, reason: str) -> None:
    with pytest.raises(RuleDefinitionError) as exc:
        build_rule(definition, index=4)
    assert exc.value.index == 4
    assert exc.value.reason == reason


def test_build_rule_without_actions_is_incomplete() -> None:
    with pytest.raises(IncompleteRuleError) as exc:
        build_rule({"name": "r", "class": "X", "method": "m", "compile": True}, linebreak="\n")
    assert exc.value.partial_text == "RULE r\nCLASS X\nMETHOD m\nAT ENTRY\nCOMPILE\nIF true\n"


def test_load_definitions_rejects_non_mapping() -> None:
    with pytest.raises(ValueError):
        load_definitions("just a string")
    with pytest.raises(ValueError):
        load_definitions("rules: {a: 1}")
    assert load_definitions("") == []


def test_cli_show(capsys) -> None:  # type: ignore[no-untyped-def]
    assert main(["show", "--rules", str(RULES), "--linebreak", "lf"]) == 0
    assert capsys.readouterr().out == _expected()


def test_cli_emit(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    out = tmp_path / "rules.btm"
    assert main(["emit", "--rules", str(RULES), "--out", str(out), "--linebreak", "lf"]) == 0
    printed = capsys.readouterr().out
    assert f"[rulekit] wrote {out} (3 rule(s))" in printed
    assert "hash=sha256:" + hashlib.sha256(out.read_bytes()).hexdigest() in printed


def test_cli_missing_document(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(SystemExit) as exc:
        main(["show", "--rules", str(tmp_path / "nope.yaml")])
    assert exc.value.code == 1
    assert "[rulekit] rule document not found" in capsys.readouterr().err


def test_cli_incomplete_rule_exit_code(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    doc = tmp_path / "rules.yaml"
    doc.write_text("rules:\n  - name: r\n    class: X\n    method: m\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["show", "--rules", str(doc), "--linebreak", "lf"])
    assert exc.value.code == 2
    assert "RULE r" in capsys.readouterr().err


def test_cli_bad_definition_exit_code(tmp_path: Path, capsys) -> None:  # type: ignore[no-untyped-def]
    doc = tmp_path / "rules.yaml"
    doc.write_text("rules:\n  - name: r\n    method: m\n", encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["show", "--rules", str(doc)])
    assert exc.value.code == 1
    assert "rule #0 'r'" in capsys.readouterr().err


def test_empty_yaml_values_are_rejected() -> None:
    defs = load_definitions("rules:\n  - name: r\n    class:\n    method: m\n    at:\n    do: a()\n")
    with pytest.raises(RuleDefinitionError) as exc:
        build_rule(defs[0], linebreak="\n")
    assert exc.value.reason == "'class' must not be empty"


def test_empty_constructor_value_means_bare_pseudo_name() -> None:
    defs = load_definitions("rules:\n  - name: r\n    class: X\n    constructor:\n    do: a()\n")
    assert "METHOD <init>\nAT ENTRY\n" in build_rule(defs[0], linebreak="\n")


def test_cli_show_writes_separator_untranslated(capsys) -> None:  # type: ignore[no-untyped-def]
    assert main(["show", "--rules", str(RULES), "--linebreak", "crlf"]) == 0
    out = capsys.readouterr().out
    assert out == _expected().replace("\n", "\r\n")
    assert "\r\r\n" not in out

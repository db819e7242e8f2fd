# MIT License — see LICENSE in repo root
# Copyright (c) 2025 rulekit contributors
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn

from .clauses import LINEBREAKS
from .errors import IncompleteRuleError
from .script import emit_script, load_definitions, read, render_script

LOG = logging.getLogger(__name__)

EXIT_INPUT = 1
EXIT_INCOMPLETE = 2


def die(msg: str, code: int = EXIT_INPUT) -> NoReturn:
    print(f"[rulekit] {msg}", file=sys.stderr)
    sys.exit(code)


def _run(args: argparse.Namespace) -> int:
    linebreak = LINEBREAKS[args.linebreak] if args.linebreak else None
    if args.command == "emit":
        digest, count = emit_script(args.rules, args.out, linebreak)
        print(f"[rulekit] wrote {args.out} ({count} rule(s))")
        print(f"[rulekit] hash={digest}")
        return 0
    text = render_script(load_definitions(read(args.rules)), linebreak)
    # bytes, so the chosen line separator is not translated
    sys.stdout.flush()
    sys.stdout.buffer.write(text.encode("utf-8"))
    sys.stdout.buffer.flush()
    return 0


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="rulekit", description="Instrumentation rule script generator")
    ap.add_argument("command", choices=["emit", "show"])
    ap.add_argument("--rules", default="rules.yaml", help="YAML rule definition document")
    ap.add_argument("--out", default="build/rules.btm", help="For emit: script path to write")
    ap.add_argument(
        "--linebreak",
        default=None,
        choices=sorted(LINEBREAKS),
        help="Line separator (default: $RULEKIT_LINEBREAK or native)",
    )
    ap.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        return _run(args)
    except FileNotFoundError as e:
        die(f"rule document not found: {e.filename}")
    except IncompleteRuleError as e:
        LOG.debug("incomplete rule: missing %s", e.missing)
        die(str(e), code=EXIT_INCOMPLETE)
    except (ValueError, OSError) as e:
        die(str(e))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

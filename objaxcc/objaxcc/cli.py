"""
objaxcc command line
====================
Usage:
    objaxcc run FILE              execute and print the result as JSON
    objaxcc tokens FILE           dump the token list
    objaxcc tree FILE             pretty-print the parse tree
    objaxcc validate DIR [--log]  check every *.objax file under DIR

FILE may be '-' to read standard input.
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from .pipeline import ObjaxFrontend

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    if path == '-':
        return sys.stdin.read()
    return Path(path).read_text(encoding='utf-8', errors='replace')


def collect_scripts(scripts_dir) -> list:
    """Every .objax file under ``scripts_dir``, sorted."""
    results = []
    for root, _, files in os.walk(scripts_dir):
        for name in files:
            if name.endswith(".objax"):
                results.append(os.path.join(root, name))
    return sorted(results)


# ── commands ─────────────────────────────────────────────────────────────────

def cmd_run(frontend: ObjaxFrontend, args) -> int:
    result = frontend.execute(_read_source(args.file))
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 1 if result.errors else 0


def cmd_tokens(frontend: ObjaxFrontend, args) -> int:
    lexed = frontend.tokenize_only(_read_source(args.file))
    for idx, tok in enumerate(lexed.tokens):
        print(f"[{idx}] {tok.type.name:<15} {tok.image!r:<20} {tok.line}:{tok.column}")
    for err in lexed.errors:
        print(f"error {err.line}:{err.column}  {err.message}")
    return 1 if lexed.errors else 0


def cmd_tree(frontend: ObjaxFrontend, args) -> int:
    source = _read_source(args.file)
    result = frontend.process_string(source, source_name=args.file)
    if result.diags.has_errors:
        print(result.diags.report())
        return 1
    print(frontend.parse_only(source).pretty())
    return 0


def cmd_validate(frontend: ObjaxFrontend, args) -> int:
    scripts = collect_scripts(args.dir)
    if not scripts:
        print(f"[WARN] no .objax files found under {args.dir}")
        return 0

    failures = []
    for i, filepath in enumerate(scripts, 1):
        rel = os.path.relpath(filepath, args.dir)
        result = frontend.process_file(filepath)
        if result.success:
            print(f"[{i:>4}/{len(scripts)}] OK       {rel}")
        else:
            print(f"[{i:>4}/{len(scripts)}] FAIL     {rel}")
            failures.append((rel, result.diags))

    print(f"\n{len(scripts)} file(s) checked, {len(failures)} failed")

    if args.log and failures:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with open(args.log, "w", encoding="utf-8") as log:
            log.write("Objax validation report\n")
            log.write(f"generated : {timestamp}\n")
            log.write(f"directory : {args.dir}\n")
            log.write(f"total     : {len(scripts)} file(s), {len(failures)} failed\n")
            log.write("=" * 72 + "\n\n")
            for rel, diags in failures:
                log.write(f"FILE: {rel}\n")
                log.write(diags.report() + "\n")
                log.write("-" * 72 + "\n\n")
        print(f"report written to {args.log}")

    return 1 if failures else 0


# ── entry ────────────────────────────────────────────────────────────────────

def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='objaxcc', description="Objax language front-end")
    parser.add_argument('-v', '--verbose', action='count', default=0,
                        help="more logging (-v info, -vv debug)")
    parser.add_argument('--grammar', help="use this .lark grammar instead of the built-in one")
    sub = parser.add_subparsers(dest='command', required=True)

    p_run = sub.add_parser('run', help="execute a source file and print the result as JSON")
    p_run.add_argument('file')
    p_run.set_defaults(func=cmd_run)

    p_tok = sub.add_parser('tokens', help="dump tokens")
    p_tok.add_argument('file')
    p_tok.set_defaults(func=cmd_tokens)

    p_tree = sub.add_parser('tree', help="pretty-print the parse tree")
    p_tree.add_argument('file')
    p_tree.set_defaults(func=cmd_tree)

    p_val = sub.add_parser('validate', help="check every .objax file in a directory")
    p_val.add_argument('dir')
    p_val.add_argument('--log', help="write a failure report to this file")
    p_val.set_defaults(func=cmd_validate)

    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    level = {0: logging.WARNING, 1: logging.INFO}.get(args.verbose, logging.DEBUG)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    frontend = ObjaxFrontend(grammar_file=args.grammar)
    try:
        return args.func(frontend, args)
    except OSError as e:
        logger.error("%s", e)
        return 2


if __name__ == '__main__':
    sys.exit(main())

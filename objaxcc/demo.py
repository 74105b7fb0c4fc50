#!/usr/bin/env python3
"""
objaxcc usage examples
======================
  1. execute an inline snippet and print the extracted classes
  2. look at the intermediate stages (tokens, Lark tree, typed CST)
  3. see how errors are reported
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from objaxcc import ObjaxFrontend


SAMPLE_SOURCE = r"""
// a task list
define Task
Task has field "title"
Task has field "done" has default "no"

define Project
Project has field "name"
"""

BROKEN_SOURCE = r"""
define Task
Task has field title
define Note
Note has "text"
define Tag
"""


def demo_inline(frontend: ObjaxFrontend):
    print("=" * 60)
    print("Example 1: execute inline source")
    print("=" * 60)

    result = frontend.execute(SAMPLE_SOURCE)
    if result.errors:
        print('\n'.join(result.errors))
        return result

    for cls in result.classes:
        print(f"class {cls.name}")
        for f in cls.fields:
            print(f"  field {f.name!r}  default={f.default_value!r}")
    return result


def demo_stages(frontend: ObjaxFrontend):
    print("=" * 60)
    print("Example 2: intermediate stages")
    print("=" * 60)

    lexed = frontend.tokenize_only(SAMPLE_SOURCE)
    print(f"{len(lexed.tokens)} tokens, first five:")
    for tok in lexed.tokens[:5]:
        print(f"  {tok}")

    tree = frontend.parse_only(SAMPLE_SOURCE)
    print("\nLark tree:")
    print(tree.pretty())

    cst = frontend.cst_only(SAMPLE_SOURCE)
    print("typed CST statements:", cst.statements)


def demo_errors(frontend: ObjaxFrontend):
    print("=" * 60)
    print("Example 3: diagnostics")
    print("=" * 60)

    result = frontend.process_string(BROKEN_SOURCE, source_name="broken.objax")
    print(result.diags.report())

    # one lexical error stops the pipeline before parsing
    print(frontend.execute('define Task @@@').errors)


if __name__ == '__main__':
    frontend = ObjaxFrontend()
    demo_inline(frontend)
    demo_stages(frontend)
    demo_errors(frontend)

"""
Objax pipeline
==============
Chains tokenizer → grammar engine → CST transformer → extractor
behind one call.

Every stage collects its errors instead of raising. Once a stage has
reported an error the pipeline stops and returns what it has, so a
lexical error means no parse and a syntax error means no extraction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lark import Tree

from .error import DiagnosticBag
from .lexer import LexResult, Token, tokenize
from .semantic.extractor import Extractor
from .semantic.model import ExecutionResult, Program
from .tree.parser import ObjaxParser
from .tree.transformer import ObjaxTransformer, ProgramNode

logger = logging.getLogger(__name__)


# ─── result object ───────────────────────────────────────────────────────────

@dataclass
class FrontendResult:
    """Everything the pipeline produced for one source string."""
    source_name: str
    tokens:      List[Token] = field(default_factory=list)
    cst:         Optional[ProgramNode] = None   # None: parsing failed or never ran
    program:     Optional[Program] = None       # None: extraction never ran
    diags:       DiagnosticBag = field(default_factory=DiagnosticBag)

    @property
    def success(self) -> bool:
        return self.program is not None and not self.diags.has_errors

    def to_execution_result(self) -> ExecutionResult:
        if self.diags.has_errors or self.program is None:
            return ExecutionResult(errors=self.diags.messages())
        return ExecutionResult(classes=list(self.program.classes),
                               instances=list(self.program.instances))


# ─── main pipeline ──────────────────────────────────────────────────────────

class ObjaxFrontend:
    """
    Objax language front-end.

    Steps:
      1. Lexer            → tokens
      2. ObjaxParser      → Lark CST (LALR, with statement-level recovery)
      3. ObjaxTransformer → typed CST
      4. Extractor        → Program (classes + fields)

    Usage::

        frontend = ObjaxFrontend()
        result = frontend.execute('define Task\\nTask has field "title"')
        result.classes[0].fields[0].name    # 'title'
    """

    def __init__(self, grammar_file: str | Path = None, grammar_text: str = None):
        """
        Args:
            grammar_file: path of a .lark grammar (defaults to the packaged objax.lark)
            grammar_text: grammar source, used instead of grammar_file when given
        """
        self._parser = ObjaxParser(grammar_file=grammar_file, grammar_text=grammar_text)
        self._transformer = ObjaxTransformer()

    # ── entry points ───────────────────────────────────────────────────────

    def execute(self, source: str) -> ExecutionResult:
        """Run the whole pipeline; never raises."""
        return self.process_string(source).to_execution_result()

    def process_file(self, path: str | Path) -> FrontendResult:
        """Run the pipeline over a UTF-8 source file."""
        path = Path(path)
        if not path.exists():
            result = FrontendResult(source_name=str(path))
            result.diags.error(f"file not found: {path}")
            return result
        source = path.read_text(encoding='utf-8', errors='replace')
        return self.process_string(source, source_name=str(path))

    def process_string(self, source: str, source_name: str = '<input>') -> FrontendResult:
        result = FrontendResult(source_name=source_name)
        diags = result.diags

        try:
            # ── Step 1: tokens ───────────────────────────────────────────
            lexed = tokenize(source)
            result.tokens = lexed.tokens
            if lexed.errors:
                diags.extend(lexed.errors)
                logger.debug("%s: %d lexical error(s)", source_name, len(lexed.errors))
                return result

            # ── Step 2: CST ──────────────────────────────────────────────
            parsed = self._parser.parse(lexed.tokens)
            if parsed.errors:
                diags.extend(parsed.errors)
                logger.debug("%s: %d syntax error(s)", source_name, len(parsed.errors))
                return result
            result.cst = self._transformer.transform(parsed.tree)

            # ── Step 3: program model ────────────────────────────────────
            result.program = Extractor().extract(result.cst)
        except Exception as e:
            logger.exception("internal error while processing %s", source_name)
            diags.error(f"Internal error: {type(e).__name__}: {e}")
            result.program = None

        return result

    def check(self, source: str, source_name: str = '<input>') -> Program:
        """Fail-fast variant: raises ObjaxError when the source has errors."""
        result = self.process_string(source, source_name)
        result.diags.raise_if_errors()
        return result.program

    # ── debugging helpers ──────────────────────────────────────────────────

    def tokenize_only(self, source: str) -> LexResult:
        return tokenize(source)

    def parse_only(self, source: str) -> Tree:
        """Lark tree of ``source``; syntax errors are dropped (debugging use)."""
        return self._parser.parse(tokenize(source).tokens).tree

    def cst_only(self, source: str) -> ProgramNode:
        return self._transformer.transform(self.parse_only(source))


_default_frontend: Optional[ObjaxFrontend] = None


def default_frontend() -> ObjaxFrontend:
    """Shared frontend; it only holds the compiled grammar."""
    global _default_frontend
    if _default_frontend is None:
        _default_frontend = ObjaxFrontend()
    return _default_frontend


def execute(source: str) -> ExecutionResult:
    """Execute ``source`` with the shared frontend."""
    return default_frontend().execute(source)

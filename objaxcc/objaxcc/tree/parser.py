"""
Objax grammar engine
====================
Runs the LALR parser generated by Lark from ``objax.lark`` over the
token list produced by :mod:`objaxcc.lexer`.

Tokens are fed one at a time through Lark's interactive parser, so a
syntax error does not abort the whole parse:

  1. the error is recorded as a ``ParseError``
  2. the parser is rolled back to its state before the broken statement
  3. tokens are skipped up to the next ``define`` (statement boundary)

The result is the ``program`` tree built from the statements that did
parse, plus every error found on the way.
"""

from __future__ import annotations

import logging
from copy import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from lark import Lark, Token as LarkToken, Tree
from lark.exceptions import UnexpectedToken

from ..error import ParseError
from ..lexer import Token, TokenType

logger = logging.getLogger(__name__)

GRAMMAR_FILE = Path(__file__).with_name('objax.lark')

END = '$END'


@dataclass
class ParseResult:
    tree:   Optional[Tree] = None
    errors: List[ParseError] = field(default_factory=list)


def to_lark_token(tok: Token) -> LarkToken:
    """objaxcc Token → Lark Token (type name, image and positions kept)"""
    newlines = tok.image.count('\n')
    if newlines:
        end_column = len(tok.image) - tok.image.rfind('\n')
    else:
        end_column = tok.column + len(tok.image)
    return LarkToken(tok.type.name, tok.image,
                     start_pos=tok.offset, line=tok.line, column=tok.column,
                     end_line=tok.line + newlines, end_column=end_column,
                     end_pos=tok.end_offset)


def from_lark_token(tok: LarkToken) -> Token:
    """Lark Token → objaxcc Token"""
    return Token(TokenType[tok.type], str(tok), tok.start_pos, tok.line, tok.column)


def _open_rule(value_stack) -> str:
    """
    Name of the innermost grammar rule still being matched.
    Worked out from the tokens shifted since the last completed subtree.
    """
    trailing = []
    for item in reversed(value_stack):
        if not isinstance(item, LarkToken):
            break
        trailing.append(item.type)
    trailing.reverse()

    if not trailing:
        top = getattr(value_stack[-1], 'data', '') if value_stack else 'program'
        if 'class_body' in top or 'class_definition' in top:
            return 'class_definition'
        return 'program'
    if trailing[0] == 'DEFINE':
        trailing = trailing[2:]         # define + class name
        if not trailing:
            return 'class_definition'
    # IDENTIFIER has field "name" | has default literal
    if len(trailing) >= 7:
        return 'class_definition'      # default clause already complete
    return 'default_clause' if len(trailing) > 4 else 'field_declaration'


class ObjaxParser:
    """
    Objax grammar engine.

    The compiled Lark parser is immutable and can be shared; every call
    to ``parse`` works on its own interactive parser and token cursor.

    Usage::

        parser = ObjaxParser()
        result = parser.parse(tokenize(source).tokens)
        if result.errors:
            ...
    """

    def __init__(self, grammar_file: str | Path = None, grammar_text: str = None):
        if grammar_text is None:
            grammar_file = Path(grammar_file) if grammar_file else GRAMMAR_FILE
            grammar_text = grammar_file.read_text(encoding='utf-8')
        self._lark = Lark(
            grammar_text,
            start='program',
            parser='lalr',
            lexer='basic',
            propagate_positions=True,
        )

    @property
    def lark(self) -> Lark:
        return self._lark

    # ── error helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _make_error(exc: UnexpectedToken, ip, tok: Optional[Token]) -> ParseError:
        expected = tuple(sorted('end of input' if name == END else name
                                for name in exc.expected))
        rule = _open_rule(ip.parser_state.value_stack)
        if tok is None:
            return ParseError(rule, expected, 'end of input')
        return ParseError(rule, expected, tok.image, tok.line, tok.column, tok.offset)

    @staticmethod
    def _resync(tokens: List[Token], index: int) -> int:
        """Index of the next statement boundary at or after ``index``."""
        if tokens[index].type is TokenType.DEFINE:
            return index
        for j in range(index + 1, len(tokens)):
            if tokens[j].type is TokenType.DEFINE:
                return j
        return len(tokens)

    @staticmethod
    def _end_token(tokens: List[Token]) -> LarkToken:
        if tokens:
            return LarkToken.new_borrow_pos(END, '', to_lark_token(tokens[-1]))
        return LarkToken(END, '', 0, 1, 1)

    @staticmethod
    def _snapshot(ip):
        """
        Copy of ``ip`` that later feeding cannot change.
        LALR reductions append to the children list of the subtree on top
        of the value stack, so those lists are copied too.
        """
        snap = ip.copy(deepcopy_values=False)
        stack = snap.parser_state.value_stack
        for idx, item in enumerate(stack):
            if isinstance(item, Tree):
                item = copy(item)
                item.children = list(item.children)
                stack[idx] = item
        return snap

    # ── entry ──────────────────────────────────────────────────────────────

    def parse(self, tokens: List[Token]) -> ParseResult:
        errors: List[ParseError] = []
        ip = self._lark.parse_interactive()
        checkpoint = self._snapshot(ip)   # state before the current statement

        i = 0
        while i < len(tokens):
            tok = tokens[i]
            candidate = self._snapshot(ip) if tok.type is TokenType.DEFINE else None
            try:
                ip.feed_token(to_lark_token(tok))
            except UnexpectedToken as exc:
                error = self._make_error(exc, ip, tok)
                errors.append(error)
                # roll back past the broken statement
                ip = self._snapshot(checkpoint)
                nxt = self._resync(tokens, i)
                logger.info("syntax error at %d:%d, skipping %d token(s)",
                            tok.line, tok.column, nxt - i)
                i = nxt
                continue
            if candidate is not None:
                checkpoint = candidate
            i += 1

        end = self._end_token(tokens)
        try:
            tree = ip.feed_token(end)
        except UnexpectedToken as exc:
            errors.append(self._make_error(exc, ip, None))
            ip = self._snapshot(checkpoint)
            tree = ip.feed_token(end)

        logger.debug("parsed %d token(s), %d syntax error(s)", len(tokens), len(errors))
        return ParseResult(tree, errors)

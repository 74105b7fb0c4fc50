"""
Objax Lexer
===========
Turns Objax source text into a token list.

Patterns are tried in a fixed registration order at every position and
the first one that matches wins. Keyword patterns carry an explicit
word-boundary check, so ``default123`` stays one identifier while
``default`` alone is the keyword.

Usage::

    result = Lexer('define Task').tokenize()
    result.tokens   # [Token(DEFINE, 'define', 1:1), Token(IDENTIFIER, 'Task', 1:8)]
    result.errors   # []
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional

from .error import LexError

logger = logging.getLogger(__name__)


class TokenType(Enum):
    """Token kinds, in registration (priority) order."""
    # skipped
    WHITESPACE = auto()
    COMMENT = auto()

    # keywords
    DEFINE = auto()
    HAS = auto()
    FIELD = auto()
    METHOD = auto()
    DEFAULT = auto()
    WITH = auto()
    DO = auto()
    IS = auto()
    A = auto()
    NEW = auto()
    SET = auto()
    OF = auto()
    TO = auto()
    MYSELF = auto()
    TRUE = auto()
    FALSE = auto()

    # literals
    NUMBER_LITERAL = auto()
    STRING_LITERAL = auto()

    # identifier
    IDENTIFIER = auto()


SKIPPED = frozenset({TokenType.WHITESPACE, TokenType.COMMENT})

KEYWORDS = {
    'define': TokenType.DEFINE,
    'has': TokenType.HAS,
    'field': TokenType.FIELD,
    'method': TokenType.METHOD,
    'default': TokenType.DEFAULT,
    'with': TokenType.WITH,
    'do': TokenType.DO,
    'is': TokenType.IS,
    'a': TokenType.A,
    'new': TokenType.NEW,
    'set': TokenType.SET,
    'of': TokenType.OF,
    'to': TokenType.TO,
    'myself': TokenType.MYSELF,
    'true': TokenType.TRUE,
    'false': TokenType.FALSE,
}

_WORD_END = r'(?![A-Za-z0-9_])'


def _build_patterns():
    patterns = [
        (TokenType.WHITESPACE, re.compile(r'\s+')),
        (TokenType.COMMENT, re.compile(r'//[^\n\r]*')),
    ]
    for word, token_type in KEYWORDS.items():
        patterns.append((token_type, re.compile(re.escape(word) + _WORD_END)))
    patterns += [
        (TokenType.NUMBER_LITERAL, re.compile(r'\d+(?:\.\d+)?')),
        (TokenType.STRING_LITERAL, re.compile(r'"[^"]*"')),
        (TokenType.IDENTIFIER, re.compile(r'[a-zA-Z_][a-zA-Z0-9_]*')),
    ]
    return tuple(patterns)


# (TokenType, compiled regex) pairs; order is priority
PATTERNS = _build_patterns()


@dataclass(frozen=True)
class Token:
    """A classified lexeme."""
    type: TokenType
    image: str
    offset: int
    line: int
    column: int

    @property
    def end_offset(self) -> int:
        return self.offset + len(self.image)

    def __repr__(self):
        return f"Token({self.type.name}, {self.image!r}, {self.line}:{self.column})"


@dataclass
class LexResult:
    tokens: List[Token] = field(default_factory=list)
    errors: List[LexError] = field(default_factory=list)


class Lexer:
    """Objax lexer. One instance per source string; scan state is per instance."""

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: List[Token] = []
        self.errors: List[LexError] = []
        # start of the current run of unrecognised characters
        self._bad_start: Optional[tuple[int, int, int]] = None

    def advance(self, text: str):
        """Move past ``text``, keeping line/column in step."""
        self.pos += len(text)
        newlines = text.count('\n')
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind('\n')
        else:
            self.column += len(text)

    def match(self):
        """First registered pattern matching at the current position, or None."""
        for token_type, pattern in PATTERNS:
            m = pattern.match(self.source, self.pos)
            if m and m.end() > self.pos:
                return token_type, m.group()
        return None

    def _flush_bad_run(self):
        if self._bad_start is None:
            return
        offset, line, column = self._bad_start
        error = LexError(offset, line, column, self.source[offset:self.pos])
        logger.debug("lex error at %d:%d: %r", line, column, error.text)
        self.errors.append(error)
        self._bad_start = None

    def tokenize(self) -> LexResult:
        """Scan the whole source, returning tokens and lexical errors."""
        while self.pos < len(self.source):
            matched = self.match()
            if matched is None:
                if self._bad_start is None:
                    self._bad_start = (self.pos, self.line, self.column)
                self.advance(self.source[self.pos])
                continue

            self._flush_bad_run()
            token_type, image = matched
            if token_type not in SKIPPED:
                self.tokens.append(Token(token_type, image, self.pos, self.line, self.column))
            self.advance(image)

        self._flush_bad_run()
        logger.debug("tokenized %d chars into %d tokens, %d error(s)",
                     len(self.source), len(self.tokens), len(self.errors))
        return LexResult(self.tokens, self.errors)


def tokenize(source: str) -> LexResult:
    """Tokenize ``source`` with a fresh lexer."""
    return Lexer(source).tokenize()

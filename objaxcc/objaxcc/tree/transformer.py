"""
Objax CST Transformer
=====================
Turns the generic Lark tree (rule name + children) into typed CST
nodes, one class per grammar rule.

Unlike an AST, the CST keeps every matched token: ``define``, ``has``,
``field`` and the rest are available on the nodes that matched them.

Usage::

    transformer = ObjaxTransformer()
    program = transformer.transform(lark_tree)    # → ProgramNode
"""

from dataclasses import dataclass, field
from typing import List, Optional

from lark import Transformer, v_args

from ..lexer import Token
from .parser import from_lark_token


# ──────────────────────────────────────────────────────────────────────────────
# CST node base class
# ──────────────────────────────────────────────────────────────────────────────

class CSTNode:
    """
    Common base of all CST nodes.

    Attributes:
        line, col: source position of the node's first token
    """
    line: int = -1
    col:  int = -1

    def _pos(self):
        return f"{self.line}:{self.col}"

    def __repr__(self):
        return f"{self.__class__.__name__}@{self._pos()}"


# ──────────────────────────────────────────────────────────────────────────────
# Nodes
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(repr=False)
class LiteralNode(CSTNode):
    token: Token = None


@dataclass(repr=False)
class DefaultClauseNode(CSTNode):
    """has default <literal>"""
    has:     Token = None
    default: Token = None
    literal: LiteralNode = None


@dataclass(repr=False)
class FieldDeclarationNode(CSTNode):
    """<Identifier> has field "<name>" [has default <literal>]"""
    class_name: Token = None
    has:        Token = None
    field_kw:   Token = None
    field_name: Token = None                 # string literal, quotes included
    default:    Optional[DefaultClauseNode] = None

    @property
    def default_value(self) -> Optional[LiteralNode]:
        return self.default.literal if self.default else None


@dataclass(repr=False)
class ClassBodyNode(CSTNode):
    field_declaration: FieldDeclarationNode = None


@dataclass(repr=False)
class ClassDefinitionNode(CSTNode):
    define: Token = None
    name:   Token = None
    body:   List[ClassBodyNode] = field(default_factory=list)

    def __repr__(self):
        return f"ClassDefinition({self.name.image if self.name else '?'})@{self._pos()}"


@dataclass(repr=False)
class StatementNode(CSTNode):
    class_definition: ClassDefinitionNode = None


@dataclass(repr=False)
class ProgramNode(CSTNode):
    statements: List[StatementNode] = field(default_factory=list)


# ──────────────────────────────────────────────────────────────────────────────
# Transformer
# ──────────────────────────────────────────────────────────────────────────────

class ObjaxTransformer(Transformer):
    """
    Lark CST → typed CST nodes.
    Method names match the rule names in objax.lark.

    @v_args(meta=True) gives access to source positions.
    """

    # ── helpers ─────────────────────────────────────────────────────────────

    @staticmethod
    def _set_pos(node: CSTNode, meta) -> CSTNode:
        if meta and not getattr(meta, 'empty', True):
            node.line = getattr(meta, 'line', -1)
            node.col  = getattr(meta, 'column', -1)
        return node

    def __default_token__(self, token):
        return from_lark_token(token)

    # ── rules ───────────────────────────────────────────────────────────────

    @v_args(meta=True)
    def program(self, meta, items):
        return self._set_pos(ProgramNode(statements=list(items)), meta)

    @v_args(meta=True)
    def statement(self, meta, items):
        return self._set_pos(StatementNode(class_definition=items[0]), meta)

    @v_args(meta=True)
    def class_definition(self, meta, items):
        # DEFINE IDENTIFIER class_body*
        define, name, *body = items
        node = ClassDefinitionNode(define=define, name=name, body=body)
        return self._set_pos(node, meta)

    @v_args(meta=True)
    def class_body(self, meta, items):
        return self._set_pos(ClassBodyNode(field_declaration=items[0]), meta)

    @v_args(meta=True)
    def field_declaration(self, meta, items):
        # IDENTIFIER HAS FIELD STRING_LITERAL default_clause?
        class_name, has, field_kw, field_name = items[:4]
        default = items[4] if len(items) > 4 else None
        node = FieldDeclarationNode(class_name=class_name, has=has, field_kw=field_kw,
                                    field_name=field_name, default=default)
        return self._set_pos(node, meta)

    @v_args(meta=True)
    def default_clause(self, meta, items):
        has, default, literal = items
        node = DefaultClauseNode(has=has, default=default, literal=literal)
        return self._set_pos(node, meta)

    @v_args(meta=True)
    def literal(self, meta, items):
        return self._set_pos(LiteralNode(token=items[0]), meta)

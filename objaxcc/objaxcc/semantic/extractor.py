"""
Objax extractor
===============
Walks the typed CST and builds the program model:

  - one ClassDefinition per ``define`` statement, in source order
  - one FieldDefinition per field declaration in the class body,
    name taken from the string literal with its quotes stripped

The ``has default`` literal is parsed but not evaluated: every field's
default value stays None.

The extractor reports no errors of its own. Node types it does not
know are skipped.
"""

from __future__ import annotations

import logging

from .model import ClassDefinition, FieldDefinition, Program
from ..tree.transformer import (
    CSTNode, ProgramNode, StatementNode, ClassDefinitionNode,
    ClassBodyNode, FieldDeclarationNode,
)

logger = logging.getLogger(__name__)


def strip_quotes(image: str) -> str:
    """Drop the first and last character (the literal's delimiters)."""
    return image[1:-1]


class Extractor:
    """
    CST → Program.

    Usage::

        program = Extractor().extract(program_node)
        program.classes   # [ClassDefinition('Task', fields=['title'])]
    """

    def __init__(self):
        self.program = Program()

    def extract(self, root: ProgramNode) -> Program:
        self._visit(root)
        logger.debug("extracted %d class(es)", len(self.program.classes))
        return self.program

    # ══════════════════════════════════════════════════════════════════════
    # dispatch
    # ══════════════════════════════════════════════════════════════════════

    def _visit(self, node: CSTNode):
        if node is None:
            return None
        method = '_visit_' + type(node).__name__
        handler = getattr(self, method, self._visit_default)
        return handler(node)

    def _visit_default(self, node):
        return None

    # ══════════════════════════════════════════════════════════════════════
    # nodes
    # ══════════════════════════════════════════════════════════════════════

    def _visit_ProgramNode(self, node: ProgramNode):
        for stmt in node.statements:
            self._visit(stmt)

    def _visit_StatementNode(self, node: StatementNode):
        class_def = self._visit(node.class_definition)
        if class_def is not None:
            self.program.classes.append(class_def)

    def _visit_ClassDefinitionNode(self, node: ClassDefinitionNode) -> ClassDefinition:
        class_def = ClassDefinition(name=node.name.image)
        for body in node.body:
            field_def = self._visit(body)
            if field_def is not None:
                class_def.fields.append(field_def)
        return class_def

    def _visit_ClassBodyNode(self, node: ClassBodyNode):
        return self._visit(node.field_declaration)

    def _visit_FieldDeclarationNode(self, node: FieldDeclarationNode) -> FieldDefinition:
        # TODO: evaluate node.default_value once literal defaults get a runtime meaning
        return FieldDefinition(name=strip_quotes(node.field_name.image))

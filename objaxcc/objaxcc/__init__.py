"""
objaxcc - Objax language front-end
==================================
Package layout:
  objaxcc/
    __init__.py          this file: public API
    error.py             diagnostics
    lexer.py             tokenizer
    tree/
      objax.lark         grammar
      parser.py          grammar engine (Lark LALR + error recovery)
      transformer.py     Lark tree → typed CST nodes
    semantic/
      model.py           Program / ClassDefinition / FieldDefinition
      extractor.py       CST → Program
    pipeline.py          ObjaxFrontend, execute()
    cli.py               command line

Quick start:

    from objaxcc import execute

    result = execute('''
        define Task
        Task has field "title"
        Task has field "done" has default "no"
    ''')
    if result.errors:
        print('\\n'.join(result.errors))
    else:
        for cls in result.classes:
            print(cls.name, cls.field_names)
"""

from .pipeline import ObjaxFrontend, FrontendResult, execute, default_frontend
from .error import DiagnosticBag, Diagnostic, LexError, ParseError, ObjaxError
from .lexer import Lexer, LexResult, Token, TokenType, tokenize
from .semantic.model import (
    Program, ExecutionResult, ClassDefinition, FieldDefinition,
    MethodDefinition, InstanceDefinition,
)

__version__ = '0.1.0'

__all__ = [
    'ObjaxFrontend', 'FrontendResult', 'execute', 'default_frontend',
    'DiagnosticBag', 'Diagnostic', 'LexError', 'ParseError', 'ObjaxError',
    'Lexer', 'LexResult', 'Token', 'TokenType', 'tokenize',
    'Program', 'ExecutionResult', 'ClassDefinition', 'FieldDefinition',
    'MethodDefinition', 'InstanceDefinition',
]

"""A tree-walking interpreter for the Lox scripting language: lexer, parser, tree printer, evaluator and command."""

__version__ = "0.1.0"
__all__ = ["cli", "interpreter", "lexer", "parser", "printer", "syntax"]
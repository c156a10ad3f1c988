"""Syntax tree nodes produced by the parser."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from lox.lexer import Token

Literal = Union[str, float, bool, None]


class Expr:
    """Base class of all expression nodes."""

    __slots__ = ()


class Stmt:
    """Base class of all statement nodes."""

    __slots__ = ()


@dataclass(frozen=True)
class AssignExpr(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class BinaryExpr(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class CallExpr(Expr):
    callee: Expr
    paren: Token
    arguments: tuple[Expr, ...]


@dataclass(frozen=True)
class GetExpr(Expr):
    object: Expr
    name: Token


@dataclass(frozen=True)
class GroupingExpr(Expr):
    expression: Expr


@dataclass(frozen=True)
class LiteralExpr(Expr):
    """A literal; ``None`` stands for ``nil``."""

    value: Literal = None


@dataclass(frozen=True)
class LogicalExpr(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class SetExpr(Expr):
    object: Expr
    name: Token
    value: Expr


@dataclass(frozen=True)
class SuperExpr(Expr):
    keyword: Token
    method: Token


@dataclass(frozen=True)
class ThisExpr(Expr):
    keyword: Token


@dataclass(frozen=True)
class UnaryExpr(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class VariableExpr(Expr):
    name: Token


@dataclass(frozen=True)
class BlockStmt(Stmt):
    statements: tuple[Stmt, ...]


@dataclass(frozen=True)
class ClassStmt(Stmt):
    name: Token
    superclass: Optional[Token]
    methods: tuple[FunctionStmt, ...]


@dataclass(frozen=True)
class ExpressionStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class FunctionStmt(Stmt):
    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]


@dataclass(frozen=True)
class IfStmt(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt] = None


@dataclass(frozen=True)
class PrintStmt(Stmt):
    expression: Expr


@dataclass(frozen=True)
class ReturnStmt(Stmt):
    keyword: Token
    value: Optional[Expr] = None


@dataclass(frozen=True)
class VarStmt(Stmt):
    name: Token
    initializer: Optional[Expr] = None


@dataclass(frozen=True)
class WhileStmt(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class ForStmt(Stmt):
    initializer: Optional[Stmt]
    condition: Optional[Expr]
    increment: Optional[Expr]
    body: Stmt
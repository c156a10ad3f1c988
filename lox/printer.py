"""Indented debug dump of syntax trees."""

from __future__ import annotations

from typing import Iterator

from lox.syntax import (
    AssignExpr,
    BinaryExpr,
    BlockStmt,
    CallExpr,
    ClassStmt,
    Expr,
    ExpressionStmt,
    ForStmt,
    FunctionStmt,
    GetExpr,
    GroupingExpr,
    IfStmt,
    LiteralExpr,
    LogicalExpr,
    PrintStmt,
    ReturnStmt,
    SetExpr,
    Stmt,
    SuperExpr,
    ThisExpr,
    UnaryExpr,
    VarStmt,
    VariableExpr,
    WhileStmt,
)


def _debug_number(value: float) -> str:
    if value != value:
        return "NaN"
    text = repr(value)
    if "e" in text:
        mantissa, exponent = text.split("e")
        return f"{mantissa}e{int(exponent)}"
    return text


def _debug_string(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )
    return f'"{escaped}"'


def _debug_literal(value: object) -> str:
    if value is None:
        return "None"
    if isinstance(value, bool):
        return f"Some(Boolean({'true' if value else 'false'}))"
    if isinstance(value, (int, float)):
        return f"Some(Number({_debug_number(float(value))}))"
    return f"Some(String({_debug_string(str(value))}))"


class AstPrinter:
    """Renders statements and expressions as indented outline text."""

    def format_expr(self, expr: Expr, indent: int = 0) -> str:
        """Return the outline of ``expr`` as text."""
        return "\n".join(self._expr_lines(expr, indent))

    def format_stmt(self, stmt: Stmt, indent: int = 0) -> str:
        """Return the outline of ``stmt`` as text."""
        return "\n".join(self._stmt_lines(stmt, indent))

    def print_expr(self, expr: Expr, indent: int = 0) -> None:
        """Write the outline of ``expr`` to stdout."""
        print(self.format_expr(expr, indent))

    def print_stmt(self, stmt: Stmt, indent: int = 0) -> None:
        """Write the outline of ``stmt`` to stdout."""
        print(self.format_stmt(stmt, indent))

    def _expr_lines(self, expr: Expr, indent: int) -> Iterator[str]:
        prefix = "  " * indent
        match expr:
            case AssignExpr(name, value):
                yield f"{prefix}AssignExpr:"
                yield f"{prefix}  Name: {name.lexeme}"
                yield from self._expr_lines(value, indent + 1)
            case BinaryExpr(left, operator, right):
                yield f"{prefix}BinaryExpr:"
                yield f"{prefix}  Operator: {operator.lexeme}"
                yield from self._expr_lines(left, indent + 1)
                yield from self._expr_lines(right, indent + 1)
            case LogicalExpr(left, operator, right):
                yield f"{prefix}LogicalExpr:"
                yield f"{prefix}  Operator: {operator.lexeme}"
                yield from self._expr_lines(left, indent + 1)
                yield from self._expr_lines(right, indent + 1)
            case CallExpr(callee, _, arguments):
                yield f"{prefix}CallExpr:"
                yield f"{prefix}  Callee:"
                yield from self._expr_lines(callee, indent + 1)
                yield f"{prefix}  Arguments:"
                for argument in arguments:
                    yield from self._expr_lines(argument, indent + 2)
            case GroupingExpr(expression):
                yield f"{prefix}GroupingExpr:"
                yield from self._expr_lines(expression, indent + 1)
            case LiteralExpr(value):
                yield f"{prefix}LiteralExpr: {_debug_literal(value)}"
            case VariableExpr(name):
                yield f"{prefix}VariableExpr: {name.lexeme}"
            case UnaryExpr(operator, right):
                yield f"{prefix}UnaryExpr:"
                yield f"{prefix}  Operator: {operator.lexeme}"
                yield from self._expr_lines(right, indent + 1)
            case SuperExpr(keyword, method):
                yield f"{prefix}SuperExpr:"
                yield f"{prefix}  Keyword: {keyword.lexeme}"
                yield f"{prefix}  Method: {method.lexeme}"
            case ThisExpr(keyword):
                yield f"{prefix}ThisExpr: {keyword.lexeme}"
            case SetExpr(obj, name, value):
                yield f"{prefix}SetExpr:"
                yield f"{prefix}  Object:"
                yield from self._expr_lines(obj, indent + 1)
                yield f"{prefix}  Property: {name.lexeme}"
                yield f"{prefix}  Value:"
                yield from self._expr_lines(value, indent + 1)
            case GetExpr(obj, name):
                yield f"{prefix}GetExpr:"
                yield f"{prefix}  Object:"
                yield from self._expr_lines(obj, indent + 1)
                yield f"{prefix}  Property: {name.lexeme}"
            case _:
                yield f"{prefix}(Unhandled Expression Type)"

    def _stmt_lines(self, stmt: Stmt, indent: int) -> Iterator[str]:
        prefix = "  " * indent
        match stmt:
            case ExpressionStmt(expression):
                yield f"{prefix}ExpressionStmt:"
                yield from self._expr_lines(expression, indent + 1)
            case ClassStmt(name, superclass, methods):
                yield f"{prefix}ClassStmt:"
                yield f"{prefix}  Name: {name.lexeme}"
                if superclass is not None:
                    yield f"{prefix}  SuperClassName: {superclass.lexeme}"
                yield f"{prefix}  <Methods>"
                for method in methods:
                    yield from self._stmt_lines(method, indent + 1)
                yield f"{prefix}  </Methods>"
            case FunctionStmt(name, params, body):
                yield f"{prefix}FunctionStmt:"
                yield f"{prefix}  Name: {name.lexeme}"
                yield f"{prefix}  <Params>"
                for param in params:
                    yield f"{prefix}    - {param.lexeme}"
                yield f"{prefix}  </Params>"
                yield f"{prefix}  <Body>"
                for inner in body:
                    yield from self._stmt_lines(inner, indent + 1)
                yield f"{prefix}  </Body>"
            case VarStmt(name, initializer):
                yield f"{prefix}VarStmt:"
                yield f"{prefix}  Name: {name.lexeme}"
                if initializer is not None:
                    yield f"{prefix}  Initializer:"
                    yield from self._expr_lines(initializer, indent + 1)
            case PrintStmt(expression):
                yield f"{prefix}PrintStmt:"
                yield from self._expr_lines(expression, indent + 1)
            case ReturnStmt(_, value):
                yield f"{prefix}ReturnStmt:"
                yield f"{prefix}  ReturnValue:"
                if value is not None:
                    yield from self._expr_lines(value, indent + 1)
                else:
                    yield f"{prefix}    Nil"
            case BlockStmt(statements):
                yield f"{prefix}BlockStmt:"
                yield f"{prefix}  <Stmts>"
                for inner in statements:
                    yield from self._stmt_lines(inner, indent + 1)
                yield f"{prefix}  </Stmts>"
            case IfStmt(condition, then_branch, else_branch):
                yield f"{prefix}IfStmt:"
                yield f"{prefix}  Condition:"
                yield from self._expr_lines(condition, indent + 1)
                yield f"{prefix}  Then Branch:"
                yield from self._stmt_lines(then_branch, indent + 1)
                if else_branch is not None:
                    yield f"{prefix}  Else Branch:"
                    yield from self._stmt_lines(else_branch, indent + 1)
            case ForStmt(initializer, condition, increment, body):
                yield f"{prefix}ForStmt:"
                if initializer is not None:
                    yield f"{prefix}  Initializer:"
                    yield from self._stmt_lines(initializer, indent + 1)
                if condition is not None:
                    yield f"{prefix}  Condition:"
                    yield from self._expr_lines(condition, indent + 1)
                if increment is not None:
                    yield f"{prefix}  Increment:"
                    yield from self._expr_lines(increment, indent + 1)
                yield f"{prefix}  Body:"
                yield from self._stmt_lines(body, indent + 1)
            case WhileStmt(condition, body):
                yield f"{prefix}  Condition:"
                yield from self._expr_lines(condition, indent + 1)
                yield f"{prefix}  Body:"
                yield from self._stmt_lines(body, indent + 1)
            case _:
                yield f"{prefix}(Unhandled Statement Type)"
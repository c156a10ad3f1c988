import dataclasses

import pytest

from lox.lexer import Token, TokenType
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

PLUS = Token(TokenType.PLUS, 1, "+")
X = Token(TokenType.ID, 1, "x")


def make_sum():
    return BinaryExpr(LiteralExpr(1.0), PLUS, LiteralExpr(2.0))


def test_structurally_equal_trees_compare_equal():
    assert make_sum() == make_sum()
    assert make_sum() != BinaryExpr(LiteralExpr(1.0), PLUS, LiteralExpr(3.0))


def test_nodes_are_immutable():
    node = VariableExpr(X)
    with pytest.raises(dataclasses.FrozenInstanceError):
        node.name = Token(TokenType.ID, 1, "y")


def test_literal_defaults_to_nil():
    assert LiteralExpr().value is None
    assert LiteralExpr() == LiteralExpr(None)


def test_optional_statement_parts_default_to_none():
    keyword = Token(TokenType.RETURN, 2, "return")
    assert ReturnStmt(keyword).value is None
    assert VarStmt(X).initializer is None
    assert IfStmt(LiteralExpr(True), PrintStmt(LiteralExpr("a"))).else_branch is None


@pytest.mark.parametrize(
    "node",
    [
        AssignExpr(X, LiteralExpr(1.0)),
        make_sum(),
        CallExpr(VariableExpr(X), Token(TokenType.RIGHT_PAREN, 1, ")"), ()),
        GetExpr(VariableExpr(X), X),
        GroupingExpr(LiteralExpr(True)),
        LogicalExpr(LiteralExpr(True), Token(TokenType.OR, 1, "or"), LiteralExpr(False)),
        SetExpr(VariableExpr(X), X, LiteralExpr("v")),
        SuperExpr(Token(TokenType.SUPER, 1, "super"), X),
        ThisExpr(Token(TokenType.THIS, 1, "this")),
        UnaryExpr(Token(TokenType.MINUS, 1, "-"), LiteralExpr(4.0)),
    ],
)
def test_expression_nodes_share_base(node):
    assert isinstance(node, Expr)
    assert not isinstance(node, Stmt)
    assert dataclasses.replace(node) == node


@pytest.mark.parametrize(
    "node",
    [
        BlockStmt(()),
        ClassStmt(X, None, ()),
        ExpressionStmt(LiteralExpr()),
        FunctionStmt(X, (), ()),
        PrintStmt(LiteralExpr("hi")),
        WhileStmt(LiteralExpr(False), BlockStmt(())),
        ForStmt(None, None, None, BlockStmt(())),
    ],
)
def test_statement_nodes_share_base(node):
    assert isinstance(node, Stmt)
    assert not isinstance(node, Expr)
    assert dataclasses.replace(node) == node


def test_nested_structure_keeps_children():
    body = (ReturnStmt(Token(TokenType.RETURN, 1, "return"), make_sum()),)
    func = FunctionStmt(X, (Token(TokenType.ID, 1, "a"),), body)
    klass = ClassStmt(Token(TokenType.ID, 1, "A"), X, (func,))
    assert klass.methods[0].body[0].value == make_sum()
    assert klass.superclass == X
    assert [p.lexeme for p in klass.methods[0].params] == ["a"]


def test_fields_are_accessible_by_name():
    node = make_sum()
    assert node.left == LiteralExpr(1.0)
    assert node.right.value == 2.0
    assert node.operator.lexeme == "+"
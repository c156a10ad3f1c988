"""Recursive-descent parser that turns tokens into syntax tree nodes."""

from __future__ import annotations

from typing import Callable, Iterable

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


class ParseError(Exception):
    """Raised when the token stream does not form a valid program."""

    def __init__(self, message: str, token: Token | None = None) -> None:
        super().__init__(message)
        self.token = token


class Parser:
    """Builds a list of statements from a token sequence ending in EOF."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].token_type is not TokenType.EOF:
            lineno = self.tokens[-1].lineno if self.tokens else 1
            self.tokens.append(Token(TokenType.EOF, lineno, ""))
        self.current = 0

    def parse(self) -> list[Stmt]:
        """Parse every statement up to the end of input."""
        statements = []
        while not self._is_at_end():
            statements.append(self._statement())
        return statements

    # Token stream helpers

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1]

    def _is_at_end(self) -> bool:
        return self._peek().token_type is TokenType.EOF

    def _advance(self) -> Token:
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _check(self, token_type: TokenType) -> bool:
        return not self._is_at_end() and self._peek().token_type is token_type

    def _match(self, *types: TokenType) -> bool:
        if any(self._check(token_type) for token_type in types):
            self._advance()
            return True
        return False

    def _error(self, message: str) -> ParseError:
        token = self._peek()
        return ParseError(f"At line {token.lineno} : {message}", token)

    def _consume(self, token_type: TokenType, message: str) -> Token:
        if self._check(token_type):
            return self._advance()
        raise self._error(message)

    # Statements

    def _statement(self) -> Stmt:
        if self._match(TokenType.LEFT_CURLY):
            return BlockStmt(self._block())
        if self._match(TokenType.CLASS):
            return self._class_stmt()
        if self._match(TokenType.FUN):
            return self._function_stmt()
        if self._match(TokenType.IF):
            return self._if_stmt()
        if self._match(TokenType.FOR):
            return self._for_stmt()
        if self._match(TokenType.PRINT):
            return self._print_stmt()
        if self._match(TokenType.RETURN):
            return self._return_stmt()
        if self._match(TokenType.VAR):
            return self._var_stmt()
        if self._match(TokenType.WHILE):
            return self._while_stmt()
        return self._expression_stmt()

    def _block(self) -> tuple[Stmt, ...]:
        statements = []
        while not self._check(TokenType.RIGHT_CURLY) and not self._is_at_end():
            statements.append(self._statement())
        self._consume(TokenType.RIGHT_CURLY, "Expect '}' after block.")
        return tuple(statements)

    def _class_stmt(self) -> ClassStmt:
        name = self._consume(TokenType.ID, "Expect class name.")
        superclass = None
        if self._match(TokenType.LESS):
            superclass = self._consume(TokenType.ID, "Expect superclass name.")
        self._consume(TokenType.LEFT_CURLY, "Expect '{' before class body.")

        methods = []
        while not self._check(TokenType.RIGHT_CURLY) and not self._is_at_end():
            methods.append(self._function_stmt())

        self._consume(TokenType.RIGHT_CURLY, "Expect '}' after class body.")
        return ClassStmt(name, superclass, tuple(methods))

    def _if_stmt(self) -> IfStmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")
        then_branch = self._statement()
        else_branch = self._statement() if self._match(TokenType.ELSE) else None
        return IfStmt(condition, then_branch, else_branch)

    def _for_stmt(self) -> ForStmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        initializer: Stmt | None
        if self._match(TokenType.SEMI):
            initializer = None
        elif self._match(TokenType.VAR):
            initializer = self._var_stmt()
        else:
            initializer = self._expression_stmt()

        condition = None if self._check(TokenType.SEMI) else self._expression()
        self._consume(TokenType.SEMI, "Expect ';' after loop condition.")

        increment = None if self._check(TokenType.RIGHT_PAREN) else self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self._statement()
        return ForStmt(initializer, condition, increment, body)

    def _while_stmt(self) -> WhileStmt:
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self._expression()
        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after while condition.")
        return WhileStmt(condition, self._statement())

    def _var_stmt(self) -> VarStmt:
        name = self._consume(TokenType.ID, "Expect variable name.")
        initializer = self._expression() if self._match(TokenType.ASSIGNOP) else None
        self._consume(TokenType.SEMI, "Expect ';' after variable declaration.")
        return VarStmt(name, initializer)

    def _expression_stmt(self) -> ExpressionStmt:
        expr = self._expression()
        self._consume(TokenType.SEMI, "Expect ';' after expression.")
        return ExpressionStmt(expr)

    def _print_stmt(self) -> PrintStmt:
        expr = self._expression()
        self._consume(TokenType.SEMI, "Expect ';' after value.")
        return PrintStmt(expr)

    def _return_stmt(self) -> ReturnStmt:
        keyword = self._previous()
        value = None if self._check(TokenType.SEMI) else self._expression()
        self._consume(TokenType.SEMI, "Expect ';' after return value.")
        return ReturnStmt(keyword, value)

    def _function_stmt(self) -> FunctionStmt:
        name = self._consume(TokenType.ID, "Expect function name.")
        self._consume(TokenType.LEFT_PAREN, "Expect '(' after function name.")

        params = []
        if not self._check(TokenType.RIGHT_PAREN):
            params.append(self._consume(TokenType.ID, "Expect parameter name."))
            while self._match(TokenType.COMMA):
                params.append(self._consume(TokenType.ID, "Expect parameter name."))

        self._consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")
        self._consume(TokenType.LEFT_CURLY, "Expect '{' before function body.")
        return FunctionStmt(name, tuple(params), self._block())

    # Expressions

    def _expression(self) -> Expr:
        return self._assignment()

    def _assignment(self) -> Expr:
        expr = self._logic_or()

        if self._match(TokenType.ASSIGNOP):
            equals = self._previous()
            value = self._assignment()
            if isinstance(expr, VariableExpr):
                return AssignExpr(expr.name, value)
            if isinstance(expr, GetExpr):
                return SetExpr(expr.object, expr.name, value)
            raise ParseError(
                f"At line {equals.lineno} : Invalid assignment target.", equals
            )

        return expr

    def _left_assoc(
        self,
        operand: Callable[[], Expr],
        types: tuple[TokenType, ...],
        node: Callable[[Expr, Token, Expr], Expr],
    ) -> Expr:
        expr = operand()
        while self._match(*types):
            operator = self._previous()
            expr = node(expr, operator, operand())
        return expr

    def _logic_or(self) -> Expr:
        return self._left_assoc(self._logic_and, (TokenType.OR,), LogicalExpr)

    def _logic_and(self) -> Expr:
        return self._left_assoc(self._equality, (TokenType.AND,), LogicalExpr)

    def _equality(self) -> Expr:
        return self._left_assoc(
            self._comparison, (TokenType.NOT_EQUAL, TokenType.EQUAL), BinaryExpr
        )

    def _comparison(self) -> Expr:
        return self._left_assoc(
            self._term,
            (
                TokenType.GREATER,
                TokenType.GREATER_EQUAL,
                TokenType.LESS,
                TokenType.LESS_EQUAL,
            ),
            BinaryExpr,
        )

    def _term(self) -> Expr:
        return self._left_assoc(
            self._factor, (TokenType.MINUS, TokenType.PLUS), BinaryExpr
        )

    def _factor(self) -> Expr:
        return self._left_assoc(self._unary, (TokenType.DIV, TokenType.STAR), BinaryExpr)

    def _unary(self) -> Expr:
        if self._match(TokenType.NOT, TokenType.MINUS):
            operator = self._previous()
            return UnaryExpr(operator, self._unary())
        return self._call()

    def _call(self) -> Expr:
        expr = self._primary()
        while True:
            if self._match(TokenType.LEFT_PAREN):
                expr = self._finish_call(expr)
            elif self._match(TokenType.DOT):
                name = self._consume(TokenType.ID, "Expect property name after '.'.")
                expr = GetExpr(expr, name)
            else:
                return expr

    def _finish_call(self, callee: Expr) -> CallExpr:
        arguments = []
        if not self._check(TokenType.RIGHT_PAREN):
            arguments.append(self._expression())
            while self._match(TokenType.COMMA):
                arguments.append(self._expression())
        paren = self._consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return CallExpr(callee, paren, tuple(arguments))

    def _primary(self) -> Expr:
        if self._match(TokenType.FALSE):
            return LiteralExpr(False)
        if self._match(TokenType.TRUE):
            return LiteralExpr(True)
        if self._match(TokenType.NIL):
            return LiteralExpr(None)
        if self._match(TokenType.NUMBER):
            return LiteralExpr(float(self._previous().lexeme))
        if self._match(TokenType.STRING):
            return LiteralExpr(self._previous().lexeme.strip('"'))
        if self._match(TokenType.ID):
            return VariableExpr(self._previous())
        if self._match(TokenType.LEFT_PAREN):
            expr = self._expression()
            self._consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return GroupingExpr(expr)
        if self._match(TokenType.THIS):
            return ThisExpr(self._previous())
        if self._match(TokenType.SUPER):
            keyword = self._previous()
            self._consume(TokenType.DOT, "Expect '.' after 'super'.")
            method = self._consume(TokenType.ID, "Expect superclass method name.")
            return SuperExpr(keyword, method)
        raise self._error("Unexpected expression.")


def parse(tokens: Iterable[Token]) -> list[Stmt]:
    """Parse ``tokens`` into a list of statements in one call."""
    return Parser(tokens).parse()
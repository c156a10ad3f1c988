"""Tree-walking evaluator for parsed Lox programs."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Iterable, Optional, TextIO, Union

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


class LoxRuntimeError(Exception):
    """Raised when a Lox program performs an invalid operation."""


class _Return(Exception):
    """Unwinds the stack from a ``return`` statement to its function call."""

    def __init__(self, value: Any) -> None:
        super().__init__()
        self.value = value


class Environment:
    """A scope of variable bindings, optionally nested in an outer scope."""

    def __init__(self, enclosing: Optional[Environment] = None) -> None:
        self.values: dict[str, Any] = {}
        self.enclosing = enclosing

    def define(self, name: str, value: Any) -> None:
        """Bind ``name`` in this scope, replacing any earlier binding."""
        self.values[name] = value

    def assign(self, name: str, value: Any) -> None:
        """Rebind an existing variable in the nearest scope that holds it."""
        scope: Optional[Environment] = self
        while scope is not None:
            if name in scope.values:
                scope.values[name] = value
                return
            scope = scope.enclosing
        raise LoxRuntimeError(f"Undefined variable '{name}'.")

    def get(self, name: str) -> Any:
        """Return the value bound to ``name``; raise KeyError if there is none."""
        scope: Optional[Environment] = self
        while scope is not None:
            if name in scope.values:
                return scope.values[name]
            scope = scope.enclosing
        raise KeyError(name)


@dataclass(eq=False)
class LoxFunction:
    """A user-defined function together with the scope it was declared in."""

    name: Token
    params: tuple[Token, ...]
    body: tuple[Stmt, ...]
    closure: Environment
    is_initializer: bool = False

    def call(self, interpreter: Interpreter, arguments: list[Any]) -> Any:
        """Run the body with ``arguments`` bound to the parameters."""
        environment = Environment(self.closure)
        for param, argument in zip(self.params, arguments):
            environment.define(param.lexeme, argument)
        try:
            interpreter.execute_block(self.body, environment)
        except _Return as signal:
            return signal.value
        return None

    def bind(self, instance: LoxInstance) -> LoxFunction:
        """Return a copy of this function with ``this`` bound to ``instance``."""
        environment = Environment(self.closure)
        environment.define("this", instance)
        return LoxFunction(
            self.name, self.params, self.body, environment, self.is_initializer
        )


@dataclass(eq=False)
class LoxClass:
    """A class: its methods and an optional superclass."""

    name: Token
    superclass: Optional[LoxClass] = None
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """Look ``name`` up here, then along the superclass chain."""
        klass: Optional[LoxClass] = self
        while klass is not None:
            if name in klass.methods:
                return klass.methods[name]
            klass = klass.superclass
        return None

    def call(self, interpreter: Interpreter, arguments: list[Any]) -> LoxInstance:
        """Create an instance, running ``init`` on it when one is defined."""
        instance = LoxInstance(self)
        initializer = self.find_method("init")
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)
        return instance


@dataclass(eq=False)
class LoxInstance:
    """An object created from a class, holding its own fields."""

    klass: LoxClass
    fields: dict[str, Any] = field(default_factory=dict)

    def get(self, name: str) -> Any:
        """Return a field, or a method bound to this instance."""
        if name in self.fields:
            return self.fields[name]
        method = self.klass.find_method(name)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(f"Undefined property '{name}'")

    def set(self, name: str, value: Any) -> None:
        """Store ``value`` in the field ``name``."""
        self.fields[name] = value


Value = Union[str, float, bool, None, LoxFunction, LoxClass, LoxInstance]


def is_truthy(value: Any) -> bool:
    """Only ``nil`` and ``false`` are falsey."""
    return not (value is None or value is False)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


def stringify(value: Any) -> str:
    """Render a value the way ``print`` shows it."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return _format_number(float(value))
    if isinstance(value, str):
        return value
    if isinstance(value, LoxFunction):
        return "<fn>"
    if isinstance(value, LoxClass):
        return "<class>"
    if isinstance(value, LoxInstance):
        return "<instance>"
    return str(value)


def _is_equal(left: Any, right: Any) -> bool:
    # Only primitive values compare equal; objects never do.
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_number(left) and _is_number(right):
        return float(left) == float(right)
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False


def _divide(left: float, right: float) -> float:
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


def _numbers(left: Any, right: Any) -> tuple[float, float]:
    if _is_number(left) and _is_number(right):
        return float(left), float(right)
    raise LoxRuntimeError("Operands must be numbers")


class Interpreter:
    """Executes statements, writing ``print`` output to ``output``."""

    def __init__(self, output: Optional[TextIO] = None) -> None:
        self.globals = Environment()
        self.environment = self.globals
        self.output = output

    def interpret(self, statements: Iterable[Stmt]) -> None:
        """Execute each top-level statement in order."""
        for stmt in statements:
            try:
                self.execute(stmt)
            except _Return:
                # A stray top-level return only ends its own statement.
                continue

    def execute_block(self, statements: Iterable[Stmt], environment: Environment) -> None:
        """Run ``statements`` in ``environment``, restoring the scope afterwards."""
        previous = self.environment
        self.environment = environment
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.environment = previous

    def _lookup(self, name: str) -> Any:
        try:
            return self.environment.get(name)
        except KeyError:
            return None

    def execute(self, stmt: Stmt) -> None:
        """Execute one statement."""
        match stmt:
            case BlockStmt(statements):
                self.execute_block(statements, Environment(self.environment))
            case ExpressionStmt(expression):
                self.evaluate(expression)
            case PrintStmt(expression):
                print(stringify(self.evaluate(expression)), file=self.output)
            case VarStmt(name, initializer):
                value = None if initializer is None else self.evaluate(initializer)
                self.environment.define(name.lexeme, value)
            case IfStmt(condition, then_branch, else_branch):
                if is_truthy(self.evaluate(condition)):
                    self.execute(then_branch)
                elif else_branch is not None:
                    self.execute(else_branch)
            case WhileStmt(condition, body):
                while is_truthy(self.evaluate(condition)):
                    self.execute(body)
            case ForStmt(initializer, condition, increment, body):
                self._execute_for(initializer, condition, increment, body)
            case FunctionStmt(name, params, body):
                function = LoxFunction(name, params, body, self.environment)
                self.environment.define(name.lexeme, function)
            case ReturnStmt(_, value):
                raise _Return(None if value is None else self.evaluate(value))
            case ClassStmt(name, superclass, methods):
                self._execute_class(name, superclass, methods)
            case _:
                raise TypeError(f"Unsupported statement: {stmt!r}")

    def _execute_for(
        self,
        initializer: Optional[Stmt],
        condition: Optional[Expr],
        increment: Optional[Expr],
        body: Stmt,
    ) -> None:
        previous = self.environment
        self.environment = Environment(previous)
        try:
            if initializer is not None:
                self.execute(initializer)
            while condition is None or is_truthy(self.evaluate(condition)):
                self.execute(body)
                if increment is not None:
                    self.evaluate(increment)
        finally:
            self.environment = previous

    def _execute_class(
        self,
        name: Token,
        superclass_name: Optional[Token],
        methods: Iterable[FunctionStmt],
    ) -> None:
        superclass: Optional[LoxClass] = None
        if superclass_name is not None:
            candidate = self._lookup(superclass_name.lexeme)
            if not isinstance(candidate, LoxClass):
                raise LoxRuntimeError("Superclass must be a class.")
            superclass = candidate

        method_scope = self.environment
        if superclass is not None:
            method_scope = Environment(self.environment)
            method_scope.define("super", superclass)

        table = {
            method.name.lexeme: LoxFunction(
                method.name,
                method.params,
                method.body,
                method_scope,
                method.name.lexeme == "init",
            )
            for method in methods
        }
        self.environment.define(name.lexeme, LoxClass(name, superclass, table))

    def evaluate(self, expr: Expr) -> Any:
        """Evaluate one expression and return its value."""
        match expr:
            case LiteralExpr(value):
                return float(value) if _is_number(value) else value
            case GroupingExpr(expression):
                return self.evaluate(expression)
            case UnaryExpr(operator, right):
                return self._unary(operator, self.evaluate(right))
            case BinaryExpr(left, operator, right):
                return self._binary(operator, self.evaluate(left), self.evaluate(right))
            case LogicalExpr(left, operator, right):
                return self._logical(left, operator, right)
            case VariableExpr(name):
                return self._lookup(name.lexeme)
            case AssignExpr(name, value):
                result = self.evaluate(value)
                self.environment.assign(name.lexeme, result)
                return result
            case CallExpr(callee, _, arguments):
                function = self.evaluate(callee)
                values = [self.evaluate(argument) for argument in arguments]
                if isinstance(function, (LoxFunction, LoxClass)):
                    return function.call(self, values)
                raise LoxRuntimeError("Can only call functions or classes")
            case ThisExpr(keyword):
                return self._lookup(keyword.lexeme)
            case GetExpr(obj, name):
                instance = self.evaluate(obj)
                if isinstance(instance, LoxInstance):
                    return instance.get(name.lexeme)
                raise LoxRuntimeError("Only instances have properties.")
            case SetExpr(obj, name, value):
                instance = self.evaluate(obj)
                result = self.evaluate(value)
                if isinstance(instance, LoxInstance):
                    instance.set(name.lexeme, result)
                    return result
                raise LoxRuntimeError("Only instances have fields.")
            case SuperExpr(_, method):
                return self._super(method)
            case _:
                raise TypeError(f"Unsupported expression: {expr!r}")

    def _unary(self, operator: Token, right: Any) -> Any:
        if operator.token_type is TokenType.MINUS:
            if _is_number(right):
                return -float(right)
            raise LoxRuntimeError("Expect number.")
        if operator.token_type is TokenType.NOT:
            return not is_truthy(right)
        raise LoxRuntimeError("Unknown unary operator")

    def _binary(self, operator: Token, left: Any, right: Any) -> Any:
        kind = operator.token_type
        if kind is TokenType.PLUS:
            if _is_number(left) and _is_number(right):
                return float(left) + float(right)
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError("Operands must be same type")
        if kind is TokenType.EQUAL:
            return _is_equal(left, right)
        if kind is TokenType.NOT_EQUAL:
            return not _is_equal(left, right)

        arithmetic = {
            TokenType.MINUS: lambda a, b: a - b,
            TokenType.STAR: lambda a, b: a * b,
            TokenType.DIV: _divide,
            TokenType.GREATER: lambda a, b: a > b,
            TokenType.GREATER_EQUAL: lambda a, b: a >= b,
            TokenType.LESS: lambda a, b: a < b,
            TokenType.LESS_EQUAL: lambda a, b: a <= b,
        }
        if kind not in arithmetic:
            raise LoxRuntimeError("Unsupported binary operator")
        a, b = _numbers(left, right)
        return arithmetic[kind](a, b)

    def _logical(self, left: Expr, operator: Token, right: Expr) -> Any:
        value = self.evaluate(left)
        if operator.token_type is TokenType.OR:
            return value if is_truthy(value) else self.evaluate(right)
        if operator.token_type is TokenType.AND:
            return value if not is_truthy(value) else self.evaluate(right)
        raise LoxRuntimeError(
            f"Unsupported logical operator: {operator.token_type.name}"
        )

    def _super(self, method: Token) -> LoxFunction:
        try:
            superclass = self.environment.get("super")
            instance = self.environment.get("this")
        except KeyError as missing:
            raise LoxRuntimeError(f"Cannot use 'super' here: no '{missing.args[0]}'.")
        if not (isinstance(superclass, LoxClass) and isinstance(instance, LoxInstance)):
            raise LoxRuntimeError("super error")
        found = superclass.find_method(method.lexeme)
        if found is None:
            raise LoxRuntimeError(f"Undefined property '{method.lexeme}'")
        return found.bind(instance)
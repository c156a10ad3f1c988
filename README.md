# lox

A small tree-walking interpreter for the Lox scripting language. It supports
variables, blocks, `if`, `while` and `for` loops, functions with closures,
and classes with methods, initializers, inheritance and `super` calls.

## Installation

```
pip install .
```

To run the tests, install the `test` extra and run pytest:

```
pip install .[test]
pytest
```

## Running a script

```
lox path/to/script.lox
```

The command reads the file as UTF-8 and then works in three stages:

1. It prints every token that the lexer produced, one per line, ending with the `Eof` token.
2. It prints an indented outline of the syntax tree of every statement.
3. It executes the program. Output from `print` statements goes to standard output.

If no file is given, or the file cannot be read, the command prints a message
to standard error and exits with status 1. A syntax error or a runtime error
is reported on standard error as `error: <message>`, and the exit status is 1.

An example script:

```
class Greeter {
  init(name) { this.name = name; }
  greet() { print "Hello, " + this.name; }
}

var g = Greeter("world");
g.greet();

for (var i = 0; i < 3; i = i + 1) {
  print i;
}
```

## The language as implemented

- The values are numbers, strings, `true`, `false`, `nil`, functions, classes and instances.
- `print` shows a whole number without a decimal point, so it shows `3` and not `3.0`. It shows `nil`, `true` and `false` as written. It shows functions as `<fn>`, classes as `<class>` and instances as `<instance>`.
- Only `nil` and `false` are falsey.
- `+` adds two numbers or joins two strings. `-`, `*`, `/` and the comparison operators need numbers.
- `==` and `!=` compare numbers, strings, booleans and `nil`. Two functions, classes or instances never compare equal, even when they are the same object.
- `and` and `or` short-circuit and return one of their operands.
- Reading a variable that was never declared gives `nil`. Assigning to one is an error.
- Calling a class creates an instance and runs its `init` method, if it has one. Methods are looked up along the superclass chain.
- Strings are written between double quotes and have no escape sequences. Comments are written as `// ...` or `/* ... */`.

## Using it as a library

```python
import io

from lox.interpreter import Interpreter
from lox.lexer import tokenize
from lox.parser import parse

statements = parse(tokenize("print 1 + 2;"))
out = io.StringIO()
Interpreter(output=out).interpret(statements)
assert out.getvalue() == "3\n"
```

The package has these modules:

- `lox.lexer` holds `TokenType`, `Token`, `Lexer` and `tokenize()`. `Lexer` can be iterated, and it collects the messages for any characters it did not recognise in `Lexer.errors`.
- `lox.syntax` holds the expression nodes (`AssignExpr`, `BinaryExpr`, `CallExpr`, `GetExpr`, `GroupingExpr`, `LiteralExpr`, `LogicalExpr`, `SetExpr`, `SuperExpr`, `ThisExpr`, `UnaryExpr`, `VariableExpr`) and the statement nodes (`BlockStmt`, `ClassStmt`, `ExpressionStmt`, `FunctionStmt`, `IfStmt`, `PrintStmt`, `ReturnStmt`, `VarStmt`, `WhileStmt`, `ForStmt`). All of them are frozen dataclasses.
- `lox.parser` holds `Parser`, `parse()` and `ParseError`.
- `lox.printer` holds `AstPrinter`. Its `format_stmt()` and `format_expr()` methods return the outline as text, and its `print_stmt()` and `print_expr()` methods write it to standard output.
- `lox.interpreter` holds `Interpreter`, `Environment`, `LoxFunction`, `LoxClass`, `LoxInstance`, `LoxRuntimeError`, `is_truthy()` and `stringify()`.
- `lox.cli` holds `main()`, which is the function behind the `lox` command.

`Interpreter` takes an optional `output` stream, so that you can collect what a
program prints.

## Errors

Syntax errors raise `ParseError`, whose message gives the line number. Runtime
errors raise `LoxRuntimeError`. These include the following:

- calling something that is not a function or a class
- applying arithmetic to values that are not numbers
- reading a property that does not exist
- assigning to a variable that was never declared
- inheriting from something that is not a class

The lexer does not stop at characters it does not recognise. It reports each
one on standard error, skips it and carries on.

## What it does not do

- There is no interactive prompt. The `lox` command only runs a file.
- There are no built-in functions such as a clock. The only way to produce output is the `print` statement.
- There is no static resolution pass. Variables are looked up by name when they are used.
- The number of arguments in a call is not checked. Extra arguments are ignored, and a missing parameter reads as `nil`.
- The `lox` command always prints the token list and the syntax tree before it runs the program. There is no option to turn this off.
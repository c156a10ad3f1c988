"""Command-line entry point: tokenize, dump, parse, dump and run a file."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from lox.interpreter import Interpreter, LoxRuntimeError
from lox.lexer import Token, tokenize
from lox.parser import ParseError, parse
from lox.printer import AstPrinter

_PROG = "lox"

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _debug_str(text: str) -> str:
    parts = []
    for ch in text:
        if ch in _ESCAPES:
            parts.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            parts.append(f"\\u{{{ord(ch):x}}}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _debug_token(token: Token) -> str:
    kind = "".join(part.capitalize() for part in token.token_type.name.split("_"))
    return (
        f"Token {{ token_type: {kind}, lineno: {token.lineno}, "
        f"lexeme: {_debug_str(token.lexeme)} }}"
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the Lox file named by the first argument."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print(f"usage: {_PROG} <input file>", file=sys.stderr)
        return 1

    try:
        with open(args[0], encoding="utf-8", newline="") as handle:
            source = handle.read()
    except (OSError, UnicodeDecodeError) as err:
        print(f"Failed to read file: {err}", file=sys.stderr)
        return 1

    tokens = tokenize(source)
    for token in tokens:
        print(_debug_token(token))

    try:
        statements = parse(tokens)
        printer = AstPrinter()
        for stmt in statements:
            printer.print_stmt(stmt, 0)
        Interpreter().interpret(statements)
    except (ParseError, LoxRuntimeError) as err:
        print(f"error: {err}", file=sys.stderr)
        return 1
    except RecursionError:
        print("error: Stack overflow.", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
import io
import math

import pytest

from lox.interpreter import (
    Environment,
    Interpreter,
    LoxClass,
    LoxFunction,
    LoxInstance,
    LoxRuntimeError,
    is_truthy,
    stringify,
)
from lox.lexer import Token, TokenType, tokenize
from lox.parser import parse


def run(source):
    out = io.StringIO()
    Interpreter(out).interpret(parse(tokenize(source)))
    return out.getvalue().splitlines()


def ident(name):
    return Token(TokenType.ID, 1, name)


def test_arithmetic_precedence():
    assert run("print 1 + 2 * 3 == 7;") == ["true"]


def test_integral_numbers_print_without_fraction():
    assert run("print 3;") == ["3"]
    assert run("print 0.5;") == ["0.5"]


def test_division_by_zero_follows_float_rules():
    assert run("print 1 / 0;") == ["inf"]
    assert run("print 0 / 0 == 0 / 0;") == ["false"]


def test_stringify_special_values():
    assert stringify(-0.0) == "-0"
    assert stringify(math.nan) == "NaN"
    assert stringify(None) == "nil"
    assert stringify(True) == "true"
    assert stringify(False) == "false"


def test_string_concatenation():
    assert run('print "ab" == "a" + "b";') == ["true"]


def test_block_shadowing():
    source = 'var a = "outer"; { var a = "inner"; print a; } print a;'
    assert run(source) == ["inner", "outer"]


def test_while_loop():
    source = "var i = 0; while (i < 3) { print i; i = i + 1; }"
    assert run(source) == [str(n) for n in range(3)]


def test_for_loop_variable_is_scoped():
    source = "for (var i = 0; i < 3; i = i + 1) print i; print i;"
    assert run(source) == [str(n) for n in range(3)] + ["nil"]


def test_closure_counter():
    source = """
    fun makeCounter() {
        var count = 0;
        fun counter() { count = count + 1; return count; }
        return counter;
    }
    var c = makeCounter();
    print c() == 1;
    print c() == 2;
    """
    assert run(source) == ["true", "true"]


def test_recursion():
    source = """
    fun fib(n) { if (n < 2) return n; return fib(n - 1) + fib(n - 2); }
    print fib(10) == 55;
    """
    assert run(source) == ["true"]


def test_return_inside_for_loop():
    source = """
    fun f() { for (var i = 0; ; i = i + 1) { if (i == 2) return i; } }
    print f() == 2;
    """
    assert run(source) == ["true"]


def test_function_without_return_yields_nil():
    assert run("fun f() {} print f();") == ["nil"]


def test_missing_arguments_are_nil():
    assert run("fun f(a, b) { print b; } f(1);") == ["nil"]


def test_top_level_return_does_not_stop_program():
    assert run('return 1; print "after";') == ["after"]


def test_object_display():
    source = "fun f() {} class A {} print f; print A; print A();"
    assert run(source) == ["<fn>", "<class>", "<instance>"]


def test_equality_across_types():
    source = 'print 1 == "1"; print nil == nil; print nil == false; print true != false;'
    assert run(source) == ["false", "true", "false", "true"]


def test_instances_never_compare_equal():
    assert run("class A {} var a = A(); print a == a;") == ["false"]


def test_logical_operators_short_circuit():
    assert run('print nil or "x";') == ["x"]
    assert run("print false and undefined();") == ["false"]
    assert run('print 1 and "y";') == ["y"]


def test_undefined_variable_reads_as_nil():
    assert run("print nope;") == ["nil"]


def test_initializer_and_fields():
    source = """
    class P { init(x) { this.x = x; } get() { return this.x; } }
    var p = P("v");
    print p.x;
    var m = p.get;
    print m() == "v";
    print p.y = "w";
    print p.y;
    """
    assert run(source) == ["v", "true", "w", "w"]


def test_inheritance_and_super():
    source = """
    class A { greet() { return "A"; } }
    class B < A { greet() { return "B" + super.greet(); } }
    print B().greet() == "BA";
    """
    assert run(source) == ["true"]


def test_inherited_initializer():
    source = "class P { init(x) { this.x = x; } } class Q < P {} print Q(\"z\").x;"
    assert run(source) == ["z"]


@pytest.mark.parametrize(
    "source, message",
    [
        ('print -"a";', "Expect number."),
        ('print 1 + "a";', "Operands must be same type"),
        ('print 1 - "a";', "Operands must be numbers"),
        ('print 1 < "a";', "Operands must be numbers"),
        ('"a"();', "Can only call functions or classes"),
        ("undefinedName = 1;", "Undefined variable 'undefinedName'."),
        ("var a = 1; print a.x;", "Only instances have properties."),
        ("var a = 1; a.x = 2;", "Only instances have fields."),
        ("class A {} print A().missing;", "Undefined property 'missing'"),
        ("var B = 1; class A < B {}", "Superclass must be a class."),
    ],
)
def test_runtime_errors(source, message):
    with pytest.raises(LoxRuntimeError) as info:
        run(source)
    assert str(info.value) == message


@pytest.mark.parametrize(
    "value, expected",
    [(None, False), (False, False), (True, True), (0.0, True), ("", True)],
)
def test_is_truthy(value, expected):
    assert is_truthy(value) is expected


def test_environment_lookup_through_enclosing():
    outer = Environment()
    outer.define("a", 1.0)
    inner = Environment(outer)
    assert inner.get("a") == 1.0
    inner.assign("a", 2.0)
    assert outer.get("a") == 2.0
    inner.define("a", 3.0)
    assert inner.get("a") == 3.0
    assert outer.get("a") == 2.0


def test_environment_missing_names():
    env = Environment()
    with pytest.raises(KeyError):
        env.get("x")
    with pytest.raises(LoxRuntimeError):
        env.assign("x", 1.0)


def test_find_method_walks_superclass():
    method = LoxFunction(ident("m"), (), (), Environment())
    base = LoxClass(ident("Base"), None, {"m": method})
    derived = LoxClass(ident("Derived"), base, {})
    assert derived.find_method("m") is method
    assert derived.find_method("other") is None


def test_class_call_and_instance_fields():
    klass = LoxClass(ident("Empty"))
    interpreter = Interpreter(io.StringIO())
    instance = klass.call(interpreter, [])
    assert isinstance(instance, LoxInstance) and instance.klass is klass
    instance.set("f", "value")
    assert instance.get("f") == "value"
    with pytest.raises(LoxRuntimeError):
        instance.get("g")


def test_bind_defines_this():
    method = LoxFunction(ident("m"), (), (), Environment(), is_initializer=True)
    instance = LoxInstance(LoxClass(ident("C")))
    bound = method.bind(instance)
    assert bound.closure.get("this") is instance
    assert bound.is_initializer is True
    assert bound.call(Interpreter(io.StringIO()), []) is None
import pytest

from lox.parser import Parser
from lox.resolver import Resolver
from lox.scanner import Scanner


def resolve(source):
    stmts = Parser(Scanner(source).scan_tokens()).parse()
    resolver = Resolver()
    resolver.resolve(stmts)
    return resolver


def errors(source):
    return [e.message for e in resolve(source).diagnostics]


def test_globals_are_left_unresolved():
    assert resolve("let a = 1; print a; a = 2;").locals == {}


def test_depth_counts_enclosing_scopes():
    assert list(resolve("{ let a = 1; { { print a; } } }").locals.values()) == [2]


def test_parameters_live_in_the_function_scope():
    assert list(resolve("fun f(x) { return x; }").locals.values()) == [0]


def test_closure_reference_to_enclosing_local():
    resolver = resolve("fun outer() { let a = 1; fun inner() { return a; } }")
    assert list(resolver.locals.values()) == [1]


def test_reading_local_in_its_own_initializer():
    assert errors("{ let a = 1; { let a = a; } }") == [
        "Can't read local variable in its own initializer."
    ]


def test_global_self_reference_is_not_a_static_error():
    assert errors("let a = a;") == []


def test_local_function_expression_cannot_refer_to_its_own_binding():
    assert errors("{ let a = fun () { return a; }; }") == [
        "Can't read local variable in its own initializer."
    ]
    assert errors("fun outer() { let f = fun () { return f; }; }") == [
        "Can't read local variable in its own initializer."
    ]


def test_recursive_local_function_declaration():
    assert errors("fun outer() { fun f(n) { return f(n); } }") == []


@pytest.mark.parametrize(
    "source, message",
    [
        ("return 1;", "Can't return from top-level code."),
        ("class A { init() { return 1; } }", "Can't return a value from an initializer."),
        ("break;", "Can't use 'break' outside of a loop."),
        ("continue;", "Can't use 'continue' outside of a loop."),
        ("while true { fun f() { continue; } }", "Can't use 'continue' outside of a loop."),
        ("print this;", "Can't use 'this' outside of a class."),
        ("fun f() { return this; }", "Can't use 'this' outside of a class."),
        ("print super.x;", "Can't use 'super' outside of a class."),
        ("class A { f() { return super.f(); } }", "Can't use 'super' in a class with no superclass."),
        ("class A < A {}", "A class can't inherit from itself."),
        ("fun f(a, a) {}", "Already a parameter with this name in this function."),
    ],
)
def test_static_errors(source, message):
    assert errors(source) == [message]


@pytest.mark.parametrize(
    "source",
    [
        "class A { init() { return; } }",
        "for (;;) { break; }",
        "while true { { continue; } }",
        "class A { f() { return this; } }",
        "class A {} class B < A { f() { return super.f; } }",
        "{ let a = 1; let a = 2; }",
    ],
)
def test_valid_programs(source):
    assert errors(source) == []


def test_errors_are_accumulated():
    assert errors("return; break; print this;") == [
        "Can't return from top-level code.",
        "Can't use 'break' outside of a loop.",
        "Can't use 'this' outside of a class.",
    ]

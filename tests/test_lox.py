import io
import logging

from lox import Lox, Phase
from lox.ast import Block


def test_session_keeps_globals_between_runs():
    lox = Lox(io.StringIO())
    assert lox.run("let a = 1;").ok
    assert lox.run("a + 1", interactive=True).value == "2"


def test_interactive_value_is_shown_with_quotes():
    lox = Lox(io.StringIO())
    assert lox.run('"hi"', interactive=True).value == '"hi"'
    assert lox.run("nil", interactive=True).value == "nil"
    assert lox.run("let b = 2;", interactive=True).value is None
    assert lox.run("1 + 1;").value is None


def test_closures_survive_between_runs():
    lox = Lox(io.StringIO())
    lox.run("fun mk() { let n = 0; fun inc() { n = n + 1; return n; } return inc; } let c = mk();")
    lox.run("c();")
    assert lox.run("c()", interactive=True).value == "2"


def test_runtime_error_does_not_break_the_session():
    out = io.StringIO()
    lox = Lox(out)
    assert lox.run("print nope;").had_runtime_error
    assert lox.run("print 1;").ok
    assert out.getvalue() == "1\n"


def test_static_errors_prevent_execution(run):
    out, result = run("print 1; print ;")
    assert out == ""
    assert result.had_static_error and not result.had_runtime_error

    out, result = run("print 1; return 2;")
    assert out == ""
    assert [d.phase for d in result.diagnostics] == [Phase.RESOLUTION]


def test_errors_of_every_front_end_phase_are_reported_together(run):
    _, result = run("let = 1;\nprint 1 +;\n@")
    assert [d.phase for d in result.diagnostics] == [Phase.LEXICAL, Phase.SYNTAX, Phase.SYNTAX]
    assert [str(d) for d in result.diagnostics] == [
        "[line 3:1] lexical error: Unexpected character '@'.",
        "[line 1:5] syntax error at '=': Expect variable name.",
        "[line 2:10] syntax error at ';': Expect expression.",
    ]


def test_parse_returns_desugared_program():
    stmts, diagnostics = Lox().parse("for (;;) {}")
    assert diagnostics == []
    assert isinstance(stmts[0], Block)


def test_debug_logging(caplog):
    caplog.set_level(logging.DEBUG, logger="lox")
    Lox(io.StringIO()).run("let a = 1; print a;")
    assert "scanned" in caplog.text
    assert "executing: print a;" in caplog.text
    assert "a = 1" in caplog.text


def test_resolution_table_drops_entries_of_finished_programs():
    lox = Lox(io.StringIO())
    lox.run("{ let a = 1; print a; }")
    assert lox.interpreter.locals == {}


def test_resolution_table_keeps_entries_used_by_functions():
    lox = Lox(io.StringIO())
    lox.run("fun mk() { let n = 1; fun get() { return n; } return get; } let g = mk();")
    assert lox.interpreter.locals != {}
    lox.run("{ let b = 2; print b; }")
    assert lox.run("g()", interactive=True).value == "1"


def test_runtime_errors_cross_the_interpreter_thread():
    out = io.StringIO()
    lox = Lox(out)
    result = lox.run("print 1; { let a = nil; print -a; }")
    assert out.getvalue() == "1\n"
    assert [d.message for d in result.diagnostics] == ["Operand must be a number."]
    assert lox.interpreter.locals == {}

import io

from lox.shell import Shell, is_incomplete


def session(*lines):
    stdin = io.StringIO("\n".join(lines) + "\n")
    stdout = io.StringIO()
    shell = Shell(stdin=stdin, stdout=stdout)
    shell.use_rawinput = False
    shell.cmdloop(intro="")
    return stdout.getvalue()


def test_echoes_trailing_expression():
    out = session("let a = 2;", "a * 3")
    assert "=> 6" in out


def test_continuation_lines():
    out = session("fun f(x) {", "  return x + 1;", "}", "f(1)")
    assert ". " in out
    assert "=> 2" in out


def test_errors_do_not_end_the_session():
    out = session("print nope;", "print 1;")
    assert "Undefined variable 'nope'." in out
    assert "1\n" in out


def test_exit():
    out = session("exit", "1 + 1")
    assert "=> 2" not in out


def test_is_incomplete():
    assert is_incomplete("fun f() {")
    assert is_incomplete("print (1 +")
    assert not is_incomplete("{ }")
    assert not is_incomplete("}")


def test_end_of_input_inside_open_block():
    out = session("fun f() {")
    assert out.endswith("\n")

from pathlib import Path

import pytest

from lox.__main__ import EX_DATAERR, EX_NOINPUT, EX_OK, EX_SOFTWARE, main


@pytest.fixture
def script(tmp_path):
    def script(source):
        path = tmp_path / "script.lox"
        path.write_text(source, encoding="utf-8")
        return str(path)

    return script


def test_runs_file(script, capsys):
    assert main([script('print "hi";')]) == EX_OK
    assert capsys.readouterr().out == "hi\n"


def test_static_error_exit_code(script, capsys):
    assert main([script("print ;")]) == EX_DATAERR
    err = capsys.readouterr().err
    assert "Expect expression." in err
    assert "script.lox:1:7" in err


def test_runtime_error_exit_code(script, capsys):
    assert main([script("print 1;\nprint nope;")]) == EX_SOFTWARE
    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert "Undefined variable 'nope'." in captured.err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.lox")]) == EX_NOINPUT
    assert "cannot read" in capsys.readouterr().err


def test_ast_flag_writes_desugared_program(script, capsys):
    path = script("for (let i = 0; i < 1; i = i + 1) print i;")
    assert main(["--ast", path]) == EX_OK
    assert capsys.readouterr().out == ""
    ast = Path(path + ".ast.lox").read_text(encoding="utf-8")
    assert "while i < 1 {" in ast
    assert "print i;" in ast

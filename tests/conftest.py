import io

import pytest

from lox import Lox


@pytest.fixture
def run():
    """Executa um programa numa sessão nova e retorna (saída, resultado)."""

    def run(source, interactive=False):
        out = io.StringIO()
        result = Lox(out).run(source, interactive)
        return out.getvalue(), result

    return run


@pytest.fixture
def output(run):
    """Linhas impressas por um programa que deve executar sem erros."""

    def output(source):
        out, result = run(source)
        assert result.ok, [str(d) for d in result.diagnostics]
        return out.splitlines()

    return output

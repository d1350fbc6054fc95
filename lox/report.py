"""
Formatação de erros para o terminal.
"""

from typing import Optional

from termcolor import colored

from .errors import Diagnostic

ERROR = "red"


def diagnose(diagnostic: Diagnostic, source: str) -> Optional[str]:
    """
    Linha do código onde o erro ocorreu com um marcador na coluna do erro.
    """
    lines = source.splitlines()
    if not 1 <= diagnostic.line <= len(lines):
        return None
    line = lines[diagnostic.line - 1]
    column = min(max(diagnostic.column, 1), len(line) + 1)
    marker = " " * (column - 1) + colored("^", ERROR, attrs=["bold"])
    return f"  {line}\n  {marker}"


def format_diagnostic(diagnostic: Diagnostic, source: str = "", path: str = "<stdin>") -> str:
    """
    Ex.: script.lox:3:7: syntax error at ';': Expect expression.
    """
    header = colored(f"{path}:{diagnostic.line}:{diagnostic.column}: ", attrs=["bold"])
    where = f" {diagnostic.where}" if diagnostic.where else ""
    msg = header + colored(f"{diagnostic.phase} error{where}: ", ERROR, attrs=["bold"])
    msg += diagnostic.message

    diagnosis = diagnose(diagnostic, source)
    if diagnosis is not None:
        msg += "\n" + diagnosis
    return msg


def report(diagnostics: list[Diagnostic], source: str = "", path: str = "<stdin>", file=None):
    for diagnostic in diagnostics:
        print(format_diagnostic(diagnostic, source, path), file=file)

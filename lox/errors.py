"""
Erros do interpretador.

Cada fase do pipeline tem sua própria exceção. As fases estáticas (análise
léxica, sintática e resolução) acumulam diagnósticos e continuam; erros de
execução interrompem a unidade corrente imediatamente.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .tokens import Token


class Phase(Enum):
    LEXICAL = "lexical"
    SYNTAX = "syntax"
    RESOLUTION = "resolution"
    RUNTIME = "runtime"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Diagnostic:
    """
    Erro estruturado, pronto para ser formatado por quem chamou o pipeline.
    """

    phase: Phase
    message: str
    line: int
    column: int
    where: str = ""

    def __str__(self) -> str:
        where = f" {self.where}" if self.where else ""
        return f"[line {self.line}:{self.column}] {self.phase} error{where}: {self.message}"


class LoxError(Exception):
    """
    Classe base para erros Lox.
    """

    phase: Phase

    def __init__(self, message: str, token: Optional["Token"] = None):
        super().__init__(message)
        self.message = message
        self.token = token

    def at(self, token: "Token") -> "LoxError":
        """
        Associa o erro a um token, caso ainda não tenha localização.
        """
        if self.token is None:
            self.token = token
        return self

    def diagnostic(self) -> Diagnostic:
        if self.token is None:
            return Diagnostic(self.phase, self.message, 0, 0)
        return Diagnostic(
            self.phase,
            self.message,
            self.token.line,
            self.token.column,
            self.token.where(),
        )


class LexicalError(LoxError):
    phase = Phase.LEXICAL

    def __init__(self, message: str, line: int, column: int):
        super().__init__(message)
        self.line = line
        self.column = column

    def diagnostic(self) -> Diagnostic:
        return Diagnostic(self.phase, self.message, self.line, self.column)


class ParseError(LoxError):
    phase = Phase.SYNTAX


class SemanticError(LoxError):
    phase = Phase.RESOLUTION


class LoxRuntimeError(LoxError):
    phase = Phase.RUNTIME

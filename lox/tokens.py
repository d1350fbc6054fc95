"""
Tokens produzidos pelo scanner.

Os nomes de TokenType coincidem com os nomes dos terminais em grammar.lark.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Union


class TokenType(Enum):
    # Pontuação
    LEFT_PAREN = auto()
    RIGHT_PAREN = auto()
    LEFT_BRACE = auto()
    RIGHT_BRACE = auto()
    COMMA = auto()
    DOT = auto()
    MINUS = auto()
    PLUS = auto()
    SLASH = auto()
    STAR = auto()
    SEMICOLON = auto()

    # Operadores de um ou dois caracteres
    BANG = auto()
    BANG_EQUAL = auto()
    EQUAL = auto()
    EQUAL_EQUAL = auto()
    GREATER = auto()
    GREATER_EQUAL = auto()
    LESS = auto()
    LESS_EQUAL = auto()

    # Literais
    IDENTIFIER = auto()
    STRING = auto()
    NUMBER = auto()

    # Palavras reservadas
    AND = auto()
    BREAK = auto()
    CLASS = auto()
    CONTINUE = auto()
    ELSE = auto()
    FALSE = auto()
    FOR = auto()
    FUN = auto()
    IF = auto()
    LET = auto()
    LOOP = auto()
    NIL = auto()
    OR = auto()
    PRINT = auto()
    RETURN = auto()
    SUPER = auto()
    THIS = auto()
    TRUE = auto()
    VAR = auto()
    WHILE = auto()

    EOF = auto()


LiteralValue = Union[float, str, bool, None]


@dataclass(frozen=True)
class Token:
    kind: TokenType
    lexeme: str
    literal: LiteralValue
    line: int = field(compare=False)
    column: int = field(compare=False)

    def __str__(self) -> str:
        return self.lexeme

    def where(self) -> str:
        """
        Descrição da posição do token usada em mensagens de erro.
        """
        if self.kind is TokenType.EOF:
            return "at end"
        return f"at '{self.lexeme}'"

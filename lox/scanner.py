"""
Análise léxica.

Usamos o lexer do lark construído a partir dos terminais de grammar.lark e
convertemos os tokens do lark em lox.tokens.Token. Quando o lark encontra um
caractere que não pertence a nenhum terminal, registramos o erro e retomamos a
análise a partir do caractere seguinte, de modo que vários erros léxicos podem
ser reportados numa única passada.
"""

import logging
from functools import lru_cache
from pathlib import Path

from lark import Lark
from lark import Token as LarkToken
from lark.exceptions import UnexpectedCharacters

from .errors import LexicalError
from .tokens import LiteralValue, Token, TokenType

log = logging.getLogger(__name__)

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"

# Terminais que não chegam ao parser
SKIPPED = {"WHITESPACE", "LINE_COMMENT", "BLOCK_COMMENT"}

KEYWORD_LITERALS: dict[TokenType, LiteralValue] = {
    TokenType.TRUE: True,
    TokenType.FALSE: False,
    TokenType.NIL: None,
}


@lru_cache(maxsize=None)
def lark_lexer() -> Lark:
    """
    Carrega a gramática léxica uma única vez por processo.
    """
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(grammar, start="start", parser="lalr", lexer="basic")


class Scanner:
    """
    Converte o código fonte numa lista de tokens terminada por EOF.

    Ex.: Scanner("print 1;").scan_tokens()
    """

    def __init__(self, source: str):
        self.source = source
        self.tokens: list[Token] = []
        self.diagnostics: list[LexicalError] = []

    def scan_tokens(self) -> list[Token]:
        offset, line, column = 0, 1, 1
        lexer = lark_lexer()

        while offset < len(self.source):
            try:
                for tok in lexer.lex(self.source[offset:]):
                    self._add(tok, line, column)
                break
            except UnexpectedCharacters as exc:
                pos = offset + exc.pos_in_stream
                err_line, err_column = shift(exc.line, exc.column, line, column)
                if self.source[pos] == '"':
                    self._error("Unterminated string.", err_line, err_column)
                    pos = len(self.source)
                else:
                    char = self.source[pos]
                    self._error(f"Unexpected character '{char}'.", err_line, err_column)
                    pos += 1
                line, column = self._advance(offset, pos, line, column)
                offset = pos

        line, column = self._advance(offset, len(self.source), line, column)
        self.tokens.append(Token(TokenType.EOF, "", None, line, column))
        log.debug("scanned %d tokens, %d errors", len(self.tokens), len(self.diagnostics))
        return self.tokens

    def _add(self, tok: LarkToken, base_line: int, base_column: int):
        line, column = shift(tok.line, tok.column, base_line, base_column)
        if tok.type in SKIPPED:
            if tok.type == "BLOCK_COMMENT" and (len(tok) < 4 or not tok.endswith("*/")):
                self._error("Unterminated block comment.", line, column)
            return

        kind = TokenType[tok.type]
        lexeme = str(tok)
        if kind is TokenType.NUMBER:
            literal: LiteralValue = float(lexeme)
        elif kind is TokenType.STRING:
            literal = lexeme[1:-1]
        else:
            literal = KEYWORD_LITERALS.get(kind)
        self.tokens.append(Token(kind, lexeme, literal, line, column))

    def _advance(self, start: int, end: int, line: int, column: int) -> tuple[int, int]:
        """
        Posição (linha, coluna) de `end`, sabendo que `start` está em (line, column).
        """
        chunk = self.source[start:end]
        newlines = chunk.count("\n")
        if newlines == 0:
            return line, column + len(chunk)
        return line + newlines, len(chunk) - chunk.rfind("\n")

    def _error(self, message: str, line: int, column: int):
        self.diagnostics.append(LexicalError(message, line, column))


def shift(line: int, column: int, base_line: int, base_column: int) -> tuple[int, int]:
    """
    Converte a posição relativa a um trecho do código em posição absoluta.
    """
    if line == 1:
        return base_line, base_column + column - 1
    return base_line + line - 1, column

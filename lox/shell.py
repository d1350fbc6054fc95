"""
Modo interativo do interpretador, implementado com cmd.
"""

import cmd

from .lox import Lox
from .report import report
from .scanner import Scanner
from .tokens import TokenType

OPENING = {TokenType.LEFT_BRACE, TokenType.LEFT_PAREN}
CLOSING = {TokenType.RIGHT_BRACE, TokenType.RIGHT_PAREN}


def is_incomplete(source: str) -> bool:
    """
    Verdadeiro se há chaves ou parênteses ainda não fechados.
    """
    depth = 0
    for token in Scanner(source).scan_tokens():
        if token.kind in OPENING:
            depth += 1
        elif token.kind in CLOSING:
            depth -= 1
    return depth > 0


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter\nType 'help' for more information, 'exit' to quit."
    prompt = "> "
    secondary_prompt = ". "  # continuação de linha
    _tmp_prompt = "> "

    def __init__(self, lox: Lox = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.lox = lox if lox is not None else Lox(self.stdout)
        self._tmp_line = ""

    def default(self, line):
        """Executa um trecho de código Lox."""
        source = self._tmp_line + line + "\n"
        if is_incomplete(source):
            self._tmp_line = source
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        result = self.lox.run(source, interactive=True)
        if result.diagnostics:
            report(result.diagnostics, source, file=self.stdout)
        elif result.value is not None:
            print(f"=> {result.value}", file=self.stdout)

    def onecmd(self, line):
        # Linhas de continuação nunca são comandos do shell
        if self._tmp_line and line != "EOF":
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Mostra uma breve introdução."""
        print("Lox is a small dynamically typed scripting language.\n\n"
              "Type statements such as 'let x = 1;' or 'print x + 1;'. A final\n"
              "expression may omit the ';' and its value is shown after '=>'.\n"
              "Blocks spanning several lines are read until every '{' and '('\n"
              "is closed.", file=self.stdout)

    def emptyline(self):
        """Não repete o último comando numa linha vazia."""
        return ""

    def do_EOF(self, arg):
        """Sai do interpretador."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Sai do interpretador."""
        return True

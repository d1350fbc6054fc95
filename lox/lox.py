"""
Pipeline completo: scanner, parser, resolver e interpretador.
"""

import itertools
import logging
import sys
import threading
from dataclasses import dataclass, field, fields, is_dataclass
from typing import IO, Callable, Optional, TypeVar

from .ast import Class, Expression, Function, FunctionExpr, Stmt
from .errors import Diagnostic, LoxRuntimeError, Phase
from .interpreter import Interpreter
from .parser import Parser
from .resolver import Resolver
from .runtime import show_repr
from .scanner import Scanner

log = logging.getLogger(__name__)

R = TypeVar("R")

# Cada chamada Lox ocupa cerca de 7 quadros do Python. A execução acontece
# numa thread com pilha maior para suportar o limite de recursão mais alto.
RECURSION_LIMIT = 25_000
STACK_SIZE = 512 * 1024 * 1024


def with_deep_stack(fn: Callable[[], R]) -> R:
    """
    Executa `fn` numa thread com pilha de STACK_SIZE bytes e limite de recursão
    RECURSION_LIMIT. Exceções são relançadas na thread de quem chamou.
    """
    outcome: dict = {}

    def target():
        try:
            outcome["value"] = fn()
        except BaseException as exc:  # relançada abaixo
            outcome["error"] = exc

    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    previous = threading.stack_size(STACK_SIZE)
    try:
        thread = threading.Thread(target=target, name="lox-interpreter")
        thread.start()
    finally:
        threading.stack_size(previous)
    thread.join()

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


def defines_code(node) -> bool:
    """
    Verdadeiro se o nó (ou lista de nós) declara funções ou classes, isto é,
    código que pode ser executado depois que o programa termina.
    """
    if isinstance(node, (Function, FunctionExpr, Class)):
        return True
    if isinstance(node, list):
        return any(defines_code(item) for item in node)
    if is_dataclass(node):
        return any(defines_code(getattr(node, f.name)) for f in fields(node))
    return False


@dataclass
class RunResult:
    """
    Resultado de uma execução.

    `value` só é preenchido no modo interativo, quando o último comando é uma
    expressão: é o texto que o REPL mostra após `=>`.
    """

    diagnostics: list[Diagnostic] = field(default_factory=list)
    value: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.diagnostics

    @property
    def had_static_error(self) -> bool:
        return any(d.phase is not Phase.RUNTIME for d in self.diagnostics)

    @property
    def had_runtime_error(self) -> bool:
        return any(d.phase is Phase.RUNTIME for d in self.diagnostics)


class Lox:
    """
    Sessão do interpretador.

    Variáveis globais, funções e classes definidas numa chamada a `run`
    continuam visíveis nas chamadas seguintes.

    Ex.: Lox().run("print 1 + 2;")
    """

    def __init__(self, out: Optional[IO[str]] = None):
        self.interpreter = Interpreter(out)
        self.slots = itertools.count()

    def parse(self, source: str, interactive: bool = False) -> tuple[list[Stmt], list[Diagnostic]]:
        """
        Análise léxica e sintática. Retorna os comandos e os erros encontrados.
        """
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()
        parser = Parser(tokens, self.slots, interactive=interactive)
        stmts = parser.parse()
        errors = [*scanner.diagnostics, *parser.diagnostics]
        return stmts, [e.diagnostic() for e in errors]

    def run(self, source: str, interactive: bool = False) -> RunResult:
        stmts, diagnostics = self.parse(source, interactive)
        if diagnostics:
            return RunResult(diagnostics)

        resolver = Resolver()
        resolver.resolve(stmts)
        if resolver.diagnostics:
            return RunResult([e.diagnostic() for e in resolver.diagnostics])
        for slot, depth in resolver.locals.items():
            self.interpreter.resolve(slot, depth)

        try:
            value = with_deep_stack(lambda: self.interpreter.interpret(stmts))
        except LoxRuntimeError as error:
            log.debug("runtime error: %s", error.message)
            return RunResult([error.diagnostic()])
        finally:
            # Sem funções ou classes, nenhuma referência deste programa será
            # avaliada de novo
            if not defines_code(stmts):
                self.interpreter.forget(resolver.locals)
            if log.isEnabledFor(logging.DEBUG):
                log.debug("globals:\n%s", self.interpreter.globals.pretty())

        if interactive and stmts and isinstance(stmts[-1], Expression):
            return RunResult(value=show_repr(value))
        return RunResult()

"""
Interpretador que percorre a árvore sintática.

Comandos não lançam exceções para controle de fluxo: cada comando devolve um
Outcome (NORMAL, BREAK, CONTINUE ou um retorno com valor) e quem o executou
decide se intercepta o sinal ou o repassa adiante.

    * return   é interceptado na fronteira da chamada de função;
    * break    é interceptado pelo While mais próximo;
    * continue é interceptado pelo bloco que é o corpo direto de um laço,
      que então segue para o próximo comando desse bloco. Num `for` o
      incremento é o comando seguinte ao corpo, por isso sempre executa.

Erros de execução são exceções (LoxRuntimeError) e abortam o programa atual.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import IO, Optional

from . import runtime as op
from .ast import *
from .ctx import Ctx
from .errors import LoxRuntimeError
from .runtime import (
    BUILTINS,
    LoxCallable,
    LoxClass,
    LoxFunction,
    LoxInstance,
    Value,
    show,
    truthy,
)
from .tokens import Token, TokenType as T

log = logging.getLogger(__name__)


class Signal(Enum):
    NORMAL = "normal"
    RETURN = "return"
    BREAK = "break"
    CONTINUE = "continue"


@dataclass(frozen=True)
class Outcome:
    """
    Resultado da execução de um comando.
    """

    signal: Signal
    value: Value = None

    @classmethod
    def returning(cls, value: Value) -> "Outcome":
        return cls(Signal.RETURN, value)


NORMAL = Outcome(Signal.NORMAL)
BREAK = Outcome(Signal.BREAK)
CONTINUE = Outcome(Signal.CONTINUE)

BINARY_OPS = {
    T.PLUS: op.add,
    T.MINUS: op.sub,
    T.STAR: op.mul,
    T.SLASH: op.truediv,
    T.GREATER: op.gt,
    T.GREATER_EQUAL: op.ge,
    T.LESS: op.lt,
    T.LESS_EQUAL: op.le,
    T.EQUAL_EQUAL: op.eq,
    T.BANG_EQUAL: op.ne,
}

UNARY_OPS = {
    T.MINUS: op.neg,
    T.BANG: op.not_,
}


class Interpreter:
    """
    Executa programas já resolvidos.

    O contexto global e a tabela de resolução sobrevivem entre execuções,
    de modo que o mesmo interpretador pode ser usado por um REPL.
    """

    def __init__(self, out: Optional[IO[str]] = None):
        self.out = out
        self.globals = Ctx()
        for name, fn in BUILTINS.items():
            self.globals.define(name, fn)
        self.locals: dict[int, int] = {}

    def resolve(self, slot: int, depth: int):
        self.locals[slot] = depth

    def forget(self, slots):
        """
        Descarta da tabela de resolução referências que não serão mais avaliadas.

        Referências dentro de funções e classes precisam continuar na tabela
        enquanto o REPL estiver aberto, pois podem ser chamadas em entradas
        posteriores.
        """
        for slot in slots:
            self.locals.pop(slot, None)

    def interpret(self, stmts: list[Stmt]) -> Value:
        """
        Executa o programa e retorna o valor do último comando, caso seja uma
        expressão (usado pelo modo interativo).
        """
        value = None
        for stmt in stmts:
            if log.isEnabledFor(logging.DEBUG):
                log.debug("executing: %s", stmt.pretty().splitlines()[0])
            if isinstance(stmt, Expression):
                value = self.evaluate(stmt.expr, self.globals)
            else:
                value = None
                self.execute(stmt, self.globals)
        return value

    #
    # COMANDOS
    #
    def execute(self, stmt: Stmt, ctx: Ctx) -> Outcome:
        if isinstance(stmt, Expression):
            self.evaluate(stmt.expr, ctx)
            return NORMAL
        if isinstance(stmt, Print):
            value = self.evaluate(stmt.expr, ctx)
            print(show(value), file=self.out)
            return NORMAL
        if isinstance(stmt, VarDecl):
            value = None
            if stmt.initializer is not None:
                value = self.evaluate(stmt.initializer, ctx)
            ctx.define(stmt.name.lexeme, value)
            return NORMAL
        if isinstance(stmt, Block):
            return self.execute_block(stmt.stmts, ctx.push())
        if isinstance(stmt, If):
            if truthy(self.evaluate(stmt.cond, ctx)):
                return self.execute(stmt.then, ctx)
            if stmt.orelse is not None:
                return self.execute(stmt.orelse, ctx)
            return NORMAL
        if isinstance(stmt, While):
            return self.execute_while(stmt, ctx)
        if isinstance(stmt, Function):
            fn = LoxFunction(stmt.name.lexeme, stmt.params, stmt.body, ctx)
            ctx.define(stmt.name.lexeme, fn)
            return NORMAL
        if isinstance(stmt, Return):
            value = None
            if stmt.value is not None:
                value = self.evaluate(stmt.value, ctx)
            return Outcome.returning(value)
        if isinstance(stmt, Break):
            return BREAK
        if isinstance(stmt, Continue):
            return CONTINUE
        if isinstance(stmt, Class):
            self.execute_class(stmt, ctx)
            return NORMAL
        raise TypeError(f"unknown statement: {type(stmt).__name__}")

    def execute_block(self, stmts: list[Stmt], ctx: Ctx, loop_body: bool = False) -> Outcome:
        for stmt in stmts:
            outcome = self.execute(stmt, ctx)
            if outcome is NORMAL:
                continue
            if outcome is CONTINUE and loop_body:
                continue
            return outcome
        return NORMAL

    def execute_while(self, stmt: While, ctx: Ctx) -> Outcome:
        while truthy(self.evaluate(stmt.cond, ctx)):
            outcome = self.execute_block(stmt.body.stmts, ctx.push(), loop_body=True)
            if outcome is BREAK:
                break
            if outcome.signal is Signal.RETURN:
                return outcome
        return NORMAL

    def execute_body(self, stmts: list[Stmt], ctx: Ctx) -> Value:
        """
        Executa o corpo de uma função e retorna o valor de `return` (ou nil).
        """
        outcome = self.execute_block(stmts, ctx)
        return outcome.value

    def execute_class(self, stmt: Class, ctx: Ctx):
        # Carrega a superclasse, caso exista
        base = None
        if stmt.superclass is not None:
            base = self.evaluate(stmt.superclass, ctx)
            if not isinstance(base, LoxClass):
                raise LoxRuntimeError("Superclass must be a class.", stmt.superclass.name)

        ctx.define(stmt.name.lexeme, None)

        method_ctx = ctx
        if base is not None:
            method_ctx = ctx.push({"super": base})

        methods = {}
        for method in stmt.methods:
            name = method.name.lexeme
            methods[name] = LoxFunction(
                name, method.params, method.body, method_ctx, is_initializer=name == "init"
            )

        ctx.define(stmt.name.lexeme, LoxClass(stmt.name.lexeme, base, methods))

    #
    # EXPRESSÕES
    #
    def evaluate(self, expr: Expr, ctx: Ctx) -> Value:
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Grouping):
            return self.evaluate(expr.expr, ctx)
        if isinstance(expr, Variable):
            return self.lookup(expr.name, expr.slot, ctx)
        if isinstance(expr, Assign):
            value = self.evaluate(expr.value, ctx)
            self.assign(expr, value, ctx)
            return value
        if isinstance(expr, Logical):
            left = self.evaluate(expr.left, ctx)
            if expr.operator.kind is T.OR:
                if truthy(left):
                    return left
            elif not truthy(left):
                return left
            return self.evaluate(expr.right, ctx)
        if isinstance(expr, Unary):
            right = self.evaluate(expr.right, ctx)
            try:
                return UNARY_OPS[expr.operator.kind](right)
            except LoxRuntimeError as error:
                raise error.at(expr.operator)
        if isinstance(expr, Binary):
            left = self.evaluate(expr.left, ctx)
            right = self.evaluate(expr.right, ctx)
            try:
                return BINARY_OPS[expr.operator.kind](left, right)
            except LoxRuntimeError as error:
                raise error.at(expr.operator)
        if isinstance(expr, Call):
            return self.call(expr, ctx)
        if isinstance(expr, Get):
            obj = self.evaluate(expr.obj, ctx)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError("Only instances have properties.", expr.name)
            try:
                return obj.get(expr.name.lexeme)
            except LoxRuntimeError as error:
                raise error.at(expr.name)
        if isinstance(expr, Set):
            obj = self.evaluate(expr.obj, ctx)
            if not isinstance(obj, LoxInstance):
                raise LoxRuntimeError("Only instances have fields.", expr.name)
            value = self.evaluate(expr.value, ctx)
            obj.set(expr.name.lexeme, value)
            return value
        if isinstance(expr, This):
            return self.lookup(expr.keyword, expr.slot, ctx)
        if isinstance(expr, Super):
            return self.super_method(expr, ctx)
        if isinstance(expr, FunctionExpr):
            return LoxFunction(None, expr.params, expr.body, ctx)
        raise TypeError(f"unknown expression: {type(expr).__name__}")

    def call(self, expr: Call, ctx: Ctx) -> Value:
        callee = self.evaluate(expr.callee, ctx)
        args = [self.evaluate(arg, ctx) for arg in expr.args]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError("Can only call functions and classes.", expr.paren)
        if len(args) != callee.arity():
            msg = f"Expected {callee.arity()} arguments but got {len(args)}."
            raise LoxRuntimeError(msg, expr.paren)

        try:
            return callee.call(self, args)
        except LoxRuntimeError as error:
            raise error.at(expr.paren)
        except RecursionError:
            raise LoxRuntimeError("Stack overflow.", expr.paren) from None

    def super_method(self, expr: Super, ctx: Ctx) -> Value:
        # `super` fica no escopo logo acima do escopo que define `this`
        depth = self.locals[expr.slot]
        base = ctx.get_at(depth, "super")
        obj = ctx.get_at(depth - 1, "this")
        method = base.find_method(expr.method.lexeme)
        if method is None:
            raise LoxRuntimeError(f"Undefined property '{expr.method.lexeme}'.", expr.method)
        return method.bind(obj)

    def lookup(self, name: Token, slot: int, ctx: Ctx) -> Value:
        try:
            depth = self.locals.get(slot)
            if depth is None:
                return ctx.get_global(name.lexeme)
            return ctx.get_at(depth, name.lexeme)
        except LoxRuntimeError as error:
            raise error.at(name)

    def assign(self, expr: Assign, value: Value, ctx: Ctx):
        try:
            depth = self.locals.get(expr.slot)
            if depth is None:
                ctx.assign_global(expr.name.lexeme, value)
            else:
                ctx.assign_at(depth, expr.name.lexeme, value)
        except LoxRuntimeError as error:
            raise error.at(expr.name)

"""
Resolução estática de variáveis.

Percorre o programa uma única vez, sem executá-lo, e informa ao Interpreter a
que distância (em escopos) está a declaração de cada variável local. Variáveis
não encontradas em nenhum escopo são globais e são buscadas diretamente no
contexto global em tempo de execução.

Também detecta erros que não dependem da execução: uso de uma variável no seu
próprio inicializador, `return` fora de funções, `break`/`continue` fora de
laços, `this`/`super` fora de classes, etc.
"""

import logging
from enum import Enum, auto

from .ast import *
from .errors import SemanticError
from .tokens import Token

log = logging.getLogger(__name__)


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    METHOD = auto()
    INITIALIZER = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()
    SUBCLASS = auto()


class Resolver:
    """
    Ex.: resolver = Resolver(); resolver.resolve(stmts); resolver.locals

    `locals` associa o slot de cada referência resolvida à sua distância.
    """

    def __init__(self):
        self.locals: dict[int, int] = {}
        # Cada escopo associa um nome a "já foi definido?"
        self.scopes: list[dict[str, bool]] = []
        self.function_type = FunctionType.NONE
        self.class_type = ClassType.NONE
        self.loop_depth = 0
        self.diagnostics: list[SemanticError] = []

    def resolve(self, stmts: list[Stmt]):
        for stmt in stmts:
            self.resolve_stmt(stmt)
        log.debug("resolved %d statements, %d errors", len(stmts), len(self.diagnostics))

    #
    # COMANDOS
    #
    def resolve_stmt(self, stmt: Stmt):
        if isinstance(stmt, (Expression, Print)):
            self.resolve_expr(stmt.expr)
        elif isinstance(stmt, VarDecl):
            self.declare(stmt.name)
            if stmt.initializer is not None:
                self.resolve_expr(stmt.initializer)
            self.define(stmt.name)
        elif isinstance(stmt, Block):
            self.begin_scope()
            self.resolve(stmt.stmts)
            self.end_scope()
        elif isinstance(stmt, If):
            self.resolve_expr(stmt.cond)
            self.resolve_stmt(stmt.then)
            if stmt.orelse is not None:
                self.resolve_stmt(stmt.orelse)
        elif isinstance(stmt, While):
            self.resolve_expr(stmt.cond)
            self.loop_depth += 1
            self.resolve_stmt(stmt.body)
            self.loop_depth -= 1
        elif isinstance(stmt, Function):
            # Definida antes do corpo para permitir recursão
            self.declare(stmt.name)
            self.define(stmt.name)
            self.resolve_function(stmt.params, stmt.body, FunctionType.FUNCTION)
        elif isinstance(stmt, Return):
            self.resolve_return(stmt)
        elif isinstance(stmt, Break):
            if self.loop_depth == 0:
                self.error(stmt.keyword, "Can't use 'break' outside of a loop.")
        elif isinstance(stmt, Continue):
            if self.loop_depth == 0:
                self.error(stmt.keyword, "Can't use 'continue' outside of a loop.")
        elif isinstance(stmt, Class):
            self.resolve_class(stmt)
        else:
            raise TypeError(f"unknown statement: {type(stmt).__name__}")

    def resolve_return(self, stmt: Return):
        if self.function_type is FunctionType.NONE:
            self.error(stmt.keyword, "Can't return from top-level code.")
        if stmt.value is not None:
            if self.function_type is FunctionType.INITIALIZER:
                self.error(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve_expr(stmt.value)

    def resolve_class(self, stmt: Class):
        enclosing_class = self.class_type
        self.class_type = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        if stmt.superclass is not None:
            if stmt.superclass.name.lexeme == stmt.name.lexeme:
                self.error(stmt.superclass.name, "A class can't inherit from itself.")
            self.class_type = ClassType.SUBCLASS
            self.resolve_expr(stmt.superclass)
            self.begin_scope()
            self.scopes[-1]["super"] = True

        self.begin_scope()
        self.scopes[-1]["this"] = True
        for method in stmt.methods:
            kind = FunctionType.METHOD
            if method.name.lexeme == "init":
                kind = FunctionType.INITIALIZER
            self.resolve_function(method.params, method.body, kind)
        self.end_scope()

        if stmt.superclass is not None:
            self.end_scope()
        self.class_type = enclosing_class

    def resolve_function(self, params: list[Token], body: list[Stmt], kind: FunctionType):
        enclosing = (self.function_type, self.loop_depth)
        self.function_type = kind
        self.loop_depth = 0

        self.begin_scope()
        for param in params:
            if param.lexeme in self.scopes[-1]:
                self.error(param, "Already a parameter with this name in this function.")
            self.declare(param)
            self.define(param)
        self.resolve(body)
        self.end_scope()

        self.function_type, self.loop_depth = enclosing

    #
    # EXPRESSÕES
    #
    def resolve_expr(self, expr: Expr):
        if isinstance(expr, Variable):
            self.resolve_variable(expr)
        elif isinstance(expr, Assign):
            self.resolve_expr(expr.value)
            self.resolve_local(expr.slot, expr.name.lexeme)
        elif isinstance(expr, (Binary, Logical)):
            self.resolve_expr(expr.left)
            self.resolve_expr(expr.right)
        elif isinstance(expr, Unary):
            self.resolve_expr(expr.right)
        elif isinstance(expr, Grouping):
            self.resolve_expr(expr.expr)
        elif isinstance(expr, Call):
            self.resolve_expr(expr.callee)
            for arg in expr.args:
                self.resolve_expr(arg)
        elif isinstance(expr, Get):
            self.resolve_expr(expr.obj)
        elif isinstance(expr, Set):
            self.resolve_expr(expr.value)
            self.resolve_expr(expr.obj)
        elif isinstance(expr, This):
            if self.class_type is ClassType.NONE:
                self.error(expr.keyword, "Can't use 'this' outside of a class.")
                return
            self.resolve_local(expr.slot, "this")
        elif isinstance(expr, Super):
            if self.class_type is ClassType.NONE:
                self.error(expr.keyword, "Can't use 'super' outside of a class.")
                return
            if self.class_type is not ClassType.SUBCLASS:
                self.error(expr.keyword, "Can't use 'super' in a class with no superclass.")
                return
            self.resolve_local(expr.slot, "super")
        elif isinstance(expr, FunctionExpr):
            self.resolve_function(expr.params, expr.body, FunctionType.FUNCTION)
        elif not isinstance(expr, Literal):
            raise TypeError(f"unknown expression: {type(expr).__name__}")

    def resolve_variable(self, expr: Variable):
        name = expr.name.lexeme
        for index in range(len(self.scopes) - 1, -1, -1):
            scope = self.scopes[index]
            if name not in scope:
                continue
            if not scope[name]:
                self.error(expr.name, "Can't read local variable in its own initializer.")
            self.locals[expr.slot] = len(self.scopes) - 1 - index
            return

    def resolve_local(self, slot: int, name: str):
        for index in range(len(self.scopes) - 1, -1, -1):
            if name in self.scopes[index]:
                self.locals[slot] = len(self.scopes) - 1 - index
                return

    #
    # ESCOPOS
    #
    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name: Token):
        if self.scopes:
            self.scopes[-1][name.lexeme] = False

    def define(self, name: Token):
        if self.scopes:
            self.scopes[-1][name.lexeme] = True

    def error(self, token: Token, message: str):
        self.diagnostics.append(SemanticError(message, token))

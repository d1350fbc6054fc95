"""
Parser descendente recursivo.

Converte a lista de tokens produzida pelo Scanner numa lista de comandos
(lox.ast.Stmt). Erros de sintaxe são registrados em `diagnostics` e o parser
se ressincroniza no início do próximo comando, de modo que um comando mal
formado não esconde os erros do resto do arquivo.

    program     -> declaration* EOF
    declaration -> classDecl | funDecl | varDecl | statement
    statement   -> exprStmt | forStmt | ifStmt | printStmt | returnStmt
                 | whileStmt | loopStmt | breakStmt | continueStmt | block
    expression  -> assignment
    assignment  -> ( call "." )? IDENTIFIER "=" assignment | logic_or
    logic_or    -> logic_and ( "or" logic_and )*
    logic_and   -> equality ( "and" equality )*
    equality    -> comparison ( ( "!=" | "==" ) comparison )*
    comparison  -> term ( ( ">" | ">=" | "<" | "<=" ) term )*
    term        -> factor ( ( "-" | "+" ) factor )*
    factor      -> unary ( ( "/" | "*" ) unary )*
    unary       -> ( "!" | "-" ) unary | call
    call        -> primary ( "(" arguments? ")" | "." IDENTIFIER )*
"""

import itertools
import logging
from typing import Iterator, Optional

from .ast import *
from .errors import ParseError
from .tokens import Token, TokenType as T

log = logging.getLogger(__name__)

MAX_ARGS = 255

# Palavras que iniciam um comando: pontos seguros para ressincronizar
STATEMENT_START = {
    T.CLASS, T.FUN, T.LET, T.VAR, T.FOR, T.IF, T.WHILE, T.LOOP,
    T.PRINT, T.RETURN, T.BREAK, T.CONTINUE,
}


class Parser:
    """
    Ex.: Parser(Scanner("print 1 + 2;").scan_tokens()).parse()

    `slots` numera as referências a variáveis; quem executa vários programas
    com o mesmo interpretador (ex.: o REPL) deve compartilhar o contador entre
    os parsers. No modo interativo o último comando de expressão pode omitir
    o ponto e vírgula.
    """

    def __init__(
        self,
        tokens: list[Token],
        slots: Optional[Iterator[int]] = None,
        interactive: bool = False,
    ):
        self.tokens = tokens
        self.current = 0
        self.slots = slots if slots is not None else itertools.count()
        self.interactive = interactive
        self.diagnostics: list[ParseError] = []

    def parse(self) -> list[Stmt]:
        stmts = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                stmts.append(stmt)
        log.debug("parsed %d statements, %d errors", len(stmts), len(self.diagnostics))
        return stmts

    #
    # DECLARAÇÕES
    #
    def declaration(self) -> Optional[Stmt]:
        try:
            if self.match(T.CLASS):
                return self.class_declaration()
            if self.check(T.FUN) and self.check_next(T.IDENTIFIER):
                self.advance()
                return self.function("function")
            if self.match(T.LET, T.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError as error:
            self.diagnostics.append(error)
            self.synchronize()
            return None

    def class_declaration(self) -> Class:
        name = self.consume(T.IDENTIFIER, "Expect class name.")

        superclass = None
        if self.match(T.LESS):
            token = self.consume(T.IDENTIFIER, "Expect superclass name.")
            superclass = Variable(token, slot=next(self.slots))

        self.consume(T.LEFT_BRACE, "Expect '{' before class body.")
        methods = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))
        self.consume(T.RIGHT_BRACE, "Expect '}' after class body.")
        return Class(name, superclass, methods)

    def function(self, kind: str) -> Function:
        name = self.consume(T.IDENTIFIER, f"Expect {kind} name.")
        params, body = self.function_rest(kind)
        return Function(name, params, body)

    def function_rest(self, kind: str) -> tuple[list[Token], list[Stmt]]:
        """
        Lista de parâmetros e corpo, comum a funções nomeadas, métodos e
        funções anônimas.
        """
        self.consume(T.LEFT_PAREN, f"Expect '(' after {kind} name.")
        params: list[Token] = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.report(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(T.IDENTIFIER, "Expect parameter name."))
                if not self.match(T.COMMA):
                    break
        self.consume(T.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(T.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return params, self.block()

    def var_declaration(self) -> VarDecl:
        name = self.consume(T.IDENTIFIER, "Expect variable name.")
        initializer = None
        if self.match(T.EQUAL):
            initializer = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after variable declaration.")
        return VarDecl(name, initializer)

    #
    # COMANDOS
    #
    def statement(self) -> Stmt:
        if self.match(T.FOR):
            return self.for_statement()
        if self.match(T.IF):
            return self.if_statement()
        if self.match(T.PRINT):
            return self.print_statement()
        if self.match(T.RETURN):
            return self.return_statement()
        if self.match(T.WHILE):
            return self.while_statement()
        if self.match(T.LOOP):
            return While(Literal(True), self.block_statement())
        if self.match(T.BREAK):
            keyword = self.previous()
            self.consume(T.SEMICOLON, "Expect ';' after 'break'.")
            return Break(keyword)
        if self.match(T.CONTINUE):
            keyword = self.previous()
            self.consume(T.SEMICOLON, "Expect ';' after 'continue'.")
            return Continue(keyword)
        if self.match(T.LEFT_BRACE):
            return Block(self.block())
        return self.expression_statement()

    def for_statement(self) -> Stmt:
        """
        Transforma for (init; cond; incr) body em:
        {
            init;
            while cond {
                body;
                incr;
            }
        }
        """
        self.consume(T.LEFT_PAREN, "Expect '(' after 'for'.")
        if self.match(T.SEMICOLON):
            init = None
        elif self.match(T.LET, T.VAR):
            init = self.var_declaration()
        else:
            init = self.expression_statement()

        cond = None if self.check(T.SEMICOLON) else self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after loop condition.")

        incr = None if self.check(T.RIGHT_PAREN) else self.expression()
        self.consume(T.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = [self.statement()]
        if incr is not None:
            body.append(Expression(incr))

        loop = While(cond if cond is not None else Literal(True), Block(body))
        if init is None:
            return Block([loop])
        return Block([init, loop])

    def if_statement(self) -> If:
        cond = self.expression()
        then = self.block_statement()
        orelse = None
        if self.match(T.ELSE):
            if self.match(T.IF):
                orelse = self.if_statement()
            else:
                orelse = self.block_statement()
        return If(cond, then, orelse)

    def while_statement(self) -> While:
        cond = self.expression()
        return While(cond, self.block_statement())

    def print_statement(self) -> Print:
        value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after value.")
        return Print(value)

    def return_statement(self) -> Return:
        keyword = self.previous()
        value = None
        if not self.check(T.SEMICOLON):
            value = self.expression()
        self.consume(T.SEMICOLON, "Expect ';' after return value.")
        return Return(keyword, value)

    def expression_statement(self) -> Expression:
        expr = self.expression()
        if self.interactive and self.is_at_end():
            return Expression(expr)
        self.consume(T.SEMICOLON, "Expect ';' after expression.")
        return Expression(expr)

    def block_statement(self) -> Block:
        self.consume(T.LEFT_BRACE, "Expect '{' before block.")
        return Block(self.block())

    def block(self) -> list[Stmt]:
        stmts = []
        while not self.check(T.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                stmts.append(stmt)
        self.consume(T.RIGHT_BRACE, "Expect '}' after block.")
        return stmts

    #
    # EXPRESSÕES
    #
    def expression(self) -> Expr:
        return self.assignment()

    def assignment(self) -> Expr:
        expr = self.logic_or()

        if self.match(T.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, Variable):
                return Assign(expr.name, value, slot=next(self.slots))
            if isinstance(expr, Get):
                return Set(expr.obj, expr.name, value)
            # Não sincronizamos: o parser já está num estado consistente
            self.report(equals, "Invalid assignment target.")

        return expr

    def logic_or(self) -> Expr:
        expr = self.logic_and()
        while self.match(T.OR):
            operator = self.previous()
            expr = Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self) -> Expr:
        expr = self.equality()
        while self.match(T.AND):
            operator = self.previous()
            expr = Logical(expr, operator, self.equality())
        return expr

    def equality(self) -> Expr:
        return self.binary(self.comparison, T.BANG_EQUAL, T.EQUAL_EQUAL)

    def comparison(self) -> Expr:
        return self.binary(self.term, T.GREATER, T.GREATER_EQUAL, T.LESS, T.LESS_EQUAL)

    def term(self) -> Expr:
        return self.binary(self.factor, T.MINUS, T.PLUS)

    def factor(self) -> Expr:
        return self.binary(self.unary, T.SLASH, T.STAR)

    def binary(self, operand, *kinds: T) -> Expr:
        """
        Operações binárias associativas à esquerda.
        """
        expr = operand()
        while self.match(*kinds):
            operator = self.previous()
            expr = Binary(expr, operator, operand())
        return expr

    def unary(self) -> Expr:
        if self.match(T.BANG, T.MINUS):
            operator = self.previous()
            return Unary(operator, self.unary())
        return self.call()

    def call(self) -> Expr:
        expr = self.primary()
        while True:
            if self.match(T.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(T.DOT):
                name = self.consume(T.IDENTIFIER, "Expect property name after '.'.")
                expr = Get(expr, name)
            else:
                return expr

    def finish_call(self, callee: Expr) -> Call:
        args: list[Expr] = []
        if not self.check(T.RIGHT_PAREN):
            while True:
                if len(args) >= MAX_ARGS:
                    self.report(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                args.append(self.expression())
                if not self.match(T.COMMA):
                    break
        paren = self.consume(T.RIGHT_PAREN, "Expect ')' after arguments.")
        return Call(callee, paren, args)

    def primary(self) -> Expr:
        if self.match(T.FALSE, T.TRUE, T.NIL, T.NUMBER, T.STRING):
            return Literal(self.previous().literal)
        if self.match(T.THIS):
            return This(self.previous(), slot=next(self.slots))
        if self.match(T.SUPER):
            keyword = self.previous()
            self.consume(T.DOT, "Expect '.' after 'super'.")
            method = self.consume(T.IDENTIFIER, "Expect superclass method name.")
            return Super(keyword, method, slot=next(self.slots))
        if self.match(T.IDENTIFIER):
            return Variable(self.previous(), slot=next(self.slots))
        if self.match(T.FUN):
            keyword = self.previous()
            params, body = self.function_rest("function")
            return FunctionExpr(keyword, params, body)
        if self.match(T.LEFT_PAREN):
            expr = self.expression()
            self.consume(T.RIGHT_PAREN, "Expect ')' after expression.")
            return Grouping(expr)
        raise self.error(self.peek(), "Expect expression.")

    #
    # NAVEGAÇÃO
    #
    def match(self, *kinds: T) -> bool:
        for kind in kinds:
            if self.check(kind):
                self.advance()
                return True
        return False

    def consume(self, kind: T, message: str) -> Token:
        if self.check(kind):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, kind: T) -> bool:
        return self.peek().kind is kind

    def check_next(self, kind: T) -> bool:
        if self.current + 1 >= len(self.tokens):
            return False
        return self.tokens[self.current + 1].kind is kind

    def advance(self) -> Token:
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self) -> bool:
        return self.peek().kind is T.EOF

    def peek(self) -> Token:
        return self.tokens[self.current]

    def previous(self) -> Token:
        return self.tokens[self.current - 1]

    def error(self, token: Token, message: str) -> ParseError:
        return ParseError(message, token)

    def report(self, token: Token, message: str):
        """
        Registra um erro sem interromper a análise.
        """
        self.diagnostics.append(self.error(token, message))

    def synchronize(self):
        """
        Descarta tokens até o próximo ponto seguro: logo após um ';' ou antes
        de uma palavra que inicia um comando.
        """
        self.advance()
        while not self.is_at_end():
            if self.previous().kind is T.SEMICOLON:
                return
            if self.peek().kind in STATEMENT_START:
                return
            self.advance()

from abc import ABC
from dataclasses import dataclass, field
from typing import Optional

from .tokens import LiteralValue, Token

#
# TIPOS BÁSICOS
#


class Node(ABC):
    """
    Classe base para todos os nós da árvore sintática.

    Os nós não sabem se avaliar: o Resolver e o Interpreter percorrem a árvore
    e decidem o que fazer com cada tipo de nó.
    """

    def pretty(self) -> str:
        """
        Representa o nó como código Lox.
        """
        from .printer import to_source

        return to_source(self)


class Expr(Node, ABC):
    """
    Classe base para expressões.

    Expressões são nós que podem ser avaliados para produzir um valor.
    Também podem ser atribuídos a variáveis, passados como argumentos para
    funções, etc.
    """


class Stmt(Node, ABC):
    """
    Classe base para comandos.

    Comandos são associdos a construtos sintáticos que alteram o fluxo de
    execução do código ou declaram elementos como classes, funções, etc.
    """


# Campo usado pelo Resolver para associar uma profundidade a cada referência.
# Não participa da comparação entre nós.
def slot_field():
    return field(default=-1, compare=False, repr=False)


#
# EXPRESSÕES
#
@dataclass
class Literal(Expr):
    """
    Representa valores literais no código, ex.: strings, booleanos,
    números, etc.

    Ex.: "Hello, world!", 42, 3.14, true, nil
    """

    value: LiteralValue


@dataclass
class Variable(Expr):
    """
    Uma variável no código

    Ex.: x, y, z
    """

    name: Token
    slot: int = slot_field()


@dataclass
class Assign(Expr):
    """
    Atribuição de variável.

    Ex.: x = 42
    """

    name: Token
    value: Expr
    slot: int = slot_field()


@dataclass
class Unary(Expr):
    """
    Uma operação prefixa com um operando.

    Ex.: -x, !x
    """

    operator: Token
    right: Expr


@dataclass
class Binary(Expr):
    """
    Uma operação infixa com dois operandos.

    Ex.: x + y, 2 * x, 3.14 > 3
    """

    left: Expr
    operator: Token
    right: Expr


@dataclass
class Logical(Expr):
    """
    Operadores lógicos com curto-circuito.

    Ex.: x and y, x or y
    """

    left: Expr
    operator: Token
    right: Expr


@dataclass
class Grouping(Expr):
    """
    Expressão entre parênteses.

    Ex.: (1 + 2)
    """

    expr: Expr


@dataclass
class Call(Expr):
    """
    Uma chamada de função.

    Ex.: fat(42)
    """

    callee: Expr
    paren: Token
    args: list[Expr]


@dataclass
class Get(Expr):
    """
    Acesso a atributo de um objeto.

    Ex.: x.y
    """

    obj: Expr
    name: Token


@dataclass
class Set(Expr):
    """
    Atribuição de atributo de um objeto.

    Ex.: x.y = 42
    """

    obj: Expr
    name: Token
    value: Expr


@dataclass
class This(Expr):
    """
    Acesso ao `this`.

    Ex.: this
    """

    keyword: Token
    slot: int = slot_field()


@dataclass
class Super(Expr):
    """
    Acesso a method da superclasse.

    Ex.: super.x
    """

    keyword: Token
    method: Token
    slot: int = slot_field()


@dataclass
class FunctionExpr(Expr):
    """
    Função anônima.

    Ex.: fun (x) { return x + 1; }
    """

    keyword: Token
    params: list[Token]
    body: list[Stmt]


#
# COMANDOS
#
@dataclass
class Expression(Stmt):
    """
    Representa uma expressão usada como statement.

    Ex.: f(x);
    """

    expr: Expr


@dataclass
class Print(Stmt):
    """
    Representa uma instrução de impressão.

    Ex.: print "Hello, world!";
    """

    expr: Expr


@dataclass
class VarDecl(Stmt):
    """
    Representa uma declaração de variável. `let` e `var` são equivalentes.

    Ex.: let x = 42;
    """

    name: Token
    initializer: Optional[Expr] = None


@dataclass
class Block(Stmt):
    """
    Representa bloco de comandos.

    Ex.: { var x = 42; print x;  }
    """

    stmts: list[Stmt]


@dataclass
class If(Stmt):
    """
    Representa uma instrução condicional.

    Ex.: if x > 0 { ... } else { ... }
    """

    cond: Expr
    then: Block
    orelse: Optional[Stmt] = None


@dataclass
class While(Stmt):
    """
    Representa um laço de repetição. Laços `for` e `loop` também são
    convertidos para While pelo parser.

    Ex.: while x > 0 { ... }
    """

    cond: Expr
    body: Block


@dataclass
class Function(Stmt):
    """
    Representa uma função.

    Ex.: fun f(x, y) { ... }
    """

    name: Token
    params: list[Token]
    body: list[Stmt]


@dataclass
class Return(Stmt):
    """
    Representa uma instrução de retorno.

    Ex.: return x;
    """

    keyword: Token
    value: Optional[Expr] = None


@dataclass
class Break(Stmt):
    keyword: Token


@dataclass
class Continue(Stmt):
    keyword: Token


@dataclass
class Class(Stmt):
    """
    Representa uma classe.

    Ex.: class B < A { ... }
    """

    name: Token
    superclass: Optional[Variable] = None
    methods: list[Function] = field(default_factory=list)

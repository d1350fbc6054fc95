import math
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Optional, Union

from .ctx import Ctx
from .errors import LoxRuntimeError

if TYPE_CHECKING:
    from .ast import Stmt
    from .interpreter import Interpreter
    from .tokens import Token

__all__ = [
    "add",
    "eq",
    "ge",
    "gt",
    "le",
    "lt",
    "mul",
    "ne",
    "neg",
    "not_",
    "show",
    "show_repr",
    "sub",
    "truthy",
    "truediv",
    "BUILTINS",
    "LoxCallable",
    "LoxClass",
    "LoxFunction",
    "LoxInstance",
    "NativeFunction",
    "Value",
]

# Tipos de valores que podem aparecer durante a execução do programa
Value = Union[None, bool, float, str, "LoxCallable", "LoxInstance"]


class LoxCallable(ABC):
    """
    Valores que podem ser chamados: funções nativas, funções Lox e classes.
    """

    @abstractmethod
    def arity(self) -> int: ...

    @abstractmethod
    def call(self, interpreter: "Interpreter", args: list[Value]) -> Value: ...


@dataclass(eq=False)
class NativeFunction(LoxCallable):
    """
    Função implementada em Python.
    """

    name: str
    params: int
    fn: Callable[..., Value]

    def __str__(self):
        return "<native fn>"

    def arity(self) -> int:
        return self.params

    def call(self, interpreter, args):
        try:
            return self.fn(*args)
        except (ValueError, TypeError, ArithmeticError) as exc:
            raise LoxRuntimeError(f"{self.name}: {exc}.") from exc


@dataclass(eq=False)
class LoxFunction(LoxCallable):
    """
    Representa uma função lox em tempo de execução: o corpo da função e o
    contexto em que ela foi criada (closure).
    """

    name: Optional[str]
    params: list["Token"]
    body: list["Stmt"]
    closure: Ctx = field(repr=False)
    is_initializer: bool = False

    def __str__(self):
        if self.name is None:
            return "<fn>"
        return f"<fn {self.name}>"

    def arity(self) -> int:
        return len(self.params)

    def call(self, interpreter, args):
        # Associa cada parâmetro ao argumento correspondente num escopo novo
        # cujo pai é a closure, não o contexto de quem chamou.
        ctx = self.closure.push({p.lexeme: v for p, v in zip(self.params, args)})
        value = interpreter.execute_body(self.body, ctx)
        if self.is_initializer:
            return self.closure.get_at(0, "this")
        return value

    def bind(self, obj: "LoxInstance") -> "LoxFunction":
        """
        Cria uma nova LoxFunction com 'this' ligado ao objeto especificado.
        """
        ctx = self.closure.push({"this": obj})
        return LoxFunction(self.name, self.params, self.body, ctx, self.is_initializer)


@dataclass(eq=False)
class LoxClass(LoxCallable):
    """
    Classe para representar classes Lox.
    """

    name: str
    base: Optional["LoxClass"] = None
    methods: dict[str, LoxFunction] = field(default_factory=dict)

    def __str__(self):
        return self.name

    def find_method(self, name: str) -> Optional[LoxFunction]:
        """
        Busca um método na classe atual ou nas bases.
        """
        if name in self.methods:
            return self.methods[name]
        if self.base is not None:
            return self.base.find_method(name)
        return None

    def arity(self) -> int:
        init = self.find_method("init")
        return 0 if init is None else init.arity()

    def call(self, interpreter, args):
        instance = LoxInstance(self)
        init = self.find_method("init")
        if init is not None:
            init.bind(instance).call(interpreter, args)
        return instance


class LoxInstance:
    """
    Classe base para todos os objetos Lox.
    """

    def __init__(self, lox_class: LoxClass):
        self.lox_class = lox_class
        self.fields: dict[str, Value] = {}

    def __str__(self):
        return f"{self.lox_class.name} instance"

    def __repr__(self):
        return f"<{self}>"

    def get(self, name: str) -> Value:
        """
        Obtém um campo ou método da instância. Campos escondem métodos.
        """
        if name in self.fields:
            return self.fields[name]

        method = self.lox_class.find_method(name)
        if method is not None:
            return method.bind(self)
        raise LoxRuntimeError(f"Undefined property '{name}'.")

    def set(self, name: str, value: Value):
        """
        Define um campo da instância.
        """
        self.fields[name] = value


def show(value: Value) -> str:
    """
    Converte valor lox para string.
    """
    if value is None:
        return "nil"
    elif value is True:
        return "true"
    elif value is False:
        return "false"
    elif isinstance(value, float):
        # Remove .0 se for um número inteiro
        if value.is_integer():
            return str(int(value))
        return str(value)
    else:
        return str(value)


def show_repr(value: Value) -> str:
    """
    Mostra um valor lox, mas coloca aspas em strings.
    """
    if isinstance(value, str):
        return f'"{value}"'
    return show(value)


def truthy(value: Value) -> bool:
    """
    Converte valor lox para booleano segundo a semântica do lox.
    """
    if value is None or value is False:
        return False
    return True


def is_number(value: Value) -> bool:
    # bool é subclasse de int em Python
    return isinstance(value, float) and not isinstance(value, bool)


def check_numbers(left: Value, right: Value):
    if not (is_number(left) and is_number(right)):
        raise LoxRuntimeError("Operands must be numbers.")


# Operações matemáticas para Lox
def add(left: Value, right: Value) -> Value:
    """Soma em Lox - aceita números ou strings"""
    if is_number(left) and is_number(right):
        return left + right
    elif isinstance(left, str) and isinstance(right, str):
        return left + right
    else:
        raise LoxRuntimeError("Operands must be two numbers or two strings.")


def sub(left: Value, right: Value) -> Value:
    check_numbers(left, right)
    return left - right


def mul(left: Value, right: Value) -> Value:
    check_numbers(left, right)
    return left * right


def truediv(left: Value, right: Value) -> Value:
    check_numbers(left, right)
    if right == 0:
        raise LoxRuntimeError("Division by zero.")
    return left / right


def neg(value: Value) -> Value:
    if not is_number(value):
        raise LoxRuntimeError("Operand must be a number.")
    return -value


# Operações de comparação para Lox
def gt(left: Value, right: Value) -> bool:
    check_numbers(left, right)
    return left > right


def ge(left: Value, right: Value) -> bool:
    check_numbers(left, right)
    return left >= right


def lt(left: Value, right: Value) -> bool:
    check_numbers(left, right)
    return left < right


def le(left: Value, right: Value) -> bool:
    check_numbers(left, right)
    return left <= right


def eq(left: Value, right: Value) -> bool:
    """Igualdade estrita em Lox - não aceita conversões de tipo"""
    # Em Lox, valores de tipos diferentes são sempre diferentes
    if type(left) != type(right):
        return False
    return left == right


def ne(left: Value, right: Value) -> bool:
    """Desigualdade estrita em Lox"""
    return not eq(left, right)


def not_(value: Value) -> bool:
    """Negação lógica em Lox"""
    return not truthy(value)


# Funções nativas
def clock() -> float:
    return time.time()


def sqrt(value: Value) -> float:
    if not is_number(value):
        raise LoxRuntimeError("Operand must be a number.")
    return math.sqrt(value)


def maximum(left: Value, right: Value) -> float:
    check_numbers(left, right)
    return max(left, right)


BUILTINS: dict[str, NativeFunction] = {
    "clock": NativeFunction("clock", 0, clock),
    "sqrt": NativeFunction("sqrt", 1, sqrt),
    "max": NativeFunction("max", 2, maximum),
}

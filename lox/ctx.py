from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from .errors import LoxRuntimeError

if TYPE_CHECKING:
    from .runtime import Value

ScopeDict = dict[str, "Value"]


@dataclass(eq=False)
class Ctx:
    """
    Contexto de execução: um escopo (dicionário de nomes para valores) e uma
    referência ao contexto que o envolve.

    Contextos são compartilhados por referência. Uma closure mantém vivo o
    contexto em que foi criada e enxerga as modificações feitas nele por
    qualquer outra closure ou pelo próprio bloco.
    """

    scope: ScopeDict = field(default_factory=dict)
    parent: Optional["Ctx"] = field(default=None, repr=False)

    def push(self, scope: Optional[ScopeDict] = None) -> "Ctx":
        """
        Cria um novo contexto com um novo escopo, tendo o contexto atual como pai.
        """
        return Ctx(scope if scope is not None else {}, self)

    def define(self, name: str, value: "Value" = None):
        """
        Define uma variável no escopo atual. Redeclarar um nome no mesmo
        escopo sobrescreve o valor anterior.
        """
        self.scope[name] = value

    def ancestor(self, depth: int) -> "Ctx":
        """
        Contexto `depth` níveis acima do atual.
        """
        ctx = self
        for _ in range(depth):
            if ctx.parent is None:
                raise RuntimeError(f"Cannot go {depth} scopes above this context.")
            ctx = ctx.parent
        return ctx

    def root(self) -> "Ctx":
        ctx = self
        while ctx.parent is not None:
            ctx = ctx.parent
        return ctx

    def get_at(self, depth: int, name: str) -> "Value":
        scope = self.ancestor(depth).scope
        try:
            return scope[name]
        except KeyError:
            raise undefined(name) from None

    def assign_at(self, depth: int, name: str, value: "Value"):
        scope = self.ancestor(depth).scope
        if name not in scope:
            raise undefined(name)
        scope[name] = value

    def get_global(self, name: str) -> "Value":
        try:
            return self.root().scope[name]
        except KeyError:
            raise undefined(name) from None

    def assign_global(self, name: str, value: "Value"):
        scope = self.root().scope
        if name not in scope:
            raise undefined(name)
        scope[name] = value

    def iter_scopes(self, reverse: bool = False) -> Iterator[ScopeDict]:
        """
        Itera sobre os ambientes do contexto, começando pelo mais interno.
        """
        if reverse:
            if self.parent is not None:
                yield from self.parent.iter_scopes(reverse=True)
            yield self.scope
        else:
            yield self.scope
            if self.parent is not None:
                yield from self.parent.iter_scopes()

    def pretty(self) -> str:
        """
        Representação do contexto como string.
        """
        from .runtime import show

        lines: list[str] = []
        for i, scope in enumerate(self.iter_scopes(reverse=True)):
            lines.append(pretty_scope(scope, i, show))
        return "\n".join(reversed(lines))


def undefined(name: str) -> LoxRuntimeError:
    return LoxRuntimeError(f"Undefined variable '{name}'.")


def pretty_scope(env: ScopeDict, index: int, show=str) -> str:
    """
    Representa um escopo como string.
    """
    if not env:
        return f"{index:>2}: <empty>"
    items = (f"{k} = {show(v)}" for k, v in sorted(env.items()))
    data = "; ".join(items)
    return f"{index:>2}: {data}"

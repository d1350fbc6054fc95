"""
Converte nós da árvore sintática de volta para código Lox.

A saída de expressões produzidas pelo parser pode ser analisada novamente e
resulta numa árvore igual à original. Comandos são impressos na forma já
transformada pelo parser (laços `for` aparecem como `while`).
"""

from decimal import Decimal

from .ast import *

INDENT = "    "


def to_source(node: Node, depth: int = 0) -> str:
    if isinstance(node, Expr):
        return expr_source(node)
    return "\n".join(stmt_lines(node, depth))


def show_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        return format(Decimal(text), "f")
    return text


def expr_source(expr: Expr) -> str:
    if isinstance(expr, Literal):
        value = expr.value
        if value is None:
            return "nil"
        if value is True:
            return "true"
        if value is False:
            return "false"
        if isinstance(value, str):
            return f'"{value}"'
        return show_number(value)
    if isinstance(expr, Variable):
        return expr.name.lexeme
    if isinstance(expr, Assign):
        return f"{expr.name.lexeme} = {expr_source(expr.value)}"
    if isinstance(expr, Unary):
        return f"{expr.operator.lexeme}{expr_source(expr.right)}"
    if isinstance(expr, (Binary, Logical)):
        left, right = expr_source(expr.left), expr_source(expr.right)
        return f"{left} {expr.operator.lexeme} {right}"
    if isinstance(expr, Grouping):
        return f"({expr_source(expr.expr)})"
    if isinstance(expr, Call):
        args = ", ".join(expr_source(arg) for arg in expr.args)
        return f"{expr_source(expr.callee)}({args})"
    if isinstance(expr, Get):
        return f"{expr_source(expr.obj)}.{expr.name.lexeme}"
    if isinstance(expr, Set):
        return f"{expr_source(expr.obj)}.{expr.name.lexeme} = {expr_source(expr.value)}"
    if isinstance(expr, This):
        return "this"
    if isinstance(expr, Super):
        return f"super.{expr.method.lexeme}"
    if isinstance(expr, FunctionExpr):
        params = ", ".join(p.lexeme for p in expr.params)
        return f"fun ({params}) {body_source(expr.body, 0)}"
    raise TypeError(f"unknown expression: {type(expr).__name__}")


def body_source(stmts: list[Stmt], depth: int) -> str:
    """
    Bloco entre chaves, com o fechamento alinhado em `depth`.
    """
    if not stmts:
        return "{}"
    lines = ["{"]
    for stmt in stmts:
        lines.extend(stmt_lines(stmt, depth + 1))
    lines.append(INDENT * depth + "}")
    return "\n".join(lines)


def stmt_lines(stmt: Stmt, depth: int) -> list[str]:
    pad = INDENT * depth

    if isinstance(stmt, Expression):
        return [f"{pad}{expr_source(stmt.expr)};"]
    if isinstance(stmt, Print):
        return [f"{pad}print {expr_source(stmt.expr)};"]
    if isinstance(stmt, VarDecl):
        if stmt.initializer is None:
            return [f"{pad}let {stmt.name.lexeme};"]
        return [f"{pad}let {stmt.name.lexeme} = {expr_source(stmt.initializer)};"]
    if isinstance(stmt, Block):
        return [pad + body_source(stmt.stmts, depth)]
    if isinstance(stmt, If):
        text = f"{pad}if {expr_source(stmt.cond)} {body_source(stmt.then.stmts, depth)}"
        if stmt.orelse is not None:
            orelse = "\n".join(stmt_lines(stmt.orelse, depth)).lstrip()
            text += f" else {orelse}"
        return [text]
    if isinstance(stmt, While):
        return [f"{pad}while {expr_source(stmt.cond)} {body_source(stmt.body.stmts, depth)}"]
    if isinstance(stmt, Function):
        params = ", ".join(p.lexeme for p in stmt.params)
        return [f"{pad}fun {stmt.name.lexeme}({params}) {body_source(stmt.body, depth)}"]
    if isinstance(stmt, Return):
        if stmt.value is None:
            return [f"{pad}return;"]
        return [f"{pad}return {expr_source(stmt.value)};"]
    if isinstance(stmt, Break):
        return [f"{pad}break;"]
    if isinstance(stmt, Continue):
        return [f"{pad}continue;"]
    if isinstance(stmt, Class):
        header = f"{pad}class {stmt.name.lexeme}"
        if stmt.superclass is not None:
            header += f" < {stmt.superclass.name.lexeme}"
        lines = [header + " {"]
        for method in stmt.methods:
            params = ", ".join(p.lexeme for p in method.params)
            lines.append(f"{pad}{INDENT}{method.name.lexeme}({params}) {body_source(method.body, depth + 1)}")
        lines.append(pad + "}")
        return lines
    raise TypeError(f"unknown statement: {type(stmt).__name__}")

import pytest

from lox.ctx import Ctx
from lox.errors import LoxRuntimeError


def test_define_and_lookup_at_depth():
    outer = Ctx({"a": 1.0})
    inner = outer.push({"b": 2.0})
    assert inner.get_at(0, "b") == 2.0
    assert inner.get_at(1, "a") == 1.0
    assert inner.ancestor(1) is outer
    assert inner.root() is outer


def test_assignment_is_visible_through_shared_frames():
    outer = Ctx({"a": 1.0})
    first, second = outer.push(), outer.push()
    first.assign_at(1, "a", 5.0)
    assert second.get_at(1, "a") == 5.0


def test_globals_from_nested_frame():
    ctx = Ctx({"g": "x"}).push().push()
    ctx.assign_global("g", "y")
    assert ctx.get_global("g") == "y"


def test_redefinition_overwrites():
    ctx = Ctx()
    ctx.define("a", 1.0)
    ctx.define("a", 2.0)
    assert ctx.get_at(0, "a") == 2.0


@pytest.mark.parametrize(
    "action",
    [
        lambda ctx: ctx.get_global("missing"),
        lambda ctx: ctx.assign_global("missing", 1.0),
        lambda ctx: ctx.get_at(0, "missing"),
        lambda ctx: ctx.assign_at(0, "missing", 1.0),
    ],
)
def test_undefined_variable(action):
    with pytest.raises(LoxRuntimeError, match="Undefined variable 'missing'."):
        action(Ctx().push())


def test_pretty():
    assert Ctx().pretty() == " 0: <empty>"
    ctx = Ctx({"a": 1.0, "t": True}).push({"b": "x"})
    assert ctx.pretty() == " 1: b = x\n 0: a = 1; t = true"


def test_ancestor_beyond_global_scope():
    with pytest.raises(RuntimeError, match="Cannot go 2 scopes above this context."):
        Ctx().push().ancestor(2)

import pytest

from coolcgen.classtable import STR_FIELD, VAL, CgenClassTable, CgenNode
from coolcgen.environment import Environment
from coolcgen.tree import Attr, ClassDecl, NoExpr


def test_params_counted_from_last():
    env = Environment()
    names = ["a", "b", "c"]
    for name in names:
        env.add_param(name)
    assert env.lookup_param("a") == len(names) - 1
    assert env.lookup_param("c") == 0
    assert env.lookup_param("zz") is None


def test_add_param_returns_position():
    env = Environment()
    assert [env.add_param(n) for n in ["a", "b"]] == [0, 1]


def test_var_distance_from_top():
    env = Environment()
    env.enter_scope()
    env.add_var("x")
    env.add_var("y")
    assert env.lookup_var("y") == 0
    assert env.lookup_var("x") == 1
    assert env.lookup_var("missing") is None


def test_obstacle_shifts_variables():
    env = Environment()
    env.enter_scope()
    env.add_var("x")
    before = env.lookup_var("x")
    env.add_obstacle()
    assert env.lookup_var("x") == before + 1
    assert len(env.scope_lengths) == 2


def test_shadowing_finds_innermost():
    env = Environment()
    env.enter_scope()
    env.add_var("x")
    env.add_var("y")
    env.enter_scope()
    env.add_var("x")
    assert env.lookup_var("x") == 0
    env.exit_scope()
    assert env.lookup_var("x") == 1
    assert env.variables == ["x", "y"]


def test_exit_scope_removes_its_variables():
    env = Environment()
    env.enter_scope()
    env.add_var("a")
    env.enter_scope()
    env.add_var("b")
    env.add_var("c")
    env.exit_scope()
    assert env.variables == ["a"]
    assert env.lookup_var("b") is None


def test_exit_empty_scope_keeps_variables():
    env = Environment()
    env.enter_scope()
    env.add_var("a")
    env.enter_scope()
    env.exit_scope()
    assert env.variables == ["a"]


def test_add_var_without_scope_raises():
    with pytest.raises(RuntimeError):
        Environment().add_var("x")


def test_exit_without_scope_raises():
    with pytest.raises(RuntimeError):
        Environment().exit_scope()


def test_copy_is_independent():
    env = Environment()
    env.add_param("p")
    env.enter_scope()
    env.add_var("x")
    clone = env.copy()
    clone.add_obstacle()
    clone.add_param("q")
    assert env.variables == ["x"]
    assert env.params == ["p"]
    assert clone.lookup_var("x") == env.lookup_var("x") + 1
    assert clone.class_node is env.class_node


def test_lookup_attrib_uses_class_layout():
    table = CgenClassTable([])
    node = table.class_node("String")
    env = Environment(node)
    assert env.lookup_attrib(VAL) == node.attrib_index()[VAL]
    assert env.lookup_attrib(STR_FIELD) == node.attrib_index()[STR_FIELD]
    assert env.lookup_attrib("nothing") is None


def test_lookup_attrib_without_class():
    assert Environment().lookup_attrib("x") is None


def test_lookup_attrib_standalone_node():
    node = CgenNode(ClassDecl("A", "Object", [Attr("x", "Int", NoExpr())]), False)
    env = Environment(node)
    assert env.lookup_attrib("x") == node.attrib_index()["x"]
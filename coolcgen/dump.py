"""Plain indented dump of a Cool syntax tree."""

from __future__ import annotations

from typing import Any, TextIO

from coolcgen.textutil import pad
from coolcgen.tree import (
    Assign,
    Attr,
    Block,
    BoolConst,
    Branch,
    ClassDecl,
    Comp,
    Cond,
    Dispatch,
    Divide,
    Eq,
    Formal,
    IntConst,
    IsVoid,
    Leq,
    Let,
    Loop,
    Lt,
    Method,
    Mul,
    Neg,
    New,
    NoExpr,
    Node,
    Object,
    Plus,
    Program,
    StaticDispatch,
    StringConst,
    Sub,
    TypCase,
)

_LAYOUT: dict[type, tuple[str, tuple[str, ...]]] = {
    Program: ("program", ("classes",)),
    ClassDecl: ("class_", ("name", "parent", "features", "filename")),
    Method: ("method", ("name", "formals", "return_type", "expr")),
    Attr: ("attr", ("name", "type_decl", "init")),
    Formal: ("formal", ("name", "type_decl")),
    Branch: ("branch", ("name", "type_decl", "expr")),
    Assign: ("assign", ("name", "expr")),
    StaticDispatch: ("static_dispatch", ("expr", "type_name", "name", "actual")),
    Dispatch: ("dispatch", ("expr", "name", "actual")),
    Cond: ("cond", ("pred", "then_exp", "else_exp")),
    Loop: ("loop", ("pred", "body")),
    TypCase: ("typcase", ("expr", "cases")),
    Block: ("block", ("body",)),
    Let: ("let", ("identifier", "type_decl", "init", "body")),
    Plus: ("plus", ("e1", "e2")),
    Sub: ("sub", ("e1", "e2")),
    Mul: ("mul", ("e1", "e2")),
    Divide: ("divide", ("e1", "e2")),
    Neg: ("neg", ("e1",)),
    Lt: ("lt", ("e1", "e2")),
    Eq: ("eq", ("e1", "e2")),
    Leq: ("leq", ("e1", "e2")),
    Comp: ("comp", ("e1",)),
    IntConst: ("int_const", ("token",)),
    BoolConst: ("bool_const", ("val",)),
    StringConst: ("string_const", ("token",)),
    New: ("new_", ("type_name",)),
    IsVoid: ("isvoid", ("e1",)),
    NoExpr: ("no_expr", ()),
    Object: ("object", ("name",)),
}


def _dump_value(value: Any, stream: TextIO, n: int) -> None:
    if isinstance(value, Node):
        dump(value, stream, n)
    elif isinstance(value, list):
        for item in value:
            _dump_value(item, stream, n)
    elif isinstance(value, bool):
        stream.write(f"{pad(n)}{int(value)}\n")
    else:
        stream.write(f"{pad(n)}{value}\n")


def dump(node: Node, stream: TextIO, n: int = 0) -> None:
    """Write ``node`` and its children to ``stream``, indented by ``n`` spaces."""
    try:
        label, names = _LAYOUT[type(node)]
    except KeyError:
        raise TypeError(f"cannot dump {type(node).__name__}") from None
    stream.write(f"{pad(n)}{label}\n")
    for name in names:
        _dump_value(getattr(node, name), stream, n + 2)
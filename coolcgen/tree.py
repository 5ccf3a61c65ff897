"""Abstract syntax tree for Cool programs."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


def _copy_value(value: Any) -> Any:
    if isinstance(value, Node):
        return value.copy()
    if isinstance(value, list):
        return [_copy_value(item) for item in value]
    return value


@dataclass
class Node:
    """Base of every tree node; remembers the source line it came from."""

    line_number: int = field(default=1, kw_only=True)

    def copy(self) -> Node:
        """Return a deep structural copy; expression types are not carried over."""
        kwargs = {
            f.name: _copy_value(getattr(self, f.name))
            for f in fields(self)
            if f.name != "type"
        }
        return self.__class__(**kwargs)


@dataclass
class Expression(Node):
    """Base of all expressions; ``type`` is filled in by semantic analysis."""

    type: str | None = field(default=None, kw_only=True)

    def is_empty(self) -> bool:
        """True only for the empty expression."""
        return False


@dataclass
class Formal(Node):
    name: str
    type_decl: str


@dataclass
class Feature(Node):
    """Base of class features: methods and attributes."""

    is_method = False


@dataclass
class Method(Feature):
    name: str
    formals: list[Formal]
    return_type: str
    expr: Expression

    is_method = True

    def arg_count(self) -> int:
        """Number of formal parameters."""
        return len(self.formals)


@dataclass
class Attr(Feature):
    name: str
    type_decl: str
    init: Expression


@dataclass
class ClassDecl(Node):
    name: str
    parent: str
    features: list[Feature] = field(default_factory=list)
    filename: str = ""


@dataclass
class Program(Node):
    classes: list[ClassDecl] = field(default_factory=list)


@dataclass
class Branch(Node):
    name: str
    type_decl: str
    expr: Expression


@dataclass
class Assign(Expression):
    name: str
    expr: Expression


@dataclass
class StaticDispatch(Expression):
    expr: Expression
    type_name: str
    name: str
    actual: list[Expression] = field(default_factory=list)


@dataclass
class Dispatch(Expression):
    expr: Expression
    name: str
    actual: list[Expression] = field(default_factory=list)


@dataclass
class Cond(Expression):
    pred: Expression
    then_exp: Expression
    else_exp: Expression


@dataclass
class Loop(Expression):
    pred: Expression
    body: Expression


@dataclass
class TypCase(Expression):
    expr: Expression
    cases: list[Branch] = field(default_factory=list)


@dataclass
class Block(Expression):
    body: list[Expression] = field(default_factory=list)


@dataclass
class Let(Expression):
    identifier: str
    type_decl: str
    init: Expression
    body: Expression


@dataclass
class Plus(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Sub(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Mul(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Divide(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Neg(Expression):
    e1: Expression


@dataclass
class Lt(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Eq(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Leq(Expression):
    e1: Expression
    e2: Expression


@dataclass
class Comp(Expression):
    e1: Expression


@dataclass
class IntConst(Expression):
    token: str


@dataclass
class BoolConst(Expression):
    val: bool


@dataclass
class StringConst(Expression):
    token: str


@dataclass
class New(Expression):
    type_name: str


@dataclass
class IsVoid(Expression):
    e1: Expression


@dataclass
class NoExpr(Expression):
    def is_empty(self) -> bool:
        return True


@dataclass
class Object(Expression):
    name: str
"""The inheritance graph of a program's classes and their object layouts."""

from __future__ import annotations

from typing import Iterable

from coolcgen.stringtab import SymbolTables
from coolcgen.tree import Attr, ClassDecl, Feature, Formal, Method, NoExpr

ARG = "arg"
ARG2 = "arg2"
BOOL = "Bool"
CONCAT = "concat"
COOL_ABORT = "abort"
COPY = "copy"
INT = "Int"
IN_INT = "in_int"
IN_STRING = "in_string"
IO = "IO"
LENGTH = "length"
MAIN = "Main"
MAIN_METH = "main"
NO_CLASS = "_no_class"
NO_TYPE = "_no_type"
OBJECT = "Object"
OUT_INT = "out_int"
OUT_STRING = "out_string"
PRIM_SLOT = "_prim_slot"
SELF = "self"
SELF_TYPE = "SELF_TYPE"
STR = "String"
STR_FIELD = "_str_field"
SUBSTR = "substr"
TYPE_NAME = "type_name"
VAL = "_val"

BASIC_FILENAME = "<basic class>"


class CgenNode:
    """A class in the inheritance graph, with its computed layouts."""

    def __init__(self, decl: ClassDecl, basic: bool = False) -> None:
        self.decl = decl
        self.basic = bool(basic)
        self.parentnd: CgenNode | None = None
        self.children: list[CgenNode] = []
        self.class_tag: int | None = None
        self._inheritance: list[CgenNode] | None = None
        self._attribs: list[Attr] | None = None
        self._full_attribs: list[Attr] | None = None
        self._attrib_index: dict[str, int] | None = None
        self._methods: list[Method] | None = None
        self._full_methods: list[Method] | None = None
        self._dispatch_class: dict[str, str] | None = None
        self._dispatch_index: dict[str, int] | None = None

    @property
    def name(self) -> str:
        return self.decl.name

    @property
    def parent(self) -> str:
        return self.decl.parent

    @property
    def features(self) -> list[Feature]:
        return self.decl.features

    @property
    def filename(self) -> str:
        return self.decl.filename

    def __repr__(self) -> str:
        return f"CgenNode({self.name!r})"

    def add_child(self, child: CgenNode) -> None:
        """Record ``child``; the most recently added child comes first."""
        self.children.insert(0, child)

    def set_parent(self, parent: CgenNode) -> None:
        """Link this node to its parent; a node has its parent set only once."""
        if parent is None:
            raise ValueError(f"class {self.name} needs a parent node")
        if self.parentnd is not None:
            raise ValueError(f"class {self.name} already has a parent")
        self.parentnd = parent

    def inheritance(self) -> list[CgenNode]:
        """The chain of ancestors from the root down to this class."""
        if self._inheritance is None:
            chain: list[CgenNode] = []
            node: CgenNode | None = self
            while node is not None and node.name != NO_CLASS:
                chain.append(node)
                node = node.parentnd
            chain.reverse()
            self._inheritance = chain
        return list(self._inheritance)

    def attribs(self) -> list[Attr]:
        """Attributes declared in this class itself."""
        if self._attribs is None:
            self._attribs = [f for f in self.features if not f.is_method]
        return list(self._attribs)

    def full_attribs(self) -> list[Attr]:
        """All attributes, inherited ones first, in object layout order."""
        if self._full_attribs is None:
            self._full_attribs = [
                attr for node in self.inheritance() for attr in node.attribs()
            ]
            self._attrib_index = {
                attr.name: idx for idx, attr in enumerate(self._full_attribs)
            }
        return list(self._full_attribs)

    def attrib_index(self) -> dict[str, int]:
        """Map each attribute name to its slot among the attributes."""
        self.full_attribs()
        assert self._attrib_index is not None
        return dict(self._attrib_index)

    def methods(self) -> list[Method]:
        """Methods declared in this class itself."""
        if self._methods is None:
            self._methods = [f for f in self.features if f.is_method]
        return list(self._methods)

    def _build_dispatch(self) -> None:
        full: list[Method] = []
        owner: dict[str, str] = {}
        index: dict[str, int] = {}
        for node in self.inheritance():
            for method in node.methods():
                if method.name in index:
                    full[index[method.name]] = method
                else:
                    full.append(method)
                    index[method.name] = len(full) - 1
                owner[method.name] = node.name
        self._full_methods = full
        self._dispatch_class = owner
        self._dispatch_index = index

    def full_methods(self) -> list[Method]:
        """The dispatch table: inherited slots first, overrides in place."""
        if self._full_methods is None:
            self._build_dispatch()
        assert self._full_methods is not None
        return list(self._full_methods)

    def dispatch_class(self) -> dict[str, str]:
        """Map each method name to the class whose body is dispatched to."""
        if self._dispatch_class is None:
            self._build_dispatch()
        assert self._dispatch_class is not None
        return dict(self._dispatch_class)

    def dispatch_index(self) -> dict[str, int]:
        """Map each method name to its slot in the dispatch table."""
        if self._dispatch_index is None:
            self._build_dispatch()
        assert self._dispatch_index is not None
        return dict(self._dispatch_index)


def _method(name: str, formals: list[Formal], return_type: str) -> Method:
    return Method(name, formals, return_type, NoExpr())


def _basic_classes(filename: str) -> list[ClassDecl]:
    return [
        ClassDecl(
            OBJECT,
            NO_CLASS,
            [
                _method(COOL_ABORT, [], OBJECT),
                _method(TYPE_NAME, [], STR),
                _method(COPY, [], SELF_TYPE),
            ],
            filename,
        ),
        ClassDecl(
            IO,
            OBJECT,
            [
                _method(OUT_STRING, [Formal(ARG, STR)], SELF_TYPE),
                _method(OUT_INT, [Formal(ARG, INT)], SELF_TYPE),
                _method(IN_STRING, [], STR),
                _method(IN_INT, [], INT),
            ],
            filename,
        ),
        ClassDecl(INT, OBJECT, [Attr(VAL, PRIM_SLOT, NoExpr())], filename),
        ClassDecl(BOOL, OBJECT, [Attr(VAL, PRIM_SLOT, NoExpr())], filename),
        ClassDecl(
            STR,
            OBJECT,
            [
                Attr(VAL, INT, NoExpr()),
                Attr(STR_FIELD, PRIM_SLOT, NoExpr()),
                _method(LENGTH, [], INT),
                _method(CONCAT, [Formal(ARG, STR)], STR),
                _method(SUBSTR, [Formal(ARG, INT), Formal(ARG2, INT)], STR),
            ],
            filename,
        ),
    ]


class CgenClassTable:
    """All classes of a program, linked into their inheritance tree and tagged."""

    def __init__(
        self, classes: Iterable[ClassDecl], tables: SymbolTables | None = None
    ) -> None:
        self.tables = tables if tables is not None else SymbolTables()
        self._symbols: dict[str, CgenNode] = {}
        self._installed: list[CgenNode] = []
        self._class_nodes: list[CgenNode] | None = None
        self._class_tags: dict[str, int] = {}

        self._install_basic_classes()
        for decl in classes:
            self._install_class(self._make_node(decl, basic=False))
        self._build_inheritance_tree()

        tags = self.class_tags()
        self.string_tag = tags[STR]
        self.int_tag = tags[INT]
        self.bool_tag = tags[BOOL]

    def _make_node(self, decl: ClassDecl, basic: bool) -> CgenNode:
        self.tables.stringtable.add_string(decl.name)
        return CgenNode(decl, basic)

    def _install_basic_classes(self) -> None:
        filename = self.tables.stringtable.add_string(BASIC_FILENAME).text
        for special in (NO_CLASS, SELF_TYPE, PRIM_SLOT):
            node = self._make_node(ClassDecl(special, NO_CLASS, [], filename), True)
            self._symbols[special] = node
        for decl in _basic_classes(filename):
            self._install_class(self._make_node(decl, basic=True))

    def _install_class(self, node: CgenNode) -> None:
        if node.name in self._symbols:
            return
        self._installed.append(node)
        self._symbols[node.name] = node

    def _build_inheritance_tree(self) -> None:
        for node in reversed(self._installed):
            try:
                parent = self._symbols[node.parent]
            except KeyError:
                raise KeyError(
                    f"class {node.name} inherits from undefined class {node.parent}"
                ) from None
            node.set_parent(parent)
            parent.add_child(node)

    def root(self) -> CgenNode:
        """The Object class."""
        return self._symbols[OBJECT]

    def class_nodes(self) -> list[CgenNode]:
        """Every installed class in tag order; tags are assigned on first use."""
        if self._class_nodes is None:
            self._class_nodes = list(self._installed)
            for tag, node in enumerate(self._class_nodes):
                node.class_tag = tag
                self._class_tags[node.name] = tag
        return list(self._class_nodes)

    def class_tags(self) -> dict[str, int]:
        """Map each class name to its tag."""
        self.class_nodes()
        return dict(self._class_tags)

    def class_node(self, name: str) -> CgenNode:
        """The node of the class called ``name``."""
        nodes = self.class_nodes()
        try:
            return nodes[self._class_tags[name]]
        except KeyError:
            raise KeyError(f"unknown class: {name}") from None
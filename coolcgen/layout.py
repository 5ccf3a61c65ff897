"""Class tables, dispatch tables, prototype objects, initialisers and method bodies."""

from __future__ import annotations

from coolcgen.classtable import (
    BOOL,
    INT,
    NO_CLASS,
    STR,
    STR_FIELD,
    VAL,
    CgenClassTable,
    CgenNode,
)
from coolcgen.constants import FALSE_BOOL
from coolcgen.emit import (
    A1,
    ACC,
    CLASSNAMETAB,
    CLASSOBJTAB,
    DEFAULT_OBJFIELDS,
    FP,
    LABEL,
    RA,
    SP,
    WORD,
    WORD_SIZE,
    Emitter,
    disptab_ref,
    init_ref,
    method_ref,
    protobj_ref,
)
from coolcgen.emit import SELF as SELF_REG
from coolcgen.environment import Environment
from coolcgen.exprgen import ExpressionCoder
from coolcgen.options import Memmgr
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import Method

_FRAME_WORDS = 3


def code_class_name_tab(
    emitter: Emitter, classtable: CgenClassTable, tables: SymbolTables
) -> None:
    """Emit the table of class-name strings, indexed by class tag."""
    emitter.write(CLASSNAMETAB + LABEL)
    for node in classtable.class_nodes():
        entry = tables.stringtable.lookup_string(node.name)
        emitter.line(f"{WORD}{entry.code_ref()}")
        for child in node.children:
            emitter.line(f"# child: {child.name}")
        emitter.line()


def code_class_obj_tab(emitter: Emitter, classtable: CgenClassTable) -> None:
    """Emit the table of prototype object and initialiser pairs, by class tag."""
    emitter.write(CLASSOBJTAB + LABEL)
    for node in classtable.class_nodes():
        emitter.line(f"{WORD}{protobj_ref(node.name)}")
        emitter.line(f"{WORD}{init_ref(node.name)}")


def code_dispatch_tabs(emitter: Emitter, classtable: CgenClassTable) -> None:
    """Emit one dispatch table per class."""
    for node in classtable.class_nodes():
        emitter.write(disptab_ref(node.name) + LABEL)
        owners = node.dispatch_class()
        slots = node.dispatch_index()
        for method in node.full_methods():
            emitter.line(f"\t# method # {slots[method.name]}")
            emitter.line(f"{WORD}{method_ref(owners[method.name], method.name)}")


def _code_prot_obj(emitter: Emitter, node: CgenNode, tables: SymbolTables) -> None:
    attribs = node.full_attribs()
    emitter.line(f"{WORD}-1")
    emitter.write(protobj_ref(node.name) + LABEL)
    emitter.line(f"{WORD}{node.class_tag}\t# class tag")
    emitter.line(f"{WORD}{DEFAULT_OBJFIELDS + len(attribs)}\t# size")
    emitter.line(f"{WORD}{disptab_ref(node.name)}")

    zero_int = tables.inttable.lookup_string("0").code_ref()
    for attr in attribs:
        if attr.name == VAL:
            if node.name == STR:
                emitter.line(f"{WORD}{zero_int}\t# int(0)")
            else:
                emitter.line(f"{WORD}0\t# val(0)")
        elif attr.name == STR_FIELD:
            emitter.line(f"{WORD}0\t# str(0)")
        elif attr.type_decl == INT:
            emitter.line(f"{WORD}{zero_int}\t# int(0)")
        elif attr.type_decl == BOOL:
            emitter.line(f"{WORD}{FALSE_BOOL.code_ref()}\t# bool(0)")
        elif attr.type_decl == STR:
            empty = tables.stringtable.lookup_string("").code_ref()
            emitter.line(f"{WORD}{empty}\t# str()")
        else:
            emitter.line(f"{WORD}0\t# void")


def code_prot_objs(
    emitter: Emitter, classtable: CgenClassTable, tables: SymbolTables
) -> None:
    """Emit a prototype object for every class."""
    for node in classtable.class_nodes():
        _code_prot_obj(emitter, node, tables)


def _enter_frame(em: Emitter) -> None:
    em.comment("push fp, s0, ra")
    em.addiu(SP, SP, -_FRAME_WORDS * WORD_SIZE)
    em.store(FP, 3, SP)
    em.store(SELF_REG, 2, SP)
    em.store(RA, 1, SP)
    em.line()
    em.comment("fp now points to the return addr in stack")
    em.addiu(FP, SP, WORD_SIZE)
    em.line()
    em.comment("SELF = a0")
    em.move(SELF_REG, ACC)
    em.line()


def _leave_frame(em: Emitter) -> None:
    em.comment("pop fp, s0, ra")
    em.load(FP, 3, SP)
    em.load(SELF_REG, 2, SP)
    em.load(RA, 1, SP)
    em.addiu(SP, SP, _FRAME_WORDS * WORD_SIZE)
    em.line()


def code_method(coder: ExpressionCoder, method: Method, class_node: CgenNode) -> None:
    """Emit the body of ``method`` as defined in ``class_node``."""
    em = coder.emitter
    em.write(method_ref(class_node.name, method.name) + LABEL)
    _enter_frame(em)

    em.comment("evaluating expression and put it to ACC")
    env = Environment(class_node)
    for formal in method.formals:
        env.add_param(formal.name)
    coder.code(method.expr, env)
    em.line()

    _leave_frame(em)
    em.comment("Pop arguments")
    em.addiu(SP, SP, method.arg_count() * WORD_SIZE)
    em.line()
    em.comment("return")
    em.ret()
    em.line()


def _code_init(coder: ExpressionCoder, node: CgenNode) -> None:
    em = coder.emitter
    tables = coder.tables
    em.write(init_ref(node.name) + LABEL)
    _enter_frame(em)

    parent = node.parentnd
    if parent is not None and parent.name != NO_CLASS:
        em.comment("init parent")
        em.jal(init_ref(parent.name))
        em.line()

    slots = node.attrib_index()
    for attr in node.attribs():
        em.comment(f"init attrib {attr.name}")
        slot = DEFAULT_OBJFIELDS + slots[attr.name]
        if attr.init.is_empty():
            if attr.type_decl == STR:
                em.load_address(ACC, tables.stringtable.lookup_string("").code_ref())
                em.store(ACC, slot, SELF_REG)
            elif attr.type_decl == INT:
                em.load_address(ACC, tables.inttable.lookup_string("0").code_ref())
                em.store(ACC, slot, SELF_REG)
            elif attr.type_decl == BOOL:
                em.load_address(ACC, FALSE_BOOL.code_ref())
                em.store(ACC, slot, SELF_REG)
        else:
            coder.code(attr.init, Environment(node))
            em.store(ACC, slot, SELF_REG)
            if coder.options.memmgr == Memmgr.GENGC:
                em.addiu(A1, SELF_REG, WORD_SIZE * slot)
                em.jal("_GenGC_Assign")
            em.line()

    em.comment("ret = SELF")
    em.move(ACC, SELF_REG)
    em.line()
    _leave_frame(em)
    em.comment("return")
    em.ret()
    em.line()


def code_class_inits(coder: ExpressionCoder, classtable: CgenClassTable) -> None:
    """Emit an initialiser for every class."""
    for node in classtable.class_nodes():
        _code_init(coder, node)


def code_class_methods(coder: ExpressionCoder, classtable: CgenClassTable) -> None:
    """Emit the methods of every class that is not built in."""
    for node in classtable.class_nodes():
        if not node.basic:
            for method in node.methods():
                code_method(coder, method, node)
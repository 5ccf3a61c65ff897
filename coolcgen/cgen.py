"""The code generator driver: turns a typed program into MIPS assembly."""

from __future__ import annotations

from typing import Iterable, TextIO

from coolcgen.classtable import BOOL, INT, MAIN, MAIN_METH, STR, CgenClassTable
from coolcgen.constants import FALSE_BOOL, TRUE_BOOL, code_constants
from coolcgen.emit import (
    ALIGN,
    BOOLTAG,
    CLASSNAMETAB,
    GC_COLLECT_NAMES,
    GC_INIT_NAMES,
    GLOBAL,
    HEAP_START,
    INTTAG,
    LABEL,
    STRINGTAG,
    WORD,
    Emitter,
    init_ref,
    method_ref,
    protobj_ref,
)
from coolcgen.exprgen import ExpressionCoder
from coolcgen.layout import (
    code_class_inits,
    code_class_methods,
    code_class_name_tab,
    code_class_obj_tab,
    code_dispatch_tabs,
    code_prot_objs,
)
from coolcgen.options import MemmgrTest, Options
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import ClassDecl, Program


class CodeGenerator:
    """Lays out all classes of a program and writes their assembly."""

    def __init__(
        self,
        classes: Iterable[ClassDecl],
        stream: TextIO,
        options: Options | None = None,
        tables: SymbolTables | None = None,
    ) -> None:
        self.options = options if options is not None else Options()
        self.tables = tables if tables is not None else SymbolTables()
        if self.options.cgen_debug:
            print("Building CgenClassTable")
        self.classtable = CgenClassTable(classes, self.tables)
        self.emitter = Emitter(stream)
        self.coder = ExpressionCoder(
            self.emitter, self.classtable, self.tables, self.options
        )
        self.string_tag = self.classtable.string_tag
        self.int_tag = self.classtable.int_tag
        self.bool_tag = self.classtable.bool_tag

    def _debug(self, message: str) -> None:
        if self.options.cgen_debug:
            print(message)

    def _code_global_data(self) -> None:
        em = self.emitter
        em.write("\t.data\n" + ALIGN)
        em.line(GLOBAL + CLASSNAMETAB)
        for name in (MAIN, INT, STR):
            em.line(GLOBAL + protobj_ref(name))
        em.line(GLOBAL + FALSE_BOOL.code_ref())
        em.line(GLOBAL + TRUE_BOOL.code_ref())
        for tag_name in (INTTAG, BOOLTAG, STRINGTAG):
            em.line(GLOBAL + tag_name)
        em.write(INTTAG + LABEL)
        em.line(f"{WORD}{self.int_tag}")
        em.write(BOOLTAG + LABEL)
        em.line(f"{WORD}{self.bool_tag}")
        em.write(STRINGTAG + LABEL)
        em.line(f"{WORD}{self.string_tag}")

    def _code_select_gc(self) -> None:
        em = self.emitter
        memmgr = int(self.options.memmgr)
        em.line(GLOBAL + "_MemMgr_INITIALIZER")
        em.line("_MemMgr_INITIALIZER:")
        em.line(WORD + GC_INIT_NAMES[memmgr])
        em.line(GLOBAL + "_MemMgr_COLLECTOR")
        em.line("_MemMgr_COLLECTOR:")
        em.line(WORD + GC_COLLECT_NAMES[memmgr])
        em.line(GLOBAL + "_MemMgr_TEST")
        em.line("_MemMgr_TEST:")
        em.line(f"{WORD}{int(self.options.memmgr_test == MemmgrTest.TEST)}")

    def _code_global_text(self) -> None:
        em = self.emitter
        em.line(GLOBAL + HEAP_START)
        em.write(HEAP_START + LABEL)
        em.line(f"{WORD}0")
        em.line("\t.text")
        for name in (MAIN, INT, STR, BOOL):
            em.line(GLOBAL + init_ref(name))
        em.line(GLOBAL + method_ref(MAIN, MAIN_METH))

    def generate(self) -> None:
        """Write the data segment, the tables and all code."""
        self._debug("coding global data")
        self._code_global_data()
        self._debug("choosing gc")
        self._code_select_gc()
        self._debug("coding constants")
        code_constants(
            self.emitter, self.tables, self.string_tag, self.int_tag, self.bool_tag
        )
        self._debug("coding name table")
        code_class_name_tab(self.emitter, self.classtable, self.tables)
        self._debug("coding object table")
        code_class_obj_tab(self.emitter, self.classtable)
        self._debug("coding dispatch tables")
        code_dispatch_tabs(self.emitter, self.classtable)
        self._debug("coding prototype objects")
        code_prot_objs(self.emitter, self.classtable, self.tables)
        self._debug("coding global text")
        self._code_global_text()
        self._debug("coding object initializers")
        code_class_inits(self.coder, self.classtable)
        self._debug("coding class methods")
        code_class_methods(self.coder, self.classtable)


def cgen(
    program: Program,
    stream: TextIO,
    options: Options | None = None,
    tables: SymbolTables | None = None,
) -> CodeGenerator:
    """Generate assembly for ``program`` onto ``stream``."""
    stream.write("# start of generated code\n")
    generator = CodeGenerator(program.classes, stream, options, tables)
    generator.generate()
    stream.write("\n# end of generated code\n")
    return generator
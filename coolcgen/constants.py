"""Definitions of the String, Int and Bool constants in the data segment."""

from __future__ import annotations

from dataclasses import dataclass

from coolcgen.emit import (
    ALIGN,
    BOOL_SLOTS,
    BOOLCONST_PREFIX,
    BOOLNAME,
    DEFAULT_OBJFIELDS,
    INT_SLOTS,
    INTNAME,
    LABEL,
    STRING_SLOTS,
    STRINGNAME,
    WORD,
    Emitter,
    disptab_ref,
    emit_string_constant,
)
from coolcgen.stringtab import Entry, IntTable, SymbolTables


@dataclass(frozen=True)
class BoolConstant:
    """One of the two Bool objects, ``false`` (0) or ``true`` (1)."""

    val: int

    def __post_init__(self) -> None:
        value = int(self.val)
        if value not in (0, 1):
            raise ValueError(f"a boolean constant must be 0 or 1, not {self.val!r}")
        object.__setattr__(self, "val", value)

    def code_ref(self) -> str:
        """Label of this Bool object."""
        return f"{BOOLCONST_PREFIX}{self.val}"

    def code_def(self, emitter: Emitter, tag: int) -> None:
        """Lay out this Bool object with class tag ``tag``."""
        emitter.line(f"{WORD}-1")
        emitter.write(self.code_ref() + LABEL)
        emitter.line(f"{WORD}{tag}")
        emitter.line(f"{WORD}{DEFAULT_OBJFIELDS + BOOL_SLOTS}")
        emitter.line(f"{WORD}{disptab_ref(BOOLNAME)}")
        emitter.line(f"{WORD}{self.val}")


FALSE_BOOL = BoolConstant(0)
TRUE_BOOL = BoolConstant(1)


def code_string_def(entry: Entry, emitter: Emitter, tag: int, inttable: IntTable) -> None:
    """Lay out a String object for ``entry``, interning its length as an Int."""
    length = len(entry.text.encode("utf-8"))
    lensym = inttable.add_int(length)
    emitter.line(f"{WORD}-1")
    emitter.write(entry.code_ref() + LABEL)
    emitter.line(f"{WORD}{tag}")
    emitter.line(f"{WORD}{DEFAULT_OBJFIELDS + STRING_SLOTS + (length + 4) // 4}")
    emitter.line(f"{WORD}{disptab_ref(STRINGNAME)}")
    emitter.line(f"{WORD}{lensym.code_ref()}")
    emitter.write(emit_string_constant(entry.text))
    emitter.write(ALIGN)


def code_int_def(entry: Entry, emitter: Emitter, tag: int) -> None:
    """Lay out an Int object for ``entry``."""
    emitter.line(f"{WORD}-1")
    emitter.write(entry.code_ref() + LABEL)
    emitter.line(f"{WORD}{tag}")
    emitter.line(f"{WORD}{DEFAULT_OBJFIELDS + INT_SLOTS}")
    emitter.line(f"{WORD}{disptab_ref(INTNAME)}")
    emitter.line(f"{WORD}{entry.text}")


def code_constants(
    emitter: Emitter,
    tables: SymbolTables,
    string_tag: int,
    int_tag: int,
    bool_tag: int,
) -> None:
    """Emit every string, int and bool constant the program needs."""
    tables.stringtable.add_string("")
    tables.inttable.add_string("0")

    for entry in tables.stringtable:
        code_string_def(entry, emitter, string_tag, tables.inttable)
    for entry in tables.inttable:
        code_int_def(entry, emitter, int_tag)
    FALSE_BOOL.code_def(emitter, bool_tag)
    TRUE_BOOL.code_def(emitter, bool_tag)
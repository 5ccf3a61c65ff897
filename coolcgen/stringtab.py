"""Interned string, identifier and integer constant tables."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(frozen=True)
class Entry:
    """One interned string together with its table index."""

    text: str
    index: int
    prefix: str = ""

    def code_ref(self) -> str:
        """Return the assembly label that names this constant."""
        return f"{self.prefix}{self.index}"

    def __len__(self) -> int:
        return len(self.text)

    def __str__(self) -> str:
        return self.text


class StringTable:
    """A table that interns each distinct string exactly once."""

    def __init__(self, prefix: str = "") -> None:
        self.prefix = prefix
        self._entries: dict[str, Entry] = {}

    def add_string(self, text: str) -> Entry:
        """Intern ``text`` and return its entry, reusing an existing one."""
        entry = self._entries.get(text)
        if entry is None:
            entry = Entry(text, len(self._entries), self.prefix)
            self._entries[text] = entry
        return entry

    def lookup_string(self, text: str) -> Entry:
        """Return the entry for ``text``; raise KeyError if it was never added."""
        try:
            return self._entries[text]
        except KeyError:
            raise KeyError(f"string not in table: {text!r}") from None

    def __contains__(self, text: object) -> bool:
        return text in self._entries

    def __iter__(self) -> Iterator[Entry]:
        """Yield the entries, most recently added first."""
        return reversed(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)


class IntTable(StringTable):
    """A table of integer constants, keyed by their decimal text."""

    def __init__(self, prefix: str = "int_const") -> None:
        super().__init__(prefix)

    def add_int(self, value: int) -> Entry:
        """Intern the decimal form of ``value``."""
        return self.add_string(str(value))


@dataclass
class SymbolTables:
    """The three tables a compilation shares: identifiers, ints and strings."""

    idtable: StringTable = field(default_factory=StringTable)
    inttable: IntTable = field(default_factory=IntTable)
    stringtable: StringTable = field(default_factory=lambda: StringTable("str_const"))
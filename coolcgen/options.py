"""Command-line switches that control debugging, collection and output."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Sequence


class Memmgr(IntEnum):
    """Which garbage collector the generated program uses."""

    NOGC = 0
    GENGC = 1
    SCNGC = 2


class MemmgrTest(IntEnum):
    """Whether the collector runs normally or on every allocation."""

    NORMAL = 0
    TEST = 1


class MemmgrDebug(IntEnum):
    """How thoroughly the collector checks the heap."""

    QUICK = 0
    DEBUG = 1


class UsageError(Exception):
    """Raised when the command line holds an unknown or incomplete option."""


@dataclass
class Options:
    """The settings chosen on the command line."""

    lex_debug: bool = False
    parse_debug: bool = False
    lex_verbose: bool = False
    semant_debug: bool = False
    cgen_debug: bool = False
    disable_reg_alloc: bool = False
    optimize: bool = False
    out_filename: str | None = None
    memmgr: Memmgr = Memmgr.NOGC
    memmgr_test: MemmgrTest = MemmgrTest.NORMAL
    memmgr_debug: MemmgrDebug = MemmgrDebug.QUICK
    files: list[str] = field(default_factory=list)


_DEBUG_FLAGS = {
    "l": "lex_debug",
    "p": "parse_debug",
    "s": "semant_debug",
    "c": "cgen_debug",
    "v": "lex_verbose",
    "r": "disable_reg_alloc",
}


def _usage(program: str, debug: bool) -> str:
    if debug:
        return f"usage: {program} [-lvpscOgtTr -o outname] [input-files]"
    return f"usage: {program} [-OgtT -o outname] [input-files]"


def parse_flags(argv: Sequence[str] | None = None, debug: bool = True) -> Options:
    """Parse ``argv`` (program name first) into an :class:`Options`.

    With ``debug`` false the debugging switches are accepted but ignored.
    Raises :class:`UsageError` if any option is unknown or lacks its argument.
    """
    if argv is None:
        argv = sys.argv
    argv = list(argv)
    program = argv[0] if argv else "coolc"
    args = argv[1:]
    options = Options()
    bad = False

    position = 0
    while position < len(args):
        arg = args[position]
        position += 1
        if arg == "--":
            options.files.extend(args[position:])
            break
        if not arg.startswith("-") or arg == "-":
            options.files.append(arg)
            continue
        for offset, flag in enumerate(arg[1:], start=2):
            if flag == "o":
                value = arg[offset:]
                if not value:
                    if position < len(args):
                        value = args[position]
                        position += 1
                    else:
                        bad = True
                        break
                options.out_filename = value
                break
            if flag in _DEBUG_FLAGS:
                if debug:
                    setattr(options, _DEBUG_FLAGS[flag], True)
                else:
                    sys.stderr.write("No debugging available\n")
            elif flag == "g":
                options.memmgr = Memmgr.GENGC
            elif flag == "t":
                options.memmgr_test = MemmgrTest.TEST
            elif flag == "T":
                options.memmgr_debug = MemmgrDebug.DEBUG
            elif flag == "O":
                options.optimize = True
            else:
                bad = True

    if bad:
        raise UsageError(_usage(program, debug))
    return options
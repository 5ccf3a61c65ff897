"""Assembly naming conventions and a writer for MIPS instructions."""

from __future__ import annotations

from typing import TextIO

MAXINT = 100000000
WORD_SIZE = 4
LOG_WORD_SIZE = 2

CLASSNAMETAB = "class_nameTab"
CLASSOBJTAB = "class_objTab"
INTTAG = "_int_tag"
BOOLTAG = "_bool_tag"
STRINGTAG = "_string_tag"
HEAP_START = "heap_start"

DISPTAB_SUFFIX = "_dispTab"
METHOD_SEP = "."
CLASSINIT_SUFFIX = "_init"
PROTOBJ_SUFFIX = "_protObj"
OBJECTPROTOBJ = "Object" + PROTOBJ_SUFFIX
INTCONST_PREFIX = "int_const"
STRCONST_PREFIX = "str_const"
BOOLCONST_PREFIX = "bool_const"

EMPTYSLOT = 0
LABEL = ":\n"

STRINGNAME = "String"
INTNAME = "Int"
BOOLNAME = "Bool"
MAINNAME = "Main"

DEFAULT_OBJFIELDS = 3
TAG_OFFSET = 0
SIZE_OFFSET = 1
DISPTABLE_OFFSET = 2

STRING_SLOTS = 1
INT_SLOTS = 1
BOOL_SLOTS = 1

GLOBAL = "\t.globl\t"
ALIGN = "\t.align\t2\n"
WORD = "\t.word\t"

ZERO = "$zero"
ACC = "$a0"
A1 = "$a1"
SELF = "$s0"
T1 = "$t1"
T2 = "$t2"
T3 = "$t3"
SP = "$sp"
FP = "$fp"
RA = "$ra"

JALR = "\tjalr\t"
JAL = "\tjal\t"
RET = "\tjr\t" + RA + "\t"
SW = "\tsw\t"
LW = "\tlw\t"
LI = "\tli\t"
LA = "\tla\t"
MOVE = "\tmove\t"
NEG = "\tneg\t"
ADD = "\tadd\t"
ADDI = "\taddi\t"
ADDU = "\taddu\t"
ADDIU = "\taddiu\t"
DIV = "\tdiv\t"
MUL = "\tmul\t"
SUB = "\tsub\t"
SLL = "\tsll\t"
BEQZ = "\tbeqz\t"
BRANCH = "\tb\t"
BEQ = "\tbeq\t"
BNE = "\tbne\t"
BLEQ = "\tble\t"
BLT = "\tblt\t"
BGT = "\tbgt\t"

GC_INIT_NAMES = ("_NoGC_Init", "_GenGC_Init", "_ScnGC_Init")
GC_COLLECT_NAMES = ("_NoGC_Collect", "_GenGC_Collect", "_ScnGC_Collect")


def emit_string_constant(text: str | bytes) -> str:
    """Return the assembler directives that lay out ``text`` as bytes."""
    data = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    data = data.split(b"\0", 1)[0]
    parts: list[str] = []
    in_ascii = False

    def ascii_mode() -> None:
        nonlocal in_ascii
        if not in_ascii:
            parts.append('\t.ascii\t"')
            in_ascii = True

    def byte_mode() -> None:
        nonlocal in_ascii
        if in_ascii:
            parts.append('"\n')
            in_ascii = False

    for byte in data:
        if byte == 0x0A:
            ascii_mode()
            parts.append("\\n")
        elif byte == 0x09:
            ascii_mode()
            parts.append("\\t")
        elif byte == 0x5C:
            byte_mode()
            parts.append(f"\t.byte\t{byte}\n")
        elif byte == 0x22:
            ascii_mode()
            parts.append('\\"')
        elif 0x20 <= byte < 0x80:
            ascii_mode()
            parts.append(chr(byte))
        else:
            byte_mode()
            parts.append(f"\t.byte\t{byte}\n")
    byte_mode()
    parts.append("\t.byte\t0\t\n")
    return "".join(parts)


def label_ref(number: int) -> str:
    """Name of the numbered local label."""
    return f"label{number}"


def disptab_ref(name: object) -> str:
    """Name of a class's dispatch table."""
    return f"{name}{DISPTAB_SUFFIX}"


def init_ref(name: object) -> str:
    """Name of a class's initialiser."""
    return f"{name}{CLASSINIT_SUFFIX}"


def protobj_ref(name: object) -> str:
    """Name of a class's prototype object."""
    return f"{name}{PROTOBJ_SUFFIX}"


def method_ref(class_name: object, method_name: object) -> str:
    """Entry label of a method."""
    return f"{class_name}{METHOD_SEP}{method_name}"


class Emitter:
    """Writes MIPS assembly instructions to a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def write(self, text: str) -> None:
        self.stream.write(text)

    def line(self, text: str = "") -> None:
        self.stream.write(text + "\n")

    def comment(self, text: str) -> None:
        self.line(f"\t# {text}")

    def load(self, dest: str, offset: int, source: str) -> None:
        self.line(f"{LW}{dest} {offset * WORD_SIZE}({source})")

    def store(self, source: str, offset: int, dest: str) -> None:
        self.line(f"{SW}{source} {offset * WORD_SIZE}({dest})")

    def load_imm(self, dest: str, value: int) -> None:
        self.line(f"{LI}{dest} {value}")

    def load_address(self, dest: str, address: str) -> None:
        self.line(f"{LA}{dest} {address}")

    def move(self, dest: str, source: str) -> None:
        self.line(f"{MOVE}{dest} {source}")

    def neg(self, dest: str, source: str) -> None:
        self.line(f"{NEG}{dest} {source}")

    def add(self, dest: str, src1: str, src2: str) -> None:
        self.line(f"{ADD}{dest} {src1} {src2}")

    def addu(self, dest: str, src1: str, src2: str) -> None:
        self.line(f"{ADDU}{dest} {src1} {src2}")

    def addiu(self, dest: str, source: str, imm: int) -> None:
        self.line(f"{ADDIU}{dest} {source} {imm}")

    def div(self, dest: str, src1: str, src2: str) -> None:
        self.line(f"{DIV}{dest} {src1} {src2}")

    def mul(self, dest: str, src1: str, src2: str) -> None:
        self.line(f"{MUL}{dest} {src1} {src2}")

    def sub(self, dest: str, src1: str, src2: str) -> None:
        self.line(f"{SUB}{dest} {src1} {src2}")

    def sll(self, dest: str, source: str, amount: int) -> None:
        self.line(f"{SLL}{dest} {source} {amount}")

    def jalr(self, dest: str) -> None:
        self.line(f"{JALR}\t{dest}")

    def jal(self, address: str) -> None:
        self.line(f"{JAL}{address}")

    def ret(self) -> None:
        self.line(RET)

    def label_def(self, number: int) -> None:
        self.write(label_ref(number) + LABEL)

    def beqz(self, source: str, label: int) -> None:
        self.line(f"{BEQZ}{source} {label_ref(label)}")

    def beq(self, src1: str, src2: str, label: int) -> None:
        self.line(f"{BEQ}{src1} {src2} {label_ref(label)}")

    def bne(self, src1: str, src2: str, label: int) -> None:
        self.line(f"{BNE}{src1} {src2} {label_ref(label)}")

    def bleq(self, src1: str, src2: str, label: int) -> None:
        self.line(f"{BLEQ}{src1} {src2} {label_ref(label)}")

    def blt(self, src1: str, src2: str, label: int) -> None:
        self.line(f"{BLT}{src1} {src2} {label_ref(label)}")

    def blti(self, source: str, imm: int, label: int) -> None:
        self.line(f"{BLT}{source} {imm} {label_ref(label)}")

    def bgti(self, source: str, imm: int, label: int) -> None:
        self.line(f"{BGT}{source} {imm} {label_ref(label)}")

    def branch(self, label: int) -> None:
        self.line(f"{BRANCH}{label_ref(label)}")

    def push(self, reg: str) -> None:
        """Store ``reg`` at the stack top, then grow the stack by one word."""
        self.store(reg, 0, SP)
        self.addiu(SP, SP, -WORD_SIZE)

    def fetch_int(self, dest: str, source: str) -> None:
        """Load the value slot of the Int object in ``source``."""
        self.load(dest, DEFAULT_OBJFIELDS, source)

    def store_int(self, source: str, dest: str) -> None:
        """Store ``source`` into the value slot of the Int object in ``dest``."""
        self.store(source, DEFAULT_OBJFIELDS, dest)

    def gc_check(self, source: str) -> None:
        if source != A1:
            self.move(A1, source)
        self.jal("_gc_check")

    def test_collector(self, collector: str) -> None:
        """Call the collector routine ``collector`` with an empty request."""
        self.push(ACC)
        self.move(ACC, SP)
        self.move(A1, ZERO)
        self.jal(collector)
        self.addiu(SP, SP, WORD_SIZE)
        self.load(ACC, 0, SP)
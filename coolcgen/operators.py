"""Code for Cool's arithmetic, comparison, unary and allocation expressions."""

from __future__ import annotations

from typing import Callable

from coolcgen.classtable import BOOL, COPY, INT, OBJECT, SELF_TYPE, STR, CgenClassTable
from coolcgen.constants import FALSE_BOOL, TRUE_BOOL, BoolConstant
from coolcgen.emit import (
    A1,
    ACC,
    CLASSOBJTAB,
    SP,
    T1,
    T2,
    T3,
    WORD_SIZE,
    ZERO,
    Emitter,
    init_ref,
    method_ref,
    protobj_ref,
)
from coolcgen.emit import SELF as SELF_REG
from coolcgen.environment import Environment
from coolcgen.options import Memmgr, Options
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import (
    BoolConst,
    Comp,
    Divide,
    Eq,
    Expression,
    IntConst,
    IsVoid,
    Leq,
    Lt,
    Mul,
    Neg,
    New,
    Plus,
    StringConst,
    Sub,
)

_OBJECT_COPY = method_ref(OBJECT, COPY)
_BASIC_TYPES = (INT, STR, BOOL)

_ARITH: dict[type, tuple[str, Callable[[Emitter, str, str, str], None]]] = {
    Plus: ("Add", Emitter.add),
    Sub: ("Sub", Emitter.sub),
    Mul: ("Mul", Emitter.mul),
    Divide: ("Div", Emitter.div),
}

_ORDER: dict[type, tuple[str, Callable[[Emitter, str, str, int], None]]] = {
    Lt: ("Int operation : Less than", Emitter.blt),
    Leq: ("Int operation : Less or equal", Emitter.bleq),
}


class OperatorCoder:
    """Generates code for operators, constants and ``new``."""

    _BUILTIN = {
        Plus: "code_arith",
        Sub: "code_arith",
        Mul: "code_arith",
        Divide: "code_arith",
        Lt: "code_compare",
        Leq: "code_compare",
        Eq: "code_compare",
        Neg: "code_neg",
        Comp: "code_not",
        IsVoid: "code_isvoid",
        New: "code_new",
        IntConst: "_code_int_const",
        StringConst: "_code_string_const",
        BoolConst: "_code_bool_const",
    }

    def __init__(
        self,
        emitter: Emitter,
        classtable: CgenClassTable,
        tables: SymbolTables | None = None,
        options: Options | None = None,
    ) -> None:
        self.emitter = emitter
        self.classtable = classtable
        self.tables = tables if tables is not None else classtable.tables
        self.options = options if options is not None else Options()
        self.labelnum = 0

    def new_label(self) -> int:
        """Return a fresh label number."""
        label = self.labelnum
        self.labelnum += 1
        return label

    def _reserve_labels(self, count: int) -> int:
        first = self.labelnum
        self.labelnum += count
        return first

    def _code_builtin(self, expr: Expression, env: Environment) -> None:
        name = self._BUILTIN.get(type(expr))
        if name is None:
            raise TypeError(f"cannot generate code for {type(expr).__name__}")
        getattr(self, name)(expr, env)

    def _code_operand(self, expr: Expression, env: Environment) -> None:
        self._code_builtin(expr, env)

    def _load_bool(self, dest: str, const: BoolConstant) -> None:
        self.emitter.load_address(dest, const.code_ref())

    def _gc_assign(self, base: str, slot: int) -> None:
        if self.options.memmgr == Memmgr.GENGC:
            self.emitter.addiu(A1, base, WORD_SIZE * slot)
            self.emitter.jal("_GenGC_Assign")

    def _code_int_const(self, expr: IntConst, env: Environment) -> None:
        entry = self.tables.inttable.lookup_string(expr.token)
        self.emitter.load_address(ACC, entry.code_ref())

    def _code_string_const(self, expr: StringConst, env: Environment) -> None:
        entry = self.tables.stringtable.lookup_string(expr.token)
        self.emitter.load_address(ACC, entry.code_ref())

    def _code_bool_const(self, expr: BoolConst, env: Environment) -> None:
        self._load_bool(ACC, TRUE_BOOL if expr.val else FALSE_BOOL)

    def _eval_operands(self, expr: Expression, env: Environment, copy_second: bool) -> None:
        em = self.emitter
        em.comment("First eval e1 and push.")
        self._code_operand(expr.e1, env)
        em.push(ACC)
        inner = env.copy()
        inner.add_obstacle()
        em.line()

        if copy_second:
            em.comment("Then eval e2 and make a copy for result.")
            self._code_operand(expr.e2, inner)
            em.jal(_OBJECT_COPY)
        else:
            em.comment("Then eval e2.")
            self._code_operand(expr.e2, inner)
        em.line()

        em.comment("Let's pop e1 to t1, move e2 to t2")
        em.addiu(SP, SP, WORD_SIZE)
        em.load(T1, 0, SP)
        em.move(T2, ACC)
        em.line()

    def _extract_ints(self) -> None:
        em = self.emitter
        em.comment("Extract the int inside the object.")
        em.load(T1, 3, T1)
        em.load(T2, 3, T2)
        em.line()

    def code_arith(self, expr: Expression, env: Environment) -> None:
        """Add, subtract, multiply or divide two Int objects into a fresh copy."""
        try:
            title, operation = _ARITH[type(expr)]
        except KeyError:
            raise TypeError(f"not an arithmetic expression: {type(expr).__name__}") from None
        em = self.emitter
        em.comment(f"Int operation : {title}")
        self._eval_operands(expr, env, copy_second=True)
        self._extract_ints()
        em.comment("Modify the int inside t2.")
        operation(em, T3, T1, T2)
        em.store(T3, 3, ACC)
        em.line()

    def code_compare(self, expr: Expression, env: Environment) -> None:
        """Compare two values with ``<``, ``<=`` or ``=``, leaving a Bool in ACC."""
        em = self.emitter
        if isinstance(expr, Eq):
            em.comment("equal")
            self._eval_operands(expr, env, copy_second=False)
            if expr.e1.type in _BASIC_TYPES and expr.e2.type in _BASIC_TYPES:
                self._load_bool(ACC, TRUE_BOOL)
                self._load_bool(A1, FALSE_BOOL)
                em.jal("equality_test")
                return
            em.comment("Pretend that t1 = t2")
            self._load_bool(ACC, TRUE_BOOL)
            em.comment("Compare the two pointers.")
            label = self.new_label()
            em.beq(T1, T2, label)
            self._load_bool(ACC, FALSE_BOOL)
            em.label_def(label)
            return

        try:
            title, branch = _ORDER[type(expr)]
        except KeyError:
            raise TypeError(f"not a comparison: {type(expr).__name__}") from None
        em.comment(title)
        self._eval_operands(expr, env, copy_second=False)
        self._extract_ints()
        em.comment("Pretend that t1 < t2")
        self._load_bool(ACC, TRUE_BOOL)
        em.comment("If t1 < t2 jumpto finish")
        label = self.new_label()
        branch(em, T1, T2, label)
        self._load_bool(ACC, FALSE_BOOL)
        em.label_def(label)

    def code_neg(self, expr: Neg, env: Environment) -> None:
        """Negate an Int into a fresh copy."""
        em = self.emitter
        em.comment("Neg")
        em.comment("Eval e1 and make a copy for result")
        self._code_operand(expr.e1, env)
        em.jal(_OBJECT_COPY)
        em.line()
        em.load(T1, 3, ACC)
        em.neg(T1, T1)
        em.store(T1, 3, ACC)
        em.line()

    def code_not(self, expr: Comp, env: Environment) -> None:
        """Boolean complement."""
        em = self.emitter
        em.comment("the 'not' operator")
        em.comment("First eval the bool")
        self._code_operand(expr.e1, env)
        em.comment("Extract the int inside the bool")
        em.load(T1, 3, ACC)
        em.comment("Pretend ACC = false, then we need to construct true")
        self._load_bool(ACC, TRUE_BOOL)
        em.comment("If ACC = false, jumpto finish")
        label = self.new_label()
        em.beq(T1, ZERO, label)
        em.comment("Load false")
        self._load_bool(ACC, FALSE_BOOL)
        em.comment("finish:")
        em.label_def(label)

    def code_isvoid(self, expr: IsVoid, env: Environment) -> None:
        """True if the operand is void."""
        em = self.emitter
        self._code_operand(expr.e1, env)
        em.comment("t1 = acc")
        em.move(T1, ACC)
        em.comment("First pretend t1 = void: acc = bool(1)")
        self._load_bool(ACC, TRUE_BOOL)
        em.comment("if t1 = void: jumpto finish")
        label = self.new_label()
        em.beq(T1, ZERO, label)
        em.line()
        em.comment("acc != void")
        self._load_bool(ACC, FALSE_BOOL)
        em.line("# finish:")
        em.label_def(label)

    def code_new(self, expr: New, env: Environment) -> None:
        """Copy a prototype object and run its initialiser."""
        em = self.emitter
        if expr.type_name == SELF_TYPE:
            em.load_address(T1, CLASSOBJTAB)
            em.comment("Find class tag.")
            em.load(T2, 0, SELF_REG)
            em.line()
            em.comment("Mult 3: Get protObj.")
            em.sll(T2, T2, 3)
            em.line()
            em.addu(T1, T1, T2)
            em.comment("Push.")
            em.push(T1)
            em.line()
            em.comment("Load protObj to ACC.")
            em.load(ACC, 0, T1)
            em.line()
            em.jal(_OBJECT_COPY)
            em.comment("Pop protObj addr.")
            em.load(T1, 1, SP)
            em.addiu(SP, SP, WORD_SIZE)
            em.line()
            em.comment("Get init addr.")
            em.load(T1, 1, T1)
            em.line()
            em.comment("Goto init.")
            em.jalr(T1)
            em.line()
            return

        em.load_address(ACC, protobj_ref(expr.type_name))
        em.jal(_OBJECT_COPY)
        em.jal(init_ref(expr.type_name))
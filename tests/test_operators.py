import io
import re

import pytest

from coolcgen.classtable import CgenClassTable
from coolcgen.constants import FALSE_BOOL, TRUE_BOOL
from coolcgen.emit import (
    ACC,
    ADD,
    ADDIU,
    BEQ,
    BLEQ,
    BLT,
    CLASSOBJTAB,
    DIV,
    LA,
    MUL,
    NEG,
    SP,
    SUB,
    T1,
    T2,
    T3,
    WORD_SIZE,
    ZERO,
    Emitter,
    init_ref,
    protobj_ref,
)
from coolcgen.environment import Environment
from coolcgen.operators import OperatorCoder
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import (
    Attr,
    BoolConst,
    ClassDecl,
    Comp,
    Divide,
    Eq,
    IntConst,
    IsVoid,
    Leq,
    Lt,
    Method,
    Mul,
    Neg,
    New,
    NoExpr,
    Object,
    Plus,
    StringConst,
    Sub,
)


def make_coder():
    tables = SymbolTables()
    main = ClassDecl(
        "Main",
        "Object",
        [Attr("count", "Int", NoExpr()), Method("main", [], "Object", NoExpr())],
        "t.cl",
    )
    classtable = CgenClassTable([main], tables)
    tables.stringtable.add_string("")
    tables.stringtable.add_string("hi")
    for text in ("0", "1", "2", "3"):
        tables.inttable.add_string(text)
    buf = io.StringIO()
    coder = OperatorCoder(Emitter(buf), classtable, tables)
    return coder, buf, tables


def int_ref(tables, text):
    return tables.inttable.lookup_string(text).code_ref()


def labels_consistent(out):
    defined = re.findall(r"^(label\d+):$", out, re.M)
    referenced = set(re.findall(r"\b(label\d+)\b(?!:)", out))
    return len(defined) == len(set(defined)) and referenced <= set(defined)


@pytest.mark.parametrize(
    "node, mnemonic",
    [(Plus, ADD), (Sub, SUB), (Mul, MUL), (Divide, DIV)],
)
def test_arith_emits_operation_on_extracted_ints(node, mnemonic):
    coder, buf, tables = make_coder()
    coder.code_arith(node(IntConst("1"), IntConst("2")), Environment())
    out = buf.getvalue()
    assert f"{mnemonic}{T3} {T1} {T2}" in out
    assert "Object.copy" in out
    assert out.index(int_ref(tables, "1")) < out.index(int_ref(tables, "2"))


def test_arith_push_and_pop_balance():
    coder, buf, _ = make_coder()
    expr = Plus(Plus(IntConst("1"), IntConst("2")), IntConst("3"))
    coder.code_arith(expr, Environment())
    out = buf.getvalue()
    pushes = out.count(f"{ADDIU}{SP} {SP} {-WORD_SIZE}\n")
    pops = out.count(f"{ADDIU}{SP} {SP} {WORD_SIZE}\n")
    assert pushes == pops == 2


def test_arith_leaves_environment_untouched():
    coder, _, _ = make_coder()
    env = Environment()
    coder.code_arith(Plus(IntConst("1"), IntConst("2")), env)
    assert env.variables == []
    assert env.scope_lengths == []


def test_arith_rejects_other_nodes():
    coder, _, _ = make_coder()
    with pytest.raises(TypeError):
        coder.code_arith(Lt(IntConst("1"), IntConst("2")), Environment())


def test_unsupported_operand_raises():
    coder, _, _ = make_coder()
    with pytest.raises(TypeError):
        coder.code_arith(Plus(Object("x"), IntConst("1")), Environment())


def test_unknown_int_constant_raises():
    coder, _, _ = make_coder()
    with pytest.raises(KeyError):
        coder.code_arith(Plus(IntConst("42"), IntConst("1")), Environment())


@pytest.mark.parametrize("node, mnemonic", [(Lt, BLT), (Leq, BLEQ)])
def test_order_comparisons_use_branch_and_one_label(node, mnemonic):
    coder, buf, _ = make_coder()
    before = coder.labelnum
    coder.code_compare(node(IntConst("1"), IntConst("2")), Environment())
    out = buf.getvalue()
    assert f"{mnemonic}{T1} {T2} label{before}" in out
    assert coder.labelnum == before + 1
    assert labels_consistent(out)
    assert out.index(TRUE_BOOL.code_ref()) < out.index(FALSE_BOOL.code_ref())


def test_equality_of_basic_types_calls_runtime():
    coder, buf, _ = make_coder()
    before = coder.labelnum
    expr = Eq(IntConst("1", type="Int"), IntConst("2", type="Int"))
    coder.code_compare(expr, Environment())
    out = buf.getvalue()
    assert "equality_test" in out
    assert coder.labelnum == before
    assert BEQ not in out


def test_equality_of_objects_compares_pointers():
    coder, buf, _ = make_coder()
    expr = Eq(New("Main", type="Main"), New("Main", type="Main"))
    coder.code_compare(expr, Environment())
    out = buf.getvalue()
    assert "equality_test" not in out
    assert f"{BEQ}{T1} {T2} label0" in out
    assert labels_consistent(out)


def test_labels_are_unique_across_expressions():
    coder, buf, _ = make_coder()
    coder.code_compare(Lt(IntConst("1"), IntConst("2")), Environment())
    coder.code_not(Comp(BoolConst(True)), Environment())
    coder.code_isvoid(IsVoid(IntConst("3")), Environment())
    assert labels_consistent(buf.getvalue())
    assert coder.labelnum == 3


def test_new_label_is_sequential():
    coder, _, _ = make_coder()
    first = coder.new_label()
    second = coder.new_label()
    assert second == first + 1


def test_neg_copies_then_negates():
    coder, buf, _ = make_coder()
    coder.code_neg(Neg(IntConst("3")), Environment())
    out = buf.getvalue()
    assert f"{NEG}{T1} {T1}" in out
    assert out.index("Object.copy") < out.index(NEG)


def test_not_branches_on_zero():
    coder, buf, _ = make_coder()
    coder.code_not(Comp(BoolConst(False)), Environment())
    out = buf.getvalue()
    assert f"{BEQ}{T1} {ZERO} label0" in out
    assert labels_consistent(out)
    assert f"{LA}{ACC} {FALSE_BOOL.code_ref()}" in out


def test_isvoid_pretends_true_first():
    coder, buf, _ = make_coder()
    coder.code_isvoid(IsVoid(StringConst("hi")), Environment())
    out = buf.getvalue()
    true_at = out.index(f"{LA}{ACC} {TRUE_BOOL.code_ref()}")
    false_at = out.index(f"{LA}{ACC} {FALSE_BOOL.code_ref()}")
    assert true_at < false_at
    assert labels_consistent(out)


def test_new_named_class_copies_prototype_and_inits():
    coder, buf, _ = make_coder()
    coder.code_new(New("Main"), Environment())
    out = buf.getvalue()
    assert f"{LA}{ACC} {protobj_ref('Main')}" in out
    assert out.index("Object.copy") < out.index(init_ref("Main"))


def test_new_self_type_uses_object_table():
    coder, buf, _ = make_coder()
    coder.code_new(New("SELF_TYPE"), Environment())
    out = buf.getvalue()
    assert f"{LA}{T1} {CLASSOBJTAB}" in out
    assert "\tjalr\t" in out
    pushes = out.count(f"{ADDIU}{SP} {SP} {-WORD_SIZE}\n")
    pops = out.count(f"{ADDIU}{SP} {SP} {WORD_SIZE}\n")
    assert pushes == pops == 1
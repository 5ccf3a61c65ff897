import io

from coolcgen.classtable import CgenClassTable
from coolcgen.emit import Emitter, init_ref, protobj_ref
from coolcgen.exprgen import ExpressionCoder
from coolcgen.layout import (
    code_class_inits,
    code_class_methods,
    code_class_name_tab,
    code_class_obj_tab,
    code_dispatch_tabs,
    code_method,
    code_prot_objs,
)
from coolcgen.options import Memmgr, Options
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import Attr, ClassDecl, Formal, IntConst, Method, NoExpr, Object


def _main_decl():
    return ClassDecl(
        "Main",
        "Object",
        [
            Attr("x", "Int", NoExpr()),
            Attr("b", "Bool", NoExpr()),
            Attr("s", "String", NoExpr()),
            Attr("o", "Object", NoExpr()),
            Method("main", [], "Int", IntConst("1")),
            Method("type_name", [], "String", Object("s")),
        ],
    )


def _setup(options=None, decls=None):
    tables = SymbolTables()
    table = CgenClassTable(decls if decls is not None else [_main_decl()], tables)
    tables.stringtable.add_string("")
    tables.inttable.add_string("0")
    tables.inttable.add_string("1")
    out = io.StringIO()
    emitter = Emitter(out)
    coder = ExpressionCoder(emitter, table, tables, options or Options())
    return table, tables, emitter, coder, out


def test_name_tab_lists_every_class_string():
    table, tables, emitter, _, out = _setup()
    code_class_name_tab(emitter, table, tables)
    text = out.getvalue()
    assert text.startswith("class_nameTab:\n")
    words = [line for line in text.splitlines() if line.startswith("\t.word\t")]
    expected = [
        "\t.word\t" + tables.stringtable.lookup_string(node.name).code_ref()
        for node in table.class_nodes()
    ]
    assert words == expected
    assert "# child: Main" in text


def test_obj_tab_pairs_protobj_and_init():
    table, _, emitter, _, out = _setup()
    code_class_obj_tab(emitter, table)
    lines = out.getvalue().splitlines()
    assert lines[0] == "class_objTab:"
    expected = []
    for node in table.class_nodes():
        expected += ["\t.word\t" + protobj_ref(node.name), "\t.word\t" + init_ref(node.name)]
    assert lines[1:] == expected


def test_dispatch_table_overrides_in_place():
    table, _, emitter, _, out = _setup()
    code_dispatch_tabs(emitter, table)
    text = out.getvalue()
    main_part = text[text.index("Main_dispTab:"):]
    words = [line for line in main_part.splitlines() if line.startswith("\t.word\t")]
    assert words[:4] == [
        "\t.word\tObject.abort",
        "\t.word\tMain.type_name",
        "\t.word\tObject.copy",
        "\t.word\tMain.main",
    ]


def test_prot_objs_default_values():
    table, tables, emitter, _, out = _setup()
    code_prot_objs(emitter, table, tables)
    text = out.getvalue()
    main_part = text[text.index("Main_protObj:"):]
    zero = tables.inttable.lookup_string("0").code_ref()
    empty = tables.stringtable.lookup_string("").code_ref()
    assert f"\t.word\t{zero}\t# int(0)" in main_part
    assert "\t.word\tbool_const0\t# bool(0)" in main_part
    assert f"\t.word\t{empty}\t# str()" in main_part
    assert "\t.word\t0\t# void" in main_part
    tag = table.class_tags()["Main"]
    assert f"\t.word\t{tag}\t# class tag" in main_part
    string_part = text[text.index("String_protObj:"):]
    assert "\t.word\t0\t# str(0)" in string_part.split("_protObj:")[1]


def test_prot_objs_need_constants():
    tables = SymbolTables()
    table = CgenClassTable([_main_decl()], tables)
    emitter = Emitter(io.StringIO())
    try:
        code_prot_objs(emitter, table, tables)
    except KeyError as exc:
        assert "0" in str(exc)
    else:
        raise AssertionError("expected KeyError")


def test_code_method_frame_and_argument_pop():
    table, _, _, coder, out = _setup()
    node = table.class_node("Main")
    method = Method("f", [Formal("a", "Int"), Formal("b", "Int")], "Int", Object("a"))
    code_method(coder, method, node)
    lines = out.getvalue().splitlines()
    assert lines[0] == "Main.f:"
    assert "\taddiu\t$sp $sp 8" in lines
    assert "\tjr\t$ra\t" in lines
    assert "\t# It is a param." in lines


def test_class_inits_call_parent_init():
    table, _, _, coder, out = _setup()
    code_class_inits(coder, table)
    text = out.getvalue()
    main_init = text[text.index("Main_init:"):]
    assert "\tjal\tObject_init" in main_init
    object_init = text[text.index("Object_init:"):text.index("IO_init:")]
    assert "\tjal\t" not in object_init


def test_class_methods_skip_basic_classes():
    table, _, _, coder, out = _setup()
    code_class_methods(coder, table)
    text = out.getvalue()
    assert "Main.main:\n" in text
    assert "Main.type_name:\n" in text
    assert "Object.copy:\n" not in text


def test_gengc_records_attribute_assignment():
    decl = ClassDecl("Main", "Object", [Attr("x", "Int", IntConst("1"))])
    table, _, _, coder, out = _setup(Options(memmgr=Memmgr.GENGC), [decl])
    code_class_inits(coder, table)
    assert "\tjal\t_GenGC_Assign" in out.getvalue()

    table, _, _, coder, out = _setup(Options(), [decl])
    code_class_inits(coder, table)
    assert "_GenGC_Assign" not in out.getvalue()
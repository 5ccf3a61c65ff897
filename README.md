# coolcgen

`coolcgen` turns a type-annotated abstract syntax tree of a Cool program
into MIPS assembly meant for the SPIM simulator and the standard Cool
runtime.

It writes the global data section, the garbage-collector selection words,
the string, integer and boolean constants, the class name and object
tables, dispatch tables, prototype objects, class initialisers and the code
for every method of the classes that are not built in.

## Installing

```
pip install .
```

## Using it

Build a tree from the node classes in `coolcgen.tree` (a `Program` holding
`ClassDecl` nodes whose expressions already carry their static types in
`type`), then pass it to `coolcgen.cgen.cgen`, which writes the assembly to
any text stream and returns the `CodeGenerator` it used.

Integer and string literals used in the program must be entered in the
`SymbolTables` beforehand; code generation looks them up and raises
`KeyError` for any that are missing.

```python
import io

from coolcgen.cgen import cgen
from coolcgen.options import parse_flags
from coolcgen.stringtab import SymbolTables
from coolcgen.tree import ClassDecl, IntConst, Method, Program

tables = SymbolTables()
tables.inttable.add_string("42")

program = Program([
    ClassDecl(
        "Main",
        "Object",
        [Method("main", [], "Int", IntConst("42", type="Int"))],
        "main.cl",
    )
])

options = parse_flags(["coolc", "-g"])
out = io.StringIO()
cgen(program, out, options, tables)
print(out.getvalue())
```

### Options

`coolcgen.options.parse_flags(argv, debug=True)` reads a command line whose
first element is the program name and returns an `Options`:

- `-g` selects the generational collector (`Memmgr.GENGC`)
- `-t` collects on every allocation (`MemmgrTest.TEST`)
- `-T` turns on extra heap checks (`MemmgrDebug.DEBUG`)
- `-O` sets `optimize`
- `-o NAME` (or `-oNAME`) sets `out_filename`
- `-l`, `-p`, `-s`, `-c`, `-v`, `-r` set the debugging fields when `debug`
  is true; otherwise they are ignored and "No debugging available" is
  written to standard error

Other arguments are collected in `files`. An unknown switch, or `-o`
without a name, raises `UsageError` carrying the usage line. With
`cgen_debug` set, the generator prints its progress to standard output.

### Lower-level pieces

- `coolcgen.emit.Emitter` writes single MIPS instructions;
  `emit_string_constant` lays out a string as assembler directives.
- `coolcgen.classtable.CgenClassTable` installs the basic classes
  (`Object`, `IO`, `Int`, `Bool`, `String`) with the program's classes,
  links the inheritance tree, assigns class tags and gives each
  `CgenNode` its attribute layout and dispatch table.
- `coolcgen.environment.Environment` tracks let variables, parameters
  and attributes while expressions are compiled.
- `coolcgen.exprgen.ExpressionCoder` emits code for any expression.
- `coolcgen.dump.dump` prints a tree in indented form;
  `coolcgen.textutil` holds `pad` and `escape_string`.

## What it does not do

There is no lexer, parser or type checker here, and no command to run:
the package does not read Cool source files. It starts from a tree that
is already built and typed, and it only produces assembly text; it does
not assemble or run it.

## Running the tests

```
pip install .[test]
pytest
```
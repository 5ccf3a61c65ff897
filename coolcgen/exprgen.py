"""Code generation for every kind of Cool expression."""

from __future__ import annotations

from coolcgen.classtable import BOOL, INT, SELF, SELF_TYPE, STR
from coolcgen.constants import FALSE_BOOL
from coolcgen.emit import ACC, FP, SP, T1, T2, WORD_SIZE, ZERO, disptab_ref
from coolcgen.emit import SELF as SELF_REG
from coolcgen.environment import Environment
from coolcgen.operators import OperatorCoder
from coolcgen.tree import (
    Assign,
    Block,
    Cond,
    Dispatch,
    Expression,
    Let,
    Loop,
    NoExpr,
    Object,
    StaticDispatch,
    TypCase,
)


class ExpressionCoder(OperatorCoder):
    """Generates MIPS code for any expression, leaving its value in ACC."""

    _HANDLERS = {
        Assign: "_code_assign",
        StaticDispatch: "_code_static_dispatch",
        Dispatch: "_code_dispatch",
        Cond: "_code_cond",
        Loop: "_code_loop",
        TypCase: "_code_typcase",
        Block: "_code_block",
        Let: "_code_let",
        NoExpr: "_code_no_expr",
        Object: "_code_object",
    }

    def code(self, expr: Expression, env: Environment | None = None) -> None:
        """Emit code that evaluates ``expr`` in ``env``."""
        if env is None:
            env = Environment()
        name = self._HANDLERS.get(type(expr))
        if name is None:
            self._code_builtin(expr, env)
        else:
            getattr(self, name)(expr, env)

    def _code_operand(self, expr: Expression, env: Environment) -> None:
        self.code(expr, env)

    def _code_assign(self, expr: Assign, env: Environment) -> None:
        em = self.emitter
        em.comment("Assign: evaluating expr")
        self.code(expr.expr, env)

        idx = env.lookup_var(expr.name)
        if idx is not None:
            em.comment(f"Assign to let variable: {expr.name}")
            em.store(ACC, idx + 1, SP)
            self._gc_assign(SP, idx + 1)
            return
        idx = env.lookup_param(expr.name)
        if idx is not None:
            em.comment(f"Assign to parameter: {expr.name}")
            em.store(ACC, idx + 3, FP)
            self._gc_assign(FP, idx + 3)
            return
        idx = env.lookup_attrib(expr.name)
        if idx is not None:
            em.comment("It is an attribute.")
            em.store(ACC, idx + 3, SELF_REG)
            self._gc_assign(SELF_REG, idx + 3)
            return
        raise LookupError(f"assignment to unknown name {expr.name!r}")

    def _push_actuals(self, actuals: list[Expression], env: Environment) -> Environment:
        inner = env.copy()
        for actual in actuals:
            self.code(actual, inner)
            self.emitter.push(ACC)
            inner.add_obstacle()
        return inner

    def _void_guard(self, abort: str) -> None:
        em = self.emitter
        label = self.new_label()
        em.bne(ACC, ZERO, label)
        em.load_address(ACC, "str_const0")
        em.load_imm(T1, 1)
        em.jal(abort)
        em.label_def(label)

    def _method_slot(self, class_name: str, method: str) -> int:
        slots = self.classtable.class_node(class_name).dispatch_index()
        try:
            return slots[method]
        except KeyError:
            raise KeyError(f"class {class_name} has no method {method}") from None

    def _jump_to_slot(self, slot: int, method: str) -> None:
        em = self.emitter
        em.comment("t1 = dispTab[offset]")
        em.load(T1, slot, T1)
        em.line()
        em.comment(f"jumpto {method}")
        em.jalr(T1)
        em.line()

    def _code_static_dispatch(self, expr: StaticDispatch, env: Environment) -> None:
        em = self.emitter
        em.comment("Static dispatch. First eval and save the params.")
        inner = self._push_actuals(expr.actual, env)

        em.comment("eval the obj in dispatch.")
        self.code(expr.expr, inner)
        em.comment("if obj = void: abort")
        self._void_guard("_dispatch_abort")

        slot = self._method_slot(expr.type_name, expr.name)
        em.comment("Now we locate the method in the dispatch table.")
        em.comment(f"t1 = {expr.type_name}.dispTab")
        em.load_address(T1, disptab_ref(expr.type_name))
        em.line()
        self._jump_to_slot(slot, expr.name)

    def _code_dispatch(self, expr: Dispatch, env: Environment) -> None:
        em = self.emitter
        em.comment("Dispatch. First eval and save the params.")
        inner = self._push_actuals(expr.actual, env)

        em.comment("eval the obj in dispatch.")
        self.code(expr.expr, inner)
        em.comment("if obj = void: abort")
        self._void_guard("_dispatch_abort")

        class_name = expr.expr.type
        if class_name == SELF_TYPE:
            if env.class_node is None:
                raise LookupError("dispatch on SELF_TYPE outside of a class")
            class_name = env.class_node.name
        slot = self._method_slot(class_name, expr.name)
        em.comment("Now we locate the method in the dispatch table.")
        em.comment("t1 = self.dispTab")
        em.load(T1, 2, ACC)
        em.line()
        self._jump_to_slot(slot, expr.name)

    def _code_cond(self, expr: Cond, env: Environment) -> None:
        em = self.emitter
        em.comment("If statement. First eval condition.")
        self.code(expr.pred, env)
        em.comment("extract the bool content from acc to t1")
        em.fetch_int(T1, ACC)
        em.line()

        false_label = self.new_label()
        finish_label = self.new_label()
        em.comment("if t1 == 0 goto false")
        em.beq(T1, ZERO, false_label)
        em.line()

        self.code(expr.then_exp, env)
        em.comment("jumpt finish")
        em.branch(finish_label)
        em.line()

        em.line("# False:")
        em.label_def(false_label)
        self.code(expr.else_exp, env)
        em.line("# Finish:")
        em.label_def(finish_label)

    def _code_loop(self, expr: Loop, env: Environment) -> None:
        em = self.emitter
        start = self.new_label()
        finish = self.new_label()
        em.comment("While loop")
        em.comment("start:")
        em.label_def(start)
        em.comment("ACC = pred")
        self.code(expr.pred, env)
        em.comment("extract int inside bool")
        em.fetch_int(T1, ACC)
        em.line()
        em.comment("if pred == false jumpto finish")
        em.beq(T1, ZERO, finish)
        em.line()
        self.code(expr.body, env)
        em.comment("Jumpto start")
        em.branch(start)
        em.comment("Finish:")
        em.label_def(finish)
        em.comment("ACC = void")
        em.move(ACC, ZERO)

    def _code_typcase(self, expr: TypCase, env: Environment) -> None:
        em = self.emitter
        class_tags = self.classtable.class_tags()
        class_nodes = self.classtable.class_nodes()

        em.comment("case expr")
        em.comment("First eval e0")
        self.code(expr.expr, env)
        em.comment("If e0 = void, abort")
        self._void_guard("_case_abort2")

        em.comment("T1 = type(acc)")
        em.load(T1, 0, ACC)

        cases = list(expr.cases)
        first = self._reserve_labels(len(cases) + 1)
        finish = first + len(cases)

        def tag_of(name: str) -> int:
            try:
                return class_tags[name]
            except KeyError:
                raise KeyError(f"case branch on unknown class {name}") from None

        def children_tags(tags: list[int]) -> list[int]:
            result: list[int] = []
            for tag in tags:
                for child in class_nodes[tag].children:
                    child_tag = class_tags[child.name]
                    if child_tag not in result:
                        result.append(child_tag)
            return result

        frontier = [[tag_of(case.type_decl)] for case in cases]
        while any(frontier):
            for caseidx, tags in enumerate(frontier):
                for tag in tags:
                    em.comment(f"tag = {tag} : goto case {caseidx}")
                    em.load_imm(T2, tag)
                    em.beq(T1, T2, first + caseidx)
                    em.line()
            em.comment("----------------")
            frontier = [children_tags(tags) for tags in frontier]

        em.comment("No match")
        em.jal("_case_abort")
        em.branch(finish)

        for caseidx, case in enumerate(cases):
            em.line(f"# eval expr {caseidx}")
            em.label_def(first + caseidx)
            branch_env = env.copy()
            branch_env.enter_scope()
            branch_env.add_var(case.name)
            em.push(ACC)
            self.code(case.expr, branch_env)
            em.addiu(SP, SP, WORD_SIZE)
            em.comment("Jumpto finish")
            em.branch(finish)

        em.line("#finish:")
        em.label_def(finish)
        em.line()

    def _code_block(self, expr: Block, env: Environment) -> None:
        for item in expr.body:
            self.code(item, env)

    def _code_let(self, expr: Let, env: Environment) -> None:
        em = self.emitter
        em.comment("Let expr")
        em.comment("First eval init")
        self.code(expr.init, env)

        if expr.init.is_empty():
            if expr.type_decl == STR:
                em.load_address(ACC, self.tables.stringtable.lookup_string("").code_ref())
            elif expr.type_decl == INT:
                em.load_address(ACC, self.tables.inttable.lookup_string("0").code_ref())
            elif expr.type_decl == BOOL:
                self._load_bool(ACC, FALSE_BOOL)

        em.comment("push")
        em.push(ACC)
        em.line()

        inner = env.copy()
        inner.enter_scope()
        inner.add_var(expr.identifier)
        self.code(expr.body, inner)

        em.comment("pop")
        em.addiu(SP, SP, WORD_SIZE)
        em.line()

    def _code_no_expr(self, expr: NoExpr, env: Environment) -> None:
        self.emitter.move(ACC, ZERO)

    def _code_object(self, expr: Object, env: Environment) -> None:
        em = self.emitter
        em.comment("Object:")
        idx = env.lookup_var(expr.name)
        if idx is not None:
            em.comment("It is a let variable.")
            em.load(ACC, idx + 1, SP)
            self._gc_assign(SP, idx + 1)
        elif (idx := env.lookup_param(expr.name)) is not None:
            em.comment("It is a param.")
            em.load(ACC, idx + 3, FP)
            self._gc_assign(FP, idx + 3)
        elif (idx := env.lookup_attrib(expr.name)) is not None:
            em.comment("It is an attribute.")
            em.load(ACC, idx + 3, SELF_REG)
            self._gc_assign(SELF_REG, idx + 3)
        elif expr.name == SELF:
            em.comment("It is self.")
            em.move(ACC, SELF_REG)
        else:
            raise LookupError(f"reference to unknown name {expr.name!r}")
        em.line()
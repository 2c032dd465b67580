"""Tests for the tree-walking evaluator."""

import io

import pytest

from sponge import run
from sponge.errors import (DivideByZeroError, EvalError, SpongeNameError,
                           SpongeTypeError, StackOverflowError)
from sponge.interpreter import Frame, Interpreter
from sponge.parser import parse
from sponge.values import INT_MAX, INT_MIN, UNIT, Integer, Text

from conftest import interpreter_for, run_source, wrap_main


def value_of(expr: str):
    """Evaluate ``expr`` as the return value of a helper function."""
    interp, _ = interpreter_for(f"func f() {{ return {expr}; }}\nfunc main() {{ }}")
    return interp.call("f")


# ---------- fixture scenarios ----------

def test_fixture_arithmetic(fixture_source):
    interp, out = interpreter_for(fixture_source)
    assert interp.call("test_arithmetic") is UNIT
    assert out.getvalue() == "30\n"


def test_fixture_semantic(fixture_source):
    interp, out = interpreter_for(fixture_source)
    interp.call("test_semantic")
    assert out.getvalue() == "ok\n"


def test_fixture_minimal(fixture_source):
    interp, out = interpreter_for(fixture_source)
    assert interp.call("test_minimal") is UNIT
    assert out.getvalue() == ""


def test_fixture_main(fixture_source):
    assert run_source(fixture_source) == "30\nok\n"


def test_run_discards_main_result():
    interp, _ = interpreter_for("func main() { return 7; }")
    assert interp.run() is None


def test_evaluation_is_deterministic(fixture_source):
    assert run_source(fixture_source) == run_source(fixture_source)


def test_default_output_is_stdout(capsys):
    run('func main() { print("hello"); print(42); }')
    assert capsys.readouterr().out == "hello\n42\n"


# ---------- arithmetic ----------

def test_precedence():
    assert value_of("1 + 2 * 3") == Integer(7)
    assert value_of("1 + 2 * 3") != Integer(9)
    assert value_of("(1 + 2) * 3") == Integer(9)


def test_division_truncates_toward_zero():
    assert value_of("5 / 2") == Integer(2)
    assert value_of("(0 - 7) / 2") == Integer(-3)
    assert value_of("7 / (0 - 2)") == Integer(-3)
    assert value_of("(0 - 7) / (0 - 2)") == Integer(3)


def test_division_by_zero():
    with pytest.raises(DivideByZeroError) as exc:
        value_of("5 / 0")
    assert (exc.value.line, exc.value.col) == (1, 21)


def test_arithmetic_wraps_at_64_bits():
    assert value_of(f"{INT_MAX} + 1") == Integer(INT_MIN)
    assert value_of(f"0 - {INT_MAX} - 2") == Integer(INT_MAX)
    assert value_of(f"(0 - {INT_MAX} - 1) / (0 - 1)") == Integer(INT_MIN)


def test_comparisons_yield_one_or_zero():
    assert value_of("3 > 2") == Integer(1)
    assert value_of("3 < 2") == Integer(0)
    assert value_of("2 == 2") == Integer(1)
    assert value_of("2 != 2") == Integer(0)
    assert value_of('"a" == "a"') == Integer(1)
    assert value_of('"a" != "b"') == Integer(1)


def test_left_operand_is_evaluated_first():
    src = """
func left() { print("left"); return 1; }
func right() { print("right"); return 2; }
func main() { print(left() + right()); }
"""
    assert run_source(src) == "left\nright\n3\n"


# ---------- type errors ----------

def test_text_plus_integer_is_type_error_and_prints_nothing():
    out = io.StringIO()
    with pytest.raises(SpongeTypeError, match="Integer operands"):
        Interpreter(parse(wrap_main('print("a" + 1);')), out=out).run()
    assert out.getvalue() == ""


def test_ordering_requires_integers():
    with pytest.raises(SpongeTypeError):
        value_of('"a" < "b"')


def test_cross_type_equality_is_type_error():
    with pytest.raises(SpongeTypeError, match="Cannot compare Integer with Text"):
        value_of('1 == "1"')


def test_unit_cannot_be_compared():
    src = "func nothing() { }\nfunc main() { let u = nothing(); print(u == u); }"
    with pytest.raises(SpongeTypeError, match="Unit"):
        run_source(src)


def test_if_condition_must_be_integer():
    with pytest.raises(SpongeTypeError, match="if condition"):
        run_source(wrap_main('if "yes" { print(1); }'))


def test_print_rejects_unit():
    src = "func nothing() { }\nfunc main() { print(nothing()); }"
    with pytest.raises(SpongeTypeError, match="print cannot render Unit"):
        run_source(src)


def test_print_requires_exactly_one_argument():
    with pytest.raises(SpongeTypeError, match="exactly 1 argument"):
        run_source(wrap_main("print(1, 2);"))
    with pytest.raises(SpongeTypeError, match="exactly 1 argument"):
        run_source(wrap_main("print();"))


def test_user_functions_take_no_arguments():
    src = "func f() { }\nfunc main() { f(1); }"
    with pytest.raises(SpongeTypeError, match="takes no arguments"):
        run_source(src)


# ---------- control flow ----------

def test_if_else_branches():
    src = wrap_main("""
    if 0 { print("then"); } else { print("else"); }
    if 5 - 2 { print("nonzero"); }
    if 0 { print("never"); }
""")
    assert run_source(src) == "else\nnonzero\n"


def test_return_skips_remaining_statements():
    src = """
func f() {
    print(1);
    return 2;
    print(3);
}
func main() { print(f()); }
"""
    assert run_source(src) == "1\n2\n"


def test_return_inside_if_leaves_the_function():
    src = """
func pick() {
    if 1 {
        if 1 { return "inner"; }
        print("unreachable");
    }
    return "outer";
}
func main() { print(pick()); print("after"); }
"""
    assert run_source(src) == "inner\nafter\n"


def test_function_without_return_yields_unit():
    interp, _ = interpreter_for("func f() { let a = 1; }\nfunc main() { }")
    assert interp.call("f") is UNIT


def test_nested_calls_return_values():
    src = """
func a() { return b() + 1; }
func b() { return 41; }
func main() { print(a()); }
"""
    assert run_source(src) == "42\n"


def test_runaway_recursion_is_stack_overflow():
    interp, _ = interpreter_for("func main() { main(); }")
    with pytest.raises(StackOverflowError):
        interp.run()
    assert interp.stack == []


# ---------- scoping ----------

def test_let_in_if_block_does_not_leak():
    src = wrap_main("""
    if 1 { let inner = 5; print(inner); }
    print(inner);
""")
    out = io.StringIO()
    with pytest.raises(SpongeNameError, match="inner"):
        Interpreter(parse(src), out=out).run()
    # output written before the failure stays written
    assert out.getvalue() == "5\n"


def test_block_sees_enclosing_bindings_and_may_shadow():
    src = wrap_main("""
    let x = 1;
    if 1 {
        print(x);
        let x = 2;
        print(x);
    }
    print(x);
""")
    assert run_source(src) == "1\n2\n1\n"


def test_rebinding_in_same_frame_overwrites():
    src = wrap_main("let a = 1; let a = a + 10; print(a);")
    assert run_source(src) == "11\n"


def test_functions_do_not_see_callers_variables():
    src = """
func peek() { print(secret); }
func main() { let secret = 1; peek(); }
"""
    with pytest.raises(SpongeNameError, match="secret"):
        run_source(src)


def test_undefined_variable_reports_position():
    with pytest.raises(SpongeNameError) as exc:
        run_source("func main() {\n  print(nope);\n}")
    assert (exc.value.line, exc.value.col) == (2, 9)


def test_undefined_function():
    with pytest.raises(SpongeNameError, match="Undefined function 'ghost'"):
        run_source(wrap_main("ghost();"))


def test_missing_main():
    interp, _ = interpreter_for("func helper() { }")
    with pytest.raises(SpongeNameError, match="entry point"):
        interp.run()


def test_runtime_errors_share_a_base_class():
    for cls in (SpongeNameError, SpongeTypeError, DivideByZeroError, StackOverflowError):
        assert issubclass(cls, EvalError)


# ---------- frames ----------

def test_frame_chain_lookup_and_visibility():
    outer = Frame()
    outer.define("a", Integer(1))
    outer.define("b", Text("x"))
    inner = Frame(outer)
    inner.define("a", Integer(2))
    assert inner.lookup("a") == Integer(2)
    assert inner.lookup("b") == Text("x")
    assert inner.visible() == {"a": Integer(2), "b": Text("x")}
    with pytest.raises(KeyError):
        outer.lookup("missing")


def test_independent_interpreters_share_nothing(fixture_source):
    prog = parse(fixture_source)
    out1, out2 = io.StringIO(), io.StringIO()
    Interpreter(prog, out=out1).run()
    Interpreter(prog, out=out2).run()
    assert out1.getvalue() == out2.getvalue() == "30\nok\n"


# ---------- debug trace ----------

def test_run_debug_yields_step_events(fixture_source):
    interp = Interpreter(parse(fixture_source), out=io.StringIO())
    events = list(interp.run_debug())
    kinds = [e["event"] for e in events]
    assert kinds[0] == "call" and events[0]["func"] == "main"
    assert [e["text"] for e in events if e["event"] == "print"] == ["30", "ok"]
    assert kinds[-1] == "return" and events[-1]["func"] == "main"
    let_c = next(e for e in events if e["event"] == "stmt" and e["locals"].get("c") == "30")
    assert let_c["func"] == "test_arithmetic"
    assert let_c["depth"] == 2


def test_run_debug_records_errors():
    interp = Interpreter(parse(wrap_main("print(1 / 0);")), out=io.StringIO())
    events = list(interp.run_debug())
    assert events[-1]["event"] == "error"
    assert events[-1]["kind"] == "DivideByZeroError"
    assert interp.tracer is None

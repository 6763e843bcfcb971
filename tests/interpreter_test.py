import io

import pytest

from cli import format_ast
from errors import (
    IntegerArithmeticError,
    InternalError,
    RuntimeTypeError,
    StepLimitError,
    UndefinedVariableError,
)
from ast_nodes import BinOp, Number, Program, Output
from interpreter import Interpreter, parse_source, run_source, truncating_div


def run(src, **options):
    out = io.StringIO()
    run_source(src, out=out, **options)
    return out.getvalue()


def test_left_associative_subtraction():
    assert run("output 10 - 3 - 2") == "5\n"


def test_precedence():
    assert run("output 2 + 3 * 4") == "14\n"
    assert run("output (2 + 3) * 4") == "20\n"


def test_integer_truncation():
    assert run("a = 7\nb = 2\noutput a / b") == "3\n"


def test_negative_division_truncates_toward_zero():
    assert run("a = 0 - 7\noutput a / 2\noutput a div 2\noutput a mod 2") == "-3\n-3\n-1\n"
    assert run("a = 0 - 3\noutput 7 mod a") == "1\n"


def test_truncating_div_helper():
    assert truncating_div(7, 2) == 3
    assert truncating_div(-7, 2) == -3
    assert truncating_div(7, -2) == -3
    assert truncating_div(-7, -2) == 3


def test_equals_in_condition():
    src = "x = 5\nif x = 5 then output 1 else output 0 endif"
    assert run(src) == "1\n"


def test_if_without_else_runs_nothing_when_false():
    assert run("if 0 then output 1 endif\noutput 2") == "2\n"


def test_loop_mutation_visible_after_loop():
    assert run("x = 10\nloop while x > 0 x = x - 1 endloop\noutput x") == "0\n"


def test_loop_with_equals_condition():
    assert run("x = 0\nloop while x = 0 x = 1 endloop\noutput x") == "1\n"


def test_loop_is_pre_test():
    assert run("loop while 0 output 1 endloop\noutput 2") == "2\n"


def test_variables_created_in_blocks_stay_visible():
    src = "if 1 then inner = 3 endif\nloop while 0 endloop\noutput inner"
    assert run(src) == "3\n"


def test_string_output_is_verbatim():
    env = {}
    out = io.StringIO()
    run_source('output "hello"\noutput "  spaced  "', env=env, out=out)
    assert out.getvalue() == "hello\n  spaced  \n"
    assert env == {}


def test_comparisons_produce_one_or_zero():
    src = "\n".join(
        f"if {cond} then output 1 else output 0 endif"
        for cond in ("3 > 2", "3 >= 3", "2 < 3", "4 <= 3", "1 != 1", "2 = 2")
    )
    assert run(src) == "1\n1\n1\n0\n0\n1\n"


def test_and_or():
    src = (
        "if 1 and 0 then output 1 else output 0 endif\n"
        "if 0 or 5 then output 1 else output 0 endif\n"
        "if 2 and 3 then output 1 else output 0 endif"
    )
    assert run(src) == "0\n1\n1\n"


def test_and_does_not_short_circuit():
    with pytest.raises(UndefinedVariableError) as info:
        run("if 0 and missing then output 1 endif")
    assert info.value.name == "missing"


def test_or_does_not_short_circuit():
    with pytest.raises(UndefinedVariableError):
        run("if 1 or missing then output 1 endif")


def test_condition_value_is_any_integer():
    assert run("x = 2 + 2\nif x then output x endif") == "4\n"


def test_undefined_variable_produces_no_output():
    out = io.StringIO()
    with pytest.raises(UndefinedVariableError) as info:
        run_source("output y", out=out)
    assert out.getvalue() == ""
    assert "Undefined variable: y" in str(info.value)
    assert info.value.line == 1


def test_division_by_zero_stops_execution():
    out = io.StringIO()
    with pytest.raises(IntegerArithmeticError) as info:
        run_source("output 1\na = 1\nb = 0\noutput a / b\noutput 2", out=out)
    assert out.getvalue() == "1\n"
    assert "Division by zero" in str(info.value)
    assert info.value.line == 4


def test_modulo_by_zero():
    with pytest.raises(IntegerArithmeticError) as info:
        run("output 5 mod 0")
    assert "Modulo by zero" in str(info.value)


def test_overflow_is_arithmetic_error():
    with pytest.raises(IntegerArithmeticError):
        run("a = 9223372036854775807\noutput a + 1")
    with pytest.raises(IntegerArithmeticError):
        run("a = 0 - 9223372036854775807\noutput a - 2")
    with pytest.raises(IntegerArithmeticError):
        run("a = 4294967296\noutput a * a")


def test_string_in_arithmetic_is_type_error():
    with pytest.raises(RuntimeTypeError) as info:
        run('output "a" + 1')
    assert "Cannot evaluate string as number" in str(info.value)


def test_string_assignment_is_type_error():
    with pytest.raises(RuntimeTypeError):
        run('x = "text"')


def test_string_in_condition_is_type_error():
    with pytest.raises(RuntimeTypeError):
        run('if "yes" then output 1 endif')


def test_unknown_operator_is_internal_error():
    program = Program([Output(BinOp(Number(1), "**", Number(2)))])
    with pytest.raises(InternalError):
        Interpreter(out=io.StringIO()).interpret(program)


def test_interpret_requires_program():
    with pytest.raises(InternalError):
        Interpreter().interpret(Number(1))


def test_environment_can_be_injected():
    env = {"x": 3}
    out = io.StringIO()
    run_source("output x * 2\ny = x + 1", env=env, out=out)
    assert out.getvalue() == "6\n"
    assert env == {"x": 3, "y": 4}


def test_fresh_interpreters_do_not_share_state():
    first = Interpreter(out=io.StringIO())
    first.interpret(parse_source("x = 1"))
    second = Interpreter(out=io.StringIO())
    with pytest.raises(UndefinedVariableError):
        second.interpret(parse_source("output x"))


def test_deterministic_output():
    src = "i = 0\nloop while i < 5 output i * i i = i + 1 endloop\noutput \"done\""
    assert run(src) == run(src) == "0\n1\n4\n9\n16\ndone\n"


def test_printing_does_not_change_interpretation():
    program = parse_source("x = 3\nloop while x > 0 output x x = x - 1 endloop\nif x = 0 then output \"end\" endif")

    out_before = io.StringIO()
    Interpreter(out=out_before).interpret(program)

    lines = format_ast(program)
    assert lines == format_ast(program)

    out_after = io.StringIO()
    Interpreter(out=out_after).interpret(program)
    assert out_before.getvalue() == out_after.getvalue() == "3\n2\n1\nend\n"


def test_long_addition_chain():
    assert run("output " + " + ".join(["1"] * 1200)) == "1200\n"


def test_long_chain_keeps_left_to_right_order():
    src = "output 5000 - " + " - ".join(["1"] * 1500)
    assert run(src) == "3500\n"


def test_long_condition_chain():
    src = "x = 1\nif x = " + " + ".join(["0"] * 1200) + " + 1 then output 1 else output 0 endif"
    assert run(src) == "1\n"


def test_long_chain_error_keeps_position():
    with pytest.raises(UndefinedVariableError) as info:
        run("output " + " + ".join(["1"] * 1200) + " + missing")
    assert info.value.line == 1


def test_deep_right_nesting_is_internal_error():
    expr = Number(1)
    for _ in range(5000):
        expr = BinOp(Number(1), "-", expr)
    program = Program([Output(expr)])
    with pytest.raises(InternalError) as info:
        Interpreter(out=io.StringIO()).interpret(program)
    assert "nested too deeply" in str(info.value)


def test_printer_handles_long_chain():
    program = parse_source("output " + " + ".join(["1"] * 1200))
    lines = format_ast(program)
    assert lines[0] == "Program"
    assert lines[1] == "  Output"
    assert len(lines) == 2 + 1199 + 1200


def test_step_limit_stops_infinite_loop():
    with pytest.raises(StepLimitError):
        run("loop while 1 endloop", max_steps=50)


def test_step_limit_not_hit_by_short_program():
    assert run("x = 1\noutput x", max_steps=2) == "1\n"


def test_trace_writes_to_trace_stream():
    out = io.StringIO()
    trace = io.StringIO()
    interpreter = Interpreter(out=out, trace=True)
    interpreter.trace_out = trace
    interpreter.interpret(parse_source("x = 1\noutput x"))
    assert out.getvalue() == "1\n"
    lines = trace.getvalue().splitlines()
    assert lines == [
        "TRACE line=1 Assignment vars=0",
        "TRACE line=2 Output vars=1",
    ]


def test_nested_loops():
    src = (
        "i = 0\ntotal = 0\n"
        "loop while i < 3\n"
        "  j = 0\n"
        "  loop while j < 3\n"
        "    if i = j then total = total + 1 endif\n"
        "    j = j + 1\n"
        "  endloop\n"
        "  i = i + 1\n"
        "endloop\n"
        "output total"
    )
    assert run(src) == "3\n"

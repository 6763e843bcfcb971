import sys

from ast_nodes import (
    Program, Assignment, Output, If, Loop, BinOp, Number, String, Identifier,
)
from errors import (
    IntegerArithmeticError,
    InternalError,
    RuntimeTypeError,
    StepLimitError,
    UndefinedVariableError,
)
from lexer import INT64_MAX, INT64_MIN, Lexer
from parser import Parser


class Interpreter:
    """Tree-walking evaluator.

    Every value is a signed 64-bit integer. Variables live in a single flat
    environment owned by the interpreter instance; pass ``env`` to share or
    inspect it. Output lines go to ``out`` (stdout by default).
    """

    def __init__(self, env=None, out=None, trace=False, max_steps=None):
        self.env = env if env is not None else {}
        self.out = out
        self.trace = trace
        self.trace_out = None
        self.max_steps = max_steps  # set to an int to guard against infinite loops
        self.steps = 0

    def interpret(self, program):
        if not isinstance(program, Program):
            raise InternalError("Interpreter expects a Program node at the top")
        for stmt in program.statements:
            try:
                self.execute(stmt)
            except RecursionError:
                raise InternalError("Expression nested too deeply", stmt.line, stmt.column) from None

    # ---------- STATEMENTS ----------
    def execute(self, node):
        self._step(node)

        if isinstance(node, Assignment):
            self.env[node.name] = self.evaluate(node.expr)
            return

        if isinstance(node, Output):
            if isinstance(node.expr, String):
                self.write(node.expr.value)
            else:
                self.write(str(self.evaluate(node.expr)))
            return

        if isinstance(node, If):
            branch = node.true_branch if self.evaluate(node.condition) != 0 else node.false_branch
            for stmt in branch:
                self.execute(stmt)
            return

        if isinstance(node, Loop):
            while self.evaluate(node.condition) != 0:
                for stmt in node.body:
                    self.execute(stmt)
                self._step(node)
            return

        raise InternalError(
            f"Unknown statement node: {node.__class__.__name__}",
            getattr(node, "line", None),
            getattr(node, "column", None),
        )

    def write(self, text):
        out = self.out if self.out is not None else sys.stdout
        print(text, file=out)

    def _step(self, node):
        if self.trace:
            out = self.trace_out if self.trace_out is not None else sys.stderr
            print(f"TRACE line={node.line} {node.__class__.__name__} vars={len(self.env)}", file=out)

        if self.max_steps is not None:
            self.steps += 1
            if self.steps > self.max_steps:
                raise StepLimitError(
                    f"Step limit exceeded (possible infinite loop, max_steps={self.max_steps})",
                    node.line,
                    node.column,
                )

    # ---------- EXPRESSIONS ----------
    def evaluate(self, node):
        if isinstance(node, Number):
            return node.value

        if isinstance(node, String):
            raise RuntimeTypeError("Cannot evaluate string as number", node.line, node.column)

        if isinstance(node, Identifier):
            if node.name not in self.env:
                raise UndefinedVariableError(node.name, node.line, node.column)
            return self.env[node.name]

        if isinstance(node, BinOp):
            # Left-associative chains build left-deep trees, so walk the left
            # spine with a list instead of recursing once per operator.
            spine = []
            while isinstance(node, BinOp):
                spine.append(node)
                node = node.left

            # both sides always run: "and"/"or" do not short-circuit
            a = self.evaluate(node)
            for op_node in reversed(spine):
                b = self.evaluate(op_node.right)
                a = self.binary(op_node, a, b)
            return a

        raise InternalError(
            f"Unknown expression node: {node.__class__.__name__}",
            getattr(node, "line", None),
            getattr(node, "column", None),
        )

    def binary(self, node, a, b):
        op = node.op

        if op == "+":
            return self.checked(a + b, node)
        if op == "-":
            return self.checked(a - b, node)
        if op == "*":
            return self.checked(a * b, node)
        if op in ("/", "div"):
            self.check_divisor(b, node)
            return self.checked(truncating_div(a, b), node)
        if op == "mod":
            self.check_divisor(b, node)
            return a - b * truncating_div(a, b)

        if op == "==":
            return int(a == b)
        if op == "!=":
            return int(a != b)
        if op == ">":
            return int(a > b)
        if op == ">=":
            return int(a >= b)
        if op == "<":
            return int(a < b)
        if op == "<=":
            return int(a <= b)
        if op == "and":
            return int(a != 0 and b != 0)
        if op == "or":
            return int(a != 0 or b != 0)

        raise InternalError(f"Unknown binary operator: {op}", node.line, node.column)

    def check_divisor(self, b, node):
        if b == 0:
            what = "Modulo" if node.op == "mod" else "Division"
            raise IntegerArithmeticError(f"{what} by zero", node.line, node.column)

    def checked(self, value, node):
        if value < INT64_MIN or value > INT64_MAX:
            raise IntegerArithmeticError(f"Integer overflow in '{node.op}'", node.line, node.column)
        return value


def truncating_div(a, b):
    # Python's // floors; the language truncates toward zero.
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def parse_source(source):
    return Parser(Lexer(source)).parse()


def run_source(source, env=None, out=None, **options):
    interpreter = Interpreter(env=env, out=out, **options)
    interpreter.interpret(parse_source(source))
    return interpreter

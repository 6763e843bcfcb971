import sys
import traceback

import colorama

from errors import PseudoError
from interpreter import Interpreter, parse_source

USAGE = """Usage:
  python cli.py <file.pseudo>               run a program
  python cli.py -p|--print-ast <file.pseudo> print the AST and exit
  options:
    --trace          print one TRACE line per executed statement (stderr)
    --max-steps N    stop with an error after N statements
    --debug          show Python traceback on errors"""


# Structural printer (so you can SEE what the parser built).
# Read-only: never evaluates anything. Uses an explicit work stack so long
# operator chains do not hit the recursion limit.
def format_ast(node, indent=0):
    lines = []
    stack = [(node, indent)]

    while stack:
        node, indent = stack.pop()
        sp = "  " * indent
        t = node.__class__.__name__
        children = []

        if isinstance(node, str):
            # branch label
            lines.append(f"{sp}{node}")
        elif t == "Program":
            lines.append(f"{sp}Program")
            children = [(stmt, indent + 1) for stmt in node.statements]
        elif t == "Assignment":
            lines.append(f"{sp}Assignment: {node.name}")
            children = [(node.expr, indent + 1)]
        elif t == "Output":
            lines.append(f"{sp}Output")
            children = [(node.expr, indent + 1)]
        elif t == "If":
            lines.append(f"{sp}If")
            children = [(node.condition, indent + 1), ("True Branch", indent + 1)]
            children += [(stmt, indent + 2) for stmt in node.true_branch]
            children.append(("False Branch", indent + 1))
            children += [(stmt, indent + 2) for stmt in node.false_branch]
        elif t == "Loop":
            lines.append(f"{sp}Loop")
            children = [(node.condition, indent + 1)]
            children += [(stmt, indent + 1) for stmt in node.body]
        elif t == "BinOp":
            lines.append(f"{sp}BinOp: {node.op}")
            children = [(node.left, indent + 1), (node.right, indent + 1)]
        elif t == "Number":
            lines.append(f"{sp}Number: {node.value}")
        elif t == "String":
            lines.append(f"{sp}String: {node.value}")
        elif t == "Identifier":
            lines.append(f"{sp}Identifier: {node.name}")
        else:
            lines.append(f"{sp}{node!r}")

        stack.extend(reversed(children))

    return lines


def pretty(node):
    return "\n".join(format_ast(node))


def report(message):
    if sys.stderr.isatty():
        colorama.just_fix_windows_console()
        message = f"{colorama.Fore.RED}{message}{colorama.Style.RESET_ALL}"
    print(message, file=sys.stderr)


def read_source(path):
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_parse(path, debug=False):
    try:
        program = parse_source(read_source(path))
    except (OSError, UnicodeDecodeError, PseudoError) as e:
        if debug:
            traceback.print_exc()
        else:
            report(str(e))
        sys.exit(1)

    print(pretty(program))


def cmd_run(path, debug=False, trace=False, max_steps=None):
    try:
        program = parse_source(read_source(path))
        interpreter = Interpreter(trace=trace, max_steps=max_steps)
        interpreter.interpret(program)
    except (OSError, UnicodeDecodeError, PseudoError) as e:
        if debug:
            traceback.print_exc()
        else:
            report(str(e))
        sys.exit(1)


def usage_error(message=None):
    if message:
        report(message)
    print(USAGE, file=sys.stderr)
    sys.exit(1)


def main(argv=None):
    args = list(sys.argv[1:] if argv is None else argv)

    debug = False
    trace = False
    print_ast = False
    max_steps = None
    paths = []

    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--debug":
            debug = True
        elif arg == "--trace":
            trace = True
        elif arg in ("-p", "--print-ast"):
            print_ast = True
        elif arg == "--max-steps":
            if i + 1 >= len(args):
                usage_error("--max-steps expects a number")
            try:
                max_steps = int(args[i + 1])
            except ValueError:
                usage_error(f"--max-steps expects a number, got {args[i + 1]}")
            i += 1
        elif arg in ("-h", "--help"):
            print(USAGE)
            return
        elif arg.startswith("-"):
            usage_error(f"Unknown option: {arg}")
        else:
            paths.append(arg)
        i += 1

    if len(paths) != 1:
        usage_error()

    if print_ast:
        cmd_parse(paths[0], debug=debug)
    else:
        cmd_run(paths[0], debug=debug, trace=trace, max_steps=max_steps)


if __name__ == "__main__":
    main()

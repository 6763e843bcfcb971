class ASTNode:
    # Source position (1-based) of the token that started the node.
    line: int | None = None
    column: int | None = None


class Program(ASTNode):
    def __init__(self, statements):
        self.statements = statements


class Assignment(ASTNode):
    def __init__(self, name, expr):
        self.name = name  # variable name
        self.expr = expr  # expression


class Output(ASTNode):
    def __init__(self, expr):
        self.expr = expr


class If(ASTNode):
    def __init__(self, condition, true_branch, false_branch=None):
        self.condition = condition
        self.true_branch = true_branch
        self.false_branch = false_branch if false_branch is not None else []


class Loop(ASTNode):
    def __init__(self, condition, body):
        self.condition = condition
        self.body = body


class BinOp(ASTNode):
    def __init__(self, left, op, right):
        self.left = left
        self.op = op  # "+", "mod", "==", "and", ...
        self.right = right


class Number(ASTNode):
    def __init__(self, value):
        self.value = value


class String(ASTNode):
    def __init__(self, value):
        self.value = value


class Identifier(ASTNode):
    def __init__(self, name):
        self.name = name

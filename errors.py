class PseudoError(Exception):
    kind = "Error"

    def __init__(self, message: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def format(self) -> str:
        text = f"{self.kind}: {self.message}"
        if self.line is not None:
            text += f" at line {self.line}, col {self.column}"
        return text

    def __str__(self) -> str:
        return self.format()


class LexicalError(PseudoError):
    kind = "Lexical error"


class ParseError(PseudoError):
    kind = "Syntax error"

    def __init__(self, message: str, line=None, column=None, expected=None, got=None):
        super().__init__(message, line, column)
        self.expected = expected
        self.got = got


class RuntimeTypeError(PseudoError):
    kind = "Type error"


class UndefinedVariableError(PseudoError):
    kind = "Runtime error"

    def __init__(self, name: str, line=None, column=None):
        super().__init__(f"Undefined variable: {name}", line, column)
        self.name = name


class IntegerArithmeticError(PseudoError):
    kind = "Arithmetic error"


class StepLimitError(PseudoError):
    kind = "Runtime error"


class InternalError(PseudoError):
    kind = "Internal error"

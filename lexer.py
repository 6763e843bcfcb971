from errors import LexicalError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

DIGITS = "0123456789"

KEYWORDS = {
    "output": "OUTPUT",
    "if": "IF",
    "then": "THEN",
    "else": "ELSE",
    "endif": "ENDIF",
    "loop": "LOOP",
    "endloop": "ENDLOOP",
    "while": "WHILE",
    "and": "AND",
    "or": "OR",
    "not": "NOT",
    "mod": "MOD",
    "div": "DIV",
}

SINGLE_CHAR_TOKENS = {
    "=": "ASSIGN",
    "+": "PLUS",
    "-": "MINUS",
    "*": "STAR",
    "/": "SLASH",
    "(": "LPAREN",
    ")": "RPAREN",
    ",": "COMMA",
}


class Token:
    def __init__(self, type, value=None, line=1, column=1):
        self.type = type
        self.value = value
        self.line = line
        self.column = column

    # position is diagnostic only, so it is not part of equality
    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.type == other.type and self.value == other.value

    def __hash__(self):
        return hash((self.type, self.value))

    def __repr__(self):
        if self.value is not None:
            return f"{self.type}({self.value!r})"
        return f"{self.type}"


class Lexer:
    def __init__(self, text):
        self.text = text
        self.pos = 0
        self.current_char = text[0] if text else None
        self.line = 1
        self.column = 1

    def advance(self):
        # track line/column based on current_char before moving
        if self.current_char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.pos += 1
        if self.pos >= len(self.text):
            self.current_char = None
        else:
            self.current_char = self.text[self.pos]

    def skip_whitespace(self):
        while self.current_char is not None and self.current_char in " \t\r\n":
            self.advance()

    def read_identifier(self):
        start_line, start_col = self.line, self.column
        result = ""
        while self.current_char is not None and self.current_char.isalnum():
            result += self.current_char
            self.advance()

        keyword = KEYWORDS.get(result)
        if keyword is not None:
            return Token(keyword, line=start_line, column=start_col)
        return Token("IDENT", result, line=start_line, column=start_col)

    def read_number(self):
        start_line, start_col = self.line, self.column
        result = ""
        while self.current_char is not None and self.current_char in DIGITS:
            result += self.current_char
            self.advance()

        value = int(result)
        if value > INT64_MAX:
            raise LexicalError(f"Number literal out of range: {result}", start_line, start_col)
        return Token("NUMBER", value, line=start_line, column=start_col)

    def read_string(self):
        start_line, start_col = self.line, self.column
        self.advance()  # skip opening quote
        result = ""

        while self.current_char is not None and self.current_char != '"':
            result += self.current_char
            self.advance()

        if self.current_char != '"':
            raise LexicalError("Unclosed string", start_line, start_col)

        self.advance()  # skip closing quote
        return Token("STRING", result, line=start_line, column=start_col)

    def read_comparison(self):
        start_line, start_col = self.line, self.column
        ch = self.current_char
        self.advance()

        if self.current_char == "=":
            self.advance()
            if ch == ">":
                return Token("GTE", line=start_line, column=start_col)
            if ch == "<":
                return Token("LTE", line=start_line, column=start_col)
            return Token("NOTEQ", line=start_line, column=start_col)

        if ch == ">":
            return Token("GT", line=start_line, column=start_col)
        if ch == "<":
            return Token("LT", line=start_line, column=start_col)
        raise LexicalError("Unexpected character: !", start_line, start_col)

    def get_next_token(self):
        self.skip_whitespace()

        if self.current_char is None:
            return Token("EOF", line=self.line, column=self.column)

        ch = self.current_char

        if ch.isalpha():
            return self.read_identifier()

        if ch in DIGITS:
            return self.read_number()

        if ch == '"':
            return self.read_string()

        if ch in "<>!":
            return self.read_comparison()

        if ch in SINGLE_CHAR_TOKENS:
            start_line, start_col = self.line, self.column
            self.advance()
            return Token(SINGLE_CHAR_TOKENS[ch], line=start_line, column=start_col)

        raise LexicalError(f"Unexpected character: {ch}", self.line, self.column)

    def tokenize(self):
        tokens = []
        while True:
            tok = self.get_next_token()
            tokens.append(tok)
            if tok.type == "EOF":
                return tokens


def tokenize(text):
    return Lexer(text).tokenize()

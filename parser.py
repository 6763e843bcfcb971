from ast_nodes import (
    Program, Assignment, Output, If, Loop, BinOp, Number, String, Identifier,
)
from errors import ParseError

ADD_OPS = {
    "PLUS": "+",
    "MINUS": "-",
}

MUL_OPS = {
    "STAR": "*",
    "SLASH": "/",
    "MOD": "mod",
    "DIV": "div",
}

# "=" only reaches this table inside a condition, where it means equality.
REL_OPS = {
    "ASSIGN": "==",
    "NOTEQ": "!=",
    "GT": ">",
    "GTE": ">=",
    "LT": "<",
    "LTE": "<=",
    "AND": "and",
    "OR": "or",
}


class Parser:
    def __init__(self, lexer):
        self.lexer = lexer
        self.current_token = self.lexer.get_next_token()
        self.in_condition = False

    # move to next token, but only if it matches what we expect
    def eat(self, token_type):
        if self.current_token.type == token_type:
            self.current_token = self.lexer.get_next_token()
        else:
            tok = self.current_token
            raise ParseError(
                f"Expected {token_type}, got {tok!r}",
                tok.line,
                tok.column,
                expected=token_type,
                got=tok,
            )

    def error_here(self, message):
        tok = self.current_token
        raise ParseError(f"{message}: {tok!r}", tok.line, tok.column, got=tok)

    def at(self, node, tok):
        node.line = tok.line
        node.column = tok.column
        return node

    # ---------- TOP LEVEL ----------
    def parse(self):
        tok = self.current_token
        statements = []

        while self.current_token.type != "EOF":
            start = self.current_token
            try:
                statements.append(self.statement())
            except RecursionError:
                raise ParseError("Expression nested too deeply", start.line, start.column) from None

        return self.at(Program(statements), tok)

    # ---------- STATEMENTS ----------
    def statement(self):
        if self.current_token.type == "IDENT":
            return self.assignment_statement()
        if self.current_token.type == "OUTPUT":
            return self.output_statement()
        if self.current_token.type == "IF":
            return self.if_statement()
        if self.current_token.type == "LOOP":
            return self.loop_statement()

        self.error_here("Unexpected token")

    def assignment_statement(self):
        tok = self.current_token
        self.eat("IDENT")
        self.eat("ASSIGN")
        expr = self.expr()
        return self.at(Assignment(tok.value, expr), tok)

    def output_statement(self):
        tok = self.current_token
        self.eat("OUTPUT")
        expr = self.expr()
        return self.at(Output(expr), tok)

    def if_statement(self):
        # Grammar:
        #   IF condition THEN statement* (ELSE statement*)? ENDIF
        tok = self.current_token
        self.eat("IF")
        condition = self.condition()
        self.eat("THEN")

        true_branch = []
        while self.current_token.type not in ("ELSE", "ENDIF"):
            true_branch.append(self.statement())

        false_branch = []
        if self.current_token.type == "ELSE":
            self.eat("ELSE")
            while self.current_token.type != "ENDIF":
                false_branch.append(self.statement())

        self.eat("ENDIF")
        return self.at(If(condition, true_branch, false_branch), tok)

    def loop_statement(self):
        # Grammar:
        #   LOOP WHILE condition statement* ENDLOOP
        tok = self.current_token
        self.eat("LOOP")
        self.eat("WHILE")
        condition = self.condition()

        body = []
        while self.current_token.type != "ENDLOOP":
            body.append(self.statement())

        self.eat("ENDLOOP")
        return self.at(Loop(condition, body), tok)

    # ---------- EXPRESSIONS ----------
    # condition -> expr (relop expr)*
    def condition(self):
        self.in_condition = True
        try:
            node = self.expr()
            while self.in_condition and self.current_token.type in REL_OPS:
                tok = self.current_token
                self.eat(tok.type)
                right = self.expr()
                node = self.at(BinOp(node, REL_OPS[tok.type], right), tok)
            return node
        finally:
            self.in_condition = False

    # expr -> term ((PLUS | MINUS) term)*
    def expr(self):
        node = self.term()
        while self.current_token.type in ADD_OPS:
            tok = self.current_token
            self.eat(tok.type)
            right = self.term()
            node = self.at(BinOp(node, ADD_OPS[tok.type], right), tok)
        return node

    # term -> factor ((STAR | SLASH | MOD | DIV) factor)*
    def term(self):
        node = self.factor()
        while self.current_token.type in MUL_OPS:
            tok = self.current_token
            self.eat(tok.type)
            right = self.factor()
            node = self.at(BinOp(node, MUL_OPS[tok.type], right), tok)
        return node

    # factor -> NUMBER | STRING | IDENT | LPAREN expr RPAREN
    def factor(self):
        tok = self.current_token

        if tok.type == "NUMBER":
            self.eat("NUMBER")
            return self.at(Number(tok.value), tok)

        if tok.type == "STRING":
            self.eat("STRING")
            return self.at(String(tok.value), tok)

        if tok.type == "IDENT":
            self.eat("IDENT")
            return self.at(Identifier(tok.value), tok)

        if tok.type == "LPAREN":
            self.eat("LPAREN")
            node = self.expr()
            self.eat("RPAREN")
            return node

        self.error_here("Unexpected token")

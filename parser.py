from fastapi import FastAPI
from pydantic import BaseModel
from typing import List
from contextlib import contextmanager
from models import Position, Token, TokenKind, Node, NumberNode, UnaryOpNode, BinOpNode, ApiOk, ApiErr, post_order
from errors import ParseError
from config import EVALUATOR_URL, HTTP_TIMEOUT, MAX_DEPTH
import logging, requests

app = FastAPI(title="parser-svc")
log = logging.getLogger("linecalc.parser")

@app.get("/healthz")
def healthz():
    return {"ok": True}

ADDITIVE = (TokenKind.ADD, TokenKind.SUB)
MULTIPLICATIVE = (TokenKind.MUL, TokenKind.DIV)
UNARY = (TokenKind.ADD, TokenKind.SUB)
NUMBERS = (TokenKind.INT, TokenKind.FLOAT)


# expression := term ((ADD|SUB) term)*
# term       := factor ((MUL|DIV) factor)*
# factor     := (ADD|SUB) factor | LPAREN expression RPAREN | INT | FLOAT
class Parser:
    def __init__(self, tokens: List[Token], max_depth: int = MAX_DEPTH):
        if not tokens or tokens[-1].type is not TokenKind.EOF:
            raise ValueError("token list must end with an EOF token")
        self.t = tokens
        self.i = 0
        self.depth = 0
        self.max_depth = max_depth

    @property
    def current(self) -> Token:
        return self.t[self.i]

    def advance(self) -> Token:
        tok = self.current
        if self.i < len(self.t) - 1:
            self.i += 1
        return tok

    @contextmanager
    def nested(self, tok: Token):
        if self.depth >= self.max_depth:
            raise ParseError("expression nested too deeply", tok.pos, code="E_PARSE_DEPTH")
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1

    def parse(self) -> Node:
        node = self.expression()
        if self.current.type is not TokenKind.EOF:
            raise ParseError("expected operator", self.current.pos, code="E_PARSE_OPERATOR")
        return node

    def expression(self) -> Node:
        return self.binop(self.term, ADDITIVE)

    def term(self) -> Node:
        return self.binop(self.factor, MULTIPLICATIVE)

    def binop(self, operand, ops) -> Node:
        left = operand()
        while self.current.type in ops:
            op = self.advance()
            right = operand()
            left = BinOpNode(op=op, left=left, right=right)
        return left

    def factor(self) -> Node:
        tok = self.current
        if tok.type in UNARY:
            self.advance()
            with self.nested(tok):
                return UnaryOpNode(op=tok, operand=self.factor())
        if tok.type is TokenKind.LPAREN:
            self.advance()
            with self.nested(tok):
                node = self.expression()
            if self.current.type is not TokenKind.RPAREN:
                raise ParseError("expected ')'", self.current.pos, code="E_PARSE_RPAREN")
            self.advance()
            return node
        if tok.type in NUMBERS:
            self.advance()
            return NumberNode(token=tok)
        raise ParseError("expected factor", tok.pos, code="E_PARSE_FACTOR")


def parse(tokens: List[Token], max_depth: int = MAX_DEPTH) -> Node:
    node = Parser(tokens, max_depth).parse()
    log.debug("parsed %s", node)
    return node

class ParseReq(BaseModel):
    tokens: List[Token]

def _with_eof(tokens: List[Token]) -> List[Token]:
    if tokens and tokens[-1].type is TokenKind.EOF:
        return tokens
    pos = tokens[-1].pos.snapshot() if tokens else Position()
    return tokens + [Token(type=TokenKind.EOF, pos=pos)]

def _wire(ast: Node):
    return [item.model_dump(mode="json") for item in post_order(ast)]

@app.post("/parse")
def parse_api(req: ParseReq):
    try:
        ast = parse(_with_eof(req.tokens))
        return ApiOk(data=_wire(ast))
    except ParseError as e:
        return e.to_api_err()

@app.post("/run")
def run_api(req: ParseReq):
    try:
        ast = parse(_with_eof(req.tokens))

        # forward AST to evaluator
        r = requests.post(f"{EVALUATOR_URL}/evaluate", json={"ast": _wire(ast)},
                          timeout=HTTP_TIMEOUT)
        r.raise_for_status()
        return r.json()

    except ParseError as e:
        return e.to_api_err()
    except requests.RequestException as e:
        return ApiErr(phase="parse", code="E_FORWARD_EVAL",
                      msg=f"Failed to contact evaluator: {e}")

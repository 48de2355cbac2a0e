from fastapi import FastAPI
from pydantic import BaseModel
from typing import List, Optional
from models import Position, Token, TokenKind, ApiOk, INT32_MIN, INT32_MAX
from errors import LexError
from config import SOURCE_NAME
import logging, math

app = FastAPI(title="lexer-svc")
log = logging.getLogger("linecalc.lexer")

@app.get("/healthz")
def healthz():
    return {"ok": True}

DIGITS = frozenset("0123456789")
WHITESPACE = frozenset(" \t")
OPS = {
    "+": TokenKind.ADD, "-": TokenKind.SUB, "*": TokenKind.MUL, "/": TokenKind.DIV,
    "(": TokenKind.LPAREN, ")": TokenKind.RPAREN,
}
# longest digit run (ignoring leading zeros) that can still fit in an int32
MAX_INT_DIGITS = len(str(INT32_MAX))


class Lexer:
    def __init__(self, text: str, filename: str):
        self.text = text
        self.pos = Position.start(filename, text)
        self.current: Optional[str] = None
        self.advance()

    def advance(self):
        self.pos.advance(self.current)
        self.current = self.text[self.pos.index] if self.pos.index < len(self.text) else None

    def tokens(self) -> List[Token]:
        out: List[Token] = []
        while self.current is not None:
            c = self.current
            if c in WHITESPACE:
                self.advance()
            elif c in DIGITS:
                out.append(self.number())
            elif c in OPS:
                out.append(Token(type=OPS[c], lexeme=c, pos=self.pos.snapshot()))
                self.advance()
            else:
                self.advance()
                raise LexError(f"illegal character '{c}'", self.pos.snapshot(), code="E_LEX_UNK_CHAR")
        out.append(Token(type=TokenKind.EOF, pos=self.pos.snapshot()))
        return out

    def number(self) -> Token:
        # digits with at most one '.'; a second '.' ends the literal
        start = self.pos.snapshot()
        chars = []
        dots = 0
        while self.current is not None and (self.current in DIGITS or self.current == "."):
            if self.current == ".":
                if dots == 1:
                    break
                dots += 1
            chars.append(self.current)
            self.advance()
        text = "".join(chars)
        if dots == 0:
            if len(text.lstrip("0")) > MAX_INT_DIGITS or not INT32_MIN <= int(text) <= INT32_MAX:
                raise LexError(f"integer literal {text} out of range", start, code="E_LEX_RANGE")
            return Token(type=TokenKind.INT, lexeme=text, value=int(text), pos=start)
        value = float(text)
        if not math.isfinite(value):
            raise LexError(f"float literal {text} out of range", start, code="E_LEX_RANGE")
        return Token(type=TokenKind.FLOAT, lexeme=text, value=value, pos=start)


def tokenize(text: str, filename: str = SOURCE_NAME) -> List[Token]:
    tokens = Lexer(text, filename).tokens()
    log.debug("lexed %d tokens from %s", len(tokens), filename)
    return tokens

class LexReq(BaseModel):
    source: str
    filename: str = SOURCE_NAME

@app.post("/lex")
def lex(req: LexReq):
    try:
        tokens = tokenize(req.source, req.filename)
    except LexError as e:
        return e.to_api_err()
    return ApiOk(data=[t.model_dump(mode="json") for t in tokens])

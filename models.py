from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, Any, List, Literal, Optional, Union
from decimal import Decimal
from enum import Enum
import math

INT32_MIN = -2**31
INT32_MAX = 2**31 - 1


def fixed_notation(value: float) -> str:
    if not math.isfinite(value):
        return repr(value)
    text = format(Decimal(repr(value)), "f")
    return text if "." in text else text + ".0"


class Position(BaseModel):
    index: int = -1
    line: int = 0
    col: int = -1
    filename: str = ""
    text: str = Field(default="", repr=False, exclude=True)

    @classmethod
    def start(cls, filename: str, text: str) -> "Position":
        return cls(filename=filename, text=text)

    def advance(self, current: Optional[str] = None) -> None:
        # current is the character just consumed
        self.index += 1
        self.col += 1
        if current == "\n":
            self.col = 0
            self.line += 1

    def snapshot(self) -> "Position":
        return self.model_copy()

    def __str__(self) -> str:
        return f"line {self.line}, col {self.col} in file {self.filename}"


class TokenKind(str, Enum):
    INT = "INT"
    FLOAT = "FLOAT"
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    EOF = "EOF"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: TokenKind
    lexeme: str = ""
    value: Optional[Union[int, float]] = None
    pos: Position

    def __str__(self) -> str:
        if self.type is TokenKind.INT:
            return f"INT: {self.value}"
        if self.type is TokenKind.FLOAT:
            return f"FLOAT: {fixed_notation(self.value)}"
        return self.type.value


# AST

class NumberNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["Number"] = "Number"
    token: Token

    def __str__(self) -> str:
        return str(self.token)


class UnaryOpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["UnaryOp"] = "UnaryOp"
    op: Token
    operand: "Node"

    def __str__(self) -> str:
        return f"({self.op}, {self.operand})"


class BinOpNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["BinOp"] = "BinOp"
    op: Token
    left: "Node"
    right: "Node"

    def __str__(self) -> str:
        # walk the left spine so long chains like 1+1+...+1 don't recurse per link
        chain = []
        node = self
        while isinstance(node, BinOpNode):
            chain.append(node)
            node = node.left
        text = str(node)
        for link in reversed(chain):
            text = f"({text}, {link.op}, {link.right})"
        return text


Node = Annotated[Union[NumberNode, UnaryOpNode, BinOpNode], Field(discriminator="type")]
UnaryOpNode.model_rebuild()
BinOpNode.model_rebuild()


# Wire form: the AST as a flat post-order list, operands before their operator.

class UnaryStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["UnaryOp"] = "UnaryOp"
    op: Token


class BinaryStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["BinOp"] = "BinOp"
    op: Token


WireItem = Annotated[Union[NumberNode, UnaryStep, BinaryStep], Field(discriminator="type")]


def post_order(node: Node) -> List[WireItem]:
    out = []
    stack = [(node, False)]
    while stack:
        n, done = stack.pop()
        if isinstance(n, NumberNode):
            out.append(n)
        elif done:
            out.append(UnaryStep(op=n.op) if isinstance(n, UnaryOpNode) else BinaryStep(op=n.op))
        elif isinstance(n, BinOpNode):
            stack += [(n, True), (n.right, False), (n.left, False)]
        else:
            stack += [(n, True), (n.operand, False)]
    return out


# Results

class IntegerResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["Integer"] = "Integer"
    value: int

    def as_float(self) -> float:
        return float(self.value)


class FloatResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["Floating"] = "Floating"
    value: float

    def as_float(self) -> float:
        return self.value


Result = Annotated[Union[IntegerResult, FloatResult], Field(discriminator="kind")]


# Service payloads

class ApiErr(BaseModel):
    ok: Literal[False] = False
    phase: Literal["lex", "parse", "eval"]
    line: Optional[int] = None
    col: Optional[int] = None
    code: str
    msg: str


class ApiOk(BaseModel):
    ok: Literal[True] = True
    data: Any

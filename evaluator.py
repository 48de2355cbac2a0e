from fastapi import FastAPI
from pydantic import BaseModel
from typing import List, Optional
from models import (Node, NumberNode, UnaryOpNode, BinOpNode, Token, TokenKind, Position,
                    Result, IntegerResult, FloatResult, ApiOk, WireItem, UnaryStep, INT32_MIN, INT32_MAX)
from errors import CalcError, EvalError, DivisionByZeroError, NumericOverflowError
from formatter import format_result
from config import MAX_DEPTH
import logging, math, operator

app = FastAPI(title="evaluator-svc")
log = logging.getLogger("linecalc.evaluator")

@app.get("/healthz")
def healthz():
    return {"ok": True}

def _trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q

INT_OPS = {
    TokenKind.ADD: operator.add, TokenKind.SUB: operator.sub,
    TokenKind.MUL: operator.mul, TokenKind.DIV: _trunc_div,
}
FLOAT_OPS = {
    TokenKind.ADD: operator.add, TokenKind.SUB: operator.sub,
    TokenKind.MUL: operator.mul, TokenKind.DIV: operator.truediv,
}


def _int_result(value: int, pos: Position) -> IntegerResult:
    if not INT32_MIN <= value <= INT32_MAX:
        raise NumericOverflowError("integer overflow", pos)
    return IntegerResult(value=value)

def _float_result(value: float, pos: Position) -> FloatResult:
    if not math.isfinite(value):
        raise NumericOverflowError("floating-point overflow", pos)
    return FloatResult(value=value)

def _position_of(node) -> Optional[Position]:
    tok = getattr(node, "op", None) or getattr(node, "token", None)
    return tok.pos if isinstance(tok, Token) else None


def evaluate(node: Node) -> Result:
    if isinstance(node, NumberNode):
        return literal(node.token)
    if isinstance(node, UnaryOpNode):
        return unary(node.op, evaluate(node.operand))
    if isinstance(node, BinOpNode):
        # fold the left spine in a loop; only right operands recurse
        chain = []
        while isinstance(node, BinOpNode):
            chain.append(node)
            node = node.left
        acc = evaluate(node)
        for link in reversed(chain):
            acc = binary(link.op, acc, evaluate(link.right))
        return acc
    raise EvalError("evaluation error", _position_of(node))


def literal(tok: Token) -> Result:
    if tok.type is TokenKind.INT and isinstance(tok.value, int):
        return _int_result(tok.value, tok.pos)
    if tok.type is TokenKind.FLOAT and tok.value is not None:
        return _float_result(float(tok.value), tok.pos)
    raise EvalError("evaluation error", tok.pos)


def unary(op: Token, res: Result) -> Result:
    # unary '+' is absolute value, not identity
    if op.type is TokenKind.SUB:
        if isinstance(res, IntegerResult):
            return _int_result(-res.value, op.pos)
        return FloatResult(value=-res.value)
    if op.type is TokenKind.ADD:
        if isinstance(res, IntegerResult):
            return _int_result(abs(res.value), op.pos)
        return FloatResult(value=abs(res.value))
    raise EvalError("evaluation error", op.pos)


def binary(op: Token, left: Result, right: Result) -> Result:
    if isinstance(left, FloatResult) or isinstance(right, FloatResult):
        fn = FLOAT_OPS.get(op.type)
        if fn is None:
            raise EvalError("evaluation error", op.pos)
        a, b = left.as_float(), right.as_float()
        if op.type is TokenKind.DIV and b == 0:
            raise DivisionByZeroError(op.pos)
        return _float_result(fn(a, b), op.pos)
    fn = INT_OPS.get(op.type)
    if fn is None:
        raise EvalError("evaluation error", op.pos)
    if op.type is TokenKind.DIV and right.value == 0:
        raise DivisionByZeroError(op.pos)
    return _int_result(fn(left.value, right.value), op.pos)

def rebuild(items: List[WireItem], max_depth: int = MAX_DEPTH) -> Node:
    # each parenthesis can open both a term-level and an expression-level right operand
    limit = 2 * max_depth + 2
    stack = []  # (node, how deep evaluate() will recurse into it)
    for item in items:
        if isinstance(item, NumberNode):
            stack.append((item, 0))
            continue
        need = 1 if isinstance(item, UnaryStep) else 2
        if len(stack) < need:
            raise EvalError("malformed AST", item.op.pos)
        if need == 1:
            operand, depth = stack.pop()
            node, depth = UnaryOpNode(op=item.op, operand=operand), depth + 1
        else:
            (right, rdepth), (left, ldepth) = stack.pop(), stack.pop()
            node, depth = BinOpNode(op=item.op, left=left, right=right), max(ldepth, rdepth + 1)
        if depth > limit:
            raise EvalError("expression nested too deeply", item.op.pos, code="E_EVAL_DEPTH")
        stack.append((node, depth))
    if len(stack) != 1:
        raise EvalError("malformed AST", _position_of(stack[-1][0]) if stack else None)
    return stack[0][0]

class EvalReq(BaseModel):
    ast: List[WireItem]

@app.post("/evaluate")
def evaluate_api(req: EvalReq):
    try:
        tree = rebuild(req.ast)
        res = evaluate(tree)
        log.debug("%s evaluated to %r", tree, res)
        return ApiOk(data={"result": res.model_dump(), "display": format_result(res)})
    except CalcError as ex:
        return ex.to_api_err()

from typing import Optional
from models import ApiErr, Position


class CalcError(Exception):
    phase = "eval"
    code = "E_CALC"

    def __init__(self, msg: str, pos: Optional[Position] = None, code: Optional[str] = None):
        self.msg = msg
        self.pos = pos
        if code is not None:
            self.code = code
        super().__init__(f"{msg} at {pos}" if pos is not None else msg)

    def to_api_err(self) -> ApiErr:
        return ApiErr(
            phase=self.phase,
            line=self.pos.line if self.pos is not None else None,
            col=self.pos.col if self.pos is not None else None,
            code=self.code,
            msg=str(self),
        )


class LexError(CalcError):
    phase = "lex"
    code = "E_LEX_UNK_CHAR"


class ParseError(CalcError):
    phase = "parse"
    code = "E_PARSE"


class EvalError(CalcError):
    phase = "eval"
    code = "E_EVAL"


class DivisionByZeroError(EvalError):
    code = "E_EVAL_DIV_ZERO"

    def __init__(self, pos: Optional[Position] = None):
        super().__init__("division by zero", pos)


class NumericOverflowError(EvalError):
    code = "E_EVAL_OVERFLOW"

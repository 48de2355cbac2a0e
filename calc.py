from lexer import tokenize
from parser import parse
from evaluator import evaluate
from formatter import format_error, format_result
from errors import CalcError
from models import Result
from config import MAX_DEPTH, SOURCE_NAME
import logging

log = logging.getLogger("linecalc.calc")

# all state is local to the call, so run() is safe across threads
def run(text: str, source_name: str = SOURCE_NAME, max_depth: int = MAX_DEPTH) -> Result:
    tokens = tokenize(text, source_name)
    tree = parse(tokens, max_depth)
    result = evaluate(tree)
    log.debug("%r -> %r", text, result)
    return result

def run_line(text: str, source_name: str = SOURCE_NAME, max_depth: int = MAX_DEPTH) -> str:
    try:
        return format_result(run(text, source_name, max_depth))
    except CalcError as e:
        log.info("rejected %r: %s [%s]", text, e, e.code)
        return format_error(e)

from models import IntegerResult, fixed_notation

def format_result(res) -> str:
    if isinstance(res, IntegerResult):
        return f"Result: {res.value}"
    return f"Result: {fixed_notation(res.value)}"

def format_error(err: Exception) -> str:
    return f"Error! {err}"

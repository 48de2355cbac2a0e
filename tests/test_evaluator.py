import pytest

from calc import run
from errors import DivisionByZeroError, EvalError, NumericOverflowError
from evaluator import evaluate, rebuild
from lexer import tokenize
from models import FloatResult, IntegerResult, NumberNode, Position, Token, TokenKind, UnaryOpNode, post_order
from parser import parse


@pytest.mark.parametrize(
    "text, expected",
    [
        ("10 - 3 - 2", 5),
        ("2 + 3 * 4", 14),
        ("(2 + 3) * 4", 20),
        ("+(-5)", 5),
        ("-(-5)", 5),
        ("+-5", 5),
        ("-5", -5),
        ("+5", 5),
        ("3 / 2", 1),
        ("-7 / 2", -3),
        ("7 / -2", -3),
        ("-7 / -2", 3),
        ("-2147483647 - 1", -2147483648),
    ],
)
def test_integer_results(text, expected):
    res = run(text)

    assert isinstance(res, IntegerResult)
    assert res.value == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("3.0 / 2", 1.5),
        ("3 / 2.0", 1.5),
        ("1 + 2.5", 3.5),
        ("+-2.5", 2.5),
        ("-(0.5 * 4)", -2.0),
        ("(3 / 2) * 1.0", 1.0),
    ],
)
def test_float_promotion(text, expected):
    res = run(text)

    assert isinstance(res, FloatResult)
    assert res.value == expected


def test_unary_plus_is_not_identity():
    assert run("+-5") != run("-5")


def test_integer_division_by_zero():
    with pytest.raises(DivisionByZeroError) as exc:
        run("1 / (2 - 2)")

    assert str(exc.value) == "division by zero at line 0, col 2 in file stdin"
    assert exc.value.code == "E_EVAL_DIV_ZERO"


def test_float_division_by_zero():
    with pytest.raises(DivisionByZeroError):
        run("1.0 / 0")
    with pytest.raises(DivisionByZeroError):
        run("1 / 0.0")


def test_left_operand_fails_first():
    with pytest.raises(DivisionByZeroError) as exc:
        run("1/0 + 2/0")

    assert exc.value.pos.col == 1


@pytest.mark.parametrize(
    "text",
    ["2147483647 + 1", "-(-2147483647 - 1)", "+(-2147483647 - 1)", "65536 * 65536", "(-2147483647 - 1) / -1"],
)
def test_integer_overflow(text):
    with pytest.raises(NumericOverflowError) as exc:
        run(text)

    assert exc.value.code == "E_EVAL_OVERFLOW"


def test_float_overflow():
    big = "1" + "0" * 300 + ".0"

    with pytest.raises(NumericOverflowError):
        run(f"{big} * {big}")


def test_long_chain_evaluates_without_deep_recursion():
    res = run(" + ".join(["1"] * 5000))

    assert res == IntegerResult(value=5000)


def test_unexpected_node_is_an_evaluation_error():
    with pytest.raises(EvalError) as exc:
        evaluate(object())

    assert str(exc.value) == "evaluation error"


def test_unary_node_with_bad_operator():
    pos = Position(line=0, col=0, filename="t")
    node = UnaryOpNode(
        op=Token(type=TokenKind.MUL, pos=pos),
        operand=NumberNode(token=Token(type=TokenKind.INT, value=1, pos=pos)),
    )

    with pytest.raises(EvalError) as exc:
        evaluate(node)

    assert str(exc.value) == "evaluation error at line 0, col 0 in file t"


@pytest.mark.parametrize(
    "text",
    [
        "1",                # factor -> INT
        "1.5",              # factor -> FLOAT
        "-1",               # factor -> SUB factor
        "+1.5",             # factor -> ADD factor
        "(1)",              # factor -> ( expression )
        "2 * 3",            # term -> factor MUL factor
        "6 / 4.0",          # term -> factor DIV factor
        "1 + 2",            # expression -> term ADD term
        "1 - 2.0",          # expression -> term SUB term
        "-(1 + 2) * +(3 - 4) / 5 - -6.5 + ((7))",
    ],
)
def test_every_production_evaluates(text):
    res = run(text)

    assert isinstance(res, (IntegerResult, FloatResult))


def test_literals_are_range_checked():
    pos = Position(line=0, col=0, filename="t")

    with pytest.raises(NumericOverflowError):
        evaluate(NumberNode(token=Token(type=TokenKind.INT, value=2**31, pos=pos)))
    with pytest.raises(NumericOverflowError):
        evaluate(NumberNode(token=Token(type=TokenKind.FLOAT, value=float("inf"), pos=pos)))


def test_rebuild_inverts_post_order():
    tree = parse(tokenize("-(1.5 + 2) * 3 / +4 - 5 + (6 - (7 * 8))"))

    items = post_order(tree)

    assert [item.type for item in items][:3] == ["Number", "Number", "BinOp"]
    assert rebuild(items) == tree


def test_rebuild_bounds_nesting():
    tree = parse(tokenize("-" * 20 + "1"))

    with pytest.raises(EvalError) as exc:
        rebuild(post_order(tree), max_depth=5)

    assert exc.value.code == "E_EVAL_DEPTH"


def test_rebuild_accepts_everything_the_parser_bounds():
    text = "1 + 2 * (3 + 4 * (5 + 6 * (7 - -8)))"
    tree = parse(tokenize(text), max_depth=4)

    assert evaluate(rebuild(post_order(tree), max_depth=4)) == run(text)

import pytest

from hakolang.ast import (
    BinaryOperator,
    Block,
    Expr,
    ExprKind,
    For,
    ForKind,
    Id,
    Operation,
    OperationElem,
    Operator,
    Path,
    Type,
    TypeKind,
    UnaryOperator,
)
from hakolang.token import (
    Ident,
    IntLiteral,
    Base,
    Keyword,
    PrimType,
    Span,
    StrLiteral,
    Symbol,
    Token,
)


def tok(kind):
    return Token(kind, Span(0, 1))


def test_path_from_segments_keeps_order():
    path = Path.from_segments(["std", "io"])
    assert path.segments == ("std", "io")
    assert str(path) == "std::io"


def test_path_equality_from_generator():
    assert Path.from_segments(s for s in ["a", "b"]) == Path(("a", "b"))


def test_mul_binds_tighter_than_add():
    assert BinaryOperator.MUL.precedence() > BinaryOperator.ADD.precedence()
    assert BinaryOperator.DIV.precedence() > BinaryOperator.SUB.precedence()


def test_same_level_precedences_equal():
    assert BinaryOperator.ADD.precedence() == BinaryOperator.SUB.precedence()
    assert BinaryOperator.MUL.precedence() == BinaryOperator.DIV.precedence()


@pytest.mark.parametrize(
    "symbol, expected",
    [
        (Symbol.PLUS, BinaryOperator.ADD),
        (Symbol.MINUS, BinaryOperator.SUB),
        (Symbol.ASTERISK, BinaryOperator.MUL),
        (Symbol.SLASH, BinaryOperator.DIV),
        (Symbol.SEMICOLON, None),
    ],
)
def test_infix_operator(symbol, expected):
    assert Operator.to_infix_operator(tok(symbol)) == expected


@pytest.mark.parametrize(
    "symbol, expected",
    [
        (Symbol.EXCLAMATION, UnaryOperator.NOT),
        (Symbol.MINUS, UnaryOperator.NEGATIVE),
        (Symbol.PLUS, None),
    ],
)
def test_prefix_operator(symbol, expected):
    assert Operator.to_prefix_operator(tok(symbol)) == expected


def test_non_symbol_tokens_are_not_operators():
    for kind in (Ident("a"), Keyword.IF, PrimType.I32):
        assert Operator.to_infix_operator(tok(kind)) is None
        assert Operator.to_prefix_operator(tok(kind)) is None
        assert Operator.to_postfix_operator(tok(kind)) is None


def test_operator_is_unary():
    assert Operator(UnaryOperator.NOT).is_unary is True
    assert Operator(BinaryOperator.ADD).is_unary is False


def test_operation_elem_distinguishes_terms():
    term = Expr(ExprKind.ID, Id("a", Span(0, 1)), Span(0, 1))
    op = Operation([OperationElem(term), OperationElem(Operator(BinaryOperator.ADD))])
    assert [e.is_operator for e in op.elems] == [False, True]


def test_expr_accepts_literal():
    lit = IntLiteral(Base.DEC, "1")
    expr = Expr(ExprKind.LITERAL, lit, Span(0, 1))
    assert expr.value == lit


def test_expr_rejects_mismatched_value():
    with pytest.raises(TypeError):
        Expr(ExprKind.ID, StrLiteral("x"), Span(0, 3))


def test_type_rejects_mismatched_value():
    with pytest.raises(TypeError):
        Type(TypeKind.PRIM, Id("t"), Span(0, 1))
    assert Type(TypeKind.PRIM, PrimType.BOOL, Span(0, 4)).value is PrimType.BOOL


def test_range_loop_requires_parts():
    with pytest.raises(ValueError):
        For(ForKind.RANGE, Block([]))
    with pytest.raises(ValueError):
        For(ForKind.COND, Block([]))
    assert For(ForKind.ENDLESS, Block([])).cond is None
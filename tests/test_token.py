import pytest

from hakolang.token import (
    Base,
    BoolLiteral,
    CharLiteral,
    Ident,
    IntLiteral,
    Keyword,
    NoneLiteral,
    PrimType,
    Span,
    StrLiteral,
    Symbol,
    Token,
    to_bool_literal,
)


def test_span_default_is_zero():
    assert Span() == Span(0, 0)
    assert Span().end() == 0


def test_span_from_usize_keeps_small_values():
    span = Span.from_usize(5, 2)
    assert span == Span(5, 2)
    assert span.end() == span.begin + span.length


def test_span_from_usize_truncates_to_16_bits():
    span = Span.from_usize(65536 + 1, 65536 + 2)
    assert span == Span(1, 2)


def test_span_repr_shows_begin_and_end():
    assert repr(Span(3, 4)) == "3-7"


@pytest.mark.parametrize(
    "text, keyword",
    [
        ("elif", Keyword.ELIF),
        ("else", Keyword.ELSE),
        ("fn", Keyword.FN),
        ("for", Keyword.FOR),
        ("if", Keyword.IF),
        ("in", Keyword.IN),
        ("let", Keyword.LET),
        ("mut", Keyword.MUT),
        ("pub", Keyword.PUB),
        ("ref", Keyword.REF),
        ("ret", Keyword.RET),
        ("struct", Keyword.STRUCT),
        ("none", Keyword.NONE),
    ],
)
def test_keyword_from_str(text, keyword):
    assert Keyword.from_str(text) is keyword


@pytest.mark.parametrize("text", ["", "Fn", "bool", "true", "func"])
def test_keyword_from_str_rejects_non_keywords(text):
    assert Keyword.from_str(text) is None


@pytest.mark.parametrize(
    "text, prim",
    [
        ("bool", PrimType.BOOL),
        ("i8", PrimType.I8),
        ("i16", PrimType.I16),
        ("i32", PrimType.I32),
        ("i64", PrimType.I64),
        ("isize", PrimType.ISIZE),
        ("u8", PrimType.U8),
        ("u16", PrimType.U16),
        ("u32", PrimType.U32),
        ("u64", PrimType.U64),
        ("usize", PrimType.USIZE),
        ("f32", PrimType.F32),
        ("f64", PrimType.F64),
        ("char", PrimType.CHAR),
        ("str", PrimType.STR),
    ],
)
def test_prim_type_from_str(text, prim):
    assert PrimType.from_str(text) is prim


@pytest.mark.parametrize("text", ["none", "i128", "String", "fn", ""])
def test_prim_type_from_str_rejects_others(text):
    assert PrimType.from_str(text) is None


def test_to_bool_literal():
    assert to_bool_literal("true") is True
    assert to_bool_literal("false") is False
    assert to_bool_literal("True") is None


def test_tokens_compare_by_kind_and_span():
    a = Token(Ident("main"), Span(0, 4))
    b = Token(Ident("main"), Span(0, 4))
    assert a == b
    assert a != Token(Ident("main"), Span(1, 4))
    assert a != Token(Keyword.FN, Span(0, 4))


def test_literal_equality():
    assert IntLiteral(Base.DEC, "10") == IntLiteral(Base.DEC, "10", None)
    assert IntLiteral(Base.HEX, "10") != IntLiteral(Base.DEC, "10")
    assert IntLiteral(Base.DEC, "1", PrimType.U8).type is PrimType.U8
    assert CharLiteral("a") != StrLiteral("a")
    assert BoolLiteral(True) != BoolLiteral(False)
    assert NoneLiteral() == NoneLiteral()


def test_symbol_lookup_by_text():
    assert Symbol("::") is Symbol.DOUBLE_COLON
    assert Symbol("{") is Symbol.OPEN_CURLY_BRACKET
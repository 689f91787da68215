from hakolang.log import (
    CompilerErr,
    CompilerLog,
    CompilerWarn,
    DuplicateMarker,
    SyntaxErr,
    SyntaxErrorKind,
    TypeErr,
    TypeErrorKind,
    UnknownSysEmbedName,
)
from hakolang.token import Keyword, Span, Symbol


def test_syntax_err_wraps_kind_and_span():
    span = Span(2, 3)
    log = CompilerLog.syntax_err(SyntaxErrorKind.EXPECTED_EXPR, span)
    assert log.kind == SyntaxErr(SyntaxErrorKind.EXPECTED_EXPR)
    assert log.span == span
    assert log.is_error()


def test_syntax_err_carries_detail():
    log = CompilerLog.syntax_err(SyntaxErrorKind.EXPECTED_KEYWORD, Span(0, 1), Keyword.FN)
    assert log.kind.detail is Keyword.FN
    other = CompilerLog.syntax_err(SyntaxErrorKind.EXPECTED_KEYWORD, Span(0, 1), Keyword.LET)
    assert log != other


def test_syntax_err_with_token_kind_detail():
    log = CompilerLog.syntax_err(SyntaxErrorKind.EXPECTED_TOKEN, Span(4, 1), Symbol.SEMICOLON)
    assert log == CompilerLog.err(SyntaxErr(SyntaxErrorKind.EXPECTED_TOKEN, Symbol.SEMICOLON), Span(4, 1))


def test_type_err_with_arg_lengths():
    detail = {"expected": 2, "provided": 1}
    log = CompilerLog.type_err(TypeErrorKind.FN_CALL_WITH_INVALID_ARG_LEN, Span(0, 5), detail)
    assert isinstance(log.kind, TypeErr)
    assert log.kind.kind is TypeErrorKind.FN_CALL_WITH_INVALID_ARG_LEN
    assert log.kind.detail == detail
    assert log.is_error()


def test_err_with_named_error():
    log = CompilerLog.err(DuplicateMarker("spec"), Span(1, 4))
    assert log.kind == DuplicateMarker("spec")
    assert log.kind != UnknownSysEmbedName("spec")
    assert isinstance(log.kind, CompilerErr)


def test_warning_is_not_error():
    log = CompilerLog.warn(CompilerWarn(), Span())
    assert log.is_error() is False
    assert log.kind == CompilerWarn()


def test_syntax_and_type_errors_differ():
    span = Span(0, 0)
    assert CompilerLog.syntax_err(SyntaxErrorKind.UNEXPECTED_EOF, span) != CompilerLog.type_err(
        TypeErrorKind.MAIN_FN_IS_NOT_FOUND, span
    )
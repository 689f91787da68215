import pytest

from hakolang.lexer_log import LexerLog, LexerLogKind
from hakolang.log import CompilerLog, SyntaxErr, SyntaxErrorKind
from hakolang.token import Span


@pytest.mark.parametrize("kind", list(LexerLogKind))
def test_every_lexer_kind_converts_to_same_named_syntax_error(kind):
    span = Span(3, 2)
    log = LexerLog(kind, span).to_compiler_log()
    assert isinstance(log.kind, SyntaxErr)
    assert log.kind.kind.name == kind.name
    assert log.span == span
    assert log.is_error()


def test_unknown_escseq_conversion():
    log = LexerLog(LexerLogKind.UNKNOWN_ESCSEQ, Span(1, 2)).to_compiler_log()
    assert log == CompilerLog.syntax_err(SyntaxErrorKind.UNKNOWN_ESCSEQ, Span(1, 2))


def test_unclosed_str_conversion_has_no_detail():
    log = LexerLog(LexerLogKind.UNCLOSED_STR_LITERAL, Span(0, 4)).to_compiler_log()
    assert log.kind.detail is None
    assert log.kind.kind is SyntaxErrorKind.UNCLOSED_STR_LITERAL


def test_lexer_logs_compare_by_value():
    a = LexerLog(LexerLogKind.EMPTY_CHAR_LITERAL, Span(0, 2))
    assert a == LexerLog(LexerLogKind.EMPTY_CHAR_LITERAL, Span(0, 2))
    assert a != LexerLog(LexerLogKind.TOO_LONG_CHAR_LITERAL, Span(0, 2))


def test_distinct_kinds_map_to_distinct_errors():
    converted = {LexerLog(kind, Span()).to_compiler_log().kind.kind for kind in LexerLogKind}
    assert len(converted) == len(LexerLogKind)
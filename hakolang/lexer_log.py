"""Diagnostics recorded by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from hakolang.log import CompilerLog, SyntaxErrorKind
from hakolang.token import Span


class LexerLogKind(Enum):
    """Problems the lexer can find."""

    EMPTY_CHAR_LITERAL = auto()
    EXPECTED_DECIMAL_FLOAT = auto()
    EXPECTED_TYPE_SUFFIX = auto()
    LINE_BREAK_IN_CHAR_LITERAL = auto()
    LINE_BREAK_IN_STR_LITERAL = auto()
    TOO_LONG_CHAR_LITERAL = auto()
    UNCLOSED_CHAR_LITERAL = auto()
    UNCLOSED_STR_LITERAL = auto()
    UNKNOWN_ESCSEQ = auto()


@dataclass(frozen=True)
class LexerLog:
    """A lexer diagnostic at a span."""

    kind: LexerLogKind
    span: Span

    def to_compiler_log(self) -> CompilerLog:
        """Convert to the matching syntax error."""
        return CompilerLog.syntax_err(SyntaxErrorKind[self.kind.name], self.span)
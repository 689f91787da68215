"""Diagnostics reported by the compiler stages."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Union

from hakolang.token import Span


class SyntaxErrorKind(Enum):
    """Kinds of syntax error, from lexing, parsing and lowering."""

    # lexer
    EMPTY_CHAR_LITERAL = auto()
    EXPECTED_DECIMAL_FLOAT = auto()
    EXPECTED_TYPE_SUFFIX = auto()
    LINE_BREAK_IN_CHAR_LITERAL = auto()
    LINE_BREAK_IN_STR_LITERAL = auto()
    TOO_LONG_CHAR_LITERAL = auto()
    UNCLOSED_CHAR_LITERAL = auto()
    UNCLOSED_STR_LITERAL = auto()
    UNKNOWN_ESCSEQ = auto()

    # parser
    EXPECTED_ACTUAL_ARG = auto()
    EXPECTED_EXPR = auto()
    EXPECTED_FORMAL_ARG = auto()
    EXPECTED_ID = auto()
    EXPECTED_ITEM = auto()
    EXPECTED_KEYWORD = auto()
    EXPECTED_STR_LITERAL = auto()
    EXPECTED_TOKEN = auto()
    EXPECTED_TYPE = auto()
    MARKER_CANNOT_TREAT_AS_EXPR = auto()
    MARKER_CANNOT_TREAT_AS_ITEM_DESCRIPTOR = auto()
    UNEXPECTED_EOF = auto()
    UNKNOWN_MARKER_NAME = auto()

    # lowering
    EXPECTED_EXPR_BUT_FOUND_HAKO = auto()
    EXPECTED_EXPR_BUT_FOUND_MOD = auto()


class TypeErrorKind(Enum):
    """Kinds of type error."""

    EXPECTED_MAIN_FN_ARGS_TO_BE_ZERO_LEN = auto()
    EXPECTED_MAIN_FN_RET_TYPE_TO_BE_NONE = auto()
    FN_CALL_WITH_INVALID_ARG_LEN = auto()
    INCONSISTENT_CONSTRAINT = auto()
    MAIN_FN_IS_NOT_FOUND = auto()
    UNKNOWN_TYPE = auto()


@dataclass(frozen=True)
class CompilerErr:
    """Base of every compiler error."""


@dataclass(frozen=True)
class SyntaxErr(CompilerErr):
    """A syntax error; ``detail`` holds the keyword, token kind, name or id it concerns."""

    kind: SyntaxErrorKind
    detail: Any = None


@dataclass(frozen=True)
class TypeErr(CompilerErr):
    """A type error; ``detail`` holds extra data such as argument counts or a type id."""

    kind: TypeErrorKind
    detail: Any = None


@dataclass(frozen=True)
class DuplicateItemName(CompilerErr):
    id: Any


@dataclass(frozen=True)
class DuplicateMarker(CompilerErr):
    name: str


@dataclass(frozen=True)
class GlobalIdIsNotFound(CompilerErr):
    global_id: Any


@dataclass(frozen=True)
class PathIsNotFoundInScope(CompilerErr):
    path: Any


@dataclass(frozen=True)
class IdIsNotFoundInScope(CompilerErr):
    id: Any


@dataclass(frozen=True)
class UnknownSysEmbedName(CompilerErr):
    name: str


@dataclass(frozen=True)
class UnnecessaryPath(CompilerErr):
    path: Any


@dataclass(frozen=True)
class CompilerWarn:
    """Base of every compiler warning."""


@dataclass(frozen=True)
class CompilerLog:
    """A single diagnostic: an error or a warning at a span."""

    kind: Union[CompilerErr, CompilerWarn]
    span: Span

    @classmethod
    def warn(cls, warn: CompilerWarn, span: Span) -> CompilerLog:
        return cls(warn, span)

    @classmethod
    def err(cls, err: CompilerErr, span: Span) -> CompilerLog:
        return cls(err, span)

    @classmethod
    def syntax_err(cls, kind: SyntaxErrorKind, span: Span, detail: Any = None) -> CompilerLog:
        return cls(SyntaxErr(kind, detail), span)

    @classmethod
    def type_err(cls, kind: TypeErrorKind, span: Span, detail: Any = None) -> CompilerLog:
        return cls(TypeErr(kind, detail), span)

    def is_error(self) -> bool:
        """True when this log is an error rather than a warning."""
        return isinstance(self.kind, CompilerErr)
"""Tokens produced by the lexer: spans, keywords, primitive types and literals."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

_U16_MASK = 0xFFFF


@dataclass(frozen=True)
class Span:
    """A region of the source text, given as a start offset and a length."""

    begin: int = 0
    length: int = 0

    @classmethod
    def from_usize(cls, begin: int, length: int) -> Span:
        """Build a span, truncating both values to 16 bits."""
        return cls(begin & _U16_MASK, length & _U16_MASK)

    def end(self) -> int:
        """Offset just past the last character of the span."""
        return self.begin + self.length

    def __repr__(self) -> str:
        return f"{self.begin}-{self.end()}"


class Symbol(Enum):
    """Punctuation tokens and the catch-all for unrecognised characters."""

    ASTERISK = "*"
    AT = "@"
    CLOSING_CURLY_BRACKET = "}"
    CLOSING_PAREN = ")"
    COLON = ":"
    COMMA = ","
    DOT = "."
    DOUBLE_COLON = "::"
    EQUAL = "="
    EXCLAMATION = "!"
    MINUS = "-"
    OPEN_CURLY_BRACKET = "{"
    OPEN_PAREN = "("
    PLUS = "+"
    SEMICOLON = ";"
    SLASH = "/"
    UNKNOWN = "unknown"


class Keyword(Enum):
    """Reserved words of the language."""

    ELIF = "elif"
    ELSE = "else"
    FN = "fn"
    FOR = "for"
    IF = "if"
    IN = "in"
    LET = "let"
    MUT = "mut"
    PUB = "pub"
    REF = "ref"
    RET = "ret"
    STRUCT = "struct"
    # Lexed as a keyword; the parser turns it into a type or a literal.
    NONE = "none"

    @classmethod
    def from_str(cls, s: str) -> Optional[Keyword]:
        """Return the keyword spelled ``s``, or None."""
        try:
            return cls(s)
        except ValueError:
            return None


class PrimType(Enum):
    """Built-in primitive types."""

    BOOL = "bool"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    F32 = "f32"
    F64 = "f64"
    CHAR = "char"
    STR = "str"
    NONE = "none"

    @classmethod
    def from_str(cls, s: str) -> Optional[PrimType]:
        """Return the primitive type spelled ``s``, or None.

        ``none`` is a keyword in source text and is not recognised here.
        """
        if s == cls.NONE.value:
            return None
        try:
            return cls(s)
        except ValueError:
            return None


class Base(Enum):
    """Radix of an integer literal."""

    BIN = 2
    OCT = 8
    DEC = 10
    HEX = 16


@dataclass(frozen=True)
class Ident:
    """An identifier token."""

    name: str


@dataclass(frozen=True)
class FloatDigits:
    """Integer and fractional digits of a decimal float literal."""

    int: str
    fraction: str


@dataclass(frozen=True)
class NoneLiteral:
    """The ``none`` literal."""


@dataclass(frozen=True)
class BoolLiteral:
    value: bool


@dataclass(frozen=True)
class IntLiteral:
    base: Base
    int_digits: str
    type: Optional[PrimType] = None


@dataclass(frozen=True)
class FloatLiteral:
    digits: Optional[FloatDigits]
    type: Optional[PrimType] = None


@dataclass(frozen=True)
class CharLiteral:
    value: Optional[str]


@dataclass(frozen=True)
class StrLiteral:
    value: str


@dataclass(frozen=True)
class ByteCharLiteral:
    value: Optional[str]


@dataclass(frozen=True)
class ByteStrLiteral:
    value: str


Literal = Union[
    NoneLiteral,
    BoolLiteral,
    IntLiteral,
    FloatLiteral,
    CharLiteral,
    StrLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
]

TokenKind = Union[Ident, Keyword, PrimType, Literal, Symbol]


@dataclass(frozen=True)
class Token:
    """A lexed token with its location."""

    kind: TokenKind
    span: Span


def to_bool_literal(s: str) -> Optional[bool]:
    """Return the boolean spelled ``s`` (``true``/``false``), or None."""
    if s == "true":
        return True
    if s == "false":
        return False
    return None
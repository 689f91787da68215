"""Turns source text into tokens, recording problems as lexer logs."""

from __future__ import annotations

import string
from typing import List, Optional, Tuple

from hakolang.lexer_log import LexerLog, LexerLogKind
from hakolang.token import (
    Base,
    BoolLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
    CharLiteral,
    FloatDigits,
    FloatLiteral,
    Ident,
    IntLiteral,
    Keyword,
    PrimType,
    Span,
    StrLiteral,
    Symbol,
    Token,
    TokenKind,
    to_bool_literal,
)

_ALPHA = frozenset(string.ascii_letters)
_ID_START = _ALPHA | {"_"}
_ID_CHARS = _ALPHA | frozenset(string.digits) | {"_"}
_NUMBER_CHARS = frozenset(string.digits + "abcdefABCDEF_")
_BASE_PREFIXES = {"b": Base.BIN, "o": Base.OCT, "x": Base.HEX}
_WHITESPACE = frozenset(" \r\t")

_SINGLE_SYMBOLS = {
    "*": Symbol.ASTERISK,
    "@": Symbol.AT,
    "}": Symbol.CLOSING_CURLY_BRACKET,
    ")": Symbol.CLOSING_PAREN,
    ",": Symbol.COMMA,
    ".": Symbol.DOT,
    "=": Symbol.EQUAL,
    "!": Symbol.EXCLAMATION,
    "-": Symbol.MINUS,
    "{": Symbol.OPEN_CURLY_BRACKET,
    "(": Symbol.OPEN_PAREN,
    "+": Symbol.PLUS,
    ";": Symbol.SEMICOLON,
    "/": Symbol.SLASH,
}

_ESCAPES = {
    "\\": "\\",
    "'": "'",
    '"': '"',
    "0": "\0",
    "r": "\r",
    "t": "\t",
    "n": "\n",
}

_UNKNOWN = object()

Lexed = Tuple[int, TokenKind]


class _Input:
    """Character cursor yielding (index, char) pairs with one-item lookahead."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0

    def peek(self) -> Optional[Tuple[int, str]]:
        if self._pos >= len(self._source):
            return None
        return self._pos, self._source[self._pos]

    def next(self) -> Optional[Tuple[int, str]]:
        item = self.peek()
        if item is not None:
            self._pos += 1
        return item

    def peek_char(self) -> Optional[str]:
        item = self.peek()
        return None if item is None else item[1]


class Lexer:
    """Splits source text into tokens and collects diagnostics."""

    def __init__(self) -> None:
        self.logs: List[LexerLog] = []
        self.newline_indexes: List[int] = []

    def record_log(self, log: LexerLog) -> None:
        self.logs.append(log)

    def _log(self, kind: LexerLogKind, begin: int, length: int) -> None:
        self.record_log(LexerLog(kind, Span.from_usize(begin, length)))

    def add_newline_index(self, index: int) -> None:
        self.newline_indexes.append(index & 0xFFFF)

    def tokenize(self, source: str) -> Tuple[List[Token], List[LexerLog]]:
        """Tokenize ``source``, returning the tokens and the logs recorded."""
        inp = _Input(source)
        tokens: List[Token] = []
        pending_unknown: Optional[Span] = None

        while True:
            item = inp.next()
            if item is None:
                break
            index, ch = item
            result = self._lex_one(inp, index, ch)

            if result is _UNKNOWN:
                # Runs of unrecognised characters become a single token.
                if pending_unknown is None:
                    pending_unknown = Span.from_usize(index, 1)
                else:
                    pending_unknown = Span.from_usize(
                        pending_unknown.begin, pending_unknown.length + 1
                    )
                if inp.peek() is None:
                    tokens.append(Token(Symbol.UNKNOWN, pending_unknown))
                    pending_unknown = None
                continue

            if pending_unknown is not None:
                tokens.append(Token(Symbol.UNKNOWN, pending_unknown))
                pending_unknown = None
            if result is not None:
                length, kind = result
                tokens.append(Token(kind, Span.from_usize(index, length)))

        return tokens, list(self.logs)

    def _lex_one(self, inp: _Input, index: int, ch: str):
        if ch in _WHITESPACE:
            return None
        if ch == "\n":
            self.add_newline_index(index)
            return None
        if ch == "'":
            return self._lex_quoted(inp, index, 1, is_char=True)
        if ch == '"':
            return self._lex_quoted(inp, index, 1, is_char=False)
        if ch == "b":
            nxt = inp.peek_char()
            if nxt == "'":
                inp.next()
                return self._lex_quoted(inp, index, 2, is_char=True, is_byte=True)
            if nxt == '"':
                inp.next()
                return self._lex_quoted(inp, index, 2, is_char=False, is_byte=True)
            if nxt == "r":
                inp.next()
                if inp.peek_char() == '"':
                    inp.next()
                    return self._lex_quoted(
                        inp, index, 3, is_char=False, is_raw=True, is_byte=True
                    )
                return self._lex_word(inp, "br")
            return self._lex_word(inp, "b")
        if ch == "r":
            if inp.peek_char() == '"':
                inp.next()
                return self._lex_quoted(inp, index, 2, is_char=False, is_raw=True)
            return self._lex_word(inp, ch)
        if ch in _ID_START:
            return self._lex_word(inp, ch)
        if ch in string.digits:
            return self._lex_number(inp, index, ch)
        if ch == ":":
            if inp.peek_char() == ":":
                inp.next()
                return 2, Symbol.DOUBLE_COLON
            return 1, Symbol.COLON
        symbol = _SINGLE_SYMBOLS.get(ch)
        if symbol is not None:
            return 1, symbol
        return _UNKNOWN

    @staticmethod
    def _consume_word(inp: _Input, initial: str) -> str:
        chars = [initial]
        while inp.peek_char() in _ID_CHARS:
            chars.append(inp.next()[1])
        return "".join(chars)

    @classmethod
    def _lex_word(cls, inp: _Input, initial: str) -> Lexed:
        word = cls._consume_word(inp, initial)
        length = len(word)
        value = to_bool_literal(word)
        if value is not None:
            return length, BoolLiteral(value)
        keyword = Keyword.from_str(word)
        if keyword is not None:
            return length, keyword
        prim_type = PrimType.from_str(word)
        if prim_type is not None:
            return length, prim_type
        return length, Ident(word)

    def _lex_number(self, inp: _Input, index: int, first: str) -> Lexed:
        int_digits: List[str] = []
        fraction_digits: List[str] = []
        is_float = False
        last_index = index
        base = Base.DEC

        prefix = _BASE_PREFIXES.get(inp.peek_char()) if first == "0" else None
        if prefix is not None:
            last_index = inp.next()[0]
            base = prefix
        else:
            int_digits.append(first)

        while True:
            item = inp.peek()
            if item is None:
                break
            i, c = item
            if c in _NUMBER_CHARS:
                (fraction_digits if is_float else int_digits).append(c)
                last_index = i
            elif c == "." and not is_float:
                is_float = True
                last_index = i
            else:
                break
            inp.next()

        prim_type: Optional[PrimType] = None
        bad_suffix = False
        if inp.peek_char() in _ALPHA:
            suffix = self._consume_word(inp, "")
            last_index += len(suffix)
            prim_type = PrimType.from_str(suffix)
            bad_suffix = prim_type is None

        length = last_index - index + 1
        if bad_suffix:
            self._log(LexerLogKind.EXPECTED_TYPE_SUFFIX, index, length)

        if is_float:
            digits: Optional[FloatDigits] = None
            if base is Base.DEC:
                digits = FloatDigits("".join(int_digits), "".join(fraction_digits))
            else:
                self._log(LexerLogKind.EXPECTED_DECIMAL_FLOAT, index, length)
            return length, FloatLiteral(digits, prim_type)
        return length, IntLiteral(base, "".join(int_digits), prim_type)

    def _skip_to_closing_quote(self, inp: _Input, quote: str) -> None:
        while True:
            item = inp.next()
            if item is None or item[1] == quote:
                return
            if item[1] == "\n":
                self.add_newline_index(item[0])

    def _lex_quoted(
        self,
        inp: _Input,
        begin: int,
        length: int,
        *,
        is_char: bool,
        is_raw: bool = False,
        is_byte: bool = False,
    ) -> Lexed:
        closing = "'" if is_char else '"'
        value: List[str] = []

        while True:
            item = inp.next()
            if item is None:
                kind = (
                    LexerLogKind.UNCLOSED_CHAR_LITERAL
                    if is_char
                    else LexerLogKind.UNCLOSED_STR_LITERAL
                )
                self._log(kind, begin, length)
                break
            index, ch = item
            if ch == closing:
                length += 1
                break
            if ch in "'\"":
                length += 1
                value.append(ch)
            elif ch == "\\":
                length += 1
                if is_raw:
                    value.append("\\")
                    continue
                nxt = inp.peek_char()
                # A line break or the end of input is reported on the next pass.
                if nxt is None or nxt == "\n":
                    continue
                inp.next()
                length += 1
                escaped = _ESCAPES.get(nxt)
                if escaped is None:
                    self._log(LexerLogKind.UNKNOWN_ESCSEQ, index, 2)
                else:
                    value.append(escaped)
            elif ch == "\n":
                self.add_newline_index(index)
                kind = (
                    LexerLogKind.LINE_BREAK_IN_CHAR_LITERAL
                    if is_char
                    else LexerLogKind.LINE_BREAK_IN_STR_LITERAL
                )
                self._log(kind, begin, length)
                self._skip_to_closing_quote(inp, closing)
                break
            else:
                length += 1
                value.append(ch)

        text = "".join(value)
        if not is_char:
            return length, (ByteStrLiteral(text) if is_byte else StrLiteral(text))

        char: Optional[str] = None
        if len(text) == 1:
            char = text
        elif text:
            self._log(LexerLogKind.TOO_LONG_CHAR_LITERAL, begin, length)
        else:
            self._log(LexerLogKind.EMPTY_CHAR_LITERAL, begin, length)
        return length, (ByteCharLiteral(char) if is_byte else CharLiteral(char))


def tokenize(source: str) -> Tuple[List[Token], List[LexerLog]]:
    """Tokenize ``source`` with a fresh lexer."""
    return Lexer().tokenize(source)
"""Recursive-descent parser that builds the syntax tree from tokens."""

from __future__ import annotations

import itertools
from enum import Enum, auto
from typing import Any, Callable, Iterable, Iterator, List, Optional, Tuple, Union

from hakolang.ast import (
    Accessibility,
    ActualArg,
    Ast,
    Block,
    Body,
    BodyId,
    Elif,
    Expr,
    ExprKind,
    FnCall,
    FnDecl,
    For,
    ForKind,
    FormalArg,
    HakoId,
    Id,
    If,
    Item,
    ItemId,
    Marker,
    MarkerKind,
    ModId,
    Operation,
    OperationElem,
    Operator,
    Path,
    RefMut,
    Ret,
    Type,
    TypeKind,
    VarBind,
    VarDef,
)
from hakolang.lexer import tokenize
from hakolang.lexer_log import LexerLog
from hakolang.token import (
    BoolLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
    CharLiteral,
    FloatLiteral,
    Ident,
    IntLiteral,
    Keyword,
    NoneLiteral,
    PrimType,
    Span,
    StrLiteral,
    Symbol,
    Token,
)

_LITERALS = (
    BoolLiteral,
    IntLiteral,
    FloatLiteral,
    CharLiteral,
    StrLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
)


class ParserLogKind(Enum):
    """Problems the parser can find."""

    DUPLICATE_ITEM_NAME = auto()
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


class ParserError(Exception):
    """A parser diagnostic; raised while parsing and kept in the parser's logs.

    ``detail`` holds the expected token kind or keyword, the duplicate id or
    the marker name, depending on ``kind``.
    """

    def __init__(self, kind: ParserLogKind, span: Span, detail: Any = None) -> None:
        super().__init__(kind, span, detail)
        self.kind = kind
        self.span = span
        self.detail = detail

    def _key(self) -> Tuple[Any, ...]:
        return (self.kind, self.span, self.detail)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParserError):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"ParserError({self.kind.name}, {self.span!r}, {self.detail!r})"


class ParserHakoContext:
    """Item names declared in a hako and the ids handed out for them."""

    def __init__(self, hako_id: HakoId) -> None:
        self.hako_id = hako_id
        self.declared_names: List[str] = []
        self._next_item_id = 0

    def declare(self, id: Id) -> ItemId:
        """Declare an item name, returning a fresh id; duplicates raise."""
        if id.id in self.declared_names:
            raise ParserError(ParserLogKind.DUPLICATE_ITEM_NAME, id.span, id)
        self.declared_names.append(id.id)
        item_id = ItemId(int(self.hako_id), self._next_item_id)
        self._next_item_id += 1
        return item_id


_Operand = Union[Expr, Tuple[List[OperationElem], Span]]


class Parser:
    """Parses one module's tokens into an :class:`Ast`."""

    def __init__(
        self,
        tokens: Iterable[Token],
        hako_context: ParserHakoContext,
        body_ids: Optional[Iterable[int]] = None,
    ) -> None:
        self._tokens: List[Token] = list(tokens)
        self._pos = 0
        self.hako_context = hako_context
        self._body_ids: Iterator[int] = iter(
            body_ids if body_ids is not None else itertools.count()
        )
        self._last_token_span = self._tokens[-1].span if self._tokens else Span()
        self.logs: List[ParserError] = []

    # -- token cursor -------------------------------------------------------

    def next_span(self) -> Span:
        token = self.peek()
        return token.span if token is not None else self._last_token_span

    def is_eof(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> Optional[Token]:
        return None if self.is_eof() else self._tokens[self._pos]

    def _advance(self) -> Optional[Token]:
        token = self.peek()
        if token is not None:
            self._pos += 1
        return token

    def _next_is(self, kind: Any) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind

    def _next_id(self) -> Optional[Id]:
        token = self.peek()
        if token is not None and isinstance(token.kind, Ident):
            return Id(token.kind.name, token.span)
        return None

    def consume(self, kind: Any) -> Optional[Token]:
        """Take the next token if it has ``kind``."""
        return self._advance() if self._next_is(kind) else None

    def consume_keyword(self, keyword: Keyword) -> Optional[Token]:
        return self.consume(keyword)

    def _consume_until(self, stop: Callable[[Token], bool]) -> None:
        while (token := self._advance()) is not None:
            if stop(token):
                break

    def _consume_until_before(self, stop: Callable[[Token], bool]) -> None:
        while (token := self.peek()) is not None and not stop(token):
            self._pos += 1

    def _consume_ref_mut(self) -> RefMut:
        if self.consume_keyword(Keyword.REF) is not None:
            return RefMut.REF
        if self.consume_keyword(Keyword.MUT) is not None:
            return RefMut.MUT
        return RefMut.NONE

    def expect(self, kind: Any) -> None:
        token = self.peek()
        if token is None:
            raise ParserError(ParserLogKind.EXPECTED_TOKEN, self._last_token_span, kind)
        if token.kind != kind:
            raise ParserError(ParserLogKind.EXPECTED_TOKEN, token.span, kind)
        self._pos += 1

    def expect_any(self) -> Token:
        token = self._advance()
        if token is None:
            raise ParserError(ParserLogKind.UNEXPECTED_EOF, self._last_token_span)
        return token

    def expect_id(self) -> Id:
        token = self.peek()
        if token is None:
            raise ParserError(ParserLogKind.EXPECTED_ID, self._last_token_span)
        if not isinstance(token.kind, Ident):
            raise ParserError(ParserLogKind.EXPECTED_ID, token.span)
        self._pos += 1
        return Id(token.kind.name, token.span)

    def expect_keyword(self, keyword: Keyword) -> None:
        token = self.peek()
        if token is None:
            raise ParserError(ParserLogKind.EXPECTED_KEYWORD, self._last_token_span, keyword)
        if token.kind is not keyword:
            raise ParserError(ParserLogKind.EXPECTED_KEYWORD, token.span, keyword)
        self._pos += 1

    def expect_str_literal(self) -> str:
        expr = self._parse_primary()
        if expr.kind is ExprKind.LITERAL and isinstance(expr.value, StrLiteral):
            return expr.value.value
        raise ParserError(ParserLogKind.EXPECTED_STR_LITERAL, expr.span)

    def record_log(self, log: ParserError) -> None:
        self.logs.append(log)

    # -- items --------------------------------------------------------------

    def parse(self, mod_id: ModId, mod_path: Path) -> Tuple[Ast, List[ParserError]]:
        """Parse every item, returning the tree and the logs recorded."""
        items = self.parse_items()
        return Ast(mod_id, mod_path, items), list(self.logs)

    def parse_items(self) -> List[Item]:
        items: List[Item] = []
        while not self.is_eof():
            try:
                items.append(self.parse_single_item())
            except ParserError as log:
                self.record_log(log)
                # Leave the broken item behind.
                self._consume_until(lambda t: t.kind is Symbol.CLOSING_CURLY_BRACKET)
        return items

    def parse_single_item(self) -> Item:
        markers = self.parse_item_markers()
        beginning_span = self.next_span()
        accessibility = (
            Accessibility.PUB
            if self.consume_keyword(Keyword.PUB) is not None
            else Accessibility.DEFAULT
        )
        if self.consume_keyword(Keyword.FN) is None:
            raise ParserError(ParserLogKind.EXPECTED_ITEM, beginning_span)
        name = self.expect_id()
        item_id = self.hako_context.declare(name)
        args = self.parse_formal_args()
        ret_type = None if self._next_is(Symbol.OPEN_CURLY_BRACKET) else self.parse_type()
        body = self.parse_body(ret_type, args)
        return Item(item_id, name, markers, accessibility, FnDecl(body))

    def parse_item_markers(self) -> List[Marker]:
        markers: List[Marker] = []
        while self._next_is(Symbol.AT):
            markers.append(self.parse_marker(False))
        return markers

    def parse_marker(self, is_expr: bool) -> Marker:
        self.expect(Symbol.AT)
        name = self.expect_id()
        span = name.span

        def reject_in_expr() -> None:
            if is_expr:
                raise ParserError(ParserLogKind.MARKER_CANNOT_TREAT_AS_EXPR, span, name.id)

        if name.id == "sysembed":
            embed_name = self.expect_id()
            reject_in_expr()
            return Marker(MarkerKind.SYS_EMBED, span, name=embed_name.id)
        if name.id == "spec":
            description = self.expect_str_literal()
            reject_in_expr()
            return Marker(MarkerKind.SPEC, span, description=description)
        if name.id == "arg":
            arg_name = self.expect_id()
            description = self.expect_str_literal()
            reject_in_expr()
            return Marker(MarkerKind.ARG, span, name=arg_name.id, description=description)
        if name.id == "retval":
            description = self.expect_str_literal()
            reject_in_expr()
            return Marker(MarkerKind.RET_VAL, span, description=description)
        if name.id == "todo":
            return Marker(MarkerKind.TODO, span, description=self.expect_str_literal())
        if name.id == "exit":
            if not is_expr:
                raise ParserError(
                    ParserLogKind.MARKER_CANNOT_TREAT_AS_ITEM_DESCRIPTOR, span, name.id
                )
            return Marker(MarkerKind.EXIT, span)
        raise ParserError(ParserLogKind.UNKNOWN_MARKER_NAME, span)

    def _parse_arg_list(self, missing: ParserLogKind, parse_one: Callable[[], Any]) -> list:
        self.expect(Symbol.OPEN_PAREN)
        args: list = []
        allow_next_arg = True
        while not self.is_eof():
            if self.consume(Symbol.CLOSING_PAREN) is not None:
                break
            comma = self.consume(Symbol.COMMA)
            if comma is not None:
                self.record_log(ParserError(missing, comma.span))
            if not allow_next_arg:
                self.record_log(ParserError(missing, self.next_span()))
                self._consume_until(lambda t: t.kind is Symbol.CLOSING_PAREN)
                break
            args.append(parse_one())
            allow_next_arg = self.consume(Symbol.COMMA) is not None
        return args

    def parse_formal_args(self) -> List[FormalArg]:
        def parse_one() -> FormalArg:
            id = self.expect_id()
            ref_mut = self._consume_ref_mut()
            return FormalArg(id, ref_mut, self.parse_type())

        return self._parse_arg_list(ParserLogKind.EXPECTED_FORMAL_ARG, parse_one)

    def parse_actual_args(self) -> List[ActualArg]:
        def parse_one() -> ActualArg:
            ref_mut = self._consume_ref_mut()
            return ActualArg(ref_mut, self.parse_expr())

        return self._parse_arg_list(ParserLogKind.EXPECTED_ACTUAL_ARG, parse_one)

    def _parse_body_or_block(self) -> List[Expr]:
        self.expect(Symbol.OPEN_CURLY_BRACKET)
        exprs: List[Expr] = []
        while not self.is_eof():
            if self.consume(Symbol.CLOSING_CURLY_BRACKET) is not None:
                break
            try:
                expr = self.parse_expr()
            except ParserError:
                self._consume_until_before(
                    lambda t: t.kind in (Symbol.SEMICOLON, Symbol.CLOSING_CURLY_BRACKET)
                )
                raise
            try:
                self.expect(Symbol.SEMICOLON)
            except ParserError as log:
                self.record_log(log)
            exprs.append(expr)
        return exprs

    def parse_body(self, ret_type: Optional[Type], args: List[FormalArg]) -> Body:
        exprs = self._parse_body_or_block()
        body_id = BodyId(next(self._body_ids))
        return Body(body_id, ret_type, args, exprs)

    def parse_block(self) -> Block:
        return Block(self._parse_body_or_block())

    def parse_type(self) -> Type:
        token = self.expect_any()
        kind = token.kind
        if isinstance(kind, Ident):
            return Type(TypeKind.ID, Id(kind.name, token.span), token.span)
        if kind is Keyword.NONE:
            return Type(TypeKind.PRIM, PrimType.NONE, token.span)
        if isinstance(kind, PrimType):
            return Type(TypeKind.PRIM, kind, token.span)
        raise ParserError(ParserLogKind.EXPECTED_TYPE, token.span)

    # -- expressions --------------------------------------------------------

    def parse_expr(self) -> Expr:
        """Parse an expression, including operations with infix operators."""
        first = self._parse_operand()
        if isinstance(first, Expr):
            return first
        elems, span = first
        op_stack = []

        while (op := self._consume_operator(Operator.to_infix_operator)) is not None:
            # Emit at most two pending operators that bind at least as tightly.
            for _ in range(2):
                if op_stack and op.precedence() <= op_stack[-1].precedence():
                    elems.append(OperationElem(Operator(op_stack.pop())))
                else:
                    break
            op_stack.append(op)
            operand = self._parse_operand()
            if isinstance(operand, Expr):
                elems.append(OperationElem(operand))
            else:
                elems.extend(operand[0])

        elems.extend(OperationElem(Operator(op)) for op in reversed(op_stack))
        return Expr(ExprKind.OPERATION, Operation(elems), span)

    def _parse_operand(self) -> _Operand:
        prefix_op = self._consume_operator(Operator.to_prefix_operator)
        expr = self._parse_primary()
        postfix_op = self._consume_operator(Operator.to_postfix_operator)
        token = self.peek()
        has_infix = token is not None and Operator.to_infix_operator(token) is not None
        if prefix_op is None and postfix_op is None and not has_infix:
            return expr
        elems = [OperationElem(expr)]
        if postfix_op is not None:
            elems.append(OperationElem(Operator(postfix_op)))
        if prefix_op is not None:
            elems.append(OperationElem(Operator(prefix_op)))
        return elems, expr.span

    def _consume_operator(self, lookup: Callable[[Token], Any]) -> Any:
        token = self.peek()
        if token is None:
            return None
        op = lookup(token)
        if op is not None:
            self._pos += 1
        return op

    def _next_literal(self):
        token = self.peek()
        if token is None:
            return None
        if token.kind is Keyword.NONE:
            return NoneLiteral()
        if isinstance(token.kind, _LITERALS):
            return token.kind
        return None

    def _parse_primary(self) -> Expr:
        beginning_span = self.next_span()
        if self._next_id() is not None:
            bind = self.parse_var_bind()
            if bind is not None:
                return Expr(ExprKind.VAR_BIND, bind, bind.id.span)
            segments = self.parse_id_segments()
            if self._next_is(Symbol.OPEN_PAREN):
                call = FnCall(Path.from_segments(segments), self.parse_actual_args())
                return Expr(ExprKind.FN_CALL, call, beginning_span)
            if len(segments) == 1:
                return Expr(ExprKind.ID, Id(segments[0], beginning_span), beginning_span)
            return Expr(ExprKind.PATH, Path.from_segments(segments), beginning_span)
        if self._next_is(Keyword.RET):
            return Expr(ExprKind.RET, self.parse_ret(), beginning_span)
        if self._next_is(Keyword.LET):
            var_def = self.parse_var_def()
            return Expr(ExprKind.VAR_DEF, var_def, var_def.id.span)
        if self._next_is(Keyword.IF):
            return Expr(ExprKind.IF, self.parse_if(), beginning_span)
        if self._next_is(Keyword.FOR):
            return Expr(ExprKind.FOR, self.parse_for(), beginning_span)
        literal = self._next_literal()
        if literal is not None:
            self.expect_any()
            return Expr(ExprKind.LITERAL, literal, beginning_span)
        if self._next_is(Symbol.AT):
            marker = self.parse_marker(True)
            return Expr(ExprKind.MARKER, marker, marker.span)
        if self._next_is(Symbol.OPEN_CURLY_BRACKET):
            return Expr(ExprKind.BLOCK, self.parse_block(), beginning_span)
        raise ParserError(ParserLogKind.EXPECTED_EXPR, beginning_span)

    def parse_id_segments(self) -> List[str]:
        """Parse ``a`` or ``a::b::...`` into its segments."""
        segments = [self.expect_id().id]
        while self.consume(Symbol.DOUBLE_COLON) is not None:
            segments.append(self.expect_id().id)
        return segments

    def parse_ret(self) -> Ret:
        self.expect_keyword(Keyword.RET)
        return Ret(self.parse_expr())

    def parse_var_def(self) -> VarDef:
        self.expect_keyword(Keyword.LET)
        ref_mut = self._consume_ref_mut()
        id = self.expect_id()
        if self._next_is(Symbol.SEMICOLON):
            return VarDef(id, ref_mut)
        if self.consume(Symbol.EQUAL) is not None:
            return VarDef(id, ref_mut, init=self.parse_expr())
        var_type = self.parse_type()
        if self._next_is(Symbol.SEMICOLON):
            return VarDef(id, ref_mut, type=var_type)
        if self.consume(Symbol.EQUAL) is not None:
            return VarDef(id, ref_mut, type=var_type, init=self.parse_expr())
        raise ParserError(ParserLogKind.EXPECTED_TOKEN, self.next_span(), Symbol.SEMICOLON)

    def parse_var_bind(self) -> Optional[VarBind]:
        """Parse ``id = value``; leaves the cursor untouched when it is not one."""
        saved = self._pos
        id = self._next_id()
        if id is None:
            return None
        self.expect_any()
        if self.consume(Symbol.EQUAL) is None:
            self._pos = saved
            return None
        return VarBind(id, self.parse_expr())

    def parse_if(self) -> If:
        self.expect_keyword(Keyword.IF)
        cond = self.parse_expr()
        block = self.parse_block()
        elifs: List[Elif] = []
        while self.consume_keyword(Keyword.ELIF) is not None:
            elif_cond = self.parse_expr()
            elifs.append(Elif(elif_cond, self.parse_block()))
        else_block = (
            self.parse_block() if self.consume_keyword(Keyword.ELSE) is not None else None
        )
        return If(cond, block, elifs, else_block)

    def parse_for(self) -> For:
        self.expect_keyword(Keyword.FOR)
        if self._next_is(Symbol.OPEN_CURLY_BRACKET):
            return For(ForKind.ENDLESS, self.parse_block())
        first = self.parse_expr()
        if self.consume_keyword(Keyword.IN) is not None:
            range_expr = self.parse_expr()
            return For(ForKind.RANGE, self.parse_block(), index=first, range=range_expr)
        return For(ForKind.COND, self.parse_block(), cond=first)


def parse_source(
    source: str,
    mod_id: Optional[ModId] = None,
    mod_path: Optional[Path] = None,
) -> Tuple[Ast, List[LexerLog], List[ParserError]]:
    """Tokenize and parse ``source`` as one module of a fresh hako."""
    tokens, lexer_logs = tokenize(source)
    parser = Parser(tokens, ParserHakoContext(HakoId(0)))
    ast, parser_logs = parser.parse(
        mod_id if mod_id is not None else ModId(0),
        mod_path if mod_path is not None else Path.from_segments(()),
    )
    return ast, lexer_logs, parser_logs
"""Syntax tree produced by the parser, with the ids that name its parts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Tuple, Union

from hakolang.token import (
    BoolLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
    CharLiteral,
    FloatLiteral,
    IntLiteral,
    Literal,
    NoneLiteral,
    PrimType,
    Span,
    StrLiteral,
    Symbol,
    Token,
)

_LITERAL_TYPES = (
    NoneLiteral,
    BoolLiteral,
    IntLiteral,
    FloatLiteral,
    CharLiteral,
    StrLiteral,
    ByteCharLiteral,
    ByteStrLiteral,
)


@dataclass(frozen=True)
class HakoId:
    """Identifies a hako (a compilation package)."""

    value: int

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class ModId:
    """Identifies a module."""

    value: int

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class ItemId:
    """Identifies an item within its hako."""

    hako_id: int
    index: int


@dataclass(frozen=True)
class BodyId:
    """Identifies a function body."""

    value: int

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True)
class Id:
    """An identifier with its location."""

    id: str
    span: Span = field(default_factory=Span)


@dataclass(frozen=True)
class Path:
    """A path of two or more ``::``-separated segments."""

    segments: Tuple[str, ...]

    @classmethod
    def from_segments(cls, segments: Iterable[str]) -> Path:
        return cls(tuple(segments))

    def __str__(self) -> str:
        return "::".join(self.segments)


class Accessibility(Enum):
    DEFAULT = auto()
    PUB = auto()


class RefMut(Enum):
    NONE = auto()
    REF = auto()
    MUT = auto()


class MarkerKind(Enum):
    """Kinds of ``@`` marker."""

    SYS_EMBED = "sysembed"
    SPEC = "spec"
    ARG = "arg"
    RET_VAL = "retval"
    TODO = "todo"
    EXIT = "exit"


@dataclass
class Marker:
    """A marker; ``name`` and ``description`` are set where its kind carries them."""

    kind: MarkerKind
    span: Span
    name: Optional[str] = None
    description: Optional[str] = None


class TypeKind(Enum):
    ID = auto()
    PRIM = auto()


@dataclass
class Type:
    """A type annotation: a named type or a primitive type."""

    kind: TypeKind
    value: Union[Id, PrimType]
    span: Span

    def __post_init__(self) -> None:
        expected = Id if self.kind is TypeKind.ID else PrimType
        if not isinstance(self.value, expected):
            raise TypeError(f"{self.kind.name} type cannot hold {self.value!r}")


@dataclass
class FormalArg:
    id: Id
    ref_mut: RefMut
    type: Type


@dataclass
class ActualArg:
    ref_mut: RefMut
    expr: Expr


@dataclass
class Body:
    id: BodyId
    ret_type: Optional[Type]
    args: List[FormalArg]
    exprs: List[Expr]


@dataclass
class FnDecl:
    body: Body


@dataclass
class Item:
    id: ItemId
    name: Id
    markers: List[Marker]
    accessibility: Accessibility
    decl: FnDecl


@dataclass
class Ast:
    mod_id: ModId
    mod_path: Path
    items: List[Item]


class UnaryOperator(Enum):
    NOT = "!"
    NEGATIVE = "-"


class BinaryOperator(Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    def precedence(self) -> int:
        """Binding strength; higher binds tighter."""
        return _PRECEDENCES[self]


_PRECEDENCES: Dict[BinaryOperator, int] = {
    BinaryOperator.ADD: 1,
    BinaryOperator.SUB: 1,
    BinaryOperator.MUL: 2,
    BinaryOperator.DIV: 2,
}

_PREFIX_OPERATORS: Dict[Symbol, UnaryOperator] = {
    Symbol.EXCLAMATION: UnaryOperator.NOT,
    Symbol.MINUS: UnaryOperator.NEGATIVE,
}

_INFIX_OPERATORS: Dict[Symbol, BinaryOperator] = {
    Symbol.PLUS: BinaryOperator.ADD,
    Symbol.MINUS: BinaryOperator.SUB,
    Symbol.ASTERISK: BinaryOperator.MUL,
    Symbol.SLASH: BinaryOperator.DIV,
}

# The language defines no postfix operators at present.
_POSTFIX_OPERATORS: Dict[Symbol, UnaryOperator] = {}


def _lookup(table: Dict, token: Token):
    if isinstance(token.kind, Symbol):
        return table.get(token.kind)
    return None


@dataclass(frozen=True)
class Operator:
    """A unary or binary operator inside an operation."""

    op: Union[UnaryOperator, BinaryOperator]

    @property
    def is_unary(self) -> bool:
        return isinstance(self.op, UnaryOperator)

    @classmethod
    def to_prefix_operator(cls, token: Token) -> Optional[UnaryOperator]:
        return _lookup(_PREFIX_OPERATORS, token)

    @classmethod
    def to_infix_operator(cls, token: Token) -> Optional[BinaryOperator]:
        return _lookup(_INFIX_OPERATORS, token)

    @classmethod
    def to_postfix_operator(cls, token: Token) -> Optional[UnaryOperator]:
        return _lookup(_POSTFIX_OPERATORS, token)


@dataclass
class OperationElem:
    """An element of an operation in postfix order: a term or an operator."""

    value: Union[Expr, Operator]

    @property
    def is_operator(self) -> bool:
        return isinstance(self.value, Operator)


@dataclass
class Operation:
    """An operation stored in reverse Polish order."""

    elems: List[OperationElem]


@dataclass
class Block:
    exprs: List[Expr]


@dataclass
class Ret:
    value: Expr


@dataclass
class VarDef:
    id: Id
    ref_mut: RefMut
    type: Optional[Type] = None
    init: Optional[Expr] = None


@dataclass
class VarBind:
    id: Id
    value: Expr


@dataclass
class Elif:
    cond: Expr
    block: Block


@dataclass
class If:
    cond: Expr
    block: Block
    elifs: List[Elif] = field(default_factory=list)
    else_: Optional[Block] = None


class ForKind(Enum):
    ENDLESS = auto()
    RANGE = auto()
    COND = auto()


@dataclass
class For:
    """A loop; ``index``/``range`` belong to range loops, ``cond`` to conditional ones."""

    kind: ForKind
    block: Block
    index: Optional[Expr] = None
    range: Optional[Expr] = None
    cond: Optional[Expr] = None

    def __post_init__(self) -> None:
        has_range = self.index is not None and self.range is not None
        if self.kind is ForKind.RANGE and not has_range:
            raise ValueError("range loop needs an index and a range")
        if self.kind is ForKind.COND and self.cond is None:
            raise ValueError("conditional loop needs a condition")


@dataclass
class FnCall:
    path: Path
    args: List[ActualArg]


class ExprKind(Enum):
    BLOCK = auto()
    FN_CALL = auto()
    FOR = auto()
    ID = auto()
    IF = auto()
    LITERAL = auto()
    MARKER = auto()
    OPERATION = auto()
    PATH = auto()
    RET = auto()
    VAR_BIND = auto()
    VAR_DEF = auto()


_EXPR_VALUE_TYPES: Dict[ExprKind, tuple] = {
    ExprKind.BLOCK: (Block,),
    ExprKind.FN_CALL: (FnCall,),
    ExprKind.FOR: (For,),
    ExprKind.ID: (Id,),
    ExprKind.IF: (If,),
    ExprKind.LITERAL: _LITERAL_TYPES,
    ExprKind.MARKER: (Marker,),
    ExprKind.OPERATION: (Operation,),
    ExprKind.PATH: (Path,),
    ExprKind.RET: (Ret,),
    ExprKind.VAR_BIND: (VarBind,),
    ExprKind.VAR_DEF: (VarDef,),
}


@dataclass
class Expr:
    """An expression: its kind, the node for that kind, and its location."""

    kind: ExprKind
    value: Union[
        Block, FnCall, For, Id, If, Literal, Marker, Operation, Path, Ret, VarBind, VarDef
    ]
    span: Span

    def __post_init__(self) -> None:
        if not isinstance(self.value, _EXPR_VALUE_TYPES[self.kind]):
            raise TypeError(f"{self.kind.name} expression cannot hold {self.value!r}")
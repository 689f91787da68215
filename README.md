# hakolang

This is the front end of a compiler for the Hako language. It turns source
text into tokens and then builds an abstract syntax tree from them. It records
diagnostics as it goes and does not stop at the first one.

## Installing

```
pip install .
```

## Tokenizing

```python
from hakolang.lexer import tokenize

tokens, logs = tokenize("fn main() { let x = 1i32; }")
for token in tokens:
    print(token.kind, token.span)
```

`tokenize` returns two lists: the `Token` objects and the `LexerLog` entries.

- A token's `kind` is one of the following:
  - an `Ident`
  - a `Keyword`
  - a `PrimType`
  - a `Symbol`
  - one of the literal classes in `hakolang.token`: `BoolLiteral`, `IntLiteral`, `FloatLiteral`, `CharLiteral`, `StrLiteral`, `ByteCharLiteral` or `ByteStrLiteral`.
- A `Span` holds a `begin` offset and a `length`. `Span.end()` gives the offset just past the span.

Lexing carries on after a problem. Each of these adds a `LexerLog` with a `LexerLogKind` and a span:

- an unclosed or empty literal
- a char literal that is too long
- a line break inside a literal
- an unknown escape sequence
- a bad type suffix
- a non-decimal float

Runs of characters the lexer does not recognise become a single token of kind `Symbol.UNKNOWN`.

`LexerLog.to_compiler_log()` converts a lexer entry into the general `CompilerLog` from `hakolang.log`.

## Parsing

```python
from hakolang.ast import ModId, Path
from hakolang.parser import parse_source

ast, lexer_logs, parser_logs = parse_source(
    "pub fn add(a i32, b i32) i32 { ret a + b; }",
    ModId(0),
    Path.from_segments(["main"]),
)
for item in ast.items:
    print(item.name.id, item.accessibility)
```

`parse_source` tokenizes and parses one module in a fresh hako. `mod_id` defaults to `ModId(0)`. `mod_path` defaults to an empty path.

Parser problems are `ParserError` exceptions. Each carries a `kind` (a `ParserLogKind`), a `span` and an optional `detail`. `Parser.parse` catches them and records them in the logs it returns. When an item is broken, the parser skips past it and goes on with the next one.

To parse several modules into one hako, use `ParserHakoContext` and `Parser` directly. Share them across modules as below. Body ids then stay unique across the modules, and duplicate item names raise `DUPLICATE_ITEM_NAME` even when they are in different modules.

```python
import itertools

from hakolang.ast import HakoId, ModId, Path
from hakolang.lexer import tokenize
from hakolang.parser import Parser, ParserHakoContext

context = ParserHakoContext(HakoId(0))
body_ids = itertools.count()
sources = {"a": "fn f() { ret 1; }", "b": "fn g() { ret 2; }"}
for index, (name, text) in enumerate(sources.items()):
    tokens, _ = tokenize(text)
    ast, logs = Parser(tokens, context, body_ids).parse(
        ModId(index), Path.from_segments([name])
    )
```

How expressions are stored:

- Operator expressions are stored in postfix (reverse Polish) order in `Operation.elems`.
- `BinaryOperator.precedence()` gives the precedence used: `*` and `/` bind tighter than `+` and `-`.
- The prefix operators are `!` and unary `-`.

## What this package does not do

The package stops at the syntax tree. It has:

- no name resolution
- no type checking
- no code generation
- no command-line program

`hakolang.log` defines the general diagnostic types `CompilerLog`, `SyntaxErr` and `TypeErr`, along with the other error classes. No part of this package produces type errors or the name-resolution errors.

## Running the tests

```
pip install .[test]
pytest
```
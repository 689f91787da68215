"""Lexer, syntax tree and parser for the Hako programming language."""

__version__ = "0.1.0"
__all__ = ["token", "log", "lexer_log", "lexer", "ast", "parser"]
"""
Lossless tokenizer and parser for the .netrc grammar.
Every byte of the input ends up in exactly one token, so a parsed file
can be written back out unchanged.
"""
from .lexer import is_filler, lex, split_lines
from .parser import EntryRecord, TokenCursor, parse

__all__ = [
    "EntryRecord",
    "TokenCursor",
    "is_filler",
    "lex",
    "parse",
    "split_lines",
]

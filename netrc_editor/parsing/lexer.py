"""Lexer splitting login file lines into whitespace, word and comment tokens."""
from __future__ import annotations

import re
from typing import Iterable, List

# A comment starts at a "#" that begins the line or follows whitespace and
# runs through the end of the line, newline included.
COMMENT_RE = re.compile(r"(\s*(?<!\S)#.*)", re.DOTALL)
RUN_RE = re.compile(r"\s+|\S+")
LINE_END_RE = re.compile(r"(?<=\n)")


def split_lines(text: str) -> List[str]:
    """Split text on ``\\n`` keeping line endings; ``\\r`` stays in the line."""
    return [line for line in LINE_END_RE.split(text) if line]


def lex(lines: Iterable[str]) -> List[str]:
    """Turn lines into a flat token list whose concatenation is the input.

    Parameters
    ----------
    lines : Iterable[str]
        Lines as returned by :func:`split_lines`, line endings included.

    Returns
    -------
    list[str]
        Alternating whitespace and non-whitespace runs, with a line's
        trailing comment kept as a single token.

    """
    tokens: List[str] = []
    for line in lines:
        content, comment = line, None
        parts = COMMENT_RE.split(line, maxsplit=1)
        if len(parts) > 1:
            content, comment = parts[0], parts[1]
        tokens.extend(RUN_RE.findall(content))
        if comment:
            tokens.append(comment)
    return tokens


def is_filler(token: str) -> bool:
    """Whitespace and comment tokens carry formatting, never values."""
    return token[:1].isspace() or token.startswith("#")

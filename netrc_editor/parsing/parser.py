"""Parser turning login file tokens into a preamble and entry records."""
from __future__ import annotations

from dataclasses import astuple, dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from netrc_editor.errors import TruncatedInputError

from .lexer import is_filler

MACHINE = "machine"
LOGIN = "login"
PASSWORD = "password"


@dataclass
class EntryRecord:
    """One ``machine`` block, split into the fragments needed to rebuild it.

    Attributes
    ----------
    machine_keyword : str
        The ``machine`` keyword with the filler that follows it.
    machine : str
        The machine name.
    login_keyword : str
        Filler before ``login``, the keyword and the filler after it, or
        ``""`` when the block has no login.
    login : str, optional
        The login value, ``None`` when absent.
    password_keyword : str
        Same as ``login_keyword`` for ``password``.
    password : str, optional
        The password value, ``None`` when absent.
    trailing : str
        Everything up to the next ``machine`` keyword or end of file.

    """

    machine_keyword: str
    machine: str
    login_keyword: str = ""
    login: Optional[str] = None
    password_keyword: str = ""
    password: Optional[str] = None
    trailing: str = ""

    def fragments(self) -> Tuple[Optional[str], ...]:
        return astuple(self)

    def unparse(self) -> str:
        return "".join(f for f in self.fragments() if f)


class TokenCursor:
    """Forward-only cursor over a token list."""

    def __init__(self, tokens: Iterable[str]) -> None:
        self._tokens: List[str] = list(tokens)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._tokens) - self._pos

    @property
    def exhausted(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> Optional[str]:
        return None if self.exhausted else self._tokens[self._pos]

    def take(self) -> str:
        """Consume the next token.

        Raises
        ------
        netrc_editor.errors.TruncatedInputError
            If no tokens remain.

        """
        if self.exhausted:
            raise TruncatedInputError("unexpected end of input")
        token = self._tokens[self._pos]
        self._pos += 1
        return token

    def read_until(self, predicate: Callable[[str], bool]) -> str:
        """Consume tokens up to, not including, the first matching one.

        Running out of tokens is not an error; whatever was read is returned.
        """
        start = self._pos
        while not self.exhausted and not predicate(self._tokens[self._pos]):
            self._pos += 1
        return "".join(self._tokens[start:self._pos])

    def precedes(self, target: str, stops: Sequence[str]) -> bool:
        """Check whether ``target`` shows up before any of ``stops``."""
        for token in self._tokens[self._pos:]:
            if token == target:
                return True
            if token in stops:
                return False
        return False


def _keyword_field(cursor: TokenCursor, keyword: str, stops: Sequence[str]) -> Tuple[str, Optional[str]]:
    if not cursor.precedes(keyword, stops):
        return "", None
    text = cursor.read_until(lambda t: t == keyword)
    text += cursor.take()
    text += cursor.read_until(lambda t: not is_filler(t))
    return text, cursor.take()


def parse(tokens: Iterable[str]) -> Tuple[str, List[EntryRecord]]:
    """Parse tokens into a preamble and a list of entry records.

    Parameters
    ----------
    tokens : Iterable[str]
        Tokens produced by :func:`netrc_editor.parsing.lexer.lex`.

    Returns
    -------
    tuple[str, list[EntryRecord]]
        Text before the first ``machine`` keyword, and the records in file
        order.

    Raises
    ------
    netrc_editor.errors.TruncatedInputError
        If the input ends before a machine name, or before the value of a
        ``login``/``password`` keyword.

    """
    cursor = TokenCursor(tokens)
    entries: List[EntryRecord] = []

    preamble = cursor.read_until(lambda t: t == MACHINE)
    while not cursor.exhausted:
        machine_keyword = cursor.take()
        machine_keyword += cursor.read_until(lambda t: not is_filler(t))
        machine = cursor.take()
        login_keyword, login = _keyword_field(cursor, LOGIN, (PASSWORD, MACHINE))
        password_keyword, password = _keyword_field(cursor, PASSWORD, (MACHINE,))
        trailing = cursor.read_until(lambda t: t == MACHINE)
        entries.append(
            EntryRecord(
                machine_keyword,
                machine,
                login_keyword,
                login,
                password_keyword,
                password,
                trailing,
            )
        )

    return preamble, entries

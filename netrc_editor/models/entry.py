"""Named view over a parsed entry record."""
from __future__ import annotations

from typing import Iterator, Optional

from netrc_editor.parsing.parser import EntryRecord

DEFAULT_MACHINE = "default"
LOGIN_KEYWORD = "\n  login "
PASSWORD_KEYWORD = "\n  password "


class Entry:
    """Read/write access to the login and password of one record.

    Writes only touch the value fragments of the record, so comments and
    whitespace around them survive. Setting a value on a record that had no
    such field inserts the keyword as well.

    Unpacks as ``(login, password)``.
    """

    def __init__(self, record: EntryRecord) -> None:
        self._record = record

    @classmethod
    def missing(cls, machine: str) -> "Entry":
        """An entry bound to no document, with both fields absent."""
        return cls(EntryRecord("machine ", machine))

    @property
    def record(self) -> EntryRecord:
        return self._record

    @property
    def machine(self) -> str:
        return self._record.machine

    @property
    def is_default(self) -> bool:
        return self._record.machine == DEFAULT_MACHINE

    @property
    def login(self) -> Optional[str]:
        return self._record.login

    @login.setter
    def login(self, value: str) -> None:
        validate_value("login", value)
        if self._record.login is None:
            self._record.login_keyword = LOGIN_KEYWORD
        self._record.login = value

    @property
    def password(self) -> Optional[str]:
        return self._record.password

    @password.setter
    def password(self, value: str) -> None:
        validate_value("password", value)
        if self._record.password is None:
            self._record.password_keyword = PASSWORD_KEYWORD
        self._record.password = value

    def __iter__(self) -> Iterator[Optional[str]]:
        yield self.login
        yield self.password

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Entry):
            return tuple(self) == tuple(other) and self.machine == other.machine
        if isinstance(other, tuple):
            return tuple(self) == other
        return NotImplemented

    def __repr__(self) -> str:
        # Never show the password.
        return f"Entry(machine={self.machine!r}, login={self.login!r})"


def validate_value(field: str, value: str) -> None:
    # A value is exactly one token: whitespace or a leading "#" would change
    # how the file parses back.
    if not isinstance(value, str) or not value:
        raise ValueError(f"{field} must be a non-empty string")
    if any(ch.isspace() for ch in value) or value.startswith("#"):
        raise ValueError(f"{field} must not contain whitespace or start with '#'")

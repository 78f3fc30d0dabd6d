"""In-memory login file that keeps the original formatting."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, BinaryIO, Iterator, List, Optional, Tuple

from verboselogs import VerboseLogger

from netrc_editor.parsing.lexer import lex, split_lines
from netrc_editor.parsing.parser import EntryRecord, parse
from netrc_editor.storage.file_utility import FileUtility

from .entry import DEFAULT_MACHINE, Entry, validate_value

if TYPE_CHECKING:
    from netrc_editor.services.filters import ByteFilter

ENCODING = "utf-8"
# Bytes that are not valid UTF-8 pass through unchanged.
ENCODING_ERRORS = "surrogateescape"
DEFAULT_MODE = 0o600


class NetrcDocument:
    """A parsed login file: preamble text plus entry records.

    Parameters
    ----------
    path : str or pathlib.Path
        Where :meth:`save` writes to.
    preamble : str
        Text before the first ``machine`` keyword.
    entries : list[EntryRecord]
        Records in file order.
    file_utility : FileUtility, optional
        Persistence helper used by :meth:`save`.
    byte_filter : ByteFilter, optional
        Encrypt/decrypt filter applied around disk I/O.
    logger : verboselogs.VerboseLogger, optional
        The program's logger.

    """

    def __init__(
        self,
        path: str | Path,
        preamble: str = "",
        entries: Optional[List[EntryRecord]] = None,
        file_utility: Optional[FileUtility] = None,
        byte_filter: Optional["ByteFilter"] = None,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.path = Path(path)
        self.preamble = preamble
        self.entries: List[EntryRecord] = entries if entries is not None else []
        self.new_item_prefix = ""
        self.logger = logger or VerboseLogger(__name__)
        self.file_utility = file_utility or FileUtility(logger=self.logger)
        self.byte_filter = byte_filter

    @classmethod
    def from_text(cls, text: str, path: str | Path = ".netrc", **kwargs) -> "NetrcDocument":
        preamble, entries = parse(lex(split_lines(text)))
        return cls(path, preamble, entries, **kwargs)

    @classmethod
    def read(
        cls,
        path: str | Path,
        file_utility: Optional[FileUtility] = None,
        byte_filter: Optional["ByteFilter"] = None,
        logger: Optional[VerboseLogger] = None,
    ) -> "NetrcDocument":
        """Parse the file at ``path``; a missing file gives an empty document.

        Raises
        ------
        netrc_editor.errors.TruncatedInputError
            If the file ends in the middle of a record.
        PermissionError, OSError
            If the file exists but can't be read.

        """
        kwargs = {"file_utility": file_utility, "byte_filter": byte_filter, "logger": logger}
        try:
            data = Path(path).read_bytes()
        except FileNotFoundError:
            return cls(path, **kwargs)
        if byte_filter is not None:
            data = byte_filter.decode(data)
        return cls.from_text(data.decode(ENCODING, ENCODING_ERRORS), path, **kwargs)

    def get(self, machine: str) -> Optional[Entry]:
        """Entry for ``machine``, else the ``default`` entry, else ``None``."""
        record = self._find(machine)
        if record is None:
            record = self._find(DEFAULT_MACHINE)
        return Entry(record) if record is not None else None

    def __getitem__(self, machine: str) -> Entry:
        entry = self.get(machine)
        return entry if entry is not None else Entry.missing(machine)

    def set(self, machine: str, login: str, password: str) -> Entry:
        """Update the first record for ``machine`` or append a new one."""
        record = self._find(machine)
        if record is None:
            record = self.new_item(machine, login, password)
            self._end_last_line()
            self.entries.append(record)
            self.logger.debug(f"Appended new entry for machine '{machine}'")
            return Entry(record)
        validate_value("login", login)
        validate_value("password", password)
        entry = Entry(record)
        entry.login = login
        entry.password = password
        return entry

    def __setitem__(self, machine: str, info: Tuple[str, str]) -> None:
        login, password = info
        self.set(machine, login, password)

    def delete(self, machine: str) -> bool:
        record = self._find(machine)
        if record is None:
            return False
        self.entries.remove(record)
        return True

    def __delitem__(self, machine: str) -> None:
        if not self.delete(machine):
            raise KeyError(machine)

    def __contains__(self, machine: object) -> bool:
        return any(r.machine == machine for r in self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return (Entry(r) for r in self.entries)

    def machines(self) -> List[str]:
        return [r.machine for r in self.entries]

    def new_item(self, machine: str, login: str, password: str) -> EntryRecord:
        record = EntryRecord(f"{self.new_item_prefix}machine ", machine, trailing="\n")
        entry = Entry(record)
        entry.login = login
        entry.password = password
        return record

    def serialize(self) -> str:
        return self.preamble + "".join(r.unparse() for r in self.entries)

    unparse = serialize

    def save(self, make_backup: bool = False, verify: bool = False) -> None:
        """Atomically replace the file on disk with :meth:`serialize`.

        Parameters
        ----------
        make_backup : bool, optional
            Keep a numbered copy of the previous file.
        verify : bool, optional
            Read the file back and compare it with what was written.

        """
        data = self.serialize().encode(ENCODING, ENCODING_ERRORS)
        if self.byte_filter is not None:
            data = self.byte_filter.encode(data)

        def writer(handle: BinaryIO) -> None:
            handle.write(data)

        self.file_utility.atomic_write(self.path, writer, make_backup=make_backup, mode=DEFAULT_MODE)
        if verify:
            self.file_utility.verify_content(self.path, data)
        self.logger.verbose(f"Saved {len(self.entries)} entries to '{self.path}'")

    def _end_last_line(self) -> None:
        """Terminate unfinished last line so appended text starts on its own."""
        if self.entries:
            last = self.entries[-1]
            if not last.unparse().endswith("\n"):
                last.trailing += "\n"
        elif self.preamble and not self.preamble.endswith("\n"):
            self.preamble += "\n"

    def _find(self, machine: str) -> Optional[EntryRecord]:
        return next((r for r in self.entries if r.machine == machine), None)

    def __repr__(self) -> str:
        return f"NetrcDocument(path={str(self.path)!r}, entries={len(self.entries)})"

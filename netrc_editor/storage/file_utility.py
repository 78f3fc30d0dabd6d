"""Safe file replacement, numbered backups, verified copies and comparison."""
from __future__ import annotations

import os
import tempfile
from contextlib import ExitStack
from typing import BinaryIO, Callable, List, Optional

from verboselogs import VerboseLogger

from netrc_editor.errors import (
    ComparisonFaultError,
    RenameFailedError,
    VerificationFailedError,
)

from .copy_strategies import CopyStrategy, select_copy_strategy
from .platform import Platform

BUFFER_SIZE = 256 * 1024
PRIVATE_MODE = 0o600

PathLike = str | os.PathLike
Writer = Callable[[BinaryIO], None]
BackupPattern = Callable[[str, int], str]
ChunkEqual = Callable[[bytes, bytes], bool]


def numbered_backup(path: str, n: int) -> str:
    return f"{path}.{n:03d}"


class FileUtility:
    """File operations that never leave a half-written destination behind.

    Parameters
    ----------
    platform : Platform, optional
        Capabilities of the running system; detected when omitted.
    copy_strategy : CopyStrategy, optional
        How :meth:`copy_file` moves bytes; picked from ``platform`` when
        omitted.
    logger : verboselogs.VerboseLogger, optional
        The program's logger.

    """

    def __init__(
        self,
        platform: Optional[Platform] = None,
        copy_strategy: Optional[CopyStrategy] = None,
        logger: Optional[VerboseLogger] = None,
    ) -> None:
        self.platform = platform or Platform.detect()
        self.copy_strategy = copy_strategy or select_copy_strategy(self.platform)
        self.logger = logger or VerboseLogger(__name__)

    def atomic_write(
        self,
        path: PathLike,
        writer: Writer,
        make_backup: bool = False,
        mode: int = PRIVATE_MODE,
    ) -> None:
        """Write ``path`` through ``writer`` without exposing partial content.

        A new file is created directly with ``mode``. An existing file is
        replaced by renaming a temp file from the same directory over it and
        keeps its current mode.

        Parameters
        ----------
        path : str or os.PathLike
            The destination file.
        writer : Callable[[BinaryIO], None]
            Called with a binary file object to write into.
        make_backup : bool, optional
            Copy the current file to the next free ``<path>.NNN`` first.
        mode : int, optional
            Mode of a newly created file.

        Raises
        ------
        PermissionError
            If an existing ``path`` is not readable and writable.
        netrc_editor.errors.RenameFailedError
            If the final rename fails.

        """
        filename = os.fspath(path)

        if not os.path.exists(filename):
            self._write_new(filename, writer, mode)
            return

        # Fail before creating anything if the destination is not read-writable.
        with open(filename, "ab+"):
            pass
        dest_mode = None
        if self.platform.supports_modes:
            dest_mode = os.stat(filename).st_mode & 0o7777

        directory = os.path.dirname(os.path.abspath(filename))
        fd, temp_path = tempfile.mkstemp(prefix=f".{os.path.basename(filename)}.", dir=directory)
        try:
            with os.fdopen(fd, "wb") as handle:
                writer(handle)
                handle.flush()
                os.fsync(handle.fileno())
            self.safe_rename(temp_path, filename, make_backup=make_backup, mode=dest_mode)
        except BaseException:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise
        self.logger.debug(f"Atomically replaced '{filename}'")

    def _write_new(self, filename: str, writer: Writer, mode: int) -> None:
        fd = os.open(filename, os.O_WRONLY | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0), mode)
        try:
            with os.fdopen(fd, "wb") as handle:
                writer(handle)
                handle.flush()
                os.fsync(handle.fileno())
        except BaseException:
            os.unlink(filename)
            raise
        self.logger.debug(f"Created '{filename}' with mode {mode:o}")

    def safe_rename(
        self,
        source: PathLike,
        dest: PathLike,
        make_backup: bool = False,
        mode: Optional[int] = None,
    ) -> None:
        """Rename ``source`` onto ``dest`` with a single filesystem call.

        Parameters
        ----------
        source, dest : str or os.PathLike
            Files to rename from and to.
        make_backup : bool, optional
            Back up ``dest`` before it gets replaced.
        mode : int, optional
            Mode to give ``dest``; defaults to the mode of ``source``.

        Raises
        ------
        netrc_editor.errors.RenameFailedError
            If the rename fails. ``dest`` is left as it was.

        """
        src, dst = os.fspath(source), os.fspath(dest)
        if make_backup:
            self.backup(dst)
        if mode is None and self.platform.supports_modes:
            mode = os.stat(src).st_mode & 0o7777
        try:
            os.replace(src, dst)
        except OSError as err:
            raise RenameFailedError(src, dst, err.strerror or str(err)) from err
        if self.platform.supports_modes and mode is not None:
            if os.stat(dst).st_mode & 0o7777 != mode:
                os.chmod(dst, mode)

    def backup(self, path: PathLike, pattern: BackupPattern = numbered_backup) -> Optional[str]:
        """Copy ``path`` to the first free name produced by ``pattern``.

        Returns
        -------
        str or None
            The backup file, or ``None`` when ``path`` does not exist.

        Raises
        ------
        PermissionError
            If ``path`` can't be read.

        """
        filename = os.fspath(path)
        if not os.path.exists(filename):
            return None
        with open(filename, "rb"):
            pass

        n = 0
        while True:
            target = pattern(filename, n)
            try:
                self.copy_file(filename, target, mode=PRIVATE_MODE, verify=True, exclusive=True)
            except FileExistsError:
                n += 1
                continue
            break
        self.logger.verbose(f"Backed up '{filename}' to '{target}'")
        return target

    def copy_file(
        self,
        source: PathLike,
        dest: PathLike,
        mode: int = PRIVATE_MODE,
        verify: bool = True,
        block_size: int = BUFFER_SIZE,
        equal: Optional[ChunkEqual] = None,
        exclusive: bool = False,
    ) -> None:
        """Copy ``source`` to ``dest``; a failed copy leaves no ``dest``.

        With ``exclusive`` an existing ``dest`` is never overwritten.

        Raises
        ------
        netrc_editor.errors.VerificationFailedError
            If ``verify`` is set and the copy differs from ``source``.
        FileExistsError
            If ``exclusive`` is set and ``dest`` exists.

        """
        src, dst = os.fspath(source), os.fspath(dest)
        flags = os.O_WRONLY | os.O_CREAT | getattr(os, "O_BINARY", 0)
        flags |= os.O_EXCL if exclusive else os.O_TRUNC

        with open(src, "rb") as src_handle:
            dst_fd = os.open(dst, flags, mode)
            try:
                if self.platform.supports_modes:
                    os.fchmod(dst_fd, mode)
                copied = self.copy_strategy.copy(src_handle.fileno(), dst_fd, block_size)
                os.fsync(dst_fd)
            except BaseException:
                os.close(dst_fd)
                os.unlink(dst)
                raise
            os.close(dst_fd)
        self.logger.spam(f"Copied {copied} bytes from '{src}' to '{dst}' ({self.copy_strategy.name})")

        if verify and not self.compare_files(src, dst, equal=equal, buffer_size=block_size):
            os.unlink(dst)
            raise VerificationFailedError(f"'{dst}' differs from '{src}'")

    def verify_content(self, path: PathLike, expected: bytes) -> None:
        with open(path, "rb") as handle:
            actual = handle.read()
        if actual != expected:
            raise VerificationFailedError(f"'{os.fspath(path)}' does not contain the written data")

    @staticmethod
    def compare_files(
        *paths: PathLike,
        equal: Optional[ChunkEqual] = None,
        buffer_size: int = BUFFER_SIZE,
    ) -> bool:
        """Check that two or more files hold identical bytes.

        Parameters
        ----------
        *paths : str or os.PathLike
            At least two files.
        equal : Callable[[bytes, bytes], bool], optional
            Chunk comparison, defaults to ``==``.
        buffer_size : int, optional
            Bytes read per file per step.

        Returns
        -------
        bool
            ``False`` as soon as sizes or any chunk differ.

        Raises
        ------
        ValueError
            If fewer than two paths are given.
        netrc_editor.errors.ComparisonFaultError
            If same-size files yield reads of different lengths.

        """
        if len(paths) < 2:
            raise ValueError("Requires at least 2 file names")

        size = None
        for path in paths:
            current = os.path.getsize(path)
            if size is None:
                size = current
            elif current != size:
                return False
        if size == 0:
            return True

        with ExitStack() as stack:
            handles: List[BinaryIO] = [stack.enter_context(open(p, "rb")) for p in paths]
            return compare_handles(handles, size, equal or _bytes_equal, buffer_size)


def compare_handles(
    handles: List[BinaryIO],
    size: int,
    equal: ChunkEqual,
    buffer_size: int = BUFFER_SIZE,
) -> bool:
    """Read ``size`` bytes from every handle in lockstep, comparing to the first."""
    if size == 0:
        return True
    reference, others = handles[0], handles[1:]
    remaining = size
    while remaining > 0:
        chunk = reference.read(buffer_size)
        if not chunk:
            raise ComparisonFaultError(f"Reference file ended {remaining} bytes early")
        for handle in others:
            other = handle.read(buffer_size)
            if len(other) != len(chunk):
                raise ComparisonFaultError("Cannot compare reads of different sizes")
            if not equal(chunk, other):
                return False
        remaining -= len(chunk)
    return True


def _bytes_equal(left: bytes, right: bytes) -> bool:
    return left == right

"""Exception hierarchy for the netrc editor."""

from __future__ import annotations


class NetrcError(Exception):
    """Base error for everything raised by this package."""


class TruncatedInputError(NetrcError):
    """The token stream ended in the middle of a record."""


class VerificationFailedError(NetrcError):
    """A written or copied file does not match its source byte-for-byte."""


class RenameFailedError(NetrcError):
    """The filesystem rename failed; the destination was left untouched."""

    def __init__(self, source: str, dest: str, reason: str) -> None:
        super().__init__(f"Failed to rename '{source}' to '{dest}': {reason}")
        self.source = source
        self.dest = dest


class ComparisonFaultError(NetrcError):
    """Same-size files produced reads of different lengths."""


class InsecurePermissionsError(NetrcError):
    """The login file is readable or writable by someone besides its owner."""

    def __init__(self, path: str, mode: int) -> None:
        super().__init__(
            f"Permission bits for '{path}' should be 0600, but are {mode:o}"
        )
        self.path = path
        self.mode = mode


class FilterError(NetrcError):
    """An external encrypt/decrypt command failed."""

"""External encrypt/decrypt filters applied around login file I/O."""
from __future__ import annotations

import subprocess
from typing import List, Protocol, Sequence

from netrc_editor.errors import FilterError


class ByteFilter(Protocol):
    def decode(self, data: bytes) -> bytes: ...

    def encode(self, data: bytes) -> bytes: ...


class CommandFilter:
    """Pipe bytes through external commands.

    Parameters
    ----------
    decode_command : Sequence[str]
        Command turning stored bytes into plain text.
    encode_command : Sequence[str]
        Command turning plain text into stored bytes.

    """

    def __init__(self, decode_command: Sequence[str], encode_command: Sequence[str]) -> None:
        self.decode_command: List[str] = list(decode_command)
        self.encode_command: List[str] = list(encode_command)

    def decode(self, data: bytes) -> bytes:
        return self._run(self.decode_command, data)

    def encode(self, data: bytes) -> bytes:
        return self._run(self.encode_command, data)

    @staticmethod
    def _run(command: List[str], data: bytes) -> bytes:
        try:
            result = subprocess.run(command, input=data, capture_output=True, check=False)
        except OSError as err:
            raise FilterError(f"Cannot run '{command[0]}': {err}") from err
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            raise FilterError(f"'{command[0]}' exited with status {result.returncode}: {stderr}")
        return result.stdout


def gpg_filter(binary: str = "gpg") -> CommandFilter:
    return CommandFilter(
        decode_command=[binary, "--batch", "--quiet", "--decrypt"],
        encode_command=[binary, "-a", "--batch", "--default-recipient-self", "-e"],
    )

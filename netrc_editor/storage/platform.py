"""Platform capabilities consulted by the persistence layer."""
from __future__ import annotations

import os
import re
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

WINDOWS_RE = re.compile(r"win(32|dows|ce)|djgpp|(ms|cyg|bcc)win|mingw32", re.I)


@dataclass(frozen=True)
class Platform:
    """What the running system supports.

    Attributes
    ----------
    windows : bool
        Windows file semantics: no POSIX mode bits, ``_netrc`` file name.
    has_sendfile : bool
        ``os.sendfile`` can copy between regular files.

    """

    windows: bool = False
    has_sendfile: bool = False

    @property
    def supports_modes(self) -> bool:
        return not self.windows

    @classmethod
    def detect(cls, environ: Optional[Mapping[str, str]] = None) -> "Platform":
        env = os.environ if environ is None else environ
        windows = bool(WINDOWS_RE.search(sys.platform)) or env.get("OS") == "Windows_NT"
        # Copying regular file to regular file needs Linux >= 2.6.33.
        has_sendfile = hasattr(os, "sendfile") and sys.platform.startswith("linux")
        return cls(windows=windows, has_sendfile=has_sendfile)

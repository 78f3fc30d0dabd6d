"""Read-side permission check for login files."""
from __future__ import annotations

import os
import stat

from netrc_editor.errors import InsecurePermissionsError
from netrc_editor.storage.platform import Platform

ALLOWED_BITS = stat.S_IRUSR | stat.S_IWUSR


def check_permissions(path: str | os.PathLike, platform: Platform) -> None:
    """Reject a login file with any mode bit beyond 0600.

    Missing files pass; there is nothing to leak yet.
    """
    if not platform.supports_modes:
        return
    try:
        mode = stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return
    if mode & ~ALLOWED_BITS:
        raise InsecurePermissionsError(os.fspath(path), mode)

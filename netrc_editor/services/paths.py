"""Default login file location."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from netrc_editor.storage.platform import Platform

GPG_SUFFIX = ".gpg"


def default_name(platform: Platform) -> str:
    return "_netrc" if platform.windows else ".netrc"


def home_directory(platform: Platform, environ: Mapping[str, str]) -> Path:
    home = environ.get("HOME")
    if not home and platform.windows:
        home = environ.get("USERPROFILE")
    return Path(home) if home else Path.home()


def default_path(platform: Platform, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Locate the login file.

    ``$NETRC`` wins when set. Otherwise the platform's default name in the
    home directory, or its ``.gpg`` twin when only that one exists.
    """
    env = os.environ if environ is None else environ
    if env.get("NETRC"):
        return Path(env["NETRC"]).expanduser()

    path = home_directory(platform, env) / default_name(platform)
    encrypted = path.with_name(path.name + GPG_SUFFIX)
    if not path.exists() and encrypted.exists():
        return encrypted
    return path


def is_encrypted(path: Path) -> bool:
    return path.suffix == GPG_SUFFIX

"""Centralized configuration management using Pydantic Settings."""

from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Defines application settings, loaded from environment variables or .env file.

    Every field can be set through ``NETRC_EDITOR_<FIELD>``.

    Attributes
    ----------
    netrc_path : pathlib.Path, optional
        Login file to edit; when unset ``$NETRC`` or ``~/.netrc`` is used.
    new_item_prefix : str
        Text written before every newly appended entry.
    make_backup : bool
        Keep a numbered copy of the previous file on save.
    verify_writes : bool
        Read the file back after saving and compare.
    check_permissions : bool
        Refuse to read a login file with mode bits beyond 0600.
    gpg_binary : str
        Command used to decrypt and encrypt ``*.gpg`` login files.
    """

    netrc_path: Optional[Path] = None
    new_item_prefix: str = ""
    make_backup: bool = False
    verify_writes: bool = False
    check_permissions: bool = True
    gpg_binary: str = "gpg"

    model_config = SettingsConfigDict(
        env_prefix="NETRC_EDITOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

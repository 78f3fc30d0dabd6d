"""Reads and saves login files according to the application settings."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from verboselogs import VerboseLogger

from netrc_editor.config import Settings
from netrc_editor.models import NetrcDocument
from netrc_editor.storage.file_utility import FileUtility
from netrc_editor.storage.platform import Platform

from .filters import ByteFilter, gpg_filter
from .paths import default_path, is_encrypted
from .permissions import check_permissions


class NetrcService:
    """Glue between settings, the login file on disk and :class:`NetrcDocument`."""

    def __init__(
        self,
        file_utility: FileUtility,
        logger: VerboseLogger,
        settings: Settings | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.file_utility = file_utility
        self.logger = logger
        self.settings = settings or Settings()
        self.environ = os.environ if environ is None else environ

    @property
    def platform(self) -> Platform:
        return self.file_utility.platform

    def resolve_path(self, path: str | Path | None = None) -> Path:
        if path:
            return Path(path).expanduser()
        if self.settings.netrc_path:
            return Path(self.settings.netrc_path).expanduser()
        return default_path(self.platform, self.environ)

    def filter_for(self, path: Path) -> Optional[ByteFilter]:
        return gpg_filter(self.settings.gpg_binary) if is_encrypted(path) else None

    def read(self, path: str | Path | None = None) -> NetrcDocument:
        """Load the login file, empty when it does not exist yet.

        Raises
        ------
        netrc_editor.errors.InsecurePermissionsError
            If permission checking is enabled and the file mode is too open.
        netrc_editor.errors.TruncatedInputError
            If the file ends in the middle of a record.

        """
        target = self.resolve_path(path)
        if self.settings.check_permissions:
            check_permissions(target, self.platform)

        self.logger.verbose(f"Reading login file '{target}' ...")
        document = NetrcDocument.read(
            target,
            file_utility=self.file_utility,
            byte_filter=self.filter_for(target),
            logger=self.logger,
        )
        document.new_item_prefix = self.settings.new_item_prefix
        self.logger.debug(f"Parsed '{target}' ({len(document)} entries).")
        return document

    def save(
        self,
        document: NetrcDocument,
        make_backup: bool | None = None,
        verify: bool | None = None,
    ) -> None:
        backup = self.settings.make_backup if make_backup is None else make_backup
        check = self.settings.verify_writes if verify is None else verify
        document.save(make_backup=backup, verify=check)
        self.logger.info(f"Saved '{document.path}'.")

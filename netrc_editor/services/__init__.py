"""Collaborators around the core: path lookup, permissions, filters, read/save."""
from .filters import ByteFilter, CommandFilter, gpg_filter
from .netrc_service import NetrcService
from .paths import default_name, default_path
from .permissions import check_permissions

__all__ = [
    "ByteFilter",
    "CommandFilter",
    "NetrcService",
    "check_permissions",
    "default_name",
    "default_path",
    "gpg_filter",
]

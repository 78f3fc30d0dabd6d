"""Atomic file persistence: temp-file writes, numbered backups, copy and compare."""
from .copy_strategies import BufferedCopy, CopyStrategy, SendfileCopy, select_copy_strategy
from .file_utility import BUFFER_SIZE, FileUtility
from .platform import Platform

__all__ = [
    "BUFFER_SIZE",
    "BufferedCopy",
    "CopyStrategy",
    "FileUtility",
    "Platform",
    "SendfileCopy",
    "select_copy_strategy",
]

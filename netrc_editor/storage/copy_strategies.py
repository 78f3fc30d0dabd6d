"""Interchangeable ways of copying one open file into another."""
from __future__ import annotations

import errno
import os
from abc import ABC, abstractmethod

from .platform import Platform

# sendfile refuses these file/filesystem combinations; buffered copy still works.
UNSUPPORTED_ERRNOS = {errno.EINVAL, errno.ENOSYS, getattr(errno, "EOPNOTSUPP", errno.EINVAL)}


class CopyStrategy(ABC):
    name: str = "abstract"

    @abstractmethod
    def copy(self, src_fd: int, dst_fd: int, block_size: int) -> int:
        """Copy everything from ``src_fd`` to ``dst_fd``; return bytes copied."""


class BufferedCopy(CopyStrategy):
    """Chunked read + unbuffered write. Works everywhere."""

    name = "buffered"

    def copy(self, src_fd: int, dst_fd: int, block_size: int) -> int:
        total = 0
        while True:
            chunk = os.read(src_fd, block_size)
            if not chunk:
                return total
            view = memoryview(chunk)
            while view:
                written = os.write(dst_fd, view)
                view = view[written:]
            total += len(chunk)


class SendfileCopy(CopyStrategy):
    """Kernel-side copy through ``os.sendfile``."""

    name = "sendfile"

    def __init__(self, fallback: CopyStrategy | None = None) -> None:
        self.fallback = fallback or BufferedCopy()

    def copy(self, src_fd: int, dst_fd: int, block_size: int) -> int:
        total = 0
        while True:
            try:
                sent = os.sendfile(dst_fd, src_fd, total, block_size)
            except OSError as err:
                if total == 0 and err.errno in UNSUPPORTED_ERRNOS:
                    return self.fallback.copy(src_fd, dst_fd, block_size)
                raise
            if sent == 0:
                return total
            total += sent


def select_copy_strategy(platform: Platform) -> CopyStrategy:
    if platform.has_sendfile:
        return SendfileCopy()
    return BufferedCopy()

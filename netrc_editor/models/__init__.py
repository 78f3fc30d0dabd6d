"""Module that contains data models."""
from .document import NetrcDocument
from .entry import DEFAULT_MACHINE, Entry

__all__ = [
    "DEFAULT_MACHINE",
    "Entry",
    "NetrcDocument",
]

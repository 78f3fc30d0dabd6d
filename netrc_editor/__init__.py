"""Format-preserving .netrc reader/writer with atomic persistence."""

__version__ = "0.2.0"

"""Persistence subsystem exports."""

from persistence.index_store import IndexFormatError, load_index, save_index

__all__ = ["IndexFormatError", "load_index", "save_index"]

# src/timelog/store/errors.py

from __future__ import annotations


class StorageError(Exception):
    """Raised for any open, schema, query, write or row-decoding failure."""

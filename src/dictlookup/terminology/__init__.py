"""Terminology utilities: translation records + the local cache store."""

from .cache import CacheInitError, CacheStore, CacheStoreError  # noqa: F401
from .record import DELIMITER, PLACEHOLDER, Record, merge_pairs  # noqa: F401

__all__ = [
    "CacheInitError",
    "CacheStore",
    "CacheStoreError",
    "DELIMITER",
    "PLACEHOLDER",
    "Record",
    "merge_pairs",
]

"""
Custom persistence exceptions for the devtype progress store.
"""


class ProgressStoreError(Exception):
    """Base class for all progress-store exceptions."""


class StoreConnectionError(ProgressStoreError):
    """Raised when the backing database cannot be opened."""


class StoreSchemaError(ProgressStoreError):
    """Raised when the key-value table is missing or malformed."""


class StoreClosedError(ProgressStoreError):
    """Raised when a closed store is used."""

from typing import Optional


class RecordStoreError(Exception):
    """Base class for all errors raised by the record store."""


class ValidationError(RecordStoreError, ValueError):
    """Exception raised when a query option is set to an invalid value."""

    def __init__(self, message: str = "Query validation failed."):
        super().__init__(message)


class DecodeError(RecordStoreError, ValueError):
    """Exception raised when a stored JSON column cannot be decoded."""

    def __init__(self, column: str, message: Optional[str] = None):
        self.column = column
        super().__init__(message or f"Stored value of column '{column}' is not valid JSON.")


class EncodeError(RecordStoreError, TypeError):
    """Exception raised when a value cannot be serialized to JSON for storage."""

    def __init__(self, column: str, message: Optional[str] = None):
        self.column = column
        super().__init__(message or f"Value for column '{column}' cannot be serialized to JSON.")


class KeyAlreadyExistsException(RecordStoreError):
    """Exception raised when trying to insert a record whose ID is already taken."""

    def __init__(self, message: str = "A record with the same ID already exists."):
        super().__init__(message)

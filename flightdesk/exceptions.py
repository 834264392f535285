"""
Custom exceptions for flightdesk
"""
from typing import Optional


class FlightDeskError(Exception):
    """Base exception for flightdesk"""
    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "GENERIC_ERROR"
        self.context = context or {}


class ValidationError(FlightDeskError):
    """Raised when a user-supplied field is malformed or out of range"""
    def __init__(self, message: str, error_code: Optional[str] = None, context: Optional[dict] = None):
        super().__init__(message, error_code or "VALIDATION_ERROR", context)


class InvalidRangeError(ValidationError):
    """Raised when an interval is inverted (arrival before departure)"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "INVALID_RANGE", context)


class DuplicateKeyError(FlightDeskError):
    """Raised when an identity field is already present in a store"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "DUPLICATE_KEY", context)


class NotFoundError(FlightDeskError):
    """Raised when a lookup or removal target is absent"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "NOT_FOUND", context)


class CapacityExceededError(FlightDeskError):
    """Raised when a fixed-capacity store is full"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "CAPACITY_EXCEEDED", context)


class AllocationError(FlightDeskError):
    """Raised when a store cannot obtain slots for its records"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "ALLOCATION_FAILED", context)


class FileAccessError(FlightDeskError):
    """Raised when a data file cannot be opened, read or written"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "FILE_ACCESS", context)


class FormatError(FlightDeskError):
    """Raised when persisted data is corrupt or a record cannot be encoded"""
    def __init__(self, message: str, context: Optional[dict] = None):
        super().__init__(message, "FORMAT_ERROR", context)

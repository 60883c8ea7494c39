"""River Companion Core"""
__version__ = "0.1.0"

from src.core.errors import (
    CompanionError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ReplacementNotConfirmedError,
    RetirementFailedError,
    StorageError,
    StorageTimeoutError,
    ValidationError,
)

__all__ = [
    "CompanionError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "ReplacementNotConfirmedError",
    "RetirementFailedError",
    "StorageError",
    "StorageTimeoutError",
    "ValidationError",
]

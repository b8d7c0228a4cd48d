"""Common module — shared utilities for the HR directory backend."""

from hr_backend.common.constants import (
    PERMISSIONS,
    AbsenceStatus,
    AbsenceType,
    UserRole,
    has_permission,
)
from hr_backend.common.exceptions import (
    AlreadyProcessedException,
    AppException,
    AuthorizationDeniedException,
    ConflictError,
    DuplicateEmailException,
    ForbiddenException,
    InvalidRangeException,
    NotFoundException,
    SelfReferenceException,
    ValidationException,
    register_exception_handlers,
)
from hr_backend.common.sanitizer import sanitize

__all__ = [
    # Constants / Enums
    "AbsenceStatus",
    "AbsenceType",
    "UserRole",
    "PERMISSIONS",
    "has_permission",
    # Exceptions
    "AlreadyProcessedException",
    "AppException",
    "AuthorizationDeniedException",
    "ConflictError",
    "DuplicateEmailException",
    "ForbiddenException",
    "InvalidRangeException",
    "NotFoundException",
    "SelfReferenceException",
    "ValidationException",
    "register_exception_handlers",
    # Sanitizer
    "sanitize",
]

from enum import Enum


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(self, message: str, status_code: int = 500, details: dict = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """Raised when a requested resource is not found."""
    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with id {resource_id} not found",
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class AllocationErrorKind(str, Enum):
    not_found = "NotFound"
    insufficient_slots = "InsufficientSlots"
    session_boundary_violation = "SessionBoundaryViolation"
    faculty_conflict = "FacultyConflict"
    classroom_conflict = "ClassroomConflict"
    section_conflict = "SectionConflict"
    conflict_at_commit = "ConflictAtCommit"


ALLOCATION_STATUS_CODES = {
    AllocationErrorKind.not_found: 404,
    AllocationErrorKind.insufficient_slots: 422,
    AllocationErrorKind.session_boundary_violation: 422,
    AllocationErrorKind.faculty_conflict: 409,
    AllocationErrorKind.classroom_conflict: 409,
    AllocationErrorKind.section_conflict: 409,
    AllocationErrorKind.conflict_at_commit: 409,
}


class AllocationError(AppError):
    """Raised when a timetable placement is rejected.

    ``kind`` is one of the closed set in :class:`AllocationErrorKind`; callers
    show ``message`` to the user and may inspect ``details`` for the
    conflicting section, faculty, classroom, day and slot.
    """
    def __init__(self, kind: AllocationErrorKind, message: str, details: dict = None):
        self.kind = kind
        super().__init__(message, status_code=ALLOCATION_STATUS_CODES[kind], details=details)


class AbsenceError(AppError):
    """Raised when an absence cannot be recorded or processed."""
    def __init__(self, message: str, status_code: int = 409, details: dict = None):
        super().__init__(message, status_code=status_code, details=details)

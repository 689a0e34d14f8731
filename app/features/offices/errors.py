"""
Errors raised by office assignment operations.

Every error is recoverable by the caller and maps to a 4xx response.
"""
from typing import Any, Dict, Optional


class OfficeError(Exception):
    """Base exception for office operations."""
    status_code: int = 400
    kind: str = "office_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.kind, "detail": self.message}


class NotFoundError(OfficeError):
    """Raised when a role or student reference does not resolve."""
    status_code = 404
    kind = "not_found"

    def __init__(self, resource: str, reference: str):
        super().__init__(f"{resource.capitalize()} {reference!r} not found")
        self.resource = resource
        self.reference = reference


class ConflictingRoleError(OfficeError):
    """Raised when the student already holds an active role in a restricted category."""
    status_code = 409
    kind = "conflicting_role"

    def __init__(self, blocking_category: str, role_id: Optional[str] = None):
        super().__init__(
            f"Student cannot be assigned to this role because they already have a {blocking_category} role"
        )
        self.blocking_category = blocking_category
        self.role_id = role_id

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["blocking_category"] = self.blocking_category
        return data


class NoActiveAssignmentError(OfficeError):
    """Raised when removing a student who does not hold the role for the session."""
    status_code = 409
    kind = "no_active_assignment"

    def __init__(self, role_id: str, student_id: str, academic_session: str):
        super().__init__(
            "No active assignment found for this student and academic session"
        )
        self.role_id = role_id
        self.student_id = student_id
        self.academic_session = academic_session


class DuplicateAssignmentError(OfficeError):
    """Raised when assigning the current holder to the same role and session again."""
    status_code = 409
    kind = "duplicate_assignment"

    def __init__(self, role_id: str, student_id: str, academic_session: str):
        super().__init__(
            f"Student {student_id} already holds role {role_id} for {academic_session}"
        )


class ConcurrentModificationError(OfficeError):
    """Raised when another request changed the role or student first."""
    status_code = 409
    kind = "concurrent_modification"

    def __init__(self):
        super().__init__("The role or student was modified by another request, retry the operation")


class ValidationError(OfficeError):
    """Raised for an office/level/category combination outside the catalog."""
    status_code = 400
    kind = "validation_error"

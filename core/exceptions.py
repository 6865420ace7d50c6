"""
StoneERP - Exceptions
=====================
Exception hierarchy for the cutting core.
"""


class StoneERPError(Exception):
    """Base exception for all StoneERP errors"""

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# Validation Errors
# ============================================================

class ValidationError(StoneERPError):
    """Data validation errors"""

    @property
    def user_message(self) -> str:
        """Message suitable for showing to an operator"""
        return self.details.get("user_message", self.message)


class RequiredFieldError(ValidationError):
    """A required field is missing"""

    def __init__(self, field: str, entity_type: str = None):
        msg = f"Field '{field}' is required"
        if entity_type:
            msg = f"{entity_type}: {msg}"
        super().__init__(msg, code="REQUIRED_FIELD", details={"field": field})


class InvalidFieldValueError(ValidationError):
    """Field has an invalid value"""

    def __init__(self, field: str, value, reason: str = None):
        msg = f"Invalid value for field '{field}': {value}"
        if reason:
            msg += f" - {reason}"
        super().__init__(
            msg,
            code="INVALID_FIELD_VALUE",
            details={"field": field, "value": str(value), "reason": reason}
        )


# ============================================================
# Geometry Errors
# ============================================================

class GeometryError(ValidationError):
    """Captured outline cannot be used as a piece"""

    USER_MESSAGE = "Please draw a valid closed shape."

    def __init__(self, message: str, code: str, point_count: int):
        super().__init__(
            message,
            code=code,
            details={"point_count": point_count, "user_message": self.USER_MESSAGE}
        )
        self.point_count = point_count


class ShapeNotClosedError(GeometryError):
    """Shape confirmation attempted on an open outline"""

    def __init__(self, point_count: int):
        super().__init__(f"Shape is not closed ({point_count} points)", "SHAPE_NOT_CLOSED", point_count)


class ZeroAreaShapeError(GeometryError):
    """Shape is closed but encloses no area"""

    def __init__(self, point_count: int):
        super().__init__(f"Shape encloses zero area ({point_count} points)", "ZERO_AREA_SHAPE", point_count)


# ============================================================
# Workflow Errors
# ============================================================

class WorkflowError(StoneERPError):
    """Errors related to workflow/state machines"""
    pass


class ActionNotAllowedError(WorkflowError):
    """Action not allowed in the current state"""

    def __init__(self, action: str, current_state: str, entity_type: str = None):
        msg = f"Action '{action}' not allowed in state '{current_state}'"
        if entity_type:
            msg = f"{entity_type}: {msg}"
        super().__init__(
            msg,
            code="ACTION_NOT_ALLOWED",
            details={
                "action": action,
                "current_state": current_state,
                "entity_type": entity_type
            }
        )

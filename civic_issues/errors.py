"""
Error taxonomy for the service.

Every error carries the HTTP status it maps to; ``main`` renders them as
``{"error": message}`` bodies.
"""
from fastapi import status


class CivicIssuesError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInput(CivicIssuesError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class Unauthorized(CivicIssuesError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(CivicIssuesError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(CivicIssuesError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(CivicIssuesError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class InvalidTransition(Conflict):
    """Requested status change is not an edge of the lifecycle."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move issue from {current} to {target}")

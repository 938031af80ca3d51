# app/utils/errors.py
"""
Error taxonomy shared by services, guards and the exception handlers in main.py
"""

from fastapi import status


class AppError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class InvalidToken(Unauthenticated):
    default_message = "Invalid or expired token"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Request conflicts with current state"


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class Internal(AppError):
    pass

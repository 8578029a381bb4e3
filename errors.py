"""Errors raised by the services and mapped to HTTP responses in main.py."""

from fastapi import status


class ExpenseTrackerError(Exception):
    """Base error. `message` is safe to show to the client."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Server error"

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(ExpenseTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "All fields are required"


class ConflictError(ExpenseTrackerError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "User already exists"


class AuthError(ExpenseTrackerError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired token"


class InvalidCredentialsError(AuthError):
    # login failures answer 400 and never say which field was wrong
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid email or password"


class NotFoundError(ExpenseTrackerError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Expense not found"


class InternalError(ExpenseTrackerError):
    pass

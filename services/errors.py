"""Failure kinds surfaced to users.

Every service raises one of these; routes turn them into a flashed message
(or a JSON error) and return to an interactive page.
"""


class AppError(Exception):
    category = "danger"
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    default_message = "Something went wrong"


class ValidationError(AppError):
    default_message = "Please fill in all required fields"


class RemoteCallError(AppError):
    status_code = 502
    default_message = "The database could not be reached. Please try again."


class InvalidCredentialsError(AppError):
    status_code = 401
    default_message = "Invalid email or password. Please try again."


class AuthorizationError(AppError):
    status_code = 403
    default_message = "This email is not registered as an admin"


class ConfigurationError(AppError):
    status_code = 500
    default_message = "System configuration error. Please contact support."


class NotFoundError(AppError):
    category = "warning"
    status_code = 404
    default_message = "Not found"

from .base import ApiError
from .http import GENERIC_ERROR_MESSAGE, error_response, register_error_handler
from .validation import RequestValidationError, group_pydantic_errors

__all__ = [
    "ApiError",
    "GENERIC_ERROR_MESSAGE",
    "RequestValidationError",
    "error_response",
    "group_pydantic_errors",
    "register_error_handler",
]

from .base import (
    AppError,
    DomainError,
    ErrorCode,
    InfrastructureError,
    InternalError,
    ValidationError,
)
from .http import handle_app_error, register_error_handler

__all__ = [
    "AppError",
    "DomainError",
    "ErrorCode",
    "InfrastructureError",
    "InternalError",
    "ValidationError",
    "handle_app_error",
    "register_error_handler",
]

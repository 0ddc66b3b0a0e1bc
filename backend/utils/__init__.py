"""
Utils Package

Provides utility modules for:
- validation_errors: Structured 422 responses for request validation
"""

from .validation_errors import (
    ValidationErrorResponse,
    raise_invalid_parameter,
    raise_validation_error,
)

__all__ = [
    'ValidationErrorResponse',
    'raise_invalid_parameter',
    'raise_validation_error',
]

"""
Schemas Package

JSON Schema definitions and validation for resume content dictionaries.
"""

from .validator import ValidationError, validate_content

__all__ = [
    "ValidationError",
    "validate_content",
]

"""
Utils Package

Dict serialization for the content model.
"""

from .serialization import (
    serialize_content,
    deserialize_content,
)

__all__ = [
    "serialize_content",
    "deserialize_content",
]

"""
Schema Validation Utilities

Validates resume content dictionaries before they are turned into a
ResumeContent model.

Two levels:
- Basic checks (always): known keys, section shapes, field types,
  parallel page-number arrays aligned with their section, page numbers >= 1.
- Strict mode: full JSON Schema validation against
  resume_content.schema.json.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


CONTENT_SCHEMA_NAME = "resume_content"

LIST_KEYS = ("skills", "languages", "achievements", "certifications")
ENTRY_KEYS = ("experience", "projects", "education")
SCALAR_KEYS = ("language", "header", "header_page_number", "profile", "profile_page_number")
# Entry fields holding a list of strings; every other entry field is a string
STRING_LIST_FIELDS = {"experience": ("description",)}


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _known_keys(data: dict[str, Any]) -> set[str]:
    keys = set(SCALAR_KEYS) | set(ENTRY_KEYS)
    _check_header(data.get("header"))
    if data.get("profile") is not None:
        _check_string(data["profile"], "profile")
    if "language" in data:
        _check_string(data["language"], "language")

    for key in LIST_KEYS:
        keys.add(key)
        keys.add(f"{key}_page_numbers")
    return keys


def _check_page(value: Any, path: str) -> None:
    if value is None:
        return
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError(f"Invalid page number at {path}: {value!r}", path=path)


def _check_string(value: Any, path: str) -> None:
    if not isinstance(value, str):
        raise ValidationError(f"{path} must be a string, got {type(value).__name__}", path=path)


def _check_string_list(value: Any, path: str) -> None:
    if not isinstance(value, list):
        raise ValidationError(f"{path} must be a list, got {type(value).__name__}", path=path)
    for i, item in enumerate(value):
        _check_string(item, f"{path}.{i}")


def _check_header(header: Any) -> None:
    if header is None:
        return
    if not isinstance(header, dict):
        raise ValidationError(f"header must be an object, got {type(header).__name__}", path="header")
    for field in ("name", "title"):
        if field in header:
            _check_string(header[field], f"header.{field}")
    if "contact" not in header:
        return
    contact = header["contact"]
    if not isinstance(contact, dict):
        raise ValidationError("header.contact must be an object", path="header.contact")
    for key, value in contact.items():
        _check_string(value, f"header.contact.{key}")


def validate_content(data: dict[str, Any], *, strict: bool = False) -> None:
    """
    Validate resume content data.

    Args:
        data: Content dictionary (see core.utils.serialization)
        strict: If True, also validate against the JSON Schema

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Content must be a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - _known_keys(data))
    if unknown:
        raise ValidationError(
            f"Unknown content fields: {unknown}",
            errors=[f"Unknown field: {k}" for k in unknown],
        )

    for key in LIST_KEYS:
        items = data.get(key, [])
        if not isinstance(items, list):
            raise ValidationError(f"{key} must be a list", path=key)
        for i, item in enumerate(items):
            if not isinstance(item, str):
                raise ValidationError(f"{key}[{i}] must be a string", path=f"{key}.{i}")

        pages = data.get(f"{key}_page_numbers")
        if pages is None:
            continue
        if not isinstance(pages, list):
            raise ValidationError(f"{key}_page_numbers must be a list", path=f"{key}_page_numbers")
        if len(pages) != len(items):
            raise ValidationError(
                f"{key}_page_numbers has {len(pages)} entries for {len(items)} {key}",
                path=f"{key}_page_numbers",
            )
        for i, page in enumerate(pages):
            _check_page(page, f"{key}_page_numbers.{i}")

    for key in ENTRY_KEYS:
        items = data.get(key, [])
        if not isinstance(items, list):
            raise ValidationError(f"{key} must be a list", path=key)
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValidationError(f"{key}[{i}] must be an object", path=f"{key}.{i}")
            for field, value in item.items():
                path = f"{key}.{i}.{field}"
                if field == "page_number":
                    _check_page(value, path)
                elif field in STRING_LIST_FIELDS.get(key, ()):
                    _check_string_list(value, path)
                else:
                    _check_string(value, path)

    for key in ("header_page_number", "profile_page_number"):
        _check_page(data.get(key), key)

    if strict:
        schema = _load_schema(CONTENT_SCHEMA_NAME)
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e

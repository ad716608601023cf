"""
Serialization Utilities

Converts ResumeContent to and from plain dictionaries.

The dict form is the caller-facing record shape:
- List sections are arrays of strings, with page numbers in an optional
  parallel ``<section>_page_numbers`` array (index-aligned).
- Entry sections are arrays of objects with an embedded ``page_number``.
- Header/profile page numbers live in ``header_page_number`` and
  ``profile_page_number``.

Inside the engine every unit carries its own page number; this module is
the only place the two shapes meet.
"""

from __future__ import annotations

from typing import Any, Optional

from ..models.content import (
    EducationItem,
    ExperienceItem,
    HeaderBlock,
    LIST_SECTIONS,
    ListEntry,
    ProfileBlock,
    ProjectItem,
    ResumeContent,
)
from ..schemas.validator import validate_content


# ─────────────────────────────────────────────────────────────────────────────
# Content Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_content(
    content: ResumeContent,
    *,
    include_page_numbers: bool = True,
) -> dict[str, Any]:
    """
    Serialize a ResumeContent to a dictionary.

    Args:
        content: Content to serialize
        include_page_numbers: Whether to emit page annotations

    Returns:
        Dictionary suitable for JSON serialization; passes validate_content()
    """
    data: dict[str, Any] = {"language": content.language}

    if content.header is not None:
        data["header"] = content.header.payload()
        if include_page_numbers:
            data["header_page_number"] = content.header.page_number
    if content.profile is not None:
        data["profile"] = content.profile.text
        if include_page_numbers:
            data["profile_page_number"] = content.profile.page_number

    for kind in LIST_SECTIONS:
        entries = content.section(kind)
        data[kind.value] = [entry.text for entry in entries]
        if include_page_numbers:
            data[f"{kind.value}_page_numbers"] = [entry.page_number for entry in entries]

    for key, items in (
        ("experience", content.experience),
        ("projects", content.projects),
        ("education", content.education),
    ):
        rows = []
        for item in items:
            row = item.payload()
            if include_page_numbers and item.page_number is not None:
                row["page_number"] = item.page_number
            rows.append(row)
        data[key] = rows

    return data


def deserialize_content(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
) -> ResumeContent:
    """
    Deserialize a ResumeContent from a dictionary.

    Args:
        data: Dictionary in the shape produced by serialize_content()
        validate: Whether to validate before parsing
        strict: Use full JSON Schema validation (implies validate)

    Returns:
        ResumeContent with page numbers normalised onto each unit

    Raises:
        ValidationError: If validation is enabled and data is invalid
    """
    if validate or strict:
        validate_content(data, strict=strict)

    content = ResumeContent(language=data.get("language", "en"))

    header = data.get("header")
    if header is not None:
        content.header = HeaderBlock(
            name=header.get("name", ""),
            title=header.get("title", ""),
            contact=dict(header.get("contact", {})),
            page_number=data.get("header_page_number"),
        )

    profile = data.get("profile")
    if profile is not None:
        content.profile = ProfileBlock(text=profile, page_number=data.get("profile_page_number"))

    for kind in LIST_SECTIONS:
        texts = data.get(kind.value, [])
        pages: list[Optional[int]] = data.get(f"{kind.value}_page_numbers") or [None] * len(texts)
        setattr(
            content,
            kind.value,
            [ListEntry(text=text, page_number=page) for text, page in zip(texts, pages)],
        )

    content.experience = [
        ExperienceItem(
            position=row.get("position", ""),
            company=row.get("company", ""),
            start_date=row.get("start_date", ""),
            end_date=row.get("end_date", ""),
            description=list(row.get("description", [])),
            page_number=row.get("page_number"),
        )
        for row in data.get("experience", [])
    ]
    content.projects = [
        ProjectItem(
            name=row.get("name", ""),
            description=row.get("description", ""),
            page_number=row.get("page_number"),
        )
        for row in data.get("projects", [])
    ]
    content.education = [
        EducationItem(
            institution=row.get("institution", ""),
            degree=row.get("degree", ""),
            start_date=row.get("start_date", ""),
            end_date=row.get("end_date", ""),
            page_number=row.get("page_number"),
        )
        for row in data.get("education", [])
    ]

    return content

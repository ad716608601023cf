"""
Core Models Package

The resume content model. Units are mutable dataclasses because the
pagination engine annotates them in place across passes; the only
mutation they accept is a forward-moving page number.
"""

from .content import (
    AssignmentError,
    ContentUnit,
    EducationItem,
    ENTRY_SECTIONS,
    ExperienceItem,
    HeaderBlock,
    LIST_SECTIONS,
    ListEntry,
    PAGE_ONE_SECTIONS,
    ProfileBlock,
    ProjectItem,
    ResumeContent,
    SectionKind,
    VISIT_ORDER,
)

__all__ = [
    "AssignmentError",
    "ContentUnit",
    "EducationItem",
    "ENTRY_SECTIONS",
    "ExperienceItem",
    "HeaderBlock",
    "LIST_SECTIONS",
    "ListEntry",
    "PAGE_ONE_SECTIONS",
    "ProfileBlock",
    "ProjectItem",
    "ResumeContent",
    "SectionKind",
    "VISIT_ORDER",
]

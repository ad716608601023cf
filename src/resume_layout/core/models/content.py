"""
Module: content

Purpose:
    Provides the resume content model paginated by the engine. Every
    content unit (header block, profile block, each list entry and each
    experience/project/education item) is an addressable node with its own
    nullable page number, so "which page does this go on" has exactly one
    representation regardless of section shape.

Key Classes:
    - SectionKind: Section identifiers in fixed visitation order
    - ContentUnit: Base node carrying the page number
    - HeaderBlock, ProfileBlock, ListEntry: Simple units
    - ExperienceItem, ProjectItem, EducationItem: Entry units
    - ResumeContent: The mutable document being paginated

Dependencies:
    - dataclasses (std)
    - hashlib, json (std): Content fingerprinting

Used By:
    - pagination.assigner: Writes page numbers onto units
    - pagination.page_filter: Projects per-page views
    - rendering.text_renderer: Paints units
    - core.utils.serialization: Dict conversion

Page Numbers:
    The dict form keeps page numbers for skills/languages/achievements/
    certifications in parallel index-aligned arrays while experience/
    projects/education embed them in each object. Here both shapes are
    nodes; the parallel-array form survives only at the dict boundary.
"""

from __future__ import annotations

import copy
import hashlib
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, List, Optional


class AssignmentError(ValueError):
    """Raised when a page assignment would move a unit to an earlier page."""


class SectionKind(str, Enum):
    """Resume sections, declared in the order the assigner visits them."""

    HEADER = "header"
    PROFILE = "profile"
    SKILLS = "skills"
    EXPERIENCE = "experience"
    PROJECTS = "projects"
    EDUCATION = "education"
    LANGUAGES = "languages"
    ACHIEVEMENTS = "achievements"
    CERTIFICATIONS = "certifications"

    @property
    def is_page_one_only(self) -> bool:
        return self in PAGE_ONE_SECTIONS

    @property
    def is_list(self) -> bool:
        return self in LIST_SECTIONS

    @property
    def is_entry(self) -> bool:
        return self in ENTRY_SECTIONS


VISIT_ORDER: tuple[SectionKind, ...] = tuple(SectionKind)
PAGE_ONE_SECTIONS = frozenset({SectionKind.HEADER, SectionKind.PROFILE})
LIST_SECTIONS: tuple[SectionKind, ...] = (
    SectionKind.SKILLS,
    SectionKind.LANGUAGES,
    SectionKind.ACHIEVEMENTS,
    SectionKind.CERTIFICATIONS,
)
ENTRY_SECTIONS: tuple[SectionKind, ...] = (
    SectionKind.EXPERIENCE,
    SectionKind.PROJECTS,
    SectionKind.EDUCATION,
)


# ─────────────────────────────────────────────────────────────────────────────
# Units
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ContentUnit(ABC):
    """
    Base node for anything that can be placed on a page.

    Attributes:
        page_number: 1-based page, or None while unassigned

    Invariants:
        - page_number is None or >= 1
        - page_number never decreases once set (see assign())
    """

    page_number: Optional[int] = field(default=None, kw_only=True)

    def assign(self, page_number: int) -> None:
        """
        Set the page number, refusing to move the unit backwards.

        Args:
            page_number: Target page (1-based)

        Raises:
            AssignmentError: If page_number < 1 or earlier than current page
        """
        if page_number < 1:
            raise AssignmentError(f"page_number must be >= 1: {page_number}")
        if self.page_number is not None and page_number < self.page_number:
            raise AssignmentError(
                f"Cannot move {type(self).__name__} from page {self.page_number} "
                f"back to page {page_number}"
            )
        self.page_number = page_number

    def clear(self) -> None:
        self.page_number = None

    @abstractmethod
    def payload(self) -> dict[str, Any]:
        """Content fields without the page number."""


@dataclass
class HeaderBlock(ContentUnit):
    """Name, title and contact details. Page one only, never split."""

    name: str = ""
    title: str = ""
    contact: dict[str, str] = field(default_factory=dict)

    def payload(self) -> dict[str, Any]:
        return {"name": self.name, "title": self.title, "contact": dict(self.contact)}


@dataclass
class ProfileBlock(ContentUnit):
    """Summary paragraph. Page one only, never split."""

    text: str = ""

    def payload(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass
class ListEntry(ContentUnit):
    """One entry of a list section (a skill, a language, ...)."""

    text: str = ""

    def payload(self) -> dict[str, Any]:
        return {"text": self.text}


@dataclass
class ExperienceItem(ContentUnit):
    """One work experience entry. Indivisible."""

    position: str = ""
    company: str = ""
    start_date: str = ""
    end_date: str = ""
    description: List[str] = field(default_factory=list)

    def payload(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "company": self.company,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "description": list(self.description),
        }


@dataclass
class ProjectItem(ContentUnit):
    """One project entry. Indivisible."""

    name: str = ""
    description: str = ""

    def payload(self) -> dict[str, Any]:
        return {"name": self.name, "description": self.description}


@dataclass
class EducationItem(ContentUnit):
    """One education entry. Indivisible."""

    institution: str = ""
    degree: str = ""
    start_date: str = ""
    end_date: str = ""

    def payload(self) -> dict[str, Any]:
        return {
            "institution": self.institution,
            "degree": self.degree,
            "start_date": self.start_date,
            "end_date": self.end_date,
        }


ENTRY_TYPES: dict[SectionKind, type] = {
    SectionKind.EXPERIENCE: ExperienceItem,
    SectionKind.PROJECTS: ProjectItem,
    SectionKind.EDUCATION: EducationItem,
}


# ─────────────────────────────────────────────────────────────────────────────
# Document
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class ResumeContent:
    """
    The document to paginate (mutable).

    Constructed per pagination request and annotated in place, pass by
    pass, by the assigner. Per-page views built by the page filter share
    unit objects with this instance.

    Attributes:
        header: Header block, or None if absent
        profile: Summary block, or None if absent
        skills, languages, achievements, certifications: List sections
        experience, projects, education: Entry sections
        language: Content language passed through to renderers

    Example:
        >>> content = ResumeContent(header=HeaderBlock(name="Ada"))
        >>> content.header.assign(1)
        >>> content.annotations()["header"]
        1
    """

    header: Optional[HeaderBlock] = None
    profile: Optional[ProfileBlock] = None
    skills: List[ListEntry] = field(default_factory=list)
    experience: List[ExperienceItem] = field(default_factory=list)
    projects: List[ProjectItem] = field(default_factory=list)
    education: List[EducationItem] = field(default_factory=list)
    languages: List[ListEntry] = field(default_factory=list)
    achievements: List[ListEntry] = field(default_factory=list)
    certifications: List[ListEntry] = field(default_factory=list)
    language: str = "en"

    def section(self, kind: SectionKind) -> List[ContentUnit]:
        """
        Units of a section as a list.

        Header and profile are returned as a one-element list when
        present, so callers can treat every section uniformly.
        """
        if kind is SectionKind.HEADER:
            return [self.header] if self.header is not None else []
        if kind is SectionKind.PROFILE:
            return [self.profile] if self.profile is not None else []
        return getattr(self, kind.value)

    def units(self) -> Iterator[tuple[SectionKind, int, ContentUnit]]:
        """Yield (section, index, unit) for every unit in visitation order."""
        for kind in VISIT_ORDER:
            for index, unit in enumerate(self.section(kind)):
                yield kind, index, unit

    @property
    def unit_count(self) -> int:
        return sum(1 for _ in self.units())

    @property
    def is_empty(self) -> bool:
        return self.unit_count == 0

    def clear_page_numbers(self) -> None:
        """Strip every page annotation (full recompute starts clean)."""
        for _, _, unit in self.units():
            unit.clear()

    def max_page_number(self) -> int:
        """Highest assigned page, or 0 when nothing is assigned."""
        pages = [u.page_number for _, _, u in self.units() if u.page_number is not None]
        return max(pages, default=0)

    def annotations(self) -> dict[str, Any]:
        """
        Page numbers in the caller-facing persisted shape.

        Returns:
            {"header": int|None, "profile": int|None,
             "<section>": [int|None, ...] for every other section}
        """
        result: dict[str, Any] = {
            SectionKind.HEADER.value: self.header.page_number if self.header else None,
            SectionKind.PROFILE.value: self.profile.page_number if self.profile else None,
        }
        for kind in VISIT_ORDER[2:]:
            result[kind.value] = [u.page_number for u in self.section(kind)]
        return result

    def apply_annotations(self, annotations: dict[str, Any]) -> None:
        """
        Restore page numbers previously produced by annotations().

        Raises:
            ValueError: If a section's annotation length does not match
        """
        for kind in (SectionKind.HEADER, SectionKind.PROFILE):
            units = self.section(kind)
            if units:
                units[0].page_number = annotations.get(kind.value)
        for kind in VISIT_ORDER[2:]:
            pages = annotations.get(kind.value) or []
            units = self.section(kind)
            if pages and len(pages) != len(units):
                raise ValueError(
                    f"Annotation length mismatch for {kind.value}: "
                    f"{len(pages)} pages for {len(units)} items"
                )
            for unit, page in zip(units, pages):
                unit.page_number = page

    def content_hash(self) -> str:
        """SHA-256 of the canonical content, ignoring page numbers."""
        canonical = {
            "language": self.language,
            "sections": {
                kind.value: [unit.payload() for unit in self.section(kind)]
                for kind in VISIT_ORDER
            },
        }
        encoded = json.dumps(canonical, sort_keys=True, ensure_ascii=False)
        return hashlib.sha256(encoded.encode("utf-8")).hexdigest()

    def copy(self) -> ResumeContent:
        """Deep copy (units are not shared with the copy)."""
        return copy.deepcopy(self)

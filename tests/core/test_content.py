"""
Unit tests for the resume content model.
"""

import pytest

from resume_layout.core.models import (
    AssignmentError,
    ContentUnit,
    ExperienceItem,
    HeaderBlock,
    ListEntry,
    ProfileBlock,
    ResumeContent,
    SectionKind,
    VISIT_ORDER,
)


class TestSectionKind:
    """Tests for section classification."""

    def test_visit_order_matches_declaration(self):
        assert VISIT_ORDER == (
            SectionKind.HEADER,
            SectionKind.PROFILE,
            SectionKind.SKILLS,
            SectionKind.EXPERIENCE,
            SectionKind.PROJECTS,
            SectionKind.EDUCATION,
            SectionKind.LANGUAGES,
            SectionKind.ACHIEVEMENTS,
            SectionKind.CERTIFICATIONS,
        )

    def test_classification_is_disjoint(self):
        for kind in VISIT_ORDER:
            flags = [kind.is_page_one_only, kind.is_list, kind.is_entry]
            assert flags.count(True) == 1, kind


class TestContentUnitAssign:
    """Tests for forward-only page assignment."""

    def test_when_unassigned_then_accepts_any_page(self):
        unit = ListEntry(text="Python")
        unit.assign(3)
        assert unit.page_number == 3

    def test_when_moved_forward_then_accepts(self):
        unit = ListEntry(text="Python", page_number=1)
        unit.assign(2)
        assert unit.page_number == 2

    def test_when_moved_backward_then_raises(self):
        unit = ExperienceItem(position="Dev", page_number=2)
        with pytest.raises(AssignmentError, match="back to page 1"):
            unit.assign(1)
        assert unit.page_number == 2

    def test_when_page_below_one_then_raises(self):
        with pytest.raises(AssignmentError):
            ListEntry(text="x").assign(0)

    def test_assignment_error_is_value_error(self):
        assert issubclass(AssignmentError, ValueError)

    def test_clear_resets_to_unassigned(self):
        unit = ListEntry(text="x", page_number=4)
        unit.clear()
        assert unit.page_number is None

    def test_base_unit_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            ContentUnit()

    def test_subclass_without_payload_cannot_be_instantiated(self):
        class Bare(ContentUnit):
            pass

        with pytest.raises(TypeError):
            Bare()


class TestResumeContent:
    """Tests for ResumeContent helpers."""

    def test_section_wraps_header_and_profile(self, sample_content):
        assert sample_content.section(SectionKind.HEADER) == [sample_content.header]
        assert sample_content.section(SectionKind.PROFILE) == [sample_content.profile]

    def test_section_when_header_missing_then_empty(self):
        assert ResumeContent().section(SectionKind.HEADER) == []

    def test_units_follow_visit_order(self, sample_content):
        kinds = [kind for kind, _, _ in sample_content.units()]
        positions = [VISIT_ORDER.index(k) for k in kinds]
        assert positions == sorted(positions)
        assert len(kinds) == sample_content.unit_count

    def test_is_empty(self, sample_content):
        assert ResumeContent().is_empty
        assert not sample_content.is_empty

    def test_max_page_number_when_unassigned_then_zero(self, sample_content):
        assert sample_content.max_page_number() == 0

    def test_clear_page_numbers(self, sample_content):
        for _, _, unit in sample_content.units():
            unit.page_number = 2
        sample_content.clear_page_numbers()
        assert all(u.page_number is None for _, _, u in sample_content.units())

    def test_annotations_shape(self, sample_content):
        sample_content.header.assign(1)
        sample_content.skills[2].assign(2)

        annotations = sample_content.annotations()

        assert annotations["header"] == 1
        assert annotations["profile"] is None
        assert annotations["skills"] == [None, None, 2]
        assert annotations["certifications"] == []
        assert set(annotations) == {k.value for k in VISIT_ORDER}

    def test_apply_annotations_round_trip(self, sample_content):
        for i, (_, _, unit) in enumerate(sample_content.units()):
            unit.page_number = 1 + i % 2
        saved = sample_content.annotations()
        restored = sample_content.copy()
        restored.clear_page_numbers()

        restored.apply_annotations(saved)

        assert restored.annotations() == saved

    def test_apply_annotations_when_length_mismatch_then_raises(self, sample_content):
        annotations = sample_content.annotations()
        annotations["skills"] = [1]
        with pytest.raises(ValueError, match="skills"):
            sample_content.apply_annotations(annotations)

    def test_content_hash_ignores_page_numbers(self, sample_content):
        before = sample_content.content_hash()
        sample_content.experience[0].assign(2)
        assert sample_content.content_hash() == before

    def test_content_hash_changes_with_text(self, sample_content):
        before = sample_content.content_hash()
        sample_content.skills[0].text = "Fortran"
        assert sample_content.content_hash() != before

    def test_copy_does_not_share_units(self, sample_content):
        clone = sample_content.copy()
        clone.skills[0].assign(5)
        assert sample_content.skills[0].page_number is None

    def test_payload_excludes_page_number(self):
        header = HeaderBlock(name="Ada", contact={"email": "a@b.c"}, page_number=1)
        assert "page_number" not in header.payload()
        assert ProfileBlock(text="hi").payload() == {"text": "hi"}

"""
Unit tests for content serialization.

The dict form keeps page numbers in parallel arrays for list sections
and embedded in each object for entry sections.
"""

import pytest

from resume_layout.core.models import ListEntry, ResumeContent
from resume_layout.core.schemas import ValidationError, validate_content
from resume_layout.core.utils import deserialize_content, serialize_content


class TestSerializeContent:
    """Tests for serialize_content."""

    def test_list_sections_use_parallel_arrays(self, sample_content):
        sample_content.skills[0].assign(1)
        sample_content.skills[2].assign(2)

        data = serialize_content(sample_content)

        assert data["skills"] == ["COBOL", "Compilers", "Leadership"]
        assert data["skills_page_numbers"] == [1, None, 2]

    def test_entry_sections_embed_page_number(self, sample_content):
        sample_content.experience[1].assign(2)

        data = serialize_content(sample_content)

        assert "page_number" not in data["experience"][0]
        assert data["experience"][1]["page_number"] == 2

    def test_without_page_numbers(self, sample_content):
        sample_content.header.assign(1)
        data = serialize_content(sample_content, include_page_numbers=False)
        assert "header_page_number" not in data
        assert "skills_page_numbers" not in data

    def test_output_passes_strict_validation(self, sample_content):
        for _, _, unit in sample_content.units():
            unit.assign(1)
        validate_content(serialize_content(sample_content), strict=True)


class TestDeserializeContent:
    """Tests for deserialize_content."""

    def test_normalises_both_shapes_onto_units(self):
        data = {
            "header": {"name": "Ada"},
            "header_page_number": 1,
            "skills": ["a", "b"],
            "skills_page_numbers": [1, 2],
            "experience": [{"position": "Dev", "company": "X", "page_number": 2}],
        }

        content = deserialize_content(data)

        assert content.header.page_number == 1
        assert [s.page_number for s in content.skills] == [1, 2]
        assert content.experience[0].page_number == 2
        assert content.profile is None

    def test_missing_page_numbers_mean_unassigned(self):
        content = deserialize_content({"languages": ["English"]})
        assert content.languages == [ListEntry(text="English")]
        assert content.languages[0].page_number is None

    def test_invalid_data_raises(self):
        with pytest.raises(ValidationError):
            deserialize_content({"skills": ["a"], "skills_page_numbers": [1, 2]})

    @pytest.mark.parametrize(
        "data",
        [
            {"header": "Ada Lovelace"},
            {"profile": ["First programmer."]},
            {"experience": [{"description": "Shipped it"}]},
        ],
    )
    def test_when_field_has_wrong_type_then_raises_validation_error(self, data):
        with pytest.raises(ValidationError):
            deserialize_content(data)

    def test_round_trip_preserves_annotations(self, sample_content):
        sample_content.header.assign(1)
        sample_content.education[0].assign(2)
        sample_content.achievements[0].assign(2)

        restored = deserialize_content(serialize_content(sample_content), strict=True)

        assert restored.annotations() == sample_content.annotations()
        assert restored.content_hash() == sample_content.content_hash()

    def test_empty_dict_gives_empty_content(self):
        assert deserialize_content({}) == ResumeContent()

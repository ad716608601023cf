"""
Unit tests for GeometryProbe.
"""

import pytest
from unittest.mock import MagicMock

from resume_layout.core.models import SectionKind
from resume_layout.pagination.models import Column, InnerPadding
from resume_layout.pagination.page_filter import remaining_view
from resume_layout.pagination.probe import GeometryProbe
from resume_layout.rendering.surface import RenderSurface, SurfaceElement


@pytest.fixture
def probe() -> GeometryProbe:
    return GeometryProbe()


def _surface_renderer(root: SurfaceElement) -> MagicMock:
    renderer = MagicMock()
    renderer.version = "mock@1"
    renderer.surface = RenderSurface(root=root)
    return renderer


class TestMeasure:
    """Tests for GeometryProbe.measure."""

    def test_when_no_surface_then_none(self, probe):
        renderer = MagicMock()
        renderer.surface = None
        assert probe.measure(renderer) is None

    def test_reads_header_sections_and_entries(self, probe, resume_factory, fake_renderer_factory):
        # Arrange
        content, heights = resume_factory(header=120, profile=80, experience=[200, 300], skills=[20, 20])
        renderer = fake_renderer_factory(heights, headings={SectionKind.EXPERIENCE: 30})
        renderer.mount(content)

        # Act
        m = probe.measure(renderer)

        # Assert
        assert m.section_height(SectionKind.HEADER) == 120
        assert m.section_height(SectionKind.PROFILE) == 80
        assert m.section_height(SectionKind.EXPERIENCE) == 530
        assert m.entry_heights(SectionKind.EXPERIENCE) == {0: 200, 1: 300}
        assert m.heading_height(SectionKind.EXPERIENCE) == 30
        assert m.entry_heights(SectionKind.SKILLS) == {0: 20, 1: 20}

    def test_missing_sections_measure_zero(self, probe, resume_factory, fake_renderer_factory):
        content, heights = resume_factory(header=100)
        renderer = fake_renderer_factory(heights)
        renderer.mount(content)

        m = probe.measure(renderer)

        assert m.section_height(SectionKind.PROJECTS) == 0.0
        assert not m.has_entries(SectionKind.PROJECTS)

    def test_maps_view_positions_to_source_indices(self, probe, resume_factory, fake_renderer_factory):
        """Entry positions inside a filtered view map back to the full content."""
        # Arrange
        content, heights = resume_factory(experience=[100, 200, 300])
        content.experience[0].assign(1)
        content.experience[1].assign(2)
        content.experience[2].assign(2)
        view = remaining_view(content, 2)
        renderer = fake_renderer_factory(heights)
        renderer.mount(view.content)

        # Act
        m = probe.measure(renderer, view)

        # Assert
        assert m.entry_heights(SectionKind.EXPERIENCE) == {1: 200, 2: 300}

    def test_heading_match_is_case_insensitive_and_accepts_summary(self, probe):
        section = SurfaceElement(
            "div",
            classes=("section",),
            height=90,
            children=[SurfaceElement("h2", classes=("section-title",), lines=("Professional Summary",))],
        )
        renderer = _surface_renderer(SurfaceElement("div", children=[section]))

        m = probe.measure(renderer)

        assert m.section_height(SectionKind.PROFILE) == 90

    def test_falls_back_to_class_names(self, probe):
        """Sections without a recognisable heading are found by class."""
        items = [
            SurfaceElement("li", classes=("experience-item",), height=h) for h in (70, 90)
        ]
        skills = SurfaceElement("ul", classes=("skills-grid",), height=40)
        header = SurfaceElement("div", classes=("page-header",), height=110)
        renderer = _surface_renderer(SurfaceElement("div", children=[header, skills, *items]))

        m = probe.measure(renderer)

        assert m.section_height(SectionKind.HEADER) == 110
        assert m.section_height(SectionKind.SKILLS) == 40
        # no container: section height is the sum of its entries
        assert m.section_height(SectionKind.EXPERIENCE) == 160
        assert m.entry_heights(SectionKind.EXPERIENCE) == {0: 70, 1: 90}

    def test_when_entry_index_not_numeric_then_falls_back_to_class_names(self, probe):
        # Arrange
        items = [
            SurfaceElement(
                "div",
                classes=("experience-item",),
                attrs={"data-entry-index": key},
                height=h,
            )
            for key, h in (("job-a", 120), ("job-b", 80))
        ]
        title = SurfaceElement("h2", classes=("section-title",), lines=("Experience",), height=20)
        section = SurfaceElement("section", classes=("section",), height=220, children=[title, *items])
        renderer = _surface_renderer(SurfaceElement("div", children=[section]))

        # Act
        m = probe.measure(renderer)

        # Assert
        assert m.entry_heights(SectionKind.EXPERIENCE) == {0: 120, 1: 80}
        assert m.heading_height(SectionKind.EXPERIENCE) == 20


class TestColumns:
    """Tests for sidebar/main column tagging."""

    def test_single_column_surface_is_full_width(self, probe, resume_factory, fake_renderer_factory):
        content, heights = resume_factory(header=100, skills=[20], experience=[200])
        renderer = fake_renderer_factory(heights)
        renderer.mount(content)

        m = probe.measure(renderer)

        assert m.column(SectionKind.SKILLS) is Column.FULL_WIDTH
        assert m.column(SectionKind.EXPERIENCE) is Column.FULL_WIDTH
        assert not m.has_sidebar

    def test_sections_tagged_with_their_container(self, probe, resume_factory, fake_renderer_factory):
        # Arrange
        content, heights = resume_factory(
            header=100, profile=60, skills=[20, 20], experience=[200], languages=[15]
        )
        renderer = fake_renderer_factory(
            heights, sidebar=(SectionKind.SKILLS, SectionKind.LANGUAGES)
        )
        renderer.mount(content)

        # Act
        m = probe.measure(renderer)

        # Assert
        assert m.has_sidebar
        assert m.column(SectionKind.HEADER) is Column.FULL_WIDTH
        assert m.column(SectionKind.PROFILE) is Column.MAIN
        assert m.column(SectionKind.SKILLS) is Column.SIDEBAR
        assert m.column(SectionKind.LANGUAGES) is Column.SIDEBAR
        assert m.column(SectionKind.EXPERIENCE) is Column.MAIN
        assert m.entry_heights(SectionKind.SKILLS) == {0: 20, 1: 20}
        assert all(
            b.column is Column.SIDEBAR for b in m.blocks if b.kind is SectionKind.SKILLS
        )


class TestMeasureInnerPadding:
    """Tests for GeometryProbe.measure_inner_padding."""

    def test_reads_resume_box_padding(self, probe, resume_factory, fake_renderer_factory):
        content, heights = resume_factory(header=50)
        renderer = fake_renderer_factory(heights, padding=(24, 18))
        renderer.mount(content)
        assert probe.measure_inner_padding(renderer) == InnerPadding(top=24, bottom=18)

    def test_when_no_resume_box_then_zero(self, probe):
        renderer = _surface_renderer(SurfaceElement("div", padding_top=99))
        assert probe.measure_inner_padding(renderer) == InnerPadding()

    def test_when_no_surface_then_zero(self, probe):
        renderer = MagicMock()
        renderer.surface = None
        assert probe.measure_inner_padding(renderer) == InnerPadding()

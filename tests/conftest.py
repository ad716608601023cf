import pytest
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

# Add src to sys.path so we can import resume_layout
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from resume_layout.core.models import (  # noqa: E402
    ContentUnit,
    ExperienceItem,
    HeaderBlock,
    ListEntry,
    ProfileBlock,
    ProjectItem,
    EducationItem,
    ResumeContent,
    SectionKind,
    VISIT_ORDER,
)
from resume_layout.rendering.renderer import Renderer  # noqa: E402
from resume_layout.rendering.surface import RenderSurface, SurfaceElement  # noqa: E402


SECTION_TITLES = {
    SectionKind.PROFILE: "Profile",
    SectionKind.SKILLS: "Skills",
    SectionKind.EXPERIENCE: "Work Experience",
    SectionKind.PROJECTS: "Projects",
    SectionKind.EDUCATION: "Education",
    SectionKind.LANGUAGES: "Languages",
    SectionKind.ACHIEVEMENTS: "Achievements",
    SectionKind.CERTIFICATIONS: "Certifications",
}


class FakeRenderer(Renderer):
    """
    Renderer with fixed, known fragment heights.

    Heights are looked up by unit identity, so views that share unit
    objects with the source content measure the same as the source.
    """

    def __init__(
        self,
        heights: Dict[int, float],
        *,
        headings: Optional[Dict[SectionKind, float]] = None,
        padding: tuple = (0.0, 0.0),
        settle_after: int = 0,
        surface_after: int = 0,
        mount_error: Optional[Exception] = None,
        on_mount: Optional[Callable[[ResumeContent], None]] = None,
        sidebar: Sequence[SectionKind] = (),
        page_dimensions: Optional[tuple] = None,
        version: str = "fake@1",
    ):
        self.heights = heights
        self.headings = headings or {}
        self.padding = padding
        self.settle_after = settle_after
        self.surface_after = surface_after
        self.mount_error = mount_error
        self.on_mount = on_mount
        self._version = version
        self.sidebar = tuple(sidebar)
        self._page_dimensions = page_dimensions
        self._surface: Optional[RenderSurface] = None
        self._polls = 0
        self._surface_misses = 0
        self.mounted: List[ResumeContent] = []
        self.rendered: List[tuple] = []

    @property
    def version(self) -> str:
        return self._version

    @property
    def page_dimensions(self) -> Optional[tuple]:
        return self._page_dimensions

    @property
    def surface(self) -> Optional[RenderSurface]:
        if self._surface_misses < self.surface_after:
            self._surface_misses += 1
            return None
        return self._surface

    def is_settled(self) -> bool:
        self._polls += 1
        return self._polls > self.settle_after

    def mount(self, content: ResumeContent) -> None:
        if self.on_mount is not None:
            self.on_mount(content)
        if self.mount_error is not None:
            raise self.mount_error
        self.mounted.append(content)
        self._polls = 0
        self._surface_misses = 0
        self._surface = self.build_surface(content)

    def render_page(self, content: ResumeContent, page_number: int) -> dict:
        self.rendered.append((page_number, content))
        return {"page": page_number, "units": content.unit_count}

    def unit_height(self, unit: ContentUnit) -> float:
        return self.heights.get(id(unit), 0.0)

    def build_surface(self, content: ResumeContent) -> RenderSurface:
        box = SurfaceElement(
            "div",
            classes=("resume",),
            padding_top=self.padding[0],
            padding_bottom=self.padding[1],
        )
        if content.header is not None:
            box.children.append(
                SurfaceElement("header", classes=("header",), height=self.unit_height(content.header))
            )
        sidebar = SurfaceElement("aside", classes=("sidebar",))
        main = SurfaceElement("div", classes=("main",))
        for kind in VISIT_ORDER[1:]:
            units = content.section(kind)
            if not units:
                continue
            heading = self.headings.get(kind, 0.0)
            title = SurfaceElement(
                "h2", classes=("section-title",), lines=(SECTION_TITLES[kind],), height=heading
            )
            section = SurfaceElement("section", classes=("section",), children=[title])
            if kind is SectionKind.PROFILE:
                section.children.append(
                    SurfaceElement("p", classes=("profile-text",), height=self.unit_height(units[0]))
                )
            else:
                for position, unit in enumerate(units):
                    section.children.append(
                        SurfaceElement(
                            "div",
                            classes=("entry", f"{kind.value}-item"),
                            attrs={"data-entry-index": str(position)},
                            height=self.unit_height(unit),
                        )
                    )
            section.height = sum(child.height for child in section.children)
            if not self.sidebar:
                box.children.append(section)
            elif kind in self.sidebar:
                sidebar.children.append(section)
            else:
                main.children.append(section)

        if self.sidebar:
            sidebar.height = sum(c.height for c in sidebar.children)
            main.height = sum(c.height for c in main.children)
            row = SurfaceElement(
                "div", classes=("columns",), children=[sidebar, main], height=max(sidebar.height, main.height)
            )
            box.children.append(row)

        box.height = box.padding_top + box.padding_bottom + sum(c.height for c in box.children)
        root = SurfaceElement("resume-template", children=[box], height=box.height)
        return RenderSurface(root=root)


@pytest.fixture
def resume_factory():
    """
    Factory building content plus a unit-height table.

    Returns (content, heights) where heights maps id(unit) -> px.
    """
    def _create(
        header: Optional[float] = None,
        profile: Optional[float] = None,
        skills: Sequence[float] = (),
        experience: Sequence[float] = (),
        projects: Sequence[float] = (),
        education: Sequence[float] = (),
        languages: Sequence[float] = (),
        achievements: Sequence[float] = (),
        certifications: Sequence[float] = (),
    ):
        heights: Dict[int, float] = {}
        content = ResumeContent()

        def track(unit, height):
            heights[id(unit)] = height
            return unit

        if header is not None:
            content.header = track(HeaderBlock(name="Ada Lovelace", title="Engineer"), header)
        if profile is not None:
            content.profile = track(ProfileBlock(text="Builds analytical engines."), profile)
        content.skills = [track(ListEntry(text=f"skill {i}"), h) for i, h in enumerate(skills)]
        content.experience = [
            track(ExperienceItem(position=f"Role {i}", company="Acme"), h)
            for i, h in enumerate(experience)
        ]
        content.projects = [
            track(ProjectItem(name=f"Project {i}"), h) for i, h in enumerate(projects)
        ]
        content.education = [
            track(EducationItem(institution=f"School {i}", degree="BSc"), h)
            for i, h in enumerate(education)
        ]
        content.languages = [track(ListEntry(text=f"lang {i}"), h) for i, h in enumerate(languages)]
        content.achievements = [
            track(ListEntry(text=f"award {i}"), h) for i, h in enumerate(achievements)
        ]
        content.certifications = [
            track(ListEntry(text=f"cert {i}"), h) for i, h in enumerate(certifications)
        ]
        return content, heights

    return _create


@pytest.fixture
def fake_renderer_factory():
    """Factory to create FakeRenderer instances."""
    def _create(heights: Dict[int, float], **kwargs) -> FakeRenderer:
        return FakeRenderer(heights, **kwargs)
    return _create


@pytest.fixture
def sample_content() -> ResumeContent:
    """A small but complete resume."""
    return ResumeContent(
        header=HeaderBlock(
            name="Grace Hopper",
            title="Rear Admiral",
            contact={"email": "grace@example.com", "phone": "+1 555 0100"},
        ),
        profile=ProfileBlock(text="Computer scientist and compiler pioneer."),
        skills=[ListEntry(text="COBOL"), ListEntry(text="Compilers"), ListEntry(text="Leadership")],
        experience=[
            ExperienceItem(
                position="Senior Programmer",
                company="Eckert-Mauchly",
                start_date="1949",
                end_date="1959",
                description=["Wrote the A-0 compiler", "Led the FLOW-MATIC team"],
            ),
            ExperienceItem(position="Director", company="US Navy", start_date="1967", end_date="1986"),
        ],
        projects=[ProjectItem(name="COBOL", description="Business-oriented language")],
        education=[
            EducationItem(institution="Yale University", degree="PhD Mathematics", end_date="1934"),
        ],
        languages=[ListEntry(text="English")],
        achievements=[ListEntry(text="National Medal of Technology")],
        certifications=[],
    )

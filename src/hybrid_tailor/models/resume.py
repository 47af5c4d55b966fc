"""Pydantic models for stored resume content."""

from __future__ import annotations

from pydantic import Field

from hybrid_tailor.models.base import CamelModel

DEFAULT_SECTION_ORDER = ["summary", "experience", "skills", "education", "projects"]


class Contact(CamelModel):
    name: str
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None
    website: str | None = None


class Bullet(CamelModel):
    id: str
    text: str
    is_modified: bool = False


class Experience(CamelModel):
    id: str
    company: str
    title: str
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    bullets: list[Bullet] = Field(default_factory=list)


class Education(CamelModel):
    id: str
    institution: str
    degree: str
    field: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    gpa: str | None = None
    honors: list[str] = Field(default_factory=list)


class Skills(CamelModel):
    technical: list[str] = Field(default_factory=list)
    soft: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    certifications: list[str] = Field(default_factory=list)


class Project(CamelModel):
    id: str
    name: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)
    url: str | None = None


class WhyFitBullet(CamelModel):
    """One labelled line of the "Why I'm the Right Fit" section."""

    id: str
    label: str
    text: str
    is_modified: bool = False


class ResumeContent(CamelModel):
    contact: Contact | None = None
    summary: str | None = None
    why_fit: list[WhyFitBullet] = Field(default_factory=list)
    experiences: list[Experience] = Field(default_factory=list)
    education: list[Education] = Field(default_factory=list)
    skills: Skills = Field(default_factory=Skills)
    projects: list[Project] = Field(default_factory=list)
    section_order: list[str] = Field(default_factory=lambda: list(DEFAULT_SECTION_ORDER))

    def iter_bullets(self):
        """Yield (experience, bullet) pairs in document order."""
        for exp in self.experiences:
            for bullet in exp.bullets:
                yield exp, bullet

    @property
    def bullet_count(self) -> int:
        return sum(len(exp.bullets) for exp in self.experiences)

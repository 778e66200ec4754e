"""Parsed study guide, as produced by the syllabus scraper."""
from typing import Optional

from pydantic import Field

from studyplan.models.plan import Document, Subject


class ParsedGuide(Document):
    """Header metadata plus the subject/topic trees of an imported guide."""
    name: str
    cargo: str = ""
    edital: str = ""
    icon_url: str = Field("", alias="iconUrl")
    banca: Optional[str] = None
    subjects: list[Subject] = Field(default_factory=list)

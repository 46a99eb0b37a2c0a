"""Document structure models produced by the analyzer."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from blogagent.models.blocks import Block


class OutlineNode(BaseModel):
    """A heading and its nested sub-headings."""

    model_config = ConfigDict(frozen=True)

    id: str
    level: int = Field(ge=1)
    title: str
    block_index: int = Field(ge=0)
    children: list["OutlineNode"] = Field(default_factory=list)


class Section(BaseModel):
    """The contiguous run of blocks after one heading, as a half-open range."""

    model_config = ConfigDict(frozen=True)

    id: str
    heading: OutlineNode | None = None
    content: list[Block] = Field(default_factory=list)
    word_count: int = 0
    start_index: int = 0
    end_index: int = 0

    @property
    def title(self) -> str | None:
        return self.heading.title if self.heading is not None else None

    def has_subheading(self, level: int = 3) -> bool:
        return any(b.heading_level == level for b in self.content)


class DocumentStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_words: int = 0
    total_paragraphs: int = 0
    total_headings: int = 0
    reading_time_minutes: int = 0
    average_sentence_length: int = 0


class DocumentStructure(BaseModel):
    """Outline + sections + stats. A pure function of the block sequence."""

    model_config = ConfigDict(frozen=True)

    outline: list[OutlineNode] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
    stats: DocumentStats = Field(default_factory=DocumentStats)

    def level2_sections(self) -> list[Section]:
        return [s for s in self.sections if s.heading is not None and s.heading.level == 2]

    def find_section(self, title: str, *, level: int = 2) -> Section | None:
        for s in self.sections:
            if s.heading is not None and s.heading.level == level and s.heading.title == title:
                return s
        return None

"""Editor block models.

Editor payloads carry block content in three shapes: a plain string, an array of inline runs
(strings or ``{"type": "text", "text": ...}`` objects, possibly nested links), or nothing at
all. Everything is normalized into the closed :data:`BlockContent` union on ingestion so the
rest of the pipeline never inspects raw shapes.
"""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from blogagent.errors import AnalysisError
from blogagent.logging import get_logger

logger = get_logger(__name__)


class InlineRun(BaseModel):
    """A styled run of inline text."""

    model_config = ConfigDict(frozen=True)

    type: str = "text"
    text: str = ""
    styles: dict[str, Any] = Field(default_factory=dict)


class PlainText(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["plain"] = "plain"
    text: str


class Runs(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["runs"] = "runs"
    runs: list[InlineRun] = Field(default_factory=list)


class Empty(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["empty"] = "empty"


BlockContent = Annotated[Union[PlainText, Runs, Empty], Field(discriminator="kind")]


def _run_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        if "text" in item:
            return str(item.get("text") or "")
        nested = item.get("content")
        if isinstance(nested, list):
            return "".join(_run_text(x) for x in nested)
    return ""


def normalize_content(raw: Any) -> PlainText | Runs | Empty:
    """Convert any raw block content shape into the :data:`BlockContent` union."""

    if isinstance(raw, (PlainText, Runs, Empty)):
        return raw
    if isinstance(raw, str):
        return PlainText(text=raw)
    if isinstance(raw, list):
        runs: list[InlineRun] = []
        for item in raw:
            if isinstance(item, InlineRun):
                runs.append(item)
                continue
            styles = item.get("styles") if isinstance(item, Mapping) else None
            runs.append(
                InlineRun(
                    type=str(item.get("type", "text")) if isinstance(item, Mapping) else "text",
                    text=_run_text(item),
                    styles=dict(styles) if isinstance(styles, Mapping) else {},
                )
            )
        return Runs(runs=runs)
    return Empty()


class Block(BaseModel):
    """A typed content unit (heading, paragraph, bulletListItem, ...)."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    type: str = "paragraph"
    props: dict[str, Any] = Field(default_factory=dict)
    content: BlockContent = Field(default_factory=Empty)
    children: list["Block"] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        content = data.get("content")
        already_tagged = isinstance(content, Mapping) and content.get("kind") in {"plain", "runs", "empty"}
        if not already_tagged:
            data["content"] = normalize_content(content)
        if data.get("props") is None:
            data["props"] = {}
        if data.get("children") is None:
            data["children"] = []
        return data

    @classmethod
    def from_raw(cls, raw: Any) -> "Block":
        """Validate one raw editor item, raising :class:`AnalysisError` when it is unusable."""

        if not isinstance(raw, Mapping):
            raise AnalysisError(f"expected a block object, got {type(raw).__name__}")
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise AnalysisError(str(e)) from e

    @property
    def text(self) -> str:
        """Concatenated inline text."""

        if isinstance(self.content, PlainText):
            return self.content.text
        if isinstance(self.content, Runs):
            return "".join(r.text for r in self.content.runs)
        return ""

    @property
    def is_heading(self) -> bool:
        return self.type == "heading"

    @property
    def heading_level(self) -> int | None:
        if not self.is_heading:
            return None
        level = self.props.get("level")
        try:
            level = int(level)
        except (TypeError, ValueError):
            return 1
        return level if level >= 1 else 1

    def to_editor(self) -> dict[str, Any]:
        """Render back to the editor's raw block shape."""

        out: dict[str, Any] = {"type": self.type, "props": dict(self.props)}
        if self.id is not None:
            out["id"] = self.id
        if isinstance(self.content, PlainText):
            out["content"] = [{"type": "text", "text": self.content.text, "styles": {}}]
        elif isinstance(self.content, Runs):
            out["content"] = [r.model_dump() for r in self.content.runs]
        else:
            out["content"] = []
        if self.children:
            out["children"] = [c.to_editor() for c in self.children]
        return out


def heading(level: int, text: str) -> Block:
    return Block(type="heading", props={"level": level}, content=PlainText(text=text))


def paragraph(text: str) -> Block:
    return Block(type="paragraph", content=PlainText(text=text))


def coerce_blocks(items: Iterable[Any] | None) -> list[Block]:
    """Normalize a raw block sequence.

    Items that cannot be interpreted as blocks become empty ``unknown`` blocks so that block
    indices stay aligned with the caller's document.
    """

    blocks: list[Block] = []
    for i, item in enumerate(items or []):
        if isinstance(item, Block):
            blocks.append(item)
            continue
        try:
            blocks.append(Block.from_raw(item))
        except AnalysisError as e:
            logger.debug("Malformed block at index %d treated as empty: %s", i, e)
            blocks.append(Block(type="unknown"))
    return blocks

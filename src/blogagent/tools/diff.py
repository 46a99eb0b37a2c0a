"""Modification preview and diff statistics.

Modifications address the document by section (``target`` title or ``paragraph_index`` into
``DocumentStructure.sections``) or by an explicit ``block_range``. All anchors are resolved
against the original document; edits never see each other's effects.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from blogagent.analysis.document_analyzer import analyze_document
from blogagent.models.blocks import Block, coerce_blocks, heading
from blogagent.models.document import DocumentStructure, Section
from blogagent.models.generation import Modification
from blogagent.models.review import Change, DiffResult, DiffStats
from blogagent.utils.markdown import markdown_to_blocks
from blogagent.utils.text import count_block_words, count_words

_REPLACING = {"replace", "replace_paragraph"}
_ADDING = {"append", "insert", "add_section"}


def _clamp(i: int, n: int) -> int:
    return max(0, min(i, n))


def resolve_section(mod: Modification, structure: DocumentStructure) -> Section | None:
    """Section addressed by ``mod``: title match first, then ``paragraph_index``."""

    if mod.target:
        for s in structure.sections:
            if s.title == mod.target:
                return s
    idx = mod.paragraph_index
    if idx is not None and 0 <= idx < len(structure.sections):
        return structure.sections[idx]
    return None


@dataclass(frozen=True)
class _Edit:
    start: int
    end: int
    new_blocks: list[Block]


def _plan_edit(mod: Modification, blocks: Sequence[Block], structure: DocumentStructure) -> _Edit | None:
    n = len(blocks)
    new_blocks = markdown_to_blocks(mod.content or "")
    section = resolve_section(mod, structure)

    if mod.type == "update_title":
        return None

    if mod.type == "delete":
        if mod.block_range is not None:
            return _Edit(_clamp(mod.block_range[0], n), _clamp(mod.block_range[1], n), [])
        if section is None:
            return None
        return _Edit(section.start_index, section.end_index, [])

    if mod.type in _REPLACING:
        if mod.block_range is not None:
            return _Edit(_clamp(mod.block_range[0], n), _clamp(mod.block_range[1], n), new_blocks)
        if section is None:
            return _Edit(n, n, new_blocks)
        # Keep the existing heading unless the new content brings its own.
        starts_with_heading = bool(new_blocks) and new_blocks[0].is_heading
        if section.heading is not None and not starts_with_heading:
            return _Edit(section.start_index + 1, section.end_index, new_blocks)
        return _Edit(section.start_index, section.end_index, new_blocks)

    if mod.type == "add_section" and mod.title and not (new_blocks and new_blocks[0].is_heading):
        new_blocks = [heading(2, mod.title)] + new_blocks

    if mod.type == "insert" and mod.position is not None:
        pos = _clamp(mod.position, n)
        return _Edit(pos, pos, new_blocks)
    if mod.type == "append" and section is not None:
        return _Edit(section.end_index, section.end_index, new_blocks)
    return _Edit(n, n, new_blocks)


def _plan_edits(
    blocks: Sequence[Block], modifications: Sequence[Modification], structure: DocumentStructure | None
) -> list[tuple[Modification, _Edit]]:
    structure = structure or analyze_document(blocks)
    planned: list[tuple[Modification, _Edit]] = []
    for mod in modifications:
        edit = _plan_edit(mod, blocks, structure)
        if edit is not None:
            planned.append((mod, edit))
    return planned


def apply_modifications(
    current: Sequence[Block | dict[str, Any]],
    modifications: Sequence[Modification],
    *,
    structure: DocumentStructure | None = None,
) -> list[Block]:
    """Return a new block list with ``modifications`` applied; ``current`` is untouched."""

    blocks = coerce_blocks(current)
    result = list(blocks)
    # Apply from the end so earlier anchors stay valid.
    edits = sorted(_plan_edits(blocks, modifications, structure), key=lambda p: (p[1].start, p[1].end), reverse=True)
    for _, edit in edits:
        result[edit.start : edit.end] = edit.new_blocks
    return result


def calculate_diff(
    current: Sequence[Block | dict[str, Any]],
    modifications: Sequence[Modification],
    *,
    structure: DocumentStructure | None = None,
) -> DiffResult:
    blocks = coerce_blocks(current)
    changes: list[Change] = []
    stats = {"blocks_added": 0, "blocks_modified": 0, "blocks_deleted": 0, "words_added": 0, "words_deleted": 0}

    # The post title is not a block; title changes are reported at index -1.
    changes.extend(
        Change(type="modify", block_index=-1, new_content=mod.title or mod.content or "")
        for mod in modifications
        if mod.type == "update_title"
    )

    for mod, edit in _plan_edits(blocks, modifications, structure):
        removed = blocks[edit.start : edit.end]
        removed_words = count_block_words(removed)

        if mod.type == "delete":
            stats["blocks_deleted"] += len(removed)
            stats["words_deleted"] += removed_words
            for offset, b in enumerate(removed):
                changes.append(Change(type="delete", block_index=edit.start + offset, old_content=b.text))
            continue

        added_words = count_words(mod.content or "")
        stats["words_added"] += added_words

        if mod.type in _REPLACING:
            stats["blocks_modified"] += 1
            stats["words_deleted"] += removed_words
            changes.append(
                Change(
                    type="modify",
                    block_index=edit.start,
                    old_content="\n\n".join(b.text for b in removed),
                    new_content=mod.content or "",
                )
            )
            continue

        stats["blocks_added"] += len(edit.new_blocks)
        for offset, b in enumerate(edit.new_blocks):
            changes.append(Change(type="add", block_index=edit.start + offset, new_content=b.text))

    return DiffResult(changes=changes, stats=DiffStats(**stats))

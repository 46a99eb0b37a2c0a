"""Document analyzer.

Turns a flat block sequence into an outline forest, a partition of sections and summary
statistics. Pure and deterministic: no I/O, one scan to build the outline plus one pass to
slice sections.
"""

from __future__ import annotations

import math
from typing import Any, Sequence

from blogagent.logging import get_logger
from blogagent.models.blocks import Block, coerce_blocks
from blogagent.models.document import DocumentStats, DocumentStructure, OutlineNode, Section
from blogagent.utils.text import blocks_to_text, count_block_words, split_sentences, words

logger = get_logger(__name__)

WORDS_PER_MINUTE = 200


class _Node:
    """Mutable builder for :class:`OutlineNode` while the stack is live."""

    __slots__ = ("level", "title", "block_index", "children")

    def __init__(self, level: int, title: str, block_index: int) -> None:
        self.level = level
        self.title = title
        self.block_index = block_index
        self.children: list[_Node] = []

    def freeze(self) -> OutlineNode:
        return OutlineNode(
            id=f"heading-{self.block_index}",
            level=self.level,
            title=self.title,
            block_index=self.block_index,
            children=[c.freeze() for c in self.children],
        )


class DocumentAnalyzer:
    """Outline, sections and stats for a block sequence."""

    def analyze(self, blocks: Sequence[Block | dict[str, Any]]) -> DocumentStructure:
        normalized = coerce_blocks(blocks)
        outline = self.generate_outline(normalized)
        sections = self.parse_sections(normalized, outline)
        stats = self.calculate_stats(normalized)
        return DocumentStructure(outline=outline, sections=sections, stats=stats)

    @staticmethod
    def generate_outline(blocks: Sequence[Block]) -> list[OutlineNode]:
        roots: list[_Node] = []
        stack: list[_Node] = []

        for index, block in enumerate(blocks):
            level = block.heading_level
            if level is None:
                continue

            node = _Node(level=level, title=block.text, block_index=index)

            # Nearest enclosing node is the closest one with a strictly smaller level,
            # so skipped levels (H1 -> H3) still nest.
            while stack and stack[-1].level >= level:
                stack.pop()

            if stack:
                stack[-1].children.append(node)
            else:
                roots.append(node)
            stack.append(node)

        return [r.freeze() for r in roots]

    @staticmethod
    def flatten_outline(outline: Sequence[OutlineNode]) -> list[OutlineNode]:
        result: list[OutlineNode] = []

        def traverse(nodes: Sequence[OutlineNode]) -> None:
            for node in nodes:
                result.append(node)
                if node.children:
                    traverse(node.children)

        traverse(outline)
        return sorted(result, key=lambda n: n.block_index)

    def parse_sections(self, blocks: Sequence[Block], outline: Sequence[OutlineNode]) -> list[Section]:
        if not blocks:
            return []

        headings = self.flatten_outline(outline)
        sections: list[Section] = []

        if not headings:
            content = list(blocks)
            return [
                Section(
                    id="section-0",
                    heading=None,
                    content=content,
                    word_count=count_block_words(content),
                    start_index=0,
                    end_index=len(blocks),
                )
            ]

        # Blocks before the first heading form a headingless lead section so that
        # sections always cover the whole document.
        first = headings[0].block_index
        if first > 0:
            lead = list(blocks[:first])
            sections.append(
                Section(
                    id="section-0",
                    heading=None,
                    content=lead,
                    word_count=count_block_words(lead),
                    start_index=0,
                    end_index=first,
                )
            )

        for idx, node in enumerate(headings):
            start = node.block_index
            end = headings[idx + 1].block_index if idx + 1 < len(headings) else len(blocks)
            content = list(blocks[start + 1 : end])
            sections.append(
                Section(
                    id=node.id,
                    heading=node,
                    content=content,
                    word_count=count_block_words(content),
                    start_index=start,
                    end_index=end,
                )
            )

        return sections

    @staticmethod
    def calculate_stats(blocks: Sequence[Block]) -> DocumentStats:
        text = blocks_to_text(blocks)
        total_words = len(words(text))
        sentences = split_sentences(text)

        return DocumentStats(
            total_words=total_words,
            total_paragraphs=sum(1 for b in blocks if b.type == "paragraph"),
            total_headings=sum(1 for b in blocks if b.is_heading),
            reading_time_minutes=math.ceil(total_words / WORDS_PER_MINUTE),
            average_sentence_length=round(total_words / len(sentences)) if sentences else 0,
        )


_default_analyzer = DocumentAnalyzer()


def analyze_document(blocks: Sequence[Block | dict[str, Any]]) -> DocumentStructure:
    """Module-level shortcut for :meth:`DocumentAnalyzer.analyze`."""

    return _default_analyzer.analyze(blocks)

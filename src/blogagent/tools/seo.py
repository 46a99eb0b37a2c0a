"""Heuristic SEO check for generated content."""

from __future__ import annotations

import re

from blogagent.models.review import HeadingCheck, KeywordCheck, SEOAnalysis, TitleCheck

TITLE_MIN_CHARS = 30
TITLE_MAX_CHARS = 60

_H2_LINE_RE = re.compile(r"^##\s+\S", re.MULTILINE)
_H3_LINE_RE = re.compile(r"^###\s+\S", re.MULTILINE)
# Block JSON ({"type": "heading", "props": {"level": 2}}) is accepted as well as markdown.
_H2_JSON_RE = re.compile(r'"level"\s*:\s*2\b')
_H3_JSON_RE = re.compile(r'"level"\s*:\s*3\b')
_KEYWORD_RE = re.compile(r"[一-龥]{2,}|[A-Za-z]{4,}")


def count_headings(content: str) -> int:
    """Number of level-2 and level-3 headings."""

    return sum(
        len(p.findall(content)) for p in (_H2_LINE_RE, _H3_LINE_RE, _H2_JSON_RE, _H3_JSON_RE)
    )


def has_h2(content: str) -> bool:
    return bool(_H2_LINE_RE.search(content) or _H2_JSON_RE.search(content))


def main_keyword(title: str) -> str | None:
    """The title's first multi-character token (CJK run >= 2 or Latin word >= 4)."""

    m = _KEYWORD_RE.search(title or "")
    return m.group(0) if m else None


def keyword_density(content: str, keyword: str | None) -> float:
    """Keyword occurrences per 100 characters, scaled by 100."""

    if not keyword or not content:
        return 0.0
    occurrences = content.lower().count(keyword.lower())
    return occurrences / (len(content) / 100) * 100


def check_seo(content: str, title: str) -> SEOAnalysis:
    """Score ``content`` under ``title`` on a 0-10 scale."""

    title = title or ""
    title_len = len(title)
    title_optimal = TITLE_MIN_CHARS <= title_len <= TITLE_MAX_CHARS

    h2 = has_h2(content)
    heading_count = count_headings(content)
    keyword = main_keyword(title)
    density = keyword_density(content, keyword)

    score = 0
    if title_optimal:
        score += 4
    elif title_len > 0:
        score += 2
    if h2:
        score += 3
    if heading_count >= 3:
        score += 2
    if 1 < density < 5:
        score += 1

    return SEOAnalysis(
        title=TitleCheck(
            length=title_len,
            optimal=title_optimal,
            suggestion="Title too short, recommended 30-60 characters" if title_len < TITLE_MIN_CHARS else None,
        ),
        headings=HeadingCheck(
            has_h2=h2,
            count=heading_count,
            suggestion=None if h2 else "Missing H2 subheadings, affects SEO",
        ),
        keywords=KeywordCheck(keyword=keyword, density=round(density, 2)),
        overall_score=score,
    )

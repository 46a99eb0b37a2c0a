"""JSON-object extraction from free-form LLM output.

模型经常在 JSON 前后附带说明文字或 ```json 代码块，这里提供一个轻量级、
可复用的提取工具，供 Planner / Generator 共用。

Balancing braces cannot be done with a regular expression, so extraction is an explicit
scanner that tracks ``in_string`` / ``escape`` / brace depth.
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from blogagent.logging import get_logger

logger = get_logger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\n?")


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers while keeping their contents."""

    return _FENCE_RE.sub("", text or "").strip()


def find_json_object(text: str) -> Optional[str]:
    """Return the first balanced ``{...}`` substring, ignoring braces inside strings.

    Returns ``None`` when no complete object is present.
    """

    if not text:
        return None

    depth = 0
    start = -1
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if escape:
            escape = False
            continue
        if ch == "\\":
            if in_string:
                escape = True
            continue
        if ch == '"':
            # Quotes only count once an object has opened; prose may contain stray quotes.
            if depth > 0:
                in_string = not in_string
            continue
        if in_string:
            continue
        if ch == "{":
            if depth == 0:
                start = i
            depth += 1
        elif ch == "}" and depth > 0:
            depth -= 1
            if depth == 0 and start != -1:
                return text[start : i + 1]

    return None


def repair_json_string(raw: str) -> str:
    """Escape raw newlines/tabs that appear inside string literals.

    Models frequently emit multi-line markdown inside ``"content"`` without escaping it.
    Carriage returns inside strings are dropped.
    """

    out: list[str] = []
    in_string = False
    escaped = False

    for ch in raw:
        if ch == '"' and not escaped:
            in_string = not in_string
            out.append(ch)
        elif in_string and ch == "\n":
            out.append("\\n")
        elif in_string and ch == "\r":
            pass
        elif in_string and ch == "\t":
            out.append("\\t")
        else:
            out.append(ch)

        escaped = ch == "\\" and not escaped

    return "".join(out)


def extract_json_object(text: str) -> Optional[Dict[str, Any]]:
    """从文本中尽可能提取一个 JSON 对象。

    策略（从严格到宽松）：
        1. 直接用括号扫描器找到第一个完整的 ``{...}``；外层 ```json 代码块位于括号之外，不影响扫描，
           而字符串内部的代码块原样保留。
        2. 标准 ``json.loads`` 失败时，修复字符串中未转义的换行后再试一次。
        3. 仍失败时，去掉 markdown 代码块标记后重新扫描。

    Returns ``None`` rather than raising when nothing parseable is found.
    """

    if not text or not text.strip():
        return None

    stripped = strip_code_fences(text)
    sources = (text, stripped) if stripped != text.strip() else (text,)
    found = False
    for source in sources:
        candidate = find_json_object(source)
        if candidate is None:
            continue
        found = True
        obj = _loads_object(candidate)
        if obj is not None:
            return obj

    if not found:
        logger.debug("extract_json_object: no balanced object found")
    else:
        logger.debug("extract_json_object: object found but not parseable after repair")
    return None


def _loads_object(candidate: str) -> Optional[Dict[str, Any]]:
    for attempt in (candidate, repair_json_string(candidate)):
        try:
            obj = json.loads(attempt)
        except json.JSONDecodeError:
            continue
        return obj if isinstance(obj, dict) else None
    return None

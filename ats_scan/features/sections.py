from __future__ import annotations

import re
from dataclasses import dataclass

_BULLET_CHARS = "•◦▪●■◆▶►-–—*·"
_BULLET_PATTERN = re.compile(rf"^\s*(?:[{re.escape(_BULLET_CHARS)}]\s*|\d+[\.\)]\s+)")
_MAX_HEADING_WORDS = 5


@dataclass(frozen=True)
class SectionSpan:
    """Half-open range of line indexes covering a section body, heading excluded."""

    start: int
    end: int

    def __contains__(self, index: object) -> bool:
        return isinstance(index, int) and self.start <= index < self.end


def normalize_line(line: str) -> str:
    return re.sub(r"\s+", " ", line).strip()


def is_bullet_like(line: str) -> bool:
    return bool(_BULLET_PATTERN.match(line)) and bool(strip_bullet_prefix(line))


def strip_bullet_prefix(line: str) -> str:
    return _BULLET_PATTERN.sub("", line, count=1).strip()


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def is_heading_like(line: str) -> bool:
    stripped = normalize_line(line)
    if not stripped or is_bullet_like(stripped):
        return False
    if any(char.isdigit() for char in stripped) or "@" in stripped:
        return False
    return len(stripped.rstrip(":").split()) <= _MAX_HEADING_WORDS


def find_section_span(
    lines: list[str],
    start_markers: tuple[str, ...],
    end_markers: tuple[str, ...],
    *,
    heading_pattern: re.Pattern[str] | None = None,
) -> SectionSpan | None:
    """Locate the body of the first section whose heading mentions a start marker.

    The body runs until the next heading that mentions one of the end markers,
    or to the end of the document. When ``heading_pattern`` is given the start
    heading must also match it in full.
    """
    start: int | None = None
    for index, line in enumerate(lines):
        if not is_heading_like(line) or not contains_any(line, start_markers):
            continue
        if heading_pattern is None or heading_pattern.fullmatch(normalize_line(line).rstrip(":")):
            start = index + 1
            break
    if start is None:
        return None

    for index in range(start, len(lines)):
        line = lines[index]
        if is_heading_like(line) and contains_any(line, end_markers) and not contains_any(line, start_markers):
            return SectionSpan(start=start, end=index)
    return SectionSpan(start=start, end=len(lines))


def ordered_unique(values: list[str]) -> list[str]:
    seen: set[str] = set()
    output: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        output.append(value)
    return output

"""Split a free-text outline into per-chapter excerpts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

PLACEHOLDER_CHAPTER_TITLE = "Chapter {number}"

_CHAPTER_HEADING_PATTERN = re.compile(
    r"^\s*(?:#+\s*)?Chapter\s+(\d+)\b\s*[:.\-–—]?\s*(.*)$",
    re.IGNORECASE,
)
_TITLE_SPLIT_PATTERN = re.compile(r"\s+[—–-]\s+")
_BULLET_PATTERN = re.compile(r"^\s*(?:[-*•]+|\d+[.)])\s+")
_SENTENCE_END_PATTERN = re.compile(r"[.!?](?:\s|$)")
_PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n\s*\n")


@dataclass(frozen=True)
class OutlineSegment:
    number: int
    title: str
    excerpt: str
    segmented: bool


def _normalise_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value or "").strip()


def _split_heading(raw_content: str) -> Tuple[str, str]:
    """Split a heading remainder such as ``The Gala — she meets him`` into title and summary."""

    if not raw_content:
        return "", ""
    parts = _TITLE_SPLIT_PATTERN.split(raw_content, maxsplit=1)
    if len(parts) == 2:
        return parts[0].strip(), parts[1].strip()
    return raw_content.strip(), ""


def _parse_chapter_sections(outline: str) -> Dict[int, Tuple[str, str]]:
    """Return ``{number: (title, excerpt)}`` for outlines with ``Chapter N:`` headings."""

    sections: Dict[int, Tuple[str, str]] = {}
    current_number: int | None = None
    current_title = ""
    current_lines: List[str] = []

    def _flush() -> None:
        if current_number is None or current_number in sections:
            return
        excerpt = "\n".join(current_lines).strip()
        sections[current_number] = (current_title, excerpt)

    for line in outline.splitlines():
        match = _CHAPTER_HEADING_PATTERN.match(line)
        if match:
            _flush()
            current_number = int(match.group(1))
            title, summary = _split_heading(_normalise_whitespace(match.group(2)))
            current_title = title
            current_lines = [summary] if summary else []
            continue
        if current_number is None:
            continue
        stripped = line.strip()
        if stripped:
            current_lines.append(stripped)

    _flush()
    return sections


def _outline_blocks(outline: str, chapter_count: int) -> List[str]:
    paragraphs = [block.strip() for block in _PARAGRAPH_SPLIT_PATTERN.split(outline) if block.strip()]
    if len(paragraphs) >= chapter_count:
        return paragraphs
    return [line.strip() for line in outline.splitlines() if line.strip()]


def _title_from_text(text: str, max_words: int = 6) -> str:
    first_line = next((line for line in text.splitlines() if line.strip()), "")
    candidate = _BULLET_PATTERN.sub("", first_line).strip()
    candidate, _ = _split_heading(candidate)
    sentence_end = _SENTENCE_END_PATTERN.search(candidate)
    if sentence_end:
        candidate = candidate[: sentence_end.start()]
    words = candidate.split()[:max_words]
    return " ".join(words).strip(" ,;:")


def split_outline(outline: str, chapter_count: int) -> List[OutlineSegment]:
    """Return one :class:`OutlineSegment` per chapter, in chapter order.

    Outlines with explicit ``Chapter N: Title`` headings are split on those
    headings. Otherwise paragraphs (or, failing that, lines) are divided into
    ``chapter_count`` contiguous groups. When the outline is too short to
    divide, every chapter receives the whole outline and no title suggestion.
    """

    cleaned = (outline or "").strip()
    if chapter_count < 1:
        return []

    sections = _parse_chapter_sections(cleaned)
    if sections:
        segments = []
        for number in range(1, chapter_count + 1):
            if number in sections:
                title, excerpt = sections[number]
                segments.append(
                    OutlineSegment(number=number, title=title, excerpt=excerpt or title or cleaned, segmented=True)
                )
            else:
                segments.append(OutlineSegment(number=number, title="", excerpt=cleaned, segmented=False))
        return segments

    blocks = _outline_blocks(cleaned, chapter_count)
    if len(blocks) < chapter_count:
        return [
            OutlineSegment(number=number, title="", excerpt=cleaned, segmented=False)
            for number in range(1, chapter_count + 1)
        ]

    segments = []
    total = len(blocks)
    for index in range(chapter_count):
        start = index * total // chapter_count
        end = (index + 1) * total // chapter_count
        group = blocks[start:end]
        segments.append(
            OutlineSegment(
                number=index + 1,
                title=_title_from_text(group[0]),
                excerpt="\n\n".join(group),
                segmented=True,
            )
        )
    return segments


def outline_segment(outline: str, chapter_count: int, number: int) -> OutlineSegment:
    segments = split_outline(outline, chapter_count)
    return segments[number - 1]


def placeholder_chapter_title(number: int) -> str:
    return PLACEHOLDER_CHAPTER_TITLE.format(number=number)


def suggest_chapter_title(segment: OutlineSegment) -> str:
    return segment.title or placeholder_chapter_title(segment.number)

"""Assemble saved chapters into a single exportable manuscript."""
from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app

from ..models import Chapter
from .chapters import count_words, list_chapters
from .outline import placeholder_chapter_title
from .projects import get_project

MANUSCRIPT_EXTENSION = ".md"
DEFAULT_MANUSCRIPT_FILENAME = "manuscript.md"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


class ManuscriptExportError(RuntimeError):
    """Raised when writing a manuscript to disk fails."""


@dataclass(frozen=True)
class ManuscriptExport:
    content: str
    filename: str
    chapter_numbers: Tuple[int, ...]
    missing_chapters: Tuple[int, ...]
    word_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "content": self.content,
            "filename": self.filename,
            "chapter_numbers": list(self.chapter_numbers),
            "missing_chapters": list(self.missing_chapters),
            "word_count": self.word_count,
        }


def _clean(value: Optional[str]) -> str:
    """Return ``value`` stripped of leading/trailing whitespace."""

    if not value:
        return ""
    return str(value).strip()


def format_chapter_section(chapter: Chapter) -> str:
    title = _clean(chapter.title) or placeholder_chapter_title(chapter.number)
    return f"Chapter {chapter.number}: {title}\n\n{_clean(chapter.content)}"


def manuscript_filename(project_title: Optional[str]) -> str:
    """Derive a filesystem-safe export name from the project title."""

    normalised = unicodedata.normalize("NFKD", _clean(project_title))
    ascii_title = normalised.encode("ascii", "ignore").decode("ascii").lower()
    slug = _SLUG_PATTERN.sub("-", ascii_title).strip("-")
    if not slug:
        return current_app.config.get("DEFAULT_MANUSCRIPT_FILENAME") or DEFAULT_MANUSCRIPT_FILENAME
    return f"{slug}{MANUSCRIPT_EXTENSION}"


def export_manuscript(project_id: Any) -> ManuscriptExport:
    """Concatenate saved chapters in ascending order.

    Empty chapters are skipped and reported in ``missing_chapters``; they
    never block the export.
    """

    project = get_project(project_id)

    sections: List[str] = []
    included: List[int] = []
    missing: List[int] = []
    total_words = 0
    for chapter in list_chapters(project.id):
        if not chapter.is_saved or not _clean(chapter.content):
            missing.append(chapter.number)
            continue
        sections.append(format_chapter_section(chapter))
        included.append(chapter.number)
        total_words += chapter.word_count or count_words(chapter.content)

    content = "\n\n".join(sections)
    if content:
        content += "\n"

    current_app.logger.info(
        "Exported project %s: chapters %s included, %s skipped",
        project.id,
        included,
        missing,
    )
    return ManuscriptExport(
        content=content,
        filename=manuscript_filename(project.title),
        chapter_numbers=tuple(included),
        missing_chapters=tuple(missing),
        word_count=total_words,
    )


def write_manuscript(export: ManuscriptExport, output_dir: Optional[Path] = None) -> Path:
    """Write ``export`` to ``output_dir`` as a UTF-8 encoded file."""

    resolved_path = Path(output_dir or Path.cwd()) / export.filename
    try:
        resolved_path.write_text(export.content, encoding="utf-8")
    except OSError as exc:
        raise ManuscriptExportError(f"Unable to write manuscript: {exc}") from exc
    return resolved_path


__all__ = [
    "ManuscriptExport",
    "ManuscriptExportError",
    "export_manuscript",
    "format_chapter_section",
    "manuscript_filename",
    "write_manuscript",
]

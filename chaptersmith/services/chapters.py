"""Chapter lifecycle: validation, word counting and persistence of saved prose."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from ..errors import (
    ChapterNotFound,
    ChapterWriteConflict,
    EmptyContent,
    InvalidTitle,
    PolicyWarning,
    WordCountOutOfRange,
)
from ..extensions import db
from ..models import CHAPTER_STATUS_SAVED, CHAPTER_TITLE_MAX_LENGTH, Chapter
from .outline import outline_segment, suggest_chapter_title
from .pov import normalize_pov, resolve_pov
from .projects import ensure_chapter_in_range, get_project, load_project

DEFAULT_MIN_WORDS = 1400
DEFAULT_MAX_WORDS = 1800


@dataclass
class SavedChapter:
    chapter: Chapter
    word_count: int
    in_range: bool
    warnings: List[PolicyWarning] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word_count": self.word_count,
            "in_range": self.in_range,
            "warnings": [warning.to_dict() for warning in self.warnings],
            "chapter": self.chapter.to_dict(),
        }


def count_words(text: Optional[str]) -> int:
    """Return the number of non-empty whitespace-separated tokens in ``text``."""

    if not text:
        return 0
    return len(text.split())


def word_count_bounds() -> Tuple[int, int]:
    config = current_app.config
    return (
        int(config.get("CHAPTER_MIN_WORDS", DEFAULT_MIN_WORDS)),
        int(config.get("CHAPTER_MAX_WORDS", DEFAULT_MAX_WORDS)),
    )


def is_within_word_range(word_count: int) -> bool:
    min_words, max_words = word_count_bounds()
    return min_words <= word_count <= max_words


def _strict_word_count(strict: Optional[bool]) -> bool:
    if strict is not None:
        return strict
    return bool(current_app.config.get("STRICT_WORD_COUNT", False))


def _clean_chapter_title(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidTitle("Chapter title must be text.", field="title")
    cleaned = " ".join(value.split())
    if len(cleaned) > CHAPTER_TITLE_MAX_LENGTH:
        raise InvalidTitle(
            f"Chapter title must be at most {CHAPTER_TITLE_MAX_LENGTH} characters.",
            field="title",
            details={"max_length": CHAPTER_TITLE_MAX_LENGTH},
        )
    return cleaned


def save_chapter(
    project_id: Any,
    number: Any,
    title: Any,
    content: Any,
    pov_used: Any = None,
    *,
    strict: Optional[bool] = None,
) -> SavedChapter:
    """Validate and store chapter prose, overwriting any earlier save.

    Every check runs before the row is touched, so a rejected save leaves
    the stored chapter as it was. The word-count window is advisory unless
    ``strict`` (or the ``STRICT_WORD_COUNT`` setting) is enabled.
    """

    project = load_project(project_id)
    number = ensure_chapter_in_range(project, number)

    cleaned_content = content.strip() if isinstance(content, str) else ""
    if not cleaned_content:
        raise EmptyContent()

    chapter_title = _clean_chapter_title(title)
    if not chapter_title:
        segment = outline_segment(project.outline, project.chapter_count, number)
        chapter_title = suggest_chapter_title(segment)

    pov = normalize_pov(pov_used, field="pov_used") or resolve_pov(project.pov_mode, number)

    word_count = count_words(cleaned_content)
    min_words, max_words = word_count_bounds()
    in_range = is_within_word_range(word_count)
    warnings: List[PolicyWarning] = []
    if not in_range:
        if _strict_word_count(strict):
            raise WordCountOutOfRange(word_count, min_words, max_words)
        warnings.append(
            PolicyWarning(
                code="word_count_out_of_range",
                message=(
                    f"Chapter {number} has {word_count} words; the target is "
                    f"{min_words}-{max_words}. Saved as a draft."
                ),
                field="content",
            )
        )

    chapter = Chapter.query.filter_by(project_id=project.id, number=number).first()
    if chapter is None:
        chapter = Chapter(project_id=project.id, number=number)

    chapter.title = chapter_title
    chapter.content = cleaned_content
    chapter.pov_used = pov
    chapter.word_count = word_count
    chapter.status = CHAPTER_STATUS_SAVED
    db.session.add(chapter)

    try:
        db.session.commit()
    except (StaleDataError, IntegrityError) as exc:
        db.session.rollback()
        current_app.logger.warning(
            "Concurrent save rejected for chapter %s of project %s: %s", number, project.id, exc
        )
        raise ChapterWriteConflict(project.id, number) from exc
    except SQLAlchemyError:
        db.session.rollback()
        raise

    current_app.logger.info(
        "Saved chapter %s of project %s (%s words, pov=%s)", number, project.id, word_count, pov
    )
    for warning in warnings:
        current_app.logger.warning("Project %s: %s", project.id, warning.message)

    return SavedChapter(chapter=chapter, word_count=word_count, in_range=in_range, warnings=warnings)


def get_chapter(project_id: Any, number: Any) -> Chapter:
    project = get_project(project_id)
    number = ensure_chapter_in_range(project, number)
    chapter = Chapter.query.filter_by(project_id=project.id, number=number).first()
    if chapter is None:
        raise ChapterNotFound(project.id, number)
    return chapter


def list_chapters(project_id: Any) -> List[Chapter]:
    """Return every chapter of the project, ``empty`` ones included, by number."""

    project = get_project(project_id)
    return (
        Chapter.query.filter_by(project_id=project.id)
        .order_by(Chapter.number.asc())
        .all()
    )

"""Project aggregate: creation, lookup, title updates and cascading deletion."""

from __future__ import annotations

from typing import Any, List, Mapping, Optional, Union

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..errors import (
    ChapterNumberOutOfRange,
    ImmutableField,
    InvalidChapterCount,
    InvalidGenre,
    InvalidOutline,
    InvalidPovMode,
    InvalidTitle,
    ProjectNotFound,
)
from ..extensions import db
from ..models import (
    CHAPTER_STATUS_EMPTY,
    DEFAULT_GENRE,
    GENRES,
    MAX_CHAPTER_COUNT,
    MIN_CHAPTER_COUNT,
    POV_FEMALE,
    POV_MODES,
    PROJECT_TITLE_MAX_LENGTH,
    Chapter,
    Project,
)
from .pov import validate_chapter_number

IMMUTABLE_PROJECT_FIELDS = ("id", "outline", "chapter_count", "pov_mode", "genre")


def _clean_title(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidTitle("Project title must be text.", field="title")
    cleaned = value.strip()
    if len(cleaned) > PROJECT_TITLE_MAX_LENGTH:
        raise InvalidTitle(
            f"Project title must be at most {PROJECT_TITLE_MAX_LENGTH} characters.",
            field="title",
            details={"max_length": PROJECT_TITLE_MAX_LENGTH},
        )
    return cleaned or None


def _clean_outline(value: Any) -> str:
    cleaned = value.strip() if isinstance(value, str) else ""
    if not cleaned:
        raise InvalidOutline("An outline is required to create a project.", field="outline")
    return cleaned


def _clean_chapter_count(value: Any) -> int:
    if isinstance(value, str) and value.strip().isdecimal():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidChapterCount("Chapter count must be a whole number.", field="chapter_count")
    if not MIN_CHAPTER_COUNT <= value <= MAX_CHAPTER_COUNT:
        raise InvalidChapterCount(
            f"Chapter count must be between {MIN_CHAPTER_COUNT} and {MAX_CHAPTER_COUNT}.",
            field="chapter_count",
            details={"minimum": MIN_CHAPTER_COUNT, "maximum": MAX_CHAPTER_COUNT, "value": value},
        )
    return value


def _clean_pov_mode(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return POV_FEMALE
    cleaned = value.strip().lower() if isinstance(value, str) else value
    if cleaned not in POV_MODES:
        raise InvalidPovMode(
            f"Unknown POV mode '{value}'.",
            field="pov_mode",
            details={"allowed": list(POV_MODES)},
        )
    return cleaned


def _clean_genre(value: Any) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return DEFAULT_GENRE
    cleaned = value.strip().lower() if isinstance(value, str) else value
    if cleaned not in GENRES:
        raise InvalidGenre(
            f"Unknown genre '{value}'.",
            field="genre",
            details={"allowed": list(GENRES)},
        )
    return cleaned


def create_project(
    *,
    outline: Any,
    chapter_count: Any,
    pov_mode: Any = POV_FEMALE,
    genre: Any = DEFAULT_GENRE,
    title: Any = None,
) -> Project:
    """Validate the inputs and persist a project with all chapters ``empty``."""

    project = Project(
        title=_clean_title(title),
        outline=_clean_outline(outline),
        chapter_count=_clean_chapter_count(chapter_count),
        pov_mode=_clean_pov_mode(pov_mode),
        genre=_clean_genre(genre),
    )
    for number in range(1, project.chapter_count + 1):
        project.chapters.append(Chapter(number=number, status=CHAPTER_STATUS_EMPTY, word_count=0))

    db.session.add(project)
    _commit()
    current_app.logger.info(
        "Created project %s with %s chapters (pov=%s, genre=%s)",
        project.id,
        project.chapter_count,
        project.pov_mode,
        project.genre,
    )
    return project


def get_project(project_id: Any) -> Project:
    project = None
    if isinstance(project_id, int) and not isinstance(project_id, bool):
        project = db.session.get(Project, project_id)
    if project is None:
        raise ProjectNotFound(project_id)
    return project


def load_project(project_or_id: Union[Project, Any]) -> Project:
    if isinstance(project_or_id, Project):
        return project_or_id
    return get_project(project_or_id)


def list_projects() -> List[Project]:
    return Project.query.order_by(Project.created_at.desc(), Project.id.desc()).all()


def update_project(project_id: Any, changes: Mapping[str, Any]) -> Project:
    """Apply a partial update; only the title is mutable.

    Immutable fields are accepted when they repeat the stored value, so a
    client may send back the full record it read.
    """

    project = get_project(project_id)

    rejected = sorted(
        key
        for key in changes
        if key in IMMUTABLE_PROJECT_FIELDS and changes[key] != getattr(project, key)
    )
    if rejected:
        raise ImmutableField(
            f"These project fields cannot be changed after creation: {', '.join(rejected)}.",
            field=rejected[0],
            details={"fields": rejected},
        )

    if "title" in changes:
        new_title = _clean_title(changes["title"])
        if project.title != new_title:
            project.title = new_title
            _commit()
            current_app.logger.info("Renamed project %s to %r", project.id, project.title)
    return project


def delete_project(project_id: Any) -> None:
    project = get_project(project_id)
    db.session.delete(project)
    _commit()
    current_app.logger.info("Deleted project %s and its chapters", project_id)


def ensure_chapter_in_range(project: Project, number: Any) -> int:
    is_integer = isinstance(number, int) and not isinstance(number, bool)
    if is_integer and not 1 <= number <= project.chapter_count:
        raise ChapterNumberOutOfRange(number, project.chapter_count)
    return validate_chapter_number(number)


def _commit() -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

from .extensions import db

POV_FEMALE = "female"
POV_MALE = "male"
POV_DUAL = "dual"
POV_MODES = (POV_FEMALE, POV_MALE, POV_DUAL)
LEAD_POVS = (POV_FEMALE, POV_MALE)

GENRES = ("general", "billionaire", "werewolf", "mafia")
DEFAULT_GENRE = "general"

MIN_CHAPTER_COUNT = 3
MAX_CHAPTER_COUNT = 6

CHAPTER_STATUS_EMPTY = "empty"
CHAPTER_STATUS_SAVED = "saved"

PROJECT_TITLE_MAX_LENGTH = 150
CHAPTER_TITLE_MAX_LENGTH = 255


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


class Project(db.Model):
    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(PROJECT_TITLE_MAX_LENGTH), nullable=True)
    outline = db.Column(db.Text, nullable=False)
    chapter_count = db.Column(db.Integer, nullable=False)
    pov_mode = db.Column(db.String(20), nullable=False, default=POV_FEMALE)
    genre = db.Column(db.String(50), nullable=False, default=DEFAULT_GENRE)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    chapters = db.relationship(
        "Chapter",
        backref="project",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="Chapter.number",
    )

    def to_dict(self, *, include_chapters: bool = True) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "title": self.title or "",
            "outline": self.outline,
            "chapter_count": self.chapter_count,
            "pov_mode": self.pov_mode,
            "genre": self.genre,
            "created_at": _isoformat(self.created_at),
            "updated_at": _isoformat(self.updated_at),
        }
        if include_chapters:
            payload["chapters"] = [chapter.to_summary() for chapter in self.chapters]
        return payload

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Project {self.id} {self.title!r} ({self.chapter_count} chapters)>"


class Chapter(db.Model):
    __tablename__ = "chapters"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer,
        db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    number = db.Column(db.Integer, nullable=False)
    title = db.Column(db.String(CHAPTER_TITLE_MAX_LENGTH), nullable=True)
    content = db.Column(db.Text, nullable=True)
    pov_used = db.Column(db.String(20), nullable=True)
    word_count = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(20), nullable=False, default=CHAPTER_STATUS_EMPTY)
    version = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("project_id", "number", name="uq_chapter_project_number"),
    )
    # UPDATEs are guarded by the version counter so racing saves raise StaleDataError.
    __mapper_args__ = {"version_id_col": version}

    @property
    def is_saved(self) -> bool:
        return self.status == CHAPTER_STATUS_SAVED

    def to_summary(self) -> Dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title or "",
            "status": self.status,
            "pov_used": self.pov_used,
            "word_count": self.word_count or 0,
        }

    def to_dict(self) -> Dict[str, Any]:
        payload = self.to_summary()
        payload.update(
            {
                "project_id": self.project_id,
                "content": self.content or "",
                "version": self.version,
                "updated_at": _isoformat(self.updated_at),
            }
        )
        return payload

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Chapter {self.number} of project {self.project_id} ({self.status})>"

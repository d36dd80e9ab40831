"""Error taxonomy shared by the service layer and the JSON API.

Every failure a caller can trigger is a subclass of :class:`ChapterSmithError`
and falls into one of three kinds: ``not_found``, ``validation`` or
``conflict``. Word-count policy findings are not errors; they travel as
:class:`PolicyWarning` values next to a successful result.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


class ChapterSmithError(RuntimeError):
    """Base class for expected, locally recoverable failures."""

    kind = "error"
    code = "error"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "error": self.message,
            "kind": self.kind,
            "code": self.code,
        }
        if self.field:
            payload["field"] = self.field
        if self.details:
            payload["details"] = self.details
        return payload


# ---- Not found ----

class NotFoundError(ChapterSmithError):
    kind = "not_found"
    code = "not_found"
    status_code = 404


class ProjectNotFound(NotFoundError):
    code = "project_not_found"

    def __init__(self, project_id: Any) -> None:
        super().__init__(
            f"Project {project_id} was not found.",
            field="project_id",
            details={"project_id": project_id},
        )


class ChapterNotFound(NotFoundError):
    code = "chapter_not_found"

    def __init__(self, project_id: Any, number: Any) -> None:
        super().__init__(
            f"Chapter {number} of project {project_id} was not found.",
            field="number",
            details={"project_id": project_id, "number": number},
        )


# ---- Validation ----

class ValidationError(ChapterSmithError):
    kind = "validation"
    code = "validation_error"
    status_code = 400


class InvalidPayload(ValidationError):
    code = "invalid_payload"


class InvalidPovMode(ValidationError):
    code = "invalid_pov_mode"


class InvalidPovOverride(ValidationError):
    code = "invalid_pov_override"


class InvalidChapterNumber(ValidationError):
    code = "invalid_chapter_number"


class ChapterNumberOutOfRange(ValidationError):
    code = "chapter_number_out_of_range"

    def __init__(self, number: int, chapter_count: int) -> None:
        super().__init__(
            f"Chapter {number} is outside the valid range 1-{chapter_count}.",
            field="number",
            details={"number": number, "minimum": 1, "maximum": chapter_count},
        )


class InvalidChapterCount(ValidationError):
    code = "invalid_chapter_count"


class InvalidGenre(ValidationError):
    code = "invalid_genre"


class InvalidOutline(ValidationError):
    code = "invalid_outline"


class InvalidTitle(ValidationError):
    code = "invalid_title"


class ImmutableField(ValidationError):
    code = "immutable_field"


class EmptyContent(ValidationError):
    code = "empty_content"

    def __init__(self) -> None:
        super().__init__("Chapter content is required before saving.", field="content")


class WordCountOutOfRange(ValidationError):
    code = "word_count_out_of_range"

    def __init__(self, word_count: int, minimum: int, maximum: int) -> None:
        super().__init__(
            f"Chapter has {word_count} words; it must be between {minimum} and {maximum}.",
            field="content",
            details={"word_count": word_count, "minimum": minimum, "maximum": maximum},
        )


# ---- Conflicts ----

class ConflictOnWrite(ChapterSmithError):
    kind = "conflict"
    code = "conflict_on_write"
    status_code = 409


class ChapterWriteConflict(ConflictOnWrite):
    code = "chapter_write_conflict"

    def __init__(self, project_id: Any, number: Any) -> None:
        super().__init__(
            f"Chapter {number} of project {project_id} was changed by another save; reload and try again.",
            field="number",
            details={"project_id": project_id, "number": number},
        )


@dataclass(frozen=True)
class PolicyWarning:
    """Non-blocking finding attached to a successful operation."""

    code: str
    message: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = [
    "ChapterNotFound",
    "ChapterNumberOutOfRange",
    "ChapterSmithError",
    "ChapterWriteConflict",
    "ConflictOnWrite",
    "EmptyContent",
    "ImmutableField",
    "InvalidChapterCount",
    "InvalidChapterNumber",
    "InvalidGenre",
    "InvalidOutline",
    "InvalidPayload",
    "InvalidPovMode",
    "InvalidPovOverride",
    "InvalidTitle",
    "NotFoundError",
    "PolicyWarning",
    "ProjectNotFound",
    "ValidationError",
    "WordCountOutOfRange",
]

"""Service layer for projects, chapter plans, saved chapters and exports."""

from __future__ import annotations

from .chapter_plan import GenerationPlan, plan_chapter  # noqa: F401
from .chapters import (  # noqa: F401
    SavedChapter,
    count_words,
    get_chapter,
    list_chapters,
    save_chapter,
)
from .manuscript import ManuscriptExport, export_manuscript  # noqa: F401
from .pov import resolve_pov  # noqa: F401
from .projects import (  # noqa: F401
    create_project,
    delete_project,
    get_project,
    list_projects,
    update_project,
)

__all__ = [
    "GenerationPlan",
    "ManuscriptExport",
    "SavedChapter",
    "count_words",
    "create_project",
    "delete_project",
    "export_manuscript",
    "get_chapter",
    "get_project",
    "list_chapters",
    "list_projects",
    "plan_chapter",
    "resolve_pov",
    "save_chapter",
    "update_project",
]

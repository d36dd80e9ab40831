"""Generation plans: the instructions handed to an external prose generator.

A plan is computed on demand from a project and a chapter number and is never
stored. Nothing here calls a language model; the caller forwards
``system_rules`` and ``user_prompt`` to whichever backend it uses and later
saves the returned prose through :mod:`chaptersmith.services.chapters`.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Union

from ..models import Project
from ..system_prompts import (
    POSITION_GUIDANCE,
    POV_DIRECTIVES,
    SYSTEM_PROMPTS,
    get_genre_label,
    get_genre_tone,
)
from .chapters import word_count_bounds
from .outline import OutlineSegment, outline_segment, suggest_chapter_title
from .pov import describe_pov_source, resolve_pov
from .projects import ensure_chapter_in_range, load_project

PROMPT_KEY = "chapter_drafting"


@dataclass(frozen=True)
class GenerationPlan:
    project_id: int
    number: int
    total_chapters: int
    resolved_pov: str
    pov_source: str
    chapter_title: str
    outline_excerpt: str
    system_rules: str
    user_prompt: str
    min_words: int
    max_words: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def plan_chapter(
    project: Union[Project, int],
    chapter_number: Any,
    override_pov: Optional[str] = None,
) -> GenerationPlan:
    """Build the generation plan for ``chapter_number`` of ``project``."""

    project = load_project(project)
    number = ensure_chapter_in_range(project, chapter_number)
    resolved_pov = resolve_pov(project.pov_mode, number, override_pov)
    segment = outline_segment(project.outline, project.chapter_count, number)
    min_words, max_words = word_count_bounds()

    return GenerationPlan(
        project_id=project.id,
        number=number,
        total_chapters=project.chapter_count,
        resolved_pov=resolved_pov,
        pov_source=describe_pov_source(override_pov),
        chapter_title=suggest_chapter_title(segment),
        outline_excerpt=segment.excerpt,
        system_rules=build_system_rules(project.genre, resolved_pov, min_words, max_words),
        user_prompt=build_user_prompt(project, segment, resolved_pov, min_words, max_words),
        min_words=min_words,
        max_words=max_words,
    )


def build_system_rules(genre: str, resolved_pov: str, min_words: int, max_words: int) -> str:
    config = SYSTEM_PROMPTS[PROMPT_KEY]
    lines: List[str] = [config["base"].strip(), "", "Rules:"]
    for index, rule in enumerate(config["rules"], start=1):
        lines.append(f"{index}. {rule.strip()}")
    lines.extend(
        [
            "",
            f"Genre focus ({get_genre_label(genre)}): {get_genre_tone(genre)}",
            POV_DIRECTIVES[resolved_pov],
            config["length"].format(min_words=min_words, max_words=max_words),
            config["format"].strip(),
        ]
    )
    return "\n".join(lines)


def _position_key(number: int, total: int) -> str:
    if number == 1:
        return "opening"
    if number == total:
        return "final"
    return "middle"


def build_user_prompt(
    project: Project,
    segment: OutlineSegment,
    resolved_pov: str,
    min_words: int,
    max_words: int,
) -> str:
    number = segment.number
    total = project.chapter_count
    lead = "female lead" if resolved_pov == "female" else "male lead"

    sections: List[str] = [
        f"Write Chapter {number} of {total} of the story outlined below.",
        "",
        "Full story outline:",
        project.outline.strip(),
        "",
    ]
    if segment.segmented:
        sections.extend(
            [
                f"Outline segment for Chapter {number}:",
                segment.excerpt,
                "",
                "Cover only this segment; earlier and later events belong to other chapters.",
            ]
        )
    else:
        sections.append(
            f"Cover the part of the outline that belongs in chapter {number} of {total}, "
            "keeping the pacing even across the whole story."
        )
    if segment.title:
        sections.append(f"Working title: {segment.title}")

    sections.extend(
        [
            "",
            POSITION_GUIDANCE[_position_key(number, total)],
            f"Narrate from the {lead}'s deep point of view.",
            f"Write strictly between {min_words} and {max_words} words, covering the relevant outline "
            "segment cohesively from the first scene to the last.",
        ]
    )
    return "\n".join(sections)

"""Point-of-view resolution for individual chapters."""

from __future__ import annotations

from typing import Any, Optional

from ..errors import InvalidChapterNumber, InvalidPovMode, InvalidPovOverride
from ..models import LEAD_POVS, POV_DUAL, POV_FEMALE, POV_MALE, POV_MODES

# Dual mode convention: the female lead narrates odd chapters, starting with chapter 1.
DUAL_ODD_CHAPTER_POV = POV_FEMALE
DUAL_EVEN_CHAPTER_POV = POV_MALE

POV_SOURCE_OVERRIDE = "override"
POV_SOURCE_POLICY = "policy"


def normalize_pov(value: Any, *, field: str = "override_pov") -> Optional[str]:
    """Return ``value`` as a lead POV, or ``None`` when it is absent or blank."""

    if value is None:
        return None
    if not isinstance(value, str):
        raise InvalidPovOverride("POV must be 'female' or 'male'.", field=field)
    cleaned = value.strip().lower()
    if not cleaned:
        return None
    if cleaned not in LEAD_POVS:
        raise InvalidPovOverride(
            f"Unknown POV '{value}'. Choose 'female' or 'male'.",
            field=field,
            details={"allowed": list(LEAD_POVS)},
        )
    return cleaned


def validate_chapter_number(chapter_number: Any) -> int:
    # bool is an int subclass; True must not pass as chapter 1.
    if isinstance(chapter_number, bool) or not isinstance(chapter_number, int) or chapter_number < 1:
        raise InvalidChapterNumber(
            "Chapter number must be a positive integer.",
            field="number",
            details={"number": chapter_number},
        )
    return chapter_number


def resolve_pov(pov_mode: str, chapter_number: int, override: Optional[str] = None) -> str:
    """Return the POV that governs ``chapter_number`` under ``pov_mode``.

    A non-blank ``override`` always wins. Under ``dual`` the POV alternates by
    chapter parity and depends on nothing but the chapter number, so plans can
    be prepared in any order or concurrently.
    """

    if pov_mode not in POV_MODES:
        raise InvalidPovMode(
            f"Unknown POV mode '{pov_mode}'.",
            field="pov_mode",
            details={"allowed": list(POV_MODES)},
        )
    validate_chapter_number(chapter_number)

    explicit = normalize_pov(override)
    if explicit:
        return explicit

    if pov_mode == POV_DUAL:
        return DUAL_ODD_CHAPTER_POV if chapter_number % 2 == 1 else DUAL_EVEN_CHAPTER_POV
    return pov_mode


def describe_pov_source(override: Optional[str]) -> str:
    return POV_SOURCE_OVERRIDE if normalize_pov(override) else POV_SOURCE_POLICY

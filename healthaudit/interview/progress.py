"""
Progress and summary views derived from catalog, profile and current step.

Everything here is a pure function of its arguments and safe to call on
every read.
"""
import math
from dataclasses import dataclass
from typing import List, Mapping, Tuple, Union

from .catalog import QuestionCatalog
from .profile import ProfileStore
from ..config import WELCOME_STEP, SUMMARY_STEP, NOT_PROVIDED

ProfileLike = Union[ProfileStore, Mapping[str, str]]


@dataclass(frozen=True)
class Progress:
    answered: int
    remaining: int
    percentage: int
    current_index: int
    total: int


def _is_answered(profile: ProfileLike, field: str) -> bool:
    value = profile.get(field)
    return isinstance(value, str) and bool(value.strip())


def round_half_up(number: float) -> int:
    """Round .5 away from zero for positive numbers (12.5 -> 13)."""
    return int(math.floor(number + 0.5))


def compute(catalog: QuestionCatalog, profile: ProfileLike, current_step_key: str) -> Progress:
    """
    Compute interview progress.

    ``current_index`` is 0 before the interview starts, ``total`` in summary,
    else the 1-based position of the current step (0 if it is unknown).
    """
    total = len(catalog)
    answered = sum(1 for field in catalog.fields() if _is_answered(profile, field))
    percentage = round_half_up(answered / total * 100) if total > 0 else 0

    if current_step_key == WELCOME_STEP:
        current_index = 0
    elif current_step_key == SUMMARY_STEP:
        current_index = total
    else:
        current_index = catalog.index_of(current_step_key) + 1

    return Progress(
        answered=answered,
        remaining=total - answered,
        percentage=percentage,
        current_index=current_index,
        total=total,
    )


def build_profile_summary(catalog: QuestionCatalog, profile: ProfileLike) -> List[Tuple[str, str]]:
    """Ordered (label, value) rows for the end-of-interview summary."""
    rows = []
    for step in catalog:
        value = profile.get(step.extracted_field_name)
        if not isinstance(value, str) or not value.strip():
            value = NOT_PROVIDED
        rows.append((step.display_label, value))
    return rows


def format_progress(progress: Progress) -> str:
    if progress.current_index == 0:
        position = "not started"
    else:
        position = f"step {progress.current_index} of {progress.total}"
    return (
        f"{progress.percentage}% ({progress.answered} answered, "
        f"{progress.remaining} remaining, {position})"
    )

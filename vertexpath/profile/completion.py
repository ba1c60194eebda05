"""Profile completion scoring and field visibility rules."""

import math

from vertexpath.profile.models import (
    CurrentStatus,
    EducationLevel,
    OPTIONAL_FIELDS,
    REQUIRED_FIELDS,
    SCALAR_FIELDS,
    ProfileDraft,
)

# Scoring weights (percentage points)
WEIGHT_REQUIRED = 60
WEIGHT_OPTIONAL = 40

EXPERIENCE_STATUSES = {CurrentStatus.WORKING.value, CurrentStatus.FREELANCER.value}
DEGREE_LEVELS = {EducationLevel.UG.value, EducationLevel.PG.value}


def is_filled(value) -> bool:
    """A string counts once it has non-whitespace content; a collection once non-empty."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return len(value) > 0


def _counts(draft: ProfileDraft, name: str) -> bool:
    return name not in draft.defaulted and is_filled(getattr(draft, name))


def completion_score(draft: ProfileDraft) -> int:
    """Weighted completion percentage, 0-100.

    60 points are spread over the required fields and 40 over the optional
    ones. Defaults the user has not confirmed yet do not count. Rounds half up.
    """
    required = sum(1 for name in REQUIRED_FIELDS if _counts(draft, name))
    optional = sum(1 for name in OPTIONAL_FIELDS if _counts(draft, name))

    raw = (
        WEIGHT_REQUIRED * required / len(REQUIRED_FIELDS)
        + WEIGHT_OPTIONAL * optional / len(OPTIONAL_FIELDS)
    )
    return int(math.floor(raw + 0.5))


def missing_fields(draft: ProfileDraft) -> list[str]:
    """Scored fields that are still empty, required ones first."""
    return [
        name
        for name in REQUIRED_FIELDS + OPTIONAL_FIELDS
        if not _counts(draft, name)
    ]


def experience_visible(current_status: str) -> bool:
    return current_status in EXPERIENCE_STATUSES


def visible_fields(draft: ProfileDraft) -> frozenset[str]:
    """Scalar fields the form should currently show and submit."""
    hidden = set()
    if not experience_visible(draft.current_status):
        hidden.add("experience_years")
    return frozenset(name for name in SCALAR_FIELDS if name not in hidden)


def field_labels(draft: ProfileDraft) -> dict[str, str]:
    """Labels for the fields whose meaning depends on other answers."""
    if draft.current_status == CurrentStatus.STUDENT.value:
        affiliation = "College/University"
    else:
        affiliation = "Company/Organization"

    if draft.education_level in DEGREE_LEVELS:
        detail = "Degree/Major"
    else:
        detail = "Program/Field"

    return {
        "college_or_company": affiliation,
        "education_detail": detail,
    }

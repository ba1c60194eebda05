"""Skill tag parsing and serialization."""

SEPARATOR = ","


def parse_skills(raw: str | None) -> list[str]:
    """Split a comma-separated skills string into ordered, unique tags.

    Entries are trimmed and empty entries dropped. Duplicates are matched on
    the exact trimmed string; the first occurrence wins.
    """
    if not raw:
        return []
    tags: list[str] = []
    for part in raw.split(SEPARATOR):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def serialize_skills(skills: list[str]) -> str:
    return ", ".join(skills)

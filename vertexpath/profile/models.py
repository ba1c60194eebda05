"""Profile data model — draft, persisted record, field enums."""

from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any, Mapping, Optional


class CurrentStatus(str, Enum):
    STUDENT = "student"
    WORKING = "working"
    FREELANCER = "freelancer"
    UNEMPLOYED = "unemployed"
    CAREER_CHANGE = "career_change"


class EducationLevel(str, Enum):
    HIGH_SCHOOL = "HighSchool"
    UG = "UG"
    PG = "PG"
    PHD = "PhD"
    DIPLOMA = "Diploma"
    CERTIFICATE = "Certificate"


class ExperienceBucket(str, Enum):
    ZERO_ONE = "0-1"
    ONE_THREE = "1-3"
    THREE_FIVE = "3-5"
    FIVE_TEN = "5-10"
    TEN_PLUS = "10+"


DEFAULT_STATUS = CurrentStatus.STUDENT.value
DEFAULT_EDUCATION_LEVEL = EducationLevel.UG.value
DEFAULTS = {
    "current_status": DEFAULT_STATUS,
    "education_level": DEFAULT_EDUCATION_LEVEL,
}

# Editable scalar fields, in form order
SCALAR_FIELDS = (
    "full_name",
    "bio",
    "current_status",
    "education_level",
    "education_detail",
    "college_or_company",
    "gender",
    "dob",
    "target_job",
    "experience_years",
    "industry",
    "location",
    "availability",
    "salary_expectation",
)

REQUIRED_FIELDS = ("full_name", "current_status", "education_level", "target_job")
OPTIONAL_FIELDS = ("education_detail", "college_or_company", "gender", "dob", "location")

# Fields restricted to an enum; "" is only accepted where listed in BLANK_ALLOWED
ENUM_FIELDS: dict[str, type[Enum]] = {
    "current_status": CurrentStatus,
    "education_level": EducationLevel,
    "experience_years": ExperienceBucket,
}
BLANK_ALLOWED = {"experience_years"}

# Spellings written by older clients
EDUCATION_ALIASES = {"High School": EducationLevel.HIGH_SCHOOL.value}


def allowed_values(name: str) -> set[str]:
    return {member.value for member in ENUM_FIELDS[name]}


@dataclass(frozen=True)
class AvatarBinary:
    """A candidate avatar image as received from the client."""

    content: bytes
    filename: str = ""
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ProfileDraft:
    """In-progress profile held for the lifetime of one editing session."""

    user_id: str
    full_name: str = ""
    bio: str = ""
    current_status: str = DEFAULT_STATUS
    education_level: str = DEFAULT_EDUCATION_LEVEL
    education_detail: str = ""
    college_or_company: str = ""
    gender: str = ""
    dob: str = ""
    target_job: str = ""
    experience_years: str = ""
    industry: str = ""
    location: str = ""
    availability: str = ""
    salary_expectation: str = ""
    skills: list[str] = field(default_factory=list)
    pending_avatar: Optional[AvatarBinary] = None
    avatar_preview: str = ""
    avatar_url: str = ""
    # Fields still holding an unconfirmed default; these do not count towards completion
    defaulted: set[str] = field(default_factory=lambda: set(DEFAULTS))

    @property
    def display_avatar(self) -> str:
        """Reference to show right now: the local preview wins until saved."""
        return self.avatar_preview or self.avatar_url

    def scalars(self) -> dict[str, str]:
        return {name: getattr(self, name) for name in SCALAR_FIELDS}

    def copy(self) -> "ProfileDraft":
        return replace(self, skills=list(self.skills), defaulted=set(self.defaulted))

    def to_dict(self) -> dict:
        data = {"user_id": self.user_id, **self.scalars()}
        data["skills"] = list(self.skills)
        data["avatar_url"] = self.avatar_url
        data["avatar_preview"] = self.avatar_preview
        data["has_pending_avatar"] = self.pending_avatar is not None
        return data


@dataclass
class PersistedProfile:
    """A profile row as stored by the profile store.

    Every field is optional; ``None`` means the column was absent or null.
    """

    full_name: Optional[str] = None
    bio: Optional[str] = None
    current_status: Optional[str] = None
    education_level: Optional[str] = None
    education_detail: Optional[str] = None
    college_or_company: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[str] = None
    target_job: Optional[str] = None
    experience_years: Optional[str] = None
    industry: Optional[str] = None
    location: Optional[str] = None
    availability: Optional[str] = None
    salary_expectation: Optional[str] = None
    skills: Optional[str] = None
    avatar_url: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "PersistedProfile":
        """Build from a row/dict, ignoring unknown keys and stringifying values."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in known or value is None:
                continue
            kwargs[key] = value if isinstance(value, str) else str(value)
        return cls(**kwargs)

    def to_record(self) -> dict[str, Optional[str]]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

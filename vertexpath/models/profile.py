"""Profile model — one row per user, keyed by the identity provider's user id."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from vertexpath.profile.models import PersistedProfile

from .base import Base


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    current_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    education_level: Mapped[str | None] = mapped_column(String(32), nullable=True)
    education_detail: Mapped[str | None] = mapped_column(String(255), nullable=True)
    college_or_company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    dob: Mapped[str | None] = mapped_column(String(10), nullable=True)  # YYYY-MM-DD
    target_job: Mapped[str | None] = mapped_column(String(255), nullable=True)
    experience_years: Mapped[str | None] = mapped_column(String(8), nullable=True)
    industry: Mapped[str | None] = mapped_column(String(255), nullable=True)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    availability: Mapped[str | None] = mapped_column(String(255), nullable=True)
    salary_expectation: Mapped[str | None] = mapped_column(String(255), nullable=True)
    skills: Mapped[str | None] = mapped_column(Text, nullable=True)  # comma-separated
    avatar_url: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def to_persisted(self) -> PersistedProfile:
        """Convert DB row to the PersistedProfile the engine reconciles from."""
        return PersistedProfile(
            full_name=self.full_name,
            bio=self.bio,
            current_status=self.current_status,
            education_level=self.education_level,
            education_detail=self.education_detail,
            college_or_company=self.college_or_company,
            gender=self.gender,
            dob=self.dob,
            target_job=self.target_job,
            experience_years=self.experience_years,
            industry=self.industry,
            location=self.location,
            availability=self.availability,
            salary_expectation=self.salary_expectation,
            skills=self.skills,
            avatar_url=self.avatar_url,
        )

"""Tests for completion scoring and visibility rules."""

import pytest

from vertexpath.profile.completion import (
    completion_score,
    field_labels,
    is_filled,
    missing_fields,
    visible_fields,
)
from vertexpath.profile.models import OPTIONAL_FIELDS, REQUIRED_FIELDS, ProfileDraft


def make_draft(**kwargs) -> ProfileDraft:
    draft = ProfileDraft(user_id="u1", **kwargs)
    draft.defaulted = set()
    return draft


class TestCompletionScore:
    def test_fresh_draft_is_zero(self):
        assert completion_score(ProfileDraft(user_id="u1")) == 0

    def test_required_fields_worth_sixty(self):
        draft = make_draft(full_name="Ada", target_job="Engineer")
        assert completion_score(draft) == 60

    def test_each_optional_worth_eight(self):
        draft = make_draft(full_name="Ada", target_job="Engineer", location="Remote")
        assert completion_score(draft) == 68
        draft.dob = "1990-01-01"
        assert completion_score(draft) == 76

    def test_everything_filled_is_hundred(self):
        values = {name: "x" for name in REQUIRED_FIELDS + OPTIONAL_FIELDS}
        values["current_status"] = "working"
        values["education_level"] = "PG"
        assert completion_score(make_draft(**values)) == 100

    def test_unscored_fields_do_not_count(self):
        draft = make_draft(bio="Hello", industry="Tech", salary_expectation="100k", skills=["Python"])
        # Only the (confirmed) status and education level count
        assert completion_score(draft) == 30

    @pytest.mark.parametrize("name", REQUIRED_FIELDS + OPTIONAL_FIELDS)
    def test_filling_a_field_never_lowers_score(self, name):
        draft = make_draft()
        setattr(draft, name, "")
        empty_score = completion_score(draft)
        setattr(draft, name, "value")
        assert completion_score(draft) >= empty_score

    def test_missing_fields_lists_required_first(self):
        draft = make_draft(full_name="Ada", location="Remote")
        assert missing_fields(draft) == [
            "target_job",
            "education_detail",
            "college_or_company",
            "gender",
            "dob",
        ]


class TestIsFilled:
    def test_strings(self):
        assert is_filled("a")
        assert not is_filled("")
        assert not is_filled(" \t ")
        assert not is_filled(None)

    def test_collections(self):
        assert is_filled(["Python"])
        assert not is_filled([])


class TestVisibility:
    @pytest.mark.parametrize("status", ["working", "freelancer"])
    def test_experience_visible_when_employed(self, status):
        assert "experience_years" in visible_fields(make_draft(current_status=status))

    @pytest.mark.parametrize("status", ["student", "unemployed", "career_change"])
    def test_experience_hidden_otherwise(self, status):
        visible = visible_fields(make_draft(current_status=status))
        assert "experience_years" not in visible
        assert "full_name" in visible

    def test_labels(self):
        labels = field_labels(make_draft(current_status="student", education_level="PG"))
        assert labels == {"college_or_company": "College/University", "education_detail": "Degree/Major"}

        labels = field_labels(make_draft(current_status="freelancer", education_level="Certificate"))
        assert labels == {"college_or_company": "Company/Organization", "education_detail": "Program/Field"}

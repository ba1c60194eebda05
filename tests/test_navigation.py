"""Tests for section routing."""

import pytest

from vertexpath.navigation import AFTER_PROFILE_SAVE, SECTIONS, SectionRouter


class TestSectionRouter:
    def test_starts_at_home(self):
        assert SectionRouter().current == "home"

    def test_navigate_records_event(self):
        router = SectionRouter()
        event = router.navigate("profile")
        assert (event.previous, event.current) == ("home", "profile")
        assert router.current == "profile"
        assert router.history == [event]

    def test_unknown_section_rejected(self):
        router = SectionRouter()
        with pytest.raises(ValueError):
            router.navigate("leaderboard")
        assert router.current == "home"
        assert router.history == []

    def test_history_is_bounded(self):
        router = SectionRouter(max_history=3)
        for section in ["profile", "analysis", "roadmap", "courses", "community"]:
            router.navigate(section)
        assert len(router.history) == 3
        assert router.history[-1].current == "community"

    def test_post_save_destination_is_a_section(self):
        assert AFTER_PROFILE_SAVE in SECTIONS

"""Unit tests for WindowMatcher."""

import pytest

from pip_follow.matcher import WindowMatcher
from pip_follow.models import WindowDescriptor


class LiteralRule:
    """Plain-string rule, no pattern syntax involved."""

    def __init__(self, expected: str):
        self.expected = expected

    def matches(self, text: str) -> bool:
        return text == self.expected


class TestTitleRequired:
    """A window without a title never matches."""

    @pytest.mark.parametrize("app_id", [None, "firefox", "org.mozilla.firefox", "mpv"])
    def test_missing_title_never_matches(self, pip_matcher, app_id):
        window = WindowDescriptor(id=1, title=None, app_id=app_id)

        assert pip_matcher.matches(window) is False

    def test_non_matching_title_rejected(self, pip_matcher):
        window = WindowDescriptor(id=1, title="Mozilla Firefox", app_id="firefox")

        assert pip_matcher.matches(window) is False


class TestAppIdOptional:
    """A missing app_id does not disqualify a window."""

    def test_matching_title_without_app_id_matches(self, pip_matcher):
        window = WindowDescriptor(id=1, title="Picture-in-Picture", app_id=None)

        assert pip_matcher.matches(window) is True

    def test_matching_title_and_app_id(self, pip_matcher, pip_window):
        assert pip_matcher.matches(pip_window) is True

    def test_present_app_id_must_match(self, pip_matcher):
        window = WindowDescriptor(id=1, title="Picture-in-Picture", app_id="chromium")

        assert pip_matcher.matches(window) is False

    def test_empty_app_id_is_checked_not_skipped(self, pip_matcher):
        window = WindowDescriptor(id=1, title="Picture-in-Picture", app_id="")

        assert pip_matcher.matches(window) is False


class TestInjectedRules:
    """Rules are injected and need only a matches(text) method."""

    def test_literal_rules(self):
        matcher = WindowMatcher(title_rule=LiteralRule("mpv"), app_id_rule=LiteralRule("mpv"))

        assert matcher.matches(WindowDescriptor(id=5, title="mpv", app_id="mpv"))
        assert matcher.matches(WindowDescriptor(id=5, title="mpv"))
        assert not matcher.matches(WindowDescriptor(id=5, title="mpv", app_id="vlc"))
        assert not matcher.matches(WindowDescriptor(id=5, app_id="mpv"))

    def test_app_id_rule_not_consulted_when_absent(self):
        class ExplodingRule:
            def matches(self, text):
                raise AssertionError("app_id rule should not run")

        matcher = WindowMatcher(title_rule=LiteralRule("x"), app_id_rule=ExplodingRule())

        assert matcher.matches(WindowDescriptor(id=1, title="x"))

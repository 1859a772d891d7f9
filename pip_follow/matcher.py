"""Decides whether a window is the one to follow across workspaces."""

from typing import Protocol

from .models import WindowDescriptor


class TextRule(Protocol):
    """Anything that can test a single string, e.g. a PatternRule."""

    def matches(self, text: str) -> bool: ...


class WindowMatcher:
    """Title/app_id predicate for the followed window.

    A window without a title never matches. A window without an app_id is
    judged on its title alone.
    """

    def __init__(self, title_rule: TextRule, app_id_rule: TextRule):
        self.title_rule = title_rule
        self.app_id_rule = app_id_rule

    def matches(self, window: WindowDescriptor) -> bool:
        if window.title is None:
            return False

        app_id_matches = True
        if window.app_id is not None:
            app_id_matches = self.app_id_rule.matches(window.app_id)

        return self.title_rule.matches(window.title) and app_id_matches

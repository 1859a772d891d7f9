"""Pattern rules used to match window titles and app IDs."""

from dataclasses import dataclass
import fnmatch
import re


@dataclass(frozen=True)
class PatternRule:
    """Text pattern with an optional type prefix.

    Attributes:
        pattern: Pattern string with optional prefix (regex:, glob:, literal:)

    Pattern Types:
        - literal: Exact match (default, or "literal:" prefix)
        - glob: Shell-style glob over the whole text (e.g., "glob:*firefox")
        - regex: Regex searched anywhere in the text (e.g., "regex:^Picture-in-Picture$")

    Examples:
        >>> PatternRule("regex:firefox$").matches("org.mozilla.firefox")
        True
        >>> PatternRule("glob:Picture-in-*").matches("Picture-in-Picture")
        True
        >>> PatternRule("mpv").matches("mpv")
        True
    """

    pattern: str

    def __post_init__(self):
        """Validate pattern syntax."""
        if not self.pattern:
            raise ValueError("Pattern cannot be empty")

        pattern_type, raw_pattern = self._parse_pattern()

        if not raw_pattern:
            raise ValueError(f"{pattern_type.capitalize()} pattern cannot be empty")

        if pattern_type == "regex":
            try:
                object.__setattr__(self, "_compiled", re.compile(raw_pattern))
            except re.error as e:
                raise ValueError(f"Invalid regex pattern '{raw_pattern}': {e}")

    def _parse_pattern(self) -> tuple[str, str]:
        """Parse pattern into (type, raw_pattern) tuple.

        Returns:
            ("regex", "firefox$") for "regex:firefox$"
            ("glob", "*firefox") for "glob:*firefox"
            ("literal", "mpv") for "literal:mpv" or "mpv"
        """
        if self.pattern.startswith("regex:"):
            return ("regex", self.pattern[6:])
        elif self.pattern.startswith("glob:"):
            return ("glob", self.pattern[5:])
        elif self.pattern.startswith("literal:"):
            return ("literal", self.pattern[8:])
        else:
            return ("literal", self.pattern)

    @property
    def kind(self) -> str:
        return self._parse_pattern()[0]

    def matches(self, text: str) -> bool:
        """Test if text matches this pattern."""
        pattern_type, raw_pattern = self._parse_pattern()

        if pattern_type == "regex":
            return self._compiled.search(text) is not None
        elif pattern_type == "glob":
            return fnmatch.fnmatchcase(text, raw_pattern)
        else:
            return text == raw_pattern


def compile_pattern(pattern: str) -> PatternRule:
    """Compile a pattern string, raising ValueError if it is invalid."""
    return PatternRule(pattern)

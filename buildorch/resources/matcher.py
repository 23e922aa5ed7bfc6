"""Resource pattern matching with POSIX-style, segment-aware globs."""

from fnmatch import fnmatchcase
from typing import Iterable, List


def _segments(path: str) -> List[str]:
    return path.replace('\\', '/').strip('/').split('/')


def match_pattern(path: str, pattern: str) -> bool:
    """Match one relative path against one glob pattern.

    '*', '?' and '[...]' never cross a '/', so a pattern matches only paths
    with the same number of segments. Matching is case-sensitive.
    """
    path_parts = _segments(path)
    pattern_parts = _segments(pattern)
    if len(path_parts) != len(pattern_parts):
        return False
    return all(fnmatchcase(part, glob) for part, glob in zip(path_parts, pattern_parts))


def matches(path: str, patterns: Iterable[str]) -> bool:
    """True if path matches any of the patterns. No patterns match nothing."""
    return any(match_pattern(path, pattern) for pattern in patterns)


class ResourceMatcher:
    """Decides which resource paths are filtering targets."""

    def __init__(self, patterns: Iterable[str]):
        """Initialize matcher with a pattern set (OR semantics).

        Args:
            patterns: Glob patterns relative to the resource root
        """
        self.patterns = tuple(patterns)

    def matches(self, path: str) -> bool:
        return matches(path, self.patterns)

    def select(self, paths: Iterable[str]) -> List[str]:
        """Matching paths in deterministic lexicographic order, without duplicates."""
        return sorted({path for path in paths if self.matches(path)})

    def __repr__(self) -> str:
        return f"ResourceMatcher({list(self.patterns)!r})"

"""Glob matching for changed-file paths."""

from __future__ import annotations

from collections.abc import Sequence

from pathspec import PathSpec
from pathspec.patterns.gitignore import GitIgnorePatternError

from monoscope.errors import InvalidGlobError


class GlobMatcher:
    """A compiled list of globs, matched against forward-slash paths."""

    def __init__(self, patterns: Sequence[str], spec: PathSpec) -> None:
        self.patterns = tuple(patterns)
        self._spec = spec

    def match(self, path: str) -> bool:
        """Check a repo-relative, forward-slash-separated path."""
        return self._spec.match_file(path)

    def __repr__(self) -> str:
        return f"GlobMatcher({list(self.patterns)!r})"


def _anchor(pattern: str) -> str:
    # Patterns match from the repository root: ".env" is the root .env only,
    # "**/.env" is any .env.
    negated = pattern.startswith("!")
    body = pattern[1:] if negated else pattern
    if not body.startswith("/"):
        body = "/" + body
    return ("!" if negated else "") + body


def compile_globs(patterns: Sequence[str], *, option: str) -> GlobMatcher | None:
    """Compile globs into a matcher.

    Each pattern is matched against the whole repo-relative path, so a
    pattern without a slash only matches files at the repository root. Use
    ``**/`` to match at any depth.

    Args:
        patterns: Glob patterns (gitignore syntax, anchored at the root).
        option: Name of the option the patterns came from, used in errors.

    Returns:
        A matcher, or None when there are no patterns. None never matches;
        use ``matches_any`` rather than testing for it.

    Raises:
        InvalidGlobError: If a pattern is malformed.
    """
    if not patterns:
        return None
    for pattern in patterns:
        try:
            PathSpec.from_lines("gitignore", [pattern])
        except GitIgnorePatternError as e:
            raise InvalidGlobError(option, pattern, str(e)) from e
    anchored = [_anchor(p) for p in patterns]
    return GlobMatcher(patterns, PathSpec.from_lines("gitignore", anchored))


def matches_any(matcher: GlobMatcher | None, path: str) -> bool:
    """Match path against an optional matcher. A missing matcher matches nothing."""
    return matcher is not None and matcher.match(path)

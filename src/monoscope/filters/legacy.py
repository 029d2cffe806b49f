"""Translation of legacy selection flags into filter patterns."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class LegacyFilter:
    """Selection options that predate --filter.

    Attributes:
        include_dependencies: Also select dependencies of the entrypoints
            (``--include-dependencies``).
        skip_dependents: Do not select packages depending on the entrypoints
            (``--no-deps``).
        entrypoints: Package names or globs (``--scope``).
        since: Git reference used to find changed packages (``--since``).
    """

    include_dependencies: bool = False
    skip_dependents: bool = False
    entrypoints: list[str] = field(default_factory=list)
    since: str = ""

    def as_filter_patterns(self) -> list[str]:
        """Rewrite these options as filter patterns.

        Examples:
            - ``--scope app --include-dependencies`` -> ``...app...``
            - ``--scope app --since main --no-deps`` -> ``app...[main]``
            - ``--since main`` -> ``...[main]``
            - ``--scope !app`` -> ``!app``
        """
        prefix = "" if self.skip_dependents else "..."
        suffix = "..." if self.include_dependencies else ""
        since = f"[{self.since}]" if self.since else ""

        patterns: list[str] = []
        if self.entrypoints:
            # an entrypoint also matches when anything it depends on changed
            if since:
                since = "..." + since
            for entrypoint in self.entrypoints:
                if entrypoint.startswith("!"):
                    patterns.append(entrypoint)
                else:
                    patterns.append(f"{prefix}{entrypoint}{since}{suffix}")
        elif since:
            patterns.append(f"{prefix}{since}{suffix}")
        return patterns


def translate(legacy: LegacyFilter) -> list[str]:
    """Module-level alias for ``LegacyFilter.as_filter_patterns``."""
    return legacy.as_filter_patterns()

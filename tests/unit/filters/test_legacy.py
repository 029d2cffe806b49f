"""Tests for legacy flag translation."""

from __future__ import annotations

import pytest

from monoscope.filters.legacy import LegacyFilter, translate


class TestAsFilterPatterns:
    """Tests for LegacyFilter.as_filter_patterns."""

    @pytest.mark.parametrize(
        "legacy",
        [
            LegacyFilter(),
            LegacyFilter(include_dependencies=True),
            LegacyFilter(skip_dependents=True),
            LegacyFilter(include_dependencies=True, skip_dependents=True),
        ],
    )
    def test_no_entrypoints_no_since(self, legacy: LegacyFilter) -> None:
        """Without entrypoints or since nothing is emitted."""
        assert legacy.as_filter_patterns() == []

    def test_entrypoint_with_dependencies(self) -> None:
        assert translate(LegacyFilter(entrypoints=["app"], include_dependencies=True)) == [
            "...app..."
        ]

    def test_entrypoint_defaults_to_dependents(self) -> None:
        assert translate(LegacyFilter(entrypoints=["app"])) == ["...app"]

    def test_entrypoint_since_no_deps(self) -> None:
        legacy = LegacyFilter(entrypoints=["app"], since="main", skip_dependents=True)
        assert translate(legacy) == ["app...[main]"]

    def test_entrypoint_since_with_everything(self) -> None:
        legacy = LegacyFilter(entrypoints=["app"], since="main", include_dependencies=True)
        assert translate(legacy) == ["...app...[main]..."]

    def test_negation_passthrough(self) -> None:
        assert translate(LegacyFilter(entrypoints=["!app"])) == ["!app"]

    def test_negation_ignores_since_and_flags(self) -> None:
        legacy = LegacyFilter(
            entrypoints=["web", "!docs"], since="main", include_dependencies=True
        )
        assert translate(legacy) == ["...web...[main]...", "!docs"]

    def test_since_only(self) -> None:
        assert translate(LegacyFilter(since="main")) == ["...[main]"]

    def test_since_only_no_deps_with_dependencies(self) -> None:
        legacy = LegacyFilter(since="main", skip_dependents=True, include_dependencies=True)
        assert translate(legacy) == ["[main]..."]

    def test_multiple_entrypoints_keep_order(self) -> None:
        legacy = LegacyFilter(entrypoints=["b", "a*"], skip_dependents=True)
        assert translate(legacy) == ["b", "a*"]

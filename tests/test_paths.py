"""Tests for virtual path normalization."""

from __future__ import annotations

import pytest

from stashgate.core.errors import InvalidInput, InvalidPath
from stashgate.services.paths import normalize_path


class TestNormalizePath:
    def test_strips_surrounding_separators(self):
        assert normalize_path("/images/avatars/") == "images/avatars"

    def test_strips_whitespace(self):
        assert normalize_path("   docs/2024  ") == "docs/2024"

    @pytest.mark.parametrize("raw", [None, "", "   ", "/", "///"])
    def test_blank_means_no_path(self, raw):
        assert normalize_path(raw) is None

    @pytest.mark.parametrize("raw", ["../../etc", "images/../secrets", "..", "a/.."])
    def test_rejects_parent_segments(self, raw):
        with pytest.raises(InvalidPath):
            normalize_path(raw)

    def test_rejects_doubled_separators(self):
        with pytest.raises(InvalidPath):
            normalize_path("images//avatars")

    @pytest.mark.parametrize("raw", ["images/ava tars", "café", "a.b", "x%2F", "back\\slash", "q?x=1"])
    def test_rejects_characters_outside_allowed_set(self, raw):
        with pytest.raises(InvalidPath):
            normalize_path(raw)

    def test_allows_underscore_and_dash(self):
        assert normalize_path("team_a/sub-dir/2024") == "team_a/sub-dir/2024"

    def test_invalid_path_is_invalid_input(self):
        with pytest.raises(InvalidInput) as exc:
            normalize_path("../x")
        assert exc.value.reason == "invalid_path"
        assert exc.value.status_code == 400

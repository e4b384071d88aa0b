"""Tests for text_diff module."""

import pytest

from ptdiff.settings import get_settings
from ptdiff.text_diff import DiffOp, TextDiffer, rebuild_from, rebuild_to
from ptdiff.types import CleanupMode

PAIRS = [
    ("The cat sat", "The dog sat"),
    ("", "inserted"),
    ("deleted", ""),
    ("same", "same"),
    ("The quick brown fox", "A quick red fox jumps"),
    ("abc\uF000def\uF001", "ab\uF000xdef\uF001g"),
]


class TestTextDiffer:
    """Tests for TextDiffer.diff."""

    @pytest.mark.parametrize(("old", "new"), PAIRS)
    def test_script_rebuilds_both_sides(self, old: str, new: str) -> None:
        """EQUAL+DELETE gives the old text, EQUAL+INSERT the new text."""
        script = TextDiffer().diff(old, new)
        assert rebuild_from(script) == old
        assert rebuild_to(script) == new

    @pytest.mark.parametrize("cleanup", list(CleanupMode))
    def test_every_cleanup_mode_rebuilds(self, cleanup: CleanupMode) -> None:
        """The invariant holds for every cleanup mode."""
        differ = TextDiffer(cleanup=cleanup)
        for old, new in PAIRS:
            script = differ.diff(old, new)
            assert rebuild_from(script) == old
            assert rebuild_to(script) == new

    def test_simple_replacement(self) -> None:
        """A replaced word becomes one delete and one insert."""
        script = TextDiffer().diff("The cat sat", "The dog sat")
        assert script == [
            (DiffOp.EQUAL, "The "),
            (DiffOp.DELETE, "cat"),
            (DiffOp.INSERT, "dog"),
            (DiffOp.EQUAL, " sat"),
        ]

    def test_identical_texts(self) -> None:
        """Identical texts give a single equality."""
        assert TextDiffer().diff("same", "same") == [(DiffOp.EQUAL, "same")]

    def test_empty_texts(self) -> None:
        """Two empty strings give an empty script."""
        assert TextDiffer().diff("", "") == []

    def test_ops_are_diff_op(self) -> None:
        """Script operations are DiffOp members."""
        script = TextDiffer().diff("a", "b")
        assert all(isinstance(op, DiffOp) for op, _text in script)

    def test_reusable(self) -> None:
        """One differ gives the same result on repeated calls."""
        differ = TextDiffer()
        assert differ.diff("The cat sat", "The dog sat") == differ.diff(
            "The cat sat", "The dog sat"
        )


class TestTextDifferSettings:
    """Tests for TextDiffer configuration."""

    def test_defaults_from_settings(self) -> None:
        """Without arguments the differ follows the settings."""
        differ = TextDiffer()
        settings = get_settings()
        assert differ.cleanup == settings.cleanup
        assert differ._dmp.Diff_Timeout == settings.diff_timeout
        assert differ._dmp.Diff_EditCost == settings.diff_edit_cost

    def test_explicit_arguments_override(self) -> None:
        """Constructor arguments win over settings."""
        differ = TextDiffer(cleanup=CleanupMode.NONE, timeout=0, edit_cost=8)
        assert differ.cleanup == CleanupMode.NONE
        assert differ._dmp.Diff_Timeout == 0
        assert differ._dmp.Diff_EditCost == 8

    def test_env_selects_cleanup(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """PTDIFF_CLEANUP picks the cleanup mode."""
        monkeypatch.setenv("PTDIFF_CLEANUP", "semantic")
        get_settings.cache_clear()
        assert TextDiffer().cleanup == CleanupMode.SEMANTIC

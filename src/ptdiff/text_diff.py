"""Character-level text diff backed by diff-match-patch.

``diff_main`` computes a Myers shortest edit script; a cleanup pass then
merges trivial equalities so the hunks read naturally. The default
``efficiency`` cleanup only folds equalities shorter than ``Diff_EditCost``
that sit between edits, which keeps the script close to minimal.
"""

from __future__ import annotations

from enum import IntEnum

from diff_match_patch import diff_match_patch

from .settings import get_settings
from .types import CleanupMode


class DiffOp(IntEnum):
    """Edit script operations (values match diff-match-patch)."""

    DELETE = diff_match_patch.DIFF_DELETE
    EQUAL = diff_match_patch.DIFF_EQUAL
    INSERT = diff_match_patch.DIFF_INSERT


EditScript = list[tuple[DiffOp, str]]


class TextDiffer:
    """Reusable differ; holds configuration only, no per-call state."""

    def __init__(
        self,
        cleanup: CleanupMode | None = None,
        timeout: float | None = None,
        edit_cost: int | None = None,
    ) -> None:
        settings = get_settings()
        self.cleanup = cleanup if cleanup is not None else settings.cleanup
        self._dmp = diff_match_patch()
        self._dmp.Diff_Timeout = timeout if timeout is not None else settings.diff_timeout
        self._dmp.Diff_EditCost = (
            edit_cost if edit_cost is not None else settings.diff_edit_cost
        )

    def diff(self, from_text: str, to_text: str) -> EditScript:
        """Diff two strings.

        Concatenating the EQUAL and DELETE runs in order gives ``from_text``;
        concatenating the EQUAL and INSERT runs gives ``to_text``.
        """
        diffs = self._dmp.diff_main(from_text, to_text)
        if self.cleanup == CleanupMode.EFFICIENCY:
            self._dmp.diff_cleanupEfficiency(diffs)
        elif self.cleanup == CleanupMode.SEMANTIC:
            self._dmp.diff_cleanupSemantic(diffs)
        return [(DiffOp(op), text) for op, text in diffs if text]


def rebuild_from(script: EditScript) -> str:
    """Rebuild the "from" side of an edit script."""
    return "".join(text for op, text in script if op != DiffOp.INSERT)


def rebuild_to(script: EditScript) -> str:
    """Rebuild the "to" side of an edit script."""
    return "".join(text for op, text in script if op != DiffOp.DELETE)

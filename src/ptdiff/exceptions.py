"""Exception classes for ptdiff."""

from __future__ import annotations


class PortableTextDiffError(Exception):
    """Base class for ptdiff errors."""

    pass


class NoDisplayableValueError(PortableTextDiffError):
    """Raised when neither side of a block diff carries a block."""

    def __init__(self, message: str = "Can not display this diff") -> None:
        super().__init__(message)


class SymbolOverflowError(PortableTextDiffError):
    """Raised when a block needs more markers than a category has.

    Only raised under ``OverflowPolicy.ERROR``; the default policy leaves
    the extra entries unmarked.
    """

    def __init__(self, category: str, count: int, limit: int) -> None:
        super().__init__(
            f"{count} {category} entries exceed the {limit} available markers"
        )
        self.category = category
        self.count = count
        self.limit = limit

"""Error taxonomy shared by the model and the save-file loader.

Every validation failure carries an :class:`ErrorCategory` so callers (and
tests) can tell rule families apart even after the loader has folded them into
a single :class:`SaveFormatError`.

ErrorCategory          – which family of rule was violated
BMSError               – base class of every model/format failure
InvalidValueError      – a value outside its allowed range or semantics
Duplicate*Error        – a unique key is already taken
NoFloorBelowError / FloorTooSmallError / InsufficientSpaceError
                       – structural-support failures
FireDrillError         – a fire drill was requested on an empty building
SaveFormatError        – the save file is invalid (the loader's only failure)
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    STRUCTURAL = "structural"
    RANGE = "range"
    REFERENTIAL = "referential"
    SUPPORT = "support"
    SEMANTIC = "semantic"


class BMSError(Exception):
    """Base class for all building-model failures."""

    category: ErrorCategory = ErrorCategory.SEMANTIC

    def __init__(self, message: str = "", category: Optional[ErrorCategory] = None) -> None:
        super().__init__(message)
        if category is not None:
            self.category = category


class InvalidValueError(BMSError, ValueError):
    """A constructor or method argument violates its contract."""

    category = ErrorCategory.RANGE


class DuplicateFloorError(BMSError):
    category = ErrorCategory.REFERENTIAL


class DuplicateRoomError(BMSError):
    category = ErrorCategory.REFERENTIAL


class DuplicateSensorError(BMSError):
    category = ErrorCategory.REFERENTIAL


class NoFloorBelowError(BMSError):
    category = ErrorCategory.SUPPORT


class FloorTooSmallError(BMSError):
    category = ErrorCategory.SUPPORT


class InsufficientSpaceError(BMSError):
    category = ErrorCategory.SUPPORT


class FireDrillError(BMSError):
    category = ErrorCategory.SEMANTIC


class SaveFormatError(BMSError):
    """The save file violates the grammar or a model invariant.

    ``line_number`` is 1-based and refers to the line being processed when the
    failure was detected (``None`` when input ended prematurely before any
    line could be attributed).
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.STRUCTURAL,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ) -> None:
        super().__init__(message, category)
        self.reason = message
        self.line_number = line_number
        self.line = line

    def __str__(self) -> str:
        if self.line_number is None:
            return f"[{self.category.value}] {self.reason}"
        return f"[{self.category.value}] line {self.line_number}: {self.reason}"

    @classmethod
    def wrap(
        cls,
        exc: BMSError,
        line_number: Optional[int] = None,
        line: Optional[str] = None,
    ) -> "SaveFormatError":
        """Fold a model error into a format error, keeping its category."""
        message = str(exc) or type(exc).__name__
        return cls(message, exc.category, line_number=line_number, line=line)

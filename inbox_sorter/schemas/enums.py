"""
Enum types for labels and review actions.
"""
from enum import Enum
from typing import Optional


class SizeLabel(str, Enum):
    """Reading-length labels, ordered from shortest to longest."""
    SHORT = "Short"
    MEDIUM = "Medium"
    LONG = "Long"
    XL = "XL"


class LabelAction(str, Enum):
    """Actions the review UI can submit for a message."""
    SHORT = "Short"
    MEDIUM = "Medium"
    LONG = "Long"
    XL = "XL"
    SKIP = "skip"
    ARCHIVE = "archive"

    @property
    def size_label(self) -> Optional[SizeLabel]:
        """The matching SizeLabel, or None for skip/archive."""
        try:
            return SizeLabel(self.value)
        except ValueError:
            return None

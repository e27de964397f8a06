"""Raw header field model."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class HeaderField:
    """
    One header line (plus its continuation lines) from a header section.

    Attributes:
        name: Field name, or None when the line is not a valid header
        value: Raw value bytes after the colon, folds included
        raw: The whole field as it appeared, without the final line break
    """

    name: Optional[str]
    value: bytes
    raw: bytes

    @property
    def is_valid(self) -> bool:
        return self.name is not None

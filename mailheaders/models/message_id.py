"""Message identifier model."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MessageID:
    """
    Parsed ``<id-left@id-right>``.

    Attributes:
        left: id-left text
        right: id-right text, None when a malformed generator omitted it
    """

    left: str
    right: Optional[str]

    def __post_init__(self):
        if not self.left:
            raise ValueError("id-left must not be empty")

    def __str__(self) -> str:
        if self.right is None:
            return f"<{self.left}>"
        return f"<{self.left}@{self.right}>"

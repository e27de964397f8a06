"""Parse outcome and defect models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Tuple, TypeVar

T = TypeVar("T")


class DefectKind(Enum):
    """Kind of recoverable problem found while parsing a field."""

    UNKNOWN_CHARSET = "unknown_charset"
    UNDECODABLE_ENCODED_WORD = "undecodable_encoded_word"
    DOMAIN_NOT_NORMALIZED = "domain_not_normalized"
    MISSING_CLOSING_BRACKET = "missing_closing_bracket"
    MISSING_GROUP_TERMINATOR = "missing_group_terminator"
    EMPTY_LIST_ELEMENT = "empty_list_element"
    MISSING_ANGLE_BRACKETS = "missing_angle_brackets"
    MISSING_ID_RIGHT = "missing_id_right"
    OBSOLETE_ROUTE = "obsolete_route"
    OBSOLETE_ZONE = "obsolete_zone"
    MISSING_ZONE = "missing_zone"
    WEEKDAY_MISMATCH = "weekday_mismatch"
    LEAP_SECOND = "leap_second"
    INVALID_CHARACTER = "invalid_character"


@dataclass(frozen=True)
class Defect:
    """
    A local problem that was repaired or tolerated during a parse.

    Attributes:
        kind: What went wrong
        position: Byte offset in the input where it was noticed
        detail: Human-readable description
    """

    kind: DefectKind
    position: int
    detail: str = ""


@dataclass(frozen=True)
class ParseOutcome(Generic[T]):
    """
    Result of a successful field parse.

    Attributes:
        value: The structured value
        remainder: Input bytes that were not consumed (Obsolete mode only)
        defects: Problems tolerated while producing ``value``
    """

    value: T
    remainder: bytes = b""
    defects: Tuple[Defect, ...] = field(default_factory=tuple)

    @property
    def is_partial(self) -> bool:
        """True when some trailing input could not be parsed."""
        return bool(self.remainder)

    def has_defect(self, kind: DefectKind) -> bool:
        return any(defect.kind is kind for defect in self.defects)

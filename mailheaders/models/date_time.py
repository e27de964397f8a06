"""Date-time model."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class DateTime:
    """
    Timestamp from a Date-like header.

    ``-0000`` means the local offset is unknown (RFC 5322 section 3.3). Such
    values are stored in UTC with ``unknown_offset`` set, which keeps them
    distinct from a genuine ``+0000``.

    Attributes:
        moment: Timezone-aware datetime
        unknown_offset: True when the zone was ``-0000`` or could not be known
    """

    moment: datetime
    unknown_offset: bool = False

    def __post_init__(self):
        if self.moment.tzinfo is None:
            raise ValueError("moment must be timezone-aware")

    @property
    def utcoffset(self) -> Optional[timedelta]:
        """Offset from UTC, or None when unknown."""
        if self.unknown_offset:
            return None
        return self.moment.utcoffset()

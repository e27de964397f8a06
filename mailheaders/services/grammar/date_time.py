"""Date and time specification (RFC 5322 section 3.3)."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from mailheaders.models.date_time import DateTime
from mailheaders.models.outcome import DefectKind

from .base import ALPHA, DIGIT, GrammarBase, GrammarFailure

DAY_NAMES = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
MONTH_NAMES = ("jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec")

# obs-zone names and their offsets in minutes
OBSOLETE_ZONES = {
    "ut": 0,
    "gmt": 0,
    "est": -5 * 60,
    "edt": -4 * 60,
    "cst": -6 * 60,
    "cdt": -5 * 60,
    "mst": -7 * 60,
    "mdt": -6 * 60,
    "pst": -8 * 60,
    "pdt": -7 * 60,
}

MAX_OFFSET_MINUTES = 24 * 60


class DateTimeRules(GrammarBase):
    """
    ``date-time = [ day-of-week "," ] date time [CFWS]``

    The strict form puts folding white space at fixed places and requires a
    four digit year and a numeric zone.
    """

    HOUR_DIGITS = (2, 2)
    YEAR_MIN_DIGITS = 4
    YEAR_MAX_DIGITS = 4

    def date_time(self, data: bytes, pos: int) -> Tuple[DateTime, int]:
        weekday, p = self.day_of_week(data, pos)
        day, p = self.day(data, p)
        month, p = self.month(data, p)
        year, p = self.year(data, p)
        hour, minute, second, p = self.time_of_day(data, p)
        offset, p = self.zone(data, p)
        _, p = self.opt_cfws(data, p)

        if hour > 23 or minute > 59:
            raise GrammarFailure("time of day out of range", pos)
        if second == 60:
            self.defect(DefectKind.LEAP_SECOND, pos)
            second = 59
        elif second > 60:
            raise GrammarFailure("seconds out of range", pos)

        tz = timezone.utc if offset is None else timezone(timedelta(minutes=offset))
        try:
            moment = datetime(year, month, day, hour, minute, second, tzinfo=tz)
        except ValueError as e:
            raise GrammarFailure(f"invalid date: {e}", pos) from e

        if weekday is not None and moment.weekday() != weekday:
            self.weekday_mismatch(pos, DAY_NAMES[weekday])
        return DateTime(moment, unknown_offset=offset is None), p

    def date_space(self, data: bytes, pos: int, required: bool) -> int:
        if required:
            _, p = self.fws(data, pos)
            return p
        try:
            _, p = self.fws(data, pos)
        except GrammarFailure:
            return pos
        return p

    def time_space(self, data: bytes, pos: int) -> int:
        return pos

    def digits(self, data: bytes, pos: int, least: int, most: Optional[int]) -> Tuple[int, int, int]:
        """
        Returns:
            (value, number of digits, new_pos)
        """
        end = len(data) if most is None else min(len(data), pos + most)
        p = pos
        while p < end and data[p] in DIGIT:
            p += 1
        if p - pos < least:
            raise GrammarFailure(f"expected at least {least} digits", pos)
        return int(data[pos:p]), p - pos, p

    def alpha(self, data: bytes, pos: int) -> Tuple[str, int]:
        p = pos
        end = len(data)
        while p < end and data[p] in ALPHA:
            p += 1
        return data[pos:p].decode("ascii").lower(), p

    def day_of_week(self, data: bytes, pos: int) -> Tuple[Optional[int], int]:
        p = self.date_space(data, pos, required=False)
        name, p = self.alpha(data, p)
        if name not in DAY_NAMES:
            return None, pos
        p = self.weekday_separator(data, p)
        return DAY_NAMES.index(name), p

    def weekday_separator(self, data: bytes, pos: int) -> int:
        return self.expect(data, pos, b",")

    def weekday_mismatch(self, pos: int, name: str) -> None:
        raise GrammarFailure(f"date does not fall on {name}", pos)

    def day(self, data: bytes, pos: int) -> Tuple[int, int]:
        p = self.date_space(data, pos, required=False)
        value, _, p = self.digits(data, p, 1, 2)
        return value, self.date_space(data, p, required=True)

    def month(self, data: bytes, pos: int) -> Tuple[int, int]:
        name, p = self.alpha(data, pos)
        if name not in MONTH_NAMES:
            raise GrammarFailure("expected month name", pos)
        return MONTH_NAMES.index(name) + 1, p

    def year(self, data: bytes, pos: int) -> Tuple[int, int]:
        p = self.date_space(data, pos, required=True)
        value, width, q = self.digits(data, p, self.YEAR_MIN_DIGITS, self.YEAR_MAX_DIGITS)
        if q < len(data) and data[q] in DIGIT:
            raise GrammarFailure("year out of range", p)
        q = self.date_space(data, q, required=True)
        return self.full_year(value, width, p), q

    def full_year(self, value: int, width: int, pos: int) -> int:
        if value < 1900:
            raise GrammarFailure("year before 1900", pos)
        return value

    def time_of_day(self, data: bytes, pos: int) -> Tuple[int, int, int, int]:
        least, most = self.HOUR_DIGITS
        hour, _, p = self.digits(data, pos, least, most)
        p = self.expect(data, self.time_space(data, p), b":")
        minute, _, p = self.digits(data, self.time_space(data, p), 2, 2)
        second = 0
        q = self.time_space(data, p)
        if data.startswith(b":", q):
            second, _, p = self.digits(data, self.time_space(data, q + 1), 2, 2)
        return hour, minute, second, p

    def zone(self, data: bytes, pos: int) -> Tuple[Optional[int], int]:
        """
        Returns:
            (offset in minutes, new_pos); offset is None when unknown
        """
        p = self.date_space(data, pos, required=True)
        return self.numeric_zone(data, p)

    def numeric_zone(self, data: bytes, pos: int) -> Tuple[Optional[int], int]:
        if not data.startswith((b"+", b"-"), pos):
            raise GrammarFailure("expected zone", pos)
        sign = -1 if data[pos] == 0x2D else 1
        value, _, p = self.digits(data, pos + 1, 4, 4)
        hours, minutes = divmod(value, 100)
        if minutes > 59:
            raise GrammarFailure("zone minutes out of range", pos)
        offset = hours * 60 + minutes
        if offset >= MAX_OFFSET_MINUTES:
            raise GrammarFailure("zone offset out of range", pos)
        if offset == 0 and sign < 0:
            return None, p
        return sign * offset, p


class ObsoleteDateTimeRules(DateTimeRules):
    """obs-day-of-week, obs-year, obs-hour, obs-zone and friends."""

    HOUR_DIGITS = (1, 2)
    YEAR_MIN_DIGITS = 2

    def date_space(self, data: bytes, pos: int, required: bool) -> int:
        _, p = self.opt_cfws(data, pos)
        return p

    def time_space(self, data: bytes, pos: int) -> int:
        _, p = self.opt_cfws(data, pos)
        return p

    def weekday_separator(self, data: bytes, pos: int) -> int:
        _, p = self.opt_cfws(data, pos)
        if data.startswith(b",", p):
            return p + 1
        return p

    def weekday_mismatch(self, pos: int, name: str) -> None:
        self.defect(DefectKind.WEEKDAY_MISMATCH, pos, name)

    def full_year(self, value: int, width: int, pos: int) -> int:
        if width == 2:
            return value + (2000 if value < 50 else 1900)
        if width == 3:
            return value + 1900
        return value

    def zone(self, data: bytes, pos: int) -> Tuple[Optional[int], int]:
        p = self.date_space(data, pos, required=True)
        if data.startswith((b"+", b"-"), p):
            return self.numeric_zone(data, p)
        name, q = self.alpha(data, p)
        if name in OBSOLETE_ZONES:
            self.defect(DefectKind.OBSOLETE_ZONE, p, name)
            return OBSOLETE_ZONES[name], q
        if len(name) == 1 and name != "j":
            # military zone letter
            self.defect(DefectKind.OBSOLETE_ZONE, p, name)
            return None, q
        # Unknown names stay in the remainder.
        self.defect(DefectKind.MISSING_ZONE, p, name)
        return None, p

"""Tests for rendering parsed values."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from mailheaders.models.address import AddrSpec, DomainLiteral, DottedAtoms, Group, Mailbox, Word
from mailheaders.models.behavior import Behavior
from mailheaders.models.date_time import DateTime
from mailheaders.models.message_id import MessageID
from mailheaders.models.outcome import Defect, DefectKind, ParseOutcome
from mailheaders.services.header_parser import parse_address_list, parse_mailbox_list
from mailheaders.services.reporting import (
    OutcomeFormatter,
    format_address_list,
    format_date_time,
    format_group,
    format_mailbox,
    format_word,
    quote_string,
    to_jsonable,
)


@pytest.fixture
def john():
    """Mailbox with a plain display name."""
    spec = AddrSpec((Word("john"), Word("smith")), DottedAtoms(("example", "com")))
    return Mailbox((Word("John"), Word("Smith")), spec)


class TestWords:
    """Test word quoting."""

    def test_atom(self):
        """Test atoms are written as is."""
        assert format_word(Word("plain")) == "plain"

    def test_specials_quoted(self):
        """Test words with specials are quoted."""
        assert format_word(Word("Doe, John")) == '"Doe, John"'

    def test_escapes(self):
        """Test quotes and backslashes are escaped."""
        assert quote_string('a "b" \\c') == '"a \\"b\\" \\\\c"'

    def test_encoded_word_lookalike_escaped(self):
        """Test text that looks like an encoded word is quoted with escaped "?"."""
        assert format_word(Word("=?utf-8?q?x?=")) == '"=\\?utf-8\\?q\\?x\\?="'

    def test_unicode_is_atom(self):
        """Test non-ASCII letters need no quoting."""
        assert format_word(Word("Jöran")) == "Jöran"


class TestAddresses:
    """Test mailbox and group rendering."""

    def test_mailbox(self, john):
        """Test a mailbox with display name."""
        assert format_mailbox(john) == "John Smith <john.smith@example.com>"

    def test_bare_mailbox(self, john):
        """Test a mailbox without display name."""
        assert format_mailbox(Mailbox(None, john.address)) == "john.smith@example.com"

    def test_quoted_local_part(self):
        """Test a local part with a space is quoted."""
        spec = AddrSpec((Word("john doe", quoted=True),), DomainLiteral("192.0.2.1"))
        assert format_mailbox(Mailbox(None, spec)) == '"john doe"@[192.0.2.1]'

    def test_group(self, john):
        """Test groups with and without members."""
        assert format_group(Group((Word("Team"),), (john,))) == "Team: John Smith <john.smith@example.com>;"
        assert format_group(Group((Word("Undisclosed"), Word("recipients")))) == "Undisclosed recipients:;"

    @pytest.mark.parametrize(
        "text",
        [
            b'"Doe, John" <john@example.com>, A Group: a@example.com, b@example.com;',
            b"Undisclosed recipients:;",
            b'"=?x-unknown?q?abc?=" <x@example.com>',
        ],
    )
    def test_reparse(self, text):
        """Test rendered lists parse back to the same value."""
        value = parse_address_list(text).value
        assert parse_address_list(format_address_list(value)).value == value


class TestDateTime:
    """Test date-time rendering."""

    @pytest.mark.parametrize(
        "offset, expected",
        [
            (timedelta(hours=-6), "Fri, 21 Nov 1997 09:55:06 -0600"),
            (timedelta(hours=5, minutes=30), "Fri, 21 Nov 1997 09:55:06 +0530"),
            (timedelta(hours=-3, minutes=-30), "Fri, 21 Nov 1997 09:55:06 -0330"),
        ],
    )
    def test_offsets(self, offset, expected):
        """Test numeric zones."""
        moment = datetime(1997, 11, 21, 9, 55, 6, tzinfo=timezone(offset))
        assert format_date_time(DateTime(moment)) == expected

    def test_unknown_offset(self):
        """Test an unknown offset is written as -0000."""
        moment = datetime(1997, 11, 21, 9, 55, 6, tzinfo=timezone.utc)
        assert format_date_time(DateTime(moment, unknown_offset=True)) == "Fri, 21 Nov 1997 09:55:06 -0000"


class TestJson:
    """Test JSON conversion."""

    def test_outcome(self):
        """Test an outcome with a remainder and a defect."""
        outcome = parse_mailbox_list(b"a@example.com,, b@example.com junk", Behavior.OBSOLETE)
        data = to_jsonable(outcome)
        assert [item["text"] for item in data["value"]] == ["a@example.com", "b@example.com"]
        assert data["remainder"] == "junk"
        assert data["defects"][0]["kind"] == "empty_list_element"

    def test_message_id_and_group(self, john):
        """Test identifiers and groups."""
        assert to_jsonable(MessageID("a", None)) == {"left": "a", "right": None, "text": "<a>"}
        group = to_jsonable(Group((Word("Team"),), (john,)))
        assert group["type"] == "group"
        assert group["members"][0]["local_part"] == "john.smith"

    def test_formatter_output(self):
        """Test OutcomeFormatter emits parseable JSON without escaping Unicode."""
        outcome = ParseOutcome("café", b"", (Defect(DefectKind.INVALID_CHARACTER, 3),))
        text = OutcomeFormatter(indent=0).format_outcome(outcome)
        assert "\n" not in text
        assert "café" in text
        assert json.loads(text)["defects"] == [{"kind": "invalid_character", "position": 3, "detail": ""}]

    def test_format_headers(self):
        """Test a header mapping is rendered field by field."""
        text = OutcomeFormatter().format_headers({"subject": [ParseOutcome("hi")]})
        assert json.loads(text) == {"subject": [{"value": "hi", "remainder": "", "defects": []}]}

"""Laws that hold across the grammar rather than for one production."""

import base64

import pytest

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.behavior import Behavior
from mailheaders.services.grammar import ResourceLimitExceeded
from mailheaders.services.header_parser import (
    decode_encoded_words,
    parse_address_list,
    parse_content_disposition,
    parse_content_type,
    parse_date_time,
    parse_mailbox_list,
    parse_message_id,
    parse_message_id_list,
    parse_unstructured,
)
from mailheaders.services.reporting import format_address_list

STRICT = Behavior.STRICT
OBSOLETE = Behavior.OBSOLETE

STRICT_INPUTS = [
    (parse_address_list, b"John Smith <john.smith@example.com>"),
    (parse_address_list, b'"Doe, John" <john@example.com>, "john doe"@example.com'),
    (parse_address_list, b"A Group: alice@example.com, bob@example.com;, Undisclosed recipients:;"),
    (parse_address_list, b"user@[192.0.2.1], =?ISO-8859-1?Q?Andr=E9?= <andre@example.com>"),
    (parse_address_list, b"john (the man) <john@example.com> (work),\r\n b@example.com"),
    (parse_date_time, b"Fri, 21 Nov 1997 09:55:06 -0600"),
    (parse_date_time, b"1 Jan 2000 00:00 +0100 (comment)"),
    (parse_date_time, b"Fri, 21 Nov 1997 09:55:06 -0000"),
    (parse_message_id, b"<1234@local.machine.example>"),
    (parse_message_id, b" <abc.def@[127.0.0.1]> "),
    (parse_message_id_list, b"<a@example.com>\r\n <b@example.com>"),
    (parse_unstructured, b"Hello  world"),
    (parse_unstructured, b"=?utf-8?q?a?= =?utf-8?q?b?= and\r\n more"),
    (parse_content_type, b'text/plain; charset="utf-8"; format=flowed'),
    (parse_content_disposition, b"attachment; filename*0*=utf-8''%E2%82; filename*1*=%AC.txt"),
]


class TestStrictIsSubsetOfObsolete:
    """Whatever strict mode accepts, obsolete mode accepts with the same result."""

    @pytest.mark.parametrize("parse, text", STRICT_INPUTS)
    def test_same_value(self, parse, text):
        """Test both modes agree on strict-valid input."""
        strict = parse(text, STRICT)
        obsolete = parse(text, OBSOLETE)
        assert strict.remainder == b""
        assert obsolete.remainder == b""
        assert obsolete.value == strict.value


class TestEncodedWordLaws:
    """Decoding and merging of encoded words."""

    @pytest.mark.parametrize("text", ["Grüße", "中文テキスト", "emoji 😀", "a_b=c?d"])
    def test_base64_round_trip(self, text):
        """Test a B-encoded UTF-8 word decodes to its original text."""
        payload = base64.b64encode(text.encode("utf-8")).decode("ascii")
        decoded = decode_encoded_words(f"=?utf-8?b?{payload}?=")
        assert decoded == text

    def test_white_space_between_words_vanishes(self):
        """Test any folding white space between two words is dropped."""
        assert parse_unstructured(b"=?utf-8?q?a?=  \r\n\t=?utf-8?q?b?=").value == "ab"

    def test_white_space_next_to_text_survives(self):
        """Test white space between a word and text becomes one space."""
        assert parse_unstructured(b"=?utf-8?q?a?=   b").value == "a b"


class TestIdempotence:
    """Rendering a parsed value and parsing it again changes nothing."""

    @pytest.mark.parametrize(
        "text",
        [
            b"Joe Q. Public <john.q.public@example.com>",
            b"<@relay.example:user@example.com>",
            b"john . smith @ example.com",
            b'"Jo\\"e" <"odd local"@example.com>, Friends: , a@example.com;',
            "Jöran <joran@exämple.com>".encode("utf-8"),
            b"=?utf-8?b?" + base64.b64encode(b"=?utf-8?q?x?=") + b"?= <a@example.com>",
            b'"=?x-unknown?q?abc?= and more" <b@example.com>',
        ],
    )
    def test_format_then_parse(self, text):
        """Test parse(format(parse(x))) equals parse(x)."""
        value = parse_address_list(text, OBSOLETE).value
        again = parse_address_list(format_address_list(value), OBSOLETE)
        assert again.value == value
        assert again.remainder == b""


class TestResourceBounds:
    """Comment nesting is bounded without recursion."""

    @pytest.mark.parametrize("behavior", [STRICT, OBSOLETE])
    def test_deep_nesting_rejected(self, behavior):
        """Test 10,000 open parentheses fail with a resource error."""
        with pytest.raises(ResourceLimitExceeded):
            parse_mailbox_list(b"(" * 10000 + b"a@example.com", behavior)

    def test_deep_nesting_allowed_by_config(self):
        """Test a raised limit handles deep nesting without exhausting the stack."""
        data = b"(" * 10000 + b")" * 10000 + b"a@example.com"
        outcome = parse_mailbox_list(data, STRICT, ParserConfig(max_comment_depth=10000))
        assert outcome.value[0].address.address == "a@example.com"

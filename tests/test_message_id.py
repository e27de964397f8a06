"""Tests for msg-id and msg-id list parsing."""

import pytest

from mailheaders.models.behavior import Behavior
from mailheaders.models.message_id import MessageID
from mailheaders.models.outcome import DefectKind
from mailheaders.services.grammar import GrammarFailure
from mailheaders.services.header_parser import parse_message_id, parse_message_id_list

STRICT = Behavior.STRICT
OBSOLETE = Behavior.OBSOLETE


class TestMessageId:
    """Test single message identifiers."""

    def test_simple(self):
        """Test a well-formed identifier."""
        outcome = parse_message_id(b"<1234@local.machine.example>")
        assert outcome.value == MessageID("1234", "local.machine.example")
        assert outcome.defects == ()

    def test_surrounding_cfws(self):
        """Test CFWS around the brackets is skipped."""
        outcome = parse_message_id(b" <a.b@example.com> (sent by us)")
        assert str(outcome.value) == "<a.b@example.com>"

    def test_literal_right_part(self):
        """Test a bracketed id-right."""
        assert parse_message_id(b"<abc@[127.0.0.1]>").value.right == "[127.0.0.1]"

    def test_missing_closing_bracket(self):
        """Test a '>' missing at the end of input fails strict and is repaired in obsolete mode."""
        with pytest.raises(GrammarFailure):
            parse_message_id(b"<unterminated@example.com")
        outcome = parse_message_id(b"<unterminated@example.com", OBSOLETE)
        assert outcome.value.left == "unterminated"
        assert outcome.value.right == "example.com"
        assert outcome.has_defect(DefectKind.MISSING_CLOSING_BRACKET)

    def test_missing_bracket_mid_input(self):
        """Test a missing '>' is not repaired when more input follows."""
        for behavior in (STRICT, OBSOLETE):
            with pytest.raises(GrammarFailure):
                parse_message_id(b"<a@example.com <b@example.com>", behavior)

    def test_no_brackets(self):
        """Test an identifier without angle brackets."""
        with pytest.raises(GrammarFailure):
            parse_message_id(b"abc@example.com")
        outcome = parse_message_id(b"abc@example.com", OBSOLETE)
        assert outcome.value == MessageID("abc", "example.com")
        assert outcome.has_defect(DefectKind.MISSING_ANGLE_BRACKETS)

    def test_missing_right_part(self):
        """Test an identifier without '@'."""
        with pytest.raises(GrammarFailure):
            parse_message_id(b"<abc>")
        outcome = parse_message_id(b"<abc>", OBSOLETE)
        assert outcome.value.right is None
        assert str(outcome.value) == "<abc>"
        assert outcome.has_defect(DefectKind.MISSING_ID_RIGHT)

    def test_obsolete_spacing(self):
        """Test CFWS inside the brackets."""
        with pytest.raises(GrammarFailure):
            parse_message_id(b"<a . b @ example.com>")
        outcome = parse_message_id(b"<a . b @ example.com>", OBSOLETE)
        assert outcome.value == MessageID("a.b", "example.com")

    def test_quoted_left_part(self):
        """Test a quoted id-left is obsolete syntax."""
        outcome = parse_message_id(b'<"weird id"@example.com>', OBSOLETE)
        assert outcome.value.left == "weird id"

    def test_empty_left_part(self):
        """Test an identifier with nothing before '@'."""
        for behavior in (STRICT, OBSOLETE):
            with pytest.raises(GrammarFailure):
                parse_message_id(b"<@example.com>", behavior)

    def test_empty_input(self):
        """Test empty input fails in both modes."""
        for behavior in (STRICT, OBSOLETE):
            with pytest.raises(GrammarFailure):
                parse_message_id(b"", behavior)


class TestMessageIdList:
    """Test References and In-Reply-To style lists."""

    def test_list(self):
        """Test identifiers separated by folding white space."""
        outcome = parse_message_id_list(b"<a@example.com>\r\n <b@example.com> <c@example.com>")
        assert [message_id.left for message_id in outcome.value] == ["a", "b", "c"]

    def test_strict_rejects_commas(self):
        """Test commas between identifiers are obsolete syntax."""
        with pytest.raises(GrammarFailure):
            parse_message_id_list(b"<a@example.com>, <b@example.com>")
        outcome = parse_message_id_list(b"<a@example.com>, <b@example.com>", OBSOLETE)
        assert len(outcome.value) == 2

    def test_phrases_skipped(self):
        """Test obsolete phrases between identifiers are skipped."""
        outcome = parse_message_id_list(b"<a@example.com> a reply to <b@example.com>", OBSOLETE)
        assert [str(message_id) for message_id in outcome.value] == ["<a@example.com>", "<b@example.com>"]
        assert outcome.remainder == b""

    def test_needs_an_identifier(self):
        """Test a list with only words fails."""
        with pytest.raises(GrammarFailure):
            parse_message_id_list(b"no identifiers here", OBSOLETE)

"""Tests for the lexical productions: FWS, comments, quoted strings and phrases."""

import pytest

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.address import Word
from mailheaders.models.behavior import Behavior
from mailheaders.models.outcome import DefectKind
from mailheaders.services.grammar import Gap, GrammarFailure, ResourceLimitExceeded, grammar_for


@pytest.fixture
def strict():
    """Fresh strict grammar."""
    return grammar_for(Behavior.STRICT)


@pytest.fixture
def obsolete():
    """Fresh obsolete grammar."""
    return grammar_for(Behavior.OBSOLETE)


class TestFoldingWhiteSpace:
    """Test FWS."""

    def test_plain_white_space(self, strict):
        """Test a run of spaces is consumed."""
        assert strict.fws(b"  x", 0) == ("  ", 2)

    def test_fold_drops_line_break(self, strict):
        """Test CRLF followed by white space is a fold and is not returned."""
        assert strict.fws(b" \r\n\tx", 0) == (" \t", 4)

    def test_line_break_without_white_space_is_not_fws(self, strict):
        """Test a CRLF that ends the field is not folding white space."""
        with pytest.raises(GrammarFailure):
            strict.fws(b"\r\nx", 0)

    def test_strict_allows_one_fold(self, strict):
        """Test strict FWS stops before a second fold."""
        assert strict.fws(b"\r\n \r\n x", 0) == (" ", 3)

    def test_obsolete_allows_repeated_folds(self, obsolete):
        """Test obsolete FWS takes any number of folds."""
        assert obsolete.fws(b"\r\n \r\n x", 0) == ("  ", 6)

    def test_bare_lf_fold(self, strict, obsolete):
        """Test a bare LF fold is obsolete syntax."""
        assert obsolete.fws(b"\n x", 0) == (" ", 2)
        with pytest.raises(GrammarFailure):
            strict.fws(b"\n x", 0)


class TestComments:
    """Test comment scanning."""

    def test_nested_comment(self, strict):
        """Test nested parentheses are balanced."""
        assert strict.comment(b"(a (nested) comment) x", 0) == 20

    def test_quoted_pair_in_comment(self, strict):
        """Test an escaped parenthesis does not close the comment."""
        assert strict.comment(b"(a \\) b)", 0) == 8

    def test_unterminated_comment(self, strict, obsolete):
        """Test an unterminated comment fails in both modes."""
        for grammar in (strict, obsolete):
            with pytest.raises(GrammarFailure):
                grammar.comment(b"(never closed", 0)

    def test_depth_limit(self, strict):
        """Test nesting beyond the configured depth is a resource error."""
        with pytest.raises(ResourceLimitExceeded):
            strict.comment(b"(" * 11 + b")" * 11, 0)

    def test_depth_at_limit(self, strict):
        """Test nesting exactly at the limit is accepted."""
        assert strict.comment(b"(" * 10 + b")" * 10, 0) == 20

    def test_configurable_depth(self):
        """Test max_comment_depth raises the limit."""
        grammar = grammar_for(Behavior.STRICT, ParserConfig(max_comment_depth=20))
        assert grammar.comment(b"(" * 11 + b")" * 11, 0) == 22

    def test_control_character(self, strict, obsolete):
        """Test obsolete comments accept control characters."""
        with pytest.raises(GrammarFailure):
            strict.comment(b"(a\x01b)", 0)
        assert obsolete.comment(b"(a\x01b)", 0) == 5


class TestCfws:
    """Test CFWS and the gap it reports."""

    def test_space_only(self, strict):
        """Test white space gives a SPACE gap."""
        assert strict.cfws(b"  x", 0) == (Gap.SPACE, 2)

    def test_comment_only(self, strict):
        """Test a comment gives a COMMENT gap."""
        assert strict.cfws(b"(c)x", 0) == (Gap.COMMENT, 3)

    def test_space_and_comment(self, strict):
        """Test white space and comments combine."""
        assert strict.cfws(b" (c) x", 0) == (Gap.SPACE | Gap.COMMENT, 5)

    def test_nothing(self, strict):
        """Test CFWS is required by cfws but optional by opt_cfws."""
        with pytest.raises(GrammarFailure):
            strict.cfws(b"x", 0)
        assert strict.opt_cfws(b"x", 0) == (Gap.NONE, 0)


class TestQuotedString:
    """Test quoted strings."""

    def test_escapes_are_resolved(self, strict):
        """Test quoted-pairs are un-escaped and trailing CFWS consumed."""
        assert strict.quoted_string(b'"a \\"b\\" c" x', 0) == ('a "b" c', 12)

    def test_unterminated(self, strict, obsolete):
        """Test an unbalanced quote fails in both modes."""
        for grammar in (strict, obsolete):
            with pytest.raises(GrammarFailure):
                grammar.quoted_string(b'"John <john@example.com>', 0)

    def test_utf8_content(self, strict):
        """Test UTF-8 text inside a quoted string."""
        data = '"Jöran"'.encode("utf-8")
        assert strict.quoted_string(data, 0) == ("Jöran", len(data))

    def test_utf8_disabled(self):
        """Test 8-bit octets are rejected when UTF-8 is not allowed."""
        grammar = grammar_for(Behavior.STRICT, ParserConfig(allow_utf8=False))
        with pytest.raises(GrammarFailure):
            grammar.quoted_string('"Jöran"'.encode("utf-8"), 0)

    def test_obsolete_replaces_invalid_octets(self, obsolete):
        """Test invalid 8-bit octets become U+FFFD with a defect."""
        text, _ = obsolete.quoted_string(b'"caf\xe9"', 0)
        assert text == "caf\ufffd"
        assert obsolete.defects[0].kind is DefectKind.INVALID_CHARACTER

    def test_encoded_words_decoded_on_request(self, strict):
        """Test encoded words inside a display-name quoted string are decoded."""
        text, _ = strict.bare_quoted_string(b'"=?utf-8?q?J=C3=B6ran?= Doe"', 0, decode_words=True)
        assert text == "Jöran Doe"

    def test_encoded_words_kept_when_disabled(self):
        """Test decode_quoted_encoded_words=False keeps the literal text."""
        grammar = grammar_for(Behavior.OBSOLETE, ParserConfig(decode_quoted_encoded_words=False))
        text, _ = grammar.bare_quoted_string(b'"=?utf-8?q?J=C3=B6ran?= Doe"', 0, decode_words=True)
        assert text == "=?utf-8?q?J=C3=B6ran?= Doe"


class TestPhrase:
    """Test phrases (display names)."""

    def test_words(self, strict):
        """Test atoms separated by white space become words."""
        assert strict.phrase(b"John  Smith <", 0) == ((Word("John"), Word("Smith")), 12)

    def test_obsolete_dots(self, obsolete):
        """Test obs-phrase glues a dot to the preceding word."""
        words, _ = obsolete.phrase(b"John Q. Public", 0)
        assert words == (Word("John"), Word("Q."), Word("Public"))

    def test_strict_stops_at_dot(self, strict):
        """Test strict phrases end before a bare dot."""
        words, pos = strict.phrase(b"John Q. Public", 0)
        assert words == (Word("John"), Word("Q"))
        assert pos == 6

    def test_comment_between_atoms(self, strict, obsolete):
        """Test a comment alone separates atoms only in obsolete mode."""
        with pytest.raises(GrammarFailure):
            strict.phrase(b"John(x)Smith", 0)
        words, _ = obsolete.phrase(b"John(x)Smith", 0)
        assert words == (Word("John"), Word("Smith"))

    def test_adjacent_encoded_words_merge(self, strict):
        """Test white space between two encoded words disappears."""
        words, _ = strict.phrase(b"=?utf-8?q?a?= =?utf-8?q?b?=", 0)
        assert words == (Word("ab"),)

    def test_comment_prevents_merge(self, strict):
        """Test a comment between encoded words keeps them apart."""
        words, _ = strict.phrase(b"=?utf-8?q?a?= (c) =?utf-8?q?b?=", 0)
        assert words == (Word("a"), Word("b"))

    def test_encoded_word_next_to_text(self, strict):
        """Test an encoded word next to an atom stays a separate word."""
        words, _ = strict.phrase(b"=?utf-8?q?Andr=C3=A9?= Pirard", 0)
        assert words == (Word("André"), Word("Pirard"))

    def test_quoted_word_is_marked(self, strict):
        """Test words from quoted strings remember it."""
        words, _ = strict.phrase(b'"Doe, John"', 0)
        assert words[0].text == "Doe, John"
        assert words[0].quoted is True

    def test_empty_phrase(self, strict):
        """Test a phrase needs at least one word."""
        with pytest.raises(GrammarFailure):
            strict.phrase(b"<a@b>", 0)

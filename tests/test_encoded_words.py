"""Tests for RFC 2047 encoded-word decoding."""

import binascii

import pytest

from mailheaders.models.outcome import DefectKind
from mailheaders.services.charset import CharsetResolver
from mailheaders.services.encoded_words import (
    EncodedWordDecoder,
    Piece,
    PieceKind,
    decode_b,
    decode_q,
    join_pieces,
)

SPACE = PieceKind.SPACE
TEXT = PieceKind.TEXT
WORD = PieceKind.WORD


@pytest.fixture
def decoder():
    """Decoder with the built-in charset table."""
    return EncodedWordDecoder(CharsetResolver())


class TestTransferEncodings:
    """Test the B and Q payload decoders."""

    def test_base64(self):
        """Test padded base64."""
        assert decode_b(b"SGk=") == b"Hi"

    def test_base64_missing_padding(self):
        """Test base64 with the padding left off."""
        assert decode_b(b"SGk") == b"Hi"

    def test_base64_impossible_length(self):
        """Test a payload with a dangling character cannot be decoded."""
        with pytest.raises(binascii.Error):
            decode_b(b"A")

    def test_quoted_printable_underscore(self):
        """Test Q encoding maps underscores to spaces."""
        assert decode_q(b"a_b=3Dc") == b"a b=c"


class TestSplit:
    """Test splitting tokens into pieces."""

    def test_whole_token(self, decoder):
        """Test a token that is one encoded word."""
        assert decoder.split("=?utf-8?b?SGk=?=", False) == ([Piece(WORD, "Hi")], [])

    def test_case_insensitive_encoding(self, decoder):
        """Test the encoding letter and charset are case-insensitive."""
        pieces, _ = decoder.split("=?UTF-8?Q?caf=C3=A9?=", False)
        assert pieces == [Piece(WORD, "café")]

    def test_language_suffix(self, decoder):
        """Test an RFC 2231 language tag is accepted and ignored."""
        pieces, _ = decoder.split("=?utf-8*en?q?Hello?=", False)
        assert pieces == [Piece(WORD, "Hello")]

    def test_glued_words_need_find_embedded(self, decoder):
        """Test words glued to each other or to text are found only on request."""
        token = "=?utf-8?q?a?==?utf-8?q?b?=x"
        assert decoder.split(token, False)[0] == [Piece(TEXT, token)]
        pieces, _ = decoder.split(token, True)
        assert pieces == [Piece(WORD, "a"), Piece(WORD, "b"), Piece(TEXT, "x")]

    def test_unknown_charset(self, decoder):
        """Test an unknown charset leaves the word literal and reports it."""
        pieces, failures = decoder.split("=?x-unknown?q?abc?=", False)
        assert pieces == [Piece(TEXT, "=?x-unknown?q?abc?=")]
        assert failures[0][0] is DefectKind.UNKNOWN_CHARSET

    def test_undecodable_payload(self, decoder):
        """Test a broken base64 payload leaves the word literal and reports it."""
        pieces, failures = decoder.split("=?utf-8?b?A?=", False)
        assert pieces == [Piece(TEXT, "=?utf-8?b?A?=")]
        assert failures[0][0] is DefectKind.UNDECODABLE_ENCODED_WORD

    def test_invalid_bytes_replaced(self, decoder):
        """Test bytes invalid in the charset become U+FFFD."""
        pieces, failures = decoder.split("=?utf-8?q?=FF?=", False)
        assert pieces == [Piece(WORD, "\ufffd")]
        assert failures == []

    def test_charset_alias(self):
        """Test configured aliases reach the decoder."""
        decoder = EncodedWordDecoder(CharsetResolver({"x-house": "latin-1"}))
        pieces, _ = decoder.split("=?x-house?q?=E9?=", False)
        assert pieces == [Piece(WORD, "é")]


class TestJoinPieces:
    """Test the merge rule."""

    def test_space_between_words_dropped(self):
        """Test white space between two encoded words disappears."""
        assert join_pieces([Piece(WORD, "a"), Piece(SPACE, " \t "), Piece(WORD, "b")]) == "ab"

    def test_space_between_text_kept(self):
        """Test white space between plain text is kept verbatim."""
        assert join_pieces([Piece(TEXT, "a"), Piece(SPACE, "  "), Piece(TEXT, "b")]) == "a  b"

    def test_space_next_to_one_word(self):
        """Test white space next to one encoded word collapses to one space."""
        assert join_pieces([Piece(WORD, "a"), Piece(SPACE, "   "), Piece(TEXT, "b")]) == "a b"
        assert join_pieces([Piece(TEXT, "a"), Piece(SPACE, "\t"), Piece(WORD, "b")]) == "a b"

    def test_consecutive_spaces_coalesce(self):
        """Test adjacent space pieces count as one run."""
        pieces = [Piece(WORD, "a"), Piece(SPACE, " "), Piece(SPACE, ""), Piece(WORD, "b")]
        assert join_pieces(pieces) == "ab"

    def test_edges(self):
        """Test edge white space is dropped unless asked to keep it."""
        pieces = [Piece(SPACE, " "), Piece(TEXT, "a"), Piece(SPACE, " ")]
        assert join_pieces(pieces) == "a"
        assert join_pieces(pieces, strip_edges=False) == " a "

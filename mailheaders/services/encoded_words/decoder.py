"""RFC 2047 encoded-word decoding.

An encoded word looks like this::

    =?charset?cte?encoded_text?=

``cte`` is ``B`` (base64) or ``Q`` (the header flavour of quoted-printable,
where ``_`` stands for a space). An RFC 2231 language tag may follow the
charset after a ``*`` and is ignored here.

The grammar cuts header text into pieces: runs of white space, plain text,
and encoded words. ``join_pieces`` glues them back together. White space that
is the only thing between two encoded words is dropped, so text that a sender
split across several encoded words comes back in one piece. White space next
to a single encoded word becomes one space. Anything else is kept as it was.

Decoding never raises. A word whose charset is unknown or whose payload
cannot be decoded is kept as the literal ``=?...?=`` text and reported as a
failure so the caller can record a defect.
"""

import base64
import binascii
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from mailheaders.models.outcome import DefectKind
from mailheaders.services.charset import CharsetResolver

logger = logging.getLogger(__name__)

ENCODED_WORD = re.compile(
    r"=\?(?P<charset>[!#$%&'+\-0-9A-Z^_`a-z{|}~]+)"
    r"(?:\*(?P<language>[A-Za-z0-9\-]*))?"
    r"\?(?P<encoding>[bBqQ])"
    r"\?(?P<payload>[\x21-\x3e\x40-\x7e]+)\?="
)


@dataclass(frozen=True)
class EncodedWord:
    """One ``=?charset?encoding?payload?=`` token, before decoding."""

    charset: str
    encoding: str
    payload: str
    source: str
    language: Optional[str] = None

    @classmethod
    def from_match(cls, match: "re.Match[str]") -> "EncodedWord":
        return cls(
            charset=match.group("charset"),
            encoding=match.group("encoding").upper(),
            payload=match.group("payload"),
            source=match.group(0),
            language=match.group("language"),
        )


class PieceKind(Enum):
    """Kind of a piece of header text."""

    SPACE = "space"
    TEXT = "text"
    WORD = "word"


@dataclass(frozen=True)
class Piece:
    """A run of white space, plain text, or decoded encoded-word text."""

    kind: PieceKind
    text: str


# (defect kind, offset into the token, detail)
Failure = Tuple[DefectKind, int, str]


def decode_b(payload: bytes) -> bytes:
    """
    Decode base64, tolerating missing padding.

    Raises:
        binascii.Error: If the payload cannot be decoded at all
    """
    pad_err = len(payload) % 4
    padded = payload + b"==="[: (4 - pad_err) % 4]
    try:
        return base64.b64decode(padded, validate=True)
    except binascii.Error:
        pass
    # Non-alphabet characters: let the lenient decoder skip them, trying
    # each possible padding.
    for extra in range(4):
        try:
            return base64.b64decode(payload + b"=" * extra, validate=False)
        except binascii.Error:
            continue
    raise binascii.Error(f"undecodable base64 payload {payload!r}")


def decode_q(payload: bytes) -> bytes:
    """Decode header quoted-printable (``_`` is a space)."""
    return binascii.a2b_qp(payload, header=True)


class EncodedWordDecoder:
    """Find, decode and merge encoded words using a charset resolver."""

    def __init__(self, resolver: Optional[CharsetResolver] = None):
        self.resolver = resolver or CharsetResolver()

    def decode_word(self, word: EncodedWord) -> Tuple[Optional[str], Optional[Failure]]:
        """
        Decode a single encoded word.

        Returns:
            (text, None) on success, (None, failure) when the word has to be
            left as literal text
        """
        info = self.resolver.resolve(word.charset)
        if info is None:
            logger.debug("Leaving encoded word with unknown charset: %s", word.source)
            return None, (DefectKind.UNKNOWN_CHARSET, 0, f"unknown charset {word.charset!r}")

        raw = word.payload.encode("ascii")
        try:
            if word.encoding == "B":
                data = decode_b(raw)
            else:
                data = decode_q(raw)
        except binascii.Error as e:
            logger.debug("Leaving undecodable encoded word %s: %s", word.source, e)
            return None, (DefectKind.UNDECODABLE_ENCODED_WORD, 0, str(e))

        return self.resolver.decode(info, data), None

    def split(self, token: str, find_embedded: bool) -> Tuple[List[Piece], List[Failure]]:
        """
        Split a token without white space into text and word pieces.

        Args:
            token: The token
            find_embedded: Also find encoded words glued to each other or to
                surrounding text; otherwise the whole token must be one
                encoded word to be decoded

        Returns:
            (pieces, failures)
        """
        failures: List[Failure] = []
        if not find_embedded:
            match = ENCODED_WORD.fullmatch(token)
            if match is None:
                return [Piece(PieceKind.TEXT, token)], failures
            return [self._piece(match, failures)], failures

        pieces: List[Piece] = []
        last = 0
        for match in ENCODED_WORD.finditer(token):
            if match.start() > last:
                pieces.append(Piece(PieceKind.TEXT, token[last : match.start()]))
            pieces.append(self._piece(match, failures))
            last = match.end()
        if last < len(token):
            pieces.append(Piece(PieceKind.TEXT, token[last:]))
        return pieces, failures

    def _piece(self, match: "re.Match[str]", failures: List[Failure]) -> Piece:
        text, failure = self.decode_word(EncodedWord.from_match(match))
        if failure is not None:
            kind, _, detail = failure
            failures.append((kind, match.start(), detail))
            return Piece(PieceKind.TEXT, match.group(0))
        return Piece(PieceKind.WORD, text)


def join_pieces(pieces: Iterable[Piece], strip_edges: bool = True) -> str:
    """
    Reassemble pieces into text, applying the encoded-word merge rule.

    Args:
        pieces: Pieces in source order
        strip_edges: Drop white space at the start and end

    Returns:
        The joined text
    """
    pieces = _coalesce_spaces(pieces)
    out = []
    for index, piece in enumerate(pieces):
        if piece.kind is not PieceKind.SPACE:
            out.append(piece.text)
            continue
        before = _neighbour(pieces, index, -1)
        after = _neighbour(pieces, index, 1)
        if before is None or after is None:
            if not strip_edges:
                out.append(piece.text)
            continue
        if before.kind is PieceKind.WORD and after.kind is PieceKind.WORD:
            continue
        if before.kind is PieceKind.WORD or after.kind is PieceKind.WORD:
            out.append(" ")
        else:
            out.append(piece.text)
    return "".join(out)


def _coalesce_spaces(pieces: Iterable[Piece]) -> List[Piece]:
    merged: List[Piece] = []
    for piece in pieces:
        if merged and piece.kind is PieceKind.SPACE and merged[-1].kind is PieceKind.SPACE:
            merged[-1] = Piece(PieceKind.SPACE, merged[-1].text + piece.text)
        else:
            merged.append(piece)
    return merged


def _neighbour(pieces: List[Piece], index: int, step: int) -> Optional[Piece]:
    index += step
    if 0 <= index < len(pieces):
        return pieces[index]
    return None

"""Shared machinery for the RFC 5322 header grammar.

Every production is a method taking the input ``bytes`` and a start offset
and returning ``(value, new_offset)``, or raising ``GrammarFailure``. The
input is never sliced while parsing except to materialize a token's text,
so a production costs time proportional to what it consumes.

Productions are grouped into rule mixins, one module per RFC area. Each
module has a strict mixin and an obsolete subclass of it that overrides only
what RFC 5322 section 4 relaxes. ``selector.py`` stacks the mixins into the
two grammars a caller can ask for.

A grammar object serves a single parse call. It carries that call's config
and the defects found so far; nothing outlives the call.
"""

from enum import IntFlag
from typing import Callable, List, Optional, Tuple

from mailheaders.config.parser_config import ParserConfig
from mailheaders.models.outcome import Defect, DefectKind
from mailheaders.services.charset import CharsetResolver
from mailheaders.services.encoded_words import EncodedWordDecoder, Piece


def _chars(text: str) -> frozenset:
    return frozenset(text.encode("ascii"))


DIGIT = frozenset(range(0x30, 0x3A))
ALPHA = frozenset(range(0x41, 0x5B)) | frozenset(range(0x61, 0x7B))
ATEXT = ALPHA | DIGIT | _chars("!#$%&'*+-/=?^_`{|}~")
VCHAR = frozenset(range(0x21, 0x7F))
WSP = _chars(" \t")
CR = 0x0D
LF = 0x0A
OBS_NO_WS_CTL = frozenset(range(0x01, 0x09)) | {0x0B, 0x0C} | frozenset(range(0x0E, 0x20)) | {0x7F}

REPLACEMENT_CHARACTER = "\ufffd"


class Gap(IntFlag):
    """What a run of CFWS between two tokens contained."""

    NONE = 0
    SPACE = 1
    COMMENT = 2


class HeaderParseError(Exception):
    """Base exception for header parsing errors."""

    def __init__(self, reason: str, position: int):
        super().__init__(f"{reason} at offset {position}")
        self.reason = reason
        self.position = position


class GrammarFailure(HeaderParseError):
    """Raised when the input does not match the requested production."""

    pass


class ResourceLimitExceeded(HeaderParseError):
    """Raised when input exceeds a hard bound such as comment nesting."""

    pass


def utf8_width(data: bytes, pos: int) -> int:
    """
    Length of the well-formed UTF-8 sequence starting at ``pos``.

    Returns:
        2, 3 or 4, or 0 when there is no valid multi-byte sequence there
    """
    lead = data[pos]
    if 0xC2 <= lead <= 0xDF:
        width = 2
    elif 0xE0 <= lead <= 0xEF:
        width = 3
    elif 0xF0 <= lead <= 0xF4:
        width = 4
    else:
        return 0
    chunk = data[pos : pos + width]
    if len(chunk) != width:
        return 0
    try:
        chunk.decode("utf-8")
    except UnicodeDecodeError:
        return 0
    return width


Production = Callable[..., Tuple[object, int]]


class GrammarBase:
    """State and helpers shared by all rule mixins."""

    # Strict FWS: one optional CRLF fold.
    LINE_BREAKS: Tuple[bytes, ...] = (b"\r\n",)
    MAX_FOLDS: Optional[int] = 1
    # Octets >= 0x80 that are not UTF-8 fail instead of becoming U+FFFD.
    REPLACE_8BIT = False
    # Unconsumed input is an error.
    ALLOW_REMAINDER = False

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self.defects: List[Defect] = []
        self.decoder = EncodedWordDecoder(CharsetResolver(self.config.charset_aliases))

    def run(self, production: Production, data: bytes) -> Tuple[object, bytes]:
        """
        Apply a production to a whole field value.

        Returns:
            (value, remainder)

        Raises:
            GrammarFailure: If nothing matched, or (strict) input is left over
            ResourceLimitExceeded: If a hard bound was hit
        """
        value, pos = production(data, 0)
        if data[pos:] in self.LINE_BREAKS:
            pos = len(data)
        if pos < len(data) and not self.ALLOW_REMAINDER:
            raise GrammarFailure("unexpected input", pos)
        return value, data[pos:]

    def defect(self, kind: DefectKind, position: int, detail: str = "") -> None:
        self.defects.append(Defect(kind, position, detail))

    def attempt(self, production: Production, data: bytes, pos: int, *args):
        """Run a production, discarding its defects if it fails."""
        mark = len(self.defects)
        try:
            return production(data, pos, *args)
        except GrammarFailure:
            del self.defects[mark:]
            raise

    def first(self, data: bytes, pos: int, *productions: Production):
        """Return the result of the first production that matches."""
        failure = None
        for production in productions:
            try:
                return self.attempt(production, data, pos)
            except GrammarFailure as e:
                if failure is None or e.position > failure.position:
                    failure = e
        raise failure

    def expect(self, data: bytes, pos: int, literal: bytes) -> int:
        if data.startswith(literal, pos):
            return pos + len(literal)
        raise GrammarFailure(f"expected {literal.decode('ascii')!r}", pos)

    def skip_wsp(self, data: bytes, pos: int) -> int:
        end = len(data)
        while pos < end and data[pos] in WSP:
            pos += 1
        return pos

    def line_break(self, data: bytes, pos: int) -> int:
        """Length of the line break at ``pos``, 0 if there is none."""
        for brk in self.LINE_BREAKS:
            if data.startswith(brk, pos):
                return len(brk)
        return 0

    def scan(self, data: bytes, pos: int, allowed: frozenset, replace_8bit: bool = False) -> Tuple[str, int]:
        """
        Consume a run of allowed octets and return it as text.

        Octets >= 0x80 are taken as UTF-8 when ``allow_utf8`` is set. Other
        high octets end the run, or become U+FFFD when ``replace_8bit``.
        """
        start = pos
        end = len(data)
        out = []
        segment = pos
        while pos < end:
            octet = data[pos]
            if octet < 0x80:
                if octet not in allowed:
                    break
                pos += 1
                continue
            width = utf8_width(data, pos) if self.config.allow_utf8 else 0
            if width:
                pos += width
                continue
            if not replace_8bit:
                break
            out.append(data[segment:pos].decode("utf-8"))
            out.append(REPLACEMENT_CHARACTER)
            pos += 1
            segment = pos
        if out:
            self.defect(DefectKind.INVALID_CHARACTER, start, "8-bit octets replaced")
        out.append(data[segment:pos].decode("utf-8"))
        return "".join(out), pos

    def decode_token(self, token: str, pos: int, find_embedded: bool = True) -> List[Piece]:
        """
        Split a token into text and decoded encoded-word pieces.

        Args:
            token: Text without white space
            pos: Offset of the token, for defects
            find_embedded: Find encoded words anywhere in the token rather
                than only when the token is one
        """
        pieces, failures = self.decoder.split(token, find_embedded)
        for kind, offset, detail in failures:
            self.defect(kind, pos + offset, detail)
        return pieces

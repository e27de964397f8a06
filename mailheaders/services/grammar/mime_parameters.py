"""MIME content headers (RFC 2045, RFC 2183) with RFC 2231 parameters.

Parameter values may be split into numbered sections and may carry a
charset::

    title*0*=us-ascii'en'This%20is%20even%20more%20
    title*1*=%2A%2A%2Afun%2A%2A%2A%20
    title*2="isn't it!"

Sections are joined in numeric order. Runs of adjacent percent-encoded
sections are joined before decoding, so a multi-byte character may be split
across sections. A value given with an asterisk (extended or sectioned)
replaces a plain value of the same name.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Union

from mailheaders.models.mime import ContentDisposition, ContentTransferEncoding, ContentType, Parameters
from mailheaders.models.outcome import DefectKind

from .base import DIGIT, VCHAR, GrammarBase, GrammarFailure, _chars

logger = logging.getLogger(__name__)

TSPECIALS = _chars('()<>@,;:\\"/[]?=')
TOKEN = VCHAR - TSPECIALS
ATTRIBUTE_CHAR = TOKEN - _chars("*'%")
HEXDIG = DIGIT | _chars("ABCDEFabcdef")
SEMICOLON = 0x3B
PERCENT = 0x25
MAX_SECTION_DIGITS = 8


@dataclass(frozen=True)
class RawParameter:
    """
    One ``name[*section][*]=value`` as written, before sections are joined.

    Extended values are the percent-decoded bytes; ``charset`` is only set on
    an extended value that is not a continuation.
    """

    name: str
    section: Optional[int]
    value: Union[str, bytes]
    position: int
    extended: bool = False
    charset: Optional[str] = None


class MimeParameterRules(GrammarBase):
    """Strict Content-Type, Content-Disposition and Content-Transfer-Encoding."""

    # Encoded words inside quoted parameter values are left alone.
    DECODE_PARAMETER_WORDS = False

    def span(self, data: bytes, pos: int, allowed: frozenset) -> int:
        end = len(data)
        while pos < end and data[pos] in allowed:
            pos += 1
        return pos

    def mime_token(self, data: bytes, pos: int) -> Tuple[str, int]:
        p = self.span(data, pos, TOKEN)
        if p == pos:
            raise GrammarFailure("expected token", pos)
        return data[pos:p].decode("ascii"), p

    def content_type(self, data: bytes, pos: int) -> Tuple[ContentType, int]:
        """``[CFWS] type "/" subtype [CFWS] *(";" parameter)``"""
        _, p = self.opt_cfws(data, pos)
        maintype, p = self.mime_token(data, p)
        _, p = self.opt_cfws(data, p)
        p = self.expect(data, p, b"/")
        _, p = self.opt_cfws(data, p)
        subtype, p = self.mime_token(data, p)
        _, p = self.opt_cfws(data, p)
        parameters, p = self.parameter_list(data, p)
        return ContentType(maintype.lower(), subtype.lower(), parameters), p

    def content_disposition(self, data: bytes, pos: int) -> Tuple[ContentDisposition, int]:
        _, p = self.opt_cfws(data, pos)
        token, p = self.mime_token(data, p)
        _, p = self.opt_cfws(data, p)
        parameters, p = self.parameter_list(data, p)
        return ContentDisposition(token.lower(), parameters), p

    def content_transfer_encoding(self, data: bytes, pos: int) -> Tuple[ContentTransferEncoding, int]:
        _, p = self.opt_cfws(data, pos)
        token, p = self.mime_token(data, p)
        _, p = self.opt_cfws(data, p)
        return ContentTransferEncoding(token.lower()), p

    def parameter_list(self, data: bytes, pos: int) -> Tuple[Parameters, int]:
        raw: List[RawParameter] = []
        p = pos
        while data.startswith(b";", p):
            try:
                param, q = self.attempt(self.parameter_item, data, p + 1)
            except GrammarFailure:
                break
            if param is not None:
                raw.append(param)
            p = q
        return self.combine_parameters(raw), p

    def parameter_item(self, data: bytes, pos: int) -> Tuple[Optional[RawParameter], int]:
        _, p = self.opt_cfws(data, pos)
        param, p = self.parameter(data, p)
        _, p = self.opt_cfws(data, p)
        return param, p

    def parameter(self, data: bytes, pos: int) -> Tuple[RawParameter, int]:
        name, section, extended, p = self.parameter_name(data, pos)
        _, p = self.opt_cfws(data, p)
        p = self.expect(data, p, b"=")
        _, p = self.opt_cfws(data, p)
        if not extended:
            value, p = self.regular_value(data, p)
            return RawParameter(name, section, value, pos), p
        charset = None
        if section in (None, 0):
            charset, p = self.charset_prefix(data, p)
        value, p = self.extended_value(data, p)
        return RawParameter(name, section, value, pos, extended=True, charset=charset), p

    def parameter_name(self, data: bytes, pos: int) -> Tuple[str, Optional[int], bool, int]:
        """
        Returns:
            (lower-cased name, section or None, extended, new_pos)
        """
        p = self.span(data, pos, ATTRIBUTE_CHAR)
        if p == pos:
            raise GrammarFailure("expected parameter name", pos)
        name = data[pos:p].decode("ascii").lower()
        section = None
        if data.startswith(b"*", p) and p + 1 < len(data) and data[p + 1] in DIGIT:
            q = self.span(data, p + 1, DIGIT)
            digits = data[p + 1 : q]
            if len(digits) > MAX_SECTION_DIGITS or (len(digits) > 1 and digits[0] == 0x30):
                raise GrammarFailure("invalid parameter section", p)
            section, p = int(digits), q
        extended = data.startswith(b"*", p)
        if extended:
            p += 1
        return name, section, extended, p

    def regular_value(self, data: bytes, pos: int) -> Tuple[str, int]:
        return self.first(data, pos, self.mime_token, self.quoted_value)

    def quoted_value(self, data: bytes, pos: int) -> Tuple[str, int]:
        return self.bare_quoted_string(data, pos, decode_words=self.DECODE_PARAMETER_WORDS)

    def charset_prefix(self, data: bytes, pos: int) -> Tuple[str, int]:
        """``[charset] "'" [language] "'"``; the language is dropped."""
        p = self.span(data, pos, ATTRIBUTE_CHAR)
        charset = data[pos:p].decode("ascii")
        p = self.expect(data, p, b"'")
        p = self.span(data, p, ATTRIBUTE_CHAR)
        p = self.expect(data, p, b"'")
        return charset, p

    def extended_value(self, data: bytes, pos: int) -> Tuple[bytes, int]:
        out = bytearray()
        p = pos
        end = len(data)
        while p < end:
            octet = data[p]
            if octet == PERCENT:
                pair = data[p + 1 : p + 3]
                if len(pair) == 2 and all(c in HEXDIG for c in pair):
                    out.append(int(pair, 16))
                    p += 3
                    continue
                if not self.stray_percent(p):
                    break
                out.append(octet)
            elif octet not in ATTRIBUTE_CHAR:
                break
            else:
                out.append(octet)
            p += 1
        return bytes(out), p

    def stray_percent(self, pos: int) -> bool:
        """Whether a ``%`` without two hex digits is kept as a literal."""
        return False

    def combine_parameters(self, raw: List[RawParameter]) -> Parameters:
        order: List[str] = []
        plain: Dict[str, str] = {}
        extended: Dict[str, str] = {}
        sections: Dict[str, List[RawParameter]] = {}
        for param in raw:
            if param.name not in order:
                order.append(param.name)
            if param.section is not None:
                sections.setdefault(param.name, []).append(param)
            elif param.extended:
                extended[param.name] = self.decode_extended(param.value, param.charset, param.position)
            else:
                plain[param.name] = param.value

        combined = dict(plain)
        combined.update(extended)
        for name, parts in sections.items():
            combined[name] = self.join_sections(parts)
        return tuple((name, combined[name]) for name in order)

    def join_sections(self, parts: List[RawParameter]) -> str:
        parts = sorted(parts, key=lambda part: part.section)
        charset = parts[0].charset if parts[0].section == 0 else None
        position = parts[0].position
        out: List[str] = []
        pending = bytearray()
        for part in parts:
            if part.extended:
                pending += part.value
                continue
            if pending:
                out.append(self.decode_extended(bytes(pending), charset, position))
                pending.clear()
            out.append(part.value)
        if pending:
            out.append(self.decode_extended(bytes(pending), charset, position))
        return "".join(out)

    def decode_extended(self, value: bytes, charset: Optional[str], pos: int) -> str:
        if not charset:
            return value.decode("utf-8", errors="replace")
        resolver = self.decoder.resolver
        info = resolver.resolve(charset)
        if info is None:
            logger.debug("Decoding parameter with unknown charset %r as UTF-8", charset)
            self.defect(DefectKind.UNKNOWN_CHARSET, pos, f"unknown charset {charset!r}")
            return value.decode("utf-8", errors="replace")
        return resolver.decode(info, value)


class ObsoleteMimeParameterRules(MimeParameterRules):
    """
    Parameters as mail clients write them.

    Empty list elements and a trailing ``;`` are skipped. Unquoted values
    holding spaces or tspecials run to the next ``;``. Encoded words in
    quoted values are decoded. A ``%`` without hex digits is kept literally.
    """

    DECODE_PARAMETER_WORDS = True

    def at_value_end(self, data: bytes, pos: int) -> bool:
        return pos == len(data) or data[pos] == SEMICOLON or (len(data) - pos <= 2 and data[pos:] in self.LINE_BREAKS)

    def parameter_item(self, data: bytes, pos: int) -> Tuple[Optional[RawParameter], int]:
        _, p = self.opt_cfws(data, pos)
        if self.at_value_end(data, p):
            self.defect(DefectKind.EMPTY_LIST_ELEMENT, pos)
            return None, p
        return super().parameter_item(data, pos)

    def regular_value(self, data: bytes, pos: int) -> Tuple[str, int]:
        mark = len(self.defects)
        try:
            value, p = self.attempt(super().regular_value, data, pos)
        except GrammarFailure:
            return self.loose_value(data, pos)
        _, q = self.opt_cfws(data, p)
        if self.at_value_end(data, q):
            return value, p
        del self.defects[mark:]
        return self.loose_value(data, pos)

    def loose_value(self, data: bytes, pos: int) -> Tuple[str, int]:
        limit = len(data)
        for brk in self.LINE_BREAKS:
            if data.endswith(brk):
                limit -= len(brk)
                break
        p = pos
        while p < limit and data[p] != SEMICOLON:
            p += 1
        text = data[pos:p].decode("utf-8", errors="replace")
        text = text.replace("\r\n", "").replace("\n", "").strip()
        if not text:
            raise GrammarFailure("expected parameter value", pos)
        self.defect(DefectKind.INVALID_CHARACTER, pos, "unquoted parameter value")
        return text, p

    def stray_percent(self, pos: int) -> bool:
        self.defect(DefectKind.INVALID_CHARACTER, pos, "'%' without hex digits")
        return True

"""Address productions of RFC 5322 section 3.4 and their obsolete forms."""

import logging
from typing import Callable, List, Tuple, Union

from mailheaders.models.address import (
    Address,
    AddrSpec,
    DomainLiteral,
    DottedAtoms,
    Group,
    Mailbox,
    Word,
)
from mailheaders.models.outcome import DefectKind
from mailheaders.services.domain import DomainNormalizationError, to_ascii_compatible

from .base import WSP, GrammarBase, GrammarFailure

logger = logging.getLogger(__name__)

# A domain before IDNA conversion: raw labels, or a literal.
RawDomain = Union[List[str], DomainLiteral]


class AddressRules(GrammarBase):
    """Strict mailbox, group and address-list productions."""

    def local_part(self, data: bytes, pos: int) -> Tuple[Tuple[Word, ...], int]:
        return self.first(data, pos, self._dot_atom_local_part, self._quoted_local_part)

    def _dot_atom_local_part(self, data: bytes, pos: int):
        labels, p = self.dot_atom(data, pos)
        return tuple(Word(label) for label in labels), p

    def _quoted_local_part(self, data: bytes, pos: int):
        text, p = self.quoted_string(data, pos)
        return (Word(text, quoted=True),), p

    def domain(self, data: bytes, pos: int) -> Tuple[RawDomain, int]:
        return self.first(data, pos, self.dotted_domain, self.domain_literal)

    def dotted_domain(self, data: bytes, pos: int) -> Tuple[List[str], int]:
        return self.dot_atom(data, pos)

    def domain_literal(self, data: bytes, pos: int) -> Tuple[DomainLiteral, int]:
        _, p = self.opt_cfws(data, pos)
        p = self.expect(data, p, b"[")
        parts = []
        end = len(data)
        while p < end and data[p] != 0x5D:
            if data[p] in WSP or self.line_break(data, p):
                text, p = self.fws(data, p)
            else:
                text, p = self.literal_text(data, p)
            parts.append(text)
        p = self.expect(data, p, b"]")
        _, p = self.opt_cfws(data, p)
        return DomainLiteral("".join(parts)), p

    def literal_text(self, data: bytes, pos: int) -> Tuple[str, int]:
        text, p = self.scan(data, pos, self.DTEXT, self.REPLACE_8BIT)
        if p == pos:
            raise GrammarFailure("invalid character in domain literal", pos)
        return text, p

    def addr_spec(self, data: bytes, pos: int) -> Tuple[AddrSpec, int]:
        local, p = self.local_part(data, pos)
        p = self.expect(data, p, b"@")
        domain_pos = p
        domain, p = self.domain(data, p)
        if not isinstance(domain, DomainLiteral):
            domain = self.normalize_domain(domain, domain_pos)
        return AddrSpec(local, domain), p

    def normalize_domain(self, labels: List[str], pos: int) -> DottedAtoms:
        converted = []
        for label in labels:
            try:
                parts = to_ascii_compatible(label, self.config.idna_uts46).split(".")
                if not all(parts):
                    raise DomainNormalizationError(f"Domain label {label!r} maps to an empty label")
            except DomainNormalizationError as e:
                converted.append(self.unconverted_label(label, pos, e))
                continue
            # UTS #46 maps fullwidth and ideographic full stops to "."
            converted.extend(parts)
        return DottedAtoms(tuple(converted))

    def unconverted_label(self, label: str, pos: int, error: DomainNormalizationError) -> str:
        raise GrammarFailure(str(error), pos)

    def route(self, data: bytes, pos: int) -> int:
        """Source route before the addr-spec in an angle-addr; strict has none."""
        return pos

    def angle_addr(self, data: bytes, pos: int) -> Tuple[AddrSpec, int]:
        _, p = self.opt_cfws(data, pos)
        p = self.expect(data, p, b"<")
        p = self.route(data, p)
        spec, p = self.addr_spec(data, p)
        p = self.close(data, p, b">", DefectKind.MISSING_CLOSING_BRACKET)
        _, p = self.opt_cfws(data, p)
        return spec, p

    def name_addr(self, data: bytes, pos: int) -> Tuple[Mailbox, int]:
        try:
            display, p = self.attempt(self.phrase, data, pos)
        except GrammarFailure:
            display, p = None, pos
        spec, p = self.angle_addr(data, p)
        return Mailbox(display, spec), p

    def bare_mailbox(self, data: bytes, pos: int) -> Tuple[Mailbox, int]:
        spec, p = self.addr_spec(data, pos)
        return Mailbox(None, spec), p

    def mailbox(self, data: bytes, pos: int) -> Tuple[Mailbox, int]:
        return self.first(data, pos, self.name_addr, self.bare_mailbox)

    def element_list(self, data: bytes, pos: int, element: Callable, terminators: bytes = b"") -> Tuple[list, int]:
        """``element *("," element)``"""
        item, p = element(data, pos)
        items = [item]
        while data.startswith(b",", p):
            item, p = element(data, p + 1)
            items.append(item)
        return items, p

    def mailbox_list(self, data: bytes, pos: int) -> Tuple[List[Mailbox], int]:
        return self.element_list(data, pos, self.mailbox)

    def group_list(self, data: bytes, pos: int) -> Tuple[List[Mailbox], int]:
        try:
            return self.attempt(self.element_list, data, pos, self.mailbox, b";")
        except GrammarFailure:
            _, p = self.opt_cfws(data, pos)
            return [], p

    def group(self, data: bytes, pos: int) -> Tuple[Group, int]:
        display, p = self.phrase(data, pos)
        p = self.expect(data, p, b":")
        members, p = self.group_list(data, p)
        p = self.close(data, p, b";", DefectKind.MISSING_GROUP_TERMINATOR)
        _, p = self.opt_cfws(data, p)
        return Group(display, tuple(members)), p

    def address(self, data: bytes, pos: int) -> Tuple[Address, int]:
        return self.first(data, pos, self.mailbox, self.group)

    def address_list(self, data: bytes, pos: int) -> Tuple[List[Address], int]:
        return self.element_list(data, pos, self.address)


class ObsoleteAddressRules(AddressRules):
    """obs-local-part, obs-domain, obs-route and obs-*-list."""

    def local_part(self, data: bytes, pos: int) -> Tuple[Tuple[Word, ...], int]:
        word, p = self.local_word(data, pos)
        words = [word]
        while data.startswith(b".", p):
            try:
                word, p = self.attempt(self.local_word, data, p + 1)
            except GrammarFailure:
                break
            words.append(word)
        return tuple(words), p

    def local_word(self, data: bytes, pos: int) -> Tuple[Word, int]:
        try:
            text, p = self.attempt(self.atom, data, pos)
            return Word(text), p
        except GrammarFailure:
            text, p = self.quoted_string(data, pos)
            return Word(text, quoted=True), p

    def dotted_domain(self, data: bytes, pos: int) -> Tuple[List[str], int]:
        label, p = self.atom(data, pos)
        labels = [label]
        while data.startswith(b".", p):
            try:
                label, p = self.atom(data, p + 1)
            except GrammarFailure:
                break
            labels.append(label)
        return labels, p

    def literal_text(self, data: bytes, pos: int) -> Tuple[str, int]:
        if data.startswith(b"\\", pos):
            return self.quoted_pair(data, pos)
        return super().literal_text(data, pos)

    def unconverted_label(self, label: str, pos: int, error: DomainNormalizationError) -> str:
        logger.debug("Keeping domain label %r as is: %s", label, error)
        self.defect(DefectKind.DOMAIN_NOT_NORMALIZED, pos, label)
        return label

    def route(self, data: bytes, pos: int) -> int:
        _, p = self.opt_cfws(data, pos)
        if not data.startswith((b"@", b","), p):
            return pos
        try:
            p = self.attempt(self._domain_list, data, p)
        except GrammarFailure:
            return pos
        self.defect(DefectKind.OBSOLETE_ROUTE, pos)
        return p

    def _domain_list(self, data: bytes, pos: int) -> int:
        """``obs-domain-list ":"``"""
        p = pos
        seen = False
        while True:
            _, p = self.opt_cfws(data, p)
            if data.startswith(b",", p):
                p += 1
            elif data.startswith(b"@", p):
                _, p = self.domain(data, p + 1)
                seen = True
            else:
                break
        if not seen:
            raise GrammarFailure("expected route domain", pos)
        return self.expect(data, p, b":")

    def skip_empty_elements(self, data: bytes, pos: int) -> int:
        """``*([CFWS] ",")``, recording each empty element."""
        p = pos
        while True:
            _, q = self.opt_cfws(data, p)
            if not data.startswith(b",", q):
                return p
            self.defect(DefectKind.EMPTY_LIST_ELEMENT, q)
            p = q + 1

    def element_list(self, data: bytes, pos: int, element: Callable, terminators: bytes = b"") -> Tuple[list, int]:
        """
        A list that tolerates empty elements.

        Parsing stops before the first element that does not match; what is
        left becomes the remainder.
        """
        p = self.skip_empty_elements(data, pos)
        item, p = element(data, p)
        items = [item]
        end = len(data)
        while True:
            _, q = self.opt_cfws(data, p)
            if not data.startswith(b",", q):
                break
            _, r = self.opt_cfws(data, q + 1)
            if r >= end or data[r] == 0x2C or data[r] in terminators:
                self.defect(DefectKind.EMPTY_LIST_ELEMENT, q)
                p = r
                continue
            try:
                item, p = self.attempt(element, data, r)
            except GrammarFailure:
                logger.debug("Stopping list at offset %d", r)
                p = r
                break
            items.append(item)
        return items, p

    def group_list(self, data: bytes, pos: int) -> Tuple[List[Mailbox], int]:
        return super().group_list(data, self.skip_empty_elements(data, pos))

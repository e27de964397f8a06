"""Message identifiers (RFC 5322 section 3.6.4)."""

from typing import List, Optional, Tuple

from mailheaders.models.address import DomainLiteral
from mailheaders.models.message_id import MessageID
from mailheaders.models.outcome import DefectKind

from .base import GrammarBase, GrammarFailure


class MessageIdRules(GrammarBase):
    """``msg-id = [CFWS] "<" id-left "@" id-right ">" [CFWS]``"""

    def msg_id(self, data: bytes, pos: int) -> Tuple[MessageID, int]:
        _, p = self.opt_cfws(data, pos)
        p = self.expect(data, p, b"<")
        left, p = self.id_left(data, p)
        right, p = self.id_right_part(data, p)
        p = self.close(data, p, b">", DefectKind.MISSING_CLOSING_BRACKET)
        _, p = self.opt_cfws(data, p)
        return MessageID(left, right), p

    def id_left(self, data: bytes, pos: int) -> Tuple[str, int]:
        labels, p = self.dot_atom_text(data, pos)
        return ".".join(labels), p

    def id_right_part(self, data: bytes, pos: int) -> Tuple[Optional[str], int]:
        p = self.expect(data, pos, b"@")
        return self.id_right(data, p)

    def id_right(self, data: bytes, pos: int) -> Tuple[str, int]:
        return self.first(data, pos, self.id_left, self.no_fold_literal)

    def no_fold_literal(self, data: bytes, pos: int) -> Tuple[str, int]:
        p = self.expect(data, pos, b"[")
        text, p = self.scan(data, p, self.DTEXT)
        p = self.expect(data, p, b"]")
        return f"[{text}]", p

    def msg_id_list(self, data: bytes, pos: int) -> Tuple[List[MessageID], int]:
        """``1*msg-id`` as used by In-Reply-To and References."""
        item, p = self.msg_id(data, pos)
        items = [item]
        while True:
            try:
                item, p = self.attempt(self.msg_id, data, p)
            except GrammarFailure:
                break
            items.append(item)
        return items, p


class ObsoleteMessageIdRules(MessageIdRules):
    """
    Message identifiers as they appear in the wild.

    Accepts CFWS inside the brackets, obsolete local parts and domains, a
    missing right part, a missing closing bracket at the end of input and
    identifiers without any brackets.
    """

    def msg_id(self, data: bytes, pos: int) -> Tuple[MessageID, int]:
        _, p = self.opt_cfws(data, pos)
        if data.startswith(b"<", p):
            return super().msg_id(data, pos)
        left, q = self.id_left(data, p)
        q = self.expect(data, q, b"@")
        right, q = self.id_right(data, q)
        self.defect(DefectKind.MISSING_ANGLE_BRACKETS, p)
        _, q = self.opt_cfws(data, q)
        return MessageID(left, right), q

    def id_left(self, data: bytes, pos: int) -> Tuple[str, int]:
        words, p = self.local_part(data, pos)
        left = ".".join(word.text for word in words)
        if not left:
            raise GrammarFailure("empty id-left", pos)
        return left, p

    def id_right_part(self, data: bytes, pos: int) -> Tuple[Optional[str], int]:
        _, p = self.opt_cfws(data, pos)
        if not data.startswith(b"@", p):
            self.defect(DefectKind.MISSING_ID_RIGHT, p)
            return None, p
        return self.id_right(data, p + 1)

    def id_right(self, data: bytes, pos: int) -> Tuple[str, int]:
        domain, p = self.domain(data, pos)
        if isinstance(domain, DomainLiteral):
            return domain.text, p
        return ".".join(domain), p

    def msg_id_list(self, data: bytes, pos: int) -> Tuple[List[MessageID], int]:
        """
        ``obs-references``: identifiers mixed with phrases and commas.

        Phrases and commas are skipped. At least one identifier is required.
        """
        items = []
        p = pos
        while True:
            _, p = self.opt_cfws(data, p)
            if data.startswith(b",", p):
                p += 1
                continue
            if data.startswith(b"<", p):
                try:
                    item, p = self.attempt(super().msg_id, data, p)
                except GrammarFailure:
                    break
                items.append(item)
                continue
            try:
                _, p = self.attempt(self.phrase, data, p)
            except GrammarFailure:
                break
        if not items:
            raise GrammarFailure("expected message identifier", pos)
        return items, p

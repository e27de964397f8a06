"""Unstructured field bodies (RFC 5322 section 3.2.5) such as Subject."""

from typing import List, Tuple

from mailheaders.services.encoded_words import Piece, PieceKind, join_pieces

from .base import CR, LF, OBS_NO_WS_CTL, VCHAR, WSP, GrammarBase, GrammarFailure


class UnstructuredRules(GrammarBase):
    UTEXT = VCHAR

    def unstructured(self, data: bytes, pos: int) -> Tuple[str, int]:
        """
        ``unstructured = (*([FWS] VCHAR) *WSP)``

        Encoded words are decoded; leading and trailing white space is
        dropped.
        """
        pieces: List[Piece] = []
        p = pos
        end = len(data)
        while p < end:
            octet = data[p]
            if octet in WSP or octet in (CR, LF):
                try:
                    text, p = self.unstructured_space(data, p)
                except GrammarFailure:
                    break
                pieces.append(Piece(PieceKind.SPACE, text))
                continue
            token, q = self.scan(data, p, self.UTEXT, self.REPLACE_8BIT)
            if q == p:
                break
            pieces.extend(self.decode_token(token, p))
            p = q
        return join_pieces(pieces), p

    def unstructured_space(self, data: bytes, pos: int) -> Tuple[str, int]:
        return self.fws(data, pos)


class ObsoleteUnstructuredRules(UnstructuredRules):
    """``obs-unstruct``: control characters and stray line breaks are allowed."""

    UTEXT = VCHAR | OBS_NO_WS_CTL | {0x00}

    def unstructured_space(self, data: bytes, pos: int) -> Tuple[str, int]:
        try:
            return self.fws(data, pos)
        except GrammarFailure:
            pass
        p = pos
        end = len(data)
        while p < end and data[p] in (CR, LF):
            p += 1
        if p == pos:
            raise GrammarFailure("expected white space", pos)
        return "", p

"""Lexical tokens of RFC 5322 section 3.2: FWS, comments, atoms, quoted strings, phrases."""

from typing import List, Tuple

from mailheaders.models.address import Word
from mailheaders.models.outcome import DefectKind
from mailheaders.services.encoded_words import Piece, PieceKind, join_pieces

from .base import (
    ATEXT,
    CR,
    LF,
    OBS_NO_WS_CTL,
    REPLACEMENT_CHARACTER,
    VCHAR,
    WSP,
    Gap,
    GrammarBase,
    GrammarFailure,
    ResourceLimitExceeded,
    _chars,
    utf8_width,
)

OPEN_PAREN = 0x28
CLOSE_PAREN = 0x29
BACKSLASH = 0x5C
DQUOTE = 0x22
DOT = 0x2E


class TokenRules(GrammarBase):
    """Strict RFC 5322 lexical productions."""

    ATEXT = ATEXT
    CTEXT = VCHAR - _chars("()\\")
    QTEXT = VCHAR - _chars('"\\')
    DTEXT = VCHAR - _chars("[]\\")
    QUOTED_PAIR = VCHAR | WSP
    # Obsolete phrases may contain bare dots.
    PHRASE_DOTS = False
    # A comment alone between two atoms does not separate them.
    COMMENT_SEPARATES_ATOMS = False

    def fws(self, data: bytes, pos: int) -> Tuple[str, int]:
        """
        Folding white space.

        A line break counts only when white space follows it. The returned
        text is the white space with the line breaks removed.

        Raises:
            GrammarFailure: If there is no white space at ``pos``
        """
        parts = []
        folds = 0
        p = pos
        while True:
            q = self.skip_wsp(data, p)
            if q > p:
                parts.append(data[p:q])
                p = q
            brk = self.line_break(data, p)
            if not brk or (self.MAX_FOLDS is not None and folds >= self.MAX_FOLDS):
                break
            q = self.skip_wsp(data, p + brk)
            if q == p + brk:
                break
            folds += 1
            parts.append(data[p + brk : q])
            p = q
        if p == pos:
            raise GrammarFailure("expected white space", pos)
        return b"".join(parts).decode("ascii"), p

    def quoted_pair(self, data: bytes, pos: int) -> Tuple[str, int]:
        if pos + 1 >= len(data):
            raise GrammarFailure("incomplete quoted-pair", pos)
        octet = data[pos + 1]
        if octet < 0x80:
            if octet in self.QUOTED_PAIR:
                return chr(octet), pos + 2
            raise GrammarFailure("invalid quoted-pair", pos)
        width = utf8_width(data, pos + 1) if self.config.allow_utf8 else 0
        if width:
            return data[pos + 1 : pos + 1 + width].decode("utf-8"), pos + 1 + width
        if self.REPLACE_8BIT:
            self.defect(DefectKind.INVALID_CHARACTER, pos + 1, "8-bit octet replaced")
            return REPLACEMENT_CHARACTER, pos + 2
        raise GrammarFailure("invalid quoted-pair", pos)

    def comment(self, data: bytes, pos: int) -> int:
        """
        A possibly nested comment. Its content is discarded.

        Nesting is tracked with a counter, so the stack never grows with the
        input.

        Raises:
            GrammarFailure: If the comment is malformed or unterminated
            ResourceLimitExceeded: If nesting exceeds ``max_comment_depth``
        """
        start = pos
        pos = self.expect(data, pos, b"(")
        depth = 1
        limit = self.config.max_comment_depth
        end = len(data)
        while depth:
            if pos >= end:
                raise GrammarFailure("unterminated comment", start)
            octet = data[pos]
            if octet == OPEN_PAREN:
                depth += 1
                if depth > limit:
                    raise ResourceLimitExceeded(f"comments nested deeper than {limit}", pos)
                pos += 1
            elif octet == CLOSE_PAREN:
                depth -= 1
                pos += 1
            elif octet == BACKSLASH:
                _, pos = self.quoted_pair(data, pos)
            elif octet in WSP or self.line_break(data, pos):
                _, pos = self.fws(data, pos)
            else:
                _, q = self.scan(data, pos, self.CTEXT, self.REPLACE_8BIT)
                if q == pos:
                    raise GrammarFailure("invalid character in comment", pos)
                pos = q
        return pos

    def cfws(self, data: bytes, pos: int) -> Tuple[Gap, int]:
        """
        Comments and folding white space.

        Returns:
            (gap, new_pos) where gap tells whether white space, comments or
            both were seen
        """
        gap = Gap.NONE
        p = pos
        end = len(data)
        while p < end:
            if data[p] in WSP or self.line_break(data, p):
                try:
                    _, p = self.fws(data, p)
                except GrammarFailure:
                    break
                gap |= Gap.SPACE
            if p < end and data[p] == OPEN_PAREN:
                p = self.comment(data, p)
                gap |= Gap.COMMENT
                continue
            break
        if gap == Gap.NONE:
            raise GrammarFailure("expected comment or white space", pos)
        return gap, p

    def opt_cfws(self, data: bytes, pos: int) -> Tuple[Gap, int]:
        try:
            return self.cfws(data, pos)
        except GrammarFailure:
            return Gap.NONE, pos

    def atext_run(self, data: bytes, pos: int) -> Tuple[str, int]:
        text, p = self.scan(data, pos, self.ATEXT)
        if p == pos:
            raise GrammarFailure("expected atom", pos)
        return text, p

    def atom(self, data: bytes, pos: int) -> Tuple[str, int]:
        _, p = self.opt_cfws(data, pos)
        text, p = self.atext_run(data, p)
        _, p = self.opt_cfws(data, p)
        return text, p

    def dot_atom_text(self, data: bytes, pos: int) -> Tuple[List[str], int]:
        label, p = self.atext_run(data, pos)
        labels = [label]
        while data.startswith(b".", p):
            try:
                label, q = self.atext_run(data, p + 1)
            except GrammarFailure:
                break
            labels.append(label)
            p = q
        return labels, p

    def dot_atom(self, data: bytes, pos: int) -> Tuple[List[str], int]:
        _, p = self.opt_cfws(data, pos)
        labels, p = self.dot_atom_text(data, p)
        _, p = self.opt_cfws(data, p)
        return labels, p

    def bare_quoted_string(self, data: bytes, pos: int, decode_words: bool = False) -> Tuple[str, int]:
        """
        A quoted string without surrounding CFWS.

        Args:
            data: Input
            pos: Offset of the opening quote
            decode_words: Decode encoded words found inside, when
                ``decode_quoted_encoded_words`` is set

        Returns:
            (content, new_pos) with quoting removed
        """
        start = pos
        pos = self.expect(data, pos, b'"')
        decode = decode_words and self.config.decode_quoted_encoded_words
        pieces: List[Piece] = []
        end = len(data)
        while True:
            if pos >= end:
                raise GrammarFailure("unterminated quoted-string", start)
            octet = data[pos]
            if octet == DQUOTE:
                pos += 1
                break
            if octet == BACKSLASH:
                text, pos = self.quoted_pair(data, pos)
                pieces.append(Piece(PieceKind.TEXT, text))
            elif octet in WSP or self.line_break(data, pos):
                text, pos = self.fws(data, pos)
                pieces.append(Piece(PieceKind.SPACE, text))
            else:
                text, q = self.scan(data, pos, self.QTEXT, self.REPLACE_8BIT)
                if q == pos:
                    raise GrammarFailure("invalid character in quoted-string", pos)
                if decode:
                    pieces.extend(self.decode_token(text, pos))
                else:
                    pieces.append(Piece(PieceKind.TEXT, text))
                pos = q
        if decode:
            return join_pieces(pieces, strip_edges=False), pos
        return "".join(piece.text for piece in pieces), pos

    def quoted_string(self, data: bytes, pos: int, decode_words: bool = False) -> Tuple[str, int]:
        _, p = self.opt_cfws(data, pos)
        text, p = self.bare_quoted_string(data, p, decode_words)
        _, p = self.opt_cfws(data, p)
        return text, p

    def close(self, data: bytes, pos: int, literal: bytes, kind: DefectKind) -> int:
        """Consume a closing delimiter such as ``>`` or ``;``."""
        return self.expect(data, pos, literal)

    def phrase(self, data: bytes, pos: int) -> Tuple[Tuple[Word, ...], int]:
        """
        A display name: one or more atoms and quoted strings.

        Encoded words are decoded. Adjacent encoded words separated only by
        white space are merged into a single word.
        """
        items = []
        gap, p = self.opt_cfws(data, pos)
        end = len(data)
        while p < end:
            octet = data[p]
            if octet == DQUOTE:
                text, q = self.bare_quoted_string(data, p, decode_words=True)
                kind = "quoted"
            elif octet == DOT and self.PHRASE_DOTS and items:
                text, q = ".", p + 1
                kind = "dot"
            else:
                try:
                    text, q = self.atext_run(data, p)
                except GrammarFailure:
                    break
                kind = "atom"
            items.append((gap, kind, text))
            gap, p = self.opt_cfws(data, q)
        if not items:
            raise GrammarFailure("expected phrase", pos)
        return self._phrase_words(items, pos), p

    def _phrase_words(self, items, pos: int) -> Tuple[Word, ...]:
        # Glue dots to their neighbours when nothing separates them.
        glued = []
        for gap, kind, text in items:
            if glued and gap == Gap.NONE and "dot" in (kind, glued[-1][1]):
                prev_gap, prev_kind, prev_text = glued[-1]
                merged_kind = "quoted" if "quoted" in (kind, prev_kind) else "atom"
                glued[-1] = (prev_gap, merged_kind, prev_text + text)
                continue
            glued.append((gap, kind, text))

        entries = []
        for index, (gap, kind, text) in enumerate(glued):
            if index and kind != "quoted" and glued[index - 1][1] != "quoted":
                if gap == Gap.COMMENT and not self.COMMENT_SEPARATES_ATOMS:
                    raise GrammarFailure("atoms separated only by a comment", pos)
            if kind == "quoted":
                entries.append((gap, "quoted", text))
                continue
            for offset, piece in enumerate(self.decode_token(text, pos, find_embedded=False)):
                piece_kind = "word" if piece.kind is PieceKind.WORD else "atom"
                entries.append((gap if offset == 0 else Gap.NONE, piece_kind, piece.text))

        words: List[Word] = []
        previous = None
        for gap, kind, text in entries:
            if words and kind == "word" and previous == "word" and gap in (Gap.NONE, Gap.SPACE):
                words[-1] = Word(words[-1].text + text)
            elif words and gap == Gap.NONE and "quoted" not in (kind, previous):
                words[-1] = Word(words[-1].text + text)
            else:
                words.append(Word(text, quoted=kind == "quoted"))
            previous = kind
        return tuple(words)


class ObsoleteTokenRules(TokenRules):
    """RFC 5322 section 4 relaxations of the lexical productions."""

    LINE_BREAKS = (b"\r\n", b"\n")
    MAX_FOLDS = None
    REPLACE_8BIT = True
    ALLOW_REMAINDER = True

    CTEXT = TokenRules.CTEXT | OBS_NO_WS_CTL
    QTEXT = TokenRules.QTEXT | OBS_NO_WS_CTL
    DTEXT = TokenRules.DTEXT | OBS_NO_WS_CTL
    QUOTED_PAIR = TokenRules.QUOTED_PAIR | OBS_NO_WS_CTL | {0x00, CR, LF}
    PHRASE_DOTS = True
    COMMENT_SEPARATES_ATOMS = True

    def close(self, data: bytes, pos: int, literal: bytes, kind: DefectKind) -> int:
        if len(data) - pos <= 2 and data[pos:] in (b"", b"\r\n", b"\n"):
            self.defect(kind, pos, f"missing {literal.decode('ascii')!r}")
            return pos
        return super().close(data, pos, literal, kind)

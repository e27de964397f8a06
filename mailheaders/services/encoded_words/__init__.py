"""RFC 2047 encoded-word decoding"""

from .decoder import (
    ENCODED_WORD,
    EncodedWord,
    EncodedWordDecoder,
    Piece,
    PieceKind,
    decode_b,
    decode_q,
    join_pieces,
)

__all__ = [
    "ENCODED_WORD",
    "EncodedWord",
    "EncodedWordDecoder",
    "Piece",
    "PieceKind",
    "decode_b",
    "decode_q",
    "join_pieces",
]

"""Charset label resolution for encoded words."""

import codecs
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Labels seen in real mail that Python's codec registry does not know, or
# knows under a narrower charset than the one senders actually use.
BUILTIN_ALIASES = {
    "x-sjis": "shift_jis",
    "x-euc-jp": "euc_jp",
    "ks_c_5601-1987": "cp949",
    "ks_c_5601": "cp949",
    "x-gbk": "gbk",
    "gb2312": "gbk",
    "x-gb2312": "gbk",
    "iso-8859-8-i": "iso8859_8",
    "iso-8859-6-i": "iso8859_6",
    "windows-874": "cp874",
    "x-mac-roman": "mac_roman",
    "x-mac-cyrillic": "mac_cyrillic",
    "unicode-1-1-utf-7": "utf_7",
    "x-unicode20utf8": "utf_8",
}


class CharsetResolver:
    """
    Map charset labels to text codecs.

    Unknown labels resolve to None instead of raising, so callers can leave
    the affected encoded word undecoded and keep going.
    """

    def __init__(self, aliases: Optional[Dict[str, str]] = None):
        """
        Initialize resolver.

        Args:
            aliases: Extra label to codec name mappings, checked before the
                built-in table
        """
        self.aliases = dict(BUILTIN_ALIASES)
        if aliases:
            self.aliases.update(aliases)

    def resolve(self, label: str) -> Optional[codecs.CodecInfo]:
        """
        Look up the codec for a charset label.

        Args:
            label: Charset label from an encoded word, case-insensitive

        Returns:
            CodecInfo of a text codec, or None if the label is unsupported
        """
        key = label.strip().lower()
        if not key:
            return None
        name = self.aliases.get(key, key)
        try:
            info = codecs.lookup(name)
            # Rejects bytes-to-bytes codecs such as "base64" or "zlib", and
            # codecs such as "idna" that refuse the replace handler. Empty
            # input passes every codec.
            b"\x00".decode(info.name, errors="replace")
        except (LookupError, UnicodeError):
            logger.debug("Unsupported charset label %r", label)
            return None
        return info

    def decode(self, info: codecs.CodecInfo, payload: bytes) -> str:
        """Decode bytes, substituting U+FFFD for invalid sequences."""
        return payload.decode(info.name, errors="replace")

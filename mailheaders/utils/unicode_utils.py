"""Unicode and email header decoding utilities."""

from typing import Optional

from mailheaders.config.parser_config import ParserConfig
from mailheaders.services.header_parser import decode_encoded_words


def decode_email_header(header_value: Optional[str], config: Optional[ParserConfig] = None) -> str:
    """
    Decode RFC 2047 encoded words in a header value to a Unicode string.

    Args:
        header_value: Header value (may be encoded)
        config: Parser configuration

    Returns:
        Decoded Unicode string, "" for empty input

    Examples:
        >>> decode_email_header("=?UTF-8?B?5Lit5paH?=")
        '中文'
        >>> decode_email_header("=?UTF-8?B?5byg5LiJ?=<test@example.com>")
        '张三<test@example.com>'
    """
    if not header_value:
        return ""

    return decode_encoded_words(header_value.encode("utf-8"), config)

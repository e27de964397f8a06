"""Header section splitting and per-field parsing."""

from .header_extractor import FIELD_PARSERS, HeaderExtractor, parse_header, parser_for
from .header_section import split_header, split_header_section

__all__ = [
    "FIELD_PARSERS",
    "HeaderExtractor",
    "parse_header",
    "parser_for",
    "split_header",
    "split_header_section",
]

"""Rendering of parsed header values"""

from .formatter import (
    OutcomeFormatter,
    format_address,
    format_address_list,
    format_date_time,
    format_group,
    format_mailbox,
    format_message_id,
    format_word,
    quote_string,
    to_jsonable,
)

__all__ = [
    "OutcomeFormatter",
    "format_address",
    "format_address_list",
    "format_date_time",
    "format_group",
    "format_mailbox",
    "format_message_id",
    "format_word",
    "quote_string",
    "to_jsonable",
]

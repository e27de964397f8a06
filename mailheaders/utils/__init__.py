"""Utility functions"""

from .message_id_utils import normalize_message_id
from .unicode_utils import decode_email_header

__all__ = ["normalize_message_id", "decode_email_header"]

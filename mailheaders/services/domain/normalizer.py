"""Conversion of internationalized domain labels to their ASCII form."""

import logging

import idna

logger = logging.getLogger(__name__)


class DomainNormalizationError(ValueError):
    """Raised when a label has no valid ASCII-compatible encoding."""

    pass


def to_ascii_compatible(label: str, uts46: bool = True) -> str:
    """
    Convert one domain label to its IDNA ASCII-compatible form.

    Args:
        label: A single label (no dots), possibly non-ASCII
        uts46: Apply UTS #46 mapping (case folding, width mapping) first

    Returns:
        The label unchanged when it is already ASCII, else the ``xn--`` form

    Raises:
        DomainNormalizationError: If IDNA rejects the label

    Examples:
        >>> to_ascii_compatible("exämple")
        'xn--exmple-cua'
        >>> to_ascii_compatible("Example")
        'Example'
    """
    if label.isascii():
        return label
    try:
        return idna.encode(label, uts46=uts46).decode("ascii")
    except idna.IDNAError as e:
        logger.debug("IDNA rejected label %r: %s", label, e)
        raise DomainNormalizationError(f"Cannot convert domain label {label!r}: {e}") from e

"""Address data models: words, addr-specs, mailboxes and groups."""

import ipaddress
from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Word:
    """
    A display-name or local-part word.

    Words come from atoms or quoted-strings. Quoting only affects how a word
    has to be rendered, so two words compare equal when their text does.

    Attributes:
        text: Unquoted, un-escaped and encoded-word-decoded text
        quoted: True if the word came from a quoted-string
    """

    text: str
    quoted: bool = field(default=False, compare=False)


@dataclass(frozen=True)
class DottedAtoms:
    """Domain written as dot-separated atoms (``mail.example.com``)."""

    labels: Tuple[str, ...]

    def __post_init__(self):
        if not self.labels or not all(self.labels):
            raise ValueError("domain labels must not be empty")

    @property
    def text(self) -> str:
        return ".".join(self.labels)


@dataclass(frozen=True)
class DomainLiteral:
    """
    Bracketed domain literal such as ``[192.0.2.1]``.

    Attributes:
        literal: Text between the brackets
    """

    literal: str

    @property
    def text(self) -> str:
        return f"[{self.literal}]"

    @property
    def ip_address(self) -> Optional[Union[ipaddress.IPv4Address, ipaddress.IPv6Address]]:
        """The literal as an IP address, or None for general literals."""
        value = self.literal.strip()
        if value[:5].lower() == "ipv6:":
            try:
                return ipaddress.IPv6Address(value[5:])
            except ValueError:
                return None
        try:
            return ipaddress.IPv4Address(value)
        except ValueError:
            return None


DomainVariant = Union[DottedAtoms, DomainLiteral]


@dataclass(frozen=True)
class AddrSpec:
    """
    ``local-part@domain``.

    Attributes:
        local_part: Dot-separated words, or a single quoted word
        domain: Domain in ASCII-compatible form where it could be converted
    """

    local_part: Tuple[Word, ...]
    domain: DomainVariant

    def __post_init__(self):
        if not self.local_part:
            raise ValueError("local_part must not be empty")

    @property
    def local_text(self) -> str:
        return ".".join(word.text for word in self.local_part)

    @property
    def domain_text(self) -> str:
        return self.domain.text

    @property
    def address(self) -> str:
        """Plain ``local@domain`` text, without quoting."""
        return f"{self.local_text}@{self.domain_text}"


@dataclass(frozen=True)
class Mailbox:
    """
    A single mailbox with an optional display name.

    Attributes:
        display_name: Words of the display name, or None
        address: The mailbox address
    """

    display_name: Optional[Tuple[Word, ...]]
    address: AddrSpec

    @property
    def name(self) -> Optional[str]:
        """Display name joined with single spaces."""
        if self.display_name is None:
            return None
        return " ".join(word.text for word in self.display_name)


@dataclass(frozen=True)
class Group:
    """
    A named group of mailboxes. The member list may be empty.

    Attributes:
        display_name: Words of the group name
        members: Mailboxes in the group
    """

    display_name: Tuple[Word, ...]
    members: Tuple[Mailbox, ...] = ()

    def __post_init__(self):
        if not self.display_name:
            raise ValueError("group display_name must not be empty")

    @property
    def name(self) -> str:
        return " ".join(word.text for word in self.display_name)


Address = Union[Mailbox, Group]

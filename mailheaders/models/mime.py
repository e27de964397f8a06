"""MIME content header models (RFC 2045, RFC 2183)."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

# (name, value) pairs; names are lower-cased, RFC 2231 sections already joined
Parameters = Tuple[Tuple[str, str], ...]


def _lookup(parameters: Parameters, name: str) -> Optional[str]:
    name = name.lower()
    for key, value in parameters:
        if key == name:
            return value
    return None


def _is_extension(token: str) -> bool:
    return token.startswith("x-") and len(token) > 2


@dataclass(frozen=True)
class ContentType:
    """
    Parsed ``type/subtype; name=value ...``.

    Attributes:
        maintype: Lower-cased top-level media type
        subtype: Lower-cased subtype
        parameters: Parameters in the order their names first appear
    """

    maintype: str
    subtype: str
    parameters: Parameters = ()

    @property
    def mime_type(self) -> str:
        return f"{self.maintype}/{self.subtype}"

    def param(self, name: str) -> Optional[str]:
        """Value of a parameter, case-insensitively, or None."""
        return _lookup(self.parameters, name)


class DispositionKind(Enum):
    """Kind of a Content-Disposition token."""

    INLINE = "inline"
    ATTACHMENT = "attachment"
    EXTENSION = "extension"
    OTHER = "other"


@dataclass(frozen=True)
class ContentDisposition:
    """
    Parsed ``disposition; name=value ...``.

    Attributes:
        token: Lower-cased disposition type
        parameters: Parameters in the order their names first appear
    """

    token: str
    parameters: Parameters = ()

    @property
    def kind(self) -> DispositionKind:
        if self.token in ("inline", "attachment"):
            return DispositionKind(self.token)
        if _is_extension(self.token):
            return DispositionKind.EXTENSION
        return DispositionKind.OTHER

    @property
    def filename(self) -> Optional[str]:
        return self.param("filename")

    def param(self, name: str) -> Optional[str]:
        """Value of a parameter, case-insensitively, or None."""
        return _lookup(self.parameters, name)


class TransferEncoding(Enum):
    """Content-Transfer-Encoding mechanisms."""

    SEVEN_BIT = "7bit"
    EIGHT_BIT = "8bit"
    BINARY = "binary"
    BASE64 = "base64"
    QUOTED_PRINTABLE = "quoted-printable"
    EXTENSION = "extension"
    OTHER = "other"


@dataclass(frozen=True)
class ContentTransferEncoding:
    """Parsed Content-Transfer-Encoding; ``token`` is lower-cased."""

    token: str

    @property
    def mechanism(self) -> TransferEncoding:
        if self.token in ("7bit", "8bit", "binary", "base64", "quoted-printable"):
            return TransferEncoding(self.token)
        if _is_extension(self.token):
            return TransferEncoding.EXTENSION
        return TransferEncoding.OTHER

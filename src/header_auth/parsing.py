"""Parsing of RFC 7235 ``Scheme parameter`` header values.

Malformed values never raise here; they simply produce no credential.
Decoding of Basic credentials is strict and raises ``CredentialDecodeError``.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from header_auth.constants import BASIC_ENCODING

logger = logging.getLogger(__name__)

# RFC 7230 tchar
_TOKEN = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"

_TOKEN_PATTERN = re.compile(rf"{_TOKEN}\Z")
_HEADER_PATTERN = re.compile(rf"[ \t]*(?P<scheme>{_TOKEN})(?:[ \t]+(?P<parameter>.*?))?[ \t]*\Z", re.DOTALL)


class CredentialDecodeError(ValueError):
    """Raised when a Basic credential parameter cannot be decoded."""


@dataclass(frozen=True)
class Credential:
    """One parsed header value.

    Attributes:
        scheme: The scheme token exactly as sent by the client.
        parameter: The opaque text following the scheme, or ``None``.
    """

    scheme: str
    parameter: str | None = None

    def __repr__(self) -> str:
        # The parameter is a secret; keep it out of reprs and tracebacks.
        return f"Credential(scheme={self.scheme!r}, parameter={'<hidden>' if self.parameter else None})"


def is_token(value: str) -> bool:
    """Return True if ``value`` is a valid RFC 7230 token."""
    return bool(_TOKEN_PATTERN.match(value))


def parse_header_value(value: str | None) -> Credential | None:
    """Parse a single header value into a ``Credential``.

    Returns None for None, blank or malformed values.
    """
    if not value:
        return None
    match = _HEADER_PATTERN.match(value)
    if match is None:
        return None
    return Credential(scheme=match.group("scheme"), parameter=match.group("parameter") or None)


def parse_credentials(values: str | Iterable[str | None], scheme: str) -> Iterator[Credential]:
    """Yield the credentials among ``values`` whose scheme matches ``scheme``.

    Args:
        values: All values of the header, or a single value.
        scheme: Expected scheme, compared ignoring ASCII case.

    Returns:
        A one-shot iterator over matching credentials in header order.

    Raises:
        ValueError: If ``values`` is None.
    """
    if values is None:
        raise ValueError("values must not be None")
    if isinstance(values, str):
        values = (values,)
    return _iter_credentials(values, scheme.lower())


def _iter_credentials(values: Iterable[str | None], expected: str) -> Iterator[Credential]:
    for index, value in enumerate(values):
        credential = parse_header_value(value)
        if credential is None:
            if value:
                logger.debug("Skipping malformed header value at position %d", index)
            continue
        if credential.scheme.lower() != expected:
            continue
        yield credential


def decode_basic_credentials(parameter: str) -> tuple[str, str]:
    """Decode a Basic ``base64(user:password)`` parameter.

    The decoded bytes are read as ISO-8859-1 and split on the first colon, so
    the password may itself contain colons.

    Raises:
        CredentialDecodeError: If the parameter is not valid base64 or the
            decoded text has no colon.
    """
    try:
        raw = base64.b64decode(parameter, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise CredentialDecodeError("Basic credentials are not valid base64") from exc

    credentials = raw.decode(BASIC_ENCODING)
    user, separator, password = credentials.partition(":")
    if not separator:
        raise CredentialDecodeError("Basic credentials are missing the ':' separator")
    return user, password

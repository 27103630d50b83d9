"""Per-request authentication against the configured header."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from starlette.datastructures import Headers

from header_auth.claims import Identity
from header_auth.constants import AUTHENTICATION_FAILED_MESSAGE, DEFAULT_SCHEME, MISSING_HEADER_MESSAGE
from header_auth.options import HeaderAuthenticationOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticateResult:
    """Outcome of one authentication attempt.

    Use ``success()`` or ``fail()`` to construct.
    """

    identity: Identity | None = None
    scheme_name: str | None = None
    failure: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.identity is not None

    @classmethod
    def success(cls, identity: Identity, scheme_name: str) -> AuthenticateResult:
        if identity is None:
            raise ValueError("identity must not be None")
        return cls(identity=identity, scheme_name=scheme_name)

    @classmethod
    def fail(cls, message: str) -> AuthenticateResult:
        return cls(failure=message)


def _header_values(headers: Headers | Mapping[str, Any], name: str) -> list[str | None] | None:
    """Return all values of header ``name``, or None if it is absent."""
    if isinstance(headers, Headers):
        if name not in headers:
            return None
        return headers.getlist(name)

    wanted = name.lower()
    found: list[str | None] | None = None
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        found = found if found is not None else []
        if isinstance(value, (list, tuple)):
            found.extend(value)
        else:
            found.append(value)
    return found


class HeaderAuthenticationHandler:
    """Authenticates requests using the header configured in ``options``.

    Args:
        options: Validated authentication options.
        scheme_name: Name reported in successful results.
    """

    def __init__(
        self,
        options: HeaderAuthenticationOptions,
        scheme_name: str = DEFAULT_SCHEME,
    ) -> None:
        self._options = options
        self._scheme_name = scheme_name

    @property
    def options(self) -> HeaderAuthenticationOptions:
        return self._options

    @property
    def scheme_name(self) -> str:
        return self._scheme_name

    async def authenticate(self, headers: Headers | Mapping[str, Any]) -> AuthenticateResult:
        """Authenticate a request from its headers.

        Args:
            headers: Starlette ``Headers`` or a mapping of header names to a
                value or a list of values. Names are matched ignoring case.
        """
        header_name = self._options.header_name
        values = _header_values(headers, header_name)
        if values is None:
            logger.debug("Header %s not present", header_name)
            return AuthenticateResult.fail(MISSING_HEADER_MESSAGE.format(header_name=header_name))

        logger.debug("Authenticating with %d value(s) of header %s", len(values), header_name)
        identity = await self._options.header_handler.authenticate(values)
        if identity is None:
            logger.warning("Authentication with header %s failed", header_name)
            return AuthenticateResult.fail(AUTHENTICATION_FAILED_MESSAGE)

        logger.info("Authentication ticket issued for scheme %s based on header %s", self._scheme_name, header_name)
        return AuthenticateResult.success(identity, self._scheme_name)

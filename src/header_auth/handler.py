"""Header handlers: first-match-wins authentication over header values."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from header_auth.claims import Identity
from header_auth.parsing import is_token, parse_credentials
from header_auth.protocol import HeaderHandler
from header_auth.verifiers import Verifier

logger = logging.getLogger(__name__)


class SchemeHandler:
    """Authenticates header values of one scheme with a ``Verifier``.

    Values are tried in header order; the first one the verifier grants at
    least one claim for wins and the rest are never looked at.

    Args:
        verifier: Verifier for the parameter of matching values.
        authentication_type: Label stored in the resulting ``Identity``.
        scheme: Expected scheme. Defaults to ``verifier.scheme``.
    """

    def __init__(
        self,
        verifier: Verifier,
        authentication_type: str,
        *,
        scheme: str | None = None,
    ) -> None:
        if verifier is None:
            raise ValueError("verifier must not be None")
        if not authentication_type:
            raise ValueError("authentication_type must not be empty")
        scheme = scheme if scheme is not None else verifier.scheme
        if not scheme or not is_token(scheme):
            raise ValueError(f"Invalid scheme: {scheme!r}")
        self._verifier = verifier
        self.authentication_type = authentication_type
        self.scheme = scheme

    @property
    def verifier(self) -> Verifier:
        return self._verifier

    async def authenticate(self, values: str | Iterable[str | None]) -> Identity | None:
        tried = 0
        for credential in parse_credentials(values, self.scheme):
            if credential.parameter is None:
                continue
            tried += 1
            claims = await self._verifier.verify_parameter(credential.parameter)
            if claims:
                logger.debug("%s credential %d verified", self.scheme, tried)
                return Identity(claims=claims, authentication_type=self.authentication_type)

        logger.debug("No valid %s credential among %d candidate(s)", self.scheme, tried)
        return None

    def __repr__(self) -> str:
        return (
            f"SchemeHandler(scheme={self.scheme!r}, "
            f"authentication_type={self.authentication_type!r}, verifier={self._verifier!r})"
        )


class NeverAuthenticateHandler:
    """A handler that always fails. Used when no handler is configured."""

    def __init__(self, authentication_type: str | None = None) -> None:
        self.authentication_type = authentication_type

    async def authenticate(self, values: str | Iterable[str | None]) -> Identity | None:
        if values is None:
            raise ValueError("values must not be None")
        return None

    def __repr__(self) -> str:
        return "NeverAuthenticateHandler()"


# Verify protocol compliance at import time
assert isinstance(NeverAuthenticateHandler(), HeaderHandler)

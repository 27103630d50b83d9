"""Credential verifiers for the ``Token`` and ``Basic`` schemes.

A verifier turns the parameter of one matching header value into claims.
An empty result means the credential is not valid.
"""

from __future__ import annotations

import inspect
import logging
import secrets
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Protocol, Union, runtime_checkable

from header_auth.claims import Claim, ClaimTypes
from header_auth.constants import BASIC_SCHEME, TOKEN_SCHEME
from header_auth.parsing import CredentialDecodeError, decode_basic_credentials

logger = logging.getLogger(__name__)

ClaimsResult = Union[Iterable[Claim], Awaitable[Iterable[Claim]]]
TokenValidator = Callable[[str], ClaimsResult]
UserValidator = Callable[[str, str], ClaimsResult]

_NO_CLAIMS: tuple[Claim, ...] = ()

# Compared against when the user is unknown, so both failure paths do the same work.
_DUMMY_PASSWORD = b"\x00" * 32


@runtime_checkable
class Verifier(Protocol):
    """Protocol for scheme-specific credential verifiers."""

    scheme: str

    async def verify_parameter(self, parameter: str) -> tuple[Claim, ...]:
        """Verify the parameter of a header value with a matching scheme.

        Returns:
            The claims granted, or an empty tuple if the credential is invalid.
        """
        ...


async def _resolve(result: ClaimsResult) -> tuple[Claim, ...]:
    """Await ``result`` if needed and freeze it into a tuple."""
    if inspect.isawaitable(result):
        result = await result
    if result is None:
        return _NO_CLAIMS
    return tuple(result)


def _equals(left: str, right: str) -> bool:
    return secrets.compare_digest(left.encode("utf-8"), right.encode("utf-8"))


def _never_token(token: str) -> tuple[Claim, ...]:
    return _NO_CLAIMS


def _never_user(user: str, password: str) -> tuple[Claim, ...]:
    return _NO_CLAIMS


class TokenVerifier:
    """Verifies opaque tokens, e.g. from ``Authorization: Token <token>``.

    Args:
        validate: Callable receiving the token and returning the claims to
            grant (empty if invalid). May be sync or async.
        scheme: The scheme this verifier expects.
    """

    def __init__(self, validate: TokenValidator, *, scheme: str = TOKEN_SCHEME) -> None:
        if not callable(validate):
            raise TypeError("validate must be callable")
        self._validate = validate
        self.scheme = scheme

    @classmethod
    def from_tokens(cls, tokens: Iterable[str] | None, *, scheme: str = TOKEN_SCHEME) -> TokenVerifier:
        """Accept any of ``tokens``. No tokens means nothing is accepted.

        Raises:
            TypeError: If ``tokens`` is a single string or holds a non-string.
        """
        if isinstance(tokens, str):
            raise TypeError("tokens must be a collection of strings, not a str; use from_token() for one token")
        valid = tuple(tokens) if tokens is not None else ()
        for token in valid:
            if not isinstance(token, str):
                raise TypeError(f"tokens must only contain strings, got {type(token).__name__}")
        if not valid:
            return cls(_never_token, scheme=scheme)

        def validate(token: str) -> tuple[Claim, ...]:
            # No early exit: every configured token is compared.
            matched = False
            for candidate in valid:
                matched |= _equals(candidate, token)
            return (Claim(ClaimTypes.AUTHENTICATION, token),) if matched else _NO_CLAIMS

        return cls(validate, scheme=scheme)

    @classmethod
    def from_token(cls, token: str | None, *, scheme: str = TOKEN_SCHEME) -> TokenVerifier:
        """Accept exactly ``token``. A missing or blank token accepts nothing."""
        if token is None or not token.strip():
            return cls(_never_token, scheme=scheme)
        return cls.from_tokens((token,), scheme=scheme)

    async def verify(self, token: str) -> tuple[Claim, ...]:
        return await _resolve(self._validate(token))

    async def verify_parameter(self, parameter: str) -> tuple[Claim, ...]:
        return await self.verify(parameter)

    def __repr__(self) -> str:
        return f"TokenVerifier(scheme={self.scheme!r})"


class BasicVerifier:
    """Verifies ``Basic`` credentials, i.e. ``base64(user:password)``.

    Args:
        validate: Callable receiving user name and password and returning the
            claims to grant (empty if invalid). May be sync or async.
        scheme: The scheme this verifier expects.
    """

    def __init__(self, validate: UserValidator, *, scheme: str = BASIC_SCHEME) -> None:
        if not callable(validate):
            raise TypeError("validate must be callable")
        self._validate = validate
        self.scheme = scheme

    @classmethod
    def from_users(cls, users: Mapping[str, str] | None, *, scheme: str = BASIC_SCHEME) -> BasicVerifier:
        """Accept the user name/password pairs in ``users``.

        Unknown users and wrong passwords are indistinguishable to the caller.
        Users whose password is None never match.
        """
        passwords = {
            user: password.encode("utf-8") for user, password in (users or {}).items() if password is not None
        }
        if not passwords:
            return cls(_never_user, scheme=scheme)

        def validate(user: str, password: str) -> tuple[Claim, ...]:
            expected = passwords.get(user)
            matched = secrets.compare_digest(
                expected if expected is not None else _DUMMY_PASSWORD,
                password.encode("utf-8"),
            )
            if expected is None or not matched:
                return _NO_CLAIMS
            return (Claim(ClaimTypes.NAME, user),)

        return cls(validate, scheme=scheme)

    async def verify(self, user: str, password: str) -> tuple[Claim, ...]:
        return await _resolve(self._validate(user, password))

    async def verify_parameter(self, parameter: str) -> tuple[Claim, ...]:
        """Decode ``parameter`` and verify the credentials it carries.

        A parameter that cannot be decoded counts as an invalid credential.
        """
        try:
            user, password = decode_basic_credentials(parameter)
        except CredentialDecodeError as exc:
            logger.debug("Rejecting Basic credentials: %s", exc)
            return _NO_CLAIMS
        return await self.verify(user, password)

    def __repr__(self) -> str:
        return f"BasicVerifier(scheme={self.scheme!r})"

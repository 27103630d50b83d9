"""header-auth: HTTP header authentication (Token and Basic) for ASGI apps."""

from __future__ import annotations

from header_auth.authentication import AuthenticateResult, HeaderAuthenticationHandler
from header_auth.claims import Claim, ClaimTypes, Identity
from header_auth.constants import BASIC_SCHEME, DEFAULT_HEADER_NAME, DEFAULT_SCHEME, TOKEN_SCHEME
from header_auth.handler import NeverAuthenticateHandler, SchemeHandler
from header_auth.middleware import ClaimsUser, HeaderAuthMiddleware, add_header_authentication, auth_identity_var
from header_auth.options import HeaderAuthenticationOptions
from header_auth.parsing import (
    Credential,
    CredentialDecodeError,
    decode_basic_credentials,
    parse_credentials,
    parse_header_value,
)
from header_auth.protocol import HeaderHandler
from header_auth.verifiers import BasicVerifier, TokenValidator, TokenVerifier, UserValidator, Verifier

__all__ = [
    # Claims
    "Claim",
    "ClaimTypes",
    "Identity",
    # Parsing
    "Credential",
    "CredentialDecodeError",
    "parse_header_value",
    "parse_credentials",
    "decode_basic_credentials",
    # Verifiers
    "Verifier",
    "TokenVerifier",
    "BasicVerifier",
    # Handlers
    "HeaderHandler",
    "SchemeHandler",
    "NeverAuthenticateHandler",
    # Configuration and request handling
    "HeaderAuthenticationOptions",
    "HeaderAuthenticationHandler",
    "AuthenticateResult",
    # ASGI
    "HeaderAuthMiddleware",
    "ClaimsUser",
    "auth_identity_var",
    "add_header_authentication",
    # Constants
    "DEFAULT_HEADER_NAME",
    "DEFAULT_SCHEME",
    "TOKEN_SCHEME",
    "BASIC_SCHEME",
    # Shortcuts
    "token_authentication",
    "basic_authentication",
]

__version__ = "0.1.0"


def token_authentication(
    *,
    tokens: list[str] | None = None,
    validate: TokenValidator | None = None,
    authentication_type: str = TOKEN_SCHEME,
    header_name: str = DEFAULT_HEADER_NAME,
) -> HeaderAuthenticationOptions:
    """Build options for ``Token`` authentication.

    Exactly one of ``tokens`` and ``validate`` must be given.
    """
    if (tokens is None) == (validate is None):
        raise ValueError("Pass exactly one of tokens or validate")
    verifier = TokenVerifier(validate) if validate is not None else TokenVerifier.from_tokens(tokens)
    return HeaderAuthenticationOptions(
        header_name=header_name,
        header_handler=SchemeHandler(verifier, authentication_type),
    )


def basic_authentication(
    *,
    users: dict[str, str] | None = None,
    validate: UserValidator | None = None,
    authentication_type: str = BASIC_SCHEME,
    header_name: str = DEFAULT_HEADER_NAME,
) -> HeaderAuthenticationOptions:
    """Build options for ``Basic`` authentication.

    Exactly one of ``users`` and ``validate`` must be given.
    """
    if (users is None) == (validate is None):
        raise ValueError("Pass exactly one of users or validate")
    verifier = BasicVerifier(validate) if validate is not None else BasicVerifier.from_users(users)
    return HeaderAuthenticationOptions(
        header_name=header_name,
        header_handler=SchemeHandler(verifier, authentication_type),
    )

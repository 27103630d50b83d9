"""Shared test fixtures for header-auth tests."""

from __future__ import annotations

import base64

import pytest

from header_auth.handler import SchemeHandler
from header_auth.options import HeaderAuthenticationOptions
from header_auth.verifiers import BasicVerifier, TokenVerifier


def basic_parameter(user: str, password: str) -> str:
    return base64.b64encode(f"{user}:{password}".encode("latin-1")).decode("ascii")


@pytest.fixture
def token_handler() -> SchemeHandler:
    """Token handler accepting ``abc`` and ``xyz``."""
    return SchemeHandler(TokenVerifier.from_tokens(["abc", "xyz"]), "Bearer")


@pytest.fixture
def basic_handler() -> SchemeHandler:
    """Basic handler for the single user ``alice`` / ``secret``."""
    return SchemeHandler(BasicVerifier.from_users({"alice": "secret"}), "Basic")


@pytest.fixture
def token_options(token_handler: SchemeHandler) -> HeaderAuthenticationOptions:
    return HeaderAuthenticationOptions(header_handler=token_handler)


@pytest.fixture
def basic_options() -> HeaderAuthenticationOptions:
    return HeaderAuthenticationOptions(header_handler=SchemeHandler(BasicVerifier.from_users({"u": "p"}), "Basic"))

"""Tests for SchemeHandler and NeverAuthenticateHandler."""

from __future__ import annotations

import pytest

from header_auth.claims import Claim, ClaimTypes, Identity
from header_auth.handler import NeverAuthenticateHandler, SchemeHandler
from header_auth.protocol import HeaderHandler
from header_auth.verifiers import BasicVerifier, TokenVerifier

from conftest import basic_parameter


class RecordingVerifier:
    """Verifier stub that records parameters and accepts a fixed set."""

    def __init__(self, valid: set[str], scheme: str = "Token") -> None:
        self.scheme = scheme
        self.valid = valid
        self.seen: list[str] = []

    async def verify_parameter(self, parameter: str) -> tuple[Claim, ...]:
        self.seen.append(parameter)
        if parameter in self.valid:
            return (Claim(ClaimTypes.AUTHENTICATION, parameter),)
        return ()


class TestSchemeHandlerProtocol:
    def test_implements_header_handler(self, token_handler: SchemeHandler):
        assert isinstance(token_handler, HeaderHandler)

    def test_never_handler_implements_header_handler(self):
        assert isinstance(NeverAuthenticateHandler(), HeaderHandler)

    def test_scheme_defaults_to_verifier_scheme(self):
        handler = SchemeHandler(BasicVerifier.from_users({}), "Basic")
        assert handler.scheme == "Basic"

    def test_scheme_override(self):
        handler = SchemeHandler(TokenVerifier.from_token("abc"), "Bearer", scheme="Bearer")
        assert handler.scheme == "Bearer"
        assert handler.authentication_type == "Bearer"


class TestSchemeHandlerConstruction:
    def test_verifier_required(self):
        with pytest.raises(ValueError, match="verifier"):
            SchemeHandler(None, "Token")  # type: ignore[arg-type]

    def test_authentication_type_required(self):
        with pytest.raises(ValueError, match="authentication_type"):
            SchemeHandler(TokenVerifier.from_token("abc"), "")

    @pytest.mark.parametrize("scheme", ["", "Bad Scheme", "a,b"])
    def test_invalid_scheme(self, scheme):
        with pytest.raises(ValueError, match="Invalid scheme"):
            SchemeHandler(TokenVerifier.from_token("abc"), "Token", scheme=scheme)


class TestSchemeHandlerToken:
    async def test_valid_token(self, token_handler: SchemeHandler):
        identity = await token_handler.authenticate(["Token abc"])
        assert identity == Identity(claims=(Claim(ClaimTypes.AUTHENTICATION, "abc"),), authentication_type="Bearer")

    async def test_invalid_token(self, token_handler: SchemeHandler):
        assert await token_handler.authenticate(["Token qqq"]) is None

    async def test_scheme_case_insensitive(self, token_handler: SchemeHandler):
        assert await token_handler.authenticate(["tOKEN abc"]) is not None

    async def test_other_scheme_ignored(self, token_handler: SchemeHandler):
        assert await token_handler.authenticate(["Bearer abc", "Basic abc"]) is None

    async def test_empty_values(self, token_handler: SchemeHandler):
        assert await token_handler.authenticate([]) is None

    async def test_none_values_raise(self, token_handler: SchemeHandler):
        with pytest.raises(ValueError):
            await token_handler.authenticate(None)  # type: ignore[arg-type]

    async def test_single_string_value(self, token_handler: SchemeHandler):
        assert await token_handler.authenticate("Token xyz") is not None


class TestSchemeHandlerOrdering:
    async def test_later_candidate_succeeds(self):
        verifier = RecordingVerifier({"good"})
        handler = SchemeHandler(verifier, "Token")
        identity = await handler.authenticate(["Token bad", "Token good"])
        assert identity is not None
        assert identity.claims == (Claim(ClaimTypes.AUTHENTICATION, "good"),)
        assert verifier.seen == ["bad", "good"]

    async def test_short_circuits_on_first_success(self):
        verifier = RecordingVerifier({"one", "two"})
        handler = SchemeHandler(verifier, "Token")
        identity = await handler.authenticate(["Token one", "Token two", "Token three"])
        assert identity is not None
        assert identity.find_first(ClaimTypes.AUTHENTICATION) == "one"
        assert verifier.seen == ["one"]

    async def test_candidates_without_parameter_skipped(self):
        verifier = RecordingVerifier({"good"})
        handler = SchemeHandler(verifier, "Token")
        assert await handler.authenticate(["Token", "Token good"]) is not None
        assert verifier.seen == ["good"]

    async def test_malformed_and_foreign_values_skipped(self):
        verifier = RecordingVerifier({"good"})
        handler = SchemeHandler(verifier, "Token")
        identity = await handler.authenticate([None, "", "(bad)", "Basic dTpw", "Token good"])
        assert identity is not None
        assert verifier.seen == ["good"]

    async def test_all_fail(self):
        verifier = RecordingVerifier(set())
        handler = SchemeHandler(verifier, "Token")
        assert await handler.authenticate(["Token a", "Token b"]) is None
        assert verifier.seen == ["a", "b"]


class TestSchemeHandlerBasic:
    async def test_valid_credentials(self, basic_handler: SchemeHandler):
        identity = await basic_handler.authenticate([f"Basic {basic_parameter('alice', 'secret')}"])
        assert identity is not None
        assert identity.claims == (Claim(ClaimTypes.NAME, "alice"),)
        assert identity.authentication_type == "Basic"
        assert identity.name == "alice"

    async def test_wrong_password(self, basic_handler: SchemeHandler):
        assert await basic_handler.authenticate([f"Basic {basic_parameter('alice', 'wrong')}"]) is None

    async def test_undecodable_candidate_then_valid(self, basic_handler: SchemeHandler):
        values = ["Basic %%%", "Basic YWxpY2U=", f"Basic {basic_parameter('alice', 'secret')}"]
        identity = await basic_handler.authenticate(values)
        assert identity is not None
        assert identity.name == "alice"

    async def test_only_undecodable_candidates(self, basic_handler: SchemeHandler):
        assert await basic_handler.authenticate(["Basic %%%", "Basic YWxpY2U="]) is None

    async def test_async_validate_callback(self):
        async def validate(user: str, password: str) -> list[Claim]:
            if (user, password) == ("svc", "pw"):
                return [Claim(ClaimTypes.NAME, user), Claim("role", "service")]
            return []

        handler = SchemeHandler(BasicVerifier(validate), "Basic")
        identity = await handler.authenticate([f"Basic {basic_parameter('svc', 'pw')}"])
        assert identity is not None
        assert identity.find_all("role") == ["service"]


class TestNeverAuthenticateHandler:
    async def test_always_fails(self):
        handler = NeverAuthenticateHandler()
        assert await handler.authenticate(["Token abc"]) is None
        assert await handler.authenticate([]) is None

    async def test_none_values_raise(self):
        with pytest.raises(ValueError):
            await NeverAuthenticateHandler().authenticate(None)  # type: ignore[arg-type]

    def test_authentication_type(self):
        assert NeverAuthenticateHandler().authentication_type is None
        assert NeverAuthenticateHandler("x").authentication_type == "x"

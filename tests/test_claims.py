"""Tests for Claim and Identity."""

from __future__ import annotations

import dataclasses

import pytest

from header_auth.claims import Claim, ClaimTypes, Identity


class TestIdentity:
    def test_requires_claims(self):
        with pytest.raises(ValueError, match="at least one claim"):
            Identity(claims=(), authentication_type="Basic")

    def test_claims_stored_as_tuple(self):
        identity = Identity(claims=[Claim(ClaimTypes.NAME, "alice")], authentication_type="Basic")
        assert identity.claims == (Claim(ClaimTypes.NAME, "alice"),)

    def test_from_claims_accepts_generator(self):
        identity = Identity.from_claims((c for c in [Claim("role", "admin")]), "Token")
        assert identity.claims == (Claim("role", "admin"),)
        assert identity.authentication_type == "Token"

    def test_is_immutable(self):
        identity = Identity(claims=(Claim(ClaimTypes.NAME, "alice"),), authentication_type="Basic")
        with pytest.raises(dataclasses.FrozenInstanceError):
            identity.authentication_type = "Other"  # type: ignore[misc]

    def test_name(self):
        identity = Identity(
            claims=(Claim("role", "admin"), Claim(ClaimTypes.NAME, "alice"), Claim(ClaimTypes.NAME, "bob")),
            authentication_type="Basic",
        )
        assert identity.name == "alice"
        assert identity.is_authenticated is True

    def test_name_absent(self):
        identity = Identity(claims=(Claim(ClaimTypes.AUTHENTICATION, "abc"),), authentication_type="Token")
        assert identity.name is None

    def test_find_and_has_claim(self):
        identity = Identity(
            claims=(Claim("role", "admin"), Claim("role", "editor")),
            authentication_type="Token",
        )
        assert identity.find_first("role") == "admin"
        assert identity.find_all("role") == ["admin", "editor"]
        assert identity.find_first("missing") is None
        assert identity.has_claim("role")
        assert identity.has_claim("role", "editor")
        assert not identity.has_claim("role", "viewer")

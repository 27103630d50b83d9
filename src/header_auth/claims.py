"""Claims and the identity built from them."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


class ClaimTypes:
    """Well-known claim types issued by the built-in verifiers."""

    NAME = "name"
    AUTHENTICATION = "authentication"


@dataclass(frozen=True)
class Claim:
    """A single ``(type, value)`` fact about an authenticated caller."""

    type: str
    value: str


@dataclass(frozen=True)
class Identity:
    """The claims of a successfully authenticated caller.

    Attributes:
        claims: Non-empty tuple of claims, in the order the verifier issued them.
        authentication_type: Label describing how the identity was established,
            e.g. ``"Basic"`` or ``"Bearer"``.
    """

    claims: tuple[Claim, ...]
    authentication_type: str

    def __post_init__(self) -> None:
        # Accept any iterable but always store a tuple.
        object.__setattr__(self, "claims", tuple(self.claims))
        if not self.claims:
            raise ValueError("An identity requires at least one claim")

    @classmethod
    def from_claims(cls, claims: Iterable[Claim], authentication_type: str) -> Identity:
        return cls(claims=tuple(claims), authentication_type=authentication_type)

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def name(self) -> str | None:
        """Value of the first ``name`` claim, if any."""
        return self.find_first(ClaimTypes.NAME)

    def find_first(self, claim_type: str) -> str | None:
        for claim in self.claims:
            if claim.type == claim_type:
                return claim.value
        return None

    def find_all(self, claim_type: str) -> list[str]:
        return [claim.value for claim in self.claims if claim.type == claim_type]

    def has_claim(self, claim_type: str, value: str | None = None) -> bool:
        return any(claim.type == claim_type and (value is None or claim.value == value) for claim in self.claims)

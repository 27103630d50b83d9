"""HeaderHandler protocol for pluggable header authentication."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from header_auth.claims import Identity


@runtime_checkable
class HeaderHandler(Protocol):
    """Protocol for objects that authenticate the values of one header.

    Implementations return an ``Identity`` for the first value that can be
    authenticated, or ``None`` if none of them is valid.
    """

    authentication_type: str | None

    async def authenticate(self, values: str | Iterable[str | None]) -> Identity | None:
        """Authenticate a request from the values of the configured header.

        Args:
            values: All values of the header, in the order they were sent.

        Returns:
            An ``Identity`` if authentication succeeds, ``None`` otherwise.

        Raises:
            ValueError: If ``values`` is None.
        """
        ...

"""ASGI middleware that authenticates requests from a configured header."""

from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from typing import Any

from starlette.authentication import AuthCredentials, BaseUser, UnauthenticatedUser
from starlette.datastructures import Headers

from header_auth.authentication import HeaderAuthenticationHandler
from header_auth.claims import Identity
from header_auth.constants import DEFAULT_SCHEME
from header_auth.options import HeaderAuthenticationOptions

logger = logging.getLogger(__name__)

# Identity of the current request, for code that has no access to the scope
auth_identity_var: ContextVar[Identity | None] = ContextVar("auth_identity", default=None)


class ClaimsUser(BaseUser):
    """Starlette user backed by an ``Identity``."""

    def __init__(self, identity: Identity) -> None:
        self.claims_identity = identity

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return self.claims_identity.name or ""

    @property
    def identity(self) -> str:
        return self.claims_identity.name or ""


class HeaderAuthMiddleware:
    """ASGI middleware that authenticates requests and sets ``auth_identity_var``.

    On success the identity is also exposed as ``request.user`` (a
    ``ClaimsUser``) and ``request.auth``.

    Args:
        app: The ASGI application to wrap.
        options: Header authentication options.
        scheme_name: Name reported for successful authentications.
        exempt_paths: Exact paths that bypass authentication.
        exempt_prefixes: Path prefixes that bypass authentication.
        require_auth: If True, unauthenticated requests receive 401.
            If False, requests proceed without identity (permissive mode).
    """

    def __init__(
        self,
        app: Any,
        options: HeaderAuthenticationOptions,
        *,
        scheme_name: str = DEFAULT_SCHEME,
        exempt_paths: set[str] | None = None,
        exempt_prefixes: set[str] | None = None,
        require_auth: bool = True,
    ) -> None:
        self._app = app
        self._handler = HeaderAuthenticationHandler(options, scheme_name)
        self._exempt_paths = exempt_paths if exempt_paths is not None else {"/health"}
        self._exempt_prefixes = exempt_prefixes or set()
        self._require_auth = require_auth
        self._challenge = getattr(options.header_handler, "scheme", None)

    def _is_exempt(self, path: str) -> bool:
        """Check if a path is exempt from authentication."""
        if path in self._exempt_paths:
            return True
        return any(path.startswith(prefix) for prefix in self._exempt_prefixes)

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        if scope["type"] != "http":
            await self._app(scope, receive, send)
            return

        path = scope.get("path", "")
        if self._is_exempt(path):
            await self._app(scope, receive, send)
            return

        result = await self._handler.authenticate(Headers(scope=scope))

        if not result.succeeded and self._require_auth:
            await self._send_401(send, result.failure or "")
            return

        if result.succeeded:
            scope["user"] = ClaimsUser(result.identity)
            scope["auth"] = AuthCredentials(["authenticated"])
        else:
            scope["user"] = UnauthenticatedUser()
            scope["auth"] = AuthCredentials()

        token = auth_identity_var.set(result.identity)
        try:
            await self._app(scope, receive, send)
        finally:
            auth_identity_var.reset(token)

    async def _send_401(self, send: Any, detail: str) -> None:
        """Send a 401 Unauthorized JSON response."""
        body = json.dumps({"error": "Unauthorized", "detail": detail}).encode()
        headers = [
            [b"content-type", b"application/json"],
            [b"content-length", str(len(body)).encode()],
        ]
        if self._challenge:
            headers.append([b"www-authenticate", self._challenge.encode("latin-1")])
        await send({"type": "http.response.start", "status": 401, "headers": headers})
        await send({"type": "http.response.body", "body": body})


def add_header_authentication(
    app: Any,
    options: HeaderAuthenticationOptions,
    *,
    scheme_name: str = DEFAULT_SCHEME,
    exempt_paths: set[str] | None = None,
    exempt_prefixes: set[str] | None = None,
    require_auth: bool = True,
) -> Any:
    """Register ``HeaderAuthMiddleware`` on a Starlette application.

    Returns:
        ``app``, for chaining.
    """
    if app is None:
        raise ValueError("app must not be None")
    app.add_middleware(
        HeaderAuthMiddleware,
        options=options,
        scheme_name=scheme_name,
        exempt_paths=exempt_paths,
        exempt_prefixes=exempt_prefixes,
        require_auth=require_auth,
    )
    logger.debug("Header authentication registered as %s on header %s", scheme_name, options.header_name)
    return app

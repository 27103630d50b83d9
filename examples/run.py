"""Run a small Starlette app protected by header authentication.

Usage (from the project root):
    python examples/run.py

Token authentication is used when API_TOKENS is set (comma-separated),
Basic authentication with a demo user otherwise:
    API_TOKENS=abc,xyz python examples/run.py

Then test with curl:
    curl http://localhost:8000/health                            # 200 (exempt)
    curl http://localhost:8000/whoami                            # 401 (no header)
    curl -H "Authorization: Token abc" localhost:8000/whoami     # 200 (token mode)
    curl -u demo:demo localhost:8000/whoami                      # 200 (basic mode)
"""

import logging
import os

import uvicorn
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from header_auth import add_header_authentication, basic_authentication, token_authentication


async def whoami(request: Request) -> JSONResponse:
    identity = request.user.claims_identity
    return JSONResponse(
        {
            "authentication_type": identity.authentication_type,
            "claims": {claim.type: claim.value for claim in identity.claims},
        }
    )


async def health(request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


logging.basicConfig(level=logging.DEBUG, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

tokens = os.environ.get("API_TOKENS")
if tokens:
    options = token_authentication(tokens=[t.strip() for t in tokens.split(",") if t.strip()])
    print("Token authentication enabled")
else:
    options = basic_authentication(users={"demo": "demo"})
    print("Basic authentication enabled (user: demo, password: demo)")

app = Starlette(routes=[Route("/whoami", whoami), Route("/health", health)])
add_header_authentication(app, options)

uvicorn.run(app, host="127.0.0.1", port=8000)

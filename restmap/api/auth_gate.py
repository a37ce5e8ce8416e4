"""Authentication Gate — bearer-token check in front of every non-exempt route.

Invariants:
    - Exempt paths (any pattern matches) proceed without a credential
    - Every other request needs a verifying bearer token, else 401 before the controller runs
    - Exemption is decided per request; nothing is cached between requests
    - Without an `authentication` option the middleware is never installed

Design Decisions:
    - Rejections answered inside the middleware: exception handlers sit below
      user middleware and would never see an error raised here
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from restmap.core.auth_exemptions import (
    compile_patterns, extract_bearer_token, is_exempt,
)
from restmap.core.errors import AuthenticationError
from restmap.infrastructure.token_verifier import TokenVerifier

logger = logging.getLogger(__name__)


class AuthGate:
    """Exemption patterns plus a token verifier."""

    def __init__(
        self, verifier: TokenVerifier, unauthenticated: Iterable[str | re.Pattern] = (),
    ):
        self.verifier = verifier
        self.patterns = compile_patterns(unauthenticated)

    def is_exempt(self, path: str) -> bool:
        return is_exempt(path, self.patterns)

    def authenticate(self, authorization: str | None) -> dict[str, Any]:
        """Claims of a valid bearer credential; AuthenticationError otherwise."""
        token = extract_bearer_token(authorization)
        if token is None:
            raise AuthenticationError("Missing bearer token")
        return self.verifier.verify(token)


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Starlette middleware applying an AuthGate to each request."""

    def __init__(self, app: ASGIApp, gate: AuthGate):
        super().__init__(app)
        self.gate = gate

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint,
    ) -> Response:
        path = request.url.path
        if self.gate.is_exempt(path):
            return await call_next(request)
        try:
            request.state.claims = self.gate.authenticate(
                request.headers.get("authorization"),
            )
        except AuthenticationError as exc:
            exc.context.path = path
            logger.warning(
                f"Rejected request: {exc.message}",
                extra={
                    "error_code": exc.code.value,
                    "path": path,
                    "method": request.method,
                },
            )
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content=exc.to_response(),
                headers={"WWW-Authenticate": "Bearer"},
            )
        return await call_next(request)

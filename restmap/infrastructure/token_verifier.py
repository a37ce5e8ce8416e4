"""Token Verifier — decodes bearer JWTs with a shared signing secret.

Invariants:
    - Signature and expiry are always verified
    - Every PyJWT failure maps to AuthenticationError (core/errors.py)
"""

import logging
from typing import Any

import jwt

from restmap.core.errors import AuthenticationError

logger = logging.getLogger(__name__)


class TokenVerifier:
    """Verifies HMAC/RSA signed JWTs and returns their claims."""

    def __init__(self, secret: str, algorithms: list[str] | None = None):
        self.secret = secret
        self.algorithms = algorithms or ["HS256"]

    def verify(self, token: str) -> dict[str, Any]:
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                options={"verify_signature": True, "verify_exp": True},
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthenticationError("Token has expired") from exc
        except jwt.InvalidSignatureError as exc:
            raise AuthenticationError("Token signature verification failed") from exc
        except jwt.InvalidTokenError as exc:
            logger.debug(f"Rejected token: {exc}")
            raise AuthenticationError("Invalid token") from exc

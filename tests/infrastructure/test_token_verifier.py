"""Token Verifier — PyJWT decode with every failure mapped to AuthenticationError."""

import time

import jwt
import pytest

from restmap.core.errors import AuthenticationError, ErrorCode
from restmap.infrastructure.token_verifier import TokenVerifier

SECRET = "verifier-test-secret-0123456789abcdef"


def _token(claims, secret=SECRET, algorithm="HS256"):
    return jwt.encode(claims, secret, algorithm=algorithm)


def test_valid_token_returns_claims():
    claims = TokenVerifier(SECRET).verify(_token({"sub": "42", "role": "admin"}))
    assert claims == {"sub": "42", "role": "admin"}


def test_wrong_secret_rejected():
    token = _token({"sub": "42"}, secret="another-secret-0123456789abcdefgh")
    with pytest.raises(AuthenticationError) as exc_info:
        TokenVerifier(SECRET).verify(token)
    assert exc_info.value.code == ErrorCode.UNAUTHORIZED
    assert exc_info.value.message == "Token signature verification failed"


def test_expired_token_rejected():
    token = _token({"sub": "42", "exp": int(time.time()) - 60})
    with pytest.raises(AuthenticationError) as exc_info:
        TokenVerifier(SECRET).verify(token)
    assert exc_info.value.message == "Token has expired"


def test_malformed_token_rejected():
    with pytest.raises(AuthenticationError) as exc_info:
        TokenVerifier(SECRET).verify("not-a-jwt")
    assert exc_info.value.message == "Invalid token"


def test_algorithm_not_allowed():
    token = _token({"sub": "42"}, algorithm="HS512")
    with pytest.raises(AuthenticationError):
        TokenVerifier(SECRET, ["HS256"]).verify(token)

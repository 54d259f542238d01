# src/services/api_gateway/auth.py
"""
Password hashing and bearer tokens.

Passwords: salted PBKDF2-HMAC-SHA256, stored as
"pbkdf2_sha256$<iterations>$<salt>$<hash>" (base64url, no padding).

Tokens: HS256 layout "header.payload.signature", each part base64url JSON
(signature over "header.payload" with HMAC-SHA256).
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import secrets
import time
from typing import Any

from pydantic import BaseModel, ValidationError

from src.common.exceptions import AuthenticationError

PASSWORD_SCHEME = "pbkdf2_sha256"
SALT_BYTES = 16
TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


class TokenClaims(BaseModel):
    sub: str
    role: str
    iat: int
    exp: int


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(data: str) -> bytes:
    return base64.urlsafe_b64decode(data + "=" * (-len(data) % 4))


# =============================================================================
# PASSWORDS
# =============================================================================

def hash_password(password: str, iterations: int, salt: bytes | None = None) -> str:
    salt = salt if salt is not None else secrets.token_bytes(SALT_BYTES)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt, iterations)
    return f"{PASSWORD_SCHEME}${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, encoded: str) -> bool:
    """False for a wrong password or a hash in an unknown format."""
    try:
        scheme, iterations, salt, expected = encoded.split("$")
        if scheme != PASSWORD_SCHEME:
            return False
        digest = hashlib.pbkdf2_hmac("sha256", password.encode(), _b64decode(salt), int(iterations))
    except ValueError:
        return False
    return hmac.compare_digest(_b64encode(digest).encode(), expected.encode())


# =============================================================================
# TOKENS
# =============================================================================

def _sign(signing_input: str, secret: str) -> str:
    return _b64encode(hmac.new(secret.encode(), signing_input.encode(), hashlib.sha256).digest())


def _encode_part(data: dict[str, Any]) -> str:
    return _b64encode(json.dumps(data, separators=(",", ":")).encode())


def create_token(username: str, role: str, secret: str, ttl_seconds: int, now: int | None = None) -> str:
    issued_at = int(time.time()) if now is None else now
    claims = TokenClaims(sub=username, role=role, iat=issued_at, exp=issued_at + ttl_seconds)
    signing_input = f"{_encode_part(TOKEN_HEADER)}.{_encode_part(claims.model_dump())}"
    return f"{signing_input}.{_sign(signing_input, secret)}"


def decode_token(token: str, secret: str, now: int | None = None) -> TokenClaims:
    """
    Verifies signature and expiry.

    Raises:
        AuthenticationError: malformed, badly signed or expired token
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise AuthenticationError("Malformed token")

    header, payload, signature = parts
    if not hmac.compare_digest(_sign(f"{header}.{payload}", secret).encode(), signature.encode()):
        raise AuthenticationError("Invalid token signature")

    try:
        if json.loads(_b64decode(header)).get("alg") != TOKEN_HEADER["alg"]:
            raise AuthenticationError("Unsupported token algorithm")
        claims = TokenClaims.model_validate(json.loads(_b64decode(payload)))
    except (ValueError, AttributeError, ValidationError) as e:
        raise AuthenticationError("Malformed token") from e

    current = int(time.time()) if now is None else now
    if claims.exp <= current:
        raise AuthenticationError("Token expired")
    return claims

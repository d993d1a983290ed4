"""
Security helpers for password hashing and JWT authentication.

This module implements a lightweight JSON Web Token (JWT) mechanism
using HMAC‑SHA256 signatures and base64url encoding.  Tokens embed the
channel's identity claims (``sub`` plus a profile snapshot taken at
login) and an expiration timestamp (``exp``).  The signing key comes
from the ``Settings`` instance handed to ``TokenManager``.
Additionally, helper functions are provided for hashing passwords
using PBKDF2‑HMAC with SHA‑256, along with salt generation and
verification.
"""

import base64
import hashlib
import hmac
import json
import logging
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import Settings, settings

logger = logging.getLogger(__name__)


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


class TokenManager:
    """Issue and verify signed bearer tokens.

    Parameters
    ----------
    config : Settings
        Provides ``secret_key``, ``algorithm`` and
        ``access_token_expire_minutes``.
    """

    def __init__(self, config: Settings) -> None:
        if config.algorithm != "HS256":
            raise ValueError(f"Unsupported token algorithm: {config.algorithm}")
        self._secret = config.secret_key.encode("utf-8")
        self._default_lifetime = config.access_token_expire_minutes * 60

    def _sign(self, message: bytes) -> bytes:
        return hmac.new(self._secret, message, hashlib.sha256).digest()

    def create_access_token(self, data: Dict[str, Any], expires_delta: Optional[int] = None) -> str:
        """Create a signed JWT token with the given payload.

        The payload is extended with an ``exp`` field representing the
        expiration time as a UNIX timestamp.  The token is a string of
        the form ``header.payload.signature``, where each part is
        base64url encoded.  Clients must include this token in the
        ``Authorization`` header as ``Bearer <token>``.

        Parameters
        ----------
        data : dict
            Claims to embed in the token (e.g. {"sub": "<channel id>"}).
        expires_delta : Optional[int]
            Lifetime of the token in seconds.  Defaults to the configured
            ``access_token_expire_minutes``.

        Returns
        -------
        str
            A signed JWT token.
        """
        to_encode = dict(data)
        exp_seconds = expires_delta if expires_delta is not None else self._default_lifetime
        to_encode["exp"] = int(time.time()) + exp_seconds
        header = {"alg": "HS256", "typ": "JWT"}
        header_b64 = _b64_url_encode(json.dumps(header, separators=(',', ':')).encode("utf-8"))
        payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(',', ':')).encode("utf-8"))
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        signature_b64 = _b64_url_encode(self._sign(signing_input))
        return f"{header_b64}.{payload_b64}.{signature_b64}"

    def decode_access_token(self, token: str) -> Optional[Dict[str, Any]]:
        """Verify and decode a JWT token.

        Returns the payload dictionary if the signature matches and the
        ``exp`` claim lies in the future; otherwise returns ``None``.
        """
        parts = token.split('.')
        if len(parts) != 3:
            return None
        header_b64, payload_b64, signature_b64 = parts
        signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
        try:
            actual_sig = _b64_url_decode(signature_b64)
            # Constant‑time comparison to prevent timing attacks
            if not hmac.compare_digest(self._sign(signing_input), actual_sig):
                return None
            data = json.loads(_b64_url_decode(payload_b64).decode("utf-8"))
            if not isinstance(data, dict):
                return None
            if data.get("exp") is None or int(data["exp"]) < int(time.time()):
                return None
        except (ValueError, TypeError):
            return None
        return data


def get_token_manager() -> TokenManager:
    """Dependency returning a ``TokenManager`` bound to the app settings."""
    return TokenManager(settings)


security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenManager = Depends(get_token_manager),
) -> Dict[str, Any]:
    """Dependency that retrieves the current authenticated channel.

    If the request does not contain an ``Authorization`` header, the
    token is invalid/expired, or it carries no subject, an HTTP 401
    error is raised.  On success, returns the decoded token payload.
    The profile fields in it are a snapshot from login time; services
    reload the account row whenever they need current state.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = tokens.decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        logger.warning("Rejected bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return payload


def identity_claims(user_row: Any) -> Dict[str, Any]:
    """Build the claims embedded in a token for the given ``users`` row."""
    return {
        "sub": user_row["id"],
        "channel_name": user_row["channel_name"],
        "email": user_row["email"],
        "phone": user_row["phone"],
        "logo_id": user_row["logo_id"],
    }


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).
    """
    salt = os.urandom(16)
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, iterations)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Splits the stored string into salt and hash, recomputes the
    PBKDF2‑HMAC digest and compares it using constant‑time comparison.
    Malformed stored values never match.
    """
    try:
        salt_hex, hash_hex = hashed_password.split('$', 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    iterations = 100_000
    dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, iterations)
    return hmac.compare_digest(dk, stored_hash)

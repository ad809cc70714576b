from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import wraps
from typing import Callable, Optional

import jwt
from flask import g, jsonify, request

from ..core.constants import DEFAULT_TOKEN_TTL_HOURS
from ..core.exceptions import AuthenticationError

ALGORITHM = "HS256"


class TokenService:
    """Issue and verify the HS256 bearer tokens used by admin endpoints."""

    def __init__(self, secret_key: str, *, ttl_hours: int = DEFAULT_TOKEN_TTL_HOURS):
        self._secret = secret_key
        self._ttl = timedelta(hours=int(ttl_hours))

    def issue(self, subject: str, *, now: Optional[datetime] = None) -> str:
        now = now or datetime.now(timezone.utc)
        payload = {"sub": subject, "iat": now, "exp": now + self._ttl}
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        try:
            return jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired!")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Token is invalid!")


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def make_token_required(tokens: TokenService) -> Callable:
    """Build the view decorator that rejects requests without a valid token.

    The decoded claims are left on ``flask.g.token_claims``.
    """

    def token_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            token = _bearer_token()
            if not token:
                return jsonify({"message": "Authorization Token is missing!"}), 401
            try:
                g.token_claims = tokens.verify(token)
            except AuthenticationError as e:
                return jsonify({"message": str(e)}), 401
            return view(*args, **kwargs)

        return wrapper

    return token_required

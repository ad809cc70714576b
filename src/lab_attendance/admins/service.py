from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .repository import AdminRepository
from .tokens import TokenService


@dataclass(frozen=True)
class LoginResult:
    token: str
    admin_id: int
    email: str
    name: str


class AuthService:
    """Use case: authenticate an admin and hand out a bearer token."""

    def __init__(self, admins: AdminRepository, tokens: TokenService):
        self._admins = admins
        self._tokens = tokens

    def authenticate(self, email: str, password: str) -> LoginResult:
        email = require_non_empty(email, "email")
        require_non_empty(password, "password")

        admin = self._admins.get_by_email(email)
        if not admin or not admin.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(admin.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return LoginResult(
            token=self._tokens.issue(admin.email),
            admin_id=admin.admin_id,
            email=admin.email,
            name=admin.name,
        )

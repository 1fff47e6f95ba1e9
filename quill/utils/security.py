# quill/utils/security.py

"""
Security utilities: password hashing and JWT tokens
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from passlib.context import CryptContext

from quill.utils.exceptions import AuthError

# =========
# PASSWORDS
# =========

def build_password_context(rounds: int = 12) -> CryptContext:
    """bcrypt context; cost comes from settings so tests can lower it."""
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=rounds,
    )


def hash_password(pwd_context: CryptContext, password: str) -> str:
    return pwd_context.hash(password)


# Checks the entered password against the stored hash
def verify_password(
    pwd_context: CryptContext,
    plain_password: str,
    hashed_password: Optional[str],
) -> bool:
    if hashed_password is None:
        # Unknown user: burn the same time as a real check
        pwd_context.dummy_verify()
        return False
    return pwd_context.verify(plain_password, hashed_password)


# ===
# JWT
# ===

class TokenService:
    """
    Issues and verifies bearer tokens carrying a user id in "sub".
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expire_minutes: Optional[int] = None,
    ):
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes or None

    def issue(self, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        to_encode = {"sub": user_id, "iat": now}

        if self._expire_minutes:
            to_encode["exp"] = now + timedelta(minutes=self._expire_minutes)

        return jwt.encode(to_encode, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: Optional[str]) -> str:
        """
        Decode the token and check its signature.

        Returns the user id, raises AuthError on anything else.
        """
        if not token:
            raise AuthError("Unauthorized")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired", code="invalid_token")
        except jwt.InvalidTokenError:
            raise AuthError("Invalid token", code="invalid_token")

        user_id = payload.get("sub")
        if not isinstance(user_id, str) or not user_id:
            raise AuthError("Invalid token", code="invalid_token")
        return user_id

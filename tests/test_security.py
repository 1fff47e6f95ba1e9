"""Token service and password hashing: pure, no IO."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from quill.utils.exceptions import AuthError
from quill.utils.security import (
    TokenService,
    build_password_context,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret"


def test_issued_token_verifies_to_same_user():
    tokens = TokenService(SECRET, expire_minutes=5)
    assert tokens.verify(tokens.issue("abc123")) == "abc123"


def test_token_carries_expiry_when_configured():
    token = TokenService(SECRET, expire_minutes=5).issue("abc123")
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert "exp" in payload


def test_zero_expiry_issues_unbounded_token():
    token = TokenService(SECRET, expire_minutes=0).issue("abc123")
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert "exp" not in payload


def test_expired_token_is_rejected():
    expired = jwt.encode(
        {"sub": "abc123", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(AuthError) as exc:
        TokenService(SECRET).verify(expired)
    assert exc.value.code == "invalid_token"


@pytest.mark.parametrize("token", ["", None])
def test_missing_token_is_unauthorized(token):
    with pytest.raises(AuthError) as exc:
        TokenService(SECRET).verify(token)
    assert exc.value.detail == "Unauthorized"


def test_token_without_subject_is_rejected():
    token = jwt.encode({"user": "abc123"}, SECRET, algorithm="HS256")
    with pytest.raises(AuthError):
        TokenService(SECRET).verify(token)


def test_token_from_other_secret_is_rejected():
    token = TokenService("other-secret").issue("abc123")
    with pytest.raises(AuthError):
        TokenService(SECRET).verify(token)


def test_password_hash_round_trip():
    ctx = build_password_context(rounds=4)
    hashed = hash_password(ctx, "pw1")

    assert hashed != "pw1"
    assert verify_password(ctx, "pw1", hashed)
    assert not verify_password(ctx, "pw2", hashed)


def test_verify_without_stored_hash_is_false():
    ctx = build_password_context(rounds=4)
    assert verify_password(ctx, "pw1", None) is False

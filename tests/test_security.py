"""Security helper test cases."""
import pytest
from datetime import timedelta
from fastapi import HTTPException
from framework.security import (
    CurrentUser,
    create_access_token,
    decode_access_token,
    get_current_user,
    get_password_hash,
    require_roles,
    verify_password,
)


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert hashed != "secret123"
    assert verify_password("secret123", hashed)
    assert not verify_password("secret124", hashed)


def test_token_carries_user_claims():
    token = create_access_token({"sub": "alice", "user_id": 7, "roles": ["ADMIN"]})
    payload = decode_access_token(token)
    assert payload["sub"] == "alice"
    assert payload["user_id"] == 7
    assert "exp" in payload

    user = get_current_user(token=token)
    assert user == CurrentUser(id=7, username="alice", roles=["ADMIN"])


def test_expired_token_rejected():
    token = create_access_token({"sub": "alice", "user_id": 7}, expires_delta=timedelta(seconds=-10))
    with pytest.raises(HTTPException) as exc_info:
        get_current_user(token=token)
    assert exc_info.value.status_code == 401


def test_token_without_user_id_rejected():
    token = create_access_token({"sub": "alice"})
    with pytest.raises(HTTPException):
        get_current_user(token=token)


def test_missing_token_rejected():
    with pytest.raises(HTTPException):
        get_current_user(token=None)


def test_require_roles():
    checker = require_roles("ADMIN", "MANAGER")
    admin = CurrentUser(id=1, username="root", roles=["ADMIN"])
    assert checker(user=admin) is admin

    with pytest.raises(HTTPException) as exc_info:
        checker(user=CurrentUser(id=2, username="bob", roles=["CUSTOMER"]))
    assert exc_info.value.status_code == 403

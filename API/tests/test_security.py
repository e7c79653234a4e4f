from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest

from chamber.core import security
from chamber.core.config import Settings

SETTINGS = Settings(JWT_SECRET="unit-secret")
USER = SimpleNamespace(id=7, name="Jane", email="jane@example.com", role="admin")


def test_password_hash_roundtrip():
    hashed = security.hash_password("s3cret", rounds=4)
    assert hashed != "s3cret"
    assert security.verify_password("s3cret", hashed)
    assert not security.verify_password("wrong", hashed)


def test_verify_against_malformed_hash():
    assert security.verify_password("anything", "not-a-bcrypt-hash") is False


def test_access_token_claims():
    claims = security.decode_access_token(security.create_access_token(USER, SETTINGS), SETTINGS)
    assert claims["userId"] == 7
    assert claims["role"] == "admin"
    assert claims["exp"] - claims["iat"] == 24 * 3600


def test_token_signed_with_other_secret_rejected():
    token = security.create_access_token(USER, Settings(JWT_SECRET="other"))
    with pytest.raises(jwt.PyJWTError):
        security.decode_access_token(token, SETTINGS)


def test_expired_token_rejected():
    past = datetime.now(timezone.utc) - timedelta(hours=2)
    token = jwt.encode(
        {"userId": 1, "name": "x", "email": "x@example.com", "role": "user",
         "iat": past, "exp": past + timedelta(hours=1)},
        SETTINGS.JWT_SECRET,
        algorithm="HS256",
    )
    with pytest.raises(jwt.ExpiredSignatureError):
        security.decode_access_token(token, SETTINGS)


def test_reset_token_is_stored_hashed():
    raw, hashed = security.generate_reset_token()
    assert len(raw) == 64
    assert hashed == security.hash_reset_token(raw)
    assert hashed != raw

import time

import pytest
from jose import jwt

from petvet.core.config import settings
from petvet.core.errors import AuthenticationError
from petvet.core.security import (
    SessionClaims,
    decode_session,
    encode_session,
    hash_password,
    verify_password,
)

CLAIMS = SessionClaims(user_id="7b0e2c1e-2d7f-4b9f-8c57-3f1d8b0f8a11", username="olive", role="user", type="owner")


def test_hash_and_verify_password():
    stored = hash_password("hunter22")
    assert stored.startswith("pbkdf2_sha256$")
    assert "hunter22" not in stored
    assert verify_password("hunter22", stored)
    assert not verify_password("wrong", stored)


def test_verify_rejects_plaintext_and_garbage():
    assert not verify_password("hunter22", "hunter22")
    assert not verify_password("hunter22", "pbkdf2_sha256$abc$zz$zz")
    assert not verify_password("hunter22", "")


def test_session_round_trip():
    assert decode_session(encode_session(CLAIMS)) == CLAIMS


def test_tampered_session_is_rejected():
    token = encode_session(CLAIMS)
    header, payload, signature = token.split(".")
    forged = jwt.encode({"sub": CLAIMS.user_id, "role": "admin"}, "not-the-secret", algorithm="HS256")
    with pytest.raises(AuthenticationError):
        decode_session(".".join([header, forged.split(".")[1], signature]))
    with pytest.raises(AuthenticationError):
        decode_session(forged)


def test_expired_session_is_rejected():
    token = encode_session(CLAIMS, expires_seconds=-1)
    with pytest.raises(AuthenticationError):
        decode_session(token)


def test_missing_or_subjectless_session_is_rejected():
    with pytest.raises(AuthenticationError):
        decode_session(None)
    with pytest.raises(AuthenticationError):
        decode_session("not-a-token")
    no_sub = jwt.encode(
        {"username": "x", "exp": int(time.time()) + 60},
        settings.session_secret,
        algorithm=settings.session_algorithm,
    )
    with pytest.raises(AuthenticationError):
        decode_session(no_sub)

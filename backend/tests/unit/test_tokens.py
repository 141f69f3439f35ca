"""Unit tests for access token verification."""

from datetime import UTC, datetime, timedelta

from jose import jwt

from core.security import TokenService

SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def test_round_trip():
    service = TokenService(SECRET)
    token = service.create_access_token("user-1", email="ana@example.com")

    payload = service.verify_access_token(token)

    assert payload.sub == "user-1"
    assert payload.email == "ana@example.com"
    assert payload.role == "authenticated"
    assert payload.exp > datetime.now(UTC)


def test_wrong_secret_rejected():
    token = TokenService(SECRET).create_access_token("user-1")
    assert TokenService("another-secret").verify_access_token(token) is None


def test_wrong_audience_rejected():
    token = TokenService(SECRET, audience="service_role").create_access_token("user-1")
    assert TokenService(SECRET).verify_access_token(token) is None


def test_audience_check_can_be_disabled():
    token = jwt.encode(
        {"sub": "user-1", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        SECRET,
        algorithm="HS256",
    )
    assert TokenService(SECRET, audience=None).verify_access_token(token).sub == "user-1"


def test_expired_token_rejected():
    token = jwt.encode(
        {
            "sub": "user-1",
            "aud": "authenticated",
            "exp": datetime.now(UTC) - timedelta(minutes=1),
        },
        SECRET,
        algorithm="HS256",
    )
    assert TokenService(SECRET).verify_access_token(token) is None


def test_missing_subject_rejected():
    token = jwt.encode(
        {"aud": "authenticated", "exp": datetime.now(UTC) + timedelta(minutes=5)},
        SECRET,
        algorithm="HS256",
    )
    assert TokenService(SECRET).verify_access_token(token) is None


def test_garbage_rejected():
    assert TokenService(SECRET).verify_access_token("not-a-jwt") is None

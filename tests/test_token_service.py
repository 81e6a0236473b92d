"""Token issuing/verification and signing-key configuration."""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from pydantic import ValidationError as SettingsError

from debtbook.auth.jwt import TokenService
from debtbook.config import DEV_JWT_SECRET, Settings
from debtbook.errors import InvalidToken


@pytest.fixture
def tokens():
    return TokenService(secret="test-secret")


def test_token_verifies_to_its_user(tokens):
    user_id = str(uuid.uuid4())
    assert tokens.verify(tokens.issue(user_id)) == user_id


def test_token_valid_for_thirty_days(tokens):
    token = tokens.issue("u1")
    payload = jwt.decode(token, "test-secret", algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 30 * 24 * 3600


def test_token_still_valid_just_before_expiry(tokens):
    issued = datetime.now(timezone.utc) - timedelta(days=29, hours=23)
    assert tokens.verify(tokens.issue("u1", now=issued)) == "u1"


def test_expired_token_rejected(tokens):
    issued = datetime.now(timezone.utc) - timedelta(days=30, seconds=5)
    with pytest.raises(InvalidToken, match="expired"):
        tokens.verify(tokens.issue("u1", now=issued))


def test_token_signed_with_other_key_rejected(tokens):
    foreign = TokenService(secret="someone-else").issue("u1")
    with pytest.raises(InvalidToken):
        tokens.verify(foreign)


def test_tampered_token_rejected(tokens):
    token = tokens.issue("u1")
    header, payload, signature = token.split(".")
    with pytest.raises(InvalidToken):
        tokens.verify(f"{header}.{payload}.{signature[::-1]}")


@pytest.mark.parametrize("garbage", ["", "abc", "a.b.c"])
def test_malformed_token_rejected(tokens, garbage):
    with pytest.raises(InvalidToken):
        tokens.verify(garbage)


def test_token_without_subject_rejected(tokens):
    exp = datetime.now(timezone.utc) + timedelta(days=1)
    token = jwt.encode({"exp": exp}, "test-secret", algorithm="HS256")
    with pytest.raises(InvalidToken):
        tokens.verify(token)


def test_empty_secret_refused():
    with pytest.raises(ValueError):
        TokenService(secret="")


# ─── Settings ───────────────────────────────────────────


def test_development_falls_back_to_dev_key():
    config = Settings(environment="development", jwt_secret="")
    assert config.signing_key == DEV_JWT_SECRET


def test_production_without_secret_fails_hard():
    with pytest.raises(SettingsError, match="DEBTBOOK_JWT_SECRET"):
        Settings(environment="production", jwt_secret="")


def test_configured_secret_is_used():
    config = Settings(environment="production", jwt_secret="s3cret")
    tokens = TokenService.from_settings(config)
    token = tokens.issue("u1")
    assert jwt.decode(token, "s3cret", algorithms=["HS256"])["sub"] == "u1"

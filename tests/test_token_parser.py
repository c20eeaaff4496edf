import time

import pytest
from jose import jwt

from app.core.security import (
    ExpiredCredentialError,
    MalformedCredentialError,
    MissingCredentialError,
    TokenParser,
)


def encode(claims, key="issuer-secret"):
    return jwt.encode(claims, key, algorithm="HS256")


def test_parse_returns_user_id_without_verifying_signature():
    parser = TokenParser()

    assert parser.parse(encode({"userId": "u-1"})) == "u-1"


def test_parse_accepts_bearer_prefix():
    parser = TokenParser()

    assert parser.parse("Bearer " + encode({"userId": "u-2"})) == "u-2"


@pytest.mark.parametrize("credential", [None, ""])
def test_parse_missing_credential(credential):
    with pytest.raises(MissingCredentialError):
        TokenParser().parse(credential)


def test_parse_garbage_token():
    with pytest.raises(MalformedCredentialError):
        TokenParser().parse("not-a-jwt")


def test_parse_token_without_user_id():
    with pytest.raises(MalformedCredentialError):
        TokenParser().parse(encode({"sub": "someone"}))


def test_parse_expired_token():
    token = encode({"userId": "u-3", "exp": int(time.time()) - 60})

    with pytest.raises(ExpiredCredentialError):
        TokenParser().parse(token)


def test_verified_parser_rejects_foreign_signature():
    parser = TokenParser(secret_key="issuer-secret", verify_signature=True)

    assert parser.parse(encode({"userId": "u-4"})) == "u-4"
    with pytest.raises(MalformedCredentialError):
        parser.parse(encode({"userId": "u-4"}, key="someone-else"))


def test_custom_user_id_claim():
    parser = TokenParser(user_id_claim="sub")

    assert parser.parse(encode({"sub": "u-5"})) == "u-5"

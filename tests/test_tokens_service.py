"""Tests for JWT issuance."""
from __future__ import annotations

import base64
import json
from datetime import datetime, timezone

import jwt
import pytest

from opentok_auth.core.errors import SigningError
from opentok_auth.schemas.tokens import Claims, IssueType
from opentok_auth.services import tokens


def _segment(token: str, index: int) -> dict:
    part = token.split(".")[index]
    padded = part + "=" * (-len(part) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


@pytest.mark.parametrize("issue_type", ["project", "account", IssueType.PROJECT, IssueType.ACCOUNT])
def test_issue_token_has_three_parts(issue_type) -> None:
    issuer = tokens.TokenIssuer("key", "secret")

    token = issuer.issue_token(issue_type)

    assert token
    assert token.count(".") == 2


def test_header_names_hs256() -> None:
    token = tokens.TokenIssuer("key", "secret").issue_token("project")

    header = _segment(token, 0)

    assert header["alg"] == "HS256"
    assert header["typ"] == "JWT"


def test_payload_uses_wire_field_names() -> None:
    token = tokens.TokenIssuer("key", "secret").issue_token("account")

    payload = _segment(token, 1)

    assert set(payload) == {"iss", "iat", "exp", "jti", "ist"}
    assert payload["ist"] == "account"


def test_project_scenario_round_trips_under_secret() -> None:
    issuer = tokens.TokenIssuer("k1", "s1")

    token = issuer.issue_token("project")
    claims = tokens.decode_token(token, "s1")

    assert claims.issuer == "k1"
    assert claims.issue_type is IssueType.PROJECT
    assert claims.expires_at - claims.issued_at == 300


def test_wrong_secret_fails_verification() -> None:
    token = tokens.TokenIssuer("k1", "s1").issue_token("project")

    with pytest.raises(jwt.InvalidSignatureError):
        tokens.decode_token(token, "not-s1")


def test_expiry_is_exactly_five_minutes_after_issue() -> None:
    fixed = datetime(2024, 3, 1, 12, 0, 30, 999999, tzinfo=timezone.utc)
    issuer = tokens.TokenIssuer("key", "secret", clock=lambda: fixed)

    payload = _segment(issuer.issue_token("project"), 1)

    assert payload["iat"] == int(fixed.timestamp())
    assert payload["exp"] - payload["iat"] == 300


@pytest.mark.parametrize(
    "api_key",
    ["46123456", "ключ", "key with spaces", 'quo"te\\slash', "emoji-\U0001f3a5", "a.b.c=="],
)
def test_issuer_matches_api_key_exactly(api_key: str) -> None:
    token = tokens.TokenIssuer(api_key, "secret").issue_token("project")

    assert tokens.decode_token(token, "secret").issuer == api_key


def test_token_ids_do_not_collide() -> None:
    issuer = tokens.TokenIssuer("key", "secret")

    ids = {issuer.build_claims("project").token_id for _ in range(10_000)}

    assert len(ids) == 10_000


def test_signed_token_ids_are_unique() -> None:
    issuer = tokens.TokenIssuer("key", "secret")

    ids = {_segment(issuer.issue_token("project"), 1)["jti"] for _ in range(200)}

    assert len(ids) == 200


def test_build_claims_uses_injected_id_factory() -> None:
    issuer = tokens.TokenIssuer("key", "secret", id_factory=lambda: "fixed-id")

    claims = issuer.build_claims(IssueType.ACCOUNT)

    assert claims.token_id == "fixed-id"
    assert claims.to_payload()["ist"] == "account"


def test_unknown_issue_type_is_rejected() -> None:
    issuer = tokens.TokenIssuer("key", "secret")

    with pytest.raises(ValueError):
        issuer.issue_token("session")


def test_asymmetric_key_material_raises_signing_error() -> None:
    issuer = tokens.TokenIssuer("key", "ssh-rsa AAAAB3NzaC1yc2EAAAADAQABAAABAQ user@host")

    with pytest.raises(SigningError) as excinfo:
        issuer.issue_token("project")

    assert isinstance(excinfo.value.__cause__, jwt.InvalidKeyError)


def test_encoder_failure_is_wrapped(monkeypatch) -> None:
    def _boom(*_args, **_kwargs):
        raise jwt.PyJWTError("backend unavailable")

    monkeypatch.setattr(tokens.jwt, "encode", _boom)

    with pytest.raises(SigningError):
        tokens.TokenIssuer("key", "secret").issue_token("account")


def test_secret_is_not_in_repr() -> None:
    issuer = tokens.TokenIssuer("key", "top-secret")

    assert "top-secret" not in repr(issuer)


def test_claims_reject_window_over_five_minutes() -> None:
    with pytest.raises(ValueError):
        Claims(issuer="k", issued_at=100, expires_at=401, token_id="id", issue_type="project")


def test_claims_are_frozen() -> None:
    claims = Claims(issuer="k", issued_at=100, expires_at=400, token_id="id", issue_type="project")

    with pytest.raises(ValueError):
        claims.issuer = "other"  # type: ignore[misc]


def test_decode_token_can_skip_expiry() -> None:
    past = datetime(2020, 1, 1, tzinfo=timezone.utc)
    token = tokens.TokenIssuer("key", "secret", clock=lambda: past).issue_token("project")

    with pytest.raises(jwt.ExpiredSignatureError):
        tokens.decode_token(token, "secret")

    claims = tokens.decode_token(token, "secret", verify_exp=False)
    assert claims.issued_at == int(past.timestamp())

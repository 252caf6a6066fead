from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from src.hospital.domain.models.user import UserIdentity, UserRole
from src.hospital.errors import InvalidTokenError
from src.hospital.services.auth.tokens import TokenService

SECRET = "unit-test-secret-unit-test-secret-0123456789"


def _service(clock=None, **overrides) -> TokenService:
    kwargs = dict(secret=SECRET, issuer="HospitalGateway", audience="HospitalSystem")
    kwargs.update(overrides)
    if clock is not None:
        kwargs["clock"] = clock
    return TokenService(**kwargs)


def test_issue_then_validate_returns_same_claims():
    service = _service()
    identity = UserIdentity(id=7, username="dr.lopez", role=UserRole.DOCTOR, centro_id=1, doctor_id=3)

    issued = service.issue(identity)
    claims = service.validate(issued.token)

    assert claims.user_id == 7
    assert claims.username == "dr.lopez"
    assert claims.role == UserRole.DOCTOR
    assert claims.centro_id == 1
    assert claims.doctor_id == 3
    assert claims.expires_at - claims.issued_at == timedelta(hours=8)
    assert claims.expires_at == issued.expires_at


def test_admin_token_has_no_optional_claims():
    service = _service()
    token = service.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token

    payload = jwt.get_unverified_claims(token)
    assert "centro_id" not in payload
    assert "doctor_id" not in payload
    assert payload["sub"] == "1"

    claims = service.validate(token)
    assert claims.is_admin
    assert claims.centro_id is None and claims.doctor_id is None


def test_expired_token_is_rejected():
    issued_long_ago = datetime.now(timezone.utc) - timedelta(hours=9)
    old_service = _service(clock=lambda: issued_long_ago)
    token = old_service.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token

    with pytest.raises(InvalidTokenError):
        _service().validate(token)


def test_tampered_token_is_rejected():
    service = _service()
    token = service.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token
    header, payload, signature = token.split(".")
    tampered = ".".join([header, payload, signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")])

    with pytest.raises(InvalidTokenError):
        service.validate(tampered)


def test_token_signed_with_other_secret_is_rejected():
    foreign = _service(secret="another-secret-another-secret-0123456789")
    token = foreign.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token

    with pytest.raises(InvalidTokenError):
        _service().validate(token)


def test_wrong_audience_is_rejected():
    other = _service(audience="SomeOtherSystem")
    token = other.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token

    with pytest.raises(InvalidTokenError):
        _service().validate(token)


def test_wrong_issuer_is_rejected():
    other = _service(issuer="SomeoneElse")
    token = other.issue(UserIdentity(id=1, username="admin", role=UserRole.ADMIN)).token

    with pytest.raises(InvalidTokenError):
        _service().validate(token)


@pytest.mark.parametrize("token", ["", "garbage", "a.b.c"])
def test_malformed_token_is_rejected(token):
    with pytest.raises(InvalidTokenError):
        _service().validate(token)


def test_unknown_role_claim_is_rejected():
    now = int(datetime.now(timezone.utc).timestamp())
    token = jwt.encode(
        {
            "sub": "1",
            "username": "x",
            "role": "superuser",
            "iat": now,
            "exp": now + 60,
            "iss": "HospitalGateway",
            "aud": "HospitalSystem",
        },
        SECRET,
        algorithm="HS256",
    )

    with pytest.raises(InvalidTokenError):
        _service().validate(token)

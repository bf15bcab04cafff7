import base64
import json
from datetime import UTC, datetime, timedelta, timezone

import pytest

from pyoctopusgo.exceptions import ValidationError
from pyoctopusgo.util import (
    decode_token_claims,
    ensure_aware,
    format_utc_timestamp,
    mask_secret,
    parse_timestamp,
    token_expiry,
)


def _token(claims: dict) -> str:
    payload = base64.urlsafe_b64encode(json.dumps(claims).encode()).decode().rstrip("=")
    return f"eyJhbGciOiJIUzI1NiJ9.{payload}.sig"


def test_parse_timestamp_accepts_api_format() -> None:
    assert parse_timestamp("2024-01-10 11:59:00+00:00") == datetime(2024, 1, 10, 11, 59, tzinfo=UTC)
    assert parse_timestamp("2024-07-25T11:59:00+01:00") == datetime(2024, 7, 25, 10, 59, tzinfo=UTC)
    assert parse_timestamp("2024-01-10T11:59:00Z") == datetime(2024, 1, 10, 11, 59, tzinfo=UTC)


def test_parse_timestamp_requires_offset() -> None:
    with pytest.raises(ValidationError):
        parse_timestamp("2024-01-10 11:59:00")
    with pytest.raises(ValidationError):
        parse_timestamp("tomorrow")


def test_format_utc_timestamp_converts_offset() -> None:
    dt = datetime(2024, 1, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_utc_timestamp(dt) == "2024-01-01T10:00:00Z"


def test_ensure_aware_rejects_naive() -> None:
    with pytest.raises(ValidationError):
        ensure_aware(datetime(2024, 1, 1))


def test_token_expiry_reads_exp_claim() -> None:
    token = _token({"exp": 1704888000, "iat": 1704884400})
    assert decode_token_claims(token)["iat"] == 1704884400
    assert token_expiry(token) == datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


@pytest.mark.parametrize(
    "token",
    [
        "only.two",
        "a..c",
        _token({"sub": "user"}),
        _token({"exp": "soon"}),
        _token({"exp": True}),
    ],
)
def test_token_expiry_rejects_unusable_tokens(token: str) -> None:
    with pytest.raises(ValidationError):
        token_expiry(token)


def test_mask_secret() -> None:
    assert mask_secret(None) == "***"
    assert mask_secret("abc") == "***"
    assert mask_secret("A-1234AB") == "A******B"
    assert mask_secret("sk_live_abcdefgh") == "sk_l...efgh"

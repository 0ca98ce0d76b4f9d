"""Tests for access token expiry checks."""

import base64
import json
from typing import Any

import jwt
import pytest

from src.modules.auth.domain.entities import Session
from src.modules.auth.domain.token import is_token_valid, read_token_expiry

SIGNING_KEY = "unit-test-signing-key-with-enough-bytes"
NOW = 1_700_000_000.0
MARGIN = 300.0


def _token(exp: Any) -> str:
    return jwt.encode({"sub": "user-1", "exp": exp}, SIGNING_KEY, algorithm="HS256")


def _segment(data: Any) -> str:
    raw = data if isinstance(data, bytes) else json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _raw_token(payload: Any) -> str:
    header = _segment({"alg": "HS256", "typ": "JWT"})
    return f"{header}.{_segment(payload)}.c2ln"


class TestTokenExpiry:
    def test_reads_exp_claim(self) -> None:
        assert read_token_expiry(_token(int(NOW) + 60)) == NOW + 60

    def test_valid_when_more_than_margin_left(self) -> None:
        assert is_token_valid(_token(int(NOW + MARGIN) + 1), NOW, MARGIN) is True

    def test_invalid_inside_margin(self) -> None:
        assert is_token_valid(_token(int(NOW + MARGIN) - 1), NOW, MARGIN) is False

    def test_invalid_exactly_at_margin(self) -> None:
        assert is_token_valid(_token(int(NOW + MARGIN)), NOW, MARGIN) is False

    def test_expired_token_is_invalid(self) -> None:
        assert is_token_valid(_token(int(NOW) - 10), NOW, MARGIN) is False

    def test_fractional_exp_is_accepted(self) -> None:
        token = _raw_token({"sub": "user-1", "exp": NOW + 3600.5})
        assert read_token_expiry(token) == NOW + 3600.5

    @pytest.mark.parametrize(
        "token",
        [
            "",
            "not-a-token",
            "only.two",
            "a.b.c.d",
            _raw_token({"sub": "user-1"}),
            _raw_token({"sub": "user-1", "exp": "9999999999"}),
            _raw_token({"sub": "user-1", "exp": True}),
            _raw_token({"sub": "user-1", "exp": None}),
            _raw_token([1, 2, 3]),
            f"{_segment({'alg': 'HS256'})}.{_segment(b'not json')}.c2ln",
        ],
    )
    def test_malformed_tokens_are_invalid(self, token: str) -> None:
        assert read_token_expiry(token) is None
        assert is_token_valid(token, NOW, MARGIN) is False


class TestSession:
    def test_expires_at_and_validity(self) -> None:
        session = Session(access_token=_token(int(NOW) + 3600), user_id="user-1")
        assert session.expires_at == NOW + 3600
        assert session.is_valid(NOW, MARGIN) is True
        assert session.is_valid(NOW + 3400, MARGIN) is False

"""TokenPayload / TokenResult のユニットテスト"""

from __future__ import annotations

import pytest
from authtoken.exceptions import AuthTokenError, AuthTokenErrorCodes
from authtoken.models import TokenPayload, TokenResult


def test_issue_sets_both_timestamps() -> None:
    payload = TokenPayload.issue({"userid": 42}, 100)
    assert payload.created_at == 100
    assert payload.refreshed_at == 100
    assert payload.to_dict() == {"userid": 42, "ct": 100, "rt": 100}


def test_reserved_keys_are_overwritten() -> None:
    """クレームの ct / rt はエラーにならずタイムスタンプで上書きされること。"""
    payload = TokenPayload.issue({"ct": 1, "rt": 2, "userid": 42}, 100)
    assert payload.claims == {"userid": 42}
    assert payload.to_dict()["ct"] == 100
    assert payload.to_dict()["rt"] == 100


def test_with_refreshed_at_keeps_created_at() -> None:
    payload = TokenPayload.issue({"userid": 42}, 100).with_refreshed_at(200)
    assert payload.created_at == 100
    assert payload.refreshed_at == 200
    assert payload.claims == {"userid": 42}


def test_from_dict() -> None:
    payload = TokenPayload.from_dict({"userid": 42, "ct": 100, "rt": 150})
    assert payload == TokenPayload(claims={"userid": 42}, created_at=100, refreshed_at=150)


@pytest.mark.parametrize(
    "data",
    [{}, {"ct": 1}, {"rt": 1}, {"ct": "1", "rt": 1}, {"ct": 1.5, "rt": 1}, {"ct": True, "rt": 1}],
)
def test_from_dict_requires_integer_timestamps(data: dict) -> None:
    with pytest.raises(ValueError):
        TokenPayload.from_dict(data)


def test_result_success() -> None:
    result = TokenResult.success("token")
    assert result.ok is True
    assert result.error is None
    assert result.unwrap() == "token"


def test_result_failure_unwrap_raises() -> None:
    result: TokenResult[str] = TokenResult.failure(AuthTokenErrorCodes.STILL_FRESH)
    assert result.ok is False
    assert result.value is None
    with pytest.raises(AuthTokenError) as exc_info:
        result.unwrap()
    assert exc_info.value.code == AuthTokenErrorCodes.STILL_FRESH


def test_error_str_includes_code() -> None:
    err = AuthTokenError(code=AuthTokenErrorCodes.MISSING_KEY, message="no key")
    assert str(err) == "MISSING_KEY: no key"


def test_error_cause_is_chained() -> None:
    cause = ValueError("boom")
    err = AuthTokenError(code=AuthTokenErrorCodes.DECRYPT_FAILURE, message="bad", cause=cause)
    assert err.__cause__ is cause

import pytest
from fastapi import HTTPException

from jobly.auth import CurrentUser, get_current_user, require_admin, require_user


@pytest.fixture(autouse=True)
def api_tokens(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_TOKENS", "user-token:u1,admin-token:u2:admin")


def test_get_current_user_resolves_bearer_token() -> None:
    assert get_current_user("Bearer admin-token") == CurrentUser(username="u2", is_admin=True)
    assert get_current_user("bearer user-token") == CurrentUser(username="u1", is_admin=False)


@pytest.mark.parametrize("header", [None, "", "Bearer", "Basic user-token", "Bearer unknown"])
def test_get_current_user_returns_none_for_anonymous(header: str | None) -> None:
    assert get_current_user(header) is None


def test_require_user_rejects_anonymous() -> None:
    with pytest.raises(HTTPException) as exc_info:
        require_user(None)

    assert exc_info.value.status_code == 401


def test_require_admin_rejects_non_admin() -> None:
    with pytest.raises(HTTPException) as exc_info:
        require_admin(CurrentUser(username="u1", is_admin=False))

    assert exc_info.value.status_code == 401
    assert require_admin(CurrentUser(username="u2", is_admin=True)).username == "u2"

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Header, HTTPException

from jobly.config import get_settings


@dataclass(frozen=True)
class CurrentUser:
    username: str
    is_admin: bool


def _bearer_token(authorization: str | None) -> str | None:
    if authorization is None:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentUser | None:
    token = _bearer_token(authorization)
    if token is None:
        return None

    for known_token, username, is_admin in get_settings().api_tokens:
        if known_token == token:
            return CurrentUser(username=username, is_admin=is_admin)
    return None


def require_user(
    user: Annotated[CurrentUser | None, Depends(get_current_user)],
) -> CurrentUser:
    if user is None:
        raise HTTPException(status_code=401, detail="unauthorized")
    return user


def require_admin(
    user: Annotated[CurrentUser | None, Depends(get_current_user)],
) -> CurrentUser:
    if user is None or not user.is_admin:
        raise HTTPException(status_code=401, detail="unauthorized")
    return user

from __future__ import annotations

import time
from typing import Annotated, Callable, Iterable

from fastapi import Depends, Request
from jose import JWTError, jwt

from wanderly.core import AuthenticationError, AuthorizationError, get_settings
from wanderly.roles import Role

# ---------------------------------------------------------------------------
#  Basic JWT helpers
# ---------------------------------------------------------------------------
# Tokens are issued by the account service; this backend only needs to mint
# them for tooling and tests, and to verify them on admin endpoints.


def _now() -> int:
    return int(time.time())


def create_token(
    sub: int | str,
    role: str | Role,
    *,
    expires_in: int | None = None,
    **extra_claims,
) -> str:
    """Return a signed JWT for *sub* with the given *role*.

    Additional keyword arguments are merged into the payload.
    """
    settings = get_settings()
    if expires_in is None:
        expires_in = settings.ACCESS_TOKEN_EXPIRE_SECONDS
    payload = {
        "sub": str(sub),
        "role": _to_role_str(role),
        "exp": _now() + expires_in,
    }
    payload.update(extra_claims)
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_token(token: str) -> dict:
    """Verify *token* and return its payload."""
    settings = get_settings()
    try:
        payload: dict = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as exc:
        raise AuthenticationError("Invalid token") from exc
    return payload


# ---------------------------------------------------------------------------
#  Dependencies
# ---------------------------------------------------------------------------
def _extract_token(req: Request) -> str | None:
    """Return JWT from the Authorization header or the access_token cookie."""
    auth: str | None = req.headers.get("Authorization")
    if auth and auth.startswith("Bearer "):
        return auth.split(" ", 1)[1]
    return req.cookies.get("access_token")


async def current_user(req: Request) -> dict:
    """FastAPI dependency returning the JWT payload or raising 401."""
    token = _extract_token(req)
    if not token:
        raise AuthenticationError("Missing credentials")
    return decode_token(token)


def _to_role_str(value: "str | Role") -> str:
    if isinstance(value, Role):
        return value.value
    return str(value)


def role_required(*allowed: "str | Role | Iterable[str | Role]") -> Callable[[dict], dict]:
    """Return a dependency that checks *current_user* role is within *allowed*.

    Usage:
        @router.patch("/reorder", dependencies=[Depends(role_required(Role.admin))])
        async def reorder():
            ...
    """
    if len(allowed) == 1 and isinstance(allowed[0], (list, tuple, set)):
        allowed = tuple(allowed[0])
    allowed_set = {_to_role_str(a) for a in allowed}

    async def _dep(user: Annotated[dict, Depends(current_user)]):
        if user.get("role") not in allowed_set:
            raise AuthorizationError()
        return user

    return _dep


def mint_tokens(sub: int | str, role: str | Role, **extra_claims) -> tuple[str, str]:
    """Return an *(access, refresh)* pair embedding *extra_claims* in both."""
    settings = get_settings()
    access = create_token(sub, role, expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS, **extra_claims)
    refresh = create_token(sub, role, expires_in=settings.REFRESH_TOKEN_EXPIRE_SECONDS, **extra_claims)
    return access, refresh

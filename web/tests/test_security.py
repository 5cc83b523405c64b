import pytest

from wanderly.core import AuthenticationError
from wanderly.roles import Role
from wanderly.security import create_token, decode_token, mint_tokens


def test_token_round_trip_carries_role():
    payload = decode_token(create_token(7, Role.admin))
    assert payload["sub"] == "7"
    assert payload["role"] == "admin"


def test_expired_token_is_rejected():
    with pytest.raises(AuthenticationError):
        decode_token(create_token(7, Role.admin, expires_in=-10))


def test_mint_tokens_refresh_outlives_access():
    access, refresh = mint_tokens(7, Role.user)
    assert decode_token(refresh)["exp"] > decode_token(access)["exp"]


async def test_expired_token_gets_401(client):
    token = create_token(1, Role.admin, expires_in=-10)
    resp = await client.get("/api/v1/reviews", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


async def test_cookie_token_is_accepted(client):
    client.cookies.set("access_token", create_token(1, Role.admin))
    resp = await client.get("/api/v1/reviews")
    assert resp.status_code == 200
    assert resp.json()["data"] == []

import pytest
from sqlalchemy import select

from wanderly.models import Country, Review


async def seed_countries(session, *names):
    countries = [Country(name=n) for n in names]
    session.add_all(countries)
    await session.commit()
    return [c.id for c in countries]


async def test_reorder_requires_admin(client, user_headers):
    resp = await client.patch("/api/v1/countries/reorder", json={"ids": []})
    assert resp.status_code == 401
    assert resp.json()["success"] is False

    resp = await client.patch("/api/v1/countries/reorder", json={"ids": []}, headers=user_headers)
    assert resp.status_code == 403


async def test_reorder_assigns_positions(client, session, admin_headers):
    a, b, c = await seed_countries(session, "Nepal", "Bhutan", "India")

    resp = await client.patch(
        "/api/v1/countries/reorder", json={"countryIds": [c, a, b]}, headers=admin_headers,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert [item["id"] for item in body["data"]] == [c, a, b]
    assert [item["order"] for item in body["data"]] == [0, 1, 2]

    resp = await client.get("/api/v1/countries", headers=admin_headers)
    assert [item["name"] for item in resp.json()["data"]] == ["India", "Nepal", "Bhutan"]
    assert resp.json()["reorderable"] is True


@pytest.mark.parametrize("method", ["POST", "PUT"])
async def test_reorder_accepts_legacy_methods_and_keys(client, session, admin_headers, method):
    session.add_all([Review(name="Rahim", text="Great trip"), Review(name="Karim", text="Loved it")])
    await session.commit()
    ids = (await session.scalars(select(Review.id).order_by(Review.id))).all()
    await session.commit()

    resp = await client.request(
        method, "/api/v1/reviews/reorder",
        json={"reviewIds": list(reversed(ids))}, headers=admin_headers,
    )
    assert resp.status_code == 200
    assert [item["id"] for item in resp.json()["data"]] == list(reversed(ids))


@pytest.mark.parametrize("payload_ids, fragment", [
    (lambda ids: ids[:2], "missing ids"),
    (lambda ids: ids + [ids[0]], "Duplicate"),
    (lambda ids: ids[:2] + [9999], "Unknown"),
])
async def test_partial_or_invalid_lists_are_rejected(client, session, admin_headers, payload_ids, fragment):
    ids = await seed_countries(session, "Nepal", "Bhutan", "India")

    resp = await client.patch(
        "/api/v1/countries/reorder", json={"ids": payload_ids(ids)}, headers=admin_headers,
    )
    assert resp.status_code == 400
    assert fragment in resp.json()["message"]

    # nothing was written
    orders = (await session.scalars(select(Country.order))).all()
    assert orders == [None, None, None]


async def test_filtered_list_is_not_reorderable(client, session, admin_headers):
    await seed_countries(session, "Nepal", "Bhutan", "India")

    resp = await client.get("/api/v1/countries", params={"search": "ne"}, headers=admin_headers)
    body = resp.json()
    assert [item["name"] for item in body["data"]] == ["Nepal"]
    assert body["reorderable"] is False


async def test_unordered_rows_sort_after_ordered_ones(client, session, admin_headers):
    a, b = await seed_countries(session, "Nepal", "Bhutan")
    await client.patch("/api/v1/countries/reorder", json={"ids": [b, a]}, headers=admin_headers)
    await client.post("/api/v1/countries", json={"name": "India"}, headers=admin_headers)

    resp = await client.get("/api/v1/countries", headers=admin_headers)
    assert [item["name"] for item in resp.json()["data"]] == ["Bhutan", "Nepal", "India"]


async def test_unknown_resource_is_404(client, admin_headers):
    resp = await client.patch("/api/v1/planets/reorder", json={"ids": [1]}, headers=admin_headers)
    assert resp.status_code == 404

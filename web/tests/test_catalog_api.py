import pytest

from wanderly.api.v1.schemas import BlogIn

LONG_CONTENT = "Sundarbans is the largest mangrove forest in the world. " * 3

VALID_BLOG = {
    "title": "Five days in the Sundarbans",
    "content": LONG_CONTENT,
    "tags": "travel, mangrove, bangladesh",
    "readTime": "5 min",
}


@pytest.mark.parametrize("field, value, message", [
    ("title", "Trip", "at least 5 characters"),
    ("title", "x" * 151, "less than 150 characters"),
    ("content", "Too short", "at least 100 characters"),
    ("tags", " , ,", "at least one valid tag"),
    ("tags", ",".join(f"t{i}" for i in range(11)), "Maximum 10 tags"),
    ("readTime", "five minutes", "format like '5 min'"),
])
def test_blog_rules_block_submission(field, value, message):
    with pytest.raises(ValueError) as excinfo:
        BlogIn(**{**VALID_BLOG, field: value})
    assert message in str(excinfo.value)


@pytest.mark.parametrize("read_time", ["5 min", "10 minutes", "1 minute", "3mins", "7 MIN"])
def test_blog_read_time_formats(read_time):
    assert BlogIn(**{**VALID_BLOG, "readTime": read_time}).read_time == read_time


def test_blog_tags_are_normalised():
    blog = BlogIn(**{**VALID_BLOG, "tags": " travel ,, food "})
    assert blog.tags == "travel, food"


async def test_blog_crud(client, admin_headers):
    resp = await client.post("/api/v1/blogs", json=VALID_BLOG, headers=admin_headers)
    assert resp.status_code == 201
    blog = resp.json()["data"]
    assert blog["readTime"] == "5 min"

    resp = await client.patch(
        f"/api/v1/blogs/{blog['id']}", json={"title": "Six days in the Sundarbans"}, headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["data"]["title"] == "Six days in the Sundarbans"
    assert resp.json()["data"]["content"] == LONG_CONTENT

    resp = await client.delete(f"/api/v1/blogs/{blog['id']}", headers=admin_headers)
    assert resp.status_code == 200

    resp = await client.get(f"/api/v1/blogs/{blog['id']}", headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["success"] is False


async def test_invalid_blog_is_rejected_by_api(client, admin_headers):
    resp = await client.post(
        "/api/v1/blogs", json={**VALID_BLOG, "readTime": "soon"}, headers=admin_headers,
    )
    assert resp.status_code == 422
    assert resp.json()["details"]["errors"][0]["field"].endswith("readTime")


async def test_review_rating_must_be_one_to_five(client, admin_headers):
    resp = await client.post(
        "/api/v1/reviews", json={"name": "Rahim", "text": "Nice", "rating": 6}, headers=admin_headers,
    )
    assert resp.status_code == 422


async def test_empty_update_is_rejected(client, admin_headers):
    resp = await client.post("/api/v1/teams", json={"name": "Nadia"}, headers=admin_headers)
    member_id = resp.json()["data"]["id"]

    resp = await client.patch(f"/api/v1/teams/{member_id}", json={}, headers=admin_headers)
    assert resp.status_code == 400


async def test_tour_carries_pricing(client, admin_headers):
    resp = await client.post("/api/v1/countries", json={"name": "Thailand"}, headers=admin_headers)
    country_id = resp.json()["data"]["id"]

    resp = await client.post("/api/v1/tours", json={
        "title": "Bangkok & Pattaya",
        "destinationId": country_id,
        "basePrice": 50000,
        "offer": {"isActive": True, "discountType": "percentage", "discountPercentage": 10},
    }, headers=admin_headers)
    assert resp.status_code == 201
    tour = resp.json()["data"]
    # no explicit percentage: platform default of 20 %
    assert tour["bookingFeePercentage"] == 20
    assert tour["discountedPrice"] == 45000
    assert tour["bookingFee"] == 10000
    assert tour["formattedPrice"] == "৳45,000"

    resp = await client.patch(
        f"/api/v1/tours/{tour['id']}",
        json={"offer": {"isActive": True, "flatDiscount": 2000}},
        headers=admin_headers,
    )
    tour = resp.json()["data"]
    assert tour["offer"]["discountType"] == "flat"
    assert tour["discountedPrice"] == 48000
    assert tour["bookingFee"] == 10000


async def test_tour_with_unknown_destination_is_rejected(client, admin_headers):
    resp = await client.post(
        "/api/v1/tours", json={"title": "Nowhere", "destinationId": 42, "basePrice": 1000}, headers=admin_headers,
    )
    assert resp.status_code == 400
    assert resp.json()["details"]["field"] == "destination_id"


async def test_public_quote_and_offers(client, tour):
    resp = await client.get(f"/api/v1/tours/{tour.id}/quote")
    assert resp.status_code == 200
    quote = resp.json()["data"]
    assert quote["discountedPrice"] == 45000
    assert quote["bookingFee"] == 10000
    assert quote["formattedBookingFee"] == "৳10,000"

    resp = await client.get("/api/v1/tours/offers")
    assert [t["id"] for t in resp.json()["data"]] == [tour.id]

"""Checkout -> gateway -> redirect page, through the real HTTP surface."""
from httpx import ASGITransport

from wanderly.api.pages import get_reconciler
from wanderly.client.reconciler import TransactionReconciler
from wanderly.main import app


def use_reconciler(api_base_url="http://test/api/v1"):
    app.dependency_overrides[get_reconciler] = lambda: TransactionReconciler(
        api_base_url, transport=ASGITransport(app=app),
    )


async def pay(client, gateway, tour):
    data = (await client.post("/api/v1/bookings", json={
        "tourId": tour.id,
        "name": "Ayesha Rahman",
        "phone": "+8801711000000",
    })).json()["data"]
    val_id = gateway.pay(data["transactionId"], data["totalAmount"])
    resp = await client.post(
        "/api/v1/payments/bookings/success",
        data={"tran_id": data["transactionId"], "val_id": val_id},
    )
    return data, resp


async def test_displayed_fee_matches_recorded_fee(client, gateway, tour):
    """Base 50000 at 20 % with a 10 % offer: price 45000, fee 10000"""
    use_reconciler()

    quote = (await client.get(f"/api/v1/tours/{tour.id}/quote")).json()["data"]
    assert quote["discountedPrice"] == 45000
    assert quote["bookingFee"] == 10000

    data, resp = await pay(client, gateway, tour)
    assert data["bookingFee"] == quote["bookingFee"]

    page = (await client.get(resp.headers["location"].replace("http://frontend.test", ""))).json()
    assert page["state"] == "success"
    assert page["transactionId"] == data["transactionId"]
    assert page["record"]["bookingFee"] == 10000
    assert page["record"]["paymentStatus"] == "paid"


async def test_success_page_for_unknown_transaction(client):
    use_reconciler()
    page = (await client.get("/booking-success", params={"tran_id": "TOUR-UNKNOWN"})).json()
    assert page["state"] == "failure"
    assert page["reason"] == "processing_error"
    assert page["retryPath"] == "/package"


async def test_success_page_without_api_base_url(client):
    use_reconciler(api_base_url=None)
    page = (await client.get("/booking-success", params={"tran_id": "TOUR-1"})).json()
    assert page["state"] == "failure"
    assert page["reason"] == "config_error"


async def test_fail_and_cancel_pages(client):
    use_reconciler()
    page = (await client.get("/visa/payment/fail", params={"error": "payment_failed"})).json()
    assert page["message"] == "Your payment was not successful. Please try again."

    page = (await client.get("/booking-failed")).json()
    assert page["message"] == "Payment failed. Please try again."

    page = (await client.get("/visa-cancelled", params={"transactionId": "VISA-1", "country": "Malaysia"})).json()
    assert page["state"] == "cancelled"
    assert page["context"] == {"country": "Malaysia"}

    page = (await client.get("/booking-cancelled")).json()
    assert page["state"] == "cancelled"


async def test_missing_transaction_id_on_success_page(client):
    use_reconciler()
    page = (await client.get("/visa/payment/success")).json()
    assert page["state"] == "not_found"
    assert page["message"] == "Transaction ID not found. Please try again."

"""
Pytest configuration and fixtures.

Settings are read from the environment at import time, so the test
environment is set up before anything from ``wanderly`` is imported.
"""
import os

os.environ["DB_DSN"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["RATE_LIMIT_DEFAULT"] = "10000/minute"
os.environ["API_BASE_URL"] = "http://test/api/v1"
os.environ["FRONTEND_URL"] = "http://frontend.test"
os.environ["SSLCOMMERZ_STORE_ID"] = "teststore"
os.environ["SSLCOMMERZ_STORE_PASSWORD"] = "teststore@ssl"

from decimal import Decimal
from typing import Any, AsyncGenerator, Dict
from urllib.parse import parse_qs

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from wanderly.infrastructure import get_session
from wanderly.infrastructure.sslcommerz import (
    QUERY_PATH, SESSION_PATH, VALIDATION_PATH, SSLCommerzClient, get_payment_gateway,
)
from wanderly.main import app
from wanderly.models import Base, Country, Tour, Visa
from wanderly.roles import Role
from wanderly.security import create_token


class FakeSSLCommerz:
    """In-memory stand-in for the SSLCommerz REST API, served through MockTransport"""

    def __init__(self):
        self.sessions: Dict[str, Dict[str, str]] = {}
        self.payments: Dict[str, Dict[str, Any]] = {}
        self.fail_sessions = False
        self.requests = []

    def pay(self, tran_id: str, amount: Any, *, val_id: str = None, status: str = "VALID") -> str:
        """Record a completed payment and return its validation id"""
        val_id = val_id or f"VAL-{tran_id}"
        self.payments[val_id] = {
            "status": status,
            "tran_id": tran_id,
            "amount": f"{Decimal(str(amount)):.2f}",
            "currency": "BDT",
        }
        return val_id

    def decline(self, tran_id: str, status: str = "FAILED") -> None:
        """Record an attempt the customer abandoned or the bank refused"""
        self.payments[f"{status}-{tran_id}-{len(self.payments)}"] = {"status": status, "tran_id": tran_id}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == SESSION_PATH:
            if self.fail_sessions:
                return httpx.Response(200, json={"status": "FAILED", "failedreason": "Store is inactive"})
            form = {k: v[0] for k, v in parse_qs(request.content.decode()).items()}
            self.sessions[form["tran_id"]] = form
            return httpx.Response(200, json={
                "status": "SUCCESS",
                "GatewayPageURL": f"https://sandbox.sslcommerz.com/pay/{form['tran_id']}",
                "sessionkey": "SESSIONKEY",
            })
        if request.url.path == VALIDATION_PATH:
            payment = self.payments.get(request.url.params.get("val_id"))
            if payment is None:
                return httpx.Response(200, json={"status": "INVALID_TRANSACTION"})
            return httpx.Response(200, json=payment)
        if request.url.path == QUERY_PATH:
            tran_id = request.url.params.get("tran_id")
            found = [
                {**payment, "val_id": val_id}
                for val_id, payment in self.payments.items()
                if payment["tran_id"] == tran_id
            ]
            return httpx.Response(200, json={
                "APIConnect": "DONE",
                "no_of_trans_found": len(found),
                "element": found,
            })
        return httpx.Response(404)

    @property
    def client(self) -> SSLCommerzClient:
        return SSLCommerzClient(transport=httpx.MockTransport(self.handler))


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, Any]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway() -> FakeSSLCommerz:
    return FakeSSLCommerz()


@pytest_asyncio.fixture
async def client(session_factory, gateway) -> AsyncGenerator[AsyncClient, Any]:
    """HTTP client bound to the app with the test database and fake gateway"""

    async def _session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway.client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(1, Role.admin)}"}


@pytest.fixture
def user_headers() -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_token(2, Role.user)}"}


@pytest_asyncio.fixture
async def tour(session) -> Tour:
    """Base 50000, 20 % booking fee, active 10 % offer"""
    destination = Country(name="Thailand")
    session.add(destination)
    await session.flush()
    tour = Tour(
        title="Bangkok & Pattaya 5 days",
        destination_id=destination.id,
        base_price=Decimal("50000"),
        booking_fee_percentage=Decimal("20"),
        offer_is_active=True,
        offer_discount_type="percentage",
        offer_discount_percentage=Decimal("10"),
    )
    session.add(tour)
    await session.commit()
    return tour


@pytest_asyncio.fixture
async def visa(session) -> Visa:
    visa = Visa(country_name="Malaysia", visa_type="Tourist", fee=Decimal("4500"))
    session.add(visa)
    await session.commit()
    return visa

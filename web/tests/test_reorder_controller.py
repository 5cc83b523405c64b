import httpx
import pytest
from httpx import ASGITransport

from wanderly.client import ApiError, CatalogClient, ReorderController
from wanderly.main import app
from wanderly.models import Visa
from wanderly.ordering import EditSession
from wanderly.roles import Role
from wanderly.security import create_token


def api_client(transport=None):
    return CatalogClient(
        "http://test/api/v1",
        create_token(1, Role.admin),
        transport=transport or ASGITransport(app=app),
    )


async def seed_visas(session):
    visas = [
        Visa(country_name=name, visa_type="Tourist", fee=1000)
        for name in ("Malaysia", "Thailand", "Dubai")
    ]
    session.add_all(visas)
    await session.commit()
    return [v.id for v in visas]


async def test_move_persists_full_order(client, session):
    a, b, c = await seed_visas(session)
    async with api_client() as catalog:
        controller = ReorderController("visas", catalog)
        await controller.refresh()
        assert controller.manager.ids == [a, b, c]

        assert await controller.move(0, 2)
        assert controller.manager.ids == [b, c, a]
        assert not controller.manager.in_flight

        listing = await catalog.list("visas")
        assert [v["id"] for v in listing["items"]] == [b, c, a]
        assert [v["order"] for v in listing["items"]] == [0, 1, 2]


async def test_noop_move_sends_nothing():
    calls = []

    def backend(request):
        calls.append(request.method)
        return httpx.Response(200, json={"success": True, "data": []})

    async with api_client(httpx.MockTransport(backend)) as catalog:
        controller = ReorderController("visas", catalog)
        controller.manager.load([{"id": 1}, {"id": 2}])
        assert not await controller.move(1, 1)
        assert calls == []


async def test_failed_reorder_refetches_canonical_order():
    canonical = [{"id": 1, "order": 0}, {"id": 2, "order": 1}, {"id": 3, "order": 2}]

    def backend(request):
        if request.method == "PATCH":
            return httpx.Response(400, json={"success": False, "message": "Unknown ids in reorder request"})
        return httpx.Response(200, json={"success": True, "data": canonical, "reorderable": True})

    async with api_client(httpx.MockTransport(backend)) as catalog:
        controller = ReorderController("visas", catalog)
        await controller.refresh()
        assert not await controller.move(0, 2)
        assert controller.manager.ids == [1, 2, 3]
        assert not controller.manager.needs_refetch
        assert controller.manager.can_drag


async def test_refetch_failure_keeps_refetch_flag():
    def backend(request):
        raise httpx.ConnectError("offline")

    async with api_client(httpx.MockTransport(backend)) as catalog:
        controller = ReorderController("visas", catalog)
        controller.manager.load([{"id": 1}, {"id": 2}])
        assert not await controller.move(0, 1)
        assert controller.manager.needs_refetch
        assert controller.manager.ids == [2, 1]


async def test_filtered_listing_disables_dragging(client, session):
    await seed_visas(session)
    async with api_client() as catalog:
        controller = ReorderController("visas", catalog)
        await controller.refresh(search="thai")
        assert controller.manager.ids and not controller.manager.can_drag


async def test_update_sends_edit_session(client, session):
    a, _, _ = await seed_visas(session)
    async with api_client() as catalog:
        edit = EditSession("visas", a).set("visaType", "Business")
        updated = await catalog.update(edit)
        assert updated["visaType"] == "Business"

        with pytest.raises(ApiError) as excinfo:
            await catalog.update(EditSession("visas", 9999).set("visaType", "Business"))
        assert excinfo.value.status_code == 404


async def test_unordered_rows_stay_last_after_refresh(client, session):
    visas = [
        Visa(country_name="Malaysia", visa_type="Tourist", fee=1000, order=8),
        Visa(country_name="Thailand", visa_type="Tourist", fee=1000, order=9),
        Visa(country_name="Dubai", visa_type="Tourist", fee=1000),
    ]
    session.add_all(visas)
    await session.commit()

    async with api_client() as catalog:
        listing = await catalog.list("visas")
        controller = ReorderController("visas", catalog)
        await controller.refresh()
        assert controller.manager.ids == [v["id"] for v in listing["items"]]
        assert controller.manager.ids == [v.id for v in visas]


async def test_malformed_reorder_response_releases_drag_lock():
    canonical = [{"id": 1, "order": 0}, {"id": 2, "order": 1}]

    def backend(request):
        if request.method == "PATCH":
            return httpx.Response(200, json=None)
        return httpx.Response(200, json={"success": True, "data": canonical, "reorderable": True})

    async with api_client(httpx.MockTransport(backend)) as catalog:
        controller = ReorderController("visas", catalog)
        await controller.refresh()
        assert not await controller.move(0, 1)
        assert not controller.manager.in_flight
        assert controller.manager.can_drag
        assert controller.manager.ids == [1, 2]


class BrokenClient:
    async def reorder(self, resource, ids):
        raise RuntimeError("boom")

    async def list(self, resource, *, search=None):
        return {"items": [{"id": 1, "order": 0}, {"id": 2, "order": 1}], "reorderable": True}


async def test_unexpected_error_still_ends_persistence():
    controller = ReorderController("visas", BrokenClient())
    controller.manager.load([{"id": 1}, {"id": 2}])
    with pytest.raises(RuntimeError):
        await controller.move(0, 1)
    assert not controller.manager.in_flight
    assert controller.manager.can_drag
    assert controller.manager.ids == [1, 2]

"""Admin endpoints for the orderable catalog collections.

Every collection gets the same set of routes from :func:`build_router`:

    GET    /{resource}            list in display order (``?search=`` filters)
    POST   /{resource}            create
    PATCH|POST|PUT /{resource}/reorder
                                  persist a full ordered id list
    GET    /{resource}/{id}       read one
    PATCH  /{resource}/{id}       partial update
    DELETE /{resource}/{id}       delete
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from wanderly.api.v1.schemas import (
    Envelope, ListEnvelope, ReorderIn,
    ReviewIn, ReviewUpdate, ReviewOut,
    BlogIn, BlogUpdate, BlogOut,
    CountryIn, CountryUpdate, CountryOut,
    TeamMemberIn, TeamMemberUpdate, TeamMemberOut,
    VisaIn, VisaUpdate, VisaOut,
    TourCategoryIn, TourCategoryUpdate, TourCategoryOut,
    TourIn, TourUpdate, TourOut,
)
from wanderly.deps import SessionDep
from wanderly.roles import Role
from wanderly.security import role_required
from wanderly.services import CatalogService, RESOURCES

logger = logging.getLogger(__name__)


def _changes(payload: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent; nested models are taken whole"""
    data = payload.model_dump(exclude_unset=True)
    for name in data:
        value = getattr(payload, name)
        if isinstance(value, BaseModel):
            data[name] = value.model_dump()
    return data


def build_router(
    slug: str,
    create_schema: type,
    update_schema: type,
    out_schema: type,
    serialize: Optional[Callable[[Any], Any]] = None,
) -> APIRouter:
    """Return the admin router for one orderable collection"""
    label = RESOURCES[slug].label
    serialize = serialize or out_schema.model_validate

    router = APIRouter(
        prefix=f"/{slug}",
        tags=[slug],
        dependencies=[Depends(role_required(Role.admin))],
    )

    @router.get("", response_model=ListEnvelope[List[out_schema]])
    async def list_items(
        sess: SessionDep,
        search: Optional[str] = Query(None, max_length=100),
        skip: int = Query(0, ge=0),
        limit: Optional[int] = Query(None, gt=0, le=500),
    ):
        items, reorderable = await CatalogService(sess, slug).list_items(
            search=search, skip=skip, limit=limit,
        )
        return ListEnvelope[List[out_schema]](
            data=[serialize(item) for item in items],
            reorderable=reorderable,
            total=len(items),
        )

    @router.post("", response_model=Envelope[out_schema], status_code=status.HTTP_201_CREATED)
    async def create_item(payload: create_schema, sess: SessionDep):
        item = await CatalogService(sess, slug).create_item(payload.model_dump())
        await sess.commit()
        return Envelope[out_schema](message=f"{label} created", data=serialize(item))

    # Registered before /{item_id} so "reorder" is never parsed as an id
    @router.api_route("/reorder", methods=["PATCH", "POST", "PUT"], response_model=ListEnvelope[List[out_schema]])
    async def reorder_items(payload: ReorderIn, sess: SessionDep):
        items = await CatalogService(sess, slug).reorder(payload.ids)
        await sess.commit()
        return ListEnvelope[List[out_schema]](
            message=f"{label} order updated",
            data=[serialize(item) for item in items],
            total=len(items),
        )

    @router.get("/{item_id}", response_model=Envelope[out_schema])
    async def get_item(item_id: int, sess: SessionDep):
        item = await CatalogService(sess, slug).get_item(item_id)
        return Envelope[out_schema](data=serialize(item))

    @router.patch("/{item_id}", response_model=Envelope[out_schema])
    async def update_item(item_id: int, payload: update_schema, sess: SessionDep):
        item = await CatalogService(sess, slug).update_item(item_id, _changes(payload))
        await sess.commit()
        return Envelope[out_schema](message=f"{label} updated", data=serialize(item))

    @router.delete("/{item_id}", response_model=Envelope[None])
    async def delete_item(item_id: int, sess: SessionDep):
        await CatalogService(sess, slug).delete_item(item_id)
        await sess.commit()
        logger.info("Deleted %s id=%s", slug, item_id)
        return Envelope[None](message=f"{label} deleted")

    return router


routers = [
    build_router("reviews", ReviewIn, ReviewUpdate, ReviewOut),
    build_router("blogs", BlogIn, BlogUpdate, BlogOut),
    build_router("countries", CountryIn, CountryUpdate, CountryOut),
    build_router("teams", TeamMemberIn, TeamMemberUpdate, TeamMemberOut),
    build_router("visas", VisaIn, VisaUpdate, VisaOut),
    build_router("tour-categories", TourCategoryIn, TourCategoryUpdate, TourCategoryOut),
    build_router("tours", TourIn, TourUpdate, TourOut, serialize=TourOut.from_tour),
]

"""Orderable catalog collections: listing, editing and drag-and-drop order."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from wanderly.core import BaseService, NotFoundError, ValidationError
from wanderly.infrastructure.repositories import OrderableRepository, TourRepository
from wanderly.models import Review, Blog, Country, TeamMember, Visa, TourCategory, Tour

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogResource:
    slug: str
    model: type
    label: str


RESOURCES: Dict[str, CatalogResource] = {
    r.slug: r
    for r in (
        CatalogResource("reviews", Review, "Review"),
        CatalogResource("blogs", Blog, "Blog"),
        CatalogResource("countries", Country, "Country"),
        CatalogResource("teams", TeamMember, "Team member"),
        CatalogResource("visas", Visa, "Visa"),
        CatalogResource("tour-categories", TourCategory, "Tour category"),
        CatalogResource("tours", Tour, "Tour"),
    )
}


def get_resource(slug: str) -> CatalogResource:
    try:
        return RESOURCES[slug]
    except KeyError:
        raise NotFoundError("Resource", slug, key="name") from None


def _flatten_offer(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map a nested ``offer`` payload onto the tour's offer columns"""
    if "offer" not in data:
        return data
    data = dict(data)
    offer = data.pop("offer")
    if offer is None:
        data["offer_is_active"] = False
        return data
    data.update({
        "offer_is_active": bool(offer.get("is_active")),
        "offer_discount_type": offer.get("discount_type"),
        "offer_flat_discount": offer.get("flat_discount"),
        "offer_discount_percentage": offer.get("discount_percentage"),
    })
    return data


class CatalogService(BaseService):
    """CRUD and reorder for one orderable resource"""

    def __init__(self, session: AsyncSession, resource: str):
        super().__init__(session)
        self.resource = get_resource(resource)
        if self.resource.model is Tour:
            self.repository = TourRepository(session)
        else:
            self.repository = OrderableRepository(self.resource.model, session)

    async def list_items(
        self,
        *,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List[Any], bool]:
        """Return ``(items, reorderable)``.

        Only the complete, unfiltered collection can be reordered.
        """
        search = (search or "").strip() or None
        items = await self.repository.list_ordered(search=search, skip=skip, limit=limit)
        reorderable = search is None and skip == 0 and limit is None
        return items, reorderable

    async def get_item(self, item_id: int) -> Any:
        item = await self.repository.get(item_id)
        if item is None:
            raise NotFoundError(self.resource.label, item_id)
        return item

    async def create_item(self, data: Dict[str, Any]) -> Any:
        data = _flatten_offer(data)
        await self._check_references(data)
        item = await self.repository.create(obj_in=data)
        logger.info("Created %s id=%s", self.resource.slug, item.id)
        return item

    async def update_item(self, item_id: int, data: Dict[str, Any]) -> Any:
        if not data:
            raise ValidationError("Nothing to update")
        data = _flatten_offer(data)
        await self._check_references(data)
        item = await self.repository.update(id=item_id, obj_in=data)
        if item is None:
            raise NotFoundError(self.resource.label, item_id)
        return item

    async def delete_item(self, item_id: int) -> None:
        if not await self.repository.delete(id=item_id):
            raise NotFoundError(self.resource.label, item_id)

    async def reorder(self, ids: List[int]) -> List[Any]:
        """Persist a new total order; the backend assigns 0..n-1"""
        logger.info("Reordering %s (%d items)", self.resource.slug, len(ids))
        try:
            return await self.repository.reorder(ids)
        except ValidationError as exc:
            logger.warning("Rejected %s reorder: %s", self.resource.slug, exc.message)
            raise

    async def _check_references(self, data: Dict[str, Any]) -> None:
        if self.resource.model is not Tour:
            return
        for field, model, label in (
            ("destination_id", Country, "Destination"),
            ("category_id", TourCategory, "Tour category"),
        ):
            ref = data.get(field)
            if ref is not None and await self.session.get(model, ref) is None:
                raise ValidationError(f"{label} {ref} does not exist", field=field)

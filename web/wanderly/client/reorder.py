import logging
from typing import Any, Optional

from wanderly.ordering import OrderIndexManager
from .api_client import ApiError, CatalogClient

logger = logging.getLogger(__name__)


class ReorderController:
    """Runs drop -> persist -> (refetch on failure) for one collection.

    Only one reorder call is outstanding at a time: while it runs the
    manager refuses new drags.
    """

    def __init__(self, resource: str, client: CatalogClient, manager: Optional[OrderIndexManager] = None):
        self.resource = resource
        self.client = client
        self.manager = manager or OrderIndexManager()

    async def refresh(self, search: Optional[str] = None) -> None:
        """Load canonical server order; filtered listings disable dragging"""
        listing = await self.client.list(self.resource, search=search)
        self.manager.load(listing["items"])
        self.manager.enabled = bool(listing["reorderable"]) and not search

    async def move(self, source_index: int, target_index: int) -> bool:
        """Return True when the new order was persisted"""
        request = self.manager.drop(source_index, target_index)
        if request is None:
            return False

        self.manager.begin_persist()
        saved = None
        persisted = False
        try:
            saved = await self.client.reorder(self.resource, request.ids)
            persisted = True
        except ApiError as exc:
            logger.warning("Reorder of %s failed (%s); refetching", self.resource, exc.message)
        finally:
            self.manager.end_persist(persisted)
            if not persisted:
                await self._refetch()

        if not persisted:
            return False
        if saved:
            self.manager.load(saved)
        return True

    async def _refetch(self) -> None:
        try:
            await self.refresh()
        except ApiError as exc:
            # needs_refetch stays set for the next attempt
            logger.warning("Refetch of %s failed: %s", self.resource, exc.message)

    @property
    def items(self) -> Any:
        return self.manager.items

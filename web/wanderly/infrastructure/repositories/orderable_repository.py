from typing import Optional, List, Any, Sequence
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from wanderly.core import BaseRepository, ValidationError


class OrderableRepository(BaseRepository):
    """Repository for collections carrying an admin-controlled ``order``"""

    def __init__(self, model, session: AsyncSession):
        super().__init__(model, session)

    def _ordered(self, query):
        # Rows never reordered (order IS NULL) go last, id breaks ties
        return query.order_by(
            self.model.order.is_(None),
            self.model.order,
            self.model.id,
        )

    async def list_ordered(
        self,
        *,
        search: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[Any]:
        """List the collection in display order, optionally filtered"""
        query = select(self.model)
        if search:
            pattern = f"%{search.strip()}%"
            columns = [getattr(self.model, name) for name in self.model.__search_fields__]
            if columns:
                query = query.where(or_(*[c.ilike(pattern) for c in columns]))
        query = self._ordered(query).offset(skip)
        if limit is not None:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def reorder(self, ids: Sequence[Any]) -> List[Any]:
        """Assign ``order = position`` following *ids*.

        *ids* must name every row of the collection exactly once.  A partial
        list cannot define a global order, so it is rejected and nothing is
        written.
        """
        ids = list(ids)
        if len(set(ids)) != len(ids):
            raise ValidationError("Duplicate ids in reorder request", field="ids")

        # Lock the collection so two reorders cannot interleave
        current = await self.session.execute(
            select(self.model).with_for_update()
        )
        rows = {row.id: row for row in current.scalars().all()}

        unknown = [i for i in ids if i not in rows]
        if unknown:
            raise ValidationError(f"Unknown ids in reorder request: {unknown}", field="ids")
        missing = sorted(set(rows) - set(ids))
        if missing:
            raise ValidationError(
                f"Reorder request must list the whole collection; missing ids: {missing}",
                field="ids",
            )

        for position, row_id in enumerate(ids):
            rows[row_id].order = position
        await self.session.flush()
        return [rows[row_id] for row_id in ids]

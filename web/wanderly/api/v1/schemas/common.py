from decimal import Decimal
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Money is kept as Decimal internally and written to JSON as a number,
# which is what the dashboard and redirect pages compare against.
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """Accepts camelCase (wire) or snake_case names, emits camelCase"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Envelope(BaseModel, Generic[T]):
    """``{success, message, data}`` wrapper used by every JSON endpoint"""

    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class ListEnvelope(Envelope[T], Generic[T]):
    # False when the list is filtered: a partial list cannot be reordered
    reorderable: bool = True
    total: int = 0

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from wanderly.infrastructure import get_session
from wanderly.infrastructure.sslcommerz import SSLCommerzClient, get_payment_gateway

# Type aliases for dependency injection
SessionDep = Annotated[AsyncSession, Depends(get_session)]
GatewayDep = Annotated[SSLCommerzClient, Depends(get_payment_gateway)]

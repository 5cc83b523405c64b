from typing import AsyncGenerator, Any, Dict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from wanderly.core import get_settings


settings = get_settings()


def engine_options(dsn: str) -> Dict[str, Any]:
    """Engine keyword arguments for *dsn*.

    SQLite (used by the test-suite) has no connection pool to size.
    """
    options: Dict[str, Any] = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if not dsn.startswith("sqlite"):
        options["pool_size"] = settings.DB_POOL_SIZE
    return options


# Create async engine
engine = create_async_engine(settings.DB_DSN, **engine_options(settings.DB_DSN))

# Create async session factory
AsyncSessionFactory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
    autocommit=False
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session"""
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

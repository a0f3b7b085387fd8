from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from client_reporter.core.config import settings

engine = create_async_engine(
    settings.database_url,
    echo=False,  # Set to True for debugging SQL queries
    future=True
)
async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session


async def dispose_engine():
    await engine.dispose()

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import Column, DateTime, Field, SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from src.core.config import settings


class Database:
    def __init__(self, db_url: str, echo: bool = False):
        self.url = db_url
        self.engine: AsyncEngine = create_async_engine(db_url, echo=echo)

    async def create_all(self) -> None:
        """Create every table registered on SQLModel.metadata."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def disconnect(self):
        await self.engine.dispose()

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, Any]:
        async with AsyncSession(self.engine, expire_on_commit=False) as session:
            yield session


database = Database(settings.ASYNC_DATABASE_URL, echo=settings.DATABASE_ECHO)


class TimestampedModel(SQLModel):
    """Base model with creation and update timestamps."""

    created_at: datetime = Field(
        default_factory=settings.get_now, sa_column=Column(DateTime(timezone=True))
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), onupdate=settings.get_now),
    )

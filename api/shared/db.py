"""Shared database dependency for FastAPI routers."""
from typing import Any, AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    """Yield an AsyncSession per-request and ensure proper close.

    The session comes from the database resource held by the application's
    DI container, so overriding that provider swaps the database everywhere.
    """
    db = request.app.container.infrastructure.database()
    session = db.get_session()
    try:
        yield session
    finally:
        await session.close()

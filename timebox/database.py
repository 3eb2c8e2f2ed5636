"""
TIMEBOX API - Database Module

MongoDB connection management using Motor (async driver).

The connection is owned by the application lifespan: a Database is created
at startup, stored on ``app.state.database`` and closed at shutdown.
Request handlers receive it through the ``get_database`` dependency.
"""

from typing import Optional

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from timebox.config import settings


class Database:
    """MongoDB database connection manager."""

    def __init__(self, uri: Optional[str] = None, name: Optional[str] = None):
        self.uri = uri or settings.MONGODB_URI
        self.name = name or settings.MONGODB_DATABASE
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        self.client = AsyncIOMotorClient(self.uri, tz_aware=True)
        self.db = self.client[self.name]

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database opened by the application lifespan."""
    database: Optional[Database] = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database not configured on application state.")
    return database.get_database()

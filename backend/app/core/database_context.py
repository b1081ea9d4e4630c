import logging
from dataclasses import dataclass
from typing import Any

from pymongo.asynchronous.database import AsyncDatabase
from pymongo.asynchronous.mongo_client import AsyncMongoClient
from pymongo.errors import PyMongoError

from app.settings import Settings

type MongoDocument = dict[str, Any]
type DBClient = AsyncMongoClient[MongoDocument]
type Database = AsyncDatabase[MongoDocument]


class DatabaseNotInitializedError(RuntimeError):
    """The connection was used before ``connect()`` or after ``disconnect()``."""


@dataclass(frozen=True)
class DatabaseConfig:
    mongodb_url: str
    db_name: str
    server_selection_timeout_ms: int = 5000
    connect_timeout_ms: int = 5000
    max_pool_size: int = 50
    min_pool_size: int = 5
    write_concern: str = "majority"

    @classmethod
    def from_settings(cls, settings: Settings) -> "DatabaseConfig":
        # tests never touch the production database, even with a shared MONGODB_URL
        db_name = f"{settings.DATABASE_NAME}_test" if settings.TESTING else settings.DATABASE_NAME
        return cls(mongodb_url=settings.MONGODB_URL, db_name=db_name)


class AsyncDatabaseConnection:
    """One AsyncMongoClient per process; the notification and users collections share it."""

    __slots__ = ("_client", "_database", "_config", "logger")

    def __init__(self, config: DatabaseConfig, logger: logging.Logger) -> None:
        self._config = config
        self._client: DBClient | None = None
        self._database: Database | None = None
        self.logger = logger

    async def connect(self) -> None:
        if self.is_connected():
            return

        self.logger.info("Connecting to MongoDB", extra={"database": self._config.db_name})
        client: DBClient = AsyncMongoClient(
            self._config.mongodb_url,
            serverSelectionTimeoutMS=self._config.server_selection_timeout_ms,
            connectTimeoutMS=self._config.connect_timeout_ms,
            maxPoolSize=self._config.max_pool_size,
            minPoolSize=self._config.min_pool_size,
            w=self._config.write_concern,
            tz_aware=True,
        )
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            self.logger.error("MongoDB unreachable", extra={"error": str(e)})
            await client.close()
            raise

        self._client = client
        self._database = client[self._config.db_name]

    async def disconnect(self) -> None:
        if not self.is_connected():
            return
        self.logger.info("Closing MongoDB connection")
        await self._client.close()
        self._client = None
        self._database = None

    @property
    def database(self) -> Database:
        if self._database is None:
            raise DatabaseNotInitializedError("Database connection not established")
        return self._database

    def is_connected(self) -> bool:
        return self._client is not None

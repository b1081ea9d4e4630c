import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from beanie import init_beanie
from dishka import AsyncContainer
from fastapi import FastAPI

from app.core.database_context import Database
from app.db.docs import ALL_DOCUMENTS
from app.services.notification_retention import RetentionSweeper
from app.settings import Settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan with dishka dependency injection.

    Initialises Beanie on the app-scoped database, then owns the retention sweeper
    task for the lifetime of the process. Dishka closes connections afterwards.
    """
    container: AsyncContainer = app.state.dishka_container
    settings = await container.get(Settings)
    logger = await container.get(logging.Logger)
    logger.info(
        "Starting application with dishka DI",
        extra={
            "project_name": settings.PROJECT_NAME,
            "environment": "test" if settings.TESTING else settings.ENVIRONMENT,
        },
    )

    database = await container.get(Database)
    await init_beanie(database=database, document_models=ALL_DOCUMENTS)
    logger.info("Beanie initialized", extra={"documents": [d.__name__ for d in ALL_DOCUMENTS]})

    sweeper = await container.get(RetentionSweeper)
    sweeper.start()
    try:
        yield
    finally:
        await sweeper.stop()
        await container.close()
        logger.info("Application shutdown complete")

import uvicorn
from dishka import AsyncContainer
from dishka.integrations.fastapi import setup_dishka
from fastapi import FastAPI

from app.api.routes import notifications, sse
from app.core.container import create_app_container
from app.core.correlation import CorrelationMiddleware
from app.core.dishka_lifespan import lifespan
from app.core.exceptions import configure_exception_handlers
from app.settings import Settings


def create_app(settings: Settings | None = None, container: AsyncContainer | None = None) -> FastAPI:
    """Build the API application. A prebuilt container replaces the default wiring."""
    settings = settings or Settings()
    app = FastAPI(title=settings.PROJECT_NAME, version=settings.SERVICE_VERSION, lifespan=lifespan)

    setup_dishka(container or create_app_container(settings), app)

    app.add_middleware(CorrelationMiddleware)

    app.include_router(notifications.router, prefix=settings.API_V1_STR)
    app.include_router(sse.router, prefix=settings.API_V1_STR)

    configure_exception_handlers(app)

    return app


if __name__ == "__main__":
    settings = Settings()
    uvicorn.run(create_app(settings), host=settings.SERVER_HOST, port=settings.SERVER_PORT)

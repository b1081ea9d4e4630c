from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.domain.exceptions import (
    DomainError,
    InfrastructureError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)


def _map_to_status_code(exc: DomainError) -> int:
    match exc:
        case NotFoundError():
            return 404
        case ValidationError():
            return 422
        case UnauthorizedError():
            return 401
        case InfrastructureError():
            return 500
        case _:
            return 500


def configure_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(DomainError)
    async def domain_error_handler(
            request: Request, exc: DomainError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=_map_to_status_code(exc),
            content={"detail": exc.message},
        )

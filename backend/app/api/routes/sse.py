from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from app.api.dependencies import CurrentUserId
from app.services.sse import NotificationStreamService

router = APIRouter(prefix="/events", tags=["sse"], route_class=DishkaRoute)


@router.get("/notifications/stream")
async def notification_stream(
        request: Request,
        user_id: CurrentUserId,
        stream_service: FromDishka[NotificationStreamService],
) -> EventSourceResponse:
    return EventSourceResponse(
        stream_service.create_notification_stream(user_id, is_disconnected=request.is_disconnected)
    )

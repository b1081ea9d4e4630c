from dishka import FromDishka
from dishka.integrations.fastapi import DishkaRoute
from fastapi import APIRouter, Query

from app.api.dependencies import CurrentUserId
from app.domain.enums.notification import NotificationPriority, NotificationType
from app.domain.notification import DomainNotificationFilter
from app.domain.user import DomainNotificationSettingsUpdate
from app.schemas_pydantic.notification import (
    DeleteNotificationResponse,
    DeleteReadResponse,
    MarkReadRequest,
    MarkReadResponse,
    NotificationListResponse,
    NotificationResponse,
    NotificationSettingsResponse,
    NotificationSettingsUpdate,
    NotificationStatsResponse,
    PaginationInfo,
    UnreadCountResponse,
)
from app.services.notification_service import NotificationService
from app.services.notification_settings_service import NotificationSettingsService

router = APIRouter(prefix="/notifications", tags=["notifications"], route_class=DishkaRoute)


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    user_id: CurrentUserId,
    notification_service: FromDishka[NotificationService],
    page: int = Query(1, ge=1),
    limit: int | None = Query(None),
    is_read: bool | None = Query(None),
    notification_type: NotificationType | None = Query(None, alias="type"),
    priority: NotificationPriority | None = Query(None),
) -> NotificationListResponse:
    result = await notification_service.get_user_notifications(
        user_id,
        page=page,
        limit=limit,
        filters=DomainNotificationFilter(is_read=is_read, notification_type=notification_type, priority=priority),
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in result.notifications],
        pagination=PaginationInfo(
            total=result.total, page=result.page, limit=result.limit, total_pages=result.total_pages
        ),
        unread_count=result.unread_count,
    )


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_id: CurrentUserId, notification_service: FromDishka[NotificationService]
) -> UnreadCountResponse:
    count = await notification_service.get_unread_count(user_id)
    return UnreadCountResponse(unread_count=count)


@router.get("/stats", response_model=NotificationStatsResponse)
async def get_notification_stats(
    user_id: CurrentUserId, notification_service: FromDishka[NotificationService]
) -> NotificationStatsResponse:
    stats = await notification_service.get_notification_stats(user_id)
    return NotificationStatsResponse.model_validate(stats)


@router.put("/read", response_model=MarkReadResponse)
async def mark_notifications_read(
    body: MarkReadRequest,
    user_id: CurrentUserId,
    notification_service: FromDishka[NotificationService],
) -> MarkReadResponse:
    if body.mark_all:
        count = await notification_service.mark_all_as_read(user_id)
        return MarkReadResponse(message="All notifications marked as read", count=count)

    count = await notification_service.mark_as_read(body.notification_ids or [], user_id)
    return MarkReadResponse(message="Notifications marked as read", count=count)


@router.post("/mark-all-read", response_model=MarkReadResponse)
async def mark_all_read(
    user_id: CurrentUserId, notification_service: FromDishka[NotificationService]
) -> MarkReadResponse:
    count = await notification_service.mark_all_as_read(user_id)
    return MarkReadResponse(message="All notifications marked as read", count=count)


@router.get("/settings", response_model=NotificationSettingsResponse)
async def get_notification_settings(
    user_id: CurrentUserId, settings_service: FromDishka[NotificationSettingsService]
) -> NotificationSettingsResponse:
    settings = await settings_service.get_notification_settings(user_id)
    return NotificationSettingsResponse.model_validate(settings)


@router.put("/settings", response_model=NotificationSettingsResponse)
async def update_notification_settings(
    body: NotificationSettingsUpdate,
    user_id: CurrentUserId,
    settings_service: FromDishka[NotificationSettingsService],
) -> NotificationSettingsResponse:
    settings = await settings_service.update_notification_settings(
        user_id, DomainNotificationSettingsUpdate(**body.model_dump())
    )
    return NotificationSettingsResponse.model_validate(settings)


@router.delete("/read", response_model=DeleteReadResponse)
async def delete_read_notifications(
    user_id: CurrentUserId, notification_service: FromDishka[NotificationService]
) -> DeleteReadResponse:
    count = await notification_service.delete_all_read(user_id)
    return DeleteReadResponse(message="Read notifications deleted", count=count)


@router.delete("/{notification_id}", response_model=DeleteNotificationResponse)
async def delete_notification(
    notification_id: str,
    user_id: CurrentUserId,
    notification_service: FromDishka[NotificationService],
) -> DeleteNotificationResponse:
    await notification_service.delete_notification(notification_id, user_id)
    return DeleteNotificationResponse(message="Notification deleted")

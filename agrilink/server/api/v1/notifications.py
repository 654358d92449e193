"""
Notification Endpoints.

Sending is an internal operation reserved for staff; users read and manage
their own notifications and delivery preferences.
"""

import uuid
from typing import List, Optional

from fastapi import APIRouter, status

from agrilink.core.database.entities import Notification
from agrilink.core.models.io import ApiResponse, PageResponse
from agrilink.core.models.io.notifications import (
    NotificationCreate,
    NotificationRead,
    PreferenceRead,
    PreferenceUpdate,
    TemplateNotificationRequest,
    UnreadCount,
)
from agrilink.server.security import CurrentUserDep, StaffDep
from agrilink.server.services.deps import NotificationServiceDep

from .params import DEFAULT_PAGE, DEFAULT_SIZE, PageParam, SizeParam

router = APIRouter()

SUPPRESSED_MESSAGE = "Notification suppressed by user preferences"


def _sent(notification: Optional[Notification]) -> ApiResponse:
    if notification is None:
        return ApiResponse.ok(message=SUPPRESSED_MESSAGE)
    return ApiResponse.ok(NotificationRead.model_validate(notification), "Notification sent")


@router.post(
    "",
    response_model=ApiResponse[Optional[NotificationRead]],
    status_code=status.HTTP_201_CREATED,
    summary="Send Notification",
    description=(
        "Store and deliver a notification to a user. Returns no data when the recipient's preferences "
        "disable the channel or the notification type. Requires the MANAGER or ADMIN role."
    ),
)
async def send_notification(request: NotificationCreate, user: StaffDep, service: NotificationServiceDep):
    """
    Send a notification.

    - **user_id**: Recipient.
    - **notification_type**: ORDER_UPDATE, LISTING_UPDATE, IOT_ALERT, WEATHER_ALERT, MARKETING or SYSTEM.
    - **channel**: IN_APP, EMAIL, SMS or PUSH. IN_APP is never suppressed by channel preferences.
    - **reference_id** / **reference_type**: Optional pointer to the entity the notification is about.
    """
    return _sent(await service.send_notification(request))


@router.post(
    "/template",
    response_model=ApiResponse[Optional[NotificationRead]],
    status_code=status.HTTP_201_CREATED,
    summary="Send Templated Notification",
    description="Render `#{key}` placeholders in the title and message templates, then send.",
)
async def send_from_template(request: TemplateNotificationRequest, user: StaffDep, service: NotificationServiceDep):
    return _sent(await service.send_from_template(request))


@router.get("", response_model=ApiResponse[PageResponse[NotificationRead]], summary="My Notifications")
async def list_notifications(
    user: CurrentUserDep,
    service: NotificationServiceDep,
    page: PageParam = DEFAULT_PAGE,
    size: SizeParam = DEFAULT_SIZE,
):
    result = await service.get_notifications(user.id, page, size)
    return ApiResponse.ok(PageResponse.from_page(result, NotificationRead.model_validate))


@router.get("/unread", response_model=ApiResponse[List[NotificationRead]], summary="Unread Notifications")
async def list_unread(user: CurrentUserDep, service: NotificationServiceDep):
    unread = await service.get_unread_notifications(user.id)
    return ApiResponse.ok([NotificationRead.model_validate(n) for n in unread])


@router.get("/unread/count", response_model=ApiResponse[UnreadCount], summary="Unread Notification Count")
async def unread_count(user: CurrentUserDep, service: NotificationServiceDep):
    return ApiResponse.ok(UnreadCount(count=await service.get_unread_count(user.id)))


@router.patch(
    "/read-all",
    response_model=ApiResponse[UnreadCount],
    summary="Mark All Read",
    description="Mark every unread notification as read and return how many were updated.",
)
async def mark_all_read(user: CurrentUserDep, service: NotificationServiceDep):
    updated = await service.mark_all_as_read(user.id)
    return ApiResponse.ok(UnreadCount(count=updated), f"Marked {updated} notifications as read")


@router.patch(
    "/{notification_id}/read",
    response_model=ApiResponse[NotificationRead],
    summary="Mark Read",
    responses={404: {"description": "Notification not found"}},
)
async def mark_read(notification_id: uuid.UUID, user: CurrentUserDep, service: NotificationServiceDep):
    notification = await service.mark_as_read(notification_id, user.id)
    return ApiResponse.ok(NotificationRead.model_validate(notification))


@router.get("/preferences", response_model=ApiResponse[PreferenceRead], summary="Notification Preferences")
async def get_preferences(user: CurrentUserDep, service: NotificationServiceDep):
    return ApiResponse.ok(PreferenceRead.model_validate(await service.get_preferences(user.id)))


@router.put("/preferences", response_model=ApiResponse[PreferenceRead], summary="Update Notification Preferences")
async def update_preferences(request: PreferenceUpdate, user: CurrentUserDep, service: NotificationServiceDep):
    preferences = await service.update_preferences(user.id, request)
    return ApiResponse.ok(PreferenceRead.model_validate(preferences), "Preferences updated")

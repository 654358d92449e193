"""
Alert Rule Endpoints.

Update, toggle and delete rules by id. Rules are created under
``/devices/{device_id}/alert-rules``.
"""

import uuid

from fastapi import APIRouter, Query

from agrilink.core.models.io import ApiResponse
from agrilink.core.models.io.iot import AlertRuleRead, AlertRuleUpdate
from agrilink.server.security import CurrentUserDep
from agrilink.server.services.deps import AlertServiceDep

router = APIRouter()


@router.put(
    "/{rule_id}",
    response_model=ApiResponse[AlertRuleRead],
    summary="Update Alert Rule",
    description="Partially update an alert rule owned by the caller.",
    responses={
        403: {"description": "Rule belongs to another farmer's device"},
        404: {"description": "Rule not found"},
    },
)
async def update_alert_rule(
    rule_id: uuid.UUID,
    request: AlertRuleUpdate,
    user: CurrentUserDep,
    service: AlertServiceDep,
):
    rule = await service.update_alert_rule(rule_id, user.id, request)
    return ApiResponse.ok(AlertRuleRead.model_validate(rule), "Alert rule updated")


@router.patch(
    "/{rule_id}/toggle",
    response_model=ApiResponse[AlertRuleRead],
    summary="Enable or Disable Alert Rule",
)
async def toggle_alert_rule(
    rule_id: uuid.UUID,
    user: CurrentUserDep,
    service: AlertServiceDep,
    enabled: bool = Query(description="New enabled flag"),
):
    rule = await service.toggle_alert_rule(rule_id, user.id, enabled)
    return ApiResponse.ok(AlertRuleRead.model_validate(rule), "Alert rule enabled" if enabled else "Alert rule disabled")


@router.delete(
    "/{rule_id}",
    response_model=ApiResponse[None],
    summary="Delete Alert Rule",
)
async def delete_alert_rule(rule_id: uuid.UUID, user: CurrentUserDep, service: AlertServiceDep):
    await service.delete_alert_rule(rule_id, user.id)
    return ApiResponse.ok(message="Alert rule deleted")

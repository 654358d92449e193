"""
Alert rules and alerts.

Rules are evaluated synchronously for every ingested reading; each matching
rule raises one alert in the same transaction as the reading itself.
"""

import operator
import uuid
from decimal import Decimal
from typing import Callable, Dict, List

from sqlalchemy.ext.asyncio import AsyncSession

from agrilink.core import monitoring
from agrilink.core.database import utc_now
from agrilink.core.database.entities import Alert, AlertRule, Device
from agrilink.core.database.repositories import AlertRepository, AlertRuleRepository, Page
from agrilink.core.exceptions import ResourceNotFoundException
from agrilink.core.logging_config import get_logger
from agrilink.core.models.domain.enums import AlertCondition, AlertType, MetricType
from agrilink.core.models.io.iot import AlertRuleCreate, AlertRuleUpdate

from .devices import DeviceService

logger = get_logger(__name__)

_OPERATORS: Dict[AlertCondition, Callable[[Decimal, Decimal], bool]] = {
    AlertCondition.GREATER_THAN: operator.gt,
    AlertCondition.GREATER_OR_EQUAL: operator.ge,
    AlertCondition.LESS_THAN: operator.lt,
    AlertCondition.LESS_OR_EQUAL: operator.le,
    AlertCondition.EQUALS: operator.eq,
}


def evaluate_condition(condition: AlertCondition, value: Decimal, threshold: Decimal) -> bool:
    """Return whether ``value <condition> threshold`` holds."""
    return _OPERATORS[condition](Decimal(value), Decimal(threshold))


def format_decimal(value: Decimal) -> str:
    """Render a reading without trailing zeros or exponent, e.g. ``35.0000`` -> ``35``."""
    return format(Decimal(value).normalize(), "f")


def build_alert_message(rule: AlertRule, device: Device, value: Decimal) -> str:
    return (
        f"{rule.metric_type.value} reading {format_decimal(value)} {rule.condition.symbol} "
        f"threshold {format_decimal(rule.threshold_value)} on {device.device_name}"
    )


class AlertService:
    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.rules = AlertRuleRepository(session)
        self.alerts = AlertRepository(session)
        self.device_service = DeviceService(session)

    # -----------------------------------------------------------------
    # Evaluation
    # -----------------------------------------------------------------

    async def check_alert_rules(self, device: Device, metric_type: MetricType, value: Decimal) -> List[Alert]:
        """Raise an alert for every enabled rule of ``device`` that ``value`` trips.

        The alerts are flushed, not committed: ingestion commits them together
        with the reading.
        """
        raised: List[Alert] = []
        for rule in await self.rules.find_enabled_by_device_and_metric(device.id, metric_type):
            if not evaluate_condition(rule.condition, value, rule.threshold_value):
                continue
            alert = Alert(
                device_id=device.id,
                farmer_id=device.farmer_id,
                alert_type=AlertType.THRESHOLD_EXCEEDED,
                severity=rule.severity,
                message=build_alert_message(rule, device, value),
                metric_type=metric_type,
                metric_value=value,
                threshold_value=rule.threshold_value,
            )
            raised.append(await self.alerts.create(alert))
            logger.info(
                f"Alert raised for device {device.id}: {alert.message}",
                extra={
                    "alert_id": str(alert.id),
                    "device_id": str(device.id),
                    "rule_id": str(rule.id),
                    "severity": rule.severity.value,
                },
            )
            monitoring.log_alert_raised(str(alert.id), str(device.id), rule.severity.value, alert.message)
        return raised

    # -----------------------------------------------------------------
    # Rule CRUD
    # -----------------------------------------------------------------

    async def create_alert_rule(self, device_id: uuid.UUID, farmer_id: uuid.UUID, request: AlertRuleCreate) -> AlertRule:
        await self.device_service.get_device_for_owner(device_id, farmer_id)
        rule = AlertRule(
            device_id=device_id,
            metric_type=request.metric_type,
            condition=request.condition,
            threshold_value=request.threshold_value,
            severity=request.severity,
            enabled=request.enabled,
        )
        rule = await self.rules.create(rule)
        await self.session.commit()
        logger.info(
            f"Created alert rule {rule.id} on device {device_id}: "
            f"{rule.metric_type.value} {rule.condition.symbol} {format_decimal(rule.threshold_value)}",
            extra={"rule_id": str(rule.id), "device_id": str(device_id)},
        )
        return rule

    async def get_alert_rule(self, rule_id: uuid.UUID) -> AlertRule:
        rule = await self.rules.get_by_id(rule_id)
        if rule is None:
            raise ResourceNotFoundException("AlertRule", "id", rule_id)
        return rule

    async def _get_rule_for_owner(self, rule_id: uuid.UUID, farmer_id: uuid.UUID) -> AlertRule:
        rule = await self.get_alert_rule(rule_id)
        await self.device_service.get_device_for_owner(rule.device_id, farmer_id)
        return rule

    async def get_alert_rules_by_device(self, device_id: uuid.UUID) -> List[AlertRule]:
        await self.device_service.get_device(device_id)
        return await self.rules.find_by_device(device_id)

    async def update_alert_rule(self, rule_id: uuid.UUID, farmer_id: uuid.UUID, request: AlertRuleUpdate) -> AlertRule:
        rule = await self._get_rule_for_owner(rule_id, farmer_id)
        for key, value in request.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(rule, key, value)
        await self.rules.update(rule)
        await self.session.commit()
        return rule

    async def toggle_alert_rule(self, rule_id: uuid.UUID, farmer_id: uuid.UUID, enabled: bool) -> AlertRule:
        rule = await self._get_rule_for_owner(rule_id, farmer_id)
        rule.enabled = enabled
        await self.rules.update(rule)
        await self.session.commit()
        logger.info(f"Alert rule {rule_id} {'enabled' if enabled else 'disabled'}", extra={"rule_id": str(rule_id)})
        return rule

    async def delete_alert_rule(self, rule_id: uuid.UUID, farmer_id: uuid.UUID) -> None:
        await self._get_rule_for_owner(rule_id, farmer_id)
        await self.rules.delete(rule_id)
        await self.session.commit()

    # -----------------------------------------------------------------
    # Alerts
    # -----------------------------------------------------------------

    async def get_alerts_by_farmer(self, farmer_id: uuid.UUID, page: int, size: int) -> Page[Alert]:
        return await self.alerts.find_by_farmer(farmer_id, page, size)

    async def get_unacknowledged_alerts(self, farmer_id: uuid.UUID) -> List[Alert]:
        return await self.alerts.find_unacknowledged_by_farmer(farmer_id)

    async def get_unacknowledged_count(self, farmer_id: uuid.UUID) -> int:
        return await self.alerts.count_unacknowledged_by_farmer(farmer_id)

    async def get_alerts_by_device(self, device_id: uuid.UUID, page: int, size: int) -> Page[Alert]:
        return await self.alerts.find_by_device(device_id, page, size)

    async def acknowledge_alert(self, alert_id: uuid.UUID, user_id: uuid.UUID) -> Alert:
        alert = await self.alerts.get_by_id(alert_id)
        if alert is None:
            raise ResourceNotFoundException("Alert", "id", alert_id)
        alert.acknowledged = True
        alert.acknowledged_by = user_id
        alert.acknowledged_at = utc_now()
        await self.alerts.update(alert)
        await self.session.commit()
        logger.info(
            f"Alert {alert_id} acknowledged by {user_id}",
            extra={"alert_id": str(alert_id), "user_id": str(user_id)},
        )
        return alert

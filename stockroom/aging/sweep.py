"""Aging sweep: reclassify every unit and send the day-38 / day-44 warnings for IN_STOCK units.

Safe to run any number of times a day: reclassification is a pure function
of the dates, and the alert cooldown keeps a unit from being alerted twice.
"""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import joinedload

from stockroom.aging.classifier import (
    alert_kind,
    alert_message,
    alert_title,
    classify_days,
    days_in_inventory,
    needs_attention,
    should_alert,
)
from stockroom.db import get_session
from stockroom.db.models.serial import SerialNumber
from stockroom.db.repositories.notification_repo import AllUsers, send
from stockroom.errors import NoRecipients
from stockroom.models.enums import NotificationType, SerialStatus
from stockroom.models.outputs import AgingAlert, AgingSweepResult
from stockroom.utils.logger import get_logger, scoped_context
from stockroom.utils.tracing import traced

logger = get_logger("stockroom.aging")


def run_sweep(now: datetime | None = None) -> AgingSweepResult:
    """One pass over all units. Never touches request state."""
    now = now or datetime.now(timezone.utc)
    result = AgingSweepResult()
    with scoped_context(job="aging_sweep"), traced("aging.sweep") as span:
        with get_session() as session:
            units = session.scalars(
                select(SerialNumber).options(joinedload(SerialNumber.product)).order_by(SerialNumber.id)
            ).all()
            for unit in units:
                result.scanned += 1
                days = days_in_inventory(unit.inventory_date, now)
                bucket = classify_days(days)
                attention = needs_attention(bucket)
                if unit.aging_status != bucket or unit.needs_attention != attention:
                    logger.debug(
                        "serial.aging_reclassified",
                        serial_number_id=unit.id,
                        from_status=unit.aging_status.value,
                        to_status=bucket.value,
                        days=days,
                    )
                    unit.aging_status = bucket
                    unit.needs_attention = attention
                    result.reclassified += 1

                if unit.status != SerialStatus.IN_STOCK:
                    continue
                if not should_alert(unit.inventory_date, unit.last_alert_sent, now):
                    continue
                alert = AgingAlert(
                    serial_number_id=unit.id,
                    serial=unit.serial,
                    product_id=unit.product_id,
                    product_name=unit.product.name,
                    days=days,
                    alert_type=alert_kind(days),
                )
                try:
                    notification = send(
                        title=alert_title(unit.serial, unit.product.name),
                        message=alert_message(unit.serial, unit.product.name, days),
                        type=NotificationType.STOCK_ALERT,
                        sender_id=None,
                        recipients=AllUsers(),
                        product_id=unit.product_id,
                        session=session,
                    )
                except NoRecipients:
                    result.skipped_no_recipients += 1
                    logger.warning("aging.alert_no_recipients", serial_number_id=unit.id)
                else:
                    alert.notification_id = notification.id
                    unit.last_alert_sent = now
                result.alerts.append(alert)
            span.set_attribute("aging.scanned", result.scanned)
            span.set_attribute("aging.alerts_sent", result.alerts_sent)
    logger.info("aging.sweep_complete", **result.summary())
    return result

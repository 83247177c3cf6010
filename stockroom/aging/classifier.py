"""Aging classifier: pure functions mapping time-in-inventory to a bucket and alert decisions.

    days   0-30  FRESH
    days  31-44  AGING       (warnings on day 38 and day 44)
    days  45-89  STALE       needs attention
    days  90+    DEAD_STOCK  needs attention
"""

from datetime import datetime, timedelta, timezone

from stockroom import config
from stockroom.errors import InvalidInput
from stockroom.models.enums import LEGACY_AGING_LABELS, AgingStatus

FRESH_MAX_DAYS = 30
AGING_MAX_DAYS = 44
STALE_MAX_DAYS = 89

ALERT_KINDS = {38: "7_DAY_WARNING", 44: "1_DAY_WARNING"}


def _aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def _now(now: datetime | None) -> datetime:
    return _aware(now) if now is not None else datetime.now(timezone.utc)


def days_in_inventory(inventory_date: datetime, now: datetime | None = None) -> int:
    """Whole days elapsed since ``inventory_date`` (floored, never negative)."""
    elapsed = _now(now) - _aware(inventory_date)
    return max(elapsed.days, 0)


def classify_days(days: int) -> AgingStatus:
    if days <= FRESH_MAX_DAYS:
        return AgingStatus.FRESH
    if days <= AGING_MAX_DAYS:
        return AgingStatus.AGING
    if days <= STALE_MAX_DAYS:
        return AgingStatus.STALE
    return AgingStatus.DEAD_STOCK


def classify(inventory_date: datetime, now: datetime | None = None) -> AgingStatus:
    return classify_days(days_in_inventory(inventory_date, now))


def needs_attention(status: AgingStatus) -> bool:
    return status in (AgingStatus.STALE, AgingStatus.DEAD_STOCK)


def should_alert(
    inventory_date: datetime,
    last_alert_sent: datetime | None,
    now: datetime | None = None,
) -> bool:
    """True only on an alert day while AGING, and not within the cooldown of the previous alert."""
    now = _now(now)
    days = days_in_inventory(inventory_date, now)
    if days not in config.AGING_ALERT_DAYS or classify_days(days) != AgingStatus.AGING:
        return False
    if last_alert_sent is None:
        return True
    return now - _aware(last_alert_sent) >= timedelta(hours=config.AGING_ALERT_COOLDOWN_HOURS)


def alert_kind(days: int) -> str:
    """``7_DAY_WARNING`` / ``1_DAY_WARNING``: days left before the unit turns STALE."""
    if days in ALERT_KINDS:
        return ALERT_KINDS[days]
    return f"{AGING_MAX_DAYS + 1 - days}_DAY_WARNING"


def alert_title(serial: str, product_name: str) -> str:
    return f"Inventory Aging Alert: {product_name} - {serial}"


def alert_message(serial: str, product_name: str, days: int) -> str:
    remaining = AGING_MAX_DAYS + 1 - days
    return (
        f"Serial number {serial} of {product_name} has been in inventory for {days} days. "
        f"It will be classified as stale in {remaining} day{'s' if remaining != 1 else ''}."
    )


def parse_aging_status(label: str) -> AgingStatus:
    """Accept canonical names (FRESH...) and the older ACTIVE / IDLE / OBSOLETE / SURPLUS labels."""
    key = (label or "").strip().upper()
    if key in AgingStatus.__members__:
        return AgingStatus[key]
    if key in LEGACY_AGING_LABELS:
        return LEGACY_AGING_LABELS[key]
    raise InvalidInput(f"Unknown aging status: {label!r}", label=label)

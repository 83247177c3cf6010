"""Counter repository: mint SKUs from the singleton counter, change its prefix, peek at it."""

import re
import time

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from stockroom import config
from stockroom.db import get_session
from stockroom.db.models.catalog import Counter
from stockroom.errors import InvalidInput
from stockroom.models.outputs import CounterInfo
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.sku")

SKU_COUNTER_ID = "sku_counter"
SKU_COUNTER_NAME = "SKU Counter"
_PREFIX_RE = re.compile(r"^[A-Za-z0-9]+$")


def format_sku(prefix: str, value: int) -> str:
    return f"{prefix}-{value:0{config.SKU_PAD_WIDTH}d}"


def _increment(session: Session) -> tuple[str, int]:
    """Bump the counter by one and read it back in the same transaction; insert at 1 when absent."""
    result = session.execute(
        update(Counter).where(Counter.id == SKU_COUNTER_ID).values(value=Counter.value + 1)
    )
    if result.rowcount == 0:
        row = Counter(
            id=SKU_COUNTER_ID,
            name=SKU_COUNTER_NAME,
            prefix=config.SKU_DEFAULT_PREFIX,
            value=1,
        )
        session.add(row)
        session.flush()
        return row.prefix, row.value
    row = session.execute(
        select(Counter.prefix, Counter.value).where(Counter.id == SKU_COUNTER_ID)
    ).one()
    return row.prefix, row.value


def _fallback_sku() -> str:
    return f"SKU-{str(int(time.time() * 1000))[-5:]}"


def next_sku() -> str:
    """Return the next SKU (``PREFIX-00001``). Falls back to a timestamp SKU if the store fails."""
    try:
        try:
            with get_session() as session:
                prefix, value = _increment(session)
        except IntegrityError:
            # Lost the race to create the counter row; it exists now
            with get_session() as session:
                prefix, value = _increment(session)
    except SQLAlchemyError as e:
        sku = _fallback_sku()
        logger.warning("sku.counter_unavailable", error=str(e), fallback_sku=sku)
        return sku
    sku = format_sku(prefix, value)
    logger.debug("sku.minted", sku=sku)
    return sku


def set_prefix(prefix: str) -> CounterInfo:
    """Change the prefix only; the counter value is left as is. Creates the counter at 0 when absent."""
    cleaned = (prefix or "").strip()
    if not cleaned or not _PREFIX_RE.match(cleaned):
        raise InvalidInput("SKU prefix must be non-empty and alphanumeric", prefix=prefix)
    cleaned = cleaned.upper()
    with get_session() as session:
        row = session.get(Counter, SKU_COUNTER_ID)
        if row is None:
            row = Counter(id=SKU_COUNTER_ID, name=SKU_COUNTER_NAME, prefix=cleaned, value=0)
            session.add(row)
        else:
            row.prefix = cleaned
        session.flush()
        info = CounterInfo(
            prefix=row.prefix,
            current_value=row.value,
            next_sku=format_sku(row.prefix, row.value + 1),
        )
    logger.info("sku.prefix_changed", prefix=info.prefix, current_value=info.current_value)
    return info


def peek() -> CounterInfo:
    """Read the counter without incrementing it."""
    with get_session() as session:
        row = session.get(Counter, SKU_COUNTER_ID)
        prefix = row.prefix if row is not None else config.SKU_DEFAULT_PREFIX
        value = row.value if row is not None else 0
    return CounterInfo(prefix=prefix, current_value=value, next_sku=format_sku(prefix, value + 1))

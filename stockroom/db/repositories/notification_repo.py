"""Notification repository: resolve recipients, store one shared record, per-recipient read marks.

Notifications written through ``send`` are queued on the session and handed
to the delivery sink only after that session commits; a rollback drops them.
"""

from dataclasses import dataclass
from typing import Union

from sqlalchemy import event, select, update
from sqlalchemy.orm import Session

from stockroom import delivery
from stockroom.db import get_session, use_session
from stockroom.db.base import utcnow
from stockroom.db.models.catalog import Product
from stockroom.db.models.notification import Notification, NotificationRecipient
from stockroom.db.models.users import User
from stockroom.db.repositories.user_repo import require_admin
from stockroom.errors import InvalidInput, NoRecipients, NotFound
from stockroom.models.enums import NotificationType, Role
from stockroom.models.outputs import NotificationOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.notifications")

_OUTBOX_KEY = "notification_outbox"


@dataclass(frozen=True)
class Explicit:
    user_ids: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(self, "user_ids", tuple(self.user_ids))


@dataclass(frozen=True)
class AllWithRole:
    role: Role


@dataclass(frozen=True)
class AllExcept:
    user_id: int


@dataclass(frozen=True)
class AllUsers:
    pass


Recipients = Union[Explicit, AllWithRole, AllExcept, AllUsers]


@event.listens_for(Session, "after_commit")
def _deliver_outbox(session: Session) -> None:
    outbox = session.info.pop(_OUTBOX_KEY, None)
    if outbox:
        delivery.dispatch(outbox)


@event.listens_for(Session, "after_rollback")
def _drop_outbox(session: Session) -> None:
    session.info.pop(_OUTBOX_KEY, None)


def resolve_recipients(session: Session, recipients: Recipients) -> list[int]:
    """Active user ids the strategy addresses, ascending."""
    q = select(User.id).where(User.is_active.is_(True)).order_by(User.id)
    if isinstance(recipients, Explicit):
        if not recipients.user_ids:
            return []
        q = q.where(User.id.in_(recipients.user_ids))
    elif isinstance(recipients, AllWithRole):
        q = q.where(User.role == recipients.role)
    elif isinstance(recipients, AllExcept):
        q = q.where(User.id != recipients.user_id)
    elif not isinstance(recipients, AllUsers):
        raise InvalidInput(f"Unknown recipient strategy: {recipients!r}")
    return list(session.scalars(q).all())


def _to_out(notification: Notification, viewer_id: int | None = None) -> NotificationOut:
    read = False
    if viewer_id is not None:
        read = any(r.user_id == viewer_id and r.read_at is not None for r in notification.recipients)
    return NotificationOut(
        id=notification.id,
        title=notification.title,
        message=notification.message,
        type=notification.type,
        product_id=notification.product_id,
        request_id=notification.request_id,
        sender_id=notification.sender_id,
        recipient_ids=sorted(r.user_id for r in notification.recipients),
        read=read,
        created_at=notification.created_at,
    )


def send(
    title: str,
    message: str,
    type: NotificationType,
    sender_id: int | None,
    recipients: Recipients,
    product_id: int | None = None,
    request_id: int | None = None,
    session: Session | None = None,
) -> NotificationOut:
    """Store one notification addressed to every resolved recipient.

    Pass ``session`` to write inside the caller's transaction. Raises
    NoRecipients (before writing anything) when the strategy resolves to nobody.
    """
    with use_session(session) as s:
        user_ids = resolve_recipients(s, recipients)
        if not user_ids:
            raise NoRecipients(recipients.__class__.__name__)
        row = Notification(
            title=title,
            message=message,
            type=type,
            product_id=product_id,
            request_id=request_id,
            sender_id=sender_id,
            created_at=utcnow(),
            recipients=[NotificationRecipient(user_id=uid) for uid in user_ids],
        )
        s.add(row)
        s.flush()
        out = _to_out(row)
        s.info.setdefault(_OUTBOX_KEY, []).append(out)
    logger.info(
        "notification.sent",
        notification_id=out.id,
        type=type.value,
        recipient_count=len(user_ids),
        request_id=request_id,
        product_id=product_id,
    )
    return out


def send_stock_alert(
    sender_id: int,
    product_id: int,
    message: str,
    recipient_ids: list[int] | None = None,
) -> NotificationOut:
    """Admin-initiated STOCK_ALERT about a product: to ``recipient_ids``, else everyone but the sender."""
    message = (message or "").strip()
    if not message:
        raise InvalidInput("message must not be empty")
    with get_session() as session:
        require_admin(session, sender_id)
        product = session.get(Product, product_id)
        if product is None:
            raise NotFound("Product", product_id)
        recipients = Explicit(recipient_ids) if recipient_ids else AllExcept(sender_id)
        return send(
            title=f"Stock Alert: {product.name}",
            message=message,
            type=NotificationType.STOCK_ALERT,
            sender_id=sender_id,
            recipients=recipients,
            product_id=product_id,
            session=session,
        )


def list_for_user(user_id: int, unread_only: bool = False) -> list[NotificationOut]:
    """Notifications addressed to ``user_id``, newest first."""
    with get_session() as session:
        q = (
            select(Notification)
            .join(NotificationRecipient, NotificationRecipient.notification_id == Notification.id)
            .where(NotificationRecipient.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
        )
        if unread_only:
            q = q.where(NotificationRecipient.read_at.is_(None))
        return [_to_out(n, user_id) for n in session.scalars(q).unique().all()]


def mark_read(notification_id: int, user_id: int) -> NotificationOut:
    """Mark read for this recipient only. NotFound unless ``user_id`` is a recipient."""
    with get_session() as session:
        rec = session.get(NotificationRecipient, (notification_id, user_id))
        if rec is None:
            raise NotFound("Notification", notification_id)
        if rec.read_at is None:
            rec.read_at = utcnow()
        session.flush()
        return _to_out(rec.notification, user_id)


def mark_all_read(user_id: int) -> int:
    """Mark every unread notification of ``user_id`` read; returns how many changed."""
    with get_session() as session:
        result = session.execute(
            update(NotificationRecipient)
            .where(NotificationRecipient.user_id == user_id)
            .where(NotificationRecipient.read_at.is_(None))
            .values(read_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        count = result.rowcount or 0
    logger.info("notification.read_all", user_id=user_id, count=count)
    return count

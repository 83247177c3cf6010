"""Stock request workflow: open requests against specific units, then approve / reject / complete.

    PENDING --approve--> APPROVED --complete--> COMPLETED
       |
       +----reject-----> REJECTED

Every transition is a conditional UPDATE on the current status, run in the
same transaction as the unit change and the requester notification, so two
admins acting on one request cannot both succeed.
"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from stockroom.db import get_session
from stockroom.db.base import utcnow
from stockroom.db.models.catalog import Product
from stockroom.db.models.stock_request import StockRequest
from stockroom.db.repositories.notification_repo import AllWithRole, Explicit, send
from stockroom.db.repositories.serial_repo import claim_in_stock, mark_out_of_stock
from stockroom.db.repositories.user_repo import get_active, require_admin
from stockroom.errors import (
    Forbidden,
    InvalidInput,
    InvalidState,
    MissingReason,
    NoRecipients,
    NotFound,
    UnavailableSerials,
)
from stockroom.models.enums import NotificationType, RequestStatus, Role, SerialStatus
from stockroom.models.outputs import StockRequestOut
from stockroom.utils.logger import get_logger, log_transition
from stockroom.utils.tracing import traced

logger = get_logger("stockroom.workflow")

_NOTE_SEPARATOR = "\n\n"


def _append_note(existing: str | None, line: str) -> str:
    return f"{existing}{_NOTE_SEPARATOR}{line}" if existing else line


def _require_request(session: Session, request_id: int) -> StockRequest:
    row = session.get(StockRequest, request_id)
    if row is None:
        raise NotFound("StockRequest", request_id)
    return row


def _transition(
    session: Session,
    row: StockRequest,
    from_status: RequestStatus,
    to_status: RequestStatus,
    **values,
) -> None:
    """Move ``row`` from ``from_status`` to ``to_status`` only if it is still there."""
    result = session.execute(
        update(StockRequest)
        .where(StockRequest.id == row.id)
        .where(StockRequest.status == from_status)
        .values(status=to_status, updated_at=utcnow(), **values)
        .execution_options(synchronize_session=False)
    )
    session.refresh(row)
    if result.rowcount != 1:
        raise InvalidState("StockRequest", row.id, row.status, to_status)


def _notify_requester(session: Session, row: StockRequest, actor_id: int, title: str, message: str) -> None:
    try:
        send(
            title=title,
            message=message,
            type=NotificationType.REQUEST_UPDATE,
            sender_id=actor_id,
            recipients=Explicit([row.requester_id]),
            product_id=row.product_id,
            request_id=row.id,
            session=session,
        )
    except NoRecipients:
        # Requester deactivated since filing; the transition still stands
        logger.warning("stock_request.requester_unreachable", request_id=row.id, requester_id=row.requester_id)


def create(
    requester_id: int,
    product_id: int,
    serial_number_ids: list[int],
    notes: str | None = None,
) -> list[StockRequestOut]:
    """Open one PENDING request per unit. All-or-nothing: any unavailable unit fails the whole call."""
    if not serial_number_ids:
        raise InvalidInput("At least one serial number is required")
    ids = list(serial_number_ids)
    repeated = sorted({i for i in ids if ids.count(i) > 1})
    if repeated:
        # Each id must name a distinct unit
        raise UnavailableSerials(repeated)
    log = logger.bind(requester_id=requester_id, product_id=product_id)
    with traced("stock_request.create", requester_id=requester_id, product_id=product_id, units=len(ids)):
        with get_session() as session:
            requester = get_active(session, requester_id)
            product = session.get(Product, product_id)
            if product is None:
                raise NotFound("Product", product_id)

            unavailable = set(claim_in_stock(session, product_id, ids))
            unavailable.update(
                session.scalars(
                    select(StockRequest.serial_number_id)
                    .where(StockRequest.serial_number_id.in_(ids))
                    .where(StockRequest.status == RequestStatus.PENDING)
                ).all()
            )
            if unavailable:
                raise UnavailableSerials([i for i in ids if i in unavailable])

            rows = [
                StockRequest(
                    product_id=product_id,
                    requester_id=requester_id,
                    serial_number_id=serial_number_id,
                    quantity=1,
                    status=RequestStatus.PENDING,
                    notes=notes,
                )
                for serial_number_id in ids
            ]
            session.add_all(rows)
            try:
                session.flush()
            except IntegrityError as e:
                # A concurrent request won the one-pending-request-per-unit index
                raise UnavailableSerials(ids) from e

            message = f"{requester.name} has requested {len(rows)} unit(s) of {product.name} with specific serial numbers"
            if notes:
                message += f" with note: {notes}"
            try:
                send(
                    title="New Stock Request",
                    message=message,
                    type=NotificationType.REQUEST_UPDATE,
                    sender_id=requester_id,
                    recipients=AllWithRole(Role.ADMIN),
                    product_id=product_id,
                    request_id=rows[0].id if len(rows) == 1 else None,
                    session=session,
                )
            except NoRecipients:
                log.warning("stock_request.no_admins_to_notify", request_ids=[r.id for r in rows])
            out = [StockRequestOut.model_validate(r) for r in rows]
    log.info("stock_request.created", request_ids=[r.id for r in out], serial_number_ids=ids)
    return out


def approve(request_id: int, approver_id: int, notes: str | None = None) -> StockRequestOut:
    """PENDING -> APPROVED; the unit goes OUT_OF_STOCK and the requester is told, in one transaction."""
    with traced("stock_request.approve", request_id=request_id, approver_id=approver_id):
        with get_session() as session:
            require_admin(session, approver_id)
            row = _require_request(session, request_id)
            _transition(session, row, RequestStatus.PENDING, RequestStatus.APPROVED, approver_id=approver_id)
            unit_from = mark_out_of_stock(session, row.serial_number_id)
            message = f"Your request for {row.product.name} ({row.quantity} units) has been approved."
            if notes:
                message += f" Note: {notes}"
            _notify_requester(session, row, approver_id, "Request Approved", message)
            out = StockRequestOut.model_validate(row)
    log_transition(logger, "stock_request", request_id, RequestStatus.PENDING, RequestStatus.APPROVED, actor_id=approver_id)
    if unit_from is not None:
        log_transition(logger, "serial", out.serial_number_id, unit_from, SerialStatus.OUT_OF_STOCK, request_id=request_id)
    return out


def reject(request_id: int, approver_id: int, notes: str | None) -> StockRequestOut:
    """PENDING -> REJECTED with a mandatory reason. The unit is left as it is."""
    reason = (notes or "").strip()
    if not reason:
        raise MissingReason()
    with traced("stock_request.reject", request_id=request_id, approver_id=approver_id):
        with get_session() as session:
            require_admin(session, approver_id)
            row = _require_request(session, request_id)
            _transition(
                session,
                row,
                RequestStatus.PENDING,
                RequestStatus.REJECTED,
                approver_id=approver_id,
                notes=_append_note(row.notes, f"Rejection reason: {reason}"),
            )
            _notify_requester(
                session,
                row,
                approver_id,
                "Request Rejected",
                f"Your request for {row.product.name} ({row.quantity} units) has been rejected. Reason: {reason}",
            )
            out = StockRequestOut.model_validate(row)
    log_transition(logger, "stock_request", request_id, RequestStatus.PENDING, RequestStatus.REJECTED, actor_id=approver_id)
    return out


def complete(request_id: int, actor_id: int, notes: str | None = None) -> StockRequestOut:
    """APPROVED -> COMPLETED (the unit has been handed over)."""
    with traced("stock_request.complete", request_id=request_id, actor_id=actor_id):
        with get_session() as session:
            require_admin(session, actor_id)
            row = _require_request(session, request_id)
            values = {}
            if notes and notes.strip():
                values["notes"] = _append_note(row.notes, f"Completion note: {notes.strip()}")
            _transition(session, row, RequestStatus.APPROVED, RequestStatus.COMPLETED, **values)
            _notify_requester(
                session,
                row,
                actor_id,
                "Request Completed",
                f"Your request for {row.product.name} ({row.quantity} units) has been completed.",
            )
            out = StockRequestOut.model_validate(row)
    log_transition(logger, "stock_request", request_id, RequestStatus.APPROVED, RequestStatus.COMPLETED, actor_id=actor_id)
    return out


def update_status(
    request_id: int,
    actor_id: int,
    status: RequestStatus,
    notes: str | None = None,
) -> StockRequestOut:
    """Generic status change; routes to approve / reject / complete. Nothing moves back to PENDING."""
    if status == RequestStatus.APPROVED:
        return approve(request_id, actor_id, notes)
    if status == RequestStatus.REJECTED:
        return reject(request_id, actor_id, notes)
    if status == RequestStatus.COMPLETED:
        return complete(request_id, actor_id, notes)
    with get_session() as session:
        require_admin(session, actor_id)
        row = _require_request(session, request_id)
        raise InvalidState("StockRequest", request_id, row.status, status)


def delete(request_id: int, acting_user_id: int) -> None:
    """Hard delete by the requester or an admin, whatever the state. Units are not touched."""
    with get_session() as session:
        actor = get_active(session, acting_user_id)
        row = _require_request(session, request_id)
        if row.requester_id != actor.id and not actor.is_admin:
            raise Forbidden("Only the requester or an admin can delete a request", request_id=request_id)
        status = row.status
        session.delete(row)
    logger.info("stock_request.deleted", request_id=request_id, status=status.value, actor_id=acting_user_id)


def get(request_id: int, viewer_id: int) -> StockRequestOut:
    with get_session() as session:
        viewer = get_active(session, viewer_id)
        row = _require_request(session, request_id)
        if row.requester_id != viewer.id and not viewer.is_admin:
            raise Forbidden("Not allowed to view this request", request_id=request_id)
        return StockRequestOut.model_validate(row)


def list_for_user(user_id: int) -> list[StockRequestOut]:
    """Requests filed by ``user_id``, newest first."""
    with get_session() as session:
        rows = session.scalars(
            select(StockRequest)
            .where(StockRequest.requester_id == user_id)
            .order_by(StockRequest.created_at.desc(), StockRequest.id.desc())
        ).all()
        return [StockRequestOut.model_validate(r) for r in rows]


def list_all(status: RequestStatus | None = None) -> list[StockRequestOut]:
    """Admin queue: every request (optionally one status), newest first."""
    with get_session() as session:
        q = select(StockRequest).order_by(StockRequest.created_at.desc(), StockRequest.id.desc())
        if status is not None:
            q = q.where(StockRequest.status == status)
        return [StockRequestOut.model_validate(r) for r in session.scalars(q).all()]

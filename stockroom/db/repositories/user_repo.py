"""User repository: provision users, resolve the caller's identity, check admin rights."""

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import select
from sqlalchemy.orm import Session

from stockroom.db import get_session
from stockroom.db.models.users import User
from stockroom.errors import DuplicateName, Forbidden, InvalidInput, NotFound, Unauthorized
from stockroom.models.enums import Role
from stockroom.models.outputs import UserOut
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.users")


def normalize_email(addr: str) -> str:
    """Validate format (no DNS lookup) and return the normalized, lower-cased address."""
    try:
        info = validate_email((addr or "").strip(), check_deliverability=False)
    except EmailNotValidError as e:
        raise InvalidInput(f"Invalid email address: {addr!r}", reason=str(e)) from e
    return info.normalized.lower()


def create_user(
    name: str,
    email: str,
    role: Role = Role.STAFF,
    department: str | None = None,
) -> UserOut:
    name = (name or "").strip()
    if not name:
        raise InvalidInput("name must not be empty")
    email = normalize_email(email)
    with get_session() as session:
        if session.scalar(select(User.id).where(User.email == email)) is not None:
            raise DuplicateName("user", email)
        row = User(name=name, email=email, role=role, department=department, is_active=True)
        session.add(row)
        session.flush()
        out = UserOut.model_validate(row)
    logger.info("user.created", user_id=out.id, role=out.role.value)
    return out


def get_user(user_id: int) -> UserOut:
    with get_session() as session:
        row = session.get(User, user_id)
        if row is None:
            raise NotFound("User", user_id)
        return UserOut.model_validate(row)


def get_by_email(email: str) -> UserOut | None:
    with get_session() as session:
        row = session.scalars(select(User).where(User.email == email.strip().lower())).first()
        return UserOut.model_validate(row) if row is not None else None


def list_users(role: Role | None = None, active_only: bool = True) -> list[UserOut]:
    with get_session() as session:
        q = select(User).order_by(User.id)
        if role is not None:
            q = q.where(User.role == role)
        if active_only:
            q = q.where(User.is_active.is_(True))
        return [UserOut.model_validate(r) for r in session.scalars(q).all()]


def set_active(user_id: int, is_active: bool) -> UserOut:
    with get_session() as session:
        row = session.get(User, user_id)
        if row is None:
            raise NotFound("User", user_id)
        row.is_active = is_active
        session.flush()
        out = UserOut.model_validate(row)
    logger.info("user.active_changed", user_id=user_id, is_active=is_active)
    return out


def resolve_identity(raw_user_id: str | None) -> UserOut:
    """Map the identity header value to an active user, or raise Unauthorized."""
    raw = (raw_user_id or "").strip()
    if not raw.isdigit():
        raise Unauthorized("Missing or malformed user identity")
    with get_session() as session:
        row = session.get(User, int(raw))
        if row is None or not row.is_active:
            raise Unauthorized("Unknown or inactive user", user_id=int(raw))
        return UserOut.model_validate(row)


def get_active(session: Session, user_id: int) -> User:
    row = session.get(User, user_id)
    if row is None or not row.is_active:
        raise Forbidden("Unknown or inactive user", user_id=user_id)
    return row


def require_admin(session: Session, user_id: int) -> User:
    row = get_active(session, user_id)
    if not row.is_admin:
        raise Forbidden("Only admins can perform this action", user_id=user_id)
    return row

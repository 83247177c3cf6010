"""Request dependencies: resolve the caller from the identity header, gate admin routes."""

from fastapi import Depends, Header

from stockroom import config
from stockroom.db.repositories.user_repo import resolve_identity
from stockroom.errors import Forbidden
from stockroom.models.enums import Role
from stockroom.models.outputs import UserOut


def current_user(x_user_id: str | None = Header(None, alias=config.IDENTITY_HEADER)) -> UserOut:
    return resolve_identity(x_user_id)


def admin_user(user: UserOut = Depends(current_user)) -> UserOut:
    if user.role != Role.ADMIN:
        raise Forbidden("Admin access required", user_id=user.id)
    return user

"""Stock request routes: file, list, view, approve, reject, complete, delete."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from stockroom.api.deps import admin_user, current_user
from stockroom.models.enums import RequestStatus
from stockroom.models.inputs import ApproveBody, RejectBody, RequestStatusUpdate, StockRequestCreate
from stockroom.models.outputs import StockRequestOut, UserOut
from stockroom.workflow import stock_requests

router = APIRouter(prefix="/requests", tags=["requests"])


@router.post("", status_code=201)
def create_requests(body: StockRequestCreate, user: UserOut = Depends(current_user)) -> list[StockRequestOut]:
    """Open one PENDING request per selected serial number."""
    return stock_requests.create(user.id, body.product_id, body.serial_number_ids, body.notes)


@router.get("")
def list_my_requests(user: UserOut = Depends(current_user)) -> list[StockRequestOut]:
    return stock_requests.list_for_user(user.id)


# Declared before /{request_id} so "admin" is not parsed as an id
@router.get("/admin")
def list_all_requests(
    status: Optional[RequestStatus] = Query(None),
    admin: UserOut = Depends(admin_user),
) -> list[StockRequestOut]:
    return stock_requests.list_all(status)


@router.get("/{request_id}")
def get_request(request_id: int, user: UserOut = Depends(current_user)) -> StockRequestOut:
    return stock_requests.get(request_id, user.id)


@router.delete("/{request_id}", status_code=204)
def delete_request(request_id: int, user: UserOut = Depends(current_user)) -> Response:
    stock_requests.delete(request_id, user.id)
    return Response(status_code=204)


@router.post("/{request_id}/approve")
def approve_request(
    request_id: int,
    body: Optional[ApproveBody] = None,
    user: UserOut = Depends(current_user),
) -> StockRequestOut:
    return stock_requests.approve(request_id, user.id, body.notes if body else None)


@router.post("/{request_id}/reject")
def reject_request(
    request_id: int,
    body: Optional[RejectBody] = None,
    user: UserOut = Depends(current_user),
) -> StockRequestOut:
    return stock_requests.reject(request_id, user.id, body.notes if body else None)


@router.post("/{request_id}/complete")
def complete_request(
    request_id: int,
    body: Optional[ApproveBody] = None,
    user: UserOut = Depends(current_user),
) -> StockRequestOut:
    return stock_requests.complete(request_id, user.id, body.notes if body else None)


@router.patch("/{request_id}")
def update_request_status(
    request_id: int,
    body: RequestStatusUpdate,
    user: UserOut = Depends(current_user),
) -> StockRequestOut:
    return stock_requests.update_status(request_id, user.id, body.status, body.notes)

"""Serial number routes: available units, create, bulk create, status update, delete, lookup."""

from fastapi import APIRouter, Depends, Query, Response

from stockroom.api.deps import admin_user, current_user
from stockroom.db.repositories import product_repo, serial_repo
from stockroom.errors import InvalidInput
from stockroom.models.inputs import SerialNumberBulkCreate, SerialNumberCreate, SerialNumberUpdate
from stockroom.models.outputs import BulkCreateResult, SerialNumberOut, UserOut

router = APIRouter(tags=["serial-numbers"])


@router.get("/products/{product_id}/serial-numbers/available")
def list_available(product_id: int, user: UserOut = Depends(current_user)) -> list[SerialNumberOut]:
    return serial_repo.list_available(product_id)


@router.get("/products/{product_id}/serial-numbers")
def list_for_product(product_id: int, user: UserOut = Depends(current_user)) -> list[SerialNumberOut]:
    return serial_repo.list_for_product(product_id)


@router.get("/serial-numbers")
def find_serial(
    serial: str = Query(..., min_length=1),
    user: UserOut = Depends(current_user),
) -> SerialNumberOut:
    return serial_repo.get_by_serial(serial)


@router.post("/serial-numbers", status_code=201)
def create_serial(body: SerialNumberCreate, admin: UserOut = Depends(admin_user)) -> SerialNumberOut:
    return serial_repo.create(body.product_id, body.serial, body.status, body.location_id, body.notes)


@router.post("/serial-numbers/bulk", status_code=201)
def bulk_create_serials(body: SerialNumberBulkCreate, admin: UserOut = Depends(admin_user)) -> BulkCreateResult:
    """Explicit ``serials``, or ``quantity`` generated serials starting at ``start_number``."""
    if body.serials:
        serials = body.serials
    elif body.quantity:
        prefix = body.prefix or serial_repo.default_serial_prefix(product_repo.get_product(body.product_id).sku)
        serials = serial_repo.generate_serials(prefix, body.start_number, body.quantity)
    else:
        raise InvalidInput("Provide either serials or quantity")
    return serial_repo.bulk_create(body.product_id, serials, body.status, body.location_id)


@router.put("/serial-numbers/{serial_number_id}")
def update_serial(
    serial_number_id: int,
    body: SerialNumberUpdate,
    admin: UserOut = Depends(admin_user),
) -> SerialNumberOut:
    return serial_repo.update_status(serial_number_id, body.status, body.location_id, body.notes)


@router.delete("/serial-numbers/{serial_number_id}", status_code=204)
def delete_serial(serial_number_id: int, admin: UserOut = Depends(admin_user)) -> Response:
    serial_repo.delete(serial_number_id)
    return Response(status_code=204)

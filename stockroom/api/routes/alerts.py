"""Aging sweep trigger (for cron or an operator)."""

from typing import Any

from fastapi import APIRouter, Depends

from stockroom.aging import run_sweep
from stockroom.api.deps import admin_user
from stockroom.models.outputs import UserOut

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("/inventory-aging")
def inventory_aging(admin: UserOut = Depends(admin_user)) -> dict[str, Any]:
    result = run_sweep()
    return {
        **result.summary(),
        "alerts": [a.model_dump() for a in result.alerts],
    }

"""Exception handlers: engine errors become ``{error_code, message, details}`` JSON bodies."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from stockroom.errors import StockroomError
from stockroom.utils.logger import get_logger

logger = get_logger("stockroom.api")


def _body(error_code: str, message: str, details=None) -> dict:
    return {"error_code": error_code, "message": message, "details": details or {}}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StockroomError)
    async def _stockroom_error(request: Request, exc: StockroomError):
        level = logger.warning if exc.http_status in (401, 403, 409) else logger.info
        level(
            "api.request_failed",
            error_code=exc.code,
            http_status=exc.http_status,
            path=request.url.path,
            method=request.method,
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "msg": str(e.get("msg", "invalid"))}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=422,
            content=_body("request_validation_error", "Request is not valid", {"errors": errors}),
        )

    @app.exception_handler(Exception)
    async def _unhandled(request: Request, exc: Exception):
        logger.exception("api.unhandled_error", path=request.url.path, method=request.method, error=str(exc))
        return JSONResponse(status_code=500, content=_body("internal_error", "Internal server error"))

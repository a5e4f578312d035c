import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pricing.errors import (
    ConfigurationError, CurrencyMismatchError, InvalidInputError, PricingError, UnknownReferenceError,
)

logger = logging.getLogger(__name__)


def status_for(error: PricingError) -> int:
    # Order matters: UnknownReferenceError is an InvalidInputError.
    if isinstance(error, UnknownReferenceError):
        return 404
    if isinstance(error, InvalidInputError):
        return 400
    if isinstance(error, CurrencyMismatchError):
        return 409
    if isinstance(error, ConfigurationError):
        return 500
    return 400


def error_body(code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {"error": {"code": code, "message": message, "details": details}}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(PricingError)
    async def pricing_error_handler(request: Request, exc: PricingError) -> JSONResponse:
        status = status_for(exc)
        log = logger.error if status >= 500 else logger.warning
        log("%s %s -> %d %s: %s", request.method, request.url.path, status, exc.code, exc.message)
        return JSONResponse(status_code=status, content={"error": exc.to_dict()})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("%s %s -> 422 validation error", request.method, request.url.path)
        return JSONResponse(
            status_code=422,
            content=error_body("validation_error", "Request validation failed",
                               {"errors": jsonable_errors(exc)}),
        )


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in exc.errors()
    ]

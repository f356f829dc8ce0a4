"""Uniform {message} error envelope and store error mapping"""

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ledger_gateway.domain.exceptions import StoreFailure, StoreTimeout, ValidationError
from ledger_gateway.infrastructure.observability.metrics import store_failure_counter

GENERIC_ERROR_MESSAGE = "An internal server error occurred."
STORE_TIMEOUT_MESSAGE = "Store temporarily unavailable, retry later."
VALIDATION_MESSAGE = "Validation failed."


def store_error_response(error: StoreFailure, request_id: str) -> HTTPException:
    """Log a store failure in full and return the generic client-facing error"""
    if isinstance(error, StoreTimeout):
        store_failure_counter.labels(kind="timeout").inc()
        logging.warning(f"Store timeout: {error}", extra={"request_id": request_id})
        return HTTPException(status_code=503, detail=STORE_TIMEOUT_MESSAGE, headers={"Retry-After": "1"})

    store_failure_counter.labels(kind="failure").inc()
    logging.error(f"Store failure: {error}", exc_info=error, extra={"request_id": request_id})
    return HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)


def validation_error_response(error: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": VALIDATION_MESSAGE, "errors": jsonable_encoder(error.errors)},
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"message": VALIDATION_MESSAGE, "errors": jsonable_encoder(exc.errors())},
    )


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return validation_error_response(exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, domain_validation_handler)

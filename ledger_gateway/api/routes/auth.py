"""POST /auth/signup and POST /auth/login"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ledger_gateway.api.routes.schemas import Credentials, ErrorResponse, LoginResponse, SignupResponse, UserSchema
from ledger_gateway.api.dependencies import get_auth_gateway, get_request_id
from ledger_gateway.api.errors import GENERIC_ERROR_MESSAGE, store_error_response
from ledger_gateway.infrastructure.database.session import get_db
from ledger_gateway.domain.exceptions import DuplicateEmailError, InvalidCredentialsError, StoreFailure
from ledger_gateway.infrastructure.observability.metrics import record_auth
from ledger_gateway.infrastructure.observability.logging import log_auth_event
from ledger_gateway.services.auth import AuthGateway

router = APIRouter()


@router.post(
    "/signup",
    status_code=201,
    response_model=SignupResponse,
    responses={409: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def signup(
    body: Credentials,
    request: Request,
    db: Session = Depends(get_db),
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """Register a new account; the password hash never leaves the service"""
    request_id = get_request_id(request)

    try:
        user = gateway.register(body.email, body.password)
        db.commit()

    except DuplicateEmailError:
        db.rollback()
        record_auth("signup", "duplicate")
        log_auth_event(request_id, "signup", "duplicate")
        raise HTTPException(status_code=409, detail="Email already exists.")

    except StoreFailure as e:
        db.rollback()
        raise store_error_response(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    record_auth("signup", "success")
    log_auth_event(request_id, "signup", "success", user_id=user.id)

    return SignupResponse(
        message="User created successfully!",
        user=UserSchema(id=user.id, email=user.email),
    )


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
def login(
    body: Credentials,
    request: Request,
    gateway: AuthGateway = Depends(get_auth_gateway),
):
    """
    Exchange email and password for a session token.

    Returns:
        Signed token valid for one hour and the caller's user id
    """
    request_id = get_request_id(request)

    try:
        session = gateway.authenticate(body.email, body.password)

    except InvalidCredentialsError:
        record_auth("login", "invalid_credentials")
        log_auth_event(request_id, "login", "invalid_credentials")
        raise HTTPException(status_code=401, detail="Invalid credentials.")

    except StoreFailure as e:
        raise store_error_response(e, request_id)

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    record_auth("login", "success")
    log_auth_event(request_id, "login", "success", user_id=session.user_id)

    return LoginResponse(token=session.token, user_id=session.user_id)

"""Dependency injection for FastAPI endpoints, including the session gate"""

import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ledger_gateway.config import Settings
from ledger_gateway.domain.exceptions import TokenInvalidError, TokenVerificationError, UnauthenticatedError
from ledger_gateway.infrastructure.database.reports import ReportingEngine
from ledger_gateway.infrastructure.database.session import get_db
from ledger_gateway.infrastructure.observability.metrics import token_rejection_counter
from ledger_gateway.infrastructure.security.tokens import TokenSigner
from ledger_gateway.services.auth import AuthGateway, authorize

bearer_scheme = HTTPBearer(auto_error=False)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with"""
    return request.app.state.settings


def get_token_signer(request: Request) -> TokenSigner:
    return request.app.state.token_signer


def get_auth_gateway(
    db: Session = Depends(get_db),
    signer: TokenSigner = Depends(get_token_signer),
    settings: Settings = Depends(get_app_settings),
) -> AuthGateway:
    """Provide auth gateway bound to the request's session"""
    return AuthGateway(db, signer, bcrypt_rounds=settings.bcrypt_rounds)


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    signer: TokenSigner = Depends(get_token_signer),
) -> int:
    """
    Session gate: resolve the caller's user id from the bearer token.

    The returned id is the only user scope available to feed endpoints.
    """
    request_id = get_request_id(request)
    token = credentials.credentials if credentials else None

    try:
        return authorize(signer, token)
    except TokenInvalidError as e:
        token_rejection_counter.labels(reason="invalid").inc()
        logging.info(f"Rejected token: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=401, detail="Token is invalid or expired.", headers=BEARER_CHALLENGE)
    except UnauthenticatedError:
        token_rejection_counter.labels(reason="missing" if token is None else "malformed").inc()
        raise HTTPException(status_code=401, detail="Not authenticated.", headers=BEARER_CHALLENGE)
    except TokenVerificationError as e:
        token_rejection_counter.labels(reason="verification_error").inc()
        logging.error(f"Token verification failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Token verification failed.")


def get_reporting_engine(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> ReportingEngine:
    """Provide a reporting engine scoped to the authenticated user"""
    return ReportingEngine(db, user_id=user_id, cutoff_year=settings.report_cutoff_year)

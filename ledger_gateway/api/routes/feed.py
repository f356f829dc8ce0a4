"""/feed endpoints - reference data, transaction writes and user-scoped reports"""

import time
import logging
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from ledger_gateway.api.routes.schemas import (
    CashflowItem,
    ErrorResponse,
    ExpenseListItem,
    ExpenseTypeSchema,
    FinancialOverviewItem,
    PeriodCategoryItem,
    TimeSeriesItem,
    TransactionCreate,
    TransactionCreatedResponse,
    TransactionSchema,
)
from ledger_gateway.api.dependencies import get_reporting_engine, get_request_id
from ledger_gateway.api.errors import GENERIC_ERROR_MESSAGE, store_error_response
from ledger_gateway.infrastructure.database.session import get_db
from ledger_gateway.infrastructure.database.repositories import LedgerRepository
from ledger_gateway.infrastructure.database.reports import ReportingEngine
from ledger_gateway.domain.exceptions import StoreFailure, ValidationError
from ledger_gateway.infrastructure.observability.metrics import report_duration_histogram, transaction_counter
from ledger_gateway.infrastructure.observability.logging import log_report

router = APIRouter()

AUTH_RESPONSES = {401: {"model": ErrorResponse}}


@router.get("/expense-categories", response_model=List[ExpenseTypeSchema])
def get_expense_categories(request: Request, db: Session = Depends(get_db)):
    """List every expense type with its category (reference data, no auth)"""
    try:
        types = LedgerRepository(db).list_expense_types()
    except StoreFailure as e:
        raise store_error_response(e, get_request_id(request))

    return [
        ExpenseTypeSchema(id=t.id, category_id=t.category_id, type_name=t.type_name)
        for t in types
    ]


@router.post(
    "/transaction",
    status_code=201,
    response_model=TransactionCreatedResponse,
    responses={**AUTH_RESPONSES, 422: {"model": ErrorResponse}},
)
def create_transaction(
    request_body: TransactionCreate,
    request: Request,
    db: Session = Depends(get_db),
    engine: ReportingEngine = Depends(get_reporting_engine),
):
    """
    Record a transaction for the authenticated user.

    The category is derived from the expense type; a categoryId that
    disagrees with it fails with 422.
    """
    request_id = get_request_id(request)

    try:
        db_transaction = engine.record_transaction(
            txn_date=request_body.date,
            amount=request_body.amount,
            type_id=request_body.type_id,
            category_id=request_body.category_id,
        )
        db.commit()
        db.refresh(db_transaction)

    except ValidationError:
        db.rollback()
        raise

    except StoreFailure as e:
        db.rollback()
        raise store_error_response(e, request_id)

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    transaction_counter.inc()
    logging.info(
        "Transaction recorded",
        extra={"request_id": request_id, "user_id": engine.user_id, "transaction_id": db_transaction.id},
    )

    return TransactionCreatedResponse(
        message="Transaction created successfully!",
        transaction=TransactionSchema(
            id=db_transaction.id,
            date=db_transaction.date,
            amount=db_transaction.amount,
            type_id=db_transaction.type_id,
            category_id=db_transaction.category_id,
            user_id=db_transaction.user_id,
        ),
    )


def _serve_report(name: str, request: Request, engine: ReportingEngine, build: Callable[[], list]) -> list:
    """Run one report with timing, logging and store error mapping"""
    request_id = get_request_id(request)
    start_time = time.time()

    try:
        with report_duration_histogram.labels(report=name).time():
            rows = build()

    except StoreFailure as e:
        raise store_error_response(e, request_id)

    except Exception as e:
        logging.error(f"Unexpected error in {name} report: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)

    duration_ms = (time.time() - start_time) * 1000
    log_report(request_id, engine.user_id, name, len(rows), duration_ms)
    return rows


@router.get("/timeseries", response_model=List[TimeSeriesItem], responses=AUTH_RESPONSES)
def get_timeseries(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    """Monthly totals per expense type"""
    return _serve_report("timeseries", request, engine, engine.timeseries)


@router.get("/income-expenses", response_model=List[PeriodCategoryItem], responses=AUTH_RESPONSES)
def get_income_expenses(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    """Monthly income, expenses and savings rate"""
    return _serve_report("income-expenses", request, engine, engine.income_vs_expense)


@router.get("/casflow", response_model=List[CashflowItem], responses=AUTH_RESPONSES)
def get_cashflow(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    return _serve_report("cashflow", request, engine, engine.cashflow)


@router.get("/financial-overview", response_model=List[FinancialOverviewItem], responses=AUTH_RESPONSES)
def get_financial_overview(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    return _serve_report("financial-overview", request, engine, engine.financial_overview)


@router.get("/financial-details", response_model=List[PeriodCategoryItem], responses=AUTH_RESPONSES)
def get_financial_details(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    return _serve_report("financial-details", request, engine, engine.financial_details)


@router.get("/list-expenses", response_model=List[ExpenseListItem], responses=AUTH_RESPONSES)
def get_expense_table(request: Request, engine: ReportingEngine = Depends(get_reporting_engine)):
    """Individual expenses, newest first"""
    return _serve_report("list-expenses", request, engine, engine.expense_table)

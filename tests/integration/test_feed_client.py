"""Integration tests for the dashboard feed client against the ASGI app"""

import pytest
import httpx
from datetime import date
from decimal import Decimal

from ledger_gateway.domain.exceptions import FeedAPIError, SessionExpiredError
from ledger_gateway.infrastructure.clients.feed import FeedClient


@pytest.fixture
def feed_client(app) -> FeedClient:
    return FeedClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))


@pytest.fixture
async def logged_in(feed_client: FeedClient) -> FeedClient:
    await feed_client.signup("a@x.com", "secret1")
    await feed_client.login("a@x.com", "secret1")
    return feed_client


async def _type_ids(client: FeedClient) -> dict:
    return {row["type_name"]: row["id"] for row in await client.expense_types()}


async def test_signup_login_and_record(feed_client: FeedClient):
    user = await feed_client.signup("a@x.com", "secret1")
    assert user["email"] == "a@x.com"

    user_id = await feed_client.login("a@x.com", "secret1")
    assert user_id == user["id"]
    assert feed_client.is_logged_in

    type_ids = await _type_ids(feed_client)
    txn = await feed_client.record_transaction(date(2025, 1, 10), Decimal("-50"), type_ids["Groceries"])

    assert txn["user_id"] == user_id
    rows = await feed_client.expense_table()
    assert [(r["date"], r["type"], Decimal(r["amount"])) for r in rows] == [
        ("2025-01-10", "Groceries", Decimal("-50"))
    ]


async def test_chart_helpers_pivot_report_rows(logged_in: FeedClient):
    type_ids = await _type_ids(logged_in)
    for txn_date, amount, type_name in [
        (date(2025, 2, 1), -20, "Groceries"),
        (date(2025, 1, 5), 1000, "Salary"),
        (date(2025, 1, 6), -30, "Groceries"),
        (date(2025, 1, 7), -15, "Fuel"),
        (date(2025, 1, 9), -5, "Groceries"),
    ]:
        await logged_in.record_transaction(txn_date, amount, type_ids[type_name])

    assert await logged_in.timeseries_chart() == [
        {"time": "2025-01", "Groceries": Decimal("-35"), "Fuel": Decimal("-15")},
        {"time": "2025-02", "Groceries": Decimal("-20")},
    ]

    details = await logged_in.financial_details_chart()
    assert [row["month"] for row in details] == ["2025-01", "2025-02"]
    assert details[0] == {"month": "2025-01", "Food": Decimal("-35"), "Transport": Decimal("-15")}

    income_expense = await logged_in.income_expense_chart()
    assert income_expense[0] == {
        "month": "2025-01",
        "Income": Decimal("1000"),
        "Expenses": Decimal("50"),
        "Savings": Decimal("95.00"),
    }
    assert income_expense[1]["Income"] == Decimal("0")


async def test_report_methods_return_rows(logged_in: FeedClient):
    assert await logged_in.timeseries() == []
    assert await logged_in.income_expenses() == []
    assert await logged_in.cashflow() == []
    assert await logged_in.financial_overview() == []
    assert await logged_in.financial_details() == []
    assert await logged_in.expense_table() == []


async def test_rejected_token_ends_session(logged_in: FeedClient):
    logged_in.token = "not-a-token"

    with pytest.raises(SessionExpiredError):
        await logged_in.timeseries()

    assert not logged_in.is_logged_in
    assert logged_in.user_id is None


async def test_authenticated_call_without_login(feed_client: FeedClient):
    with pytest.raises(SessionExpiredError):
        await feed_client.expense_table()


async def test_auth_errors_surface_server_message(feed_client: FeedClient):
    await feed_client.signup("a@x.com", "secret1")

    with pytest.raises(FeedAPIError, match="Email already exists."):
        await feed_client.signup("a@x.com", "secret1")
    with pytest.raises(FeedAPIError, match="Invalid credentials."):
        await feed_client.login("a@x.com", "wrong-password")

    assert not feed_client.is_logged_in


async def test_validation_error_keeps_session(logged_in: FeedClient):
    with pytest.raises(FeedAPIError, match="422"):
        await logged_in.record_transaction(date(2025, 1, 1), -1, 9999)

    assert logged_in.is_logged_in


async def test_unreachable_server():
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = FeedClient(base_url="http://feed.invalid", transport=httpx.MockTransport(refuse))

    with pytest.raises(FeedAPIError, match="unreachable"):
        await client.signup("a@x.com", "secret1")

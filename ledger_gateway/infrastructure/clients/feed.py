"""Feed API HTTP client used by dashboards to log in, record and chart transactions"""

import httpx
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional
from ledger_gateway.config import get_settings
from ledger_gateway.domain.exceptions import FeedAPIError, SessionExpiredError
from ledger_gateway.domain.pivot import pivot_by_period_and_key

# Statuses after which the stored credential is dropped
SESSION_ENDING_STATUSES = (401, 403, 500)


class FeedClient:
    """Client for the ledger gateway's /auth and /feed endpoints"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = get_settings()
        self.base_url = (base_url or settings.feed_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport
        self.token: Optional[str] = None
        self.user_id: Optional[int] = None

    @property
    def is_logged_in(self) -> bool:
        return self.token is not None

    def logout(self) -> None:
        self.token = None
        self.user_id = None

    async def _request(self, method: str, path: str, json: Any = None, auth: bool = True) -> Any:
        """
        Send one request and return the decoded JSON body.

        Raises:
            SessionExpiredError: Authenticated call answered 401/403/500
            FeedAPIError: On timeout, transport errors or other error statuses
        """
        headers = {}
        if auth:
            if self.token is None:
                raise SessionExpiredError("Not logged in")
            headers["Authorization"] = f"Bearer {self.token}"

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.request(method, path, json=json, headers=headers)
            except httpx.TimeoutException as e:
                raise FeedAPIError(f"Feed API timeout after {self.timeout}s") from e
            except httpx.RequestError as e:
                raise FeedAPIError(f"Feed API unreachable: {e}") from e

        if auth and response.status_code in SESSION_ENDING_STATUSES:
            self.logout()
            raise SessionExpiredError("Session expired. Please log in again.")

        if response.is_error:
            raise FeedAPIError(f"Feed API error {response.status_code}: {_error_message(response)}")

        try:
            return response.json()
        except ValueError as e:
            raise FeedAPIError(f"Invalid JSON from feed API: {e}") from e

    async def signup(self, email: str, password: str) -> Dict[str, Any]:
        body = await self._request("POST", "/auth/signup", json={"email": email, "password": password}, auth=False)
        return body["user"]

    async def login(self, email: str, password: str) -> int:
        """Log in and keep the session token for later calls"""
        body = await self._request("POST", "/auth/login", json={"email": email, "password": password}, auth=False)
        try:
            self.token = body["token"]
            self.user_id = int(body["userId"])
        except (KeyError, TypeError, ValueError) as e:
            raise FeedAPIError(f"Invalid login response: {e}") from e
        return self.user_id

    async def expense_types(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/expense-categories", auth=False)

    async def record_transaction(
        self,
        txn_date: date,
        amount: Decimal | float | int,
        type_id: int,
        category_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "date": txn_date.isoformat(),
            "amount": float(amount) if isinstance(amount, Decimal) else amount,
            "typeId": type_id,
        }
        if category_id is not None:
            payload["categoryId"] = category_id
        body = await self._request("POST", "/feed/transaction", json=payload)
        return body["transaction"]

    async def timeseries(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/timeseries")

    async def income_expenses(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/income-expenses")

    async def cashflow(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/casflow")

    async def financial_overview(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/financial-overview")

    async def financial_details(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/financial-details")

    async def expense_table(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/feed/list-expenses")

    async def timeseries_chart(self) -> List[Dict[str, Any]]:
        """Expense types as one series per type, months in order"""
        rows = await self.timeseries()
        return pivot_by_period_and_key(rows, "time", "type_name", "total", period_label="time", sort=True)

    async def financial_details_chart(self) -> List[Dict[str, Any]]:
        """Stacked category totals per month, months in order"""
        rows = await self.financial_details()
        return pivot_by_period_and_key(rows, "dates", "category", "amount", period_label="month", sort=True)

    async def income_expense_chart(self) -> List[Dict[str, Any]]:
        """Income, Expenses and Savings per month, in report order"""
        rows = await self.income_expenses()
        return pivot_by_period_and_key(rows, "dates", "category", "amount", period_label="month")


def _error_message(response: httpx.Response) -> str:
    try:
        return str(response.json().get("message", response.text))
    except (ValueError, AttributeError):
        return response.text

"""
Bank Portal Client
Token-aware HTTP gateway for the bank portal API.

Environment:
  BANK_API_BASE_URL  (default: http://localhost:5000)
"""

import os
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx

from ..logging_config import get_logger
from .session import ClientSession

logger = get_logger("bank_portal.client.gateway")

DEFAULT_BASE = os.getenv("BANK_API_BASE_URL", "http://localhost:5000").rstrip("/")
NETWORK_ERROR_MESSAGE = "Network error. Please try again."


def _amount(value):
    # Decimal is not JSON serializable; the API parses numeric strings
    return str(value) if isinstance(value, Decimal) else value


class ApiError(Exception):
    """Non-2xx answer carrying the server's message."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(message)


class UnauthorizedError(ApiError):
    """
    The server rejected the token. The session has already been cleared and
    logged out, so callers should not show this to the user.
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(401, message)


class NetworkError(Exception):
    def __init__(self, message: str = NETWORK_ERROR_MESSAGE):
        self.message = message
        super().__init__(message)


class BankGateway:
    """
    HTTP client for the bank portal API.

    Every request carries the session's bearer token; a 401 answer ends the
    session and raises UnauthorizedError.
    """

    def __init__(
        self,
        session: Optional[ClientSession] = None,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session or ClientSession()
        self.base_url = (base_url or DEFAULT_BASE).rstrip("/")
        self.client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> "BankGateway":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Core request path
    # ------------------------------------------------------------------
    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        logout_on_401: bool = True,
    ) -> Dict[str, Any]:
        """
        Send one request and return the decoded JSON body.

        ``logout_on_401=False`` is for the login calls, where a 401 means bad
        credentials rather than a dead session.
        """
        try:
            response = await self.client.request(method, path, json=json, headers=self._headers(json is not None))
        except httpx.HTTPError as e:
            logger.error("Request failed %s %s: %s", method, path, e)
            raise NetworkError() from e

        try:
            data = response.json()
        except ValueError:
            data = {}

        if response.status_code == 401 and logout_on_401:
            logger.warning("401 from %s %s; logging out", method, path)
            self.session.logout()
            raise UnauthorizedError()

        if response.is_error:
            message = data.get("message") if isinstance(data, dict) else None
            logger.warning("API error %s %s -> %s %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message or f"Request failed ({response.status_code})")
        return data

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------
    async def _login(self, path: str, role: str, phone: str, password: str) -> Dict[str, Any]:
        data = await self.request(
            "POST", path, json={"phone": phone, "password": password}, logout_on_401=False
        )
        self.session.login(data["token"], role, data.get(role))
        return data

    async def login_user(self, phone: str, password: str) -> Dict[str, Any]:
        return await self._login("/api/users/login", "user", phone, password)

    async def login_employee(self, phone: str, password: str) -> Dict[str, Any]:
        return await self._login("/api/employee/login", "employee", phone, password)

    async def login_admin(self, phone: str, password: str) -> Dict[str, Any]:
        return await self._login("/api/admin/login", "admin", phone, password)

    def logout(self) -> None:
        self.session.logout()

    # ------------------------------------------------------------------
    # Customer
    # ------------------------------------------------------------------
    async def register(
        self,
        name: str,
        phone: str,
        aadhaar: str,
        password: str,
        account_type: str = "savings",
        initial_deposit: Optional[float] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "name": name,
            "phone": phone,
            "aadhaar": aadhaar,
            "password": password,
            "accountType": account_type,
        }
        if initial_deposit is not None:
            body["initialDeposit"] = _amount(initial_deposit)
        data = await self.request("POST", "/api/users/register", json=body)
        return data["user"]

    async def me(self) -> Dict[str, Any]:
        return (await self.request("GET", "/api/users/me"))["user"]

    async def deposit(self, amount) -> Dict[str, Any]:
        return await self.request("POST", "/api/users/deposit", json={"amount": _amount(amount)})

    async def withdraw(self, amount) -> Dict[str, Any]:
        return await self.request("POST", "/api/users/withdraw", json={"amount": _amount(amount)})

    async def transfer(self, to_phone: str, amount) -> Dict[str, Any]:
        return await self.request("POST", "/api/users/transfer", json={"toPhone": to_phone, "amount": _amount(amount)})

    async def history(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/api/users/history"))["transactions"]

    # ------------------------------------------------------------------
    # Employee
    # ------------------------------------------------------------------
    async def list_users(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/api/employee/users")).get("users", [])

    async def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        return (await self.request("GET", f"/api/employee/user/{user_id}")).get("user")

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------
    async def list_employees(self) -> List[Dict[str, Any]]:
        return (await self.request("GET", "/api/admin/employees")).get("employees", [])

    async def create_employee(self, name: str, phone: str, aadhaar: str, password: str) -> Dict[str, Any]:
        body = {"name": name, "phone": phone, "aadhaar": aadhaar, "password": password}
        return (await self.request("POST", "/api/admin/create-employee", json=body))["employee"]

    async def delete_employee(self, employee_id: str) -> Dict[str, Any]:
        return await self.request("DELETE", f"/api/admin/employee/{employee_id}")

"""
Dashboard state holders for the three portals.

Each dashboard keeps what a page would render (lists, the selected record and
an inline ``message``) and routes every call through one error policy:
API errors fill ``message``, network failures show a generic string, and an
expired session is silent because the logout already moved the user away.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from ..logging_config import get_logger
from .gateway import ApiError, BankGateway, NetworkError, UnauthorizedError

logger = get_logger("bank_portal.client.dashboards")

T = TypeVar("T")


class Dashboard:
    role: str = ""

    def __init__(self, gateway: BankGateway):
        self.gateway = gateway
        self.message = ""
        self.loading = False

    @property
    def session(self):
        return self.gateway.session

    def ensure_session(self) -> bool:
        """
        Without a token (or with another role's token) the page cannot load;
        send the user to login.
        """
        if not self.session.token or self.session.role != self.role:
            self.session.logout()
            return False
        return True

    async def _run(self, call: Callable[[], Awaitable[T]], fallback: str) -> Optional[T]:
        self.loading = True
        self.message = ""
        try:
            return await call()
        except UnauthorizedError:
            return None
        except ApiError as e:
            self.message = e.message or fallback
        except NetworkError as e:
            self.message = e.message
        finally:
            self.loading = False
        return None

    def logout(self) -> None:
        self.gateway.logout()


class AdminDashboard(Dashboard):
    role = "admin"

    def __init__(self, gateway: BankGateway):
        super().__init__(gateway)
        self.employees: List[Dict[str, Any]] = []

    async def load(self) -> None:
        if self.ensure_session():
            await self.fetch_employees()

    async def fetch_employees(self) -> None:
        employees = await self._run(self.gateway.list_employees, "Failed to fetch employees")
        if employees is not None:
            self.employees = employees

    async def create_employee(self, name: str, phone: str, aadhaar: str, password: str) -> bool:
        created = await self._run(
            lambda: self.gateway.create_employee(name, phone, aadhaar, password),
            "Failed to create employee",
        )
        if created is None:
            return False
        await self.fetch_employees()
        if not self.message:
            self.message = "Employee created successfully!"
        return True

    async def delete_employee(self, employee_id: str) -> bool:
        deleted = await self._run(lambda: self.gateway.delete_employee(employee_id), "Failed to delete employee")
        if deleted is None:
            return False
        await self.fetch_employees()
        if not self.message:
            self.message = "Employee deleted successfully!"
        return True


class EmployeeDashboard(Dashboard):
    role = "employee"

    def __init__(self, gateway: BankGateway):
        super().__init__(gateway)
        self.users: List[Dict[str, Any]] = []
        self.selected_user: Optional[Dict[str, Any]] = None

    async def load(self) -> None:
        if self.ensure_session():
            await self.fetch_users()

    async def fetch_users(self) -> None:
        users = await self._run(self.gateway.list_users, "Failed to fetch users")
        if users is not None:
            self.users = users

    async def fetch_user_details(self, user_id: str) -> None:
        if not user_id:
            return
        user = await self._run(lambda: self.gateway.get_user(user_id), "Failed to fetch user details")
        if user is not None:
            self.selected_user = user

    def close_details(self) -> None:
        self.selected_user = None


class UserDashboard(Dashboard):
    role = "user"

    def __init__(self, gateway: BankGateway):
        super().__init__(gateway)
        self.profile: Optional[Dict[str, Any]] = None
        self.transactions: List[Dict[str, Any]] = []

    @property
    def balance(self) -> Optional[float]:
        return self.profile["balance"] if self.profile else None

    async def load(self) -> None:
        if self.ensure_session():
            await self.refresh()

    async def refresh(self) -> None:
        profile = await self._run(self.gateway.me, "Failed to load profile")
        if profile is None:
            return
        self.profile = profile
        transactions = await self._run(self.gateway.history, "Failed to load history")
        if transactions is not None:
            self.transactions = transactions

    async def _mutate(self, call: Callable[[], Awaitable[Dict[str, Any]]], fallback: str) -> bool:
        result = await self._run(call, fallback)
        if result is None:
            return False
        await self.refresh()
        # a failed refresh keeps its own message
        if not self.message:
            self.message = result.get("message", "")
        return True

    async def deposit(self, amount) -> bool:
        return await self._mutate(lambda: self.gateway.deposit(amount), "Deposit failed")

    async def withdraw(self, amount) -> bool:
        return await self._mutate(lambda: self.gateway.withdraw(amount), "Withdrawal failed")

    async def transfer(self, to_phone: str, amount) -> bool:
        return await self._mutate(lambda: self.gateway.transfer(to_phone, amount), "Transfer failed")

"""
bank_portal/client

Programmatic client for the bank portal API:
- session.py: ClientSession (token + profile, cleared on logout/401)
- gateway.py: BankGateway (httpx, bearer token, 401 -> logout)
- dashboards.py: admin / employee / customer dashboard state
"""

from .dashboards import AdminDashboard, EmployeeDashboard, UserDashboard  # noqa: F401
from .gateway import ApiError, BankGateway, NetworkError, UnauthorizedError  # noqa: F401
from .session import ClientSession  # noqa: F401

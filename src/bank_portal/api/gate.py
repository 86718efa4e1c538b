"""
Authentication gate.

One HTTP middleware checks every request against ROUTE_POLICY before it is
dispatched: the first matching path prefix decides which role is required
(None means public). A missing or bad token on a protected path is answered
with 401, a token for the wrong role with 403, and the route never runs.
"""

from typing import List, Optional, Tuple

from fastapi.responses import JSONResponse
from starlette.requests import Request

from ..errors import BankError, Forbidden
from ..logging_config import get_logger
from ..security import decode_token, extract_bearer

logger = get_logger("bank_portal.api.gate")

ROUTE_POLICY: List[Tuple[str, Optional[str]]] = [
    ("/api/users/register", None),
    ("/api/users/login", None),
    ("/api/admin/login", None),
    ("/api/employee/login", None),
    ("/api/users", "user"),
    ("/api/admin", "admin"),
    ("/api/employee", "employee"),
]


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def required_role(path: str) -> Optional[str]:
    for prefix, role in ROUTE_POLICY:
        if _matches(path, prefix):
            return role
    return None


async def auth_gate(request: Request, call_next):
    role = required_role(request.url.path)
    if role is None or request.method == "OPTIONS":
        return await call_next(request)

    try:
        principal = decode_token(extract_bearer(request.headers.get("Authorization")))
        if principal.role != role:
            raise Forbidden("Access denied")
    except BankError as e:
        logger.warning(
            "Gate rejected %s %s status=%s reason=%s",
            request.method,
            request.url.path,
            e.status_code,
            e.message,
        )
        return JSONResponse(status_code=e.status_code, content={"message": e.message})

    request.state.principal = principal
    return await call_next(request)

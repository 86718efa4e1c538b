from decimal import Decimal
from typing import Any, Dict, Optional

from ..db.models import Admin, Employee, Transaction, User


def _money(value: Optional[Decimal]) -> float:
    return float(value) if value is not None else 0.0


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def serialize_user(u: User) -> Dict[str, Any]:
    return {
        "id": str(u.user_id),
        "name": u.name,
        "phone": u.phone,
        "aadhaar": u.aadhaar,
        "accountType": u.account_type,
        "balance": _money(u.balance),
        "createdAt": _iso(u.created_at),
    }


def serialize_employee(e: Employee) -> Dict[str, Any]:
    return {
        "id": str(e.employee_id),
        "name": e.name,
        "phone": e.phone,
        "aadhaar": e.aadhaar,
        "createdAt": _iso(e.created_at),
    }


def serialize_admin(a: Admin) -> Dict[str, Any]:
    return {
        "id": str(a.admin_id),
        "phone": a.phone,
    }


def serialize_tx(t: Transaction) -> Dict[str, Any]:
    return {
        "id": str(t.transaction_id),
        "reference": t.reference,
        "type": t.transaction_type,
        "entryType": t.entry_type,
        "amount": _money(t.amount),
        "counterparty": t.counterparty_phone,
        "resultingBalance": _money(t.balance_after),
        "timestamp": _iso(t.created_at),
    }

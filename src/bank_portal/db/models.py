from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, Index, Integer, Numeric, String, TIMESTAMP, Uuid

from .session import Base


def utcnow() -> datetime:
    # stored as naive UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    user_id = Column(Uuid, primary_key=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False)
    aadhaar = Column(String(12), nullable=False)
    password_hash = Column(String(255), nullable=False)
    account_type = Column(String(20), nullable=False, default="savings")
    balance = Column(Numeric(15, 2), nullable=False, default=0)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)


class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(Uuid, primary_key=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20), unique=True, nullable=False)
    aadhaar = Column(String(12), nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)


class Admin(Base):
    __tablename__ = "admins"

    admin_id = Column(Uuid, primary_key=True)
    phone = Column(String(20), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)


class Transaction(Base):
    __tablename__ = "transactions"

    # Monotonic row id; keeps history ordering stable within one timestamp
    seq = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(Uuid, unique=True, nullable=False)
    reference = Column(String(32), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.user_id"), nullable=False)
    transaction_type = Column(String(20), nullable=False)
    entry_type = Column(String(10), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    counterparty_id = Column(Uuid, ForeignKey("users.user_id"), nullable=True)
    counterparty_phone = Column(String(20), nullable=True)
    balance_after = Column(Numeric(15, 2), nullable=False)
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)

    __table_args__ = (Index("ix_transactions_user_created", "user_id", "created_at"),)

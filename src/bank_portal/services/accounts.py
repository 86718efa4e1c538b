"""
Account mutation service: deposit, withdraw and transfer.

Every balance change is a conditional UPDATE executed by the database, so two
requests racing on the same account cannot overwrite each other, and a
transfer's debit and credit commit or roll back together.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ..db.crud import get_user_by_id, get_user_by_phone, parse_uuid
from ..db.models import Transaction, User, utcnow
from ..db.session import atomic
from ..errors import (
    BalanceLimitExceeded,
    InsufficientFunds,
    InvalidAmount,
    NotFound,
    RecipientNotFound,
    SelfTransfer,
    ValidationError,
)
from ..logging_config import get_logger

logger = get_logger("bank_portal.services.accounts")

CENT = Decimal("0.01")
# Largest value a Numeric(15, 2) balance column can hold
MAX_BALANCE = Decimal("9999999999999.99")


@dataclass
class MutationResult:
    """Outcome of a successful balance change for the acting user."""

    balance: Decimal
    transaction: Transaction
    counterpart: Optional[Transaction] = None


def normalize_amount(value) -> Decimal:
    """
    Parse a request amount into a positive Decimal with two places.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Amount is required")
    try:
        amount = Decimal(str(value))
        if not amount.is_finite():
            raise ValidationError("Amount must be a number")
        if amount > MAX_BALANCE:
            raise ValidationError("Amount exceeds the maximum allowed")
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError):
        raise ValidationError("Amount must be a number")
    if amount <= 0:
        raise InvalidAmount()
    return amount


def new_reference() -> str:
    return f"TXN{uuid4().hex[:10].upper()}"


def opening_entry(user: User, amount: Decimal) -> Transaction:
    """Deposit record for the balance a user registers with."""
    return _entry(user.user_id, "deposit", "credit", amount, amount, new_reference())


def _entry(
    user_id: UUID,
    transaction_type: str,
    entry_type: str,
    amount: Decimal,
    balance_after: Decimal,
    reference: str,
    counterparty: Optional[User] = None,
) -> Transaction:
    return Transaction(
        transaction_id=uuid4(),
        reference=reference,
        user_id=user_id,
        transaction_type=transaction_type,
        entry_type=entry_type,
        amount=amount,
        counterparty_id=counterparty.user_id if counterparty is not None else None,
        counterparty_phone=counterparty.phone if counterparty is not None else None,
        balance_after=balance_after,
        created_at=utcnow(),
    )


async def _balance_of(db: AsyncSession, user_id: UUID) -> Decimal:
    res = await db.execute(select(User.balance).where(User.user_id == user_id))
    return Decimal(res.scalar_one()).quantize(CENT)


async def _credit(db: AsyncSession, user_id: UUID, amount: Decimal) -> int:
    # 0 rows when the user is missing or the balance would pass MAX_BALANCE
    res = await db.execute(
        update(User)
        .where(User.user_id == user_id, User.balance <= MAX_BALANCE - amount)
        .values(balance=User.balance + amount)
        .execution_options(synchronize_session=False)
    )
    return res.rowcount


async def _debit(db: AsyncSession, user_id: UUID, amount: Decimal) -> int:
    # Only matches when the funds are there; 0 rows means insufficient balance
    res = await db.execute(
        update(User)
        .where(User.user_id == user_id, User.balance >= amount)
        .values(balance=User.balance - amount)
        .execution_options(synchronize_session=False)
    )
    return res.rowcount


async def deposit(db: AsyncSession, user_id, amount) -> MutationResult:
    amount = normalize_amount(amount)
    uid = parse_uuid(user_id)
    if uid is None:
        raise NotFound("User not found")

    async with atomic(db):
        if await _credit(db, uid, amount) == 0:
            if await get_user_by_id(db, uid) is None:
                raise NotFound("User not found")
            logger.warning("Deposit refused - balance limit user_id=%s amount=%s", uid, amount)
            raise BalanceLimitExceeded()
        balance = await _balance_of(db, uid)
        tx = _entry(uid, "deposit", "credit", amount, balance, new_reference())
        db.add(tx)

    logger.info("Deposit user_id=%s amount=%s balance=%s ref=%s", uid, amount, balance, tx.reference)
    return MutationResult(balance=balance, transaction=tx)


async def withdraw(db: AsyncSession, user_id, amount) -> MutationResult:
    amount = normalize_amount(amount)
    uid = parse_uuid(user_id)
    if uid is None:
        raise NotFound("User not found")

    async with atomic(db):
        if await _debit(db, uid, amount) == 0:
            if await get_user_by_id(db, uid) is None:
                raise NotFound("User not found")
            logger.warning("Withdraw refused - insufficient funds user_id=%s amount=%s", uid, amount)
            raise InsufficientFunds()
        balance = await _balance_of(db, uid)
        tx = _entry(uid, "withdraw", "debit", amount, balance, new_reference())
        db.add(tx)

    logger.info("Withdraw user_id=%s amount=%s balance=%s ref=%s", uid, amount, balance, tx.reference)
    return MutationResult(balance=balance, transaction=tx)


async def transfer(db: AsyncSession, from_user_id, to_phone: str, amount) -> MutationResult:
    """
    Move funds from one user to the user owning ``to_phone``.

    Both legs run inside one database transaction with the two rows locked in
    a fixed order, so the caller sees a single success or failure.
    """
    to_phone = (to_phone or "").strip()
    if not to_phone:
        raise ValidationError("Recipient phone is required")
    uid = parse_uuid(from_user_id)
    if uid is None:
        raise NotFound("User not found")

    async with atomic(db):
        sender = await get_user_by_id(db, uid)
        if sender is None:
            raise NotFound("User not found")
        recipient = await get_user_by_phone(db, to_phone)
        if recipient is None:
            raise RecipientNotFound()
        if recipient.user_id == sender.user_id:
            raise SelfTransfer()
        amount = normalize_amount(amount)

        # Lock both rows in id order so opposing transfers cannot deadlock
        for locked_id in sorted((sender.user_id, recipient.user_id), key=str):
            await db.execute(select(User.user_id).where(User.user_id == locked_id).with_for_update())

        if await _debit(db, sender.user_id, amount) == 0:
            logger.warning(
                "Transfer refused - insufficient funds from=%s to=%s amount=%s",
                sender.user_id,
                recipient.phone,
                amount,
            )
            raise InsufficientFunds()
        if await _credit(db, recipient.user_id, amount) == 0:
            logger.warning(
                "Transfer refused - recipient balance limit to=%s amount=%s",
                recipient.user_id,
                amount,
            )
            raise BalanceLimitExceeded("Recipient balance limit exceeded")

        sender_balance = await _balance_of(db, sender.user_id)
        recipient_balance = await _balance_of(db, recipient.user_id)
        ref = new_reference()
        debit_tx = _entry(sender.user_id, "transfer", "debit", amount, sender_balance, ref, recipient)
        credit_tx = _entry(recipient.user_id, "transfer", "credit", amount, recipient_balance, ref, sender)
        db.add_all([debit_tx, credit_tx])

    logger.info(
        "Transfer success ref=%s from=%s to=%s amount=%s",
        ref,
        sender.user_id,
        recipient.user_id,
        amount,
    )
    return MutationResult(balance=sender_balance, transaction=debit_tx, counterpart=credit_tx)

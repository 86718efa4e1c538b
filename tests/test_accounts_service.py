import asyncio
import unittest
from decimal import Decimal

from support import DatabaseTestCase

from bank_portal.db import crud
from bank_portal.errors import (
    BalanceLimitExceeded,
    InsufficientFunds,
    InvalidAmount,
    NotFound,
    RecipientNotFound,
    SelfTransfer,
    ValidationError,
)
from bank_portal.services import accounts


class NormalizeAmountTest(unittest.TestCase):
    def test_quantizes_to_cents(self):
        self.assertEqual(accounts.normalize_amount("10.005"), Decimal("10.01"))
        self.assertEqual(accounts.normalize_amount(7), Decimal("7.00"))

    def test_rejects_non_positive(self):
        for value in (0, -1, "-0.50", "0.001"):
            with self.assertRaises(InvalidAmount, msg=value):
                accounts.normalize_amount(value)

    def test_rejects_non_numbers(self):
        for value in (None, "abc", True, "NaN", "Infinity"):
            with self.assertRaises(ValidationError, msg=value):
                accounts.normalize_amount(value)


class DepositWithdrawTest(DatabaseTestCase):
    async def test_deposit_increases_balance_and_records_once(self):
        user = await self.make_user(balance=1000)
        async with self.db() as db:
            result = await accounts.deposit(db, user.user_id, 500)
        self.assertEqual(result.balance, Decimal("1500.00"))
        self.assertEqual(result.transaction.transaction_type, "deposit")
        self.assertEqual(result.transaction.entry_type, "credit")
        self.assertEqual(result.transaction.balance_after, Decimal("1500.00"))
        self.assertEqual(await self.balance_of(user.user_id), Decimal("1500.00"))

        async with self.db() as db:
            txs = await crud.get_transactions_for_user(db, user.user_id)
        # opening deposit + this one
        self.assertEqual(len(txs), 2)

    async def test_deposit_rejects_non_positive_amount(self):
        user = await self.make_user(balance=100)
        async with self.db() as db:
            with self.assertRaises(InvalidAmount):
                await accounts.deposit(db, user.user_id, 0)
        self.assertEqual(await self.balance_of(user.user_id), Decimal("100.00"))

    async def test_deposit_unknown_user(self):
        async with self.db() as db:
            with self.assertRaises(NotFound):
                await accounts.deposit(db, "3f1c2f0e-0000-4000-8000-000000000000", 10)
            with self.assertRaises(NotFound):
                await accounts.deposit(db, "not-a-uuid", 10)

    async def test_withdraw_more_than_balance_leaves_it_unchanged(self):
        user = await self.make_user(balance=1000)
        async with self.db() as db:
            with self.assertRaises(InsufficientFunds):
                await accounts.withdraw(db, user.user_id, 1500)
        self.assertEqual(await self.balance_of(user.user_id), Decimal("1000.00"))
        async with self.db() as db:
            self.assertEqual(len(await crud.get_transactions_for_user(db, user.user_id)), 1)

    async def test_withdraw_exact_balance_reaches_zero(self):
        user = await self.make_user(balance=250)
        async with self.db() as db:
            result = await accounts.withdraw(db, user.user_id, "250")
        self.assertEqual(result.balance, Decimal("0.00"))
        self.assertEqual(result.transaction.entry_type, "debit")

    async def test_withdraw_rejects_negative_amount(self):
        user = await self.make_user(balance=250)
        async with self.db() as db:
            with self.assertRaises(InvalidAmount):
                await accounts.withdraw(db, user.user_id, -10)


class TransferTest(DatabaseTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.alice = await self.make_user(phone="9000000001", balance=1000, name="Alice")
        self.bob = await self.make_user(phone="9000000002", balance=200, name="Bob")

    async def test_transfer_moves_funds_and_conserves_total(self):
        async with self.db() as db:
            result = await accounts.transfer(db, self.alice.user_id, "9000000002", 500)

        self.assertEqual(result.balance, Decimal("500.00"))
        self.assertEqual(await self.balance_of(self.alice.user_id), Decimal("500.00"))
        self.assertEqual(await self.balance_of(self.bob.user_id), Decimal("700.00"))

        debit, credit = result.transaction, result.counterpart
        self.assertEqual(debit.entry_type, "debit")
        self.assertEqual(credit.entry_type, "credit")
        self.assertEqual(debit.reference, credit.reference)
        self.assertEqual(debit.counterparty_phone, "9000000002")
        self.assertEqual(credit.counterparty_phone, "9000000001")
        self.assertEqual(credit.balance_after, Decimal("700.00"))

    async def test_self_transfer_fails_regardless_of_amount(self):
        for amount in (100, 0, -5, 10_000, "abc"):
            async with self.db() as db:
                with self.assertRaises(SelfTransfer, msg=amount):
                    await accounts.transfer(db, self.alice.user_id, "9000000001", amount)
        self.assertEqual(await self.balance_of(self.alice.user_id), Decimal("1000.00"))

    async def test_unknown_recipient(self):
        async with self.db() as db:
            with self.assertRaises(RecipientNotFound):
                await accounts.transfer(db, self.alice.user_id, "9111111111", 10)

    async def test_missing_recipient_phone(self):
        async with self.db() as db:
            with self.assertRaises(ValidationError):
                await accounts.transfer(db, self.alice.user_id, "  ", 10)

    async def test_insufficient_funds_touches_neither_account(self):
        async with self.db() as db:
            with self.assertRaises(InsufficientFunds):
                await accounts.transfer(db, self.bob.user_id, "9000000001", 500)
        self.assertEqual(await self.balance_of(self.alice.user_id), Decimal("1000.00"))
        self.assertEqual(await self.balance_of(self.bob.user_id), Decimal("200.00"))
        async with self.db() as db:
            self.assertEqual(len(await crud.get_transactions_for_user(db, self.bob.user_id)), 1)

    async def test_invalid_amount(self):
        async with self.db() as db:
            with self.assertRaises(InvalidAmount):
                await accounts.transfer(db, self.alice.user_id, "9000000002", 0)


class AmountLimitTest(DatabaseTestCase):
    async def test_huge_amount_is_a_validation_error(self):
        for value in ("1e100", 1e100, "10000000000000"):
            with self.assertRaises(ValidationError, msg=value):
                accounts.normalize_amount(value)
        self.assertEqual(accounts.normalize_amount(accounts.MAX_BALANCE), accounts.MAX_BALANCE)

    async def test_deposit_cannot_push_balance_past_limit(self):
        user = await self.make_user(balance=accounts.MAX_BALANCE - 10)
        async with self.db() as db:
            with self.assertRaises(BalanceLimitExceeded):
                await accounts.deposit(db, user.user_id, 20)
        self.assertEqual(await self.balance_of(user.user_id), accounts.MAX_BALANCE - 10)

        async with self.db() as db:
            result = await accounts.deposit(db, user.user_id, 10)
        self.assertEqual(result.balance, accounts.MAX_BALANCE)

    async def test_transfer_to_full_account_rolls_back_debit(self):
        rich = await self.make_user(phone="9000000001", balance=accounts.MAX_BALANCE)
        payer = await self.make_user(phone="9000000002", balance=500)
        async with self.db() as db:
            with self.assertRaises(BalanceLimitExceeded):
                await accounts.transfer(db, payer.user_id, "9000000001", 100)
        self.assertEqual(await self.balance_of(payer.user_id), Decimal("500.00"))
        self.assertEqual(await self.balance_of(rich.user_id), accounts.MAX_BALANCE)
        async with self.db() as db:
            self.assertEqual(len(await crud.get_transactions_for_user(db, payer.user_id)), 1)


class ConcurrentMutationTest(DatabaseTestCase):
    async def _attempt(self, call, *args):
        async with self.db() as db:
            try:
                await call(db, *args)
            except InsufficientFunds:
                return "InsufficientFunds"
        return "ok"

    async def test_concurrent_withdrawals_cannot_overdraw(self):
        user = await self.make_user(balance=1000)
        outcomes = await asyncio.gather(
            self._attempt(accounts.withdraw, user.user_id, 600),
            self._attempt(accounts.withdraw, user.user_id, 600),
        )
        self.assertEqual(sorted(outcomes), ["InsufficientFunds", "ok"])
        self.assertEqual(await self.balance_of(user.user_id), Decimal("400.00"))

    async def test_concurrent_deposits_are_not_lost(self):
        user = await self.make_user(balance=100)
        await asyncio.gather(*(self._attempt(accounts.deposit, user.user_id, 10) for _ in range(5)))
        self.assertEqual(await self.balance_of(user.user_id), Decimal("150.00"))

    async def test_opposing_transfers_conserve_total(self):
        alice = await self.make_user(phone="9000000001", balance=1000)
        bob = await self.make_user(phone="9000000002", balance=200)
        outcomes = await asyncio.gather(
            self._attempt(accounts.transfer, alice.user_id, "9000000002", 500),
            self._attempt(accounts.transfer, bob.user_id, "9000000001", 100),
        )
        self.assertEqual(outcomes, ["ok", "ok"])
        self.assertEqual(await self.balance_of(alice.user_id), Decimal("600.00"))
        self.assertEqual(await self.balance_of(bob.user_id), Decimal("600.00"))

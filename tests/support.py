import shutil
import tempfile
import unittest
from decimal import Decimal

import httpx

from bank_portal.app import create_app
from bank_portal.db import session as db_session
from bank_portal.services import identity, management


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh SQLite file database per test."""

    async def asyncSetUp(self):
        self.tmpdir = tempfile.mkdtemp(prefix="bank_portal_db_")
        self.db_url = f"sqlite+aiosqlite:///{self.tmpdir}/test.db"
        db_session.configure_engine(self.db_url, echo=False)
        await db_session.create_all()

    async def asyncTearDown(self):
        await db_session.dispose_engine()
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def db(self):
        return db_session.get_sessionmaker()()

    async def make_user(self, phone="9000000001", balance=0, name="Asha", password="secret"):
        async with self.db() as db:
            user = await identity.register_user(
                db,
                name=name,
                phone=phone,
                aadhaar="123412341234",
                password=password,
                initial_deposit=Decimal(str(balance)) if balance else None,
            )
        return user

    async def balance_of(self, user_id) -> Decimal:
        async with self.db() as db:
            user = await management.get_user_details(db, user_id)
            return user.balance


class ApiTestCase(DatabaseTestCase):
    """Drives the ASGI app in-process."""

    raise_app_exceptions = True

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.app = create_app()
        self.client = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=self.app, raise_app_exceptions=self.raise_app_exceptions),
            base_url="http://test",
        )

    async def asyncTearDown(self):
        await self.client.aclose()
        await super().asyncTearDown()

    @staticmethod
    def bearer(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    async def register_and_login(self, phone="9000000001", balance=0, password="secret", name="Asha"):
        body = {
            "name": name,
            "phone": phone,
            "aadhaar": "123412341234",
            "password": password,
        }
        if balance:
            body["initialDeposit"] = balance
        res = await self.client.post("/api/users/register", json=body)
        self.assertEqual(res.status_code, 201, res.text)
        res = await self.client.post("/api/users/login", json={"phone": phone, "password": password})
        self.assertEqual(res.status_code, 200, res.text)
        return res.json()["token"], res.json()["user"]

    async def admin_token(self) -> str:
        async with self.db() as db:
            await management.seed_admin(db)
        res = await self.client.post("/api/admin/login", json={"phone": "8888888888", "password": "admin@123"})
        self.assertEqual(res.status_code, 200, res.text)
        return res.json()["token"]

    async def employee_token(self, phone="7000000001", password="staffpw") -> str:
        async with self.db() as db:
            await management.create_employee(db, "Ravi", phone, "999988887777", password)
        res = await self.client.post("/api/employee/login", json={"phone": phone, "password": password})
        self.assertEqual(res.status_code, 200, res.text)
        return res.json()["token"]

import os
import tempfile

# Settings are read once per process; pin them before anything asks.
_TMP = tempfile.mkdtemp(prefix="bank_portal_tests_")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP}/default.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["ADMIN_PHONE"] = "8888888888"
os.environ["ADMIN_PASSWORD"] = "admin@123"
os.environ["LOG_DIR"] = _TMP
os.environ["APP_ENV"] = "test"

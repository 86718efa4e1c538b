"""
bank_portal/app.py

FastAPI application entrypoint for the bank portal.

This module wires together:
- Logging configuration (file-based under logs/)
- CORS, request logging and the auth gate middleware
- Error handlers that turn every failure into {"message": ...}
- Routers under api/ (users, admin, employee)
- Startup: table creation and predefined admin seeding
"""

import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.requests import Request

from .api.admin import router as admin_router
from .api.employee import router as employee_router
from .api.gate import auth_gate
from .api.users import router as users_router
from .config import get_settings
from .db import session as db_session
from .errors import BankError
from .logging_config import get_logger, setup_logging
from .services.management import seed_admin

logger = get_logger("bank_portal")


async def log_requests(request: Request, call_next):
    """
    Lightweight request logger. Bodies are not logged; they carry passwords.
    """
    response = await call_next(request)
    logger.info(
        "HTTP %s %s from %s -> %s",
        request.method,
        request.url.path,
        request.client.host if request.client else "?",
        response.status_code,
    )
    return response


async def bank_error_handler(request: Request, exc: BankError):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.warning("Validation failed %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content={"message": message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"message": message}, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Bank Portal API", version="1.0.0")

    # Registration order matters: the last one added runs first, so CORS
    # answers preflights before the gate sees them.
    app.middleware("http")(auth_gate)
    app.middleware("http")(log_requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
        allow_credentials=True,
    )

    app.add_exception_handler(BankError, bank_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    @app.get("/health")
    async def health():
        """
        Liveness probe.
        """
        return {"status": "ok", "env": settings.app_env}

    app.include_router(users_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(employee_router, prefix="/api")

    @app.on_event("startup")
    async def on_startup():
        setup_logging()
        logger.info("Bank portal starting up (env=%s)", settings.app_env)
        await db_session.create_all()
        try:
            async with db_session.get_sessionmaker()() as db:
                await seed_admin(db, settings)
        except Exception:
            logger.exception("Admin seed failed; continuing startup")

    @app.on_event("shutdown")
    async def on_shutdown():
        try:
            await db_session.dispose_engine()
        except Exception:
            logger.exception("Error disposing engine on shutdown")
        logger.info("Bank portal shutting down")

    return app


def main() -> None:
    settings = get_settings()
    uvicorn.run("bank_portal.app:create_app", factory=True, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()

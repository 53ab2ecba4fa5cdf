# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from pydantic import BaseModel, field_validator

from opadmin.auth.passwords import PasswordHasher
from opadmin.auth.session import COOKIE_NAME, SessionSigner
from opadmin.config import Settings
from opadmin.errors import OpAdminError
from opadmin.infra.db import create_engine, create_session_maker, init_models
from opadmin.logs import setup_logging
from opadmin.permissions import CurrentAdmin, accounts, cookie_settings, require_admin
from opadmin.services.account_service import AccountService, PasswordMailer
from opadmin.services.mail_service import Mailer

API_PREFIX = "/api/operational-admin"


class RegisterIn(BaseModel):
    name: str
    email: str

    @field_validator("name", "email")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v


class SendPasswordIn(BaseModel):
    email: str


class LoginIn(BaseModel):
    email: str
    password: str


def create_app(settings: Settings, *, mailer: Optional[PasswordMailer] = None) -> FastAPI:
    """Build the application around explicit settings.

    ``mailer`` defaults to SMTP delivery configured from ``settings.smtp``.
    """
    engine = create_engine(settings.database_url)
    service = AccountService(
        create_session_maker(engine),
        hasher=PasswordHasher(time_cost=settings.hash_time_cost),
        signer=SessionSigner(settings.secret_key, salt=settings.session_salt, max_age=settings.session_max_age),
        mailer=mailer if mailer is not None else Mailer(settings.smtp),
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await init_models(engine)
        logger.info("Operational admin service started")
        try:
            yield
        finally:
            await engine.dispose()
            logger.info("Operational admin service stopped")

    app = FastAPI(title="opadmin", lifespan=lifespan)
    app.state.accounts = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    # ------------------ Routes ------------------

    @app.get("/", response_class=PlainTextResponse)
    def home():
        return "Welcome to the operational admin service"

    @app.post(f"{API_PREFIX}/register")
    async def register(body: RegisterIn, svc: AccountService = Depends(accounts)):
        admin = await svc.register(name=body.name, email=body.email)
        return JSONResponse(
            status_code=201,
            content={"message": "Operational Admin registered successfully", "operationalAdmin": admin.public()},
        )

    @app.post(f"{API_PREFIX}/send-password")
    async def send_password(body: SendPasswordIn, svc: AccountService = Depends(accounts)):
        await svc.send_password(body.email)
        return {"message": "Password sent to your email"}

    @app.post(f"{API_PREFIX}/login")
    async def login(body: LoginIn, svc: AccountService = Depends(accounts)):
        token, admin = await svc.login(body.email, body.password)
        resp = JSONResponse(
            content={
                "message": "Login successful",
                "token": token,
                "admin": {"name": admin.name, "email": admin.email},
            }
        )
        resp.set_cookie(COOKIE_NAME, token, max_age=settings.session_max_age, **cookie_settings(settings))
        return resp

    @app.get(f"{API_PREFIX}/dashboard")
    async def dashboard(current: CurrentAdmin = Depends(require_admin)):
        return {"name": current.admin.name, "email": current.admin.email, "token": current.token}

    @app.post(f"{API_PREFIX}/logout")
    async def logout():
        # Client-side only: the token itself stays valid until it expires.
        resp = JSONResponse(content={"message": "Logged out successfully"})
        resp.delete_cookie(COOKIE_NAME, **cookie_settings(settings))
        return resp

    return app


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(OpAdminError)
    async def _opadmin_error(request: Request, exc: OpAdminError):
        if exc.status_code >= 500:
            logger.opt(exception=exc.__cause__ or exc).error(
                "{} on {} {}", type(exc).__name__, request.method, request.url.path
            )
        return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        fields = sorted({".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()})
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request body", "fields": [f for f in fields if f]},
        )

    @app.exception_handler(Exception)
    async def _unexpected_error(request: Request, exc: Exception):
        logger.opt(exception=exc).error("Unhandled error on {} {}", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"message": "Internal server error"})


def app_from_env() -> FastAPI:
    """uvicorn factory: reads configuration and fails fast when it is incomplete."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    return create_app(settings)

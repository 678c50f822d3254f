"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.delivery.router import ChannelRouter
from infrastructure.email.zeptomail import ZeptoMailProvider
from infrastructure.http_client import HttpClient
from infrastructure.sms.msg91 import Msg91SmsProvider
from infrastructure.store.indexes import ensure_indexes
from infrastructure.store.mongo import MongoRecordStore
from routes.health_routes import router as health_router
from routes.otp_routes import router as otp_router
from routes.user_routes import router as user_router
from services.otp_service import OtpService
from services.user_service import UserService
from shared.logging import setup_logging


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging, env=settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(settings.db.mongodb_uri)
        db = mongo_client[settings.db.db_name]
        app.state.db = db

        await ensure_indexes(db, settings.db)

        def store_for(collection_name: str) -> MongoRecordStore:
            return MongoRecordStore(
                db[collection_name],
                max_retries=settings.db.store_max_retries,
                retry_base_delay=settings.db.store_retry_base_delay,
            )

        http_client = HttpClient(timeout=settings.http_timeout_seconds)
        gateway = ChannelRouter(
            sms=Msg91SmsProvider(settings.sms, http_client),
            email=ZeptoMailProvider(
                settings.email,
                http_client,
                otp_ttl_seconds=settings.otp.otp_ttl_seconds,
            ),
        )
        app.state.otp_gateway = gateway
        app.state.otp_service = OtpService(
            store_for(settings.db.otps_collection), gateway, settings.otp
        )
        app.state.user_service = UserService(store_for(settings.db.users_collection))

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await http_client.aclose()
        await mongo_client.close()

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(otp_router)
    app.include_router(user_router)

    return app

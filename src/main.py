"""Convos API: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.app_config.routes import router as app_config_router
from src.attachments.routes import router as attachments_router
from src.auth.routes import router as auth_router
from src.config.cors import SecurityHeadersMiddleware, configure_cors
from src.config.logging import configure_logging
from src.config.settings import get_settings
from src.db.client import init_db
from src.devices.routes import router as devices_router
from src.identities.routes import router as identities_router
from src.metadata.routes import router as metadata_router
from src.middleware.error_handler import register_error_handlers
from src.middleware.request_id import RequestIDMiddleware
from src.notifications.client import get_notification_client
from src.notifications.expo import get_push_client
from src.notifications.routes import router as notifications_router
from src.profiles.public_routes import router as public_profiles_router
from src.profiles.routes import router as profiles_router
from src.users.routes import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    init_db()
    logger.info("Convos API started (env=%s)", settings.ENV)
    yield
    await get_notification_client().aclose()
    await get_push_client().aclose()


app = FastAPI(
    title="Convos API",
    description=(
        "Backend for the Convos messaging app.\n\n"
        "## Features\n"
        "- Installation-signed authentication issuing short-lived JWTs\n"
        "- Users, devices and device identities with ownership enforcement\n"
        "- Profiles with username uniqueness, search and public lookups\n"
        "- Per-identity conversation metadata\n"
        "- Push registration with the XMTP notification service and Expo delivery\n"
        "- Presigned attachment uploads\n\n"
        "## Authentication\n"
        "All endpoints except `/health`, `/api/v1/app-config`, `/api/v1/authenticate`, "
        "`/api/v1/public/*` and the notification webhook require the "
        "`X-Convos-AuthToken: <jwt>` header."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Health", "description": "Health check endpoints"},
        {"name": "App Config", "description": "Minimum supported app versions"},
        {"name": "Auth", "description": "Exchange an installation signature for an auth token"},
        {"name": "Users", "description": "User onboarding and the current user"},
        {"name": "Devices", "description": "Devices of a user"},
        {"name": "Identities", "description": "Device identities and their device links"},
        {"name": "Profiles", "description": "Profiles, search and username checks"},
        {"name": "Public Profiles", "description": "Unauthenticated profile lookups"},
        {"name": "Metadata", "description": "Per-identity conversation flags"},
        {"name": "Notifications", "description": "Push registration and the XMTP webhook"},
        {"name": "Attachments", "description": "Presigned upload URLs"},
    ],
)

# --- Middleware (order matters: outermost first) ---
app.add_middleware(RequestIDMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
configure_cors(app)

# --- Error handlers ---
register_error_handlers(app)

# --- Routes ---
app.include_router(app_config_router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(devices_router)
app.include_router(identities_router)
app.include_router(profiles_router)
app.include_router(public_profiles_router)
app.include_router(metadata_router)
app.include_router(notifications_router)
app.include_router(attachments_router)


@app.get("/health", tags=["Health"], summary="Health check", description="Returns OK if the service is running.")
async def health_check():
    return {"status": "ok"}

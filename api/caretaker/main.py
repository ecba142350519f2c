"""
FastAPI application entrypoint.

Registers routers, configures CORS, initializes telemetry,
and creates service instances on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from caretaker.core.config import Settings, get_settings
from caretaker.core.storage import InMemoryStore, JsonFileStore, KeyValueStore
from caretaker.core.telemetry import setup_telemetry
from caretaker.routers import audit, bills, chat, content, health
from caretaker.services.audit import AuditLog
from caretaker.services.bills import BillAssistant
from caretaker.services.extraction import AppointmentExtractor
from caretaker.services.foundry_client import (
    ConfigurationError,
    FoundryClient,
    GatewayError,
)
from caretaker.services.safe_chat import SafeChatService

logger = logging.getLogger(__name__)


def build_audit_store(settings: Settings) -> KeyValueStore:
    """File-backed store when AUDIT_LOG_PATH is set, otherwise in-memory."""
    if settings.audit_log_path:
        return JsonFileStore(settings.audit_log_path)
    return InMemoryStore()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """
    Application lifespan handler.
    Initializes service clients on startup.
    """
    settings = get_settings()

    # Configure logging
    logging.basicConfig(level=settings.log_level)

    # Initialize telemetry
    setup_telemetry(settings.applicationinsights_connection_string)

    # Initialize services
    gateway = FoundryClient(settings)
    audit_log = AuditLog(build_audit_store(settings))

    # Store in app state for dependency injection
    application.state.gateway = gateway
    application.state.audit_log = audit_log
    application.state.safe_chat = SafeChatService(gateway, audit_log)
    application.state.extractor = AppointmentExtractor(gateway)
    application.state.bill_assistant = BillAssistant(gateway)

    logger.info("Caretaker AI API started.")
    yield
    logger.info("Caretaker AI API shutting down.")


app = FastAPI(
    title="Caretaker AI API",
    description="Safety-mediated AI assistance for medications, appointments and bills.",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("AI service misconfigured: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "The AI service is not configured. Check environment configuration."},
    )


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    logger.error("AI request failed: %s", exc)
    return JSONResponse(
        status_code=502,
        content={"detail": "The AI service is not responding right now. Please try again in a moment."},
    )


# Register routers
app.include_router(health.router)
app.include_router(chat.router)
app.include_router(content.router)
app.include_router(bills.router)
app.include_router(audit.router)

"""
Health router — GET /health and GET /health/ai.

/health is used by liveness/readiness probes; /health/ai makes one tiny
model call to confirm the Foundry connection is configured and reachable.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from caretaker.models.chat import ChatOptions
from caretaker.services.foundry_client import GatewayError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

CONNECTION_TEST_PROMPT = "You are a helpful assistant. Respond briefly."
CONNECTION_TEST_MESSAGE = 'Say "Hello! AI connection successful." and nothing else.'


@router.get("/health")
async def health_check():
    """Return a simple health status for probes."""
    return {"status": "healthy", "service": "caretaker-ai"}


@router.get("/health/ai")
async def ai_connection_check(request: Request):
    """Confirm the model endpoint answers. Error details stay in the server log."""
    gateway = request.app.state.gateway
    try:
        message = await gateway.simple_chat(
            CONNECTION_TEST_PROMPT,
            CONNECTION_TEST_MESSAGE,
            ChatOptions(max_tokens=32, temperature=0.0),
        )
    except GatewayError:
        logger.exception("AI connection test failed")
        return JSONResponse(
            status_code=503,
            content={
                "success": False,
                "error": "AI connection failed. Check server logs and environment configuration.",
            },
        )
    return {"success": True, "message": message}

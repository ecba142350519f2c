"""
Chat router — POST /chat endpoint.

Runs the user's message through the safe chat pipeline and returns
the text to display.
"""

from fastapi import APIRouter, Depends, Request

from caretaker.models.chat import SafeChatRequest, SafeChatResult
from caretaker.services.safe_chat import SafeChatService

router = APIRouter(tags=["chat"])


def get_safe_chat(request: Request) -> SafeChatService:
    """
    Dependency injection for the safe chat service.
    Initialized once in main.py and stored in app.state.
    """
    return request.app.state.safe_chat


@router.post("/chat", response_model=SafeChatResult)
async def chat(
    request: SafeChatRequest,
    safe_chat: SafeChatService = Depends(get_safe_chat),
) -> SafeChatResult:
    """
    Ask the Caretaker assistant a question.

    The endpoint:
    1. Answers emergencies with fixed guidance, without calling the model.
    2. Removes personal identifiers before the model sees the message.
    3. Replaces any response that reads as medical advice.
    4. Records a privacy-preserving audit entry.
    """
    return await safe_chat.respond(
        request.message,
        medications=request.medications,
        options=request.options,
    )

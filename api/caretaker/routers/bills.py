"""
Bills router — analysis and follow-up helpers for a pasted bill.

Gateway and configuration errors are turned into calm HTTP errors by the
exception handlers registered in main.py.
"""

from fastapi import APIRouter, Depends, Request

from caretaker.models.bills import (
    BillAnalysis,
    BillFollowUpRequest,
    BillTextRequest,
    BillTextResponse,
)
from caretaker.services.bills import BillAssistant

router = APIRouter(prefix="/bills", tags=["bills"])


def get_bill_assistant(request: Request) -> BillAssistant:
    return request.app.state.bill_assistant


@router.post("/analyze", response_model=BillAnalysis)
async def analyze_bill(
    request: BillTextRequest,
    assistant: BillAssistant = Depends(get_bill_assistant),
) -> BillAnalysis:
    """Summarize a bill and list items worth a closer look."""
    return await assistant.analyze(request.text)


@router.post("/contact-script", response_model=BillTextResponse)
async def contact_script(
    request: BillFollowUpRequest,
    assistant: BillAssistant = Depends(get_bill_assistant),
) -> BillTextResponse:
    text = await assistant.contact_script(request.text, request.analysis)
    return BillTextResponse(text=text)


@router.post("/doctor-questions", response_model=BillTextResponse)
async def doctor_questions(
    request: BillFollowUpRequest,
    assistant: BillAssistant = Depends(get_bill_assistant),
) -> BillTextResponse:
    text = await assistant.doctor_questions(request.text, request.analysis)
    return BillTextResponse(text=text)


@router.post("/scam-check", response_model=BillTextResponse)
async def scam_check(
    request: BillFollowUpRequest,
    assistant: BillAssistant = Depends(get_bill_assistant),
) -> BillTextResponse:
    text = await assistant.scam_check(request.text, request.analysis)
    return BillTextResponse(text=text)

"""
Content router — classify pasted or uploaded content and extract appointments.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from caretaker.models.content import (
    DetectedContent,
    DetectionResponse,
    DetectTextRequest,
    ExtractionResponse,
)
from caretaker.services.content_detector import (
    detect_from_file,
    detect_from_text,
    is_supported,
    requires_ai_extraction,
)
from caretaker.services.extraction import AppointmentExtractor, UnsupportedContentError

router = APIRouter(prefix="/content", tags=["content"])

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def get_extractor(request: Request) -> AppointmentExtractor:
    return request.app.state.extractor


def _detection_response(detected: DetectedContent) -> DetectionResponse:
    return DetectionResponse(
        content=detected,
        supported=is_supported(detected.type),
        requires_ai=requires_ai_extraction(detected.type),
    )


@router.post("/detect", response_model=DetectionResponse)
async def detect_text(request: DetectTextRequest) -> DetectionResponse:
    """Classify pasted text as a calendar file, an email or plain text."""
    return _detection_response(detect_from_text(request.text))


@router.post("/upload", response_model=DetectionResponse)
async def detect_upload(file: UploadFile = File(...)) -> DetectionResponse:
    """Classify an uploaded file by extension and MIME type."""

    async def read() -> bytes:
        contents = await file.read(MAX_UPLOAD_BYTES + 1)
        if len(contents) > MAX_UPLOAD_BYTES:
            raise HTTPException(status_code=413, detail="File too large (max 5MB).")
        return contents

    detected = await detect_from_file(
        file.filename or "", file.content_type or "", read
    )
    return _detection_response(detected)


@router.post("/extract", response_model=ExtractionResponse)
async def extract_appointments(
    request: DetectTextRequest,
    extractor: AppointmentExtractor = Depends(get_extractor),
) -> ExtractionResponse:
    """Detect the content type, then parse or extract appointment details."""
    detected = detect_from_text(request.text)
    try:
        appointments = await extractor.extract_from_content(detected)
    except UnsupportedContentError as exc:
        raise HTTPException(status_code=415, detail=str(exc)) from exc
    return ExtractionResponse(type=detected.type, appointments=appointments)

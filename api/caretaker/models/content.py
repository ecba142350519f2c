"""
Pydantic models for uploaded/pasted content and extracted appointments.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

ContentType = Literal["ics", "text", "email", "image", "pdf", "unknown"]
Confidence = Literal["high", "medium", "low"]

APPOINTMENT_FIELDS = (
    "doctor",
    "specialty",
    "location",
    "address",
    "phone",
    "date",
    "time",
    "reason",
    "notes",
)


class DetectedContent(BaseModel):
    """Classified content, consumed once by the ICS parser or the extractor."""

    model_config = ConfigDict(frozen=True)

    type: ContentType
    content: str = ""
    file_name: str | None = None
    mime_type: str | None = None


class ExtractedAppointment(BaseModel):
    """Partial appointment fields. A value that was not found is None."""

    doctor: str | None = None
    specialty: str | None = None
    location: str | None = None
    address: str | None = None
    phone: str | None = None
    date: str | None = None
    time: str | None = None
    reason: str | None = None
    notes: str | None = None
    confidence: Confidence = "low"

    @field_validator(*APPOINTMENT_FIELDS, mode="before")
    @classmethod
    def _coerce_field(cls, value: Any) -> str | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip() or None
        return None

    @field_validator("confidence", mode="before")
    @classmethod
    def _coerce_confidence(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() in ("high", "medium", "low"):
            return value.strip().lower()
        return "low"


class ParsedIcsEvent(BaseModel):
    """One VEVENT from a calendar file."""

    summary: str | None = None
    location: str | None = None
    description: str | None = None
    start_date: str | None = Field(None, description="ISO date YYYY-MM-DD")
    start_time: str | None = Field(None, description="24h time HH:MM, None for all-day")
    end_date: str | None = None
    end_time: str | None = None
    organizer: str | None = None
    uid: str | None = None


class DetectTextRequest(BaseModel):
    """Request body for POST /content/detect and /content/extract."""

    text: str = Field(..., min_length=1)


class DetectionResponse(BaseModel):
    """Classification plus routing hints."""

    content: DetectedContent
    supported: bool
    requires_ai: bool


class ExtractionResponse(BaseModel):
    """Appointments found in a piece of content."""

    type: ContentType
    appointments: list[ExtractedAppointment] = Field(default_factory=list)

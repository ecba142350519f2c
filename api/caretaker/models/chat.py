"""
Pydantic models for chat completions and the safe chat API contracts.
"""

from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """A single role-tagged message sent to the model."""

    role: Literal["system", "user", "assistant"] = Field(
        ..., description="Message role"
    )
    content: str = Field(..., description="Message content")


class ChatOptions(BaseModel):
    """Generation parameters for a completion call."""

    max_tokens: int = Field(1024, gt=0, description="Maximum output tokens")
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: float = Field(1.0, gt=0.0, le=1.0, description="Nucleus sampling probability")


class TokenUsage(BaseModel):
    """Token counters reported by the endpoint. Missing counters stay None."""

    prompt_tokens: int | None = Field(None, ge=0)
    completion_tokens: int | None = Field(None, ge=0)
    total_tokens: int | None = Field(None, ge=0)


class ChatResult(BaseModel):
    """Raw result of one completion call."""

    content: str = ""
    finish_reason: str | None = None
    usage: TokenUsage | None = None


class MedicationRecord(BaseModel):
    """A stored medication as the caller knows it (may hold private fields)."""

    name: str
    dose: str
    frequency: str | None = None
    doctor: str | None = None
    notes: str | None = None


class SanitizedMedication(BaseModel):
    """Medication context safe to share with the model: no prescriber, no notes."""

    name: str
    dose: str
    frequency: str | None = None


class SafeChatRequest(BaseModel):
    """Request body for the POST /chat endpoint."""

    message: str = Field(..., min_length=1, description="The user's message")
    medications: list[MedicationRecord] = Field(
        default_factory=list, description="Optional medication context"
    )
    options: ChatOptions | None = Field(None, description="Generation parameters")


class SafeChatResult(BaseModel):
    """Outcome of a mediated chat call (also the POST /chat response body)."""

    response: str = Field(..., description="Text to show the user")
    was_substituted: bool = Field(
        False, description="True when the model output was replaced"
    )
    had_emergency: bool = Field(
        False, description="True when the emergency short-circuit fired"
    )

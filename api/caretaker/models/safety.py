"""
Pydantic models for output validation and the audit trail.
"""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

Severity = Literal["blocked", "warning", "clean"]


class ValidationOutcome(BaseModel):
    """Result of scanning a model response against the pattern tiers."""

    safe: bool
    severity: Severity
    flags: list[str] = Field(default_factory=list)
    original_response: str

    @model_validator(mode="after")
    def _check_consistency(self) -> "ValidationOutcome":
        if self.safe == (self.severity == "blocked"):
            raise ValueError("safe must be False exactly when severity is 'blocked'")
        if (not self.flags) != (self.severity == "clean"):
            raise ValueError("flags must be empty exactly when severity is 'clean'")
        return self


class AuditEntry(BaseModel):
    """Privacy-preserving record of one mediated interaction."""

    timestamp: str = Field(..., description="ISO-8601 timestamp")
    user_message_hash: str = Field(..., description="One-way hash of the sent message")
    response_preview: str = Field("", max_length=100, description="Start of the model output")
    safety_flags: list[str] = Field(default_factory=list)
    severity: Severity
    was_substituted: bool = False


class AuditStats(BaseModel):
    """Counts of audit entries by severity."""

    total: int = 0
    blocked: int = 0
    warnings: int = 0
    clean: int = 0

"""
Pydantic models for the bill assistance endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field


class BillAnalysis(BaseModel):
    """Structured reading of a bill. Missing details are None."""

    model_config = ConfigDict(populate_by_name=True)

    summary: str
    potential_issues: list[str] = Field(default_factory=list, alias="potentialIssues")
    vendor_name: str | None = Field(None, alias="vendorName")
    statement_date: str | None = Field(None, alias="statementDate")
    due_date: str | None = Field(None, alias="dueDate")
    total_amount: str | None = Field(None, alias="totalAmount")
    minimum_due: str | None = Field(None, alias="minimumDue")
    billing_period: str | None = Field(None, alias="billingPeriod")
    insurance_coverage: str | None = Field(None, alias="insuranceCoverage")
    next_steps: list[str] = Field(default_factory=list, alias="nextSteps")


class BillTextRequest(BaseModel):
    """Request body for POST /bills/analyze."""

    text: str = Field(..., min_length=1, description="Full text of the bill")


class BillFollowUpRequest(BaseModel):
    """Request body for the script / questions / scam-check endpoints."""

    text: str = Field(..., min_length=1, description="Full text of the bill")
    analysis: BillAnalysis | None = Field(None, description="Earlier analysis, if any")


class BillTextResponse(BaseModel):
    """Plain-text result of a bill follow-up."""

    text: str

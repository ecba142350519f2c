"""
Bill assistance: analysis, contact scripts, doctor questions and scam checks.

Bill text is sanitized before it is sent to the model. Account holders'
identifiers are never needed to explain a bill.
"""

import json
import logging

from pydantic import ValidationError

from caretaker.core.telemetry import get_tracer, set_span_attributes
from caretaker.models.bills import BillAnalysis
from caretaker.models.chat import ChatOptions
from caretaker.services.prompts import (
    BILL_ANALYSIS_SYSTEM_PROMPT,
    CONTACT_SCRIPT_SYSTEM_PROMPT,
    DOCTOR_QUESTIONS_SYSTEM_PROMPT,
    SCAM_CHECK_SYSTEM_PROMPT,
)
from caretaker.services.sanitizer import sanitize

logger = logging.getLogger(__name__)

BILL_OPTIONS = ChatOptions(temperature=0.2, max_tokens=1024)
# Scam checks are a short list of warning signs
SCAM_CHECK_OPTIONS = ChatOptions(temperature=0.2, max_tokens=768)

EMPTY_ANALYSIS_SUMMARY = "Bill analysis is unavailable. The model did not return text."
CONTACT_SCRIPT_FALLBACK = "Sorry, I could not prepare a contact script based on this bill."
DOCTOR_QUESTIONS_FALLBACK = "Sorry, I could not prepare doctor questions based on this bill."
SCAM_CHECK_FALLBACK = "Sorry, I could not check this bill for scam warning signs."


def build_bill_message(bill_text: str, analysis: BillAnalysis | None = None) -> str:
    """User message with the bill text and, if given, the earlier analysis."""
    parts = ["Here is the full text of the bill:", bill_text]
    if analysis is not None:
        parts.extend(
            [
                "",
                "Here is a structured analysis of the bill in JSON format:",
                json.dumps(analysis.model_dump(by_alias=True), indent=2),
            ]
        )
    return "\n\n".join(parts)


def parse_bill_analysis(raw_content: str) -> BillAnalysis:
    """Parse the model's JSON. Unusable output becomes the summary itself."""
    if not raw_content:
        return BillAnalysis(summary=EMPTY_ANALYSIS_SUMMARY)

    try:
        parsed = json.loads(raw_content)
    except json.JSONDecodeError:
        parsed = None

    if (
        isinstance(parsed, dict)
        and isinstance(parsed.get("summary"), str)
        and isinstance(parsed.get("potentialIssues"), list)
    ):
        next_steps = parsed.get("nextSteps")
        try:
            return BillAnalysis(
                summary=parsed["summary"],
                potential_issues=[str(item) for item in parsed["potentialIssues"]],
                vendor_name=parsed.get("vendorName"),
                statement_date=parsed.get("statementDate"),
                due_date=parsed.get("dueDate"),
                total_amount=parsed.get("totalAmount"),
                minimum_due=parsed.get("minimumDue"),
                billing_period=parsed.get("billingPeriod"),
                insurance_coverage=parsed.get("insuranceCoverage"),
                next_steps=[str(item) for item in next_steps]
                if isinstance(next_steps, list)
                else [],
            )
        except ValidationError:
            logger.warning("Bill analysis JSON had unexpected field types")

    return BillAnalysis(summary=raw_content)


class BillAssistant:
    """Bill helpers built on the chat gateway."""

    def __init__(self, gateway) -> None:
        self._gateway = gateway
        self._tracer = get_tracer()

    async def _generate(
        self,
        operation: str,
        system_prompt: str,
        message: str,
        options: ChatOptions = BILL_OPTIONS,
    ) -> str:
        with self._tracer.start_as_current_span(f"bills.{operation}") as span:
            set_span_attributes(span, {"bills.input_length": len(message)})
            response = await self._gateway.simple_chat(
                system_prompt, sanitize(message), options
            )
            set_span_attributes(span, {"bills.output_length": len(response)})
            return response

    async def analyze(self, bill_text: str) -> BillAnalysis:
        """Extract key details and items worth double-checking."""
        response = await self._generate("analyze", BILL_ANALYSIS_SYSTEM_PROMPT, bill_text)
        return parse_bill_analysis(response)

    async def contact_script(
        self, bill_text: str, analysis: BillAnalysis | None = None
    ) -> str:
        """Phone, email and letter scripts for questioning a bill."""
        response = await self._generate(
            "contact_script",
            CONTACT_SCRIPT_SYSTEM_PROMPT,
            build_bill_message(bill_text, analysis),
        )
        return response.strip() or CONTACT_SCRIPT_FALLBACK

    async def doctor_questions(
        self, bill_text: str, analysis: BillAnalysis | None = None
    ) -> str:
        """Questions to ask a doctor or clinic about a medical bill."""
        response = await self._generate(
            "doctor_questions",
            DOCTOR_QUESTIONS_SYSTEM_PROMPT,
            build_bill_message(bill_text, analysis),
        )
        return response.strip() or DOCTOR_QUESTIONS_FALLBACK

    async def scam_check(
        self, bill_text: str, analysis: BillAnalysis | None = None
    ) -> str:
        """Possible warning signs that a bill is a scam or a mistake."""
        response = await self._generate(
            "scam_check",
            SCAM_CHECK_SYSTEM_PROMPT,
            build_bill_message(bill_text, analysis),
            SCAM_CHECK_OPTIONS,
        )
        return response.strip() or SCAM_CHECK_FALLBACK

"""
Appointment extraction from unstructured text.

Free text and emails go through the model with an extraction prompt;
calendar files go through the deterministic ICS parser. Extraction is
best-effort: anything the model returns that cannot be parsed becomes an
all-null, low-confidence record instead of an error.
"""

import json
import logging
from dataclasses import dataclass, field

from pydantic import ValidationError

from caretaker.core.telemetry import get_tracer, set_span_attributes
from caretaker.models.chat import ChatOptions
from caretaker.models.content import DetectedContent, ExtractedAppointment
from caretaker.services.content_detector import is_supported, requires_ai_extraction
from caretaker.services.foundry_client import ConfigurationError, GatewayError
from caretaker.services.ics_parser import ics_event_to_appointment, parse_ics
from caretaker.services.prompts import APPOINTMENT_EXTRACTION_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

# Low temperature for consistent extraction
EXTRACTION_OPTIONS = ChatOptions(temperature=0.1, max_tokens=512)


class UnsupportedContentError(ValueError):
    """Content kind that neither the parser nor the extractor can handle."""


@dataclass(frozen=True)
class ExtractionSuccess:
    appointment: ExtractedAppointment


@dataclass(frozen=True)
class ExtractionFailure:
    reason: str
    appointment: ExtractedAppointment = field(default_factory=ExtractedAppointment)


ExtractionResult = ExtractionSuccess | ExtractionFailure


def _strip_code_fence(raw_text: str) -> str:
    text = raw_text
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0]
    elif "```" in text:
        text = text.split("```")[1].split("```")[0]
    return text.strip()


def _load_json_object(raw_text: str):
    """Parse JSON, falling back to the outermost {...} span in mixed text."""
    try:
        return json.loads(_strip_code_fence(raw_text))
    except json.JSONDecodeError:
        first = raw_text.find("{")
        last = raw_text.rfind("}")
        if first != -1 and last > first:
            return json.loads(raw_text[first:last + 1])
        raise


def parse_appointment_response(raw_content: str) -> ExtractionResult:
    """Validate model output against the ExtractedAppointment shape."""
    if not raw_content or not raw_content.strip():
        return ExtractionFailure("empty response")

    try:
        parsed = _load_json_object(raw_content)
    except json.JSONDecodeError:
        return ExtractionFailure("malformed JSON")

    if not isinstance(parsed, dict):
        return ExtractionFailure(f"expected a JSON object, got {type(parsed).__name__}")

    try:
        return ExtractionSuccess(ExtractedAppointment.model_validate(parsed))
    except ValidationError as exc:
        return ExtractionFailure(f"invalid fields: {exc.error_count()} errors")


class AppointmentExtractor:
    """Extracts appointment details through the chat gateway."""

    def __init__(self, gateway) -> None:
        self._gateway = gateway
        self._tracer = get_tracer()

    async def extract(self, text: str) -> ExtractedAppointment:
        """
        Extract appointment fields from free text.

        Never raises for gateway, configuration or parse failures; returns
        the all-null, low-confidence record instead.
        """
        with self._tracer.start_as_current_span("extraction.appointment") as span:
            set_span_attributes(span, {"extraction.text_length": len(text)})
            try:
                raw = await self._gateway.simple_chat(
                    APPOINTMENT_EXTRACTION_SYSTEM_PROMPT, text, EXTRACTION_OPTIONS
                )
            except ConfigurationError as exc:
                logger.error("Appointment extraction is not configured: %s", exc)
                set_span_attributes(span, {"extraction.outcome": "not_configured"})
                return ExtractedAppointment()
            except GatewayError:
                logger.exception("Appointment extraction call failed")
                set_span_attributes(span, {"extraction.outcome": "gateway_error"})
                return ExtractedAppointment()
            except Exception:
                logger.exception("Appointment extraction failed unexpectedly")
                set_span_attributes(span, {"extraction.outcome": "error"})
                return ExtractedAppointment()

            result = parse_appointment_response(raw)
            if isinstance(result, ExtractionFailure):
                logger.warning("Appointment extraction fell back: %s", result.reason)
                set_span_attributes(span, {"extraction.outcome": "fallback"})
            else:
                set_span_attributes(
                    span,
                    {
                        "extraction.outcome": "parsed",
                        "extraction.confidence": result.appointment.confidence,
                    },
                )
            return result.appointment

    async def extract_from_content(
        self, detected: DetectedContent
    ) -> list[ExtractedAppointment]:
        """Route detected content to the ICS parser or to AI extraction."""
        if not is_supported(detected.type):
            raise UnsupportedContentError(
                f"Content type '{detected.type}' is not supported yet."
            )

        if requires_ai_extraction(detected.type):
            return [await self.extract(detected.content)]

        return [ics_event_to_appointment(event) for event in parse_ics(detected.content)]

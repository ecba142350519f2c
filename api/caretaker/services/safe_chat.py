"""
Safe Chat — mediation pipeline around every chat model call.

Flow for one message:
1. Emergency check on the raw text (fixed response, no model call, no audit).
2. Sanitize personal identifiers out of the message.
3. Compose system instructions + sanitized medication context + message.
4. Call Azure AI Foundry (any failure -> fixed "trouble connecting" reply).
5. Validate the response against blocking and warning patterns.
6. Substitute a fixed safe reply if the response was blocked.
7. Record exactly one audit entry for every outcome that reached step 4.

Nothing is retried here; retry policy belongs to the gateway.
"""

import json
import logging
from collections.abc import Sequence
from typing import Protocol

from fastapi.concurrency import run_in_threadpool

from caretaker.core.telemetry import get_tracer, set_span_attributes
from caretaker.models.chat import (
    ChatMessage,
    ChatOptions,
    ChatResult,
    MedicationRecord,
    SafeChatResult,
)
from caretaker.services import emergency, validator
from caretaker.services.audit import AuditLog, build_entry
from caretaker.services.prompts import (
    CARETAKER_SYSTEM_PROMPT,
    MEDICATION_CONTEXT_HEADER,
    SAFETY_SCENARIO_PROMPT,
)
from caretaker.services.sanitizer import sanitize, sanitize_medication_context

logger = logging.getLogger(__name__)

CONNECTION_FALLBACK = (
    "I'm sorry, I'm having trouble connecting right now. "
    "Please try again in a moment."
)
GATEWAY_UNAVAILABLE_FLAG = "gateway_unavailable"


class ChatGateway(Protocol):
    """The remote model call the pipeline depends on."""

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        options: ChatOptions | None = None,
    ) -> ChatResult: ...


def compose_messages(
    sanitized_message: str,
    medications: Sequence[MedicationRecord] | None = None,
) -> list[ChatMessage]:
    """
    Assemble the outbound message array: one system message, one user message.

    Medication records are reduced to name, dose and frequency before they
    are serialized into the system message.
    """
    system_parts = [CARETAKER_SYSTEM_PROMPT, SAFETY_SCENARIO_PROMPT]

    if medications:
        safe_meds = [
            med.model_dump() for med in sanitize_medication_context(medications)
        ]
        system_parts.append(MEDICATION_CONTEXT_HEADER + json.dumps(safe_meds, indent=2))

    return [
        ChatMessage(role="system", content="\n".join(system_parts)),
        ChatMessage(role="user", content=sanitized_message),
    ]


class SafeChatService:
    """Runs user messages through the full safety pipeline."""

    def __init__(self, gateway: ChatGateway, audit_log: AuditLog) -> None:
        self._gateway = gateway
        self._audit = audit_log
        self._tracer = get_tracer()

    async def respond(
        self,
        user_message: str,
        medications: Sequence[MedicationRecord] | None = None,
        options: ChatOptions | None = None,
    ) -> SafeChatResult:
        """
        Answer a user message with every safety layer applied.

        Args:
            user_message: Raw text typed by the user.
            medications: Optional medication records for context.
            options: Generation parameters for the model call.

        Returns:
            SafeChatResult with the text to show and what happened to it.
        """
        with self._tracer.start_as_current_span("safe_chat.respond") as span:
            set_span_attributes(span, {"safe_chat.message_length": len(user_message)})

            # Step 1: Emergency short-circuit
            if emergency.is_emergency(user_message):
                set_span_attributes(span, {"safe_chat.outcome": "emergency"})
                logger.info("Emergency keywords detected; skipping model call.")
                return SafeChatResult(
                    response=emergency.get_emergency_response(),
                    was_substituted=False,
                    had_emergency=True,
                )

            # Step 2-3: Sanitize and compose
            sanitized_message = sanitize(user_message)
            messages = compose_messages(sanitized_message, medications)

            # Step 4: Call the model
            try:
                result = await self._gateway.chat_completion(messages, options)
            except Exception:
                logger.exception("AI call failed")
                set_span_attributes(span, {"safe_chat.outcome": "fallback"})
                await run_in_threadpool(
                    self._audit.record,
                    build_entry(
                        sanitized_message,
                        "",
                        [GATEWAY_UNAVAILABLE_FLAG],
                        "warning",
                        was_substituted=True,
                    )
                )
                return SafeChatResult(
                    response=CONNECTION_FALLBACK,
                    was_substituted=True,
                    had_emergency=False,
                )

            # Step 5: Validate
            raw_response = result.content
            outcome = validator.validate(raw_response)
            set_span_attributes(
                span,
                {
                    "safe_chat.severity": outcome.severity,
                    "safe_chat.flag_count": len(outcome.flags),
                },
            )

            # Step 6: Substitute if blocked
            response = raw_response
            if not outcome.safe:
                response = validator.substitute(raw_response, outcome.flags)

            # Step 7: Audit
            await run_in_threadpool(
                self._audit.record,
                build_entry(
                    sanitized_message,
                    raw_response,
                    outcome.flags,
                    outcome.severity,
                    was_substituted=not outcome.safe,
                )
            )
            set_span_attributes(
                span,
                {"safe_chat.outcome": "substituted" if not outcome.safe else "delivered"},
            )

            return SafeChatResult(
                response=response,
                was_substituted=not outcome.safe,
                had_emergency=False,
            )

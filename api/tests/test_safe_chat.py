"""
Unit tests for the safe chat pipeline.

Tests the mediation flow with a mocked Foundry gateway.
"""

import asyncio
import json
import threading

import pytest

from caretaker.models.chat import ChatOptions, MedicationRecord
from caretaker.services.audit import AuditLog
from caretaker.services.emergency import EMERGENCY_RESPONSE
from caretaker.services.foundry_client import ConfigurationError
from caretaker.services.prompts import (
    CARETAKER_SYSTEM_PROMPT,
    MEDICATION_CONTEXT_HEADER,
    SAFETY_SCENARIO_PROMPT,
)
from caretaker.services.safe_chat import (
    CONNECTION_FALLBACK,
    GATEWAY_UNAVAILABLE_FLAG,
    SafeChatService,
    compose_messages,
)
from caretaker.services.validator import SAFE_SUBSTITUTE

from conftest import MockGateway


class HangingGateway:
    """Gateway whose call never completes."""

    async def chat_completion(self, messages, options=None):
        await asyncio.Event().wait()


@pytest.mark.asyncio
async def test_emergency_short_circuits_without_model_call(gateway, audit_log):
    service = SafeChatService(gateway, audit_log)

    result = await service.respond("My father has chest pain and can't breathe")

    assert result.response == EMERGENCY_RESPONSE
    assert result.had_emergency is True
    assert result.was_substituted is False
    assert len(gateway.calls) == 0
    assert audit_log.stats().total == 0


@pytest.mark.asyncio
async def test_clean_response_is_returned_and_audited(gateway, audit_log):
    service = SafeChatService(gateway, audit_log)

    result = await service.respond("When do I take my evening pills?")

    assert result.response == gateway.answer
    assert result.was_substituted is False
    assert len(gateway.calls) == 1
    entries = audit_log.list()
    assert len(entries) == 1
    assert entries[0].severity == "clean"
    assert entries[0].safety_flags == []


@pytest.mark.asyncio
async def test_blocked_response_is_substituted(audit_log):
    gateway = MockGateway(answer="You should stop taking this and you'll be fine.")
    service = SafeChatService(gateway, audit_log)

    result = await service.respond("Should I stop my statin?")

    assert result.response == SAFE_SUBSTITUTE
    assert "stop taking" not in result.response
    assert result.was_substituted is True
    entry = audit_log.list()[0]
    assert entry.severity == "blocked"
    assert entry.was_substituted is True
    assert "advice_you_should" in entry.safety_flags


@pytest.mark.asyncio
async def test_warning_response_passes_through_unchanged(audit_log):
    answer = "Nausea is listed as a known side effect on the leaflet; your pharmacist can explain more."
    gateway = MockGateway(answer=answer)
    service = SafeChatService(gateway, audit_log)

    result = await service.respond("What does the leaflet say about nausea?")

    assert result.response == answer
    assert result.was_substituted is False
    assert audit_log.stats().warnings == 1


@pytest.mark.asyncio
async def test_gateway_error_returns_connection_fallback(failing_gateway, audit_log):
    service = SafeChatService(failing_gateway, audit_log)

    result = await service.respond("Help me list my medications")

    assert result.response == CONNECTION_FALLBACK
    assert "trouble connecting" in result.response
    assert result.was_substituted is True
    entries = audit_log.list()
    assert len(entries) == 1
    assert entries[0].safety_flags == [GATEWAY_UNAVAILABLE_FLAG]
    assert entries[0].response_preview == ""


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [ConfigurationError("AZURE_AI_FOUNDRY_API_KEY is not set."), RuntimeError("boom")],
)
async def test_any_gateway_exception_is_recovered(error, audit_log):
    service = SafeChatService(MockGateway(error=error), audit_log)

    result = await service.respond("Hello")

    assert result.response == CONNECTION_FALLBACK
    assert "boom" not in result.response


@pytest.mark.asyncio
async def test_cancelled_request_writes_no_audit_entry(audit_log):
    service = SafeChatService(HangingGateway(), audit_log)

    task = asyncio.create_task(service.respond("When is my appointment?"))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert audit_log.stats().total == 0


@pytest.mark.asyncio
async def test_outbound_request_is_sanitized(gateway, audit_log):
    service = SafeChatService(gateway, audit_log)
    meds = [
        MedicationRecord(
            name="Lisinopril",
            dose="10 mg",
            frequency="daily",
            doctor="Dr. Gregory House",
            notes="Pharmacy account 4111-1111-1111-1111",
        )
    ]

    await service.respond(
        "My SSN is 123-45-6789, email me at pat@example.com",
        medications=meds,
        options=ChatOptions(max_tokens=256),
    )

    call = gateway.calls[0]
    sent = json.dumps([m.model_dump() for m in call["messages"]])
    assert "123-45-6789" not in sent
    assert "pat@example.com" not in sent
    assert "Gregory House" not in sent
    assert "4111" not in sent
    assert "Lisinopril" in sent
    assert call["options"].max_tokens == 256


def test_compose_messages_structure():
    messages = compose_messages("[SSN REMOVED] question")

    assert [m.role for m in messages] == ["system", "user"]
    assert messages[0].content == CARETAKER_SYSTEM_PROMPT + "\n" + SAFETY_SCENARIO_PROMPT
    assert messages[1].content == "[SSN REMOVED] question"


def test_compose_messages_appends_medication_context():
    meds = [MedicationRecord(name="Metformin", dose="500 mg", doctor="Dr. Who", notes="n")]

    system = compose_messages("hi", meds)[0].content

    assert "current medications" in system
    payload = json.loads(system.split(MEDICATION_CONTEXT_HEADER)[1])
    assert payload == [{"name": "Metformin", "dose": "500 mg", "frequency": None}]


class ThreadRecordingAuditLog(AuditLog):
    """Audit log that remembers which thread each write ran on."""

    def __init__(self):
        super().__init__()
        self.threads = []

    def record(self, entry):
        self.threads.append(threading.get_ident())
        super().record(entry)


@pytest.mark.asyncio
async def test_audit_write_runs_off_the_event_loop(gateway):
    audit_log = ThreadRecordingAuditLog()
    service = SafeChatService(gateway, audit_log)

    await service.respond("When do I refill my prescription?")

    assert len(audit_log.threads) == 1
    assert audit_log.threads[0] != threading.get_ident()
    assert audit_log.stats().total == 1

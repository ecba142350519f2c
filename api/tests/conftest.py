"""
Shared fixtures: a mock chat gateway that never touches the network.
"""

import pytest

from caretaker.models.chat import ChatResult, TokenUsage
from caretaker.services.audit import AuditLog
from caretaker.services.foundry_client import GatewayError


class MockGateway:
    """Mock Azure AI Foundry gateway that records every call."""

    def __init__(self, answer="Here is how I can help you organize that.", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    async def chat_completion(self, messages, options=None):
        self.calls.append({"messages": messages, "options": options})
        if self.error is not None:
            raise self.error
        return ChatResult(
            content=self.answer,
            finish_reason="stop",
            usage=TokenUsage(prompt_tokens=100, completion_tokens=20, total_tokens=120),
        )

    async def simple_chat(self, system_prompt, user_message, options=None):
        self.calls.append(
            {"system_prompt": system_prompt, "user_message": user_message, "options": options}
        )
        if self.error is not None:
            raise self.error
        return self.answer


@pytest.fixture
def gateway():
    return MockGateway()


@pytest.fixture
def failing_gateway():
    return MockGateway(error=GatewayError("Azure AI Foundry request failed: 503"))


@pytest.fixture
def audit_log():
    return AuditLog()

"""
Azure AI Foundry client wrapper.

Sends OpenAI-compatible chat completion requests to the configured
Foundry endpoint. Authenticates with an API key, or with Entra ID
(DefaultAzureCredential) when no key is configured and
AZURE_AI_FOUNDRY_USE_ENTRA_ID is enabled.

Retries and timeouts live here; callers never retry on their own.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

import openai
from azure.core.exceptions import ClientAuthenticationError
from azure.identity import DefaultAzureCredential, get_bearer_token_provider
from openai import AsyncOpenAI

from caretaker.core.config import Settings
from caretaker.core.telemetry import get_tracer, set_span_attributes
from caretaker.models.chat import ChatMessage, ChatOptions, ChatResult, TokenUsage

logger = logging.getLogger(__name__)

COGNITIVE_SERVICES_SCOPE = "https://cognitiveservices.azure.com/.default"


class GatewayError(Exception):
    """The remote model could not produce a completion."""


class ConfigurationError(GatewayError):
    """Endpoint or credentials are missing from the environment."""


@dataclass(frozen=True)
class FoundryConfig:
    """Resolved connection details for one call."""

    endpoint: str
    api_key: str
    api_version: str = ""
    use_entra_id: bool = False


def get_foundry_config(settings: Settings) -> FoundryConfig:
    """
    Resolve gateway configuration from settings.

    Raises:
        ConfigurationError: If the endpoint or credentials are not set.
    """
    if not settings.azure_ai_foundry_endpoint:
        raise ConfigurationError(
            "AZURE_AI_FOUNDRY_ENDPOINT is not set. Add it to your environment variables."
        )
    if not settings.azure_ai_foundry_api_key and not settings.azure_ai_foundry_use_entra_id:
        raise ConfigurationError(
            "AZURE_AI_FOUNDRY_API_KEY is not set. Add it to your environment variables."
        )
    return FoundryConfig(
        endpoint=settings.azure_ai_foundry_endpoint,
        api_key=settings.azure_ai_foundry_api_key,
        api_version=settings.azure_ai_foundry_api_version,
        use_entra_id=not settings.azure_ai_foundry_api_key,
    )


class FoundryClient:
    """Wrapper around the Foundry chat completions endpoint."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings
        self._tracer = get_tracer()
        self._token_provider: Callable[[], str] | None = None

    @property
    def model(self) -> str:
        return self._settings.azure_ai_foundry_model

    def _bearer_token(self, config: FoundryConfig) -> str:
        if not config.use_entra_id:
            return config.api_key

        if self._token_provider is None:
            # Managed Identity in production, az login locally
            self._token_provider = get_bearer_token_provider(
                DefaultAzureCredential(),
                COGNITIVE_SERVICES_SCOPE,
            )
        try:
            return self._token_provider()
        except ClientAuthenticationError as exc:
            raise GatewayError("Could not acquire an Entra ID token for Azure AI Foundry") from exc

    def _build_client(self, config: FoundryConfig) -> AsyncOpenAI:
        return AsyncOpenAI(
            base_url=config.endpoint,
            api_key=self._bearer_token(config),
            default_query={"api-version": config.api_version} if config.api_version else None,
            timeout=self._settings.azure_ai_foundry_timeout,
            max_retries=self._settings.azure_ai_foundry_max_retries,
        )

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        options: ChatOptions | None = None,
    ) -> ChatResult:
        """
        Generate a chat completion.

        Args:
            messages: Ordered role-tagged messages.
            options: Generation parameters (defaults: 1024 tokens, 0.7, 1.0).

        Returns:
            ChatResult with the response text, finish reason and token usage.

        Raises:
            ConfigurationError: Endpoint or credentials are missing.
            GatewayError: The endpoint was unreachable or returned an error status.
        """
        options = options or ChatOptions()
        config = get_foundry_config(self._settings)

        with self._tracer.start_as_current_span("foundry.chat") as span:
            set_span_attributes(
                span,
                {
                    "foundry.model": self.model,
                    "foundry.temperature": options.temperature,
                    "foundry.max_tokens": options.max_tokens,
                },
            )

            client = self._build_client(config)
            try:
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[message.model_dump() for message in messages],
                    max_tokens=options.max_tokens,
                    temperature=options.temperature,
                    top_p=options.top_p,
                )
            except openai.APIStatusError as exc:
                raise GatewayError(
                    f"Azure AI Foundry request failed: {exc.status_code}"
                ) from exc
            except openai.APIError as exc:
                raise GatewayError(f"Azure AI Foundry request failed: {exc}") from exc
            finally:
                await client.close()

            result = self._to_result(response)
            if result.usage is not None and result.usage.total_tokens is not None:
                set_span_attributes(span, {"foundry.total_tokens": result.usage.total_tokens})
                logger.info("Chat completion: %d tokens used", result.usage.total_tokens)
            return result

    async def simple_chat(
        self,
        system_prompt: str,
        user_message: str,
        options: ChatOptions | None = None,
    ) -> str:
        """Convenience call for one system prompt plus one user message."""
        result = await self.chat_completion(
            [
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=user_message),
            ],
            options,
        )
        return result.content

    @staticmethod
    def _to_result(response) -> ChatResult:
        """Map an SDK response to a ChatResult. Absent fields stay None."""
        content = ""
        finish_reason = None
        if response.choices:
            choice = response.choices[0]
            content = choice.message.content or ""
            finish_reason = choice.finish_reason

        usage = None
        if response.usage is not None:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )
        return ChatResult(content=content, finish_reason=finish_reason, usage=usage)

"""OpenAITextGateway — chat-completions gateway over ``openai.AsyncOpenAI``.

The only concrete ``TextGenerationGateway`` shipped with the SDK.  Every
API error, transport failure, or empty completion surfaces as
``GatewayUnavailableError``; callers never see ``openai`` exceptions.

Request shape depends on the model family.  Reasoning models (gpt-5, o1,
o3, o4) accept neither ``temperature`` nor ``max_tokens``; they get
``max_completion_tokens``, ``reasoning_effort`` and ``verbosity``.  Other
models get ``temperature`` and ``max_tokens`` and no reasoning knobs.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, OpenAIError

from symptom_intake.errors import GatewayUnavailableError
from symptom_intake.interfaces import TextGenerationGateway
from symptom_intake.models.gateway import CapabilityTier, ChatMessage, GenerationOptions

logger = logging.getLogger(__name__)

# Model-name prefixes that only take the reasoning parameter set
REASONING_MODEL_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def is_reasoning_model(model: str) -> bool:
    return model.lower().startswith(REASONING_MODEL_PREFIXES)


@dataclass(frozen=True)
class GatewaySettings:
    """Immutable gateway configuration read from environment at startup."""

    base_url: str = "https://api.openai.com/v1"
    api_key: str | None = None
    timeout: float = 60.0
    max_retries: int = 2

    # Model name per capability tier
    model_primary: str = "gpt-5"
    model_quick: str = "gpt-5-mini"
    model_light: str = "gpt-5-mini"

    def model_for(self, tier: str) -> str:
        tier = CapabilityTier(tier)
        if tier is CapabilityTier.PRIMARY:
            return self.model_primary
        if tier is CapabilityTier.QUICK:
            return self.model_quick
        return self.model_light


def load_gateway_settings() -> GatewaySettings:
    """Build settings from ``GATEWAY_*`` environment variables.

    ``OPENAI_API_KEY`` is used when ``GATEWAY_API_KEY`` is not set.
    """
    return GatewaySettings(
        base_url=os.getenv("GATEWAY_BASE_URL", "https://api.openai.com/v1").rstrip("/"),
        api_key=os.getenv("GATEWAY_API_KEY") or os.getenv("OPENAI_API_KEY") or None,
        timeout=float(os.getenv("GATEWAY_TIMEOUT", "60")),
        max_retries=int(os.getenv("GATEWAY_MAX_RETRIES", "2")),
        model_primary=os.getenv("GATEWAY_MODEL_PRIMARY", "gpt-5"),
        model_quick=os.getenv("GATEWAY_MODEL_QUICK", "gpt-5-mini"),
        model_light=os.getenv("GATEWAY_MODEL_LIGHT", "gpt-5-mini"),
    )


class OpenAITextGateway(TextGenerationGateway):
    """Gateway for any OpenAI-compatible chat-completions endpoint.

    Args:
        settings: endpoint, credentials and per-tier model names.
        client: optional pre-built ``AsyncOpenAI`` (tests pass one whose
            ``http_client`` uses ``httpx.MockTransport``).  A client passed
            in is not closed by :meth:`aclose`.
    """

    def __init__(
        self,
        settings: GatewaySettings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._settings = settings or load_gateway_settings()
        self._owns_client = client is None
        if client is None:
            client = AsyncOpenAI(
                base_url=self._settings.base_url,
                # Self-hosted compatible servers accept any key
                api_key=self._settings.api_key or "unset",
                timeout=self._settings.timeout,
                max_retries=self._settings.max_retries,
            )
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.close()

    def build_payload(
        self,
        messages: list[ChatMessage],
        tier: str,
        options: GenerationOptions,
    ) -> dict[str, Any]:
        """Keyword arguments for one ``chat.completions.create`` call."""
        model = self._settings.model_for(tier)
        payload: dict[str, Any] = {
            "model": model,
            "messages": [m.model_dump() for m in messages],
        }
        if options.output_format == "structured":
            payload["response_format"] = {"type": "json_object"}

        if is_reasoning_model(model):
            if options.max_output_tokens is not None:
                payload["max_completion_tokens"] = options.max_output_tokens
            if options.reasoning_effort is not None:
                payload["reasoning_effort"] = options.reasoning_effort
            if options.verbosity is not None:
                payload["verbosity"] = options.verbosity
        else:
            if options.temperature is not None:
                payload["temperature"] = options.temperature
            if options.max_output_tokens is not None:
                payload["max_tokens"] = options.max_output_tokens
        return payload

    async def generate(
        self,
        messages: list[ChatMessage],
        tier: str,
        options: GenerationOptions,
    ) -> str:
        payload = self.build_payload(messages, tier, options)
        try:
            completion = await self._client.chat.completions.create(**payload)
        except APIStatusError as exc:
            logger.warning("Gateway returned HTTP %d for tier=%s", exc.status_code, tier)
            raise GatewayUnavailableError(f"gateway returned HTTP {exc.status_code}") from exc
        except APIConnectionError as exc:
            logger.warning("Gateway request failed for tier=%s: %s", tier, exc)
            raise GatewayUnavailableError(f"gateway request failed: {exc}") from exc
        except OpenAIError as exc:
            logger.warning("Gateway error for tier=%s: %s", tier, exc)
            raise GatewayUnavailableError(f"gateway error: {exc}") from exc

        content = _first_content(completion)
        if not content or not content.strip():
            raise GatewayUnavailableError("gateway returned an empty completion")
        logger.debug("Gateway tier=%s returned %d chars", tier, len(content))
        return content


def _first_content(completion: Any) -> str | None:
    try:
        return completion.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return None

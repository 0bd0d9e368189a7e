"""Request models for the text-generation gateway.

A gateway call is an ordered list of role-tagged ``ChatMessage`` objects, a
capability tier name, and ``GenerationOptions``.  ``TierProfile`` bundles
the default options for each tier so callers pick a tier, not raw knobs.
"""

import enum
from typing import Literal, Optional

from pydantic import BaseModel


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str


class GenerationOptions(BaseModel):
    """Formatting and budget options forwarded to the gateway."""

    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None
    output_format: Literal["text", "structured"] = "structured"
    reasoning_effort: Optional[Literal["minimal", "low", "medium", "high"]] = None
    verbosity: Optional[Literal["low", "medium", "high"]] = None


class CapabilityTier(str, enum.Enum):
    """Selectable capability/cost levels.

      - primary: slow, capable; severe and emergency assessments
      - quick:   fast; mild and moderate assessments
      - light:   cheapest; question and answer-option generation
    """

    PRIMARY = "primary"
    QUICK = "quick"
    LIGHT = "light"


class TierProfile(BaseModel):
    """A tier plus the options a call on that tier should use."""

    tier: CapabilityTier
    options: GenerationOptions

    def with_options(self, **overrides) -> GenerationOptions:
        """Return this tier's options with selected fields replaced."""
        return self.options.model_copy(update=overrides)


TIER_PROFILES: dict[CapabilityTier, TierProfile] = {
    CapabilityTier.PRIMARY: TierProfile(
        tier=CapabilityTier.PRIMARY,
        options=GenerationOptions(
            temperature=0.3, max_output_tokens=1500, reasoning_effort="high",
        ),
    ),
    CapabilityTier.QUICK: TierProfile(
        tier=CapabilityTier.QUICK,
        options=GenerationOptions(
            temperature=0.2, max_output_tokens=800, reasoning_effort="low",
        ),
    ),
    CapabilityTier.LIGHT: TierProfile(
        tier=CapabilityTier.LIGHT,
        options=GenerationOptions(
            max_output_tokens=600, reasoning_effort="low", verbosity="low",
        ),
    ),
}

"""Abstract interfaces for the external collaborators.

These ABCs define the contract that external implementations must fulfil.
The SDK ships one concrete gateway (:class:`symptom_intake.gateway.OpenAITextGateway`)
and no image analyzer; image analysis lives outside this package.

Typical integration flow::

    gateway: TextGenerationGateway = OpenAITextGateway(load_gateway_settings())
    service = QuestionnaireService(gateway, image_analyzer=MyAnalyzer())

    step = await service.start_session(language="en")
    # ... present step.question, collect the answer ...
    step = await service.submit_response(step.session_id, response)
"""

from abc import ABC, abstractmethod

from symptom_intake.models.gateway import ChatMessage, GenerationOptions
from symptom_intake.models.image import ImageAnalysis, ImageAnalysisRequest


class TextGenerationGateway(ABC):
    """Interface for the LLM-backed text-generation service.

    Implementations return raw text.  Callers must assume the text can be
    malformed or truncated even when ``options.output_format`` is
    ``"structured"``; the repair parser handles that.
    """

    @abstractmethod
    async def generate(
        self,
        messages: list[ChatMessage],
        tier: str,
        options: GenerationOptions,
    ) -> str:
        """Run one generation call.

        Parameters
        ----------
        messages:
            Ordered role-tagged messages (system / user / assistant).
        tier:
            Capability tier name (see :class:`CapabilityTier`).
        options:
            Temperature, token budget, output format, reasoning effort and
            verbosity hints.

        Returns
        -------
        str
            The raw generated text.

        Raises
        ------
        GatewayUnavailableError
            Network or service failure, or an empty response.
        """
        ...


class ImageAnalyzer(ABC):
    """Interface for the medical image-analysis collaborator."""

    @abstractmethod
    async def analyze(self, request: ImageAnalysisRequest) -> ImageAnalysis:
        """Analyse one decoded image and return structured findings."""
        ...

"""Request/response models for the image-analysis collaborator.

The SDK never analyses images itself.  It builds an ``ImageAnalysisRequest``
from an image_upload answer and folds ``ImageAnalysis.analysis_text`` into
the response before it is appended to the session.
"""

from typing import List, Literal

from pydantic import BaseModel


class ImageAnalysisRequest(BaseModel):
    payload: str  # base64
    media_type: str
    image_category: str = "general"
    context_prompt: str = ""
    language: str = "en"


class ImageAnalysis(BaseModel):
    analysis_text: str
    findings: List[str] = []
    recommendations: List[str] = []
    urgency_level: Literal["low", "medium", "high", "urgent"] = "low"
    suggested_specialties: List[str] = []
    confidence: float = 0.0

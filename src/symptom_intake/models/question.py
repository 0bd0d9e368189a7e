"""Question kind models for the adaptive questionnaire.

Each kind maps to a specific UI component and answer shape:

  Fixed-option kinds:
    - single_choice / multiple_choice: options listed by the caller
    - boolean: yes/no
    - body_part_selector: pick a region, options optional

  Generated kinds (options or autocomplete produced by the gateway):
    - ai_single_choice / ai_multiple_choice: options generated on demand
    - ai_text_input: free text with generated suggestions

  Input kinds:
    - text_input: open-ended text
    - number_input: numeric input with optional min/max
    - scale: bounded numeric scale (defaults to 1-10)
    - image_upload: image handed to the image-analysis collaborator

The discriminated ``Question`` union uses ``type`` as its discriminator.
The ``question_mapper`` dict maps type strings to their Pydantic classes and
is checked at import time to cover every ``QuestionKind``.
"""

from __future__ import annotations

import enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from symptom_intake.constants import DEFAULT_MAX_OPTIONS


class QuestionKind(str, enum.Enum):
    """Every question kind the flow controller can issue."""

    MULTIPLE_CHOICE = "multiple_choice"
    SINGLE_CHOICE = "single_choice"
    TEXT_INPUT = "text_input"
    NUMBER_INPUT = "number_input"
    BOOLEAN = "boolean"
    SCALE = "scale"
    BODY_PART_SELECTOR = "body_part_selector"
    AI_SINGLE_CHOICE = "ai_single_choice"
    AI_MULTIPLE_CHOICE = "ai_multiple_choice"
    AI_TEXT_INPUT = "ai_text_input"
    IMAGE_UPLOAD = "image_upload"


# --- Shared option/context models ---

class QuestionOption(BaseModel):
    """A selectable option with an id, display label, and submitted value."""

    model_config = ConfigDict(frozen=True)

    id: str
    label: str
    value: str


class AnswerContext(BaseModel):
    """Hints passed to option generation."""

    model_config = ConfigDict(frozen=True)

    body_part: Optional[str] = None
    symptom_type: Optional[str] = None
    max_options: int = DEFAULT_MAX_OPTIONS


class ImageUploadConfig(BaseModel):
    """Upload constraints and analysis hint for image_upload questions."""

    model_config = ConfigDict(frozen=True)

    accepted_types: List[str] = ["image/*"]
    max_size: int = 10 * 1024 * 1024
    image_type: Optional[
        Literal["mri", "ct_scan", "xray", "ultrasound", "pathology", "general"]
    ] = None
    analysis_prompt: Optional[str] = None


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question kinds.  Questions are immutable once issued."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    description: Optional[str] = None
    required: bool = True
    placeholder: Optional[str] = None
    generate_answers: bool = False
    answer_context: Optional[AnswerContext] = None

    @property
    def max_options(self) -> int:
        if self.answer_context is None:
            return DEFAULT_MAX_OPTIONS
        return self.answer_context.max_options


class _ChoiceMixin(BaseModel):
    """Option list with unique labels and values."""

    options: Optional[List[QuestionOption]] = None

    @model_validator(mode="after")
    def _unique_options(self):
        if self.options:
            labels = [o.label for o in self.options]
            values = [o.value for o in self.options]
            if len(set(labels)) != len(labels):
                raise ValueError("option labels must be unique")
            if len(set(values)) != len(values):
                raise ValueError("option values must be unique")
        return self


# --- Fixed-option kinds ---

class SingleChoiceQuestion(_ChoiceMixin, BaseQuestion):
    type: Literal["single_choice"] = "single_choice"


class MultipleChoiceQuestion(_ChoiceMixin, BaseQuestion):
    type: Literal["multiple_choice"] = "multiple_choice"


class BooleanQuestion(BaseQuestion):
    type: Literal["boolean"] = "boolean"


class BodyPartSelectorQuestion(_ChoiceMixin, BaseQuestion):
    type: Literal["body_part_selector"] = "body_part_selector"


# --- Generated kinds ---

class AISingleChoiceQuestion(_ChoiceMixin, BaseQuestion):
    type: Literal["ai_single_choice"] = "ai_single_choice"
    generate_answers: bool = True


class AIMultipleChoiceQuestion(_ChoiceMixin, BaseQuestion):
    type: Literal["ai_multiple_choice"] = "ai_multiple_choice"
    generate_answers: bool = True


class AITextInputQuestion(BaseQuestion):
    type: Literal["ai_text_input"] = "ai_text_input"
    generate_answers: bool = True


# --- Input kinds ---

class TextInputQuestion(BaseQuestion):
    type: Literal["text_input"] = "text_input"


class NumberInputQuestion(BaseQuestion):
    type: Literal["number_input"] = "number_input"
    min: Optional[float] = None
    max: Optional[float] = None

    @model_validator(mode="after")
    def _chk(self):
        if self.min is not None and self.max is not None and self.min >= self.max:
            raise ValueError("min must be < max")
        return self


class ScaleQuestion(BaseQuestion):
    type: Literal["scale"] = "scale"
    min: float = 1
    max: float = 10

    @model_validator(mode="after")
    def _chk(self):
        if self.min >= self.max:
            raise ValueError("min must be < max")
        return self


class ImageUploadQuestion(BaseQuestion):
    type: Literal["image_upload"] = "image_upload"
    image_upload: ImageUploadConfig = ImageUploadConfig()


# --- Discriminated union of all question kinds ---

Question = Annotated[
    Union[
        MultipleChoiceQuestion,
        SingleChoiceQuestion,
        TextInputQuestion,
        NumberInputQuestion,
        BooleanQuestion,
        ScaleQuestion,
        BodyPartSelectorQuestion,
        AISingleChoiceQuestion,
        AIMultipleChoiceQuestion,
        AITextInputQuestion,
        ImageUploadQuestion,
    ],
    Field(discriminator="type"),
]

# Kinds whose answer is picked from ``options``.
CHOICE_QUESTION_TYPES = (
    SingleChoiceQuestion,
    MultipleChoiceQuestion,
    BodyPartSelectorQuestion,
    AISingleChoiceQuestion,
    AIMultipleChoiceQuestion,
)

# Maps type string → Pydantic class.
question_mapper: dict[str, type[BaseQuestion]] = {
    QuestionKind.MULTIPLE_CHOICE.value: MultipleChoiceQuestion,
    QuestionKind.SINGLE_CHOICE.value: SingleChoiceQuestion,
    QuestionKind.TEXT_INPUT.value: TextInputQuestion,
    QuestionKind.NUMBER_INPUT.value: NumberInputQuestion,
    QuestionKind.BOOLEAN.value: BooleanQuestion,
    QuestionKind.SCALE.value: ScaleQuestion,
    QuestionKind.BODY_PART_SELECTOR.value: BodyPartSelectorQuestion,
    QuestionKind.AI_SINGLE_CHOICE.value: AISingleChoiceQuestion,
    QuestionKind.AI_MULTIPLE_CHOICE.value: AIMultipleChoiceQuestion,
    QuestionKind.AI_TEXT_INPUT.value: AITextInputQuestion,
    QuestionKind.IMAGE_UPLOAD.value: ImageUploadQuestion,
}

_unmapped = {k.value for k in QuestionKind} - set(question_mapper)
if _unmapped:
    raise RuntimeError(f"question_mapper is missing kinds: {sorted(_unmapped)}")

"""Fixed questions, options, and result text used when nothing is generated.

Everything here works without the gateway:

  - the fallback initial question (gateway down or malformed output)
  - the emergency screening question (always fixed, never generated)
  - the basic demographic questions
  - image-upload opening questions
  - fallback answer options per category
  - default advice used to fill gaps in a gateway assessment
  - the emergency short-circuit result

Every builder takes a language code and falls back to English.
"""

from __future__ import annotations

from symptom_intake.constants import (
    AGE_QUESTION_ID,
    EMERGENCY_QUESTION_ID,
    GENDER_QUESTION_ID,
    INITIAL_QUESTION_ID,
    NONE_SENTINEL,
)
from symptom_intake.models.assessment import AssessmentResult, Severity
from symptom_intake.models.question import (
    AITextInputQuestion,
    ImageUploadConfig,
    ImageUploadQuestion,
    MultipleChoiceQuestion,
    NumberInputQuestion,
    QuestionOption,
    SingleChoiceQuestion,
)
from symptom_intake.models.response import QuestionResponse


def _pick(table: dict[str, object], language: str):
    return table.get(language, table["en"])


def _options(pairs: list[tuple[str, str]]) -> list[QuestionOption]:
    """Build options whose id and value are the same key."""
    return [QuestionOption(id=key, label=label, value=key) for key, label in pairs]


# ---------------------------------------------------------------------------
# Initial question
# ---------------------------------------------------------------------------

_INITIAL = {
    "en": {
        "text": "What is your main health concern or symptom today?",
        "description": "Please describe what brought you here today in detail.",
        "placeholder": "e.g., I have a severe headache that started yesterday...",
    },
    "es": {
        "text": "¿Cuál es tu principal preocupación de salud o síntoma hoy?",
        "description": "Por favor describe en detalle lo que te trajo aquí hoy.",
        "placeholder": "ej., Tengo un dolor de cabeza severo que comenzó ayer...",
    },
}


def fallback_initial_question(language: str = "en") -> AITextInputQuestion:
    """Canonical open-text opening question."""
    text = _pick(_INITIAL, language)
    return AITextInputQuestion(
        id=INITIAL_QUESTION_ID,
        text=text["text"],
        description=text["description"],
        placeholder=text["placeholder"],
        required=True,
        generate_answers=True,
    )


# ---------------------------------------------------------------------------
# Emergency screening question
# ---------------------------------------------------------------------------

_EMERGENCY = {
    "en": {
        "text": "Are you experiencing any of these symptoms right now?",
        "description": "Select all that apply. These may require immediate medical attention.",
        "options": [
            ("chest_pain", "Severe chest pain or pressure"),
            ("breathing_difficulty", "Difficulty breathing or shortness of breath"),
            ("stroke_symptoms", "Signs of stroke (facial drooping, arm weakness, speech difficulty)"),
            ("severe_bleeding", "Severe or uncontrollable bleeding"),
            ("loss_consciousness", "Loss of consciousness or fainting"),
            ("severe_head_injury", "Severe head injury"),
            ("severe_allergic", "Severe allergic reaction (facial swelling, trouble breathing)"),
            ("severe_abdominal_pain", "Severe abdominal pain or rigidity"),
            ("high_fever", "High fever with other worrying symptoms"),
            ("seizures", "Seizures"),
            ("severe_headache", "Sudden, severe \"thunderclap\" headache"),
            ("suicidal_thoughts", "Thoughts of self-harm or suicide"),
            (NONE_SENTINEL, "None of the above"),
        ],
    },
    "es": {
        "text": "¿Estás experimentando alguno de estos síntomas en este momento?",
        "description": "Selecciona todos los que apliquen. Estos síntomas pueden requerir atención médica inmediata.",
        "options": [
            ("chest_pain", "Dolor torácico severo o presión en el pecho"),
            ("breathing_difficulty", "Dificultad para respirar o falta de aire"),
            ("stroke_symptoms", "Signos de accidente cerebrovascular (caída facial, debilidad en brazo, dificultad para hablar)"),
            ("severe_bleeding", "Hemorragia severa o sangrado incontrolable"),
            ("loss_consciousness", "Pérdida de conciencia o desmayo"),
            ("severe_head_injury", "Lesión severa en la cabeza o trauma craneal"),
            ("severe_allergic", "Reacción alérgica severa (hinchazón facial, dificultad para respirar)"),
            ("severe_abdominal_pain", "Dolor abdominal severo o rigidez abdominal"),
            ("high_fever", "Fiebre alta con otros síntomas preocupantes"),
            ("seizures", "Convulsiones o crisis epilépticas"),
            ("severe_headache", "Dolor de cabeza severo y repentino (como un trueno)"),
            ("suicidal_thoughts", "Pensamientos de autolesión o suicidio"),
            (NONE_SENTINEL, "Ninguno de los anteriores"),
        ],
    },
}


def emergency_question(language: str = "en") -> MultipleChoiceQuestion:
    """Fixed red-flag multi-select; the last option is the "none" sentinel."""
    text = _pick(_EMERGENCY, language)
    return MultipleChoiceQuestion(
        id=EMERGENCY_QUESTION_ID,
        text=text["text"],
        description=text["description"],
        required=True,
        generate_answers=False,
        options=_options(text["options"]),
    )


# ---------------------------------------------------------------------------
# Basic demographic questions
# ---------------------------------------------------------------------------

_BASIC = {
    "en": {
        "age": ("What is your age?", "Enter your age"),
        "gender": "What is your gender?",
        "genders": [
            ("male", "Male"), ("female", "Female"),
            ("other", "Other"), ("prefer_not_to_say", "Prefer not to say"),
        ],
    },
    "es": {
        "age": ("¿Cuál es tu edad?", "Ingresa tu edad"),
        "gender": "¿Cuál es tu género?",
        "genders": [
            ("male", "Masculino"), ("female", "Femenino"),
            ("other", "Otro"), ("prefer_not_to_say", "Prefiero no decirlo"),
        ],
    },
}


def basic_info_questions(language: str = "en") -> list:
    text = _pick(_BASIC, language)
    age_text, age_placeholder = text["age"]
    return [
        NumberInputQuestion(
            id=AGE_QUESTION_ID, text=age_text, placeholder=age_placeholder,
            min=1, max=120,
        ),
        SingleChoiceQuestion(
            id=GENDER_QUESTION_ID, text=text["gender"],
            options=_options(text["genders"]),
        ),
    ]


# ---------------------------------------------------------------------------
# Image-upload opening question
# ---------------------------------------------------------------------------

_IMAGE_TITLES = {
    "mri": {"en": "Upload your MRI scan to begin analysis",
            "es": "Sube tu resonancia magnética para comenzar el análisis"},
    "ct_scan": {"en": "Upload your CT scan to begin analysis",
                "es": "Sube tu tomografía computarizada para comenzar el análisis"},
    "xray": {"en": "Upload your X-ray to begin analysis",
             "es": "Sube tu radiografía para comenzar el análisis"},
    "ultrasound": {"en": "Upload your ultrasound image to begin analysis",
                   "es": "Sube tu ecografía para comenzar el análisis"},
    "pathology": {"en": "Upload your pathology sample image to begin analysis",
                  "es": "Sube la imagen de tu muestra patológica para comenzar el análisis"},
    "general": {"en": "Upload your medical image to begin analysis",
                "es": "Sube tu imagen médica para comenzar el análisis"},
}

_IMAGE_DESCRIPTION = {
    "en": "Upload a clear image of your medical study. Make sure it is readable and of good quality.",
    "es": "Sube una imagen clara de tu estudio médico. Asegúrate de que sea legible y de buena calidad.",
}


def image_upload_question(image_type: str, language: str = "en") -> ImageUploadQuestion:
    titles = _IMAGE_TITLES.get(image_type, _IMAGE_TITLES["general"])
    if language == "es":
        placeholder = f"Subir imagen de {image_type}"
        prompt = f"Analiza esta imagen médica tipo {image_type} y proporciona hallazgos clínicos relevantes."
    else:
        placeholder = f"Upload {image_type} image"
        prompt = f"Analyze this {image_type} medical image and provide relevant clinical findings."
    return ImageUploadQuestion(
        id=f"image_upload_{image_type}",
        text=_pick(titles, language),
        description=_pick(_IMAGE_DESCRIPTION, language),
        placeholder=placeholder,
        generate_answers=True,
        image_upload=ImageUploadConfig(
            accepted_types=["image/*", "application/dicom"],
            image_type=image_type,
            analysis_prompt=prompt,
        ),
    )


# ---------------------------------------------------------------------------
# Home-page topics → pre-filled initial answer
# ---------------------------------------------------------------------------

_TOPIC_ANSWERS = {
    "general": {"en": "I have general symptoms and health concerns",
                "es": "Tengo síntomas generales y preocupaciones de salud"},
    "mental": {"en": "I have concerns about my mental health, including anxiety, depression, or stress",
               "es": "Tengo preocupaciones sobre mi salud mental, incluyendo ansiedad, depresión o estrés"},
    "heart": {"en": "I have concerns about my heart health, including palpitations or discomfort",
              "es": "Tengo preocupaciones sobre mi salud cardíaca, incluyendo palpitaciones o molestias"},
    "chat": {"en": "I want to discuss my health concerns with AI assistance",
             "es": "Quiero discutir mis preocupaciones de salud con asistencia de IA"},
    "preventive": {"en": "I want a general health checkup and preventive assessment",
                   "es": "Quiero un chequeo de salud general y evaluación preventiva"},
    "community": {"en": "I want to explore health topics and connect with others",
                  "es": "Quiero explorar temas de salud y conectar con otros"},
    "search": {"en": "I searched for specific health information",
               "es": "Busqué información específica de salud"},
}


# Topics whose opening answer is pre-filled instead of asked
HOME_TOPICS = frozenset(_TOPIC_ANSWERS)


def initial_response_for_topic(topic: str, language: str = "en") -> QuestionResponse:
    answers = _TOPIC_ANSWERS.get(topic, _TOPIC_ANSWERS["general"])
    return QuestionResponse(question_id=INITIAL_QUESTION_ID, answer=_pick(answers, language))


# ---------------------------------------------------------------------------
# Fallback answer options
# ---------------------------------------------------------------------------

_FALLBACK_OPTIONS = {
    "severity": {
        "en": [("mild", "Mild - Barely noticeable"), ("moderate", "Moderate - Noticeable discomfort"),
               ("severe", "Severe - Significant pain/discomfort"), ("unbearable", "Unbearable - Worst possible")],
        "es": [("mild", "Leve - Apenas perceptible"), ("moderate", "Moderado - Molestia notable"),
               ("severe", "Severo - Dolor/molestia significativa"), ("unbearable", "Insoportable - Lo peor posible")],
    },
    "duration": {
        "en": [("minutes", "A few minutes"), ("hours", "A few hours"), ("days", "A few days"),
               ("weeks", "A few weeks"), ("months", "A few months")],
        "es": [("minutes", "Unos minutos"), ("hours", "Unas horas"), ("days", "Unos días"),
               ("weeks", "Unas semanas"), ("months", "Unos meses")],
    },
    "frequency": {
        "en": [("constant", "Constant/Always"), ("frequent", "Frequently (daily)"),
               ("occasional", "Occasionally (weekly)"), ("rare", "Rarely (monthly)")],
        "es": [("constant", "Constante/Siempre"), ("frequent", "Frecuentemente (diario)"),
               ("occasional", "Ocasionalmente (semanal)"), ("rare", "Raramente (mensual)")],
    },
    "ai_multiple_choice": {
        "en": [("cough", "Cough"), ("sore_throat", "Sore throat"), ("headache", "Headache"),
               ("muscle_aches", "Muscle aches"), ("fatigue", "Fatigue"), ("nausea", "Nausea")],
        "es": [("cough", "Tos"), ("sore_throat", "Dolor de garganta"), ("headache", "Dolor de cabeza"),
               ("muscle_aches", "Dolores musculares"), ("fatigue", "Fatiga"), ("nausea", "Náuseas")],
    },
    "default": {
        "en": [("yes", "Yes"), ("no", "No"), ("unsure", "Not sure")],
        "es": [("yes", "Sí"), ("no", "No"), ("unsure", "No estoy seguro")],
    },
}


def fallback_options(category: str, language: str = "en") -> list[QuestionOption]:
    """Fixed options for ``category`` (severity, duration, frequency, ...)."""
    table = _FALLBACK_OPTIONS.get(category, _FALLBACK_OPTIONS["default"])
    return _options(_pick(table, language))


# ---------------------------------------------------------------------------
# Assessment defaults and the emergency result
# ---------------------------------------------------------------------------

_DEFAULTS = {
    "en": {
        "follow_up": "Consult with a healthcare provider for proper evaluation.",
        "recommendations": ["Consult a healthcare provider for a proper evaluation of your symptoms."],
        "red_flags": [
            "Symptoms that suddenly get much worse",
            "New difficulty breathing, chest pain, or confusion",
        ],
    },
    "es": {
        "follow_up": "Consulta con un profesional de la salud para una evaluación adecuada.",
        "recommendations": ["Consulta a un profesional de la salud para evaluar tus síntomas."],
        "red_flags": [
            "Síntomas que empeoran de forma repentina",
            "Nueva dificultad para respirar, dolor en el pecho o confusión",
        ],
    },
}


def assessment_defaults(language: str = "en") -> dict:
    """Safe fillers for fields a gateway assessment left out."""
    defaults = _pick(_DEFAULTS, language)
    return {
        "follow_up_advice": defaults["follow_up"],
        "recommendations": list(defaults["recommendations"]),
        "red_flags": list(defaults["red_flags"]),
        "self_care": [],
    }


_EMERGENCY_RESULT = {
    "en": {
        "recommendation": "Seek immediate emergency medical care",
        "structural": "Your responses indicate potential emergency symptoms. Call 911 or go to the nearest emergency room immediately.",
        "lexical": "Your symptoms may indicate a medical emergency. Call 911 or go to the nearest emergency room immediately.",
        "follow_up": "Do not delay seeking emergency medical attention.",
    },
    "es": {
        "recommendation": "Busca atención médica de emergencia de inmediato",
        "structural": "Tus respuestas indican posibles síntomas de emergencia. Llama al 911 o acude a la sala de emergencias más cercana de inmediato.",
        "lexical": "Tus síntomas pueden indicar una emergencia médica. Llama al 911 o acude a la sala de emergencias más cercana de inmediato.",
        "follow_up": "No demores en buscar atención médica de emergencia.",
    },
}


def emergency_result(language: str = "en", *, structural: bool = True) -> AssessmentResult:
    """Terminal result for the emergency short-circuit; no differential."""
    text = _pick(_EMERGENCY_RESULT, language)
    return AssessmentResult(
        severity=Severity.EMERGENCY,
        possible_conditions=[],
        recommendations=[text["recommendation"]],
        emergency_warning=True,
        emergency_message=text["structural" if structural else "lexical"],
        follow_up_advice=text["follow_up"],
        red_flags=[],
        self_care=[],
    )

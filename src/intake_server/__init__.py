"""intake_server — FastAPI REST API for the symptom intake SDK.

Exposes the QuestionnaireService as an HTTP API with session management,
step-by-step answering, and stateless question, answer-option, emergency
check and analysis endpoints.
"""

"""Prompt rendering for gateway calls.

Provides ``PromptManager``, a Jinja2-based template engine that renders the
questionnaire state into role-tagged ``ChatMessage`` lists with JSON
response format instructions.
"""

from symptom_intake.prompt.manager import PromptManager

__all__ = ["PromptManager"]

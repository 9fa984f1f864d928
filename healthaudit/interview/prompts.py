"""
Extraction prompt templates and generation.

This module contains the prompt templates sent to the extraction oracle,
keeping them separate from the extraction logic for easier maintenance and editing.
"""

import json
from typing import Optional

from .catalog import Step


class ExtractionPrompts:
    """Collection of all extraction-related prompts."""

    @staticmethod
    def output_shape(field: str) -> str:
        """The strict JSON shape the oracle must answer with."""
        return (
            '{"updateNeeded": boolean, "profileField": ' + json.dumps(field)
            + ', "extractedValue": string | null}'
        )

    @staticmethod
    def no_update_shape() -> str:
        return '{"updateNeeded": false}'

    @staticmethod
    def task_prompt(step: Step) -> str:
        """Step-specific task instruction, built from the step's catalog record."""
        return (
            f"Analyze the following user message. {step.intent} "
            f"Accepted values: {step.validation_hint}. "
            f"Respond ONLY with JSON in the format: {ExtractionPrompts.output_shape(step.extracted_field_name)}. "
            f"If {step.unclear_when}, respond with {ExtractionPrompts.no_update_shape()}."
        )

    @staticmethod
    def context_line(question_text: Optional[str]) -> str:
        if question_text and question_text.strip():
            return f'The user was just asked: "{question_text.strip()}"'
        return "The user provided the following message:"

    @staticmethod
    def extraction_prompt(task_prompt: str, utterance: str, question_text: Optional[str] = None) -> str:
        """Full prompt: task, question context and the utterance as the subject."""
        return f"""
{task_prompt}

{ExtractionPrompts.context_line(question_text)}
User Message: {json.dumps(utterance, ensure_ascii=False)}

Respond strictly with the JSON structure specified in the initial instruction.
        """.strip()

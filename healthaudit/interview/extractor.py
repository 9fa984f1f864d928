"""
Field extractor: turns a free-form utterance into a structured profile update.
"""
import logging
from typing import Optional

from .catalog import Step
from .errors import ConfigurationError, UpstreamError, UserInputError, ValidationError
from .prompts import ExtractionPrompts
from .schemas import ExtractionResult, parse_extraction_result
from ..config import EXTRACTION_TEMPERATURE, MAX_OUTPUT_TOKENS, RESPONSE_MIME_TYPE

logger = logging.getLogger("extractor")


class FieldExtractor:
    """
    Asks the extraction oracle whether an utterance answers a step.

    Every failure path (blank input, missing credentials, transport errors,
    unparseable output) converges on ``ExtractionResult.no_update()``; extract()
    never raises. The extractor keeps no state between calls.
    """

    def __init__(self, llm_client, prompts: type = ExtractionPrompts):
        self.llm_client = llm_client
        self.prompts = prompts

    def build_prompt(self, utterance: str, step: Step, question_text: Optional[str] = None) -> str:
        task = self.prompts.task_prompt(step)
        question = question_text if question_text is not None else step.question
        return self.prompts.extraction_prompt(task, utterance.strip(), question)

    def extract(self, utterance: str, current_step: Step,
                question_text: Optional[str] = None) -> ExtractionResult:
        """
        Extract the current step's field from an utterance.

        Args:
            utterance: Transcribed user turn
            current_step: The step that was active when the utterance arrived
            question_text: Question actually asked; defaults to the step's question

        Returns:
            ExtractionResult; ``update_needed`` is False on any failure
        """
        try:
            return self._extract(utterance, current_step, question_text)
        except UserInputError as e:
            logger.debug("Skipping extraction: %s", e)
        except ConfigurationError as e:
            logger.error("Extraction disabled, oracle not configured: %s", e)
        except ValidationError as e:
            logger.error("Failed to parse oracle response for step '%s': %s", current_step.key, e)
            logger.error("Original response text was: %r", e.raw_text)
        except UpstreamError as e:
            logger.error("Oracle call failed for step '%s': %s", current_step.key, e)
        except Exception as e:
            logger.exception("Unexpected extraction failure for step '%s': %s", current_step.key, e)
        return ExtractionResult.no_update()

    def _extract(self, utterance: str, step: Step, question_text: Optional[str]) -> ExtractionResult:
        if utterance is None or not utterance.strip():
            raise UserInputError("utterance is empty")

        prompt = self.build_prompt(utterance, step, question_text)
        logger.info(f"Parsing user message for step '{step.key}': {utterance.strip()[:50]!r}")
        logger.debug(f"Full prompt being sent: {prompt}")

        raw_response = self.llm_client.generate_content(
            prompt,
            temperature=EXTRACTION_TEMPERATURE,
            max_output_tokens=MAX_OUTPUT_TOKENS,
            response_mime_type=RESPONSE_MIME_TYPE,
        )
        logger.debug(f"Raw oracle response: {raw_response!r}")

        result = parse_extraction_result(raw_response)
        logger.info(f"Extraction result for step '{step.key}': {result}")
        return result


def create_extractor(config=None) -> FieldExtractor:
    """Build a FieldExtractor backed by the Gemini REST client."""
    from ..config import get_config
    from ..infrastructure.llm import GeminiRestClient

    config = config or get_config()
    if not config.has_credentials:
        logger.error("Gemini API key not found in environment variables; extraction will never update the profile")

    llm_client = GeminiRestClient(
        api_key=config.gemini_api_key,
        project=config.google_cloud_project,
        location=config.vertex_location,
        model=config.model_name,
        credentials_json=config.google_application_credentials,
        timeout=config.llm_timeout,
    )
    return FieldExtractor(llm_client)

"""
Step sequencer: the state machine deciding which question is active.

States are the catalog keys plus ``welcome`` (initial) and ``summary``
(terminal). The only forward transition inside the catalog is one step per
accepted extraction.
"""
import logging
from typing import Optional

from .catalog import QuestionCatalog, Step
from .models import ConversationState
from .profile import ProfileStore
from .schemas import ExtractionResult
from ..config import WELCOME_STEP, SUMMARY_STEP

logger = logging.getLogger("sequencer")


class StepSequencer:
    """Finite state machine over interview step keys."""

    def __init__(self, catalog: QuestionCatalog, profile: ProfileStore,
                 state: Optional[ConversationState] = None):
        self.catalog = catalog
        self.profile = profile
        self.state = state if state is not None else ConversationState()

    @property
    def _current(self) -> str:
        return self.state.current_step_key

    @_current.setter
    def _current(self, key: str) -> None:
        self.state.current_step_key = key

    @property
    def current_key(self) -> str:
        return self._current

    @property
    def current_step(self) -> Optional[Step]:
        """The active catalog step, or None at ``welcome``/``summary``."""
        return self.catalog.get(self._current)

    @property
    def is_started(self) -> bool:
        return self._current != WELCOME_STEP

    @property
    def is_complete(self) -> bool:
        return self._current == SUMMARY_STEP

    def start(self) -> bool:
        """Handle the "interview started" trigger. Only valid from ``welcome``."""
        if self._current != WELCOME_STEP:
            logger.debug(f"Ignoring start trigger in state '{self._current}'")
            return False
        self._current = self.catalog.first_key()
        logger.info(f"Interview started, initial step set to '{self._current}'")
        return True

    def advance(self, result: ExtractionResult, asked_step: Step) -> bool:
        """
        Commit an extraction and move to the next step.

        Args:
            result: Outcome of extracting against ``asked_step``
            asked_step: The step that was active when the utterance arrived

        Returns:
            True if the value was committed and the state moved forward
        """
        if self._current in (WELCOME_STEP, SUMMARY_STEP):
            logger.debug(f"No extraction accepted in state '{self._current}'")
            return False
        if asked_step.key != self._current:
            logger.warning(
                f"Discarding result for stale step '{asked_step.key}', current step is '{self._current}'"
            )
            return False
        if not result.update_needed or not result.validate():
            logger.info(f"No update for step '{self._current}', question stays active")
            return False
        if result.field != asked_step.extracted_field_name:
            logger.warning(
                f"Dropping result for field '{result.field}', step '{asked_step.key}' "
                f"expects '{asked_step.extracted_field_name}'"
            )
            return False

        self.profile.upsert(result.field, result.value)
        next_key = self.catalog.next_key_after(self._current)
        previous, self._current = self._current, next_key or SUMMARY_STEP
        logger.info(f"Transitioning from '{previous}' to '{self._current}'")
        return True

    def reset(self) -> None:
        """Back to ``welcome`` with an empty profile."""
        self.profile.reset_all()
        self._current = WELCOME_STEP
        logger.info("Sequencer reset to 'welcome'")

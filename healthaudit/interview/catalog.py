"""
Interview question catalog.

The catalog is the rule table for extraction: each step record carries the
question that is asked, the profile field it fills, and the data the prompt
builder needs to describe what counts as a valid answer.
"""
import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from ..config import SUMMARY_STEP

logger = logging.getLogger("catalog")


@dataclass(frozen=True)
class Step:
    """One question in the fixed interview sequence."""
    key: str
    question: str
    extracted_field_name: str
    validation_hint: str
    intent: str
    label: str = ""
    unclear_when: str = "the answer is unclear"

    @property
    def display_label(self) -> str:
        return self.label or self.key


class QuestionCatalog:
    """Read-only ordered sequence of interview steps."""

    def __init__(self, steps: Sequence[Step]):
        keys = [step.key for step in steps]
        duplicates = sorted({k for k in keys if keys.count(k) > 1})
        if duplicates:
            raise ValueError(f"Duplicate step keys in catalog: {duplicates}")
        self._steps: Tuple[Step, ...] = tuple(steps)
        self._index = {step.key: i for i, step in enumerate(self._steps)}

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def keys(self) -> List[str]:
        return [step.key for step in self._steps]

    def fields(self) -> List[str]:
        return [step.extracted_field_name for step in self._steps]

    def step_at(self, index: int) -> Optional[Step]:
        if 0 <= index < len(self._steps):
            return self._steps[index]
        return None

    def index_of(self, key: str) -> int:
        """0-based position of ``key``, or -1 when it is not in the catalog."""
        return self._index.get(key, -1)

    def get(self, key: str) -> Optional[Step]:
        index = self.index_of(key)
        return self._steps[index] if index >= 0 else None

    def first_key(self) -> str:
        """Key the interview starts on; ``summary`` for an empty catalog."""
        return self._steps[0].key if self._steps else SUMMARY_STEP

    def next_key_after(self, key: str) -> Optional[str]:
        """
        Key of the step that follows ``key``.

        Returns ``summary`` after the last entry and None for unknown keys.
        """
        index = self.index_of(key)
        if index < 0:
            logger.warning(f"next_key_after called with unknown step '{key}'")
            return None
        if index == len(self._steps) - 1:
            return SUMMARY_STEP
        return self._steps[index + 1].key


HEALTH_AUDIT_STEPS: Tuple[Step, ...] = (
    Step(
        key="age",
        label="Age",
        question="First, how old are you?",
        extracted_field_name="age",
        intent="Does it state the user's age clearly as a number? If yes, extract the age.",
        validation_hint="the age in whole years written as digits, e.g. \"34\"",
        unclear_when="no age is clearly stated",
    ),
    Step(
        key="lifeStage",
        label="Life Stage",
        question=(
            "What life stage best describes you currently (e.g., Education/Training, Early Career, "
            "Established Career, Family Formation, Empty Nest, Retirement Preparation)?"
        ),
        extracted_field_name="lifeStage",
        intent="Does it clearly indicate the user's current life stage? If yes, extract the stage.",
        validation_hint=(
            "one of Education/Training, Early Career, Established Career, Family Formation, "
            "Empty Nest, Retirement Preparation"
        ),
        unclear_when="no stage is clearly stated",
    ),
    Step(
        key="helmetUsage",
        label="Helmet Usage",
        question=(
            "When engaging in activities with potential physical risk (like cycling, skiing, etc.), "
            "how often do you use safety equipment like helmets? (e.g., Always, Sometimes, Rarely, Never)"
        ),
        extracted_field_name="helmetUsage",
        intent="Does it state how often the user wears safety equipment such as a helmet? If yes, extract the frequency.",
        validation_hint="one of Always, Sometimes, Rarely, Never",
        unclear_when="no frequency is stated",
    ),
    Step(
        key="healthVision",
        label="Health Vision",
        question=(
            "What's most important to you regarding your long-term health? (e.g., Maintaining mobility, "
            "energy, cognitive function, longevity, overall balance)"
        ),
        extracted_field_name="healthVision",
        intent="Does it state the user's primary long-term health goal? If yes, extract the goal.",
        validation_hint="a short phrase such as Energy, Cognitive Function, Physical Mobility, Longevity, Overall Balance",
        unclear_when="no goal is stated",
    ),
    Step(
        key="moneyRelationship",
        label="Money Relationship",
        question=(
            "How would you describe your relationship with money regarding health decisions? "
            "(e.g., Cautious, Balanced, Investing, Anxious, Avoidant)"
        ),
        extracted_field_name="moneyRelationship",
        intent="Does it describe the user's attitude toward spending money on health? If yes, extract it.",
        validation_hint="one of Cautious, Balanced, Investing, Anxious, Avoidant",
        unclear_when="no relationship is stated",
    ),
    Step(
        key="medications",
        label="Medications",
        question=(
            "Are you currently taking any regular medications? If so, could you list them? "
            "(Type 'None' if not applicable)"
        ),
        extracted_field_name="medications",
        intent="Does it say which regular medications the user takes, or that they take none? If yes, extract them.",
        validation_hint="a comma-separated medication list, or \"None\" when the user takes nothing",
        unclear_when="it is unclear",
    ),
    Step(
        key="recordPermission",
        label="Record Permission",
        question=(
            "Would you be open to potentially linking your medical records later to get more "
            "personalized insights? (Yes/No)"
        ),
        extracted_field_name="recordPermission",
        intent="Does it give or refuse permission to link the user's medical records? If yes, extract the answer.",
        validation_hint="exactly \"Yes\" or \"No\"",
        unclear_when="it is unclear",
    ),
    Step(
        key="additionalHealthInfo",
        label="Additional Health Info",
        question=(
            "Is there any other important health information you'd like to share at this time? "
            "(Type 'None' if not applicable)"
        ),
        extracted_field_name="additionalHealthInfo",
        intent=(
            "This is the last question of the interview, which closes on this answer. "
            "Does it share any additional health information, or decline to share more? "
            "If yes, extract the information."
        ),
        validation_hint="the information in the user's own words, or \"Not now\" when they have nothing to add",
        unclear_when="the topic seems unrelated",
    ),
)


def default_catalog() -> QuestionCatalog:
    """The shipped eight-question health audit."""
    return QuestionCatalog(HEALTH_AUDIT_STEPS)

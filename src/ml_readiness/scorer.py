"""Section Scorer.

Maps a section's catalog and response ledger to a 0-100 integer score.
Each section has its own rule because the question mix differs:

- psychometric: rating sum plus a flat credit per single-choice answer
- technical: share of knowledge checks answered correctly
- wiscar: mean of six per-dimension rating averages
"""

import math
from dataclasses import dataclass
from typing import Mapping, Optional

from .catalog import PSYCHOMETRIC_QUESTIONS, TECHNICAL_QUESTIONS, WISCAR_DIMENSIONS, WISCAR_QUESTIONS
from .config import get_config
from .schema import QuestionKind, Response, SectionId


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (50.5 -> 51)."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp a score into [0, 100]."""
    return max(0, min(100, round_half_up(value)))


@dataclass
class ScoringConstants:
    """Constants shared by the scoring rules."""
    rating_max: int = 5
    choice_credit: int = 3  # Flat credit per psychometric single-choice answer


class SectionScorer:
    """Scores completed sections.

    Scoring principles:
    - Pure: output depends only on the responses passed in
    - Missing or non-numeric ratings count as zero
    - Psychometric single-choice answers earn the same credit whichever
      option is picked, so they add no signal to the score
    """

    def __init__(self, constants: Optional[ScoringConstants] = None):
        """Initialize scorer with optional custom constants."""
        if constants is None:
            cfg = get_config().scoring
            constants = ScoringConstants(rating_max=cfg.rating_max, choice_credit=cfg.choice_credit)
        self.constants = constants

    def score_section(self, section_id: SectionId, responses: Mapping[str, Response]) -> int:
        """Score a section with the rule that applies to it."""
        if section_id == SectionId.PSYCHOMETRIC:
            return self.score_psychometric(responses)
        if section_id == SectionId.TECHNICAL:
            return self.score_technical(responses)
        if section_id == SectionId.WISCAR:
            return self.score_wiscar(responses)
        raise ValueError(f"No scoring rule for section {section_id!r}")

    def score_psychometric(self, responses: Mapping[str, Response]) -> int:
        """Rating sum plus flat choice credit, over the maximum possible."""
        ratings = [q for q in PSYCHOMETRIC_QUESTIONS if q.kind == QuestionKind.SCALED_RATING]
        choices = [q for q in PSYCHOMETRIC_QUESTIONS if q.kind == QuestionKind.SINGLE_CHOICE]

        rating_sum = sum(self._rating_value(responses, q.id) for q in ratings)
        choice_credit = len(choices) * self.constants.choice_credit
        max_total = len(ratings) * self.constants.rating_max + choice_credit

        if max_total == 0:
            return 0
        return clamp_score(100 * (rating_sum + choice_credit) / max_total)

    def score_technical(self, responses: Mapping[str, Response]) -> int:
        """Percentage of knowledge checks matching their correct option."""
        if not TECHNICAL_QUESTIONS:
            return 0
        correct = 0
        for question in TECHNICAL_QUESTIONS:
            response = responses.get(question.id)
            if response is not None and response.value == question.correct_option:
                correct += 1
        return clamp_score(100 * correct / len(TECHNICAL_QUESTIONS))

    def score_wiscar_dimensions(self, responses: Mapping[str, Response]) -> dict[str, int]:
        """Per-dimension scores, in dimension order.

        A dimension with no recorded ratings scores 0.
        """
        scores = {}
        for dimension in WISCAR_DIMENSIONS:
            values = [
                responses[q.id].value
                for q in WISCAR_QUESTIONS
                if q.dimension == dimension.id and q.id in responses
            ]
            values = [v for v in values if isinstance(v, int)]
            if not values:
                scores[dimension.id] = 0
                continue
            average = sum(values) / len(values)
            scores[dimension.id] = clamp_score(100 * average / self.constants.rating_max)
        return scores

    def score_wiscar(self, responses: Mapping[str, Response]) -> int:
        """Mean of the six dimension scores."""
        dimension_scores = self.score_wiscar_dimensions(responses)
        if not dimension_scores:
            return 0
        return clamp_score(sum(dimension_scores.values()) / len(dimension_scores))

    def _rating_value(self, responses: Mapping[str, Response], question_id: str) -> int:
        response = responses.get(question_id)
        if response is None or not isinstance(response.value, int):
            return 0
        return response.value

"""Results Synthesizer.

Combines the three section scores into a confidence score, a three-valued
recommendation, and the advice lists that go with it.
"""

from typing import NamedTuple, Optional

from .config import RecommendationThresholdsConfig, get_config
from .schema import AssessmentResults, Recommendation
from .scorer import clamp_score


NEXT_STEPS: dict[Recommendation, tuple[str, ...]] = {
    Recommendation.YES: (
        "Start with Python fundamentals",
        "Learn NumPy and Pandas",
        "Take an intro ML course",
        "Build your first model project",
    ),
    Recommendation.MAYBE: (
        "Strengthen mathematical foundations",
        "Practice programming logic",
        "Explore ML basics through online courses",
        "Consider data analyst roles first",
    ),
    Recommendation.NO: (
        "Explore alternative tech careers",
        "Consider data analysis or software development",
        "Focus on foundational skills first",
        "Reassess in 6-12 months",
    ),
}

CAREER_PATHS: dict[Recommendation, tuple[str, ...]] = {
    Recommendation.YES: (
        "Machine Learning Engineer",
        "AI Research Engineer",
        "NLP Engineer",
        "Computer Vision Engineer",
    ),
    Recommendation.MAYBE: (
        "Data Analyst",
        "Software Engineer",
        "AI Product Manager",
        "Data Engineer",
    ),
    Recommendation.NO: (
        "Software Developer",
        "Data Analyst",
        "Business Analyst",
        "Product Manager",
    ),
}


class RecommendationCopy(NamedTuple):
    """Report text for a recommendation."""
    headline: str
    summary: str
    badge: str


RECOMMENDATION_COPY: dict[Recommendation, RecommendationCopy] = {
    Recommendation.YES: RecommendationCopy(
        headline="You're Ready for ML Engineering!",
        summary=(
            "You demonstrate strong alignment across multiple areas and are ready "
            "to begin your ML engineering journey."
        ),
        badge="Strong Match",
    ),
    Recommendation.MAYBE: RecommendationCopy(
        headline="You Have Potential - Build Your Foundation",
        summary=(
            "You show promise but should strengthen key areas before diving into "
            "ML engineering."
        ),
        badge="Potential Match",
    ),
    Recommendation.NO: RecommendationCopy(
        headline="Consider Alternative Paths First",
        summary=(
            "While ML engineering might not be the best immediate fit, there are "
            "other rewarding tech paths to explore."
        ),
        badge="Alternative Paths Recommended",
    ),
}


def describe_recommendation(recommendation: Recommendation) -> RecommendationCopy:
    """Headline, summary and badge text for a recommendation."""
    return RECOMMENDATION_COPY[recommendation]


class ResultsSynthesizer:
    """Derives the final recommendation from section scores.

    Advice lists depend only on the recommendation bucket, never on the
    exact confidence score.
    """

    def __init__(self, thresholds: Optional[RecommendationThresholdsConfig] = None):
        """Initialize synthesizer with configured thresholds."""
        cfg = thresholds or get_config().thresholds
        self.yes_threshold = cfg.yes_threshold
        self.no_threshold = cfg.no_threshold

    def classify(self, confidence_score: int) -> Recommendation:
        """Bucket a confidence score. 75 is a yes, 50 is a maybe."""
        if confidence_score >= self.yes_threshold:
            return Recommendation.YES
        if confidence_score < self.no_threshold:
            return Recommendation.NO
        return Recommendation.MAYBE

    def synthesize(
        self,
        psychometric_score: int,
        technical_score: int,
        wiscar_score: int,
    ) -> AssessmentResults:
        """Build the results for a finished assessment.

        Args:
            psychometric_score: Psychometric section score (0-100)
            technical_score: Technical section score (0-100)
            wiscar_score: WISCAR section score (0-100)

        Returns:
            Immutable AssessmentResults
        """
        confidence_score = clamp_score((psychometric_score + technical_score + wiscar_score) / 3)
        recommendation = self.classify(confidence_score)

        return AssessmentResults(
            psychometric_fit=psychometric_score,
            technical_readiness=technical_score,
            wiscar_score=wiscar_score,
            confidence_score=confidence_score,
            recommendation=recommendation,
            next_steps=NEXT_STEPS[recommendation],
            career_paths=CAREER_PATHS[recommendation],
        )

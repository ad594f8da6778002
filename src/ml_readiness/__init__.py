"""ML engineering readiness self-assessment.

Tracks progress through three questionnaire sections, scores each one and
synthesizes a final recommendation.
"""

from ml_readiness.engine import AssessmentEngine
from ml_readiness.exceptions import (
    AssessmentError,
    IncompleteSectionError,
    InvalidResponseError,
    InvalidTransitionError,
    StorageUnavailableError,
    UnknownQuestionIdError,
    UnknownSectionIdError,
)
from ml_readiness.schema import (
    AssessmentResults,
    AssessmentSession,
    QuestionKind,
    Recommendation,
    SectionId,
)
from ml_readiness.storage import InMemorySessionStore, JsonFileSessionStore, SessionStore

__version__ = "1.0.0"

__all__ = [
    "AssessmentEngine",
    "AssessmentError",
    "AssessmentResults",
    "AssessmentSession",
    "IncompleteSectionError",
    "InMemorySessionStore",
    "InvalidResponseError",
    "InvalidTransitionError",
    "JsonFileSessionStore",
    "QuestionKind",
    "Recommendation",
    "SectionId",
    "SessionStore",
    "StorageUnavailableError",
    "UnknownQuestionIdError",
    "UnknownSectionIdError",
]

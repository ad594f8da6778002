"""Pydantic models for the readiness assessment.

Static question definitions, the per-section response ledger, the session
aggregate that the state machine owns, and the synthesized results.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator


# =============================================================================
# Enums
# =============================================================================


class QuestionKind(str, Enum):
    """Input kind of a question."""
    SCALED_RATING = "scaled_rating"  # 1-5 Likert
    SINGLE_CHOICE = "single_choice"  # one of a fixed option list


class SectionId(str, Enum):
    """The three sequential assessment sections."""
    PSYCHOMETRIC = "psychometric"
    TECHNICAL = "technical"
    WISCAR = "wiscar"

    @classmethod
    def from_string(cls, value: str) -> Optional["SectionId"]:
        """Parse a section id, returning None when it is not recognized."""
        if isinstance(value, cls):
            return value
        if not value:
            return None
        mapping = {member.value: member for member in cls}
        return mapping.get(str(value).strip().lower())


class Recommendation(str, Enum):
    """Final three-valued verdict."""
    YES = "yes"
    MAYBE = "maybe"
    NO = "no"


SECTION_ORDER: tuple[SectionId, ...] = (
    SectionId.PSYCHOMETRIC,
    SectionId.TECHNICAL,
    SectionId.WISCAR,
)

RATING_MIN = 1
RATING_MAX = 5


# =============================================================================
# Static Catalog Models
# =============================================================================


class QuestionDefinition(BaseModel):
    """A single questionnaire item."""
    model_config = ConfigDict(frozen=True)

    id: str
    kind: QuestionKind
    prompt: str
    category: Optional[str] = None
    options: tuple[str, ...] = ()
    correct_option: Optional[str] = None  # Knowledge-check items only
    dimension: Optional[str] = None  # WISCAR items only

    @model_validator(mode="after")
    def _check_options(self) -> "QuestionDefinition":
        if self.kind == QuestionKind.SINGLE_CHOICE and not self.options:
            raise ValueError(f"single-choice question '{self.id}' needs options")
        if self.kind == QuestionKind.SCALED_RATING and self.options:
            raise ValueError(f"rating question '{self.id}' cannot declare options")
        if self.correct_option is not None and self.correct_option not in self.options:
            raise ValueError(f"correct option for '{self.id}' is not one of its options")
        return self


class WiscarDimension(BaseModel):
    """One of the six WISCAR dimensions."""
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str


class SectionDefinition(BaseModel):
    """Display metadata and catalog for one section."""
    model_config = ConfigDict(frozen=True)

    id: SectionId
    title: str
    description: str
    questions: tuple[QuestionDefinition, ...]


# =============================================================================
# Session Models
# =============================================================================


class Response(BaseModel):
    """A recorded answer. Ratings are ints, choices are option strings."""
    question_id: str
    value: Union[StrictInt, StrictStr]


class SectionState(BaseModel):
    """Progress, score and responses for one section."""
    id: SectionId
    title: str
    description: str
    completed: bool = False
    score: Optional[int] = Field(default=None, ge=0, le=100)
    # Keyed by question id, kept sorted by id
    responses: dict[str, Response] = Field(default_factory=dict)
    # WISCAR breakdown captured when the section was completed
    dimension_scores: dict[str, int] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_state(self) -> "SectionState":
        if self.score is not None and not self.completed:
            raise ValueError(f"section '{self.id.value}' has a score but is not completed")
        if self.dimension_scores and not self.completed:
            raise ValueError(f"section '{self.id.value}' has dimension scores but is not completed")
        for dimension, value in self.dimension_scores.items():
            if not 0 <= value <= 100:
                raise ValueError(f"dimension score for '{dimension}' is outside 0-100")
        for key, response in self.responses.items():
            if key != response.question_id:
                raise ValueError(
                    f"response keyed '{key}' belongs to '{response.question_id}'"
                )
        return self

    def get_score(self) -> Optional[int]:
        """Score of the section, or None until it has been completed."""
        return self.score if self.completed else None


class AssessmentResults(BaseModel):
    """Synthesized outcome of a finished assessment."""
    model_config = ConfigDict(frozen=True)

    psychometric_fit: int = Field(..., ge=0, le=100)
    technical_readiness: int = Field(..., ge=0, le=100)
    wiscar_score: int = Field(..., ge=0, le=100)
    confidence_score: int = Field(..., ge=0, le=100)
    recommendation: Recommendation
    next_steps: tuple[str, ...] = ()
    career_paths: tuple[str, ...] = ()


class AssessmentSession(BaseModel):
    """Root aggregate: the single source of truth for one assessment.

    Persisted and restored as a whole unit.
    """
    current_section_index: int = 0
    sections: list[SectionState]
    results: Optional[AssessmentResults] = None
    is_completed: bool = False

    @model_validator(mode="after")
    def _check_invariants(self) -> "AssessmentSession":
        from .catalog import get_catalog
        from .config import get_config
        from .exceptions import InvalidResponseError
        from .ledger import validate_response

        ids = tuple(s.id for s in self.sections)
        if ids != SECTION_ORDER:
            raise ValueError(
                "sections must be " + ", ".join(s.value for s in SECTION_ORDER)
            )
        if not 0 <= self.current_section_index < len(self.sections):
            raise ValueError(
                f"current_section_index {self.current_section_index} out of range"
            )
        if (self.results is not None) != self.is_completed:
            raise ValueError("results must be present exactly when the assessment is completed")

        rating_max = get_config().scoring.rating_max
        for section in self.sections:
            known = {q.id: q for q in get_catalog(section.id)}
            foreign = [qid for qid in section.responses if qid not in known]
            if foreign:
                raise ValueError(
                    f"section '{section.id.value}' holds unknown question ids: {', '.join(foreign)}"
                )
            for qid, response in section.responses.items():
                try:
                    validate_response(known[qid], response.value, rating_max=rating_max)
                except InvalidResponseError as e:
                    raise ValueError(f"section '{section.id.value}': {e.message}") from e
            if section.completed and len(section.responses) != len(known):
                raise ValueError(
                    f"section '{section.id.value}' is completed but not fully answered"
                )
        return self

    @classmethod
    def initial(cls) -> "AssessmentSession":
        """Create a fresh session positioned on the first section."""
        from .catalog import SECTION_DEFINITIONS

        return cls(
            sections=[
                SectionState(
                    id=definition.id,
                    title=definition.title,
                    description=definition.description,
                )
                for definition in SECTION_DEFINITIONS
            ],
        )

    def get_section(self, section_id: SectionId) -> SectionState:
        """Get the state of a section by id."""
        for section in self.sections:
            if section.id == section_id:
                return section
        raise KeyError(section_id)

    @property
    def last_index(self) -> int:
        return len(self.sections) - 1

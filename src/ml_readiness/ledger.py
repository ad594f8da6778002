"""Response Ledger.

Validates answers against the static catalogs and upserts them into a
section's response mapping. Functions here never mutate their input; they
return an updated copy so the engine can commit or discard it as a whole.
"""

import logging
from typing import Union

from .catalog import get_catalog, get_question
from .exceptions import InvalidResponseError
from .schema import (
    RATING_MIN,
    QuestionDefinition,
    QuestionKind,
    Response,
    SectionState,
)

logger = logging.getLogger(__name__)

ResponseValue = Union[int, str]


def validate_response(
    question: QuestionDefinition,
    value: ResponseValue,
    rating_max: int = 5,
) -> Response:
    """Check a value against its question's kind and domain.

    Ratings must be ints in ``RATING_MIN..rating_max`` (bools are rejected),
    single-choice answers must equal one of the declared options.

    Raises:
        InvalidResponseError: If the value does not fit the question.
    """
    if question.kind == QuestionKind.SCALED_RATING:
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidResponseError(
                question.id, value, f"expected an integer rating {RATING_MIN}-{rating_max}"
            )
        if not RATING_MIN <= value <= rating_max:
            raise InvalidResponseError(
                question.id, value, f"rating {value} is outside {RATING_MIN}-{rating_max}"
            )
    else:
        if not isinstance(value, str) or value not in question.options:
            raise InvalidResponseError(
                question.id, value, "not one of the question's options"
            )
    return Response(question_id=question.id, value=value)


def record_response(
    section: SectionState,
    question_id: str,
    value: ResponseValue,
    rating_max: int = 5,
) -> SectionState:
    """Insert or replace the response for a question.

    Returns a copy of the section with the response applied. The mapping
    stays sorted by question id and holds at most one entry per id.

    Raises:
        UnknownQuestionIdError: If the question is not in the section's catalog.
        InvalidResponseError: If the value does not fit the question.
    """
    question = get_question(section.id, question_id)
    response = validate_response(question, value, rating_max=rating_max)

    responses = dict(section.responses)
    responses[question_id] = response
    updated = section.model_copy(deep=True)
    updated.responses = {qid: responses[qid] for qid in sorted(responses)}

    logger.debug("Recorded %s/%s = %r", section.id.value, question_id, value)
    return updated


def missing_question_ids(section: SectionState) -> list[str]:
    """Catalog ids that still have no response, in catalog order."""
    return [q.id for q in get_catalog(section.id) if q.id not in section.responses]


def is_section_fully_answered(section: SectionState) -> bool:
    """True when every question in the section's catalog has a response."""
    return not missing_question_ids(section)

"""Shared fixtures for the readiness assessment tests."""

import logging

import pytest

from ml_readiness.app_logging import ROOT_LOGGER_NAME
from ml_readiness.catalog import PSYCHOMETRIC_QUESTIONS, TECHNICAL_QUESTIONS, WISCAR_QUESTIONS
from ml_readiness.config import reset_config
from ml_readiness.engine import AssessmentEngine
from ml_readiness.schema import QuestionKind, SectionId
from ml_readiness.storage import InMemorySessionStore


def wrong_option(question) -> str:
    """First option that is not the correct one."""
    return next(opt for opt in question.options if opt != question.correct_option)


def answer_psychometric(engine: AssessmentEngine, rating: int = 5) -> None:
    for q in PSYCHOMETRIC_QUESTIONS:
        value = rating if q.kind == QuestionKind.SCALED_RATING else q.options[0]
        engine.record_response(SectionId.PSYCHOMETRIC, q.id, value)


def answer_technical(engine: AssessmentEngine, correct: int = 6) -> None:
    """Answer the technical section with the first `correct` items right."""
    for i, q in enumerate(TECHNICAL_QUESTIONS):
        value = q.correct_option if i < correct else wrong_option(q)
        engine.record_response(SectionId.TECHNICAL, q.id, value)


def answer_wiscar(engine: AssessmentEngine, rating: int = 5) -> None:
    for q in WISCAR_QUESTIONS:
        engine.record_response(SectionId.WISCAR, q.id, rating)


@pytest.fixture(autouse=True)
def _isolate_globals():
    """Reset global config and drop log handlers installed by CLI runs."""
    reset_config()
    yield
    reset_config()
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def engine(store) -> AssessmentEngine:
    return AssessmentEngine(store=store, strict=True)


@pytest.fixture
def lenient_engine(store) -> AssessmentEngine:
    return AssessmentEngine(store=store, strict=False)

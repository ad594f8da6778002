"""Tests for the assessment state machine."""

from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError

from conftest import answer_psychometric, answer_technical, answer_wiscar
from ml_readiness.config import RecommendationThresholdsConfig
from ml_readiness.engine import AssessmentEngine
from ml_readiness.exceptions import (
    IncompleteSectionError,
    InvalidResponseError,
    InvalidTransitionError,
    StorageUnavailableError,
    UnknownQuestionIdError,
    UnknownSectionIdError,
)
from ml_readiness.schema import AssessmentSession, Recommendation, SectionId
from ml_readiness.storage import InMemorySessionStore, SessionStore
from ml_readiness.synthesizer import ResultsSynthesizer


def run_to_last_section(engine: AssessmentEngine) -> None:
    engine.advance()
    engine.advance()
    assert engine.get_session().current_section_index == 2


def complete_everything(engine: AssessmentEngine, rating: int = 5, correct: int = 6) -> None:
    answer_psychometric(engine, rating)
    engine.complete_section("psychometric")
    engine.advance()
    answer_technical(engine, correct)
    engine.complete_section("technical")
    engine.advance()
    answer_wiscar(engine, rating)
    engine.complete_section("wiscar")


class FailingStore(SessionStore):
    """Store whose every operation fails."""

    def __init__(self):
        self.save_attempts = 0

    def save(self, key, session):
        self.save_attempts += 1
        raise StorageUnavailableError("disk full")

    def load(self, key):
        raise StorageUnavailableError("permission denied")


class TestInitialState:
    """Tests for a fresh engine."""

    def test_starts_on_first_section(self, engine):
        session = engine.get_session()
        assert session == AssessmentSession.initial()
        assert engine.current_section().id == SectionId.PSYCHOMETRIC
        assert engine.progress_percent() == 0

    def test_snapshot_is_isolated(self, engine):
        snapshot = engine.get_session()
        snapshot.current_section_index = 2
        snapshot.sections[0].completed = True
        assert engine.get_session() == AssessmentSession.initial()

    def test_engines_do_not_share_state(self):
        first = AssessmentEngine(strict=True)
        second = AssessmentEngine(strict=True)
        first.record_response("technical", "ml_2", "NumPy")
        assert second.get_session().get_section(SectionId.TECHNICAL).responses == {}


class TestRecordResponse:
    """Tests for recording answers through the engine."""

    def test_upsert_keeps_one_response(self, engine):
        engine.record_response("technical", "ml_2", "TensorFlow")
        session = engine.record_response("technical", "ml_2", "NumPy")

        responses = session.get_section(SectionId.TECHNICAL).responses
        assert len(responses) == 1
        assert responses["ml_2"].value == "NumPy"

    def test_invalid_value_leaves_state_unchanged(self, engine):
        engine.record_response("psychometric", "interest_1", 4)
        before = engine.get_session()

        with pytest.raises(InvalidResponseError):
            engine.record_response("psychometric", "interest_1", 9)

        assert engine.get_session() == before

    def test_any_section_can_be_answered(self, engine):
        engine.record_response(SectionId.WISCAR, "will_0", 2)
        assert engine.get_session().current_section_index == 0
        assert engine.get_session().get_section(SectionId.WISCAR).responses["will_0"].value == 2

    def test_unknown_ids_raise_in_strict_mode(self, engine):
        with pytest.raises(UnknownSectionIdError):
            engine.record_response("aptitude", "q", 1)
        with pytest.raises(UnknownQuestionIdError):
            engine.record_response("technical", "interest_1", 1)

    def test_unknown_ids_ignored_in_lenient_mode(self, lenient_engine):
        before = lenient_engine.get_session()
        lenient_engine.record_response("aptitude", "q", 1)
        lenient_engine.record_response("technical", "interest_1", 1)
        assert lenient_engine.get_session() == before
        assert lenient_engine.complete_section("aptitude") is None


class TestCompleteSection:
    """Tests for section completion and scoring."""

    def test_incomplete_section_refused(self, engine):
        engine.record_response("technical", "ml_2", "TensorFlow")
        before = engine.get_session()

        with pytest.raises(IncompleteSectionError) as exc_info:
            engine.complete_section("technical")

        assert "logic_1" in exc_info.value.missing
        assert engine.get_session() == before

    def test_sets_score_and_flag(self, engine):
        answer_technical(engine, correct=3)
        score = engine.complete_section("technical")

        section = engine.get_session().get_section(SectionId.TECHNICAL)
        assert score == 50
        assert section.completed
        assert section.get_score() == 50

    def test_idempotent(self, engine):
        answer_wiscar(engine, 1)
        first = engine.complete_section("wiscar")
        second = engine.complete_section("wiscar")
        assert first == second == 20

    def test_recompute_after_changed_answer(self, engine):
        answer_technical(engine, correct=6)
        assert engine.complete_section("technical") == 100

        engine.record_response("technical", "ml_2", "NumPy")
        assert engine.complete_section("technical") == 83

    @pytest.mark.parametrize(
        "section,answer,expected",
        [
            ("psychometric", lambda e: answer_psychometric(e, 5), 100),
            ("technical", lambda e: answer_technical(e, 0), 0),
            ("wiscar", lambda e: answer_wiscar(e, 5), 100),
        ],
    )
    def test_section_rules(self, engine, section, answer, expected):
        answer(engine)
        assert engine.complete_section(section) == expected


class TestNavigation:
    """Tests for advance / retreat."""

    def test_advance_and_retreat(self, engine):
        engine.advance()
        assert engine.current_section().id == SectionId.TECHNICAL
        assert engine.progress_percent() == 33

        engine.retreat()
        assert engine.current_section().id == SectionId.PSYCHOMETRIC

    def test_retreat_at_first_section_is_noop(self, engine):
        session = engine.retreat()
        assert session.current_section_index == 0

    def test_advance_does_not_require_completion(self, engine):
        run_to_last_section(engine)
        assert not engine.is_completed


class TestFinish:
    """Tests for finishing the assessment."""

    def test_advance_from_last_section_finishes_once(self, store):
        synthesizer = MagicMock(wraps=ResultsSynthesizer(RecommendationThresholdsConfig()))
        engine = AssessmentEngine(store=store, synthesizer=synthesizer, strict=True)
        complete_everything(engine)

        session = engine.advance()
        assert session.is_completed
        results = session.results

        engine.advance()
        engine.advance()
        engine.finish()

        assert synthesizer.synthesize.call_count == 1
        assert engine.get_session().results == results
        assert engine.progress_percent() == 100

    def test_full_marks_recommend_yes(self, engine):
        complete_everything(engine)
        results = engine.finish().results

        assert (results.psychometric_fit, results.technical_readiness, results.wiscar_score) == (100, 100, 100)
        assert results.confidence_score == 100
        assert results.recommendation == Recommendation.YES
        assert results.career_paths[0] == "Machine Learning Engineer"

    def test_low_marks_recommend_no(self, engine):
        complete_everything(engine, rating=1, correct=0)
        results = engine.finish().results

        # psychometric 38, technical 0, wiscar 20
        assert results.confidence_score == 19
        assert results.recommendation == Recommendation.NO

    def test_uncompleted_sections_count_zero(self, engine):
        answer_wiscar(engine, 5)
        engine.complete_section("wiscar")
        run_to_last_section(engine)

        results = engine.finish().results
        assert results.psychometric_fit == 0
        assert results.technical_readiness == 0
        assert results.wiscar_score == 100
        assert results.confidence_score == 33

    def test_wiscar_breakdown_empty_when_never_completed(self, engine):
        answer_wiscar(engine, 5)
        run_to_last_section(engine)

        results = engine.finish().results
        assert results.wiscar_score == 0
        assert engine.wiscar_dimension_scores() == {}

    def test_wiscar_breakdown_matches_completed_score(self, engine):
        answer_wiscar(engine, 1)
        assert engine.complete_section("wiscar") == 20

        # Changed answers do not leak into the recorded breakdown
        engine.record_response("wiscar", "will_0", 5)
        breakdown = engine.wiscar_dimension_scores()
        assert set(breakdown.values()) == {20}

        engine.complete_section("wiscar")
        assert engine.wiscar_dimension_scores()["will"] == 47

    def test_finish_before_last_section_rejected(self, engine):
        with pytest.raises(InvalidTransitionError):
            engine.finish()
        assert not engine.is_completed

    def test_completed_session_is_read_only(self, engine):
        run_to_last_section(engine)
        engine.finish()

        with pytest.raises(InvalidTransitionError):
            engine.record_response("technical", "ml_2", "NumPy")
        with pytest.raises(InvalidTransitionError):
            engine.complete_section("technical")

        assert engine.retreat().is_completed


class TestReset:
    """Tests for reset."""

    def test_reset_restores_fresh_session(self, engine):
        complete_everything(engine)
        engine.finish()

        session = engine.reset()

        assert session == AssessmentSession.initial()
        assert session.model_dump() == AssessmentEngine(strict=True).get_session().model_dump()

    def test_reset_mid_assessment(self, engine):
        answer_psychometric(engine)
        engine.advance()
        assert engine.reset() == AssessmentSession.initial()

    def test_can_retake_after_reset(self, engine):
        complete_everything(engine, rating=1, correct=0)
        assert engine.finish().results.recommendation == Recommendation.NO

        engine.reset()
        complete_everything(engine)
        assert engine.finish().results.recommendation == Recommendation.YES


class TestPersistence:
    """Tests for the storage collaborator integration."""

    def test_saved_after_every_mutation(self, engine, store):
        engine.record_response("technical", "ml_2", "TensorFlow")
        assert store.load(engine.key) == engine.get_session()

        engine.advance()
        assert store.load(engine.key).current_section_index == 1

    def test_restores_saved_session(self, store):
        first = AssessmentEngine(store=store, strict=True)
        complete_everything(first)
        first.finish()

        second = AssessmentEngine(store=store, strict=True)
        assert second.get_session() == first.get_session()
        assert second.is_completed

    def test_separate_keys(self, store):
        AssessmentEngine(store=store, key="alice", strict=True).advance()
        bob = AssessmentEngine(store=store, key="bob", strict=True)
        assert bob.get_session().current_section_index == 0
        assert store.keys() == ["alice"]

    def test_storage_failure_is_not_fatal(self):
        failing = FailingStore()
        engine = AssessmentEngine(store=failing, strict=True)
        assert engine.storage_warning == "permission denied"

        engine.record_response("technical", "ml_2", "TensorFlow")
        engine.advance()

        assert failing.save_attempts == 2
        assert engine.storage_warning == "disk full"
        assert engine.get_session().current_section_index == 1

    def test_warning_cleared_after_successful_save(self):
        store = InMemorySessionStore()
        engine = AssessmentEngine(store=store, strict=True)
        engine.storage_warning = "stale"
        engine.advance()
        assert engine.storage_warning is None

    def test_memory_only_engine(self):
        engine = AssessmentEngine(strict=True)
        engine.advance()
        assert engine.get_session().current_section_index == 1


class TestCommitValidation:
    """Tests that invalid candidates never replace the session."""

    def test_invalid_candidate_rejected(self, engine):
        before = engine.get_session()
        candidate = engine.get_session()
        candidate.current_section_index = 7

        with pytest.raises(ValidationError):
            engine._commit(candidate)

        assert engine.get_session() == before

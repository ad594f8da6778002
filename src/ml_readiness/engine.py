"""Assessment State Machine.

Owns one AssessmentSession and exposes the operations the presentation layer
drives: recording answers, completing sections, moving between sections,
finishing and resetting.

States are ``InProgress(current_section_index)`` and ``Completed``. Every
mutation builds a candidate session, validates it, swaps it in, and then
hands it to the storage collaborator. A rejected operation leaves the
previous session untouched.
"""

import logging
from typing import Optional, Union

from . import ledger
from .catalog import resolve_section_id
from .config import get_config
from .exceptions import (
    IncompleteSectionError,
    InvalidTransitionError,
    StorageUnavailableError,
    UnknownQuestionIdError,
    UnknownSectionIdError,
)
from .schema import AssessmentResults, AssessmentSession, SectionId, SectionState
from .scorer import SectionScorer, round_half_up
from .storage import SessionStore
from .synthesizer import ResultsSynthesizer

logger = logging.getLogger(__name__)


class AssessmentEngine:
    """Drives a single assessment session.

    Engines are constructed explicitly and share nothing, so several can
    coexist (one per user, one per test).
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        key: Optional[str] = None,
        scorer: Optional[SectionScorer] = None,
        synthesizer: Optional[ResultsSynthesizer] = None,
        strict: Optional[bool] = None,
    ):
        """Create an engine, restoring the saved session if the store has one.

        Args:
            store: Storage collaborator. None keeps the session in memory only.
            key: Storage key. Defaults to the configured key.
            scorer: Section scorer. Defaults to one built from configuration.
            synthesizer: Results synthesizer. Defaults to configured thresholds.
            strict: Raise on unknown section/question ids instead of logging
                and ignoring them. Defaults to the configured value.
        """
        cfg = get_config()
        self.store = store
        self.key = key or cfg.storage.key
        self.scorer = scorer or SectionScorer()
        self.synthesizer = synthesizer or ResultsSynthesizer()
        self.strict = cfg.strict if strict is None else strict
        self.storage_warning: Optional[str] = None
        self._session = self._restore()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_session(self) -> AssessmentSession:
        """Snapshot of the current session. Mutating it does not affect the engine."""
        return self._session.model_copy(deep=True)

    @property
    def is_completed(self) -> bool:
        return self._session.is_completed

    @property
    def results(self) -> Optional[AssessmentResults]:
        return self._session.results

    def current_section(self) -> SectionState:
        """State of the section currently being worked on."""
        return self._session.sections[self._session.current_section_index].model_copy(deep=True)

    def progress_percent(self) -> int:
        """Share of sections passed so far, 100 once completed."""
        if self._session.is_completed:
            return 100
        return round_half_up(100 * self._session.current_section_index / len(self._session.sections))

    def is_section_fully_answered(self, section_id: Union[SectionId, str]) -> bool:
        """True when every question in the section has a response."""
        sid = self._resolve_section(section_id)
        if sid is None:
            return False
        return ledger.is_section_fully_answered(self._session.get_section(sid))

    def missing_questions(self, section_id: Union[SectionId, str]) -> list[str]:
        """Question ids of the section that have no response yet."""
        sid = self._resolve_section(section_id)
        if sid is None:
            return []
        return ledger.missing_question_ids(self._session.get_section(sid))

    def wiscar_dimension_scores(self) -> dict[str, int]:
        """Per-dimension WISCAR breakdown recorded when the section was completed.

        Empty until the WISCAR section has been completed.
        """
        section = self._session.get_section(SectionId.WISCAR)
        if not section.completed:
            return {}
        return dict(section.dimension_scores)

    # ------------------------------------------------------------------
    # Response ledger
    # ------------------------------------------------------------------

    def record_response(
        self,
        section_id: Union[SectionId, str],
        question_id: str,
        value: ledger.ResponseValue,
    ) -> AssessmentSession:
        """Insert or replace the answer to one question.

        Raises:
            InvalidResponseError: If the value does not fit the question.
            InvalidTransitionError: If the assessment is already completed.
            UnknownSectionIdError, UnknownQuestionIdError: In strict mode only.
        """
        sid = self._resolve_section(section_id)
        if sid is None:
            return self.get_session()
        self._require_in_progress("record a response")

        index = self._section_index(sid)
        try:
            updated = ledger.record_response(
                self._session.sections[index],
                question_id,
                value,
                rating_max=self.scorer.constants.rating_max,
            )
        except UnknownQuestionIdError as e:
            if self.strict:
                raise
            logger.error("Ignoring response: %s", e)
            return self.get_session()

        candidate = self._session.model_copy(deep=True)
        candidate.sections[index] = updated
        self._commit(candidate)
        return self.get_session()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def complete_section(self, section_id: Union[SectionId, str]) -> Optional[int]:
        """Score a fully answered section and mark it completed.

        Completing an already completed section recomputes and overwrites the
        score, so repeated calls with the same responses give the same score.

        Returns:
            The section score, or None when the id was ignored (non-strict mode).

        Raises:
            IncompleteSectionError: If any question is still unanswered.
            InvalidTransitionError: If the assessment is already completed.
        """
        sid = self._resolve_section(section_id)
        if sid is None:
            return None
        self._require_in_progress("complete a section")

        index = self._section_index(sid)
        section = self._session.sections[index]
        missing = ledger.missing_question_ids(section)
        if missing:
            raise IncompleteSectionError(sid.value, missing)

        score = self.scorer.score_section(sid, section.responses)

        candidate = self._session.model_copy(deep=True)
        candidate.sections[index].completed = True
        candidate.sections[index].score = score
        if sid == SectionId.WISCAR:
            candidate.sections[index].dimension_scores = self.scorer.score_wiscar_dimensions(
                section.responses
            )
        self._commit(candidate)

        logger.info("Section '%s' completed with score %d", sid.value, score)
        return score

    def advance(self) -> AssessmentSession:
        """Move to the next section, or finish when on the last one.

        No-op once the assessment is completed.
        """
        if self._session.is_completed:
            logger.debug("advance() ignored: assessment already completed")
            return self.get_session()

        if self._session.current_section_index >= self._session.last_index:
            return self.finish()

        candidate = self._session.model_copy(deep=True)
        candidate.current_section_index += 1
        self._commit(candidate)
        return self.get_session()

    def retreat(self) -> AssessmentSession:
        """Move back one section. No-op on the first section or once completed."""
        if self._session.is_completed or self._session.current_section_index == 0:
            logger.debug("retreat() ignored at index %d", self._session.current_section_index)
            return self.get_session()

        candidate = self._session.model_copy(deep=True)
        candidate.current_section_index -= 1
        self._commit(candidate)
        return self.get_session()

    def finish(self) -> AssessmentSession:
        """Synthesize results from the last section and enter Completed.

        Sections that were never completed contribute a score of 0. Calling
        this on a completed session does nothing, results are never
        synthesized twice.

        Raises:
            InvalidTransitionError: If called before reaching the last section.
        """
        if self._session.is_completed:
            logger.debug("finish() ignored: assessment already completed")
            return self.get_session()

        if self._session.current_section_index != self._session.last_index:
            raise InvalidTransitionError(
                "The assessment can only be finished from the last section"
            )

        scores = {s.id: s.get_score() or 0 for s in self._session.sections}
        results = self.synthesizer.synthesize(
            scores[SectionId.PSYCHOMETRIC],
            scores[SectionId.TECHNICAL],
            scores[SectionId.WISCAR],
        )

        candidate = self._session.model_copy(deep=True)
        candidate.results = results
        candidate.is_completed = True
        self._commit(candidate)

        logger.info(
            "Assessment completed: confidence %d, recommendation '%s'",
            results.confidence_score,
            results.recommendation.value,
        )
        return self.get_session()

    def reset(self) -> AssessmentSession:
        """Return to a fresh session from any state."""
        self._commit(AssessmentSession.initial())
        logger.info("Assessment reset")
        return self.get_session()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _restore(self) -> AssessmentSession:
        if self.store is None:
            return AssessmentSession.initial()
        try:
            saved = self.store.load(self.key)
        except StorageUnavailableError as e:
            self._storage_failed(e)
            saved = None
        if saved is None:
            return AssessmentSession.initial()
        logger.debug("Restored session '%s'", self.key)
        return saved

    def _commit(self, candidate: AssessmentSession) -> None:
        # Re-validate so invariant violations raise before anything is replaced
        self._session = AssessmentSession.model_validate(candidate.model_dump())
        self._persist()

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self.key, self._session)
        except StorageUnavailableError as e:
            self._storage_failed(e)
        else:
            self.storage_warning = None

    def _storage_failed(self, error: StorageUnavailableError) -> None:
        self.storage_warning = error.message
        logger.warning("Session storage unavailable, continuing in memory: %s", error.message)

    def _resolve_section(self, section_id: Union[SectionId, str]) -> Optional[SectionId]:
        try:
            return resolve_section_id(section_id)
        except UnknownSectionIdError as e:
            if self.strict:
                raise
            logger.error("Ignoring call: %s", e)
            return None

    def _section_index(self, section_id: SectionId) -> int:
        for index, section in enumerate(self._session.sections):
            if section.id == section_id:
                return index
        raise UnknownSectionIdError(section_id.value)

    def _require_in_progress(self, action: str) -> None:
        if self._session.is_completed:
            raise InvalidTransitionError(
                f"Cannot {action}: the assessment is completed, reset to start over"
            )

"""
Custom exceptions for the readiness assessment.
"""


class AssessmentError(Exception):
    """Base exception for the assessment core."""
    pass


class InvalidResponseError(AssessmentError):
    """Raised when a recorded value does not fit its question."""
    def __init__(self, question_id: str, value: object, reason: str):
        self.question_id = question_id
        self.value = value
        self.message = f"Invalid response for '{question_id}': {reason}"
        super().__init__(self.message)


class IncompleteSectionError(AssessmentError):
    """Raised when a section is completed before every question is answered."""
    def __init__(self, section_id: str, missing: list[str]):
        self.section_id = section_id
        self.missing = missing
        self.message = (
            f"Section '{section_id}' has {len(missing)} unanswered question(s): "
            f"{', '.join(missing)}"
        )
        super().__init__(self.message)


class UnknownSectionIdError(AssessmentError):
    """Raised when a caller references a section outside the catalogs."""
    def __init__(self, section_id: str):
        self.section_id = section_id
        self.message = f"Unknown section id: {section_id}"
        super().__init__(self.message)


class UnknownQuestionIdError(AssessmentError):
    """Raised when a question id is not part of the section's catalog."""
    def __init__(self, section_id: str, question_id: str):
        self.section_id = section_id
        self.question_id = question_id
        self.message = f"Unknown question id '{question_id}' in section '{section_id}'"
        super().__init__(self.message)


class InvalidTransitionError(AssessmentError):
    """Raised when a state transition is requested from the wrong state."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class StorageUnavailableError(AssessmentError):
    """Raised by session stores when a read or write fails."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

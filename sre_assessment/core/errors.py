from __future__ import annotations


class InvalidArgument(ValueError):
    """An index, ordinal or wire key that does not fit the questionnaire."""


class ConfigurationError(ValueError):
    """The questionnaire definition cannot be used (missing or empty)."""


class SubmissionNotFound(LookupError):
    def __init__(self, submission_id: int):
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class SubmissionError(RuntimeError):
    """The backend could not be reached or rejected the request."""

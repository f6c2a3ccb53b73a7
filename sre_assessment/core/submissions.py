from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionPayload(BaseModel):
    """Body of a submit request; ``answers`` uses the flat panel_{p}_question_{q} keys."""

    answers: Dict[str, int]
    team: str = Field(min_length=1, max_length=200)
    score: int = Field(default=0, ge=0, le=100)
    previous_score: int = Field(default=0, ge=0, le=100)
    version: int = Field(default=1, ge=1)
    timestamp: Optional[datetime] = None

    @field_validator("team")
    @classmethod
    def _strip_team(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("team must not be blank")
        return v


class SubmissionUpdate(SubmissionPayload):
    id: int


class LegacySubmission(BaseModel):
    """Body accepted by /api/submit-questionnaire, the original single-endpoint backend."""

    answers: Dict[str, int]
    timestamp: Optional[datetime] = None
    team: str = ""


class Submission(BaseModel):
    id: int
    team: str
    answers: Dict[str, int]
    score: int
    previous_score: int
    version: int
    timestamp: datetime

    @property
    def score_delta(self) -> int:
        return self.score - self.previous_score


def create_payload(team: str, answers: Dict[str, int], score: int, timestamp: Optional[datetime] = None) -> SubmissionPayload:
    return SubmissionPayload(
        answers=answers,
        team=team,
        score=score,
        previous_score=0,
        version=1,
        timestamp=timestamp or utcnow(),
    )


def revise_payload(
    existing: Submission,
    answers: Dict[str, int],
    score: int,
    team: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> SubmissionUpdate:
    # the prior score becomes the baseline for the delta shown on the dashboard
    return SubmissionUpdate(
        id=existing.id,
        answers=answers,
        team=team if team is not None else existing.team,
        score=score,
        previous_score=existing.score,
        version=existing.version + 1,
        timestamp=timestamp or utcnow(),
    )

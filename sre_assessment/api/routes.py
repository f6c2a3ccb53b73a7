from __future__ import annotations
from typing import Any, Dict, Iterator, List, Mapping, Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from sre_assessment.config import Settings
from sre_assessment.core.answers import AnswerKey
from sre_assessment.core.engine import AssessmentEngine
from sre_assessment.core.questionnaire import questionnaire_to_dict
from sre_assessment.core.submissions import (
    LegacySubmission,
    Submission,
    SubmissionPayload,
    SubmissionUpdate,
    create_payload,
    revise_payload,
)
from sre_assessment.store import repository

logger = structlog.get_logger()

router = APIRouter(prefix="/api")


def get_session(request: Request) -> Iterator[Session]:
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_assessment(request: Request) -> AssessmentEngine:
    return request.app.state.assessment


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def _parse_answers(assessment: AssessmentEngine, raw: Mapping[str, int]) -> Dict[AnswerKey, int]:
    if not raw:
        raise HTTPException(status_code=400, detail="No answers provided")
    return assessment.parse_answers(raw)


def _recompute_score(assessment: AssessmentEngine, answers: Mapping[AnswerKey, int], claimed: int, team: str) -> int:
    score = assessment.total_score(answers)
    if score != claimed:
        logger.warning("submission.score_mismatch", team=team, claimed=claimed, computed=score)
    return score


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/questionnaire")
def questionnaire(assessment: AssessmentEngine = Depends(get_assessment)) -> Dict[str, Any]:
    return questionnaire_to_dict(assessment.questionnaire)


@router.post("/submissions", response_model=Submission, status_code=201)
def submit(
    payload: SubmissionPayload,
    session: Session = Depends(get_session),
    assessment: AssessmentEngine = Depends(get_assessment),
) -> Submission:
    answers = _parse_answers(assessment, payload.answers)
    score = _recompute_score(assessment, answers, payload.score, payload.team)
    # a new record always starts at version 1 with no previous score
    stored = create_payload(payload.team, assessment.serialize_answers(answers), score, payload.timestamp)
    return repository.create_submission(session, stored)


@router.get("/submissions", response_model=List[Submission])
def list_submissions(
    search: Optional[str] = None,
    limit: int = Query(100, ge=1, le=1000),
    session: Session = Depends(get_session),
) -> List[Submission]:
    return repository.list_submissions(session, search=search, limit=limit)


@router.get("/submissions/top", response_model=List[Submission])
def top_submissions(
    limit: Optional[int] = Query(None, ge=1, le=100),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
) -> List[Submission]:
    return repository.top_submissions(session, limit=limit or settings.top_teams_limit)


@router.get("/submissions/{submission_id}", response_model=Submission)
def get_submission(submission_id: int, session: Session = Depends(get_session)) -> Submission:
    return repository.get_submission(session, submission_id)


@router.put("/submissions/{submission_id}", response_model=Submission)
def update_submission(
    submission_id: int,
    payload: SubmissionUpdate,
    session: Session = Depends(get_session),
    assessment: AssessmentEngine = Depends(get_assessment),
) -> Submission:
    if payload.id != submission_id:
        raise HTTPException(status_code=400, detail="Submission id in body does not match the URL")
    answers = _parse_answers(assessment, payload.answers)
    existing = repository.get_submission(session, submission_id)
    score = _recompute_score(assessment, answers, payload.score, payload.team)
    revised = revise_payload(
        existing,
        assessment.serialize_answers(answers),
        score,
        team=payload.team,
        timestamp=payload.timestamp,
    )
    return repository.update_submission(session, submission_id, revised)


@router.post("/submit-questionnaire")
def submit_questionnaire(
    payload: LegacySubmission,
    session: Session = Depends(get_session),
    assessment: AssessmentEngine = Depends(get_assessment),
) -> Dict[str, str]:
    answers = _parse_answers(assessment, payload.answers)
    team = payload.team.strip() or "Anonymous"
    score = assessment.total_score(answers)
    repository.create_submission(
        session, create_payload(team, assessment.serialize_answers(answers), score, payload.timestamp)
    )
    return {"status": "success"}

from __future__ import annotations
from datetime import datetime, timezone
from typing import List, Optional
import json

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from sre_assessment.core.errors import SubmissionNotFound
from sre_assessment.core.submissions import Submission, SubmissionPayload, utcnow
from .models import SubmissionRow

logger = structlog.get_logger()


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _as_utc(ts: datetime) -> datetime:
    # sqlite hands back naive datetimes; everything is stored in UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def _to_submission(row: SubmissionRow) -> Submission:
    return Submission(
        id=row.id,
        team=row.team,
        answers=json.loads(row.answers),
        score=row.score,
        previous_score=row.previous_score,
        version=row.version,
        timestamp=_as_utc(row.timestamp),
    )


def _get_row(session: Session, submission_id: int) -> SubmissionRow:
    row = session.get(SubmissionRow, submission_id)
    if row is None:
        raise SubmissionNotFound(submission_id)
    return row


def create_submission(session: Session, payload: SubmissionPayload) -> Submission:
    row = SubmissionRow(
        team=payload.team,
        answers=json.dumps(payload.answers, sort_keys=True),
        score=payload.score,
        previous_score=payload.previous_score,
        version=payload.version,
        timestamp=_as_utc(payload.timestamp or utcnow()),
    )
    session.add(row)
    session.commit()
    logger.info("submission.created", id=row.id, team=row.team, score=row.score)
    return _to_submission(row)


def update_submission(session: Session, submission_id: int, payload: SubmissionPayload) -> Submission:
    row = _get_row(session, submission_id)
    row.team = payload.team
    row.answers = json.dumps(payload.answers, sort_keys=True)
    row.score = payload.score
    row.previous_score = payload.previous_score
    row.version = payload.version
    row.timestamp = _as_utc(payload.timestamp or utcnow())
    session.commit()
    logger.info(
        "submission.updated",
        id=row.id,
        team=row.team,
        score=row.score,
        previous_score=row.previous_score,
        version=row.version,
    )
    return _to_submission(row)


def get_submission(session: Session, submission_id: int) -> Submission:
    return _to_submission(_get_row(session, submission_id))


def list_submissions(session: Session, search: Optional[str] = None, limit: Optional[int] = None) -> List[Submission]:
    stmt = select(SubmissionRow).order_by(SubmissionRow.timestamp.desc(), SubmissionRow.id.desc())
    if search:
        stmt = stmt.where(SubmissionRow.team.ilike(f"%{_escape_like(search.strip())}%", escape="\\"))
    if limit is not None:
        stmt = stmt.limit(limit)
    return [_to_submission(r) for r in session.scalars(stmt)]


def top_submissions(session: Session, limit: int = 10) -> List[Submission]:
    stmt = select(SubmissionRow).order_by(SubmissionRow.score.desc(), SubmissionRow.id.asc()).limit(limit)
    return [_to_submission(r) for r in session.scalars(stmt)]

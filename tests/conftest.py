from __future__ import annotations
from typing import Any, Dict, Iterator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from sre_assessment.api.app import create_app
from sre_assessment.config import Settings
from sre_assessment.core.engine import AssessmentEngine
from sre_assessment.core.questionnaire import Questionnaire, load_questionnaire, parse_questionnaire
from sre_assessment.store.database import init_database, make_engine


def _build_questionnaire(*question_counts: int, options: int = 6) -> Questionnaire:
    raw: Dict[str, Any] = {
        "version": "test",
        "title": "Test Assessment",
        "panels": [
            {
                "title": f"Panel {pi}",
                "questions": [
                    {"text": f"Question {pi}.{qi}", "options": ["N/A"] + [f"Level {k}" for k in range(1, options)]}
                    for qi in range(count)
                ],
            }
            for pi, count in enumerate(question_counts)
        ],
    }
    return parse_questionnaire(raw)


@pytest.fixture
def make_questionnaire():
    """Factory for questionnaires with the given number of questions per panel."""
    return _build_questionnaire


@pytest.fixture
def questionnaire() -> Questionnaire:
    return load_questionnaire()


@pytest.fixture
def assessment(questionnaire: Questionnaire) -> AssessmentEngine:
    return AssessmentEngine(questionnaire)


@pytest.fixture
def full_answers(questionnaire: Questionnaire):
    """Wire-format answers for every question, all set to the same ordinal."""

    def _answers(ordinal: int) -> Dict[str, int]:
        return {
            f"panel_{pi}_question_{qi}": ordinal
            for pi, panel in enumerate(questionnaire.panels)
            for qi in range(len(panel.questions))
        }

    return _answers


@pytest.fixture
def session_factory() -> sessionmaker[Session]:
    return init_database(make_engine("sqlite://"))


@pytest.fixture
def session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def api_client(session_factory: sessionmaker[Session]) -> Iterator[TestClient]:
    settings = Settings(database_url="sqlite://", top_teams_limit=10)
    app = create_app(settings, session_factory=session_factory)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def seeded(api_client: TestClient, full_answers) -> List[Dict[str, Any]]:
    created = []
    for team, ordinal in [("Payments SRE", 5), ("Search Platform", 3), ("payments-edge", 1)]:
        resp = api_client.post("/api/submissions", json={"team": team, "answers": full_answers(ordinal)})
        assert resp.status_code == 201, resp.text
        created.append(resp.json())
    return created

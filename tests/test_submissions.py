from __future__ import annotations
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from sre_assessment.core.submissions import (
    Submission,
    SubmissionPayload,
    create_payload,
    revise_payload,
)

ANSWERS = {"panel_0_question_0": 3}


def _existing(**overrides):
    fields = dict(
        id=4,
        team="Payments SRE",
        answers=ANSWERS,
        score=62,
        previous_score=40,
        version=2,
        timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Submission(**fields)


def test_create_payload_starts_at_version_one():
    payload = create_payload("Payments SRE", ANSWERS, 71)
    assert payload.version == 1
    assert payload.previous_score == 0
    assert payload.score == 71
    assert payload.timestamp is not None


def test_revise_payload_moves_score_to_previous():
    revised = revise_payload(_existing(), {"panel_0_question_0": 5}, 80)
    assert revised.id == 4
    assert revised.version == 3
    assert revised.previous_score == 62
    assert revised.score == 80
    assert revised.team == "Payments SRE"


def test_revise_payload_can_rename_team():
    assert revise_payload(_existing(), ANSWERS, 62, team="Payments Platform").team == "Payments Platform"


def test_score_delta():
    assert _existing().score_delta == 22


def test_payload_wire_names():
    body = create_payload("Search", ANSWERS, 10).model_dump(mode="json")
    assert set(body) == {"answers", "team", "score", "previous_score", "version", "timestamp"}


@pytest.mark.parametrize(
    "overrides",
    [{"team": "   "}, {"team": ""}, {"score": 101}, {"score": -1}, {"version": 0}],
)
def test_payload_validation(overrides):
    fields = {"answers": ANSWERS, "team": "Search", **overrides}
    with pytest.raises(ValidationError):
        SubmissionPayload(**fields)


def test_payload_strips_team():
    assert SubmissionPayload(answers=ANSWERS, team="  Search  ").team == "Search"

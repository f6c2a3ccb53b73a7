from __future__ import annotations

import pytest

from sre_assessment.core.answers import answers_from_wire, answers_to_wire, record_answer, wire_key
from sre_assessment.core.errors import InvalidArgument


def test_record_answer_returns_new_set(questionnaire):
    answers = {}
    updated = record_answer(questionnaire, answers, 2, 1, 4)
    assert updated == {(2, 1): 4}
    assert answers == {}


def test_record_answer_overwrites(questionnaire):
    answers = record_answer(questionnaire, {}, 0, 0, 3)
    answers = record_answer(questionnaire, answers, 0, 0, 1)
    assert answers == {(0, 0): 1}


@pytest.mark.parametrize("ordinal", [0, 3, 5])
def test_record_answer_is_idempotent(questionnaire, ordinal):
    once = record_answer(questionnaire, {(1, 1): 2}, 4, 2, ordinal)
    twice = record_answer(questionnaire, once, 4, 2, ordinal)
    assert once == twice


@pytest.mark.parametrize(
    "panel_index, question_index, ordinal",
    [(7, 0, 1), (-1, 0, 1), (0, 3, 1), (0, -1, 1), (0, 0, 6), (0, 0, -1)],
)
def test_record_answer_rejects_out_of_range(questionnaire, panel_index, question_index, ordinal):
    answers = {(0, 0): 2}
    with pytest.raises(InvalidArgument):
        record_answer(questionnaire, answers, panel_index, question_index, ordinal)
    assert answers == {(0, 0): 2}


def test_record_answer_rejects_non_integer_ordinals(questionnaire):
    with pytest.raises(InvalidArgument):
        record_answer(questionnaire, {}, 0, 0, True)
    with pytest.raises(InvalidArgument):
        record_answer(questionnaire, {}, 0, 0, "2")


def test_wire_keys_match_front_end_names():
    assert wire_key(3, 1) == "panel_3_question_1"
    assert answers_to_wire({(0, 2): 5, (0, 0): 0}) == {"panel_0_question_0": 0, "panel_0_question_2": 5}


def test_answers_from_wire(questionnaire):
    raw = {"panel_0_question_0": 0, "panel_6_question_2": "4"}
    assert answers_from_wire(questionnaire, raw) == {(0, 0): 0, (6, 2): 4}


@pytest.mark.parametrize(
    "raw",
    [
        {"panel_0_q_0": 1},
        {"panel_0_question_0_extra": 1},
        {"panel_9_question_0": 1},
        {"panel_0_question_0": 6},
        {"panel_0_question_0": "high"},
        {"panel_0_question_0": None},
    ],
)
def test_answers_from_wire_rejects_bad_entries(questionnaire, raw):
    with pytest.raises(InvalidArgument):
        answers_from_wire(questionnaire, raw)


@pytest.mark.parametrize(
    "key",
    ["panel_00_question_0", "panel_0_question_01", "panel_١_question_0", "panel_0_question_0\n"],
)
def test_answers_from_wire_accepts_only_canonical_keys(questionnaire, key):
    with pytest.raises(InvalidArgument, match="Malformed answer key"):
        answers_from_wire(questionnaire, {key: 1})


def test_alternate_spelling_cannot_overwrite_an_answer(questionnaire):
    with pytest.raises(InvalidArgument):
        answers_from_wire(questionnaire, {"panel_0_question_0": 1, "panel_00_question_0": 5})


def test_multi_digit_indices_still_parse(make_questionnaire):
    q = make_questionnaire(*([1] * 11))
    assert answers_from_wire(q, {"panel_10_question_0": 2}) == {(10, 0): 2}

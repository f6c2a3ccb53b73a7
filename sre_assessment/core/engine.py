from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .answers import AnswerKey, AnswerSet, answers_from_wire, answers_to_wire, record_answer
from .completion import (
    OverallCompletion,
    PanelCompletion,
    is_submittable,
    overall_completion,
    panel_completion_status,
)
from .questionnaire import Questionnaire
from .scoring import MaturityLevel, ScoreBreakdown, classify_score, panel_score, score_assessment, total_score


@dataclass(frozen=True)
class AssessmentEngine:
    """Binds one questionnaire to the answer, completion and scoring functions.

    Holds no answers itself: every call takes the AnswerSet to work on, and
    record_answer hands back a new one.
    """

    questionnaire: Questionnaire

    def record_answer(
        self, answers: Mapping[AnswerKey, int], panel_index: int, question_index: int, option_ordinal: int
    ) -> AnswerSet:
        return record_answer(self.questionnaire, answers, panel_index, question_index, option_ordinal)

    def panel_completion_status(self, panel_index: int, answers: Mapping[AnswerKey, int]) -> PanelCompletion:
        return panel_completion_status(self.questionnaire, panel_index, answers)

    def overall_completion(self, answers: Mapping[AnswerKey, int]) -> OverallCompletion:
        return overall_completion(self.questionnaire, answers)

    def is_submittable(self, answers: Mapping[AnswerKey, int]) -> bool:
        return is_submittable(self.questionnaire, answers)

    def panel_score(self, panel_index: int, answers: Mapping[AnswerKey, int]) -> int:
        return panel_score(self.questionnaire, panel_index, answers)

    def total_score(self, answers: Mapping[AnswerKey, int]) -> int:
        return total_score(self.questionnaire, answers)

    def classify_score(self, score: int) -> MaturityLevel:
        return classify_score(score)

    def score(self, answers: Mapping[AnswerKey, int]) -> ScoreBreakdown:
        return score_assessment(self.questionnaire, answers)

    def parse_answers(self, raw: Mapping[str, Any]) -> AnswerSet:
        return answers_from_wire(self.questionnaire, raw)

    def serialize_answers(self, answers: Mapping[AnswerKey, int]) -> Dict[str, int]:
        return answers_to_wire(answers)

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping

from .answers import AnswerKey
from .questionnaire import Questionnaire, get_panel
from .rounding import round_half_up


@dataclass(frozen=True)
class PanelCompletion:
    answered: int
    total: int
    is_complete: bool


@dataclass(frozen=True)
class OverallCompletion:
    answered: int
    total: int
    percent: int


def panel_completion_status(
    questionnaire: Questionnaire, panel_index: int, answers: Mapping[AnswerKey, int]
) -> PanelCompletion:
    # any recorded ordinal counts, including the exempt "N/A" option
    panel = get_panel(questionnaire, panel_index)
    total = len(panel.questions)
    answered = sum(1 for qi in range(total) if (panel_index, qi) in answers)
    return PanelCompletion(answered=answered, total=total, is_complete=answered == total)


def overall_completion(questionnaire: Questionnaire, answers: Mapping[AnswerKey, int]) -> OverallCompletion:
    total = questionnaire.total_questions
    answered = 0
    for pi, panel in enumerate(questionnaire.panels):
        for qi in range(len(panel.questions)):
            if (pi, qi) in answers:
                answered += 1
    percent = round_half_up(100 * answered / total)
    return OverallCompletion(answered=answered, total=total, percent=percent)


def is_submittable(questionnaire: Questionnaire, answers: Mapping[AnswerKey, int]) -> bool:
    return all(
        panel_completion_status(questionnaire, pi, answers).is_complete
        for pi in range(len(questionnaire.panels))
    )

from __future__ import annotations
from dataclasses import dataclass
from typing import List, Mapping

from .answers import AnswerKey
from .questionnaire import Questionnaire, get_panel
from .rounding import round_half_up


@dataclass(frozen=True)
class MaturityLevel:
    level: str
    color_tag: str


# (lower bound, upper bound, level, color), inclusive on both ends
MATURITY_LEVELS = (
    (0, 34, "Initiation", "red"),
    (35, 49, "Developing", "orange"),
    (50, 79, "Define", "yellow"),
    (80, 89, "Advanced", "green"),
    (90, 100, "Elite", "blue"),
)

UNKNOWN_LEVEL = MaturityLevel(level="Unknown", color_tag="gray")


@dataclass(frozen=True)
class ScoreBreakdown:
    panel_scores: List[int]
    total_score: int
    maturity: MaturityLevel


def panel_score(questionnaire: Questionnaire, panel_index: int, answers: Mapping[AnswerKey, int]) -> int:
    panel = get_panel(questionnaire, panel_index)
    total = 0
    max_total = 0
    valid = 0
    for qi, q in enumerate(panel.questions):
        weight = answers.get((panel_index, qi))
        # unanswered and "N/A" (ordinal 0) stay out of both sum and denominator
        if not weight:
            continue
        total += int(weight)
        max_total += q.max_weight
        valid += 1
    if valid == 0:
        return 0
    return round_half_up(100 * total / max_total)


def compute_panel_scores(questionnaire: Questionnaire, answers: Mapping[AnswerKey, int]) -> List[int]:
    return [panel_score(questionnaire, pi, answers) for pi in range(len(questionnaire.panels))]


def total_score(questionnaire: Questionnaire, answers: Mapping[AnswerKey, int]) -> int:
    # every panel weighs the same regardless of its question count;
    # panel scores are already rounded before the mean is rounded again
    return mean_score(compute_panel_scores(questionnaire, answers))


def mean_score(panel_scores: List[int]) -> int:
    return round_half_up(sum(panel_scores) / len(panel_scores))


def classify_score(score: int) -> MaturityLevel:
    for low, high, level, color in MATURITY_LEVELS:
        if low <= score <= high:
            return MaturityLevel(level=level, color_tag=color)
    return UNKNOWN_LEVEL


def score_assessment(questionnaire: Questionnaire, answers: Mapping[AnswerKey, int]) -> ScoreBreakdown:
    scores = compute_panel_scores(questionnaire, answers)
    total = mean_score(scores)
    return ScoreBreakdown(panel_scores=scores, total_score=total, maturity=classify_score(total))

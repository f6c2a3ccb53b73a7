from __future__ import annotations
from typing import Any, Dict, Mapping, Tuple
import re

from .errors import InvalidArgument
from .questionnaire import Questionnaire, get_question

AnswerKey = Tuple[int, int]
# (panel index, question index) -> selected option ordinal; unanswered keys are absent
AnswerSet = Dict[AnswerKey, int]

# canonical spelling only: ASCII digits, no leading zeros
_WIRE_KEY = re.compile(r"panel_(0|[1-9]\d*)_question_(0|[1-9]\d*)", re.ASCII)


def record_answer(
    questionnaire: Questionnaire,
    answers: Mapping[AnswerKey, int],
    panel_index: int,
    question_index: int,
    option_ordinal: int,
) -> AnswerSet:
    """Return a copy of ``answers`` with the given question set to ``option_ordinal``.

    Raises InvalidArgument for indices or ordinals outside the questionnaire;
    ``answers`` itself is never modified.
    """
    question = get_question(questionnaire, panel_index, question_index)
    if isinstance(option_ordinal, bool) or not isinstance(option_ordinal, int):
        raise InvalidArgument(f"Option ordinal must be an integer; got {option_ordinal!r}")
    if not 0 <= option_ordinal <= question.max_weight:
        raise InvalidArgument(
            f"Option ordinal {option_ordinal} out of range 0..{question.max_weight} "
            f"for panel {panel_index} question {question_index}"
        )
    updated = dict(answers)
    updated[(panel_index, question_index)] = option_ordinal
    return updated


def wire_key(panel_index: int, question_index: int) -> str:
    return f"panel_{panel_index}_question_{question_index}"


def answers_to_wire(answers: Mapping[AnswerKey, int]) -> Dict[str, int]:
    return {wire_key(p, q): int(v) for (p, q), v in sorted(answers.items())}


def answers_from_wire(questionnaire: Questionnaire, raw: Mapping[str, Any]) -> AnswerSet:
    """Parse a flat ``panel_{p}_question_{q} -> ordinal`` mapping into an AnswerSet.

    Every entry goes through record_answer, so the result always satisfies the
    questionnaire's ranges.
    """
    answers: AnswerSet = {}
    for key, value in raw.items():
        m = _WIRE_KEY.fullmatch(str(key))
        if not m:
            raise InvalidArgument(f"Malformed answer key: {key!r}")
        try:
            ordinal = int(value)
        except (TypeError, ValueError):
            raise InvalidArgument(f"Answer for {key!r} is not an integer: {value!r}") from None
        answers = record_answer(questionnaire, answers, int(m.group(1)), int(m.group(2)), ordinal)
    return answers

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple
import json

from .errors import ConfigurationError, InvalidArgument

DEFAULT_QUESTIONNAIRE_PATH = Path(__file__).resolve().parent.parent / "data" / "questionnaire_v1.json"


@dataclass(frozen=True)
class Question:
    text: str
    options: Tuple[str, ...]

    @property
    def max_weight(self) -> int:
        # option 0 is the exempt "N/A" choice, the last option carries the top weight
        return len(self.options) - 1


@dataclass(frozen=True)
class Panel:
    title: str
    questions: Tuple[Question, ...]


@dataclass(frozen=True)
class Questionnaire:
    version: str
    title: str
    panels: Tuple[Panel, ...]

    @property
    def total_questions(self) -> int:
        return sum(len(p.questions) for p in self.panels)


def parse_questionnaire(raw: Dict[str, Any]) -> Questionnaire:
    panels: List[Panel] = []
    for p in raw.get("panels", []):
        questions: List[Question] = []
        for q in p.get("questions", []):
            opts = tuple(str(o) for o in q.get("options", []))
            questions.append(Question(text=q["text"], options=opts))
        panels.append(Panel(title=p["title"], questions=tuple(questions)))

    questionnaire = Questionnaire(
        version=str(raw.get("version", "")),
        title=str(raw.get("title", "")),
        panels=tuple(panels),
    )
    validate_questionnaire(questionnaire)
    return questionnaire


def load_questionnaire(path: Path = DEFAULT_QUESTIONNAIRE_PATH) -> Questionnaire:
    path = Path(path)
    if not path.exists():
        raise ConfigurationError(f"Missing questionnaire file: {path}")
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return parse_questionnaire(raw)


def validate_questionnaire(questionnaire: Questionnaire) -> None:
    if not questionnaire.panels:
        raise ConfigurationError("Questionnaire has no panels")
    for pi, panel in enumerate(questionnaire.panels):
        if not panel.questions:
            raise ConfigurationError(f"Panel {pi} ({panel.title!r}) has no questions")
        for qi, question in enumerate(panel.questions):
            # an exempt option plus at least one scored option
            if len(question.options) < 2:
                raise ConfigurationError(
                    f"Question {qi} of panel {pi} needs at least 2 options; got {len(question.options)}"
                )


def get_panel(questionnaire: Questionnaire, panel_index: int) -> Panel:
    if not 0 <= panel_index < len(questionnaire.panels):
        raise InvalidArgument(f"Panel index out of range: {panel_index}")
    return questionnaire.panels[panel_index]


def get_question(questionnaire: Questionnaire, panel_index: int, question_index: int) -> Question:
    panel = get_panel(questionnaire, panel_index)
    if not 0 <= question_index < len(panel.questions):
        raise InvalidArgument(f"Question index out of range for panel {panel_index}: {question_index}")
    return panel.questions[question_index]


def questionnaire_to_dict(questionnaire: Questionnaire) -> Dict[str, Any]:
    return {
        "version": questionnaire.version,
        "title": questionnaire.title,
        "panels": [
            {
                "title": p.title,
                "questions": [{"text": q.text, "options": list(q.options)} for q in p.questions],
            }
            for p in questionnaire.panels
        ],
    }

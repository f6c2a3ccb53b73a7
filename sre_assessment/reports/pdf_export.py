from __future__ import annotations
from pathlib import Path
from typing import Any, BinaryIO, Dict, Union

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from sre_assessment.core.answers import answers_from_wire
from sre_assessment.core.questionnaire import Questionnaire
from sre_assessment.core.scoring import classify_score, compute_panel_scores
from sre_assessment.core.submissions import Submission


def build_report(questionnaire: Questionnaire, submission: Submission) -> Dict[str, Any]:
    answers = answers_from_wire(questionnaire, submission.answers)
    panel_scores = compute_panel_scores(questionnaire, answers)
    return {
        "title": questionnaire.title,
        "team": submission.team,
        "score": submission.score,
        "maturity_level": classify_score(submission.score).level,
        "previous_score": submission.previous_score,
        "score_delta": submission.score_delta,
        "version": submission.version,
        "timestamp": submission.timestamp.isoformat(timespec="seconds"),
        "panel_scores_named": [(p.title, s) for p, s in zip(questionnaire.panels, panel_scores)],
    }


def export_pdf(target: Union[str, Path, BinaryIO], report: Dict[str, Any]) -> None:
    """Write ``report`` as a PDF to a file path or a binary file object."""
    if isinstance(target, Path):
        target = str(target)
    c = canvas.Canvas(target, pagesize=letter)
    width, height = letter
    x = 0.75 * inch
    y = height - 0.75 * inch

    def line(txt: str, dy: float = 14):
        nonlocal y
        c.drawString(x, y, txt[:120])
        y -= dy
        if y < 0.75 * inch:
            c.showPage()
            y = height - 0.75 * inch

    line(f"{report.get('title', 'SRE Maturity Assessment')}: {report.get('team', '')}")
    line(f"Submitted: {report.get('timestamp', '')}  |  Version: {report.get('version', '')}")
    line("")
    line(f"Maturity Score: {report.get('score', '')}  |  Level: {report.get('maturity_level', '')}")
    delta = int(report.get("score_delta", 0))
    if int(report.get("version", 1)) > 1:
        line(f"Previous Score: {report.get('previous_score', '')}  ({delta:+d})")
    line("")
    line("Panel Scores:")
    for name, score in report.get("panel_scores_named", []):
        line(f" - {name}: {score}")

    line("")
    line("Panels answered entirely with N/A score 0 and still count toward the overall mean.")
    c.save()

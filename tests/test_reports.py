from __future__ import annotations
from datetime import datetime, timezone
from io import BytesIO

import pytest

from sre_assessment.components.charts import radar_chart
from sre_assessment.core.submissions import Submission
from sre_assessment.reports.pdf_export import build_report, export_pdf


@pytest.fixture
def submission(full_answers):
    return Submission(
        id=3,
        team="Payments SRE",
        answers=full_answers(4),
        score=80,
        previous_score=60,
        version=2,
        timestamp=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
    )


def test_build_report(questionnaire, submission):
    report = build_report(questionnaire, submission)
    assert report["team"] == "Payments SRE"
    assert report["maturity_level"] == "Advanced"
    assert report["score_delta"] == 20
    assert report["timestamp"] == "2024-05-01T09:30:00+00:00"
    assert len(report["panel_scores_named"]) == 7
    assert report["panel_scores_named"][0] == ("Availability & SLOs", 80)


def test_export_pdf_to_path(tmp_path, questionnaire, submission):
    path = tmp_path / "report.pdf"
    export_pdf(path, build_report(questionnaire, submission))
    assert path.read_bytes().startswith(b"%PDF")


def test_export_pdf_to_buffer(questionnaire, submission):
    buf = BytesIO()
    export_pdf(buf, build_report(questionnaire, submission))
    assert buf.getvalue().startswith(b"%PDF")


def test_radar_chart(questionnaire):
    import matplotlib.pyplot as plt

    titles = [p.title for p in questionnaire.panels]
    fig = radar_chart(titles, [10, 20, 30, 40, 50, 60, 70])
    try:
        assert len(fig.axes) == 1
        assert fig.axes[0].get_ylim() == (0, 100)
    finally:
        plt.close(fig)


def test_radar_chart_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        radar_chart(["A", "B"], [1])
    with pytest.raises(ValueError):
        radar_chart([], [])


def test_radar_chart_takes_maturity_level_color(questionnaire):
    import matplotlib.pyplot as plt
    from matplotlib.colors import to_hex

    from sre_assessment.components.charts import LEVEL_COLORS
    from sre_assessment.core.scoring import classify_score

    titles = [p.title for p in questionnaire.panels]
    fig = radar_chart(titles, [80] * 7, level=classify_score(84))
    try:
        ax = fig.axes[0]
        # four dashed rings where Developing, Define, Advanced and Elite start, then the score outline
        assert [line.get_ydata()[0] for line in ax.lines[:4]] == [35, 50, 80, 90]
        assert to_hex(ax.lines[-1].get_color()) == LEVEL_COLORS["green"]
        assert ax.get_title() == "Advanced"
    finally:
        plt.close(fig)


def test_radar_chart_without_level_is_gray():
    import matplotlib.pyplot as plt
    from matplotlib.colors import to_hex

    from sre_assessment.components.charts import LEVEL_COLORS

    fig = radar_chart(["A", "B", "C"], [10, 20, 30])
    try:
        assert to_hex(fig.axes[0].lines[-1].get_color()) == LEVEL_COLORS["gray"]
    finally:
        plt.close(fig)

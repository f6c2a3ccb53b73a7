# Streamlit front end: streamlit run sre_assessment/main.py
from __future__ import annotations

from io import BytesIO
from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import streamlit as st
import structlog

from sre_assessment.client import FAILURE_MESSAGE, SubmissionClient
from sre_assessment.components.charts import level_color, radar_chart
from sre_assessment.config import get_settings
from sre_assessment.core.answers import AnswerSet
from sre_assessment.core.engine import AssessmentEngine
from sre_assessment.core.errors import InvalidArgument, SubmissionError
from sre_assessment.core.questionnaire import Question
from sre_assessment.core.submissions import Submission, create_payload, revise_payload
from sre_assessment.logs import configure_logging
from sre_assessment.reports.pdf_export import build_report, export_pdf

logger = structlog.get_logger()

PAGES = ["Home", "Survey", "Dashboard"]


# ----------------------------
# Resources
# ----------------------------
@st.cache_resource
def get_client() -> SubmissionClient:
    settings = get_settings()
    configure_logging(settings.log_level)
    return SubmissionClient(settings.api_base_url, timeout=settings.request_timeout)


@st.cache_resource
def get_assessment() -> AssessmentEngine:
    # scored against the same questionnaire the backend validates with
    return AssessmentEngine(get_client().questionnaire())


# ----------------------------
# State helpers
# ----------------------------
def init_state():
    if "answers" not in st.session_state:
        st.session_state.answers = {}
    if "editing" not in st.session_state:
        st.session_state.editing = None
    if "page" not in st.session_state:
        st.session_state.page = "Home"
    if "search" not in st.session_state:
        st.session_state.search = ""
    if "active_panel" not in st.session_state:
        st.session_state.active_panel = 0
    if "team" not in st.session_state:
        st.session_state.team = ""
    if "selected_id" not in st.session_state:
        st.session_state.selected_id = None


def _clear_question_widgets():
    for key in [k for k in st.session_state.keys() if str(k).startswith("q_")]:
        del st.session_state[key]


def start_new_survey():
    _clear_question_widgets()
    st.session_state.answers = {}
    st.session_state.editing = None
    st.session_state.team = ""
    st.session_state.active_panel = 0
    st.session_state.page = "Survey"


def load_for_edit(
    assessment: AssessmentEngine, client: SubmissionClient, submission_id: int
) -> Tuple[Submission, AnswerSet]:
    """Fetch the stored copy of a submission and rebuild its AnswerSet."""
    submission = client.fetch(submission_id)
    return submission, assessment.parse_answers(submission.answers)


def start_edit(submission_id: int):
    try:
        submission, answers = load_for_edit(get_assessment(), get_client(), submission_id)
    except SubmissionError:
        st.session_state.flash = f"Could not load submission {submission_id}. Please try again."
        return
    except InvalidArgument as exc:
        logger.warning("survey.rehydrate_failed", id=submission_id, error=str(exc))
        st.session_state.flash = f"Submission {submission_id} no longer matches the questionnaire."
        return
    _clear_question_widgets()
    st.session_state.answers = answers
    st.session_state.editing = submission
    st.session_state.team = submission.team
    st.session_state.active_panel = 0
    st.session_state.page = "Survey"


def select_submission(submission_id: int):
    st.session_state.selected_id = submission_id


def find_selected(submissions: List[Submission], selected_id: Optional[int]) -> Optional[Submission]:
    if selected_id is None:
        return None
    return next((s for s in submissions if s.id == selected_id), None)


def search_from_home():
    st.session_state.search = st.session_state.home_search.strip()
    st.session_state.page = "Dashboard"


def level_badge(score: int) -> str:
    level = get_assessment().classify_score(score)
    color = level_color(level)
    return f"<span style='color:{color};font-weight:700'>{score} · {level.level}</span>"


# ----------------------------
# Survey
# ----------------------------
def render_question(assessment: AssessmentEngine, panel_index: int, question_index: int, question: Question, answers: AnswerSet) -> AnswerSet:
    current = answers.get((panel_index, question_index))
    choice = st.radio(
        question.text,
        list(range(len(question.options))),
        index=current,
        format_func=lambda i: question.options[i],
        key=f"q_{panel_index}_{question_index}",
        horizontal=True,
    )
    if choice is not None and choice != current:
        answers = assessment.record_answer(answers, panel_index, question_index, int(choice))
    return answers


def panel_label(assessment: AssessmentEngine, panel_index: int, answers: AnswerSet) -> str:
    title = assessment.questionnaire.panels[panel_index].title
    status = assessment.panel_completion_status(panel_index, answers)
    if status.is_complete:
        return f"✅ {title}"
    if status.answered > 0:
        return f"{title} ({status.answered}/{status.total})"
    return title


def submit_survey(assessment: AssessmentEngine, answers: AnswerSet, team: str):
    wire = assessment.serialize_answers(answers)
    score = assessment.total_score(answers)
    editing: Optional[Submission] = st.session_state.editing
    try:
        if editing is None:
            saved = get_client().submit(create_payload(team, wire, score))
        else:
            saved = get_client().update(revise_payload(editing, wire, score, team=team))
    except SubmissionError:
        # local answers and score stay as they are so the user can retry
        st.error(FAILURE_MESSAGE)
        return
    st.session_state.editing = saved
    logger.info("survey.submitted", id=saved.id, team=saved.team, score=saved.score, version=saved.version)
    st.success(f"Assessment submitted successfully! Score {saved.score} (version {saved.version}).")


def render_survey():
    assessment = get_assessment()
    questionnaire = assessment.questionnaire
    answers: AnswerSet = st.session_state.answers
    editing: Optional[Submission] = st.session_state.editing

    st.title(questionnaire.title)
    if editing is not None:
        st.caption(f"Editing submission #{editing.id} for {editing.team} (version {editing.version})")

    progress = assessment.overall_completion(answers)
    st.progress(
        progress.percent / 100.0,
        text=f"{progress.percent}% ({progress.answered} / {progress.total} Questions)",
    )

    active = st.radio(
        "Panel",
        list(range(len(questionnaire.panels))),
        format_func=lambda i: panel_label(assessment, i, answers),
        key="active_panel",
        horizontal=True,
        label_visibility="collapsed",
    )

    panel = questionnaire.panels[active]
    with st.container(border=True):
        st.subheader(panel.title)
        for qi, question in enumerate(panel.questions):
            answers = render_question(assessment, active, qi, question, answers)
    st.session_state.answers = answers

    status = assessment.panel_completion_status(active, answers)
    st.caption(f"{status.answered} / {status.total} Questions Answered")

    breakdown = assessment.score(answers)
    c1, c2 = st.columns(2)
    c1.metric("Current Score", breakdown.total_score)
    c2.metric("Maturity Level", breakdown.maturity.level)

    team = st.text_input("Team name", key="team").strip()
    ready = assessment.is_submittable(answers)
    if not ready:
        st.caption("Answer every question in every panel to submit.")
    label = "Update Assessment" if editing is not None else "Submit Assessment"
    if st.button(label, type="primary", disabled=not (ready and team)):
        submit_survey(assessment, answers, team)


# ----------------------------
# Dashboard
# ----------------------------
def render_top_teams(top: List[Submission]):
    st.markdown(f"### Top {len(top)} Scoring Teams")
    if not top:
        st.info("No submissions yet.")
        return
    for s in top:
        left, right = st.columns([3, 2])
        left.write(s.team)
        right.markdown(level_badge(s.score), unsafe_allow_html=True)


def render_submission_detail(submission: Submission):
    questionnaire = get_assessment().questionnaire
    try:
        report = build_report(questionnaire, submission)
    except InvalidArgument:
        st.caption("This submission no longer matches the current questionnaire.")
        return
    st.markdown(f"### {submission.team} · v{submission.version}")
    titles = [name for name, _ in report["panel_scores_named"]]
    scores = [score for _, score in report["panel_scores_named"]]
    fig = radar_chart(titles, scores, level=get_assessment().classify_score(submission.score))
    st.pyplot(fig)
    plt.close(fig)

    buf = BytesIO()
    export_pdf(buf, report)
    st.download_button(
        "Download PDF report",
        data=buf.getvalue(),
        file_name=f"sre_maturity_{submission.id}_v{submission.version}.pdf",
        mime="application/pdf",
    )


def render_dashboard():
    settings = get_settings()
    st.title("Submissions")
    search = st.text_input("Search teams", key="search")

    try:
        submissions = get_client().list(search=search.strip() or None)
        top = get_client().top(limit=settings.top_teams_limit)
    except SubmissionError:
        st.error("Could not load submissions. Please try again.")
        return

    left, right = st.columns([2, 1])
    with left:
        if not submissions:
            st.info("No submissions match your search.")
        for s in submissions:
            with st.container(border=True):
                c1, c2, c3, c4, c5 = st.columns([3, 2, 2, 1, 1])
                c1.markdown(f"**{s.team}**  \n{s.timestamp:%Y-%m-%d %H:%M} · v{s.version}")
                c2.markdown(level_badge(s.score), unsafe_allow_html=True)
                if s.version > 1:
                    c3.metric("Change", s.score, delta=s.score_delta, label_visibility="collapsed")
                c4.button("Details", key=f"details_{s.id}", on_click=select_submission, args=(s.id,))
                c5.button("Edit", key=f"edit_{s.id}", on_click=start_edit, args=(s.id,))
    with right:
        # chart and PDF only for the one submission picked with "Details"
        selected = find_selected(submissions, st.session_state.selected_id)
        if selected is not None:
            with st.container(border=True):
                render_submission_detail(selected)
        render_top_teams(top)


# ----------------------------
# Home
# ----------------------------
def render_home():
    questionnaire = get_assessment().questionnaire
    st.title(f"Welcome to the {questionnaire.title}")
    with st.form("home_search_form"):
        st.text_input("Search", key="home_search", placeholder="Search...")
        st.form_submit_button("Search", on_click=search_from_home)
    st.button("Take the Survey", type="primary", on_click=start_new_survey)


# ----------------------------
# Main app
# ----------------------------
def main():
    st.set_page_config(page_title="SRE Maturity Assessment", layout="wide")
    init_state()
    try:
        get_assessment()
    except SubmissionError:
        st.error("Could not load the questionnaire from the assessment service. Please try again.")
        st.stop()

    st.sidebar.radio("Navigate", PAGES, key="page")
    flash = st.session_state.pop("flash", None)
    if flash:
        st.warning(flash)

    page = st.session_state.page
    if page == "Survey":
        render_survey()
    elif page == "Dashboard":
        render_dashboard()
    else:
        render_home()


if __name__ == "__main__":
    main()

import asyncio
import sys
import pathlib
import streamlit as st

from typing import FrozenSet

# Ensure the same import path as the CLI: PYTHONPATH=src
ROOT = pathlib.Path(__file__).resolve().parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from exam_genai import state as sm
from exam_genai.agents.exam_generator import ExamGenerator
from exam_genai.configuration import configure_logging, get_settings
from exam_genai.export import EXPORT_FILENAME, EXPORT_MIME_TYPE, export_bytes
from exam_genai.graph import run_submission
from exam_genai.materials import ACCEPTED_EXTENSIONS, read_study_material
from exam_genai.models import RECOMMENDED_QUESTION_COUNTS, Difficulty, GenerationConfig
from exam_genai.presentation import LOADING_TAGLINE, QuestionCard, build_cards, loading_status, toggle_reveal

configure_logging(get_settings())

st.set_page_config(page_title="ExamGenAI", layout="centered")


def _sync_form(config: GenerationConfig):
    """Copy a config into the form widgets' session keys."""
    st.session_state.topic_input = config.topic
    st.session_state.count_input = config.question_count
    st.session_state.difficulty_input = config.difficulty.value
    st.session_state.content_input = config.content


def _go(phase: sm.Phase):
    st.session_state.phase = phase
    if isinstance(phase, sm.InputPhase):
        _sync_form(phase.config)
    st.session_state.revealed = frozenset()
    st.rerun()


def _load_upload():
    uploaded = st.session_state.get("upload_input")
    if uploaded is None:
        return
    text = read_study_material(uploaded.getvalue(), filename=uploaded.name)
    if text is not None:
        st.session_state.content_input = text


def _count_label(n: int) -> str:
    label = RECOMMENDED_QUESTION_COUNTS.get(n)
    return f"{n} ({label})" if label else str(n)


def _render_card(card: QuestionCard, revealed: FrozenSet[int]):
    with st.container(border=True):
        st.markdown(f"**{card.number}.** `{card.type_label}`")
        st.write(card.question_text)
        if card.code_snippet:
            st.code(card.code_snippet)
        for opt in card.options:
            st.write(opt)
        if card.revealed:
            st.success(f"Answer: {card.correct_answer}")
            st.info(f"Explanation: {card.explanation}")
            label = "Hide Answer"
        else:
            label = "Reveal Answer"
        if st.button(label, key=f"reveal_{card.index}"):
            st.session_state.revealed = toggle_reveal(revealed, card.index)
            st.rerun()


if "phase" not in st.session_state:
    st.session_state.phase = sm.initial_phase()
if "revealed" not in st.session_state:
    st.session_state.revealed = frozenset()

phase = st.session_state.phase

head_left, head_right = st.columns([4, 1])
head_left.title("ExamGenAI")
if isinstance(phase, sm.ResultsPhase) and head_right.button("Create New", key="create_new_top"):
    _go(sm.reset(phase))

# ---------- INPUT ----------
if isinstance(phase, sm.InputPhase):
    if "topic_input" not in st.session_state:
        _sync_form(phase.config)
    form_slot = st.empty()
    with form_slot.container():
        st.subheader("Master any CS Topic")
        st.caption(
            "Upload your lecture notes, code, or simply a topic name. "
            "Our AI will construct a comprehensive exam to test your knowledge."
        )
        if phase.notice:
            st.warning(phase.notice)
        st.file_uploader(
            "Upload File",
            type=list(ACCEPTED_EXTENSIONS),
            key="upload_input",
            on_change=_load_upload,
        )
        with st.form("config_form"):
            st.text_input(
                "Subject / Topic Area",
                placeholder="e.g., Distributed Systems, React Hooks, O(n) complexity",
                key="topic_input",
            )
            col_count, col_diff = st.columns(2)
            counts = sorted(set(RECOMMENDED_QUESTION_COUNTS) | {st.session_state.count_input})
            col_count.selectbox("Questions", counts, format_func=_count_label, key="count_input")
            col_diff.selectbox("Difficulty", [d.value for d in Difficulty], key="difficulty_input")
            st.text_area(
                "Study Material (Paste text or upload file)",
                placeholder="// Paste code, notes, or theory here...",
                height=200,
                key="content_input",
            )
            submitted = st.form_submit_button("Generate Exam", use_container_width=True)

    if submitted:
        edited = sm.edit(
            phase,
            topic=st.session_state.topic_input,
            difficulty=Difficulty(st.session_state.difficulty_input),
            question_count=int(st.session_state.count_input),
            content=st.session_state.content_input,
        )
        form_slot.empty()
        # LOADING: rendered while the submission graph runs
        with st.spinner(loading_status(edited.config)):
            st.caption(LOADING_TAGLINE)
            generator = ExamGenerator(get_settings())
            outcome = asyncio.run(run_submission(edited, generator))
        st.session_state.phase = outcome
        st.session_state.revealed = frozenset()
        st.rerun()

# ---------- ERROR ----------
elif isinstance(phase, sm.ErrorPhase):
    st.subheader("Generation Failed")
    st.error(phase.message)
    if st.button("Try Again", key="retry"):
        _go(sm.retry(phase))

# ---------- RESULTS ----------
elif isinstance(phase, sm.ResultsPhase):
    exam = phase.exam
    st.header(exam.title)
    st.write(exam.description)
    st.download_button(
        "Download Exam",
        data=export_bytes(exam),
        file_name=EXPORT_FILENAME,
        mime=EXPORT_MIME_TYPE,
    )
    revealed = st.session_state.revealed
    for card in build_cards(exam, revealed):
        _render_card(card, revealed)

    st.divider()
    st.subheader("Exam Completed?")
    st.caption("Ready to tackle another subject or increase the difficulty?")
    if st.button("Generate New Exam", key="create_new_bottom"):
        _go(sm.reset(phase))

st.caption("Powered by Google Gemini. Built for Computer Science Students & Professionals.")

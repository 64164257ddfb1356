import asyncio
import logging
from pathlib import Path
from typing import Optional, TypedDict

from langgraph.graph import StateGraph, END

from .agents.exam_generator import ExamGenerator
from .configuration import configure_logging, get_settings
from .errors import ExamGenAIError
from .export import exam_to_text
from .materials import read_study_material
from .models import Difficulty
from .presentation import loading_status
from .state import (
    ErrorPhase,
    InputPhase,
    LoadingPhase,
    Phase,
    edit,
    fail,
    initial_phase,
    reset,
    retry,
    submit,
    succeed,
)

logger = logging.getLogger(__name__)


class GraphState(TypedDict, total=False):
    phase: Phase


def submit_node(state: GraphState) -> GraphState:
    """Apply the guarded Input -> Loading transition."""
    return {"phase": submit(state["phase"])}


def route_after_submit(state: GraphState) -> str:
    if isinstance(state.get("phase"), LoadingPhase):
        return "generate"
    return "rejected"


def build_graph(generator):
    """Compile the submission flow around ``generator`` (anything with ``async generate(config)``)."""

    async def generate_node(state: GraphState) -> GraphState:
        phase = state["phase"]
        try:
            exam = await generator.generate(phase.config)
        except ExamGenAIError as e:
            logger.info("submission failed: %s", e)
            return {"phase": fail(phase, str(e))}
        return {"phase": succeed(phase, exam)}

    g = StateGraph(GraphState)
    g.add_node("submit", submit_node)
    g.add_node("generate", generate_node)

    g.set_entry_point("submit")
    g.add_conditional_edges(
        "submit",
        route_after_submit,
        {
            "generate": "generate",
            "rejected": END,
        },
    )
    g.add_edge("generate", END)

    return g.compile()


async def run_submission(phase: Phase, generator) -> Phase:
    """Submit the form in ``phase`` and wait for the resulting phase."""
    out = await build_graph(generator).ainvoke({"phase": phase})
    return out["phase"]


def _ask_config(phase: InputPhase) -> Optional[InputPhase]:
    """Prompt for every form field; None means the user asked to quit."""
    current = phase.config
    topic = input(f"\nTopic [{current.topic}]> ").strip() or current.topic
    if topic.lower() in {"exit", "quit"}:
        return None

    raw_diff = input(f"Difficulty ({', '.join(d.value for d in Difficulty)}) [{current.difficulty.value}]> ").strip()
    try:
        difficulty = Difficulty(raw_diff.capitalize()) if raw_diff else current.difficulty
    except ValueError:
        print(f"unknown difficulty {raw_diff!r}; keeping {current.difficulty.value}")
        difficulty = current.difficulty

    raw_count = input(f"Questions [{current.question_count}]> ").strip()
    count = int(raw_count) if raw_count.isdigit() and int(raw_count) > 0 else current.question_count

    content = current.content
    path = input("Study material file (optional)> ").strip()
    if path:
        try:
            text = read_study_material(Path(path).expanduser().read_bytes(), filename=path)
        except OSError as e:
            print(f"could not read {path}: {e}")
            text = None
        if text is not None:
            content = text

    return edit(phase, topic=topic, difficulty=difficulty, question_count=count, content=content)


if __name__ == "__main__":
    settings = get_settings()
    configure_logging(settings)
    generator = ExamGenerator(settings)
    phase: Phase = initial_phase()
    print("\nexam_genai CLI: type 'exit' at the topic prompt to quit")
    while True:
        try:
            if isinstance(phase, InputPhase):
                edited = _ask_config(phase)
                if edited is None:
                    print("bye!")
                    break
                phase = edited
                print("\n" + loading_status(phase.config))
                phase = asyncio.run(run_submission(phase, generator))
        except (EOFError, KeyboardInterrupt):
            print("\nbye!")
            break

        if isinstance(phase, InputPhase):
            print(phase.notice)
        elif isinstance(phase, ErrorPhase):
            print(f"\nGeneration Failed: {phase.message}")
            phase = retry(phase)
        else:
            print("\n" + exam_to_text(phase.exam))
            phase = reset(phase)

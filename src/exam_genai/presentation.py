"""View-model helpers for rendering phases, independent of the UI toolkit."""

from typing import FrozenSet, List, Optional

from pydantic import BaseModel, Field

from .models import ExamData, GenerationConfig, QuestionType

LOADING_TAGLINE = "Analyzing algorithms & synthesizing logic..."


class QuestionCard(BaseModel):
    """Everything a UI needs to draw one question."""

    index: int = Field(..., description="0-based position in the exam; also the reveal key")
    number: int
    type_label: str
    question_text: str
    code_snippet: Optional[str] = None
    options: List[str] = Field(default_factory=list, description="Lettered options, Multiple Choice only")
    correct_answer: str
    explanation: str
    revealed: bool = False


def loading_status(config: GenerationConfig) -> str:
    subject = config.topic.strip() or "your material"
    return (
        f"Generating {config.question_count} {config.difficulty.value.lower()} "
        f"questions covering {subject}..."
    )


def option_letter(idx: int) -> str:
    return chr(ord("A") + idx)


def toggle_reveal(revealed: FrozenSet[int], index: int) -> FrozenSet[int]:
    # Keyed by position: question ids may repeat
    if index in revealed:
        return revealed - {index}
    return revealed | {index}


def build_cards(exam: ExamData, revealed: FrozenSet[int] = frozenset()) -> List[QuestionCard]:
    cards = []
    for i, q in enumerate(exam.questions):
        options = []
        if q.type is QuestionType.MULTIPLE_CHOICE:
            options = [f"{option_letter(j)}. {opt}" for j, opt in enumerate(q.options)]
        cards.append(QuestionCard(
            index=i,
            number=i + 1,
            type_label=q.type.value,
            question_text=q.question_text,
            code_snippet=q.code_snippet or None,
            options=options,
            correct_answer=q.correct_answer,
            explanation=q.explanation,
            revealed=i in revealed,
        ))
    return cards

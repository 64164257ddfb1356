"""Domain vocabulary shared by the generator, the state machine and the UI."""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class QuestionType(str, Enum):
    """Closed set of question kinds an exam may contain (values are wire labels)."""
    MULTIPLE_CHOICE = "Multiple Choice"
    TRUE_FALSE = "True/False"
    SHORT_ANSWER = "Short Answer"
    MATCHING = "Matching"
    PROBLEM_SOLVING = "Problem Solving/Coding"


class Difficulty(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    MIXED = "Mixed"


class AppState(str, Enum):
    """The four user-visible application states."""
    INPUT = "INPUT"
    LOADING = "LOADING"
    RESULTS = "RESULTS"
    ERROR = "ERROR"


# Offered by the form; any positive count is still accepted
RECOMMENDED_QUESTION_COUNTS: Dict[int, str] = {
    5: "Quick",
    10: "Standard",
    20: "Detailed",
    30: "Full Exam",
}


class GenerationConfig(BaseModel):
    """What the user asked for. Frozen: edits go through ``model_copy``."""

    model_config = ConfigDict(frozen=True)

    topic: str = Field("", description="Subject or topic area; may be empty")
    difficulty: Difficulty = Field(Difficulty.INTERMEDIATE, description="Requested difficulty label")
    question_count: int = Field(10, ge=1, description="Exact number of questions to generate")
    content: str = Field("", description="Pasted or uploaded study material; may be empty")

    def has_subject(self) -> bool:
        """True when either the topic or the study material is non-blank."""
        return bool(self.topic.strip() or self.content.strip())


class ExamQuestion(BaseModel):
    """One generated question, validated strictly against the wire shape.

    Field names follow the camelCase JSON returned by the service; the Python
    attributes are snake_case aliases of those.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    # Not guaranteed unique within an exam
    id: int = Field(..., strict=True)
    type: QuestionType
    question_text: str = Field(..., alias="questionText")
    options: List[str] = Field(default_factory=list)
    code_snippet: Optional[str] = Field(None, alias="codeSnippet")
    correct_answer: str = Field(..., alias="correctAnswer")
    explanation: str

    @field_validator("options", mode="before")
    @classmethod
    def _absent_options(cls, v):
        return [] if v is None else v

    @field_validator("question_text")
    @classmethod
    def _non_blank_text(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("questionText must not be blank")
        return v

    @model_validator(mode="after")
    def _options_match_type(self) -> "ExamQuestion":
        if self.options and self.type is not QuestionType.MULTIPLE_CHOICE:
            raise ValueError(f"options are only allowed on multiple choice questions, got {self.type.value!r}")
        return self


class ExamData(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    description: str
    questions: List[ExamQuestion] = Field(..., description="Display order is preserved")

"""Shared pytest fixtures for the ExamGenAI test suite."""

import json
import sys
from pathlib import Path
from typing import Any

import pytest
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from exam_genai.configuration import Settings
from exam_genai.errors import GenerationFailed
from exam_genai.models import ExamData, GenerationConfig


def _questions() -> list[dict[str, Any]]:
    return [
        {
            "id": 1,
            "type": "Multiple Choice",
            "questionText": "What is the time complexity of binary search?",
            "options": ["O(1)", "O(log n)", "O(n)", "O(n log n)"],
            "correctAnswer": "B",
            "explanation": "The search space halves on every step.",
        },
        {
            "id": 2,
            "type": "True/False",
            "questionText": "O(n^2) grows faster than O(n log n).",
            "correctAnswer": "True",
            "explanation": "n^2 / (n log n) = n / log n, which is unbounded.",
        },
        {
            "id": 3,
            "type": "Short Answer",
            "questionText": "Name the notation used for an asymptotic lower bound.",
            "options": None,
            "correctAnswer": "Big-Omega",
            "explanation": "Big-Omega bounds a function from below.",
        },
        {
            "id": 4,
            "type": "Matching",
            "questionText": "Match each algorithm to its complexity: merge sort, linear search.",
            "options": [],
            "correctAnswer": "merge sort - O(n log n); linear search - O(n)",
            "explanation": "Merge sort splits log n times; linear search scans once.",
        },
        {
            "id": 5,
            "type": "Problem Solving/Coding",
            "questionText": "What is the complexity of this loop?",
            "codeSnippet": "for i in range(n):\n    for j in range(i):\n        pass",
            "correctAnswer": "O(n^2)",
            "explanation": "The inner loop runs 0 + 1 + ... + (n-1) times.",
        },
    ]


@pytest.fixture
def exam_payload() -> dict[str, Any]:
    """A well-formed reply body with five questions of mixed types."""
    return {
        "title": "Big-O Basics",
        "description": "Asymptotic notation and common complexities.",
        "questions": _questions(),
    }


@pytest.fixture
def exam_json(exam_payload) -> str:
    return json.dumps(exam_payload)


@pytest.fixture
def exam(exam_payload) -> ExamData:
    return ExamData.model_validate(exam_payload)


@pytest.fixture
def big_o_config() -> GenerationConfig:
    return GenerationConfig(topic="Big-O notation", difficulty="Beginner", question_count=5, content="")


@pytest.fixture
def google_settings() -> Settings:
    return Settings(llm_provider="google", google_api_key="test-key", llm_model="gemini-test")


class RecordingChatModel:
    """Stand-in transport: records every prompt and replies with a fixed text or error."""

    def __init__(self, reply: Any = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[Any] = []

    def __call__(self, prompt_value):
        self.calls.append(prompt_value)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)

    def runnable(self) -> RunnableLambda:
        return RunnableLambda(lambda prompt_value: self(prompt_value))

    def messages(self, call: int = 0):
        return self.calls[call].to_messages()


@pytest.fixture
def recording_model():
    return RecordingChatModel


class FakeGenerator:
    """Generation client double for state-machine and graph tests."""

    def __init__(self, exam: ExamData | None = None, error: Exception | None = None):
        self.exam = exam
        self.error = error
        self.configs: list[GenerationConfig] = []

    async def generate(self, config: GenerationConfig) -> ExamData:
        self.configs.append(config)
        if self.error is not None:
            raise self.error
        return self.exam


@pytest.fixture
def fake_generator(exam):
    return FakeGenerator(exam=exam)


@pytest.fixture
def failing_generator():
    return FakeGenerator(error=GenerationFailed())

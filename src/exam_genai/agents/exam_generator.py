"""
Exam Generator
- builds instructions + response schema + prompt from a GenerationConfig
- calls Gemini (langchain-google-genai) or OpenAI (langchain-openai) once
- validates the JSON reply into ExamData; every failure becomes GenerationFailed
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_openai import ChatOpenAI

from exam_genai.configuration import Settings
from exam_genai.errors import ConfigurationError, GenerationFailed, MISSING_KEY_MESSAGE
from exam_genai.models import ExamData, GenerationConfig, QuestionType

logger = logging.getLogger(__name__)

DEFAULT_TOPIC = "General Computer Science"

# Providers that accept the schema through a structured-output channel
_NATIVE_SCHEMA_PROVIDERS = {"google"}

_QUESTION_TYPES = [t.value for t in QuestionType]

# -------- structured output contract --------
EXAM_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "A creative title for the exam based on the content."},
        "description": {"type": "string", "description": "A brief summary of what this exam covers."},
        "questions": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "id": {"type": "integer"},
                    "type": {"type": "string", "enum": _QUESTION_TYPES},
                    "questionText": {"type": "string", "description": "The main question text."},
                    "options": {
                        "type": "array",
                        "items": {"type": "string"},
                        "description": "Array of options for Multiple Choice. Null or empty for others.",
                    },
                    "codeSnippet": {
                        "type": "string",
                        "description": "Optional code block relevant to the question (e.g. 'What does this print?').",
                    },
                    "correctAnswer": {"type": "string", "description": "The direct correct answer."},
                    "explanation": {
                        "type": "string",
                        "description": "Detailed explanation of why the answer is correct.",
                    },
                },
                "required": ["id", "type", "questionText", "correctAnswer", "explanation"],
            },
        },
    },
    "required": ["title", "description", "questions"],
}

_SYSTEM = (
    "You are a world-class Computer Science Professor and Exam Creator.\n"
    "Your goal is to generate specialized exam questions based strictly on the provided material or topic.\n\n"
    "Rules:\n"
    "1. Read and understand the material in detail (theory, math, algorithms, architecture, code, terminology).\n"
    "2. Handle any CS domain (Programming, DSA, OS, Networks, DB, AI/ML, etc.).\n"
    "3. Create exactly {question_count} questions.\n"
    "4. Difficulty level: {difficulty}.\n"
    "5. Include these types: {question_types}.\n"
    "6. Questions must be original, not copied word-for-word.\n"
    "7. Cover subtle details.\n"
    "8. Only Multiple Choice questions have options; leave options empty for every other type.\n\n"
    "Output format must be strict JSON matching the provided schema.\n"
    "{schema_block}"
)

_TEMPLATE = (
    "Subject/Topic: {topic}\n\n"
    "Study Material Content:\n"
    "{content}\n\n"
    "Generate the exam now."
)

_PROMPT = ChatPromptTemplate.from_messages([
    ("system", _SYSTEM),
    ("human", _TEMPLATE),
])

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"\s*```$")


def _schema_block(native_schema: bool) -> str:
    if native_schema:
        return ""
    return (
        "Return ONLY a JSON object (no markdown, no extra text) that validates against this JSON schema:\n"
        + json.dumps(EXAM_RESPONSE_SCHEMA, indent=2)
    )


def build_payload(config: GenerationConfig, native_schema: bool = True) -> Dict[str, Any]:
    """Template variables for the instruction block and the content prompt."""
    return {
        "question_count": config.question_count,
        "difficulty": config.difficulty.value,
        "question_types": ", ".join(_QUESTION_TYPES),
        "schema_block": _schema_block(native_schema),
        "topic": config.topic.strip() or DEFAULT_TOPIC,
        "content": config.content,
    }


def _llm(settings: Settings, api_key: str) -> Runnable:
    if settings.llm_provider == "google":
        return ChatGoogleGenerativeAI(
            model=settings.model_name,
            api_key=api_key,
            temperature=settings.temperature,
            response_mime_type="application/json",
            response_schema=EXAM_RESPONSE_SCHEMA,
            thinking_budget=settings.thinking_budget,
            timeout=settings.request_timeout,
            max_retries=1,  # single attempt
        )
    if settings.llm_provider == "openai":
        llm = ChatOpenAI(
            model=settings.model_name,
            api_key=api_key,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
            max_retries=0,
        )
        return llm.bind(response_format={"type": "json_object"})
    raise ConfigurationError(f"Unsupported LLM_PROVIDER: {settings.llm_provider!r}")


def _response_text(message: Any) -> str:
    """Flatten a chat reply (str content or a list of content parts) to text."""
    content = getattr(message, "content", message)
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
        content = "".join(parts)
    return content if isinstance(content, str) else ""


def parse_exam_response(text: str) -> ExamData:
    """Strictly validate a reply body into ExamData.

    Raises ValueError (pydantic's ValidationError included) for an empty body,
    invalid JSON or any shape mismatch.
    """
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValueError("No data received from API")
    if cleaned.startswith("```"):
        cleaned = _FENCE_CLOSE.sub("", _FENCE_OPEN.sub("", cleaned)).strip()
    return ExamData.model_validate_json(cleaned)


class ExamGenerator:
    """Generation client bound to explicit settings and, optionally, a chat model.

    Passing ``chat_model`` replaces the provider client (tests use fakes).
    """

    def __init__(self, settings: Settings, chat_model: Optional[Runnable] = None):
        self.settings = settings
        self._chat_model = chat_model

    async def generate(self, config: GenerationConfig) -> ExamData:
        api_key = self.settings.api_key()
        if not api_key:
            logger.error("generation aborted: no API key for provider %s", self.settings.llm_provider)
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        native = self.settings.llm_provider in _NATIVE_SCHEMA_PROVIDERS
        payload = build_payload(config, native_schema=native)
        logger.info(
            "generation start provider=%s model=%s count=%d difficulty=%s content_len=%d",
            self.settings.llm_provider,
            self.settings.model_name,
            config.question_count,
            config.difficulty.value,
            len(config.content),
        )

        try:
            llm = self._chat_model if self._chat_model is not None else _llm(self.settings, api_key)
            message = await (_PROMPT | llm).ainvoke(payload)
        except Exception as exc:
            logger.exception("generation service call failed: %s", exc)
            raise GenerationFailed() from exc

        try:
            exam = parse_exam_response(_response_text(message))
        except ValueError as exc:
            logger.error("generation reply rejected: %s", exc)
            raise GenerationFailed() from exc

        logger.info("generation done questions=%d", len(exam.questions))
        return exam

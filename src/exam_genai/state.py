"""Application state machine.

Four phases, one payload each, and pure transition functions between them:

    Input --submit--> Loading --succeed--> Results --reset--> Input
                              --fail-----> Error   --retry--> Input

Every phase carries the config so retry/reset can hand it back to the form.
Generation is only reachable from Loading, and Loading only through ``submit``,
so at most one request is ever in flight.
"""
from __future__ import annotations

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidTransition
from .models import AppState, ExamData, GenerationConfig

MISSING_SUBJECT_NOTICE = "Please provide either a topic or upload study material."
FALLBACK_ERROR_MESSAGE = "Something went wrong."


class _Phase(BaseModel):
    model_config = ConfigDict(frozen=True)

    config: GenerationConfig = Field(default_factory=GenerationConfig)


class InputPhase(_Phase):
    kind: Literal[AppState.INPUT] = AppState.INPUT
    notice: Optional[str] = Field(None, description="Local validation message shown on the form")


class LoadingPhase(_Phase):
    kind: Literal[AppState.LOADING] = AppState.LOADING


class ResultsPhase(_Phase):
    kind: Literal[AppState.RESULTS] = AppState.RESULTS
    exam: ExamData


class ErrorPhase(_Phase):
    kind: Literal[AppState.ERROR] = AppState.ERROR
    message: str


Phase = Union[InputPhase, LoadingPhase, ResultsPhase, ErrorPhase]


def _expect(phase: Phase, *allowed: type, action: str) -> None:
    if not isinstance(phase, allowed):
        raise InvalidTransition(f"cannot {action} from {phase.kind.value}")


def initial_phase(config: Optional[GenerationConfig] = None) -> InputPhase:
    return InputPhase(config=config or GenerationConfig())


def edit(phase: Phase, **changes) -> InputPhase:
    """Update form fields. The config is only editable while awaiting input."""
    _expect(phase, InputPhase, action="edit the config")
    return InputPhase(config=GenerationConfig(**{**phase.config.model_dump(), **changes}))


def submit(phase: Phase) -> Union[InputPhase, LoadingPhase]:
    """Guarded Input -> Loading. A config without topic or material stays in Input."""
    _expect(phase, InputPhase, action="submit")
    if not phase.config.has_subject():
        return InputPhase(config=phase.config, notice=MISSING_SUBJECT_NOTICE)
    return LoadingPhase(config=phase.config)


def succeed(phase: Phase, exam: ExamData) -> ResultsPhase:
    _expect(phase, LoadingPhase, action="store results")
    return ResultsPhase(config=phase.config, exam=exam)


def fail(phase: Phase, message: str) -> ErrorPhase:
    _expect(phase, LoadingPhase, action="record a failure")
    return ErrorPhase(config=phase.config, message=(message or "").strip() or FALLBACK_ERROR_MESSAGE)


def retry(phase: Phase) -> InputPhase:
    """Error -> Input with the previous config intact."""
    _expect(phase, ErrorPhase, action="retry")
    return InputPhase(config=phase.config)


def reset(phase: Phase) -> InputPhase:
    """Start a new exam: drop results/error and blank the material, keep the rest."""
    _expect(phase, InputPhase, ResultsPhase, ErrorPhase, action="reset")
    return InputPhase(config=phase.config.model_copy(update={"content": ""}))

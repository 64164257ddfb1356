"""Error taxonomy shared by the generation client and the state machine."""

GENERIC_FAILURE_MESSAGE = (
    "Failed to generate exam. Please try again with less content or fewer questions."
)
MISSING_KEY_MESSAGE = "API Key is missing. Please check your environment variables."


class ExamGenAIError(Exception):
    """Base class for failures that end a generation attempt."""


class ConfigurationError(ExamGenAIError):
    """Required credential or provider setting is missing or invalid."""


class GenerationFailed(ExamGenAIError):
    """The generation service failed or returned an unusable reply."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE):
        super().__init__(message)


class InvalidTransition(Exception):
    """A state-machine action was invoked from a phase that does not allow it."""

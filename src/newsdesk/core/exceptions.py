"""Custom exceptions for newsdesk."""


class NewsdeskError(Exception):
    """Base exception for all newsdesk errors."""

    def __init__(self, message: str, *args: object) -> None:
        self.message = message
        super().__init__(message, *args)


class ConfigError(NewsdeskError):
    """Invalid or missing configuration."""


# State errors
class StateError(NewsdeskError):
    """Base error for the pipeline state store."""


class StateCorruptedError(StateError):
    """The persisted state document could not be parsed."""


class NoRecoverableStateError(StateError):
    """Resume was requested but no interrupted run exists."""


# Collaborator errors
class CollaboratorError(NewsdeskError):
    """Raised by an external collaborator (research, LLM, render, upload).

    Collaborators set ``retryable`` at the point of failure so the error
    handler does not have to guess from the message.
    """

    def __init__(self, message: str, *, retryable: bool | None = None) -> None:
        super().__init__(message)
        self.retryable = retryable


class TransientCollaboratorError(CollaboratorError):
    """Temporary collaborator failure (rate limit, 5xx, dropped connection)."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=True)


# Pipeline stage errors
class PipelineError(NewsdeskError):
    """A pipeline stage failed.

    Attributes:
        stage: Name of the stage that raised (e.g. ``"research"``)
        cause: The originating exception, if any
        retryable: True/False when known at the origin, None to let the
            error handler classify it
    """

    default_stage = "unknown"

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        cause: BaseException | None = None,
        retryable: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.stage = stage or self.default_stage
        self.cause = cause
        self.retryable = retryable


class ResearchError(PipelineError):
    """Market research failed."""

    default_stage = "research"


class EventDetectionError(PipelineError):
    """Event detection / urgency assessment failed."""

    default_stage = "event-detection"


class TopicDecisionError(PipelineError):
    """Topic decision failed."""

    default_stage = "topic-decision"


class MissingResearchError(TopicDecisionError):
    """Decision engine was called without the research it needs."""

    def __init__(self, message: str) -> None:
        super().__init__(message, retryable=False)


class ScriptGenerationError(PipelineError):
    """Script generation failed."""

    default_stage = "script-generation"


class ScriptReviewError(PipelineError):
    """Script review failed."""

    default_stage = "script-review"


class VideoProductionError(PipelineError):
    """Avatar video rendering failed."""

    default_stage = "video-production"


class BrandOverlayError(PipelineError):
    """Brand overlay processing failed."""

    default_stage = "brand-overlay"


class YouTubeUploadError(PipelineError):
    """Upload to YouTube failed."""

    default_stage = "upload"


STAGE_ERRORS: dict[str, type[PipelineError]] = {
    "research": ResearchError,
    "event-detection": EventDetectionError,
    "topic-decision": TopicDecisionError,
    "script-generation": ScriptGenerationError,
    "script-review": ScriptReviewError,
    "video-production": VideoProductionError,
    "brand-overlay": BrandOverlayError,
    "upload": YouTubeUploadError,
}


def wrap_stage_error(stage: str, error: BaseException) -> PipelineError:
    """Wrap a raw exception in the error type for ``stage``.

    Pipeline errors pass through untouched. Collaborator errors keep the
    retryability they declared.
    """
    if isinstance(error, PipelineError):
        return error

    retryable = getattr(error, "retryable", None)
    error_cls = STAGE_ERRORS.get(stage, PipelineError)
    message = str(error) or type(error).__name__
    return error_cls(message, stage=stage, cause=error, retryable=retryable)

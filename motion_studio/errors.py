"""Exception types shared across the render pipeline.

Validation errors surface synchronously at submit time. Collaborator errors
are raised inside a job's background workflow and end up as the job's error
message. Cleanup problems are never raised; they are logged as warnings.
"""


class MotionStudioError(Exception):
    """Base class for all Motion Studio errors."""

    pass


class RequestValidationError(MotionStudioError):
    """A request was rejected before any job was created."""

    pass


class SceneValidationError(RequestValidationError):
    """A scene definition is missing fields or has non-numeric timing."""

    pass


class JobQueueFullError(MotionStudioError):
    """The worker pool has no room for another job."""

    pass


class InvalidTransitionError(MotionStudioError):
    """A job in a terminal state was asked to change state again."""

    pass


class CollaboratorError(MotionStudioError):
    """An external service failed while a job was running."""

    pass


class LLMError(CollaboratorError):
    """The scene-generating LLM failed or returned an unusable response."""

    pass


class TranscriptionError(CollaboratorError):
    """The speech-to-text service failed."""

    pass


class DeploymentError(CollaboratorError):
    """Deploying or provisioning remote resources failed."""

    pass


class RenderFailedError(CollaboratorError):
    """Remote compute reported an unrecoverable render error."""

    pass


class RenderTimeoutError(CollaboratorError):
    """A render did not finish before the polling deadline."""

    pass


class StorageError(CollaboratorError):
    """Reading from object storage failed."""

    pass


class MediaToolError(CollaboratorError):
    """ffmpeg or ffprobe exited with an error."""

    pass

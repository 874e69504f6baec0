from __future__ import annotations

from typing import Optional


class RecipePipelineError(Exception):
    """Base error; ``code`` is the caller-facing classification."""

    code = "internal"
    http_status = 500

    def __init__(self, message: str, stage: Optional[str] = None):
        super().__init__(message)
        self.stage = stage


class InvalidInputError(RecipePipelineError):
    code = "invalid-argument"
    http_status = 400


class UnauthenticatedError(RecipePipelineError):
    code = "unauthenticated"
    http_status = 401

    def __init__(self, message: str = "The function must be called while authenticated."):
        super().__init__(message)


class ExternalToolError(RecipePipelineError):
    code = "external-tool-failure"
    http_status = 502


class AudioFetchError(ExternalToolError):
    pass


class AudioConversionError(ExternalToolError):
    pass


class TranscriptionServiceError(ExternalToolError):
    pass


class NoSpeechDetectedError(TranscriptionServiceError):
    def __init__(self, media_path: str):
        super().__init__(f"No speech detected in {media_path}")
        self.media_path = media_path


class PipelineTimeoutError(RecipePipelineError):
    code = "deadline-exceeded"
    http_status = 504

    def __init__(self, timeout_seconds: float, stage: Optional[str] = None):
        super().__init__(f"Pipeline exceeded {timeout_seconds:g}s", stage=stage)
        self.timeout_seconds = timeout_seconds


class InternalPipelineError(RecipePipelineError):
    code = "internal"
    http_status = 500


class RecipeStoreError(InternalPipelineError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Recipe store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason

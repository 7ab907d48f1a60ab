"""Pydantic models for API requests and responses."""

from .requests import CaptionsRequest, GenerateRequest
from .responses import (
    HealthResponse,
    JobResponse,
    JobResultResponse,
    JobStartedResponse,
    StylesResponse,
)

__all__ = [
    # Requests
    "CaptionsRequest",
    "GenerateRequest",
    # Responses
    "HealthResponse",
    "JobResponse",
    "JobResultResponse",
    "JobStartedResponse",
    "StylesResponse",
]

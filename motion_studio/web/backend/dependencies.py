"""Dependency injection for FastAPI."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from ...config import Config, load_config
from ...pipeline.orchestrator import JobOrchestrator


@lru_cache
def get_config() -> Config:
    """Get the application configuration (cached)."""
    return load_config()


@lru_cache
def get_orchestrator() -> JobOrchestrator:
    """Get the job orchestrator (cached singleton)."""
    return JobOrchestrator(get_config())


# Type aliases for cleaner router signatures
ConfigDep = Annotated[Config, Depends(get_config)]
OrchestratorDep = Annotated[JobOrchestrator, Depends(get_orchestrator)]

"""Test fixtures for web backend tests."""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from motion_studio.captions.pipeline import CaptionPipeline
from motion_studio.config import Config
from motion_studio.pipeline.orchestrator import JobOrchestrator
from motion_studio.scenes.generator import SceneGenerator
from motion_studio.web.backend import dependencies
from motion_studio.web.backend.app import create_app


@pytest.fixture
def orchestrator(test_config: Config, fake_backend, stub_llm, notifier, fake_clock, transcriber) -> JobOrchestrator:
    """Create an orchestrator wired to in-memory fakes."""
    return JobOrchestrator(
        test_config,
        backend=fake_backend,
        scene_generator=SceneGenerator(test_config, llm=stub_llm),
        caption_pipeline=CaptionPipeline(test_config, transcriber=transcriber),
        notifier=notifier,
        sleep=fake_clock.sleep,
        clock=fake_clock,
    )


@pytest.fixture
def test_client(test_config: Config, orchestrator: JobOrchestrator) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    # Clear any cached dependencies
    dependencies.get_config.cache_clear()
    dependencies.get_orchestrator.cache_clear()

    app = create_app(test_config)
    app.dependency_overrides[dependencies.get_config] = lambda: test_config
    app.dependency_overrides[dependencies.get_orchestrator] = lambda: orchestrator

    with TestClient(app) as client:
        yield client

    # Cleanup
    app.dependency_overrides.clear()
    orchestrator.shutdown(wait=True)

"""Shared test fixtures."""

import json
import threading
from pathlib import Path
from typing import Any, Iterator

import pytest

from motion_studio.audio.transcribe import MockTranscriber
from motion_studio.captions.timing import TimestampedWord
from motion_studio.config import Config, LLMConfig
from motion_studio.llm.provider import MOCK_COMPONENT, LLMProvider
from motion_studio.notify import Notifier
from motion_studio.render.backend import RenderBackend
from motion_studio.render.models import (
    BucketInfo,
    FunctionInfo,
    ObjectLocation,
    RenderHandle,
    RenderLimits,
    RenderProgress,
)

SCENE_PAYLOAD = {
    "component_code": MOCK_COMPONENT,
    "duration_in_frames": 150,
    "fps": 30,
    "title": "Sunrise over the city",
}


class FakeRenderBackend(RenderBackend):
    """Records every call; any operation can be made to fail via ``fail_on``."""

    def __init__(self):
        self.calls: list[str] = []
        self.fail_on: dict[str, Exception] = {}
        self.progress_script: list[RenderProgress] = [
            RenderProgress(overall_progress=0.4),
            RenderProgress(
                overall_progress=1.0,
                done=True,
                output=ObjectLocation("", "renders/out.mp4"),
            ),
        ]
        self.payload = b"fake-mp4-data" * 100
        self.bucket_exists = False
        self.deployed_sites: list[str] = []
        self.deleted_sites: list[str] = []
        self.rendered: list[dict[str, Any]] = []
        self._polls: dict[str, int] = {}
        self._lock = threading.Lock()

    def _call(self, name: str) -> None:
        with self._lock:
            self.calls.append(name)
        if name in self.fail_on:
            raise self.fail_on[name]

    def get_or_create_bucket(self) -> BucketInfo:
        self._call("get_or_create_bucket")
        with self._lock:
            existed = self.bucket_exists
            self.bucket_exists = True
        return BucketInfo("remotionlambda-useast1-test", already_existed=existed)

    def deploy_function(self, memory_mb: int, timeout_seconds: int, disk_mb: int) -> FunctionInfo:
        self._call("deploy_function")
        return FunctionInfo(f"remotion-render-{memory_mb}mb-{timeout_seconds}sec", already_existed=False)

    def deploy_site(self, entry_point: Path, bucket_name: str, site_name: str) -> str:
        with self._lock:
            self.deployed_sites.append(site_name)
        self._call("deploy_site")
        assert Path(entry_point).exists()
        return f"https://{bucket_name}.s3.amazonaws.com/sites/{site_name}/index.html"

    def delete_site(self, bucket_name: str, site_name: str) -> None:
        with self._lock:
            self.deleted_sites.append(site_name)
        self._call("delete_site")

    def render_media(
        self,
        serve_url: str,
        composition_id: str,
        input_props: dict[str, Any],
        limits: RenderLimits,
    ) -> RenderHandle:
        self._call("render_media")
        with self._lock:
            render_id = f"render-{len(self.rendered) + 1}"
            self.rendered.append(
                {
                    "render_id": render_id,
                    "serve_url": serve_url,
                    "composition_id": composition_id,
                    "input_props": input_props,
                    "limits": limits,
                }
            )
            self._polls[render_id] = 0
        return RenderHandle(render_id, "remotionlambda-useast1-test")

    def get_render_progress(self, handle: RenderHandle) -> RenderProgress:
        self._call("get_render_progress")
        with self._lock:
            index = self._polls.get(handle.render_id, 0)
            self._polls[handle.render_id] = index + 1
        return self.progress_script[min(index, len(self.progress_script) - 1)]

    def iter_object(self, location: ObjectLocation, chunk_size: int = 1024 * 1024) -> Iterator[bytes]:
        with self._lock:
            self.calls.append("iter_object")
        for i in range(0, len(self.payload), chunk_size):
            if i > 0 and "iter_object" in self.fail_on:
                raise self.fail_on["iter_object"]
            yield self.payload[i : i + chunk_size]

    def count(self, name: str) -> int:
        return self.calls.count(name)


class StubLLM(LLMProvider):
    """Returns a canned scene payload, or raises ``error``."""

    def __init__(self, payload: dict[str, Any] | None = None, error: Exception | None = None):
        super().__init__(LLMConfig(provider="mock"))
        self.payload = dict(SCENE_PAYLOAD) if payload is None else payload
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        return json.dumps(self.payload)

    def generate_json(
        self,
        prompt: str,
        system_prompt: str | None = None,
        schema: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        self.calls.append({"prompt": prompt, "system_prompt": system_prompt, "schema": schema})
        if self.error is not None:
            raise self.error
        return dict(self.payload)


class RecordingNotifier(Notifier):
    """Keeps every job it is notified about."""

    def __init__(self):
        self.jobs = []

    def notify(self, job) -> bool:
        self.jobs.append(job)
        return True


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def sample_words() -> list[TimestampedWord]:
    """The five-word transcript used across timing and caption tests."""
    return [
        TimestampedWord("the", 0.0, 0.2),
        TimestampedWord("quick", 0.2, 0.5),
        TimestampedWord("brown", 0.5, 0.8),
        TimestampedWord("fox", 0.8, 1.1),
        TimestampedWord("jumps", 1.1, 1.4),
    ]


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Provide a configuration that keeps every file under tmp_path."""
    config = Config()
    config.render.backend = "mock"
    config.llm.provider = "mock"
    config.transcription.provider = "mock"
    config.paths.tmp_dir = tmp_path / "tmp"
    config.paths.videos_dir = tmp_path / "videos"
    config.server.base_url = "http://studio.test"
    return config


@pytest.fixture
def fake_backend() -> FakeRenderBackend:
    return FakeRenderBackend()


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def transcriber(sample_words) -> MockTranscriber:
    return MockTranscriber(sample_words)

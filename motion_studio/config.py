"""Configuration loading and management."""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field


class RenderConfig(BaseModel):
    """Remote render (Remotion Lambda) configuration."""

    backend: Literal["remotion-lambda", "mock"] = "remotion-lambda"
    region: str = "us-east-1"
    function_name: str | None = None
    poll_interval_seconds: float = 4.0
    # None disables the deadline and leaves the remote timeout as the only backstop
    max_wait_seconds: float | None = 900.0
    codec: str = "h264"
    timeout_in_milliseconds: int = 120_000
    frames_per_lambda: int = 20
    width: int = 1280
    height: int = 720
    site_prefix: str = "ms-render"
    remotion_command: list[str] = Field(default_factory=lambda: ["npx", "remotion"])
    project_dir: Path = Path(".")
    function_memory_mb: int = 2048
    function_timeout_seconds: int = 120
    function_disk_mb: int = 2048


class CaptionsConfig(BaseModel):
    """Caption rendering configuration."""

    default_style: str = "heat"
    mode: Literal["remotion", "burn"] = "remotion"
    fps: int = 30
    tail_padding_seconds: float = 0.5
    timeout_in_milliseconds: int = 240_000
    frames_per_lambda: int = 60
    site_prefix: str = "ms-captions"
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    download_timeout_seconds: float = 120.0


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "anthropic"
    model: str = "claude-opus-4-6"
    max_tokens: int = 16000
    temperature: float = 0.7


class TranscriptionConfig(BaseModel):
    """Speech-to-text configuration."""

    provider: str = "openai"
    model: str = "whisper-1"
    language: str | None = None
    prompt: str | None = None


class JobsConfig(BaseModel):
    """Background job configuration."""

    retention_seconds: int = 2 * 60 * 60
    sweep_interval_seconds: float = 300.0
    max_workers: int = 4
    max_pending: int = 32


class PathsConfig(BaseModel):
    """Local path configuration."""

    videos_dir: Path = Path("videos")
    tmp_dir: Path = Path("tmp")


class NotifyConfig(BaseModel):
    """Downstream webhook configuration."""

    webhook_url: str | None = None
    api_key: str | None = None
    timeout_seconds: float = 10.0


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 3000
    base_url: str | None = None
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    max_prompt_length: int = 2000

    @property
    def public_url(self) -> str:
        """Base URL used when building links to rendered videos."""
        return (self.base_url or f"http://localhost:{self.port}").rstrip("/")


class Config(BaseModel):
    """Main application configuration."""

    render: RenderConfig = Field(default_factory=RenderConfig)
    captions: CaptionsConfig = Field(default_factory=CaptionsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    transcription: TranscriptionConfig = Field(default_factory=TranscriptionConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    notify: NotifyConfig = Field(default_factory=NotifyConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "Config":
        """Load configuration from a YAML file."""
        path = Path(path)
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()

        return cls(**data)

    def to_yaml(self, path: Path | str) -> None:
        """Save configuration to a YAML file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        data = self.model_dump(mode="json")
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False)

    def apply_env(self, environ: dict[str, str] | None = None) -> "Config":
        """Overlay deployment values and secrets from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            This config, for chaining.
        """
        env = os.environ if environ is None else environ

        if env.get("AWS_REGION"):
            self.render.region = env["AWS_REGION"]
        if env.get("REMOTION_FUNCTION_NAME"):
            self.render.function_name = env["REMOTION_FUNCTION_NAME"]
        if env.get("CLAUDE_MODEL"):
            self.llm.model = env["CLAUDE_MODEL"]
        if env.get("BASE_URL"):
            self.server.base_url = env["BASE_URL"]
        if env.get("PORT"):
            self.server.port = int(env["PORT"])
        if env.get("NOTIFY_WEBHOOK_URL"):
            self.notify.webhook_url = env["NOTIFY_WEBHOOK_URL"]
        if env.get("NOTIFY_API_KEY"):
            self.notify.api_key = env["NOTIFY_API_KEY"]
        return self


def load_config(config_path: Path | str | None = None) -> Config:
    """Load configuration from file or use defaults, then apply the environment."""
    if config_path is None:
        # Look for config.yaml in current directory or project root
        candidates = [Path("config.yaml"), Path(__file__).parent.parent / "config.yaml"]
        for candidate in candidates:
            if candidate.exists():
                config_path = candidate
                break

    config = Config.from_yaml(config_path) if config_path is not None else Config()
    return config.apply_env()

"""Source video download and ffmpeg/ffprobe helpers."""

import json
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

import httpx

from ..errors import CollaboratorError, MediaToolError

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 1920
DEFAULT_HEIGHT = 1080


@dataclass(frozen=True)
class VideoInfo:
    """Dimensions and duration of a video file."""

    width: int
    height: int
    duration_seconds: float


def download_video(
    url: str,
    dest_path: Path,
    timeout: float = 120.0,
    client: httpx.Client | None = None,
) -> int:
    """Stream ``url`` to ``dest_path``.

    Returns:
        Number of bytes written.

    Raises:
        CollaboratorError: If the request fails or returns a non-2xx status.
    """
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    owns_client = client is None
    client = client or httpx.Client(timeout=timeout, follow_redirects=True)
    size = 0
    try:
        with client.stream("GET", url) as response:
            if not response.is_success:
                raise CollaboratorError(f"Failed to download video: {response.status_code}")
            with open(dest_path, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
                    size += len(chunk)
    except httpx.HTTPError as e:
        raise CollaboratorError(f"Failed to download video: {e}") from e
    finally:
        if owns_client:
            client.close()
    return size


def _run(cmd: list[str], timeout: float = 600) -> subprocess.CompletedProcess:
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except FileNotFoundError:
        raise MediaToolError(f"{cmd[0]} not found on PATH")
    except subprocess.TimeoutExpired:
        raise MediaToolError(f"{cmd[0]} timed out after {timeout}s")
    if result.returncode != 0:
        raise MediaToolError(f"{cmd[0]} failed: {(result.stderr or result.stdout).strip()[-500:]}")
    return result


def extract_audio(video_path: Path, audio_path: Path, ffmpeg: str = "ffmpeg") -> Path:
    """Extract a 16 kHz mono WAV track for transcription."""
    _run([ffmpeg, "-i", str(video_path), "-vn", "-ar", "16000", "-ac", "1", "-y", str(audio_path)])
    return audio_path


def probe_video(video_path: Path, ffprobe: str = "ffprobe") -> VideoInfo:
    """Read width, height and duration of the first video stream.

    Falls back to 1920x1080 when probing fails; the caption overlay still
    renders, only scaled to the default canvas.
    """
    try:
        result = _run(
            [ffprobe, "-v", "quiet", "-print_format", "json", "-show_streams", str(video_path)],
            timeout=30,
        )
        data = json.loads(result.stdout)
        stream = next(s for s in data.get("streams", []) if s.get("codec_type") == "video")
        return VideoInfo(
            width=int(stream["width"]),
            height=int(stream["height"]),
            duration_seconds=float(stream.get("duration") or 0),
        )
    except (MediaToolError, ValueError, KeyError, StopIteration) as e:
        logger.warning("[captions] Could not detect video dimensions: %s", e)
        return VideoInfo(DEFAULT_WIDTH, DEFAULT_HEIGHT, 0.0)

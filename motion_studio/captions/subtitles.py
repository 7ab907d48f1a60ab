"""Local fallback: burn grouped captions into the video with ffmpeg."""

from pathlib import Path
from typing import Sequence

from .media import _run
from .styles import CaptionStyle
from .timing import WordGroup


def format_srt_time(seconds: float) -> str:
    """Format seconds as an SRT timestamp (HH:MM:SS,mmm)."""
    millis = max(int(round(seconds * 1000)), 0)
    hours, millis = divmod(millis, 3_600_000)
    minutes, millis = divmod(millis, 60_000)
    secs, millis = divmod(millis, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def build_srt(groups: Sequence[WordGroup], uppercase: bool = False) -> str:
    """One subtitle cue per word group, spanning first start to last end."""
    cues = []
    for index, group in enumerate(groups, start=1):
        text = " ".join(w.word for w in group)
        if uppercase:
            text = text.upper()
        cues.append(
            f"{index}\n"
            f"{format_srt_time(group[0].start)} --> {format_srt_time(group[-1].end)}\n"
            f"{text}\n"
        )
    return "\n".join(cues)


def _ass_colour(hex_colour: str) -> str:
    # "#RRGGBB" -> "&H00BBGGRR"
    value = hex_colour.lstrip("#")
    if len(value) != 6:
        return "&H00FFFFFF"
    r, g, b = value[0:2], value[2:4], value[4:6]
    return f"&H00{b}{g}{r}".upper()


def force_style(style: CaptionStyle) -> str:
    """ASS ``force_style`` override approximating a caption style."""
    parts = [
        f"Fontsize={max(style.font_size // 3, 12)}",
        f"PrimaryColour={_ass_colour(style.color)}",
        f"Bold={1 if style.font_weight >= 700 else 0}",
        "Outline=2",
        f"Alignment={5 if style.position == 'center' else 2}",
    ]
    return ",".join(parts)


def _escape_filter_path(path: Path) -> str:
    return str(path).replace("\\", "\\\\").replace(":", "\\:").replace("'", "\\'")


def burn_subtitles(
    video_path: Path,
    srt_path: Path,
    output_path: Path,
    style: CaptionStyle,
    ffmpeg: str = "ffmpeg",
) -> Path:
    """Re-encode ``video_path`` with the SRT cues drawn on top."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    video_filter = f"subtitles='{_escape_filter_path(srt_path)}':force_style='{force_style(style)}'"
    _run(
        [
            ffmpeg,
            "-i", str(video_path),
            "-vf", video_filter,
            "-c:a", "copy",
            "-y", str(output_path),
        ]
    )
    return output_path

"""
SRT parsing and writing, plus the plain-text transcript formats.
"""

import json
import logging
import re

from .models import Segment

logger = logging.getLogger("vidscribe")

_TS_RE = re.compile(r"(\d\d:\d\d:\d\d[,.]\d\d\d)\s+--\>\s+(\d\d:\d\d:\d\d[,.]\d\d\d)")


def format_time(seconds: float) -> str:
    """Format seconds as HH:MM:SS."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def format_srt_time(t: float) -> str:
    ms_total = int(round(max(0.0, t) * 1000))
    h, rem = divmod(ms_total, 3_600_000)
    m, rem = divmod(rem, 60_000)
    s, ms = divmod(rem, 1000)
    return f"{h:02}:{m:02}:{s:02},{ms:03}"


def write_srt(segments: list[Segment], path: str) -> None:
    """Write segments to SRT file."""
    with open(path, "w", encoding="utf-8") as f:
        for i, s in enumerate(segments, 1):
            f.write(f"{i}\n{format_srt_time(s.start)} --> {format_srt_time(s.end)}\n{s.text}\n\n")


def write_txt(segments: list[Segment], path: str) -> None:
    """One line per segment, like Whisper's txt output."""
    with open(path, "w", encoding="utf-8") as f:
        for s in segments:
            f.write(f"{s.text.strip()}\n")


def write_json(segments: list[Segment], path: str, language: str | None = None) -> None:
    payload = {
        "text": " ".join(s.text.strip() for s in segments if s.text.strip()),
        "segments": [
            {"id": i, "start": s.start, "end": s.end, "text": s.text} for i, s in enumerate(segments)
        ],
        "language": language,
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


WRITERS = {
    "txt": write_txt,
    "srt": write_srt,
    "json": write_json,
}


def parse_srt(path: str) -> list[Segment]:
    """Parse SRT file into segments."""

    def parse_ts(ts: str) -> float:
        h, m, rest = ts.replace(".", ",").split(":")
        s, ms = rest.split(",")
        return int(h) * 3600 + int(m) * 60 + int(s) + int(ms) / 1000.0

    with open(path, encoding="utf-8") as f:
        raw = f.read()

    blocks = re.split(r"\n\s*\n", raw.strip(), flags=re.M)
    out: list[Segment] = []
    for b in blocks:
        lines = [ln for ln in b.splitlines() if ln.strip()]
        if lines and re.match(r"^\d+$", lines[0].strip()):
            lines = lines[1:]
        if not lines:
            continue
        m = _TS_RE.match(lines[0].strip())
        if not m:
            continue
        text = " ".join(ln.strip() for ln in lines[1:])
        out.append(Segment(start=parse_ts(m.group(1)), end=parse_ts(m.group(2)), text=text))
    return out


def timestamped_lines(segments: list[Segment]) -> list[str]:
    return [f"[{format_time(s.start)}] {s.text.strip()}" for s in segments if s.text.strip()]


def write_timestamped_transcript(srt_path: str, out_path: str) -> int:
    """Write `[HH:MM:SS] text` lines built from an SRT file. Returns the line count."""
    lines = timestamped_lines(parse_srt(srt_path))
    with open(out_path, "w", encoding="utf-8") as f:
        for ln in lines:
            f.write(ln + "\n")
    logger.info("Added timestamps to transcript: %s", out_path)
    return len(lines)

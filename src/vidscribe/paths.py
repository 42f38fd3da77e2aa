"""
Output path derivation for a transcription job.
"""

import os
import time
from pathlib import Path

from .errors import DirectoryCreateFailed
from .models import JobPaths

AUDIO_SUFFIX = "_audio"


def base_name(input_path: str) -> str:
    """File name without directory and without its last extension."""
    return Path(input_path).stem


def resolve_paths(input_path: str, dest_dir: str, formats: tuple[str, ...] = ("txt",)) -> JobPaths:
    """Derive the audio file and transcript file(s) for `input_path` inside `dest_dir`."""
    base = base_name(input_path)
    stem = os.path.join(dest_dir, f"{base}{AUDIO_SUFFIX}")
    transcripts: list[str] = []
    for fmt in formats:
        p = f"{stem}.{fmt}"
        if p not in transcripts:
            transcripts.append(p)
    return JobPaths(base=base, dest_dir=dest_dir, audio=f"{stem}.wav", transcripts=tuple(transcripts))


def timestamped_path(paths: JobPaths) -> str:
    return os.path.join(paths.dest_dir, f"{paths.base}{AUDIO_SUFFIX}.timestamped.txt")


def ensure_dir(path: str) -> None:
    """Create `path` (and parents) if missing."""
    p = Path(path)
    if p.exists() and not p.is_dir():
        raise DirectoryCreateFailed(path, "path exists and is not a directory")
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DirectoryCreateFailed(path, e.strerror or str(e)) from e


def wait_for_file(path: str, timeout: float = 5.0, interval: float = 0.25) -> bool:
    """Poll until `path` exists or `timeout` seconds pass. Checks at least once."""
    deadline = time.monotonic() + timeout
    while True:
        if os.path.isfile(path):
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        time.sleep(min(interval, remaining))

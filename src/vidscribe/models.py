"""
Data models for the transcription pipeline.
"""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class Segment:
    """A single transcribed segment with timing and text."""

    start: float  # seconds
    end: float  # seconds
    text: str


@dataclass
class ToolResult:
    """Outcome of one external tool invocation."""

    command: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def output_tail(self, max_lines: int = 5) -> str:
        """Last few non-empty lines of stderr (or stdout), for error messages."""
        text = self.stderr.strip() or self.stdout.strip()
        lines = [ln for ln in text.splitlines() if ln.strip()]
        return " | ".join(lines[-max_lines:])


@dataclass(frozen=True)
class JobPaths:
    """Files derived from one input and its destination directory."""

    base: str
    dest_dir: str
    audio: str
    transcripts: tuple[str, ...]


class JobStatus(str, Enum):
    PENDING = "pending"
    AUDIO_EXTRACTED = "audio-extracted"
    TRANSCRIBED = "transcribed"
    COMPLETE = "complete"
    FAILED = "failed"


# Legal forward moves; FAILED is reachable from any non-terminal state.
_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.AUDIO_EXTRACTED},
    JobStatus.AUDIO_EXTRACTED: {JobStatus.TRANSCRIBED, JobStatus.COMPLETE},
    JobStatus.TRANSCRIBED: {JobStatus.COMPLETE},
    JobStatus.COMPLETE: set(),
    JobStatus.FAILED: set(),
}


@dataclass
class Job:
    """One end-to-end request: a single input file turned into transcript(s)."""

    input_path: str
    dest_dir: str
    paths: JobPaths | None = None
    status: JobStatus = JobStatus.PENDING
    error: Exception | None = None
    warnings: list[Warning] = field(default_factory=list)
    results: dict[str, ToolResult] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.status in (JobStatus.COMPLETE, JobStatus.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.status is JobStatus.COMPLETE

    def advance(self, new: JobStatus) -> None:
        """Move to the next state, rejecting re-entry and skipped stages."""
        if new is JobStatus.FAILED and not self.terminal:
            self.status = new
            return
        if new not in _TRANSITIONS[self.status]:
            msg = f"Illegal job transition {self.status.value} -> {new.value}"
            raise ValueError(msg)
        self.status = new

    def fail(self, error: Exception) -> None:
        self.advance(JobStatus.FAILED)
        self.error = error

"""
Shared fixtures: stub tool adapters that behave like VLC and Whisper without running them.
"""

import os
import wave
from dataclasses import replace
from pathlib import Path

import pytest

from src.vidscribe.config import Settings
from src.vidscribe.errors import ExternalToolError
from src.vidscribe.models import ToolResult
from src.vidscribe.pipeline import TranscriptionPipeline

SRT_BODY = "1\n00:00:00,000 --> 00:00:01,500\nHello there.\n\n2\n00:01:05,000 --> 00:01:07,250\nSecond line.\n\n"


def write_wav(path: str, seconds: float = 0.5, rate: int = 16000) -> None:
    with wave.open(str(path), "wb") as w:
        w.setnchannels(1)
        w.setsampwidth(2)
        w.setframerate(rate)
        w.writeframes(b"\x00\x00" * int(rate * seconds))


class FakeExtractor:
    """Writes a short silent WAV unless told to fail for an input."""

    def __init__(self, fail_for: tuple[str, ...] = (), returncode: int = 0, payload: bytes | None = None):
        self.fail_for = fail_for
        self.returncode = returncode
        self.payload = payload
        self.calls = []

    def run(self, params):
        self.calls.append(params)
        cmd = ["vlc", params.input_path]
        if self.returncode != 0:
            raise ExternalToolError("VLC", ToolResult(cmd, self.returncode, stderr="main error: no suitable decoder"))
        if Path(params.input_path).name in self.fail_for:
            return ToolResult(cmd, 0)
        if self.payload is not None:
            Path(params.output_path).write_bytes(self.payload)
        else:
            write_wav(params.output_path)
        return ToolResult(cmd, 0)


class FakeTranscriber:
    """Writes `{audio stem}.{fmt}` for every requested format."""

    def __init__(self, returncode: int = 0, write: bool = True):
        self.returncode = returncode
        self.write = write
        self.calls = []

    def run(self, params):
        self.calls.append(params)
        cmd = ["whisper", params.audio_path]
        if self.returncode != 0:
            raise ExternalToolError("Whisper", ToolResult(cmd, self.returncode, stderr="RuntimeError: bad model"))
        if self.write:
            stem = os.path.join(params.output_dir, Path(params.audio_path).stem)
            for fmt in params.formats:
                body = SRT_BODY if fmt == "srt" else "Hello there.\nSecond line.\n"
                Path(f"{stem}.{fmt}").write_text(body, encoding="utf-8")
        return ToolResult(cmd, 0)


@pytest.fixture
def settings():
    return Settings(audio_wait_timeout=0)


@pytest.fixture
def video(tmp_path):
    path = tmp_path / "meeting.mp4"
    path.write_bytes(b"not really a video")
    return path


@pytest.fixture
def make_pipeline(settings):
    def _make(extractor=None, transcriber=None, **overrides):
        s = replace(settings, **overrides)
        return TranscriptionPipeline(
            s,
            extractor=extractor or FakeExtractor(),
            transcriber=transcriber or FakeTranscriber(),
            poll_interval=0.01,
        )

    return _make

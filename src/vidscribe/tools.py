"""
External tool adapters: VLC for audio extraction, the Whisper CLI for transcription.

Each adapter exposes `run(params) -> ToolResult` and raises ExternalToolError when
the program cannot be started or exits non-zero, so tests can swap in stubs.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

from .errors import ExternalToolError
from .models import ToolResult

logger = logging.getLogger("vidscribe")


@dataclass(frozen=True)
class ExtractParams:
    input_path: str
    output_path: str
    codec: str = "s16l"
    channels: int = 1
    sample_rate: int = 16000
    bitrate: int | None = None  # kbps


@dataclass(frozen=True)
class TranscribeParams:
    audio_path: str
    output_dir: str
    model: str = "base"
    formats: tuple[str, ...] = ("txt",)
    language: str | None = None


class AudioExtractor(Protocol):
    def run(self, params: ExtractParams) -> ToolResult: ...


class Transcriber(Protocol):
    def run(self, params: TranscribeParams) -> ToolResult: ...


def run(cmd: list[str], *, tool: str, check: bool = True) -> ToolResult:
    """Run a command to completion, capturing stdout and stderr."""
    logger.debug("Running: %s", " ".join(map(str, cmd)))
    try:
        proc = subprocess.run(
            cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, check=False
        )
    except OSError as e:
        raise ExternalToolError(tool, reason=str(e)) from e
    result = ToolResult(
        command=list(cmd), returncode=proc.returncode, stdout=proc.stdout or "", stderr=proc.stderr or ""
    )
    if not result.ok and check:
        logger.debug("%s output:\n%s", tool, result.stderr or result.stdout)
        raise ExternalToolError(tool, result)
    return result


def vlc_sout(params: ExtractParams) -> str:
    """Build VLC's --sout chain: transcode to PCM and write a WAV file."""
    transcode = [
        f"acodec={params.codec}",
        f"channels={params.channels}",
        f"samplerate={params.sample_rate}",
    ]
    if params.bitrate:
        transcode.append(f"ab={params.bitrate}")
    dst = params.output_path.replace("'", "\\'")
    return f"#transcode{{{','.join(transcode)}}}:std{{access=file,mux=wav,dst='{dst}'}}"


class VlcAudioExtractor:
    """Extract a WAV track with VLC in headless (dummy interface) mode."""

    def __init__(self, vlc_path: str = "vlc"):
        self.vlc_path = vlc_path

    def command(self, params: ExtractParams) -> list[str]:
        return [
            self.vlc_path,
            "-I",
            "dummy",
            params.input_path,
            "--sout",
            vlc_sout(params),
            "vlc://quit",
        ]

    def run(self, params: ExtractParams) -> ToolResult:
        return run(self.command(params), tool="VLC")


class WhisperCliTranscriber:
    """Transcribe with the openai-whisper command-line tool."""

    def __init__(self, whisper_path: str = "whisper"):
        self.whisper_path = whisper_path

    def command(self, params: TranscribeParams) -> list[str]:
        # The CLI takes a single --output_format; "all" covers several formats.
        output_format = params.formats[0] if len(params.formats) == 1 else "all"
        cmd = [
            self.whisper_path,
            params.audio_path,
            "--model",
            params.model,
            "--output_dir",
            params.output_dir,
        ]
        if params.language:
            cmd += ["--language", params.language]
        cmd += ["--output_format", output_format]
        return cmd

    def run(self, params: TranscribeParams) -> ToolResult:
        return run(self.command(params), tool="Whisper")

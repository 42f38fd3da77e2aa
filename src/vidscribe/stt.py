"""
In-process transcription with local faster-whisper.

Used instead of the Whisper CLI when TRANSCRIBER=faster-whisper. Produces the
same `{base}.{fmt}` files the CLI would write into the output directory.
"""

import logging
import os
from pathlib import Path

from .deps import FASTER_WHISPER_HINT
from .errors import DependencyMissing, ExternalToolError, TranscriptionFailed
from .models import Segment, ToolResult
from .srt_utils import WRITERS, write_json
from .tools import TranscribeParams

logger = logging.getLogger("vidscribe")


def load_model(local_model: str = "base"):
    """Build a CPU faster-whisper model."""
    try:
        from faster_whisper import WhisperModel
    except ImportError as e:
        raise DependencyMissing("faster-whisper", FASTER_WHISPER_HINT) from e

    logger.debug("Loading faster-whisper model %s", local_model)
    return WhisperModel(local_model, device="cpu", compute_type="int8")


def transcribe_local_faster_whisper(
    wav_path: str,
    local_model: str = "base",
    beam_size: int = 1,
    language: str | None = None,
    model=None,
) -> tuple[list[Segment], str | None]:
    """Transcribe audio using local faster-whisper. Returns (segments, detected language)."""
    if model is None:
        model = load_model(local_model)

    logger.info(f"Transcribing locally with faster-whisper ({local_model}, language: {language or 'auto'}) …")

    segments_iter, info = model.transcribe(
        wav_path,
        language=language or None,
        vad_filter=True,
        beam_size=beam_size,
        word_timestamps=False,
    )
    out: list[Segment] = []
    for s in segments_iter:
        out.append(Segment(start=float(s.start), end=float(s.end), text=str(s.text).strip()))
    return out, getattr(info, "language", None)


class FasterWhisperTranscriber:
    """Transcriber adapter backed by the faster-whisper library."""

    def __init__(self, beam_size: int = 1):
        self.beam_size = beam_size
        self._models: dict = {}  # model name -> loaded WhisperModel, reused across a batch

    def model(self, name: str):
        if name not in self._models:
            self._models[name] = load_model(name)
        return self._models[name]

    def run(self, params: TranscribeParams) -> ToolResult:
        unsupported = [f for f in params.formats if f not in WRITERS]
        if unsupported:
            msg = f"faster-whisper cannot write format(s): {', '.join(unsupported)} (supported: {', '.join(WRITERS)})"
            raise TranscriptionFailed(msg)

        command = ["faster-whisper", params.audio_path, "--model", params.model]
        try:
            segments, detected = transcribe_local_faster_whisper(
                params.audio_path,
                local_model=params.model,
                beam_size=self.beam_size,
                language=params.language,
                model=self.model(params.model),
            )
        except DependencyMissing:
            raise
        except Exception as e:
            # faster-whisper/ctranslate2 raise a variety of errors on bad input or models
            raise ExternalToolError("faster-whisper", reason=str(e)) from e

        if detected and not params.language:
            logger.info(f"Detected language: {detected}")

        stem = os.path.join(params.output_dir, Path(params.audio_path).stem)
        for fmt in params.formats:
            path = f"{stem}.{fmt}"
            if fmt == "json":
                write_json(segments, path, language=params.language or detected)
            else:
                WRITERS[fmt](segments, path)
            logger.debug("Wrote %s", path)

        return ToolResult(command=command, returncode=0, stdout=f"{len(segments)} segments")

"""
Pipeline driver: extract audio with VLC, transcribe it, clean up.

Each input file is an independent Job that moves through
pending -> audio-extracted -> transcribed -> complete, or fails at the first
stage error. Jobs in a batch run strictly one after another.
"""

import logging
import os

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError
from tqdm import tqdm

from .config import Settings
from .errors import (
    AudioExtractionFailed,
    CleanupWarning,
    ExternalToolError,
    InputNotFound,
    TranscriptionFailed,
    VidscribeError,
)
from .models import Job, JobStatus
from .paths import ensure_dir, resolve_paths, timestamped_path, wait_for_file
from .srt_utils import write_timestamped_transcript
from .stt import FasterWhisperTranscriber
from .tools import (
    AudioExtractor,
    ExtractParams,
    TranscribeParams,
    Transcriber,
    VlcAudioExtractor,
    WhisperCliTranscriber,
)

logger = logging.getLogger("vidscribe")

POLL_INTERVAL = 0.25


def make_extractor(settings: Settings) -> AudioExtractor:
    return VlcAudioExtractor(settings.vlc_path)


def make_transcriber(settings: Settings) -> Transcriber:
    if settings.transcriber == "faster-whisper":
        return FasterWhisperTranscriber()
    return WhisperCliTranscriber(settings.whisper_cli_path)


def audio_duration_seconds(wav_path: str) -> float:
    return len(AudioSegment.from_wav(wav_path)) / 1000.0


class TranscriptionPipeline:
    """Runs Jobs with one audio extractor and one transcriber."""

    def __init__(
        self,
        settings: Settings,
        extractor: AudioExtractor | None = None,
        transcriber: Transcriber | None = None,
        *,
        poll_interval: float = POLL_INTERVAL,
    ):
        self.settings = settings
        self.extractor = extractor or make_extractor(settings)
        self.transcriber = transcriber or make_transcriber(settings)
        self.poll_interval = poll_interval

    @property
    def formats(self) -> tuple[str, ...]:
        """Requested transcript formats; timestamping needs the srt output too."""
        formats = tuple(self.settings.output_formats)
        if self.settings.timestamp and "srt" not in formats:
            formats += ("srt",)
        return formats

    # -- stages -------------------------------------------------------------

    def _prepare(self, job: Job) -> None:
        if not os.path.isfile(job.input_path):
            raise InputNotFound(job.input_path)
        job.paths = resolve_paths(job.input_path, job.dest_dir, self.formats)
        ensure_dir(job.dest_dir)

    def _extract(self, job: Job) -> None:
        s = self.settings
        audio = job.paths.audio
        logger.info(f"Extracting audio from {job.input_path}...")
        params = ExtractParams(
            input_path=job.input_path,
            output_path=audio,
            codec=s.audio_format,
            channels=s.audio_channels,
            sample_rate=s.audio_sample_rate,
            bitrate=s.audio_bitrate,
        )
        try:
            job.results["extract"] = self.extractor.run(params)
        except ExternalToolError as e:
            job.results["extract"] = e.result
            raise AudioExtractionFailed(f"Failed to extract audio from {job.input_path}: {e}") from e

        if not wait_for_file(audio, timeout=s.audio_wait_timeout, interval=self.poll_interval):
            msg = f"Failed to extract audio from {job.input_path}: {audio} was not created"
            raise AudioExtractionFailed(msg)

        job.advance(JobStatus.AUDIO_EXTRACTED)
        # informational only: pydub cannot decode non-PCM WAVs such as fl32
        try:
            duration = audio_duration_seconds(audio)
        except (CouldntDecodeError, OSError) as e:
            logger.warning(f"Could not read duration of {audio}: {e}")
            logger.info(f"Audio extracted successfully: {audio}")
        else:
            logger.info(f"Audio extracted successfully: {audio} ({duration:.1f}s)")

    def _transcribe(self, job: Job) -> None:
        s = self.settings
        logger.info(f"Transcribing audio with {s.transcriber} (model: {s.whisper_model})...")
        params = TranscribeParams(
            audio_path=job.paths.audio,
            output_dir=job.dest_dir,
            model=s.whisper_model,
            formats=self.formats,
            language=s.language,
        )
        try:
            job.results["transcribe"] = self.transcriber.run(params)
        except ExternalToolError as e:
            job.results["transcribe"] = e.result
            raise TranscriptionFailed(f"Transcription failed for {job.paths.audio}: {e}") from e

        missing = [p for p in job.paths.transcripts if not os.path.isfile(p)]
        if missing:
            raise TranscriptionFailed(f"Transcription failed: expected output not found: {', '.join(missing)}")

        job.advance(JobStatus.TRANSCRIBED)
        logger.info("Transcription complete!")

    def _add_timestamps(self, job: Job) -> None:
        srt = next(p for p in job.paths.transcripts if p.endswith(".srt"))
        try:
            write_timestamped_transcript(srt, timestamped_path(job.paths))
        except OSError as e:
            raise TranscriptionFailed(f"Failed to add timestamps to transcript: {srt}: {e}") from e

    def _cleanup(self, job: Job) -> None:
        logger.info("Cleaning up temporary files...")
        try:
            os.remove(job.paths.audio)
        except OSError as e:
            warning = CleanupWarning(f"Could not remove {job.paths.audio}: {e}")
            job.warnings.append(warning)
            logger.warning(str(warning))

    # -- jobs ---------------------------------------------------------------

    def _fail(self, job: Job, error: VidscribeError) -> Job:
        job.fail(error)
        logger.error(str(error))
        return job

    def process(self, input_path: str, dest_dir: str) -> Job:
        """Run one Job end to end. Never raises for stage failures; check job.status."""
        job = Job(input_path=str(input_path), dest_dir=str(dest_dir))
        try:
            self._prepare(job)
            self._extract(job)
            self._transcribe(job)
            if self.settings.timestamp:
                self._add_timestamps(job)
        except VidscribeError as e:
            return self._fail(job, e)

        logger.info(f"Audio file: {job.paths.audio}")
        for path in job.paths.transcripts:
            logger.info(f"Transcript saved to: {path}")

        if self.settings.cleanup_temp_files:
            self._cleanup(job)
        job.advance(JobStatus.COMPLETE)
        return job

    def extract(self, input_path: str, dest_dir: str) -> Job:
        """Extraction only: the Job completes once the WAV file is on disk."""
        job = Job(input_path=str(input_path), dest_dir=str(dest_dir))
        try:
            self._prepare(job)
            self._extract(job)
        except VidscribeError as e:
            return self._fail(job, e)

        job.advance(JobStatus.COMPLETE)
        logger.info(f'To transcribe, run: whisper "{job.paths.audio}" --model {self.settings.whisper_model}')
        mac = self.settings.macwhisper_path
        if mac and os.path.exists(mac):
            logger.info("You can now open MacWhisper and drag this file for transcription.")
        return job

    def run_batch(
        self, inputs: list[str], dest_dir: str, *, fail_fast: bool = False, extract_only: bool = False
    ) -> list[Job]:
        """
        Process inputs one at a time. A failed Job does not stop the others
        unless `fail_fast` is set, in which case later inputs are not attempted.
        """
        step = self.extract if extract_only else self.process
        jobs: list[Job] = []
        for path in tqdm(inputs, desc="Files", unit="file", disable=len(inputs) < 2):
            job = step(path, dest_dir)
            jobs.append(job)
            if fail_fast and not job.succeeded:
                skipped = len(inputs) - len(jobs)
                if skipped:
                    logger.warning(f"Stopping batch after failure; {skipped} file(s) not processed")
                break
        return jobs

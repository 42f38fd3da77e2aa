"""
Command-line interface for the transcription pipeline.
"""

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from . import __version__
from .config import load_settings
from .deps import check_dependencies, pipeline_dependencies
from .errors import VidscribeError
from .log import add_log_file, setup_logging
from .pipeline import TranscriptionPipeline

logger = logging.getLogger("vidscribe")

DEFAULT_OUTPUT_DIR = "output"
LOG_FILE_ENV_VAR = "VIDSCRIBE_LOG_FILE"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="vidscribe",
        description="Extract audio from videos with VLC and transcribe it with Whisper",
        epilog="Example: vidscribe video.mp4 -o ./my_transcripts -c ./config/custom.conf",
    )
    ap.add_argument("inputs", nargs="+", metavar="INPUT", help="Video (or audio) file(s) to transcribe")
    ap.add_argument(
        "-o",
        "--output-dir",
        default=DEFAULT_OUTPUT_DIR,
        help="Directory to save outputs (default: ./output)",
    )
    ap.add_argument(
        "-c",
        "--config",
        default=None,
        help="Path to config file (default: $VIDSCRIBE_CONFIG or ./config/default.conf)",
    )
    ap.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first file that fails instead of processing the rest",
    )
    ap.add_argument(
        "--extract-only",
        action="store_true",
        help="Only extract the WAV audio; skip transcription",
    )
    ap.add_argument("--log-file", default=None, help="Also append log lines to this file")
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def run(args: argparse.Namespace, pipeline: TranscriptionPipeline | None = None) -> int:
    """Load config, check tools, process every input. Returns the exit status."""
    try:
        settings = load_settings(args.config)
    except VidscribeError as e:
        logger.error(str(e))
        return 1

    if settings.log_file and not args.log_file:
        try:
            add_log_file(settings.log_file)
        except OSError as e:
            logger.error(f"Could not open log file {settings.log_file}: {e}")
            return 1

    try:
        check_dependencies(pipeline_dependencies(settings, extract_only=args.extract_only))
    except VidscribeError as e:
        logger.error(str(e))
        return 1

    if pipeline is None:
        pipeline = TranscriptionPipeline(settings)
    jobs = pipeline.run_batch(
        args.inputs, args.output_dir, fail_fast=args.fail_fast, extract_only=args.extract_only
    )

    failed = [j for j in jobs if not j.succeeded]
    if len(args.inputs) > 1:
        skipped = len(args.inputs) - len(jobs)
        summary = f"Processed {len(jobs) - len(failed)}/{len(args.inputs)} file(s) successfully"
        if skipped:
            summary += f", {skipped} skipped"
        if failed or skipped:
            logger.warning(summary)
        else:
            logger.info(summary)
    return 1 if failed or len(jobs) < len(args.inputs) else 0


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    args = parse_args(argv)
    setup_logging(args.verbose)
    log_file = args.log_file or os.getenv(LOG_FILE_ENV_VAR)
    if log_file:
        try:
            add_log_file(log_file)
        except OSError as e:
            logger.error(f"Could not open log file {log_file}: {e}")
            sys.exit(1)

    try:
        code = run(args)
    except KeyboardInterrupt:
        logger.error("Interrupted")
        code = 130
    sys.exit(code)

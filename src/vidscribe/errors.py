"""
Error types raised by the transcription pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import ToolResult


class VidscribeError(RuntimeError):
    """Base class for every fatal pipeline error."""


class ConfigNotFound(VidscribeError):
    def __init__(self, path: str):
        super().__init__(f"Configuration file not found: {path}")
        self.path = path


class ConfigInvalid(VidscribeError):
    def __init__(self, key: str, value: str, expected: str):
        super().__init__(f"Invalid value for {key}: {value!r} (expected {expected})")
        self.key = key
        self.value = value


class DependencyMissing(VidscribeError):
    def __init__(self, name: str, hint: str = ""):
        msg = f"'{name}' not found."
        if hint:
            msg += f" {hint}"
        super().__init__(msg)
        self.name = name
        self.hint = hint


class InputNotFound(VidscribeError):
    def __init__(self, path: str):
        super().__init__(f"File not found: {path}")
        self.path = path


class DirectoryCreateFailed(VidscribeError):
    def __init__(self, path: str, reason: str = ""):
        msg = f"Could not create directory '{path}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.path = path


class AudioExtractionFailed(VidscribeError):
    pass


class TranscriptionFailed(VidscribeError):
    pass


class ExternalToolError(VidscribeError):
    """An external program could not be started or exited non-zero."""

    def __init__(self, tool: str, result: ToolResult | None = None, reason: str = ""):
        if result is not None:
            msg = f"{tool} failed with code {result.returncode}"
            tail = result.output_tail()
            if tail:
                msg += f": {tail}"
        else:
            msg = f"{tool} could not be run: {reason}"
        super().__init__(msg)
        self.tool = tool
        self.result = result


class CleanupWarning(UserWarning):
    """Intermediate files could not be removed. Never fatal."""

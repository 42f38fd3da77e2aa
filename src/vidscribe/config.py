"""
Configuration loading from shell-style KEY=value files.
"""

import logging
import os
import sys
from dataclasses import dataclass, fields

from dotenv import dotenv_values

from .errors import ConfigInvalid, ConfigNotFound

logger = logging.getLogger("vidscribe")

DEFAULT_CONFIG_PATH = os.path.join("config", "default.conf")
CONFIG_ENV_VAR = "VIDSCRIBE_CONFIG"

TRANSCRIBERS = ("whisper", "faster-whisper")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _default_vlc_path() -> str:
    if sys.platform == "darwin":
        return "/Applications/VLC.app/Contents/MacOS/VLC"
    return "vlc"


@dataclass(frozen=True)
class Settings:
    """Resolved configuration for one run."""

    # Whisper
    whisper_model: str = "base"
    language: str | None = None  # auto-detect if None
    output_formats: tuple[str, ...] = ("txt",)
    transcriber: str = "whisper"  # whisper | faster-whisper

    # VLC transcode directive
    audio_channels: int = 1
    audio_sample_rate: int = 16000
    audio_format: str = "s16l"
    audio_bitrate: int | None = None  # kbps, omitted when None

    # Tool locations
    vlc_path: str = _default_vlc_path()
    whisper_cli_path: str = "whisper"
    macwhisper_path: str | None = None

    # Behaviour
    cleanup_temp_files: bool = False
    timestamp: bool = False
    audio_wait_timeout: float = 5.0  # seconds to wait for VLC's output file
    log_file: str | None = None


# config key -> Settings field
CONFIG_KEYS = {
    "WHISPER_MODEL": "whisper_model",
    "LANGUAGE": "language",
    "OUTPUT_FORMATS": "output_formats",
    "TRANSCRIBER": "transcriber",
    "AUDIO_CHANNELS": "audio_channels",
    "AUDIO_SAMPLE_RATE": "audio_sample_rate",
    "AUDIO_FORMAT": "audio_format",
    "AUDIO_BITRATE": "audio_bitrate",
    "VLC_PATH": "vlc_path",
    "WHISPER_CLI_PATH": "whisper_cli_path",
    "MACWHISPER_PATH": "macwhisper_path",
    "CLEANUP_TEMP_FILES": "cleanup_temp_files",
    "TIMESTAMP": "timestamp",
    "AUDIO_WAIT_TIMEOUT": "audio_wait_timeout",
    "LOG_FILE": "log_file",
}


def _parse_bool(key: str, raw: str) -> bool:
    val = raw.strip().lower()
    if val in _TRUE:
        return True
    if val in _FALSE:
        return False
    raise ConfigInvalid(key, raw, "0 or 1")


def _parse_int(key: str, raw: str, *, positive: bool = True) -> int:
    try:
        val = int(raw.strip())
    except ValueError:
        raise ConfigInvalid(key, raw, "an integer") from None
    if positive and val <= 0:
        raise ConfigInvalid(key, raw, "a positive integer")
    return val


def _parse_float(key: str, raw: str) -> float:
    try:
        val = float(raw.strip())
    except ValueError:
        raise ConfigInvalid(key, raw, "a number of seconds") from None
    if val < 0:
        raise ConfigInvalid(key, raw, "a non-negative number of seconds")
    return val


def parse_formats(raw: str) -> tuple[str, ...]:
    """Split "txt,srt" / "txt srt" into a de-duplicated tuple, order kept."""
    out: list[str] = []
    for part in raw.replace(",", " ").split():
        fmt = part.strip().lower().lstrip(".")
        if fmt and fmt not in out:
            out.append(fmt)
    return tuple(out)


def _convert(key: str, name: str, raw: str):
    if name in ("audio_channels", "audio_sample_rate"):
        return _parse_int(key, raw)
    if name == "audio_bitrate":
        return _parse_int(key, raw) if raw.strip() else None
    if name in ("cleanup_temp_files", "timestamp"):
        return _parse_bool(key, raw)
    if name == "audio_wait_timeout":
        return _parse_float(key, raw)
    if name == "output_formats":
        formats = parse_formats(raw)
        if not formats:
            raise ConfigInvalid(key, raw, "at least one output format")
        return formats
    if name == "transcriber":
        val = raw.strip().lower()
        if val not in TRANSCRIBERS:
            raise ConfigInvalid(key, raw, " or ".join(TRANSCRIBERS))
        return val
    if name in ("language", "macwhisper_path", "log_file"):
        return raw.strip() or None
    val = raw.strip()
    if not val:
        # empty string means "use the default" for the remaining string keys
        return next(f.default for f in fields(Settings) if f.name == name)
    return val


def settings_from_mapping(values: dict[str, str | None]) -> Settings:
    """Build Settings from raw KEY -> value strings; unknown keys are ignored."""
    kwargs = {}
    for key, raw in values.items():
        name = CONFIG_KEYS.get(key.upper())
        if name is None:
            logger.debug("Ignoring unknown config key %s", key)
            continue
        kwargs[name] = _convert(key, name, raw or "")
    return Settings(**kwargs)


def resolve_config_path(path: str | None = None) -> str:
    return path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH


def load_settings(path: str | None = None) -> Settings:
    """Load Settings from a config file, falling back to defaults for missing keys."""
    config_path = resolve_config_path(path)
    if not os.path.isfile(config_path):
        raise ConfigNotFound(config_path)

    values = dotenv_values(config_path, interpolate=False)
    settings = settings_from_mapping(values)
    logger.info("Loaded configuration from %s", config_path)
    return settings

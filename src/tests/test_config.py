"""
Tests for configuration loading.
"""

import pytest

from src.vidscribe.config import CONFIG_ENV_VAR, Settings, load_settings, parse_formats
from src.vidscribe.errors import ConfigInvalid, ConfigNotFound


def write_conf(tmp_path, text, name="test.conf"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_missing_keys_fall_back_to_defaults(tmp_path):
    path = write_conf(tmp_path, 'WHISPER_MODEL="small"\n')

    s = load_settings(path)

    assert s.whisper_model == "small"
    assert s.audio_channels == 1
    assert s.audio_sample_rate == 16000
    assert s.audio_format == "s16l"
    assert s.output_formats == ("txt",)
    assert s.cleanup_temp_files is False
    assert s.language is None
    assert s.audio_bitrate is None
    assert s.transcriber == "whisper"


def test_empty_file_gives_all_defaults(tmp_path):
    assert load_settings(write_conf(tmp_path, "")) == Settings()


def test_shell_syntax(tmp_path):
    path = write_conf(
        tmp_path,
        "# comment line\n"
        "export AUDIO_CHANNELS=2\n"
        "AUDIO_SAMPLE_RATE='44100'\n"
        'VLC_PATH="/opt/vlc/bin/vlc"\n'
        "OUTPUT_FORMATS=txt,srt, txt\n"
        "CLEANUP_TEMP_FILES=1\n"
        "TIMESTAMP=0\n"
        'LANGUAGE=""\n'
        "AUDIO_BITRATE=128\n"
        "SOMETHING_ELSE=ignored\n",
    )

    s = load_settings(path)

    assert s.audio_channels == 2
    assert s.audio_sample_rate == 44100
    assert s.vlc_path == "/opt/vlc/bin/vlc"
    assert s.output_formats == ("txt", "srt")
    assert s.cleanup_temp_files is True
    assert s.timestamp is False
    assert s.language is None
    assert s.audio_bitrate == 128


def test_values_are_not_interpolated(tmp_path):
    s = load_settings(write_conf(tmp_path, 'WHISPER_CLI_PATH="${HOME}/bin/whisper"\n'))
    assert s.whisper_cli_path == "${HOME}/bin/whisper"


def test_settings_are_immutable(tmp_path):
    s = load_settings(write_conf(tmp_path, ""))
    with pytest.raises(AttributeError):
        s.whisper_model = "large"


def test_missing_file_raises(tmp_path):
    with pytest.raises(ConfigNotFound):
        load_settings(str(tmp_path / "missing.conf"))


def test_no_file_and_no_default_raises(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    with pytest.raises(ConfigNotFound) as exc:
        load_settings()
    assert "default.conf" in str(exc.value)


def test_default_path_and_env_override(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    (tmp_path / "config").mkdir()
    write_conf(tmp_path / "config", "WHISPER_MODEL=tiny\n", name="default.conf")
    assert load_settings().whisper_model == "tiny"

    monkeypatch.setenv(CONFIG_ENV_VAR, write_conf(tmp_path, "WHISPER_MODEL=medium\n", name="env.conf"))
    assert load_settings().whisper_model == "medium"


@pytest.mark.parametrize(
    "line",
    ["AUDIO_CHANNELS=two", "AUDIO_SAMPLE_RATE=0", "CLEANUP_TEMP_FILES=maybe", "TRANSCRIBER=vosk", "OUTPUT_FORMATS=,"],
)
def test_invalid_values(tmp_path, line):
    with pytest.raises(ConfigInvalid) as exc:
        load_settings(write_conf(tmp_path, line + "\n"))
    assert line.split("=")[0] in str(exc.value)


def test_parse_formats():
    assert parse_formats("txt") == ("txt",)
    assert parse_formats("TXT, .srt vtt") == ("txt", "srt", "vtt")
    assert parse_formats("") == ()

"""
Tests for log line formatting and routing.
"""

import io
import re

import pytest

from src.vidscribe.log import close_log_files, logger, setup_logging

LINE_RE = re.compile(r"^\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] \[(INFO|WARNING|ERROR)\] ")


@pytest.fixture
def streams():
    out, err = io.StringIO(), io.StringIO()
    setup_logging(stdout=out, stderr=err)
    yield out, err
    close_log_files()


def test_line_format(streams):
    out, _ = streams
    logger.info("Loaded configuration")
    line = out.getvalue().rstrip("\n")
    assert LINE_RE.match(line)
    assert line.endswith("[INFO] Loaded configuration")
    assert "\033[" not in line  # not a TTY


def test_levels_are_routed(streams):
    out, err = streams
    logger.info("info line")
    logger.warning("warning line")
    logger.error("error line")

    assert "info line" in out.getvalue()
    assert "[WARNING] warning line" in out.getvalue()
    assert "error line" not in out.getvalue()
    assert "[ERROR] error line" in err.getvalue()


def test_debug_only_when_verbose():
    out, err = io.StringIO(), io.StringIO()
    setup_logging(stdout=out, stderr=err)
    logger.debug("hidden")
    setup_logging(verbose=True, stdout=out, stderr=err)
    logger.debug("shown")
    assert "hidden" not in out.getvalue()
    assert "shown" in out.getvalue()


def test_log_file_appends(tmp_path):
    log_file = tmp_path / "logs" / "transcription.log"
    log_file.parent.mkdir()
    log_file.write_text("earlier run\n", encoding="utf-8")

    setup_logging(log_file=str(log_file), stdout=io.StringIO(), stderr=io.StringIO())
    logger.info("first")
    logger.error("second")
    close_log_files()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "earlier run"
    assert LINE_RE.match(lines[1]) and lines[1].endswith("first")
    assert LINE_RE.match(lines[2]) and lines[2].endswith("second")


def test_colors_on_tty():
    class TTY(io.StringIO):
        def isatty(self):
            return True

    out = TTY()
    setup_logging(stdout=out, stderr=io.StringIO())
    logger.warning("careful")
    assert out.getvalue().startswith("\033[33m[")
    assert out.getvalue().rstrip("\n").endswith("\033[0m")

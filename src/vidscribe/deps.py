"""
Checks that the external programs a run needs are installed.
"""

import importlib.util
import logging
import os
import shutil
import sys
from dataclasses import dataclass

from .config import Settings
from .errors import DependencyMissing

logger = logging.getLogger("vidscribe")

VLC_HINT = "Please install VLC from https://www.videolan.org/vlc/"
WHISPER_HINT = "Please install it using: pip install openai-whisper"
FASTER_WHISPER_HINT = "Install with: pip install 'vidscribe[local]'"


@dataclass(frozen=True)
class Dependency:
    name: str  # executable name looked up on PATH, or a path to it; import name when module=True
    required: bool = True
    hint: str = ""
    module: bool = False


def _is_path_like(name: str) -> bool:
    return os.path.isabs(name) or os.sep in name or (os.altsep is not None and os.altsep in name)


def find_executable(name: str) -> str | None:
    """Return the resolved location of `name`, or None if it is not runnable."""
    if _is_path_like(name):
        path = os.path.expanduser(name)
        if os.path.isfile(path) and os.access(path, os.X_OK):
            return path
        return None
    return shutil.which(name)


def find_module(name: str) -> str | None:
    """Return the import name if `name` can be imported, without importing it."""
    if name in sys.modules:
        return name if sys.modules[name] is not None else None
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    return name if spec is not None else None


def check_dependencies(deps: list[Dependency]) -> dict[str, str]:
    """
    Verify every dependency; raise DependencyMissing for the first required one
    that cannot be found. Returns name -> resolved path for those found.
    """
    found: dict[str, str] = {}
    for dep in deps:
        location = find_module(dep.name) if dep.module else find_executable(dep.name)
        if location is not None:
            logger.debug("Found %s at %s", dep.name, location)
            found[dep.name] = location
            continue
        if dep.required:
            raise DependencyMissing(dep.name, dep.hint)
        logger.warning("Optional dependency '%s' not found. %s", dep.name, dep.hint)
    return found


def pipeline_dependencies(settings: Settings, *, extract_only: bool = False) -> list[Dependency]:
    """External programs required for a run with these settings."""
    deps = [Dependency(settings.vlc_path, required=True, hint=VLC_HINT)]
    if extract_only:
        return deps
    if settings.transcriber == "whisper":
        deps.append(Dependency(settings.whisper_cli_path, required=True, hint=WHISPER_HINT))
    elif settings.transcriber == "faster-whisper":
        deps.append(Dependency("faster_whisper", required=True, hint=FASTER_WHISPER_HINT, module=True))
    return deps

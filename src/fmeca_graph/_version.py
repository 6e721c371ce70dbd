"""Package version: installed distribution metadata, else the repository ``VERSION`` file."""

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

DIST_NAME = "fmeca-graph"
VERSION_FILE = Path(__file__).resolve().parents[2] / "VERSION"


def _read_version() -> str:
    try:
        return version(DIST_NAME)
    except PackageNotFoundError:  # source checkout
        pass
    try:
        return VERSION_FILE.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"


__version__ = _read_version()

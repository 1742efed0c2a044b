"""Installed tokken version."""

from importlib.metadata import PackageNotFoundError, version

DISTRIBUTION = "tokken"
UNKNOWN_VERSION = "0+unknown"


def get_version() -> str:
    """Version recorded in the installed distribution's metadata."""
    try:
        return version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION

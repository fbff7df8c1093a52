"""Single source of truth for the LAMP version."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version

DISTRIBUTION = "lamp-lang"

# Used when running from a checkout that was never installed
FALLBACK_VERSION = "0.1.0"


def get_version() -> str:
    """Installed distribution version, or the checkout fallback."""
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return FALLBACK_VERSION


__version__ = get_version()

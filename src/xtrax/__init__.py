"""xtrax: shared regex, template-variable and JSON data utilities for citation pattern generation."""

import importlib.metadata


def _get_version() -> str:
    """
    Retrieve the package version from metadata.

    Returns:
        The version string, or a development version if not installed.

    """
    try:
        return importlib.metadata.version("xtrax")
    except importlib.metadata.PackageNotFoundError:
        # Not installed, e.g. running from a source checkout
        return "0.0.0-dev"


__version__ = _get_version()

from . import data_processing, pcre_utils, template_engine  # noqa: E402

__all__ = [
    "__version__",
    "data_processing",
    "pcre_utils",
    "template_engine",
]

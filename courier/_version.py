"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Version information for Courier.

A source checkout reads the VERSION file next to the package; an installed
distribution falls back to its package metadata.
"""

from importlib import metadata
from pathlib import Path

def get_version() -> str:
    """
    Resolve the Courier version.

    Returns:
        str: The version string (e.g., "0.1.0"), or "unknown"
    """
    version_file = Path(__file__).parent.parent / "VERSION"
    if version_file.exists():
        return version_file.read_text().strip()
    try:
        return metadata.version("courier")
    except metadata.PackageNotFoundError:
        return "unknown"

__version__ = get_version()

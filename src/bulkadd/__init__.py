"""Bulk-add ingestion: parse restaurant lines, resolve places and neighborhoods, submit once."""

from __future__ import annotations

from importlib import metadata

try:
    __version__ = metadata.version("bulkadd")
except metadata.PackageNotFoundError:
    # Running from a source checkout without an install
    __version__ = "0.0.0+local"

__all__ = ["__version__"]

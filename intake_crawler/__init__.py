"""
IntakeCrawler package initializer.
Defines package version; the CLI lives in :mod:`intake_crawler.cli`.
"""
__version__ = "0.1.0"

# Expose CLI entry point
from intake_crawler.cli import cli  # noqa: E402

__all__ = ["__version__", "cli"]

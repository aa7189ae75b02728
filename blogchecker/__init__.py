"""
BlogChecker - Technical Entry Filter for Blog Feeds
===================================================

Given a site URL, finds the site's feed and returns only the entries that
read as technical writing.

Main Components:
- Ingestion: feed URL resolution, bounded-redirect fetching, parsing, sanitizing
- Processing: techword matching and the filter pipeline
- API: Lambda-style request handler
- Configuration: environment variables with Pydantic validation
"""

__version__ = "1.0.0"
__author__ = "BlogChecker Development Team"
__description__ = "Techword-based filter for blog and slide feeds"

# Core imports for easy access
from .config.settings import get_settings
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import BlogCheckerError

__all__ = [
    "get_settings",
    "configure_application_logging",
    "get_logger_for_component",
    "BlogCheckerError",
]

"""
Request Handler
===============

Lambda-style entry point: ``handler(event, context)``.

Query parameters:

- ``url`` (required): site URL
- ``kind`` (optional): hatenablog, speakerdeck, scrapbox, slideshare or other

Responds with a JSON array of ``{title, url}`` on success, or
``{"error": {type, code, message}}`` with the status mapped from the error.
"""

import json
import threading
from typing import Any, Dict, Optional

from ..config.settings import get_settings
from ..ingestion.wordlist import load_word_list
from ..models import SiteDescriptor, SiteKind
from ..processing.pipeline import FeedFilterPipeline
from ..processing.techwords import TechwordPatternProvider
from ..utils.logging import configure_application_logging, get_logger_for_component
from ..utils.exceptions import BlogCheckerError, ErrorCode, ValidationError, handle_exception
from ..utils.validators import URLValidator


JSON_HEADERS = {"Content-Type": "application/json"}

logger = get_logger_for_component("handler")

_provider: Optional[TechwordPatternProvider] = None
_provider_lock = threading.Lock()
_logging_configured = False


def _load_configured_words():
    settings = get_settings()
    return load_word_list(settings.require_techwords_path())


def get_pattern_provider() -> TechwordPatternProvider:
    """Process-wide techword provider; the word list is read on first use."""
    global _provider
    if _provider is None:
        with _provider_lock:
            if _provider is None:
                _provider = TechwordPatternProvider(_load_configured_words)
    return _provider


def reset_pattern_provider(provider: Optional[TechwordPatternProvider] = None) -> None:
    """Replace the process-wide provider (tests and CLI)."""
    global _provider
    with _provider_lock:
        _provider = provider


def build_pipeline() -> FeedFilterPipeline:
    return FeedFilterPipeline(pattern_provider=get_pattern_provider())


def parse_site(event: Optional[Dict[str, Any]]) -> SiteDescriptor:
    """Build a SiteDescriptor from the event's query string.

    Raises:
        ValidationError: ``url`` missing or unusable, or ``kind`` not a string
    """
    params = (event or {}).get("queryStringParameters") or {}
    if not isinstance(params, dict):
        raise ValidationError("queryStringParameters must be an object", field_name="queryStringParameters")

    url = URLValidator.validate_site_url(params.get("url"))

    kind = params.get("kind")
    if kind is not None and not isinstance(kind, str):
        raise ValidationError(
            "kind must be a string",
            field_name="kind",
            error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
        )

    return SiteDescriptor(kind=SiteKind.coerce(kind), url=url)


def json_response(status_code: int, payload: Any) -> Dict[str, Any]:
    return {
        "statusCode": status_code,
        "headers": dict(JSON_HEADERS),
        "body": json.dumps(payload, ensure_ascii=False),
    }


def error_response(error: BlogCheckerError) -> Dict[str, Any]:
    return json_response(
        error.status_code,
        {
            "error": {
                "type": type(error).__name__,
                "code": error.error_code.value if error.error_code else None,
                "message": error.user_message,
            }
        },
    )


def _ensure_logging() -> None:
    global _logging_configured
    if _logging_configured:
        return
    settings = get_settings()
    configure_application_logging(
        log_level=settings.get_effective_log_level(),
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
    )
    _logging_configured = True


def handler(event: Optional[Dict[str, Any]], context: Any = None) -> Dict[str, Any]:
    """Handle one request.

    Args:
        event: API-gateway style event with ``queryStringParameters``
        context: Runtime context; its ``aws_request_id`` tags log records

    Returns:
        Response dict with ``statusCode``, ``headers`` and JSON ``body``
    """
    log = logger.bind(request_id=getattr(context, "aws_request_id", None))
    site_url = None
    try:
        _ensure_logging()
        site = parse_site(event)
        site_url = site.url
        log.info(f"Checking {site}", extra={"site_url": site_url})

        pipeline = build_pipeline()
        try:
            entries = pipeline.run(site)
        finally:
            pipeline.close()
        return json_response(200, [entry.model_dump() for entry in entries])

    except Exception as e:
        error = handle_exception(e, log, "check_site", {"site_url": site_url})
        return error_response(error)

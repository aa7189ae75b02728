"""
BlogChecker Custom Exceptions
=============================

Exception hierarchy for BlogChecker with error codes, context information,
user-facing messages, and the HTTP status each error maps to at the request
boundary.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Feed fetching and resolution errors (F001-F099)
    FEED_FETCH_TIMEOUT = "F002"
    FEED_PARSE_ERROR = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_NOT_FOUND = "F006"

    # HTTP status classification errors (H001-H099)
    HTTP_PROTOCOL_ERROR = "H001"
    HTTP_CLIENT_ERROR = "H004"
    HTTP_SERVER_ERROR = "H005"
    HTTP_REDIRECT_LIMIT = "H003"

    # Techword errors (W001-W099)
    WORDLIST_UNAVAILABLE = "W001"
    WORDLIST_INVALID = "W002"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"

    # System errors (S001-S099)
    SYSTEM_PERMISSION_DENIED = "S002"
    SYSTEM_MEMORY_ERROR = "S004"
    SYSTEM_UNEXPECTED = "S099"


class BlogCheckerError(Exception):
    """Base exception for all BlogChecker errors."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
    ):
        """Initialize BlogChecker error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


def _split_kwargs(kwargs: Dict[str, Any], *handled: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in handled}


class ConfigurationError(BlogCheckerError):
    """Configuration errors, including sites whose feed cannot be determined."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for BlogCheckerError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )

    @property
    def status_code(self) -> int:
        # F006: the requested site has no discoverable feed
        if self.error_code == ErrorCode.FEED_NOT_FOUND:
            return 404
        return 500


class ValidationError(BlogCheckerError):
    """Request/input validation errors."""

    status_code = 400

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for BlogCheckerError
        """
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.get(
                "user_message", f"Invalid {field_name or 'input'}: {message}"
            ),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class FetchError(BlogCheckerError):
    """Base class for failures while fetching a URL."""

    status_code = 502
    default_code = ErrorCode.FEED_NETWORK_ERROR
    default_user_message = "Feed could not be fetched"

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        http_status: Optional[int] = None,
        **kwargs,
    ):
        """Initialize fetch error.

        Args:
            message: Error message
            url: URL that was being fetched
            http_status: HTTP status code received, if any
            **kwargs: Additional arguments for BlogCheckerError
        """
        context = kwargs.get("context", {})
        if url:
            context["url"] = url
        if http_status is not None:
            context["http_status"] = http_status

        self.url = url
        self.http_status = http_status

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", self.default_code),
            context=context,
            user_message=kwargs.get("user_message", self.default_user_message),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class ProtocolError(FetchError):
    """Unexpected or unsupported HTTP status (1xx, bare 3xx, unknown classes)."""

    default_code = ErrorCode.HTTP_PROTOCOL_ERROR
    default_user_message = "Feed server sent an unexpected response"


class ClientError(FetchError):
    """Feed server answered with a 4xx status."""

    default_code = ErrorCode.HTTP_CLIENT_ERROR
    default_user_message = "Feed server rejected the request"


class ServerError(FetchError):
    """Feed server answered with a 5xx status."""

    default_code = ErrorCode.HTTP_SERVER_ERROR
    default_user_message = "Feed server failed to respond"


class RedirectLimitError(FetchError):
    """Redirect budget exhausted before a final response was reached."""

    default_code = ErrorCode.HTTP_REDIRECT_LIMIT
    default_user_message = "Feed URL redirects too many times"


class NetworkError(FetchError):
    """Transport-level failure: DNS, connection, TLS, or timeout."""

    status_code = 504
    default_code = ErrorCode.FEED_NETWORK_ERROR
    default_user_message = "Feed server could not be reached"


class ParseError(BlogCheckerError):
    """Fetched bytes are not a recognizable RSS/Atom feed."""

    status_code = 502

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize parse error.

        Args:
            message: Error message
            feed_url: Feed URL whose body failed to parse
            **kwargs: Additional arguments for BlogCheckerError
        """
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_PARSE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Feed could not be parsed"),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


class WordListError(BlogCheckerError):
    """Techword list could not be loaded."""

    def __init__(self, message: str, location: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if location:
            context["location"] = location

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.WORDLIST_UNAVAILABLE),
            context=context,
            user_message=kwargs.get("user_message", "Techword list unavailable"),
            **_split_kwargs(kwargs, "context", "error_code", "user_message"),
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> BlogCheckerError:
    """Convert generic exceptions to BlogChecker exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        BlogChecker exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, BlogCheckerError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = NetworkError(
            message=f"Network error during {operation}: {str(exception)}",
            context=context,
        )

    elif isinstance(exception, PermissionError):
        error = BlogCheckerError(
            message=f"Permission denied during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_PERMISSION_DENIED,
            context=context,
            user_message="Access denied",
        )

    elif isinstance(exception, FileNotFoundError):
        error = ConfigurationError(
            message=f"Required file not found during {operation}: {str(exception)}",
            error_code=ErrorCode.CONFIG_MISSING,
            context=context,
            user_message="Configuration file missing",
        )

    elif isinstance(exception, MemoryError):
        error = BlogCheckerError(
            message=f"Memory exhausted during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_MEMORY_ERROR,
            context=context,
            user_message="System resources exhausted",
        )

    else:
        error = BlogCheckerError(
            message=f"Unexpected error during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_UNEXPECTED,
            context=context,
            user_message="An unexpected error occurred",
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error

"""
PodCheck Custom Exceptions
=========================

Custom exception hierarchy for PodCheck with error codes, context
information, and user-friendly error messages.

Feed checks never raise: a missing or malformed tag is a check result, not an
error. The exceptions here cover what happens around the checks - loading
configuration and fetching the feed document.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"
    CONFIG_MISSING = "C002"

    # Feed fetching errors (F001-F099)
    FEED_INVALID_URL = "F001"
    FEED_FETCH_TIMEOUT = "F002"
    FEED_NOT_XML = "F003"
    FEED_NETWORK_ERROR = "F004"
    FEED_SSL_ERROR = "F005"
    FEED_NOT_FOUND = "F006"
    FEED_SERVER_ERROR = "F007"
    FEED_EMPTY_RESPONSE = "F008"
    FEED_NOT_RSS = "F009"
    FEED_TOO_LARGE = "F010"

    # Validation errors (V001-V099)
    VALIDATION_REQUIRED_FIELD = "V001"
    VALIDATION_INVALID_FORMAT = "V002"
    VALIDATION_OUT_OF_RANGE = "V003"

    # System errors (S001-S099)
    SYSTEM_PERMISSION_DENIED = "S002"
    SYSTEM_MEMORY_ERROR = "S004"


class PodCheckError(Exception):
    """Base exception for all PodCheck errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize PodCheck error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


class ConfigurationError(PodCheckError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        """Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that caused the error
            **kwargs: Additional arguments for PodCheckError
        """
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message"]
            },
        )


class FeedError(PodCheckError):
    """Feed retrieval and parsing errors."""

    def __init__(self, message: str, feed_url: Optional[str] = None, **kwargs):
        """Initialize feed error.

        Args:
            message: Error message
            feed_url: Feed URL that caused the error
            **kwargs: Additional arguments for PodCheckError
        """
        context = kwargs.get("context", {})
        if feed_url:
            context["feed_url"] = feed_url

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.FEED_NETWORK_ERROR),
            context=context,
            user_message=kwargs.get("user_message", message),
            recoverable=kwargs.get("recoverable", True),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message", "recoverable"]
            },
        )


class FeedFetchError(FeedError):
    """A feed could not be turned into a FeedDocument.

    ``error_type`` groups the error codes into the three outcomes a caller
    shows to the user: ``invalid_url``, ``unreachable`` and ``not_podcast``.
    """

    INVALID_URL = "invalid_url"
    UNREACHABLE = "unreachable"
    NOT_PODCAST = "not_podcast"

    def __init__(
        self,
        message: str,
        feed_url: Optional[str] = None,
        error_type: str = UNREACHABLE,
        **kwargs,
    ):
        super().__init__(message, feed_url=feed_url, **kwargs)
        self.error_type = error_type
        self.status_code: Optional[int] = self.context.get("status_code")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["fetch_error_type"] = self.error_type
        return data

    @classmethod
    def invalid_url(cls, url: str) -> "FeedFetchError":
        return cls(
            f'The URL "{url}" is not a valid feed URL.',
            feed_url=url,
            error_type=cls.INVALID_URL,
            error_code=ErrorCode.FEED_INVALID_URL,
            recoverable=False,
        )

    @classmethod
    def timeout(cls, url: str) -> "FeedFetchError":
        return cls(
            f'The feed at "{url}" took too long to respond. Please try again later.',
            feed_url=url,
            error_code=ErrorCode.FEED_FETCH_TIMEOUT,
        )

    @classmethod
    def not_found(cls, url: str) -> "FeedFetchError":
        return cls(
            f'No feed was found at "{url}". Please check the URL and try again.',
            feed_url=url,
            error_code=ErrorCode.FEED_NOT_FOUND,
            recoverable=False,
        )

    @classmethod
    def server_error(cls, url: str, status: int) -> "FeedFetchError":
        return cls(
            f'The server at "{url}" returned an error (HTTP {status}). '
            "Please try again later.",
            feed_url=url,
            error_code=ErrorCode.FEED_SERVER_ERROR,
            context={"status_code": status},
        )

    @classmethod
    def connection_failed(cls, url: str) -> "FeedFetchError":
        return cls(
            f'Could not connect to "{url}". The server may be down or the URL '
            "may be incorrect.",
            feed_url=url,
            error_code=ErrorCode.FEED_NETWORK_ERROR,
        )

    @classmethod
    def ssl_error(cls, url: str) -> "FeedFetchError":
        return cls(
            f'SSL certificate error when connecting to "{url}". The server\'s '
            "certificate may be invalid.",
            feed_url=url,
            error_code=ErrorCode.FEED_SSL_ERROR,
        )

    @classmethod
    def empty_response(cls, url: str) -> "FeedFetchError":
        return cls(
            f'The feed at "{url}" returned an empty response.',
            feed_url=url,
            error_code=ErrorCode.FEED_EMPTY_RESPONSE,
        )

    @classmethod
    def too_large(cls, url: str, limit: int) -> "FeedFetchError":
        return cls(
            f'The feed at "{url}" is larger than {limit} bytes.',
            feed_url=url,
            error_code=ErrorCode.FEED_TOO_LARGE,
            context={"max_bytes": limit},
            recoverable=False,
        )

    @classmethod
    def not_xml(cls, url: Optional[str] = None) -> "FeedFetchError":
        where = f'from "{url}"' if url else "received"
        return cls(
            f"The response {where} is not valid XML. Please make sure this is "
            "an RSS feed URL.",
            feed_url=url,
            error_type=cls.NOT_PODCAST,
            error_code=ErrorCode.FEED_NOT_XML,
            recoverable=False,
        )

    @classmethod
    def not_rss(cls, url: Optional[str] = None) -> "FeedFetchError":
        where = f'at "{url}"' if url else "received"
        return cls(
            f"The XML {where} does not appear to be a valid RSS or Atom feed.",
            feed_url=url,
            error_type=cls.NOT_PODCAST,
            error_code=ErrorCode.FEED_NOT_RSS,
            recoverable=False,
        )


class ValidationError(PodCheckError):
    """Caller input validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for PodCheckError
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
            recoverable=kwargs.get("recoverable", False),
            **{
                k: v
                for k, v in kwargs.items()
                if k not in ["context", "error_code", "user_message", "recoverable"]
            },
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> PodCheckError:
    """Convert generic exceptions to PodCheck exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        PodCheck exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, PodCheckError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, (ConnectionError, TimeoutError)):
        error = PodCheckError(
            message=f"Network error during {operation}: {str(exception)}",
            error_code=ErrorCode.FEED_NETWORK_ERROR,
            context=context,
            user_message="Network connection failed",
            recoverable=True,
        )

    elif isinstance(exception, PermissionError):
        error = PodCheckError(
            message=f"Permission denied during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_PERMISSION_DENIED,
            context=context,
            user_message="Access denied",
            recoverable=False,
        )

    elif isinstance(exception, FileNotFoundError):
        error = ConfigurationError(
            message=f"Required file not found during {operation}: {str(exception)}",
            error_code=ErrorCode.CONFIG_MISSING,
            context=context,
            user_message="Required file missing",
        )

    elif isinstance(exception, MemoryError):
        error = PodCheckError(
            message=f"Memory exhausted during {operation}: {str(exception)}",
            error_code=ErrorCode.SYSTEM_MEMORY_ERROR,
            context=context,
            user_message="System resources exhausted",
            recoverable=True,
        )

    else:
        error = PodCheckError(
            message=f"Unexpected error during {operation}: {str(exception)}",
            context=context,
            user_message="Something went wrong while analyzing the feed. Please try again.",
            recoverable=True,
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error


def is_retryable_error(exception: PodCheckError) -> bool:
    """Check if an error is worth retrying by the user.

    Args:
        exception: PodCheck exception to check

    Returns:
        True if the error is potentially retryable
    """
    if not exception.recoverable:
        return False

    retryable_codes = {
        ErrorCode.FEED_NETWORK_ERROR,
        ErrorCode.FEED_FETCH_TIMEOUT,
        ErrorCode.FEED_SERVER_ERROR,
        ErrorCode.FEED_EMPTY_RESPONSE,
    }

    return exception.error_code in retryable_codes


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception.

    Args:
        exception: Exception to get message for

    Returns:
        User-friendly error message
    """
    if isinstance(exception, PodCheckError):
        return exception.user_message

    return "An unexpected error occurred. Please try again later."

"""
PodCheck Input Validators
========================

URL and e-mail validation shared by the feed fetcher (caller input) and the
feed checks (values found inside the feed).
"""

import re
from urllib.parse import urlparse, urlunparse
from typing import Optional

from .exceptions import ValidationError, ErrorCode


class URLValidator:
    """URL validation and normalization utilities."""

    ALLOWED_SCHEMES = {"http", "https"}

    MAX_URL_LENGTH = 2048

    # Hostname labels: letters, digits and inner hyphens, optional port
    _HOST_PATTERN = re.compile(
        r"^(?:\[[0-9a-fA-F:.]+\]|[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
        r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*)(?::\d{1,5})?$"
    )

    @classmethod
    def is_http_url(cls, url: Optional[str]) -> bool:
        """Check whether ``url`` is a well-formed absolute http(s) URL."""
        if not url or not isinstance(url, str):
            return False

        if any(ch.isspace() for ch in url) or len(url) > cls.MAX_URL_LENGTH:
            return False

        try:
            parsed = urlparse(url)
        except ValueError:
            return False

        if parsed.scheme.lower() not in cls.ALLOWED_SCHEMES:
            return False

        host = parsed.netloc.rsplit("@", 1)[-1]
        if not host or not cls._HOST_PATTERN.match(host):
            return False

        return True

    @classmethod
    def validate_feed_url(cls, url: str) -> str:
        """Validate and normalize a feed URL supplied by the caller.

        Args:
            url: URL to validate

        Returns:
            Normalized URL (lower-cased scheme and host, fragment removed)

        Raises:
            ValidationError: If URL is invalid
        """
        if not url or not isinstance(url, str):
            raise ValidationError(
                "URL is required and must be a string",
                error_code=ErrorCode.VALIDATION_REQUIRED_FIELD,
                field_name="url",
            )

        url = url.strip()

        if len(url) > cls.MAX_URL_LENGTH:
            raise ValidationError(
                f"URL cannot exceed {cls.MAX_URL_LENGTH} characters",
                error_code=ErrorCode.VALIDATION_OUT_OF_RANGE,
                field_name="url",
            )

        if not cls.is_http_url(url):
            raise ValidationError(
                f"URL must be an absolute {' or '.join(sorted(cls.ALLOWED_SCHEMES))} URL",
                error_code=ErrorCode.VALIDATION_INVALID_FORMAT,
                field_name="url",
            )

        parsed = urlparse(url)
        return urlunparse(
            parsed._replace(
                scheme=parsed.scheme.lower(),
                netloc=parsed.netloc.lower(),
                path=parsed.path or "/",
                fragment="",
            )
        )


class EmailValidator:
    """E-mail address format validation."""

    MAX_LENGTH = 254

    _LOCAL_PART = r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    _DOMAIN = r"(?:[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?\.)+[A-Za-z]{2,63}"
    _EMAIL_PATTERN = re.compile(rf"^{_LOCAL_PART}@{_DOMAIN}$")

    @classmethod
    def is_valid(cls, email: Optional[str]) -> bool:
        """Check whether ``email`` looks like a deliverable address."""
        if not email or not isinstance(email, str):
            return False

        if len(email) > cls.MAX_LENGTH:
            return False

        local_part = email.split("@", 1)[0]
        if len(local_part) > 64:
            return False

        return bool(cls._EMAIL_PATTERN.match(email))

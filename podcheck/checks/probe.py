"""
HTTP Probe
==========

Blocking network probes used by the artwork and enclosure checks.

Every probe is a single attempt with a bounded timeout. Transport failures
never escape: they come back as an unsuccessful ``ProbeResponse`` (or None for
image dimensions) so the calling check can degrade to a warning.
"""

import io
from dataclasses import dataclass
from typing import Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from PIL import Image

from ..utils.logging import get_logger_for_component

DEFAULT_USER_AGENT = "PodCheck/1.0 (Podcast Feed Health Checker)"

# Enough for the header of any JPEG/PNG, including large EXIF blocks
IMAGE_HEADER_BYTES = 512 * 1024


@dataclass
class ProbeResponse:
    """Outcome of a HEAD probe."""
    ok: bool
    status_code: Optional[int] = None
    content_type: Optional[str] = None
    error: Optional[str] = None


class HttpProbe:
    """HEAD and image-header probes over one ``requests`` session."""

    def __init__(self, timeout: float = 5.0, user_agent: str = DEFAULT_USER_AGENT):
        """Initialize probe.

        Args:
            timeout: Seconds allowed for each probe
            user_agent: User-Agent header sent with every probe
        """
        self.timeout = timeout
        self.logger = get_logger_for_component("probe")

        self.session = requests.Session()
        # Single attempt per probe, the user can re-run the check
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)
        self.session.headers.update({"User-Agent": user_agent})

    def head(self, url: str) -> ProbeResponse:
        """Send one HEAD request, following redirects.

        Args:
            url: URL to probe

        Returns:
            ProbeResponse; ``ok`` is True only for a 2xx final response
        """
        try:
            response = self.session.head(url, timeout=self.timeout, allow_redirects=True)
        except requests.RequestException as e:
            self.logger.debug(f"HEAD {url} failed: {type(e).__name__}")
            return ProbeResponse(ok=False, error=type(e).__name__)

        content_type = response.headers.get("Content-Type")
        if content_type:
            content_type = content_type.split(";", 1)[0].strip().lower() or None

        return ProbeResponse(
            ok=200 <= response.status_code < 300,
            status_code=response.status_code,
            content_type=content_type,
        )

    def image_size(self, url: str) -> Optional[Tuple[int, int]]:
        """Read the pixel dimensions of a remote image.

        Only the first ``IMAGE_HEADER_BYTES`` are downloaded; Pillow reads the
        size from the image header without decoding pixel data.

        Returns:
            (width, height), or None when the image cannot be fetched or read
        """
        try:
            with self.session.get(url, timeout=self.timeout, stream=True) as response:
                if not 200 <= response.status_code < 300:
                    self.logger.debug(f"Image GET {url} returned {response.status_code}")
                    return None

                buffer = io.BytesIO()
                for chunk in response.iter_content(chunk_size=64 * 1024):
                    buffer.write(chunk)
                    if buffer.tell() >= IMAGE_HEADER_BYTES:
                        break
        except requests.RequestException as e:
            self.logger.debug(f"Image GET {url} failed: {type(e).__name__}")
            return None

        buffer.seek(0)
        try:
            with Image.open(buffer) as image:
                width, height = image.size
        except (OSError, ValueError, Image.DecompressionBombError) as e:
            self.logger.debug(f"Could not read image header from {url}: {type(e).__name__}")
            return None

        if width <= 0 or height <= 0:
            return None
        return width, height

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpProbe":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

"""
Podcast Feed Fetcher
===================

Downloads a feed over HTTP(S) and turns it into a FeedDocument, classifying
every failure into a FeedFetchError the caller can show to the user.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import Optional

import aiohttp
import certifi

from ..config.settings import PodCheckSettings, get_settings
from ..feed.document import FeedDocument
from ..utils.exceptions import FeedFetchError, ValidationError
from ..utils.logging import get_fetch_logger, get_logger_for_component
from ..utils.validators import URLValidator

CHUNK_SIZE = 64 * 1024


class FeedFetcher:
    """Single-feed async fetcher with error classification."""

    def __init__(self, settings: Optional[PodCheckSettings] = None):
        """Initialize feed fetcher.

        Args:
            settings: Application settings (default: global settings)
        """
        self.settings = settings or get_settings()
        self.fetch_settings = self.settings.fetch
        self.logger = get_logger_for_component("fetcher")

        # SSL context for secure requests
        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        """Get configured aiohttp session."""
        connector = aiohttp.TCPConnector(ssl=self.ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.fetch_settings.timeout_seconds)
        headers = {
            "User-Agent": self.fetch_settings.user_agent,
            "Accept": self.fetch_settings.accept,
        }

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout, headers=headers
        ) as session:
            yield session

    async def fetch(self, url: str) -> FeedDocument:
        """Fetch and parse the feed at ``url``.

        Args:
            url: Feed URL supplied by the user

        Returns:
            Parsed FeedDocument

        Raises:
            FeedFetchError: For invalid URLs, transport failures, HTTP errors,
                empty or oversized bodies, and bodies that are not RSS/Atom XML
        """
        try:
            feed_url = URLValidator.validate_feed_url(url)
        except ValidationError as e:
            raise FeedFetchError.invalid_url(url) from e

        logger = get_fetch_logger(feed_url)
        logger.debug(f"Fetching feed: {feed_url}")

        try:
            async with self.get_session() as session:
                body = await self._fetch_body(session, feed_url)
        except FeedFetchError as e:
            logger.warning(f"Feed fetch failed: {e}")
            raise

        try:
            document = FeedDocument.from_bytes(body, url=feed_url)
        except FeedFetchError as e:
            logger.warning(f"Feed rejected: {e}")
            raise

        logger.info(f"Fetched {document.format_label} feed ({len(body)} bytes)")
        return document

    async def _fetch_body(self, session: aiohttp.ClientSession, feed_url: str) -> bytes:
        max_bytes = self.fetch_settings.max_feed_bytes
        try:
            async with session.get(
                feed_url, max_redirects=self.fetch_settings.max_redirects
            ) as response:
                if response.status == 404:
                    raise FeedFetchError.not_found(feed_url)
                if response.status >= 400:
                    raise FeedFetchError.server_error(feed_url, response.status)

                if response.content_length is not None and response.content_length > max_bytes:
                    raise FeedFetchError.too_large(feed_url, max_bytes)

                chunks = []
                received = 0
                async for chunk in response.content.iter_chunked(CHUNK_SIZE):
                    received += len(chunk)
                    if received > max_bytes:
                        raise FeedFetchError.too_large(feed_url, max_bytes)
                    chunks.append(chunk)

        except asyncio.TimeoutError as e:
            raise FeedFetchError.timeout(feed_url) from e
        except aiohttp.ClientSSLError as e:
            raise FeedFetchError.ssl_error(feed_url) from e
        except aiohttp.ClientError as e:
            # Includes TooManyRedirects, refused connections and DNS failures
            self.logger.debug(f"Transport error: {type(e).__name__}: {e}", extra={"feed_url": feed_url})
            raise FeedFetchError.connection_failed(feed_url) from e

        body = b"".join(chunks)
        if not body.strip():
            raise FeedFetchError.empty_response(feed_url)
        return body

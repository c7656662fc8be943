"""
Feed Fetcher Tests
=================

Tests for downloading feeds and classifying fetch failures. HTTP traffic is
mocked with aioresponses.
"""

import asyncio
from unittest.mock import Mock

import aiohttp
import pytest
from aioresponses import aioresponses

from podcheck.config.settings import FetchSettings, PodCheckSettings
from podcheck.processing.feed_fetcher import FeedFetcher
from podcheck.utils.exceptions import ErrorCode, FeedFetchError

from conftest import rss_xml

FEED_URL = "https://podcast.example.com/feed.xml"


@pytest.fixture
def fetcher(test_settings):
    return FeedFetcher(test_settings)


@pytest.fixture
def mock_http():
    with aioresponses() as mocked:
        yield mocked


class TestFetchSuccess:
    """Test successful downloads."""

    async def test_fetch_rss(self, fetcher, mock_http):
        mock_http.get(FEED_URL, status=200, body=rss_xml("<title>Remote Show</title>"))

        document = await fetcher.fetch(FEED_URL)

        assert document.title == "Remote Show"
        assert document.url == FEED_URL
        assert document.is_rss

    async def test_url_is_normalized(self, fetcher, mock_http):
        mock_http.get("https://podcast.example.com/", status=200, body=rss_xml("<title>Root</title>"))

        document = await fetcher.fetch("  HTTPS://Podcast.Example.com#latest ")

        assert document.url == "https://podcast.example.com/"

    async def test_fetch_atom(self, fetcher, mock_http):
        mock_http.get(
            FEED_URL,
            status=200,
            body='<feed xmlns="http://www.w3.org/2005/Atom"><title>Atom Show</title></feed>',
        )

        document = await fetcher.fetch(FEED_URL)

        assert document.is_atom
        assert document.title == "Atom Show"


class TestFetchErrors:
    """Test failure classification."""

    async def test_invalid_url(self, fetcher):
        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch("not a url")

        assert exc_info.value.error_type == FeedFetchError.INVALID_URL
        assert exc_info.value.error_code == ErrorCode.FEED_INVALID_URL

    async def test_not_found(self, fetcher, mock_http):
        mock_http.get(FEED_URL, status=404)

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_type == FeedFetchError.UNREACHABLE
        assert exc_info.value.error_code == ErrorCode.FEED_NOT_FOUND

    @pytest.mark.parametrize("status", [403, 500, 503])
    async def test_http_errors(self, fetcher, mock_http, status):
        mock_http.get(FEED_URL, status=status)

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_SERVER_ERROR
        assert exc_info.value.status_code == status

    async def test_timeout(self, fetcher, mock_http):
        mock_http.get(FEED_URL, exception=asyncio.TimeoutError())

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_FETCH_TIMEOUT
        assert exc_info.value.error_type == FeedFetchError.UNREACHABLE

    async def test_ssl_error(self, fetcher, mock_http):
        mock_http.get(FEED_URL, exception=aiohttp.ClientSSLError(Mock(), OSError(1, "certificate verify failed")))

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_SSL_ERROR

    async def test_connection_error(self, fetcher, mock_http):
        mock_http.get(FEED_URL, exception=aiohttp.ClientConnectionError("refused"))

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_NETWORK_ERROR

    async def test_empty_response(self, fetcher, mock_http):
        mock_http.get(FEED_URL, status=200, body="  \n ")

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_EMPTY_RESPONSE

    async def test_not_xml(self, fetcher, mock_http):
        mock_http.get(FEED_URL, status=200, body="this is plain text, not a feed")

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_type == FeedFetchError.NOT_PODCAST
        assert exc_info.value.error_code == ErrorCode.FEED_NOT_XML

    async def test_html_page_is_not_a_feed(self, fetcher, mock_http):
        mock_http.get(FEED_URL, status=200, body="<html><body><p>Welcome</p></body></html>")

        with pytest.raises(FeedFetchError) as exc_info:
            await fetcher.fetch(FEED_URL)

        assert exc_info.value.error_type == FeedFetchError.NOT_PODCAST
        assert exc_info.value.error_code == ErrorCode.FEED_NOT_RSS

    async def test_oversized_body(self, mock_http):
        settings = PodCheckSettings(fetch=FetchSettings(max_feed_bytes=1024))
        mock_http.get(FEED_URL, status=200, body=rss_xml("<title>" + "x" * 4096 + "</title>"))

        with pytest.raises(FeedFetchError) as exc_info:
            await FeedFetcher(settings).fetch(FEED_URL)

        assert exc_info.value.error_code == ErrorCode.FEED_TOO_LARGE
        assert exc_info.value.context["max_bytes"] == 1024

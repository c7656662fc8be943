"""
Feed Document
=============

Read-only view over a parsed podcast feed (RSS 2.0 or Atom).

The document keeps the namespace prefixes declared in the source so the
``itunes:`` elements can be resolved by their declared URI, falling back to
the Apple DTD URI when a feed uses the elements without declaring them
properly. Every lookup goes through ``FeedNode`` so checks never touch
ElementTree qualified names directly.
"""

import io
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, List, Optional

from ..utils.exceptions import FeedFetchError

ITUNES_NS = "http://www.itunes.com/dtds/podcast-1.0.dtd"
ATOM_NS = "http://www.w3.org/2005/Atom"

KIND_RSS = "rss"
KIND_ATOM = "atom"


def _split_tag(tag: str):
    """Split an ElementTree tag into (namespace, local name)."""
    if tag.startswith("{"):
        namespace, _, local = tag[1:].partition("}")
        return namespace, local
    return "", tag


class FeedNode:
    """One element of a feed document."""

    __slots__ = ("element", "document")

    def __init__(self, element: ET.Element, document: "FeedDocument"):
        self.element = element
        self.document = document

    def __repr__(self) -> str:
        return f"FeedNode(<{self.name}>)"

    @property
    def name(self) -> str:
        """Local tag name without namespace."""
        return _split_tag(self.element.tag)[1]

    @property
    def namespace(self) -> str:
        return _split_tag(self.element.tag)[0]

    def _qualify(self, tag: str) -> str:
        # Unprefixed lookups resolve in the element's own namespace, which is
        # how Atom's default namespace reaches <entry>/<title>.
        if self.namespace:
            return f"{{{self.namespace}}}{tag}"
        return tag

    def _wrap(self, element: Optional[ET.Element]) -> Optional["FeedNode"]:
        return FeedNode(element, self.document) if element is not None else None

    # Plain children

    def child(self, tag: str) -> Optional["FeedNode"]:
        return self._wrap(self.element.find(self._qualify(tag)))

    def children(self, tag: str) -> List["FeedNode"]:
        return [FeedNode(e, self.document) for e in self.element.findall(self._qualify(tag))]

    def iter_children(self, tag: str) -> Iterator["FeedNode"]:
        for element in self.element.iterfind(self._qualify(tag)):
            yield FeedNode(element, self.document)

    def has(self, tag: str) -> bool:
        return self.element.find(self._qualify(tag)) is not None

    def raw_text(self, tag: str) -> Optional[str]:
        """Untrimmed text of a child element, None when the child is absent."""
        node = self.child(tag)
        return node.value if node is not None else None

    def text(self, tag: str) -> Optional[str]:
        """Trimmed text of a child element, None when absent or blank."""
        return _clean(self.raw_text(tag))

    # itunes: children

    def itunes(self, tag: str) -> Optional["FeedNode"]:
        return self._wrap(self.element.find(f"{{{self.document.itunes_ns}}}{tag}"))

    def itunes_children(self, tag: str) -> List["FeedNode"]:
        return [
            FeedNode(e, self.document)
            for e in self.element.findall(f"{{{self.document.itunes_ns}}}{tag}")
        ]

    def has_itunes(self, tag: str) -> bool:
        return self.itunes(tag) is not None

    def itunes_raw_text(self, tag: str) -> Optional[str]:
        node = self.itunes(tag)
        return node.value if node is not None else None

    def itunes_text(self, tag: str) -> Optional[str]:
        return _clean(self.itunes_raw_text(tag))

    # This element's own content

    @property
    def value(self) -> str:
        """Direct text content of this element."""
        return self.element.text or ""

    def attr(self, name: str) -> Optional[str]:
        """Trimmed attribute value, None when absent or blank."""
        return _clean(self.element.get(name))

    def description_text(self) -> Optional[str]:
        """``<description>``, else ``<itunes:summary>``.

        Atom elements also fall back to ``<summary>`` and ``<subtitle>``.
        """
        text = self.text("description") or self.itunes_text("summary")
        if text is None and self.document.is_atom:
            text = self.text("summary") or self.text("subtitle")
        return text

    def link(self, rel: str = "alternate") -> Optional["FeedNode"]:
        """First Atom ``<link>`` child with the given ``rel``.

        A link without ``rel`` counts as ``alternate``, as in RFC 4287.
        """
        for node in self.iter_children("link"):
            if (node.attr("rel") or "alternate") == rel:
                return node
        return None


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class FeedDocument:
    """Parsed RSS or Atom feed.

    Build one with ``from_bytes`` / ``from_string``; the document is not
    modified after construction.
    """

    def __init__(
        self,
        root: ET.Element,
        namespaces: Optional[Dict[str, str]] = None,
        url: Optional[str] = None,
    ):
        local = _split_tag(root.tag)[1]
        if local == "rss":
            self.kind = KIND_RSS
        elif local == "feed":
            self.kind = KIND_ATOM
        else:
            raise FeedFetchError.not_rss(url)

        self.namespaces: Dict[str, str] = dict(namespaces or {})
        self.url = url
        self.itunes_ns = self.namespaces.get("itunes", ITUNES_NS)
        self.root = FeedNode(root, self)

    @classmethod
    def from_bytes(cls, content: bytes, url: Optional[str] = None) -> "FeedDocument":
        """Parse raw feed bytes.

        Raises:
            FeedFetchError: ``not_xml`` for unparseable input, ``not_rss`` when
                the root element is neither ``<rss>`` nor ``<feed>``.
        """
        if not content or not content.strip():
            raise FeedFetchError.not_xml(url)

        namespaces: Dict[str, str] = {}
        root = None
        try:
            for event, item in ET.iterparse(io.BytesIO(content), events=("start-ns", "start")):
                if event == "start-ns":
                    prefix, uri = item
                    # First declaration wins, matching the root-level declarations
                    namespaces.setdefault(prefix, uri)
                elif root is None:
                    root = item
        except ET.ParseError as e:
            raise FeedFetchError.not_xml(url) from e

        if root is None:
            raise FeedFetchError.not_xml(url)

        return cls(root, namespaces, url=url)

    @classmethod
    def from_string(cls, text: str, url: Optional[str] = None) -> "FeedDocument":
        return cls.from_bytes(text.encode("utf-8"), url=url)

    @property
    def is_rss(self) -> bool:
        return self.kind == KIND_RSS

    @property
    def is_atom(self) -> bool:
        return self.kind == KIND_ATOM

    @property
    def format_label(self) -> str:
        return "RSS 2.0" if self.is_rss else "Atom"

    @property
    def channel(self) -> Optional[FeedNode]:
        """Feed-wide element: ``<rss><channel>`` or the Atom ``<feed>`` root."""
        if self.is_rss:
            return self.root.child("channel")
        return self.root

    def episodes(self, limit: Optional[int] = None) -> Iterator[FeedNode]:
        """Episode nodes (``<item>`` or ``<entry>``) in document order."""
        channel = self.channel
        if channel is None:
            return

        tag = "item" if self.is_rss else "entry"
        for index, node in enumerate(channel.iter_children(tag)):
            if limit is not None and index >= limit:
                return
            yield node

    def count_episodes(self) -> int:
        """Total number of episodes, uncapped."""
        return sum(1 for _ in self.episodes())

    @property
    def title(self) -> Optional[str]:
        channel = self.channel
        return channel.text("title") if channel is not None else None

    @property
    def artwork_url(self) -> Optional[str]:
        channel = self.channel
        if channel is None:
            return None
        image = channel.itunes("image")
        return image.attr("href") if image is not None else None

"""Content extraction: markup to title, body text, links and a meta-tag map."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

_WHITESPACE = re.compile(r"\s+")


@dataclass
class ExtractedContent:
    """Normalized content of one page."""

    title: str = "Untitled"
    text: str = ""
    media_links: list[str] = field(default_factory=list)
    outgoing_links: list[str] = field(default_factory=list)
    metadata: dict[str, str] = field(default_factory=dict)


def resolve_url(base_url: str, url: str) -> str:
    """Resolve ``url`` against ``base_url``; absolute URLs pass through.

    Unresolvable input is returned unchanged.
    """
    try:
        if urlparse(url).scheme:
            return url
        return urljoin(base_url, url)
    except ValueError:
        return url


def normalize_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


class ContentExtractor:
    """Turns raw markup into an ``ExtractedContent``."""

    def __init__(self, parser: str = "html.parser") -> None:
        self._parser = parser

    def extract(self, html: str, url: str) -> ExtractedContent:
        soup = BeautifulSoup(html or "", self._parser)
        return ExtractedContent(
            title=self._title(soup),
            text=self._body_text(soup),
            media_links=self._links(soup, "img", "src", url),
            outgoing_links=self._links(soup, "a", "href", url),
            metadata=self._meta_map(soup),
        )

    @staticmethod
    def _title(soup: BeautifulSoup) -> str:
        if soup.title and soup.title.string:
            title = soup.title.string.strip()
            if title:
                return title
        return "Untitled"

    @staticmethod
    def _body_text(soup: BeautifulSoup) -> str:
        body = soup.body
        if body is None:
            return ""
        for tag in body(["script", "style"]):
            tag.decompose()
        return normalize_whitespace(body.get_text(" "))

    @staticmethod
    def _links(soup: BeautifulSoup, tag_name: str, attr: str, base_url: str) -> list[str]:
        links: list[str] = []
        for tag in soup.find_all(tag_name):
            value = tag.get(attr)
            if value:
                links.append(resolve_url(base_url, value))
        return links

    @staticmethod
    def _meta_map(soup: BeautifulSoup) -> dict[str, str]:
        metadata: dict[str, str] = {}
        for meta in soup.find_all("meta"):
            name = meta.get("name") or meta.get("property")
            content = meta.get("content")
            if name and content:
                metadata[name] = content
        return metadata

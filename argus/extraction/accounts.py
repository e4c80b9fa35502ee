"""Platform account extraction.

Each platform strategy is a plain function ``(soup, html, url) -> AccountData | None``
selected by the page's host. A strategy returns None when the field that
identifies an account on its platform is missing. When no platform matches, or
the platform strategy finds nothing, the generic meta-tag extractor runs.
"""

from __future__ import annotations

import logging
import re
from typing import Callable
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from argus.pipeline.models import AccountData
from argus.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)

PlatformStrategy = Callable[[BeautifulSoup, str, str], "AccountData | None"]

_EMAIL = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_FACEBOOK_USER = re.compile(r"facebook\.com/([^/?#]+)")
_TWITTER_USER = re.compile(r"(?:twitter|x)\.com/([^/?#]+)")
_TWITTER_FOLLOWERS = re.compile(r"(\d+(?:,\d+)*)\s*Followers")
_INSTAGRAM_USER = re.compile(r"instagram\.com/([^/?#]+)")
_INSTAGRAM_FOLLOWERS = re.compile(r'"follower":\s*(\d+)')
_LINKEDIN_LOCATION = re.compile(
    r"<span[^>]*>([^<]*(?:Germany|Deutschland|Austria|Switzerland)[^<]*)</span>"
)
_GITHUB_USER = re.compile(r"github\.com/([^/?#]+)")
_REDDIT_USER = re.compile(r"reddit\.com/(?:user|u)/([^/?#]+)")
_REDDIT_KARMA = re.compile(r"(\d+(?:,\d+)*)\s*(?:post|comment)?\s*karma", re.IGNORECASE)
_TIKTOK_USER = re.compile(r"tiktok\.com/@([^/?#]+)")


# --- Shared primitives ---


def select_text(soup: BeautifulSoup, selector: str) -> str | None:
    """Stripped text of the first element matching ``selector``."""
    node = soup.select_one(selector)
    if node is None:
        return None
    text = node.get_text(strip=True)
    return text or None


def meta_content(soup: BeautifulSoup, prop: str) -> str | None:
    """Content of ``<meta property=prop>``."""
    node = soup.find("meta", attrs={"property": prop})
    if node is None:
        return None
    return node.get("content") or None


def _parse_count(value: str | None) -> int | None:
    if not value:
        return None
    try:
        return int(value.replace(",", ""))
    except ValueError:
        return None


def _search_group(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


def _open_graph(soup: BeautifulSoup, url: str, username: str | None) -> AccountData:
    return AccountData(
        username=username,
        profile_url=url,
        display_name=meta_content(soup, "og:title"),
        bio=meta_content(soup, "og:description"),
        avatar_url=meta_content(soup, "og:image"),
    )


# --- Platform strategies ---


def extract_facebook(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    account = _open_graph(soup, url, _search_group(_FACEBOOK_USER, url))
    if account.username or account.display_name:
        return account
    return None


def extract_twitter(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    name = _search_group(_TWITTER_USER, url)
    if not name:
        return None
    account = _open_graph(soup, url, f"@{name}")
    account.follower_count = _parse_count(_search_group(_TWITTER_FOLLOWERS, html))
    return account


def extract_instagram(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    name = _search_group(_INSTAGRAM_USER, url)
    if not name:
        return None
    account = _open_graph(soup, url, f"@{name}")
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        count = _parse_count(_search_group(_INSTAGRAM_FOLLOWERS, script.get_text()))
        if count is not None:
            account.follower_count = count
            break
    return account


def extract_linkedin(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    account = _open_graph(soup, url, None)
    if not account.display_name:
        return None
    location = _search_group(_LINKEDIN_LOCATION, html)
    if location:
        account.location = location.strip()
    return account


def extract_github(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    name = _search_group(_GITHUB_USER, url)
    if not name:
        return None
    account = _open_graph(soup, url, name)
    account.follower_count = _parse_count(select_text(soup, 'a[href*="followers"] span'))
    return account


def extract_reddit(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    name = _search_group(_REDDIT_USER, url)
    if not name:
        return None
    account = AccountData(
        username=f"u/{name}",
        profile_url=url,
        display_name=meta_content(soup, "og:title"),
        bio=meta_content(soup, "og:description"),
    )
    karma = _search_group(_REDDIT_KARMA, html)
    if karma:
        account.custom_fields["karma"] = karma.replace(",", "")
    return account


def extract_tiktok(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    name = _search_group(_TIKTOK_USER, url)
    if not name:
        return None
    return _open_graph(soup, url, f"@{name}")


def extract_generic(soup: BeautifulSoup, html: str, url: str) -> AccountData | None:
    """Meta-tag fallback for pages on no known platform."""
    account = AccountData(profile_url=url)
    found = False

    email = _EMAIL.search(html)
    if email:
        account.email = email.group(0)
        found = True

    for meta in soup.find_all("meta"):
        key = (meta.get("name") or meta.get("property") or "").lower()
        content = meta.get("content")
        if not key or not content:
            continue
        if "author" in key or "creator" in key:
            account.display_name = content
            found = True
        elif "description" in key:
            account.bio = content
            found = True

    og_title = meta_content(soup, "og:title")
    if og_title:
        account.display_name = og_title
        found = True
    og_description = meta_content(soup, "og:description")
    if og_description and not account.bio:
        account.bio = og_description
        found = True
    og_image = meta_content(soup, "og:image")
    if og_image:
        account.avatar_url = og_image
        found = True

    return account if found else None


PLATFORM_STRATEGIES: list[tuple[str, PlatformStrategy]] = [
    ("facebook.com", extract_facebook),
    ("twitter.com", extract_twitter),
    ("x.com", extract_twitter),
    ("instagram.com", extract_instagram),
    ("linkedin.com", extract_linkedin),
    ("github.com", extract_github),
    ("reddit.com", extract_reddit),
    ("tiktok.com", extract_tiktok),
]


def host_matches(host: str, domain: str) -> bool:
    """True when ``host`` is ``domain`` or one of its subdomains."""
    host = host.lower()
    return host == domain or host.endswith("." + domain)


def _host_of(url: str) -> str:
    try:
        return urlparse(url).hostname or ""
    except ValueError:
        return ""


class AccountExtractor:
    """Selects a platform strategy by host and falls back to meta tags."""

    def __init__(
        self,
        strategies: list[tuple[str, PlatformStrategy]] | None = None,
        parser: str = "html.parser",
    ) -> None:
        self._strategies = strategies if strategies is not None else PLATFORM_STRATEGIES
        self._parser = parser

    def strategies_for(self, url: str) -> list[PlatformStrategy]:
        host = _host_of(url)
        return [strategy for domain, strategy in self._strategies if host_matches(host, domain)]

    def extract(self, html: str, url: str) -> AccountData | None:
        if not html:
            return None
        soup = BeautifulSoup(html, self._parser)

        for strategy in self.strategies_for(url):
            account = self._run(strategy, soup, html, url)
            if account is not None:
                return account

        return self._run(extract_generic, soup, html, url)

    @staticmethod
    def _run(
        strategy: PlatformStrategy, soup: BeautifulSoup, html: str, url: str
    ) -> AccountData | None:
        try:
            return strategy(soup, html, url)
        except Exception as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.EXTRACTION_FAILED,
                message=str(exc),
                suppressed=True,
                details={"strategy": strategy.__name__, "url": url},
            )
            return None

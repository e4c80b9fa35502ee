"""Rule-based categorization, fallback summaries, entities and keywords."""

from __future__ import annotations

import re
from collections import Counter
from urllib.parse import urlparse

from argus.pipeline.models import ResultCategory

SOCIAL_DOMAINS = (
    "facebook.com",
    "twitter.com",
    "x.com",
    "instagram.com",
    "linkedin.com",
    "tiktok.com",
    "reddit.com",
)
FORUM_URL_KEYWORDS = ("forum", "board")
FORUM_TEXT_KEYWORDS = ("posted by", "thread")
ARCHIVE_KEYWORDS = ("archive.org", "archive.is", "cached", "archive")
ADULT_KEYWORDS = ("xxx", "porn", "adult", "nsfw", "onlyfans", "sex")
DOCUMENT_KEYWORDS = (".pdf", ".doc", ".docx", "document", "/docs/")
IMAGE_KEYWORDS = (".jpg", ".png", ".gif", "images", "photos")
VIDEO_KEYWORDS = ("youtube.com", "vimeo.com", "video", ".mp4", ".avi")

SUMMARY_SENTENCES = 3
SUMMARY_MAX_CHARS = 300
MAX_ENTITIES = 20

_SENTENCE_SPLIT = re.compile(r"[.!?]")
_SENTENCE_END = re.compile(r"[.!?]")
_KEYWORD_SPLIT = re.compile(r"[\s.,!?;:]+")


def _host(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def _name_chars(word: str) -> str:
    """Letters of any script and hyphens; digits and punctuation are dropped."""
    return "".join(c for c in word if c.isalpha() or c == "-")


def _contains_any(haystack: str, keywords: tuple[str, ...]) -> bool:
    return any(keyword in haystack for keyword in keywords)


def categorize(url: str, title: str = "", text: str = "") -> ResultCategory:
    """Assign a category from URL, title and body keywords.

    Rules are checked in order and the first hit wins.
    """
    url_l = url.lower()
    title_l = title.lower()
    text_l = text.lower()
    host = _host(url)
    url_and_title = f"{url_l} {title_l}"

    if any(host == d or host.endswith("." + d) for d in SOCIAL_DOMAINS):
        return ResultCategory.SOCIAL
    if (
        _contains_any(url_l, FORUM_URL_KEYWORDS)
        or "forum" in title_l
        or _contains_any(text_l, FORUM_TEXT_KEYWORDS)
    ):
        return ResultCategory.FORUM
    if _contains_any(url_and_title, ARCHIVE_KEYWORDS):
        return ResultCategory.ARCHIVE
    if _contains_any(url_and_title, ADULT_KEYWORDS):
        return ResultCategory.ADULT
    if _contains_any(url_and_title, DOCUMENT_KEYWORDS):
        return ResultCategory.DOCUMENT
    if _contains_any(url_l, IMAGE_KEYWORDS):
        return ResultCategory.IMAGE
    if _contains_any(url_and_title, VIDEO_KEYWORDS):
        return ResultCategory.VIDEO
    return ResultCategory.WEB


def fallback_summary(text: str) -> str:
    """First three sentences, cut to 300 characters."""
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    summary = ". ".join(sentences[:SUMMARY_SENTENCES])
    if len(summary) > SUMMARY_MAX_CHARS:
        summary = summary[: SUMMARY_MAX_CHARS - 3] + "..."
    if summary and not summary.endswith("."):
        summary += "."
    return summary


def extract_entities(text: str) -> list[str]:
    """Capitalized words that do not open a sentence, unique, at most 20."""
    entities: list[str] = []
    seen: set[str] = set()
    sentence_start = True

    for word in text.split():
        cleaned = _name_chars(word)
        ends_sentence = bool(_SENTENCE_END.search(word))
        if not cleaned:
            if ends_sentence:
                sentence_start = True
            continue
        if not sentence_start and cleaned[0].isupper() and len(cleaned) > 2:
            if cleaned not in seen:
                seen.add(cleaned)
                entities.append(cleaned)
                if len(entities) >= MAX_ENTITIES:
                    break
        sentence_start = ends_sentence

    return entities


def top_keywords(text: str, top_n: int = 10) -> list[str]:
    """Most frequent words longer than three characters; ties keep first-seen order."""
    words = [w for w in _KEYWORD_SPLIT.split(text.lower()) if len(w) > 3]
    return [word for word, _ in Counter(words).most_common(top_n)]

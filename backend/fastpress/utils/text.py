"""Text helpers for HTML content: plain-text extraction and word statistics."""

import math
import re

from bs4 import BeautifulSoup

# Average adult reading speed
WORDS_PER_MINUTE = 200

_HTML_TAG_PATTERN = re.compile(r"<[a-zA-Z/!][^>]*>")


def html_to_text(content: str) -> str:
    """Extract visible text from HTML (plain text passes through unchanged)."""
    if not content:
        return ""
    if not _HTML_TAG_PATTERN.search(content):
        return content.strip()
    soup = BeautifulSoup(content, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def count_words(content: str) -> int:
    """Count whitespace-separated words in the text of `content`."""
    text = html_to_text(content)
    return len(text.split()) if text else 0


def reading_time(word_count: int) -> int:
    """Minutes needed to read `word_count` words, rounded up."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / WORDS_PER_MINUTE)


def truncate(text: str, length: int, suffix: str = "...") -> str:
    """Cut `text` to `length` characters, appending `suffix` when cut."""
    if len(text) <= length:
        return text
    return text[:length].rstrip() + suffix

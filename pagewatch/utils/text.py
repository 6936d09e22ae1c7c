# pagewatch/utils/text.py
# Entry normalization: raw (text, href) pairs -> canonical chat-safe strings.

from __future__ import annotations
import re
from typing import Optional
from urllib.parse import urljoin

_WS = re.compile(r"\s+")
_MD_SPECIAL = re.compile(r"([_*\[\]()~`>#+=|{}.!\-])")


def clean_text(text: Optional[str]) -> str:
    """Collapse every whitespace run (newlines and tabs included) to one space."""
    return _WS.sub(" ", text or "").strip()


def escape_markdown(text: str) -> str:
    return _MD_SPECIAL.sub(r"\\\1", text)


def absolute_link(href: Optional[str], base_url: str) -> str:
    href = (href or "").strip()
    if not href:
        return ""
    return urljoin(base_url, href)


def make_entry(text: Optional[str], href: Optional[str], base_url: str) -> str:
    """Build the comparison key for one extracted item.

    The display text is whitespace-normalized and markdown-escaped; the link
    (if any) is made absolute and left unescaped:

        make_entry(" Spring\\n Gala ", "/e/1", "https://x.org")
        -> "[Spring Gala](https://x.org/e/1)"
    """
    label = escape_markdown(clean_text(text))
    link = absolute_link(href, base_url)
    if link:
        return f"[{label}]({link})"
    return label

from typing import List, Optional, Tuple

import requests
from bs4 import BeautifulSoup
from .base import Watcher, SourceConfig
from ..utils.http import PoliteSession
from ..utils.log import get_logger
from ..utils.text import make_entry

logger = get_logger("pagewatch.page_watcher")

# --------------------------------------------------------------------
# Page Watcher
# --------------------------------------------------------------------
class PageWatcher(Watcher):
    """Fetch one listing page and pull (text, href) out of each item node."""

    def __init__(self, source: SourceConfig, session: Optional[requests.Session] = None):
        self.source = source
        self.name = source.name
        self.session = session or PoliteSession()

    def _fetch(self) -> Optional[str]:
        try:
            r = self.session.get(self.source.url)
            r.raise_for_status()
        except requests.RequestException as e:
            logger.error("PageWatcher[%s] failed to fetch %s: %s", self.name, self.source.url, e)
            return None
        return r.text

    def extract(self, html: str) -> List[Tuple[str, Optional[str]]]:
        soup = BeautifulSoup(html, "lxml")
        nodes = soup.select(self.source.item_selector)
        logger.info("Found %d items on %s", len(nodes), self.source.label)

        out: List[Tuple[str, Optional[str]]] = []
        for node in nodes:
            link = node.select_one(self.source.link_selector)
            href = link.get("href") if link is not None else None
            out.append((node.get_text(), href or None))
        return out

    def poll(self) -> List[Tuple[str, Optional[str]]]:
        logger.info("Polling HTML page: %s", self.source.url)
        html = self._fetch()
        if html is None:
            return []
        return self.extract(html)

    def entries(self) -> List[str]:
        """Poll and normalize, keeping document order."""
        out = []
        for text, href in self.poll():
            entry = make_entry(text, href, self.source.link_base)
            logger.debug("- %s", entry)
            out.append(entry)
        return out

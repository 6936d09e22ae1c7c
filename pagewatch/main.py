# pagewatch/main.py
# Orchestrator: load seen state → poll every source → diff → send digest → persist state

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import requests

from .config import Settings
from .notifiers.telegram import NotifyResult, TelegramNotifier
from .notifiers.templates import render_digest
from .utils.http import PoliteSession
from .utils.log import get_logger
from .utils.state import GistState, SeenState
from .watchers.base import SourceConfig
from .watchers.page_watcher import PageWatcher
from .watchers.sources import load_sources

logger = get_logger("pagewatch")
DIV = "-" * 72


@dataclass
class RunSummary:
    new_items: Dict[str, List[str]] = field(default_factory=dict)
    notify: Optional[NotifyResult] = None
    saved: bool = False

    @property
    def total_new(self) -> int:
        return sum(len(v) for v in self.new_items.values())


def _entries_from_watcher(w: PageWatcher) -> List[str]:
    try:
        return w.entries()
    except Exception:
        logger.exception("Watcher %s raised; treating as empty.", w.name)
        return []


def diff_new(entries: Sequence[str], seen: set) -> List[str]:
    """Return entries not in ``seen`` (first occurrence, in order) and add them to it."""
    new: List[str] = []
    for entry in entries:
        if entry in seen:
            continue
        seen.add(entry)
        new.append(entry)
    return new


def collect_new_items(watchers: Sequence[PageWatcher], state: SeenState) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for w in watchers:
        logger.info(DIV)
        logger.info("Checking %s", w.name)
        seen = state.setdefault(w.name, set())
        grouped[w.name] = diff_new(_entries_from_watcher(w), seen)
        logger.info("%s: %d new item(s)", w.name, len(grouped[w.name]))
    return grouped


def run_once(
    sources: Sequence[SourceConfig],
    store: GistState,
    notifier: TelegramNotifier,
    session: Optional[requests.Session] = None,
    dry_run: bool = False,
    commit_on_notify_failure: bool = True,
) -> RunSummary:
    """One linear pass over every source.

    Persistence policy: by default state is committed even when the digest
    could not be delivered, so a delivery failure can drop those items for
    good. With ``commit_on_notify_failure=False`` state is written only after
    a successful send and undelivered items are reported again next run.
    """
    state = store.load()
    watchers = [PageWatcher(src, session=session) for src in sources]
    summary = RunSummary(new_items=collect_new_items(watchers, state))

    if summary.total_new == 0:
        logger.info("No new items found.")
        return summary

    if dry_run:
        logger.info("[DRY RUN] Would send digest (%d new):\n%s", summary.total_new, render_digest(summary.new_items, notifier.labels))
        return summary

    summary.notify = notifier.send(summary.new_items)
    if summary.notify is not NotifyResult.SENT and not commit_on_notify_failure:
        logger.warning("Digest not delivered (%s); leaving state untouched so items are re-sent.", summary.notify.value)
        return summary

    summary.saved = store.save(state)
    return summary


def main() -> None:
    try:
        settings = Settings.from_env()
        sources = load_sources(settings.sources_yaml)
        session = PoliteSession(settings.user_agent, timeout=settings.http_timeout)
        store = GistState(
            [s.name for s in sources],
            gist_id=settings.gist_id,
            token=settings.gist_token,
            filename=settings.gist_filename,
            session=session,
        )
        notifier = TelegramNotifier(
            settings.telegram_bot_token,
            settings.telegram_chat_id,
            labels={s.name: s.label for s in sources},
            parse_mode=settings.telegram_parse_mode,
            link_preview=settings.telegram_link_preview,
            session=session,
        )
        summary = run_once(
            sources,
            store,
            notifier,
            session=session,
            dry_run=settings.dry_run,
            commit_on_notify_failure=settings.commit_on_notify_failure,
        )
        logger.info(
            "Run finished: %d new, notify=%s, saved=%s",
            summary.total_new,
            summary.notify.value if summary.notify else "-",
            summary.saved,
        )
    except Exception:
        logger.exception("Run aborted by unexpected error")


if __name__ == "__main__":
    main()

# pagewatch/utils/state.py
# Seen-entry state kept in a GitHub Gist file, keyed by source name.
# Runs are stateless, so every run loads the document, diffs against it and
# writes the whole thing back (last writer wins; one run at a time assumed).

from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Set

import requests

from ..config import GITHUB_API, DEFAULT_GIST_FILENAME
from .http import PoliteSession

LOG = logging.getLogger("pagewatch.state")

SeenState = Dict[str, Set[str]]


def empty_state(source_names: Iterable[str]) -> SeenState:
    return {name: set() for name in source_names}


def dump_state(state: SeenState) -> str:
    """Serialize to the Gist file format: {source: [sorted entries]}."""
    return json.dumps({name: sorted(seen) for name, seen in state.items()}, indent=2, ensure_ascii=False)


@dataclass
class StateCheck:
    ok: bool
    state: SeenState = field(default_factory=dict)
    reason: str = ""


def validate_state(raw: Optional[str], source_names: Iterable[str]) -> StateCheck:
    """Parse and shape-check a stored document.

    Valid means a JSON object holding a list of strings for every known
    source. Keys for sources that are no longer configured are ignored.
    """
    names = list(source_names)
    if raw is None:
        return StateCheck(False, reason="file missing from gist")
    if not isinstance(raw, str):
        return StateCheck(False, reason=f"content is {type(raw).__name__}, expected text")
    try:
        data = json.loads(raw)
    except ValueError as e:
        return StateCheck(False, reason=f"invalid JSON ({e})")
    if not isinstance(data, dict):
        return StateCheck(False, reason=f"expected an object, got {type(data).__name__}")

    state: SeenState = {}
    for name in names:
        if name not in data:
            return StateCheck(False, reason=f"missing key {name!r}")
        items = data[name]
        if not isinstance(items, list):
            return StateCheck(False, reason=f"{name!r} is {type(items).__name__}, expected a list")
        if not all(isinstance(x, str) for x in items):
            return StateCheck(False, reason=f"{name!r} holds non-string entries")
        state[name] = set(items)
    return StateCheck(True, state)


class GistState:
    """Load/save the per-source seen sets from one file in a GitHub Gist.

    Every failure here is logged and degraded: load() falls back to an empty
    state (repairing the remote file when it is corrupted) and save() reports
    False instead of raising.
    """

    def __init__(
        self,
        source_names: Iterable[str],
        gist_id: Optional[str],
        token: Optional[str],
        filename: str = DEFAULT_GIST_FILENAME,
        session: Optional[requests.Session] = None,
    ):
        self.source_names = list(source_names)
        self.gist_id = gist_id
        self.token = token
        self.filename = filename
        self.session = session or PoliteSession()

    @property
    def url(self) -> str:
        return f"{GITHUB_API}/gists/{self.gist_id}"

    def _headers(self) -> Dict[str, str]:
        h = {"Accept": "application/vnd.github+json"}
        if self.token:
            h["Authorization"] = f"Bearer {self.token}"
        return h

    def _read(self) -> Optional[str]:
        r = self.session.get(self.url, headers=self._headers())
        r.raise_for_status()
        data = r.json()
        files: Any = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, dict):
            return None
        f = files.get(self.filename)
        if not isinstance(f, dict):
            return None
        if f.get("truncated") and f.get("raw_url"):
            # the API inlines at most 1 MB of content per file
            raw = self.session.get(f["raw_url"], headers=self._headers())
            raw.raise_for_status()
            return raw.text
        return f.get("content")

    def _write(self, content: str) -> bool:
        if not self.gist_id:
            LOG.error("GIST_ID not set; cannot write state.")
            return False
        if not self.token:
            LOG.error("GIST_TOKEN not set; cannot write state.")
            return False
        payload = {"files": {self.filename: {"content": content}}}
        try:
            r = self.session.patch(self.url, json=payload, headers=self._headers())
            r.raise_for_status()
        except requests.RequestException as e:
            body = getattr(getattr(e, "response", None), "text", "")
            LOG.error("Gist write failed: %s %s", e, body)
            return False
        return True

    # ----------------------- public -----------------------

    def reset(self) -> bool:
        """Overwrite the remote file with an empty, well-formed document."""
        ok = self._write(dump_state(empty_state(self.source_names)))
        if ok:
            LOG.warning("Gist file %s reset to default structure.", self.filename)
        else:
            LOG.error("Failed to reset Gist file %s; continuing with empty state for this run.", self.filename)
        return ok

    def load(self) -> SeenState:
        if not self.gist_id:
            LOG.warning("GIST_ID not set; starting from empty state.")
            return empty_state(self.source_names)

        # neither case below is a corrupted file, so the remote copy is left alone
        try:
            raw = self._read()
        except ValueError as e:
            # requests' JSONDecodeError is also a RequestException; match it here first
            LOG.error("Gist API returned a non-JSON response: %s", e)
            return empty_state(self.source_names)
        except requests.RequestException as e:
            LOG.error("Failed to fetch seen items from Gist: %s", e)
            return empty_state(self.source_names)

        check = validate_state(raw, self.source_names)
        if not check.ok:
            LOG.warning("Gist content is invalid or malformed (%s). Attempting to reset.", check.reason)
            self.reset()
            return empty_state(self.source_names)

        LOG.info(
            "Loaded seen state: %s",
            ", ".join(f"{k}={len(v)}" for k, v in check.state.items()) or "(no sources)",
        )
        return check.state

    def save(self, state: SeenState) -> bool:
        content = dump_state({name: state.get(name, set()) for name in self.source_names})
        LOG.debug("Updating Gist with: %s", content)
        ok = self._write(content)
        if ok:
            LOG.info("Saved seen state to Gist %s/%s", self.gist_id, self.filename)
        else:
            LOG.error("Failed to update seen items Gist; items may be re-reported next run.")
        return ok

# pagewatch/watchers/sources.py
# Source definitions: which pages to watch and how to pick items out of them.
# Selectors drift as sites change, so they live in a versioned YAML file
# (data/sources.yaml by default, SOURCES_YAML to override) rather than in code.

from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .base import SourceConfig

LOG = logging.getLogger("pagewatch.sources")

# Used when the YAML file is missing or unreadable.
BUILTIN_SOURCES: List[SourceConfig] = [
    SourceConfig(
        name="unionly",
        label="Unionly",
        url="https://unionly.io/o/wwtt/store/products",
        base_url="https://unionly.io",
        item_selector="div.w-full.max-w-sm.mx-auto.rounded-md.shadow-md.overflow-hidden",
    ),
    SourceConfig(
        name="theatrical",
        label="TheatricalTraining.org",
        url="https://theatricaltraining.com/#thecalendar",
        base_url="https://theatricaltraining.com",
        item_selector="div.ee-event-header-lnk",
    ),
]


def _source_from_dict(it: Dict[str, Any]) -> Optional[SourceConfig]:
    name = str(it.get("name") or "").strip()
    url = str(it.get("url") or "").strip()
    selector = str(it.get("item_selector") or "").strip()
    if not name or not url or not selector:
        LOG.warning("Sources: skipping incomplete entry %r (need name, url, item_selector)", it)
        return None
    return SourceConfig(
        name=name,
        label=str(it.get("label") or name),
        url=url,
        item_selector=selector,
        base_url=str(it.get("base_url") or ""),
        link_selector=str(it.get("link_selector") or "a"),
    )


def load_sources(yaml_path: str | Path) -> List[SourceConfig]:
    """Load enabled sources from YAML, in file order.

    Falls back to BUILTIN_SOURCES when the file is absent, unparseable or
    lists nothing usable. Duplicate names keep the first definition.
    """
    path = Path(yaml_path)
    if not path.exists():
        LOG.info("Sources: %s not found; using built-in sources.", path)
        return list(BUILTIN_SOURCES)
    try:
        with path.open("r", encoding="utf-8") as f:
            y = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        LOG.warning("Sources: failed to read %s (%s); using built-in sources.", path, e)
        return list(BUILTIN_SOURCES)

    if not isinstance(y, dict):
        LOG.warning("Sources: %s is not a mapping; using built-in sources.", path)
        return list(BUILTIN_SOURCES)

    out: List[SourceConfig] = []
    names = set()
    for it in (y.get("sources") or []):
        if not isinstance(it, dict) or not it.get("enabled", True):
            continue
        src = _source_from_dict(it)
        if src is None:
            continue
        if src.name in names:
            LOG.warning("Sources: duplicate name %r in %s; keeping the first.", src.name, path)
            continue
        names.add(src.name)
        out.append(src)

    if not out:
        LOG.warning("Sources: no usable sources in %s; using built-in sources.", path)
        return list(BUILTIN_SOURCES)

    LOG.info("Sources: loaded %d source(s) from %s (version %s)", len(out), path, y.get("version", "?"))
    return out

"""
Digest rendering for pagewatch.

Public API:
- render_digest(grouped, labels) -> str

``grouped`` maps source name -> new entries in document order; the digest
lists every source in mapping order, with a literal ``None`` line for
sources that found nothing new.
"""
from __future__ import annotations
from typing import Dict, List, Mapping, Optional, Sequence


def render_section(label: str, entries: Sequence[str]) -> str:
    lines: List[str] = [f"*{label} Items:*"]
    if entries:
        lines.extend(f"- {e}" for e in entries)
    else:
        lines.append("None")
    return "\n".join(lines)


def render_digest(grouped: Mapping[str, Sequence[str]], labels: Optional[Dict[str, str]] = None) -> str:
    """Render one chat message covering every source."""
    labels = labels or {}
    return "\n\n".join(render_section(labels.get(name, name), entries) for name, entries in grouped.items())

# smartvideo/common/strings/splitters.py
from __future__ import annotations

from typing import List


def csv_to_list(v: str | List[str] | None, *, lower: bool = False) -> List[str]:
    """Split a CSV env value (or clean an existing list) into stripped, non-empty items."""
    if v is None:
        return []
    items = v if isinstance(v, list) else str(v).split(",")
    out = [str(s).strip() for s in items if s is not None and str(s).strip()]
    return [s.lower() for s in out] if lower else out

from __future__ import annotations

from typing import Any, Collection


def _compact_json(value: Any, *, keep: Collection[str] = ()) -> Any:
    """Recursively drop empty cells from record-like structures.

    Sheet rows come back with blank strings for every unset column, so:
    - None, blank strings and empty lists/dicts are dropped
    - 0 and False are kept
    - top-level dict keys named in ``keep`` survive even when empty
      (cards always want ``id`` and ``fullName``)
    """

    if value is None:
        return None

    if isinstance(value, str):
        s = value.strip()
        return s if s else None

    if isinstance(value, (list, tuple)):
        items = [v for v in (_compact_json(item) for item in value) if v is not None]
        return items or None

    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            vv = _compact_json(v)
            if vv is None:
                if k not in keep:
                    continue
                vv = v
            out[k] = vv
        return out or None

    return value

"""Record source: read document records from the local JSON snapshot.

The snapshot is the raw OData listing saved by ``fetch-snapshot``::

    {"d": {"results": [{"Matnr": "...", "Subid": "...", "Sbgvid": "...", "Laiso": "..."}]}}

Unreadable or unparsable snapshots are logged and yield zero records unless
``strict`` is requested, in which case :class:`SnapshotError` is raised.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from SdsHarvest.api.exceptions import SnapshotError
from SdsHarvest.api.types import Record

LOGGER = logging.getLogger(__name__)

#: Snapshot field name for each Record attribute.
FIELD_MAP: Mapping[str, str] = {
    "material_number": "Matnr",
    "sub_id": "Subid",
    "storage_location": "Sbgvid",
    "language": "Laiso",
}


def _field(entry: Mapping[str, Any], key: str) -> str:
    value = entry.get(key)
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_records(payload: Any) -> list[Record]:
    """Extract records from a decoded snapshot document.

    Raises:
        ValueError: If ``payload`` lacks the ``d.results`` list.
    """

    data = payload.get("d") if isinstance(payload, Mapping) else None
    results = data.get("results") if isinstance(data, Mapping) else None
    if not isinstance(results, list):
        raise ValueError("snapshot has no d.results list")

    records: list[Record] = []
    for index, entry in enumerate(results):
        if not isinstance(entry, Mapping):
            LOGGER.warning("Skipping snapshot entry %d: expected an object", index)
            continue
        records.append(
            Record(**{attr: _field(entry, key) for attr, key in FIELD_MAP.items()})
        )
    return records


def load_records(path: Path, *, strict: bool = False) -> list[Record]:
    """Read and parse the snapshot at ``path``.

    Args:
        path: Snapshot file location.
        strict: Raise instead of returning an empty list on failure.

    Raises:
        SnapshotError: Only when ``strict`` is set.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return _handle_failure(path, f"failed to read snapshot: {exc}", strict)

    try:
        records = parse_records(json.loads(text))
    except ValueError as exc:
        return _handle_failure(path, f"failed to parse snapshot: {exc}", strict)

    LOGGER.info("Loaded %d records from %s", len(records), path)
    return records


def _handle_failure(path: Path, message: str, strict: bool) -> list[Record]:
    if strict:
        raise SnapshotError(str(path), message)
    LOGGER.error("%s: %s; continuing with zero records", path, message)
    return []

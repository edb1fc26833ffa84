"""Snapshot <-> JSON text."""

import json
from typing import Any, Optional

from aihealth.core.logging import get_logger
from aihealth.schemas.snapshot import HealthSnapshot

logger = get_logger(__name__)

EMPTY_JSON = "{}"


def snapshot_to_dict(snapshot: HealthSnapshot) -> dict[str, Any]:
    """JSON-ready dict with camelCase keys and absent fields omitted."""
    return snapshot.model_dump(mode="json", by_alias=True, exclude_none=True)


def serialize_snapshot(snapshot: HealthSnapshot, indent: Optional[int] = 2) -> str:
    """
    Encode a snapshot as pretty-printed JSON with sorted keys.

    Timestamps are ISO-8601 with their UTC offset. An encoding failure
    is logged and yields an empty object; it indicates a bug in the
    snapshot model, not bad input. ``indent=None`` gives compact output.
    """
    try:
        return json.dumps(
            snapshot_to_dict(snapshot),
            sort_keys=True,
            indent=indent,
            separators=(",", ":") if indent is None else None,
            ensure_ascii=False,
        )
    except (TypeError, ValueError) as e:
        logger.error("snapshot_serialization_failed", error=str(e))
        return EMPTY_JSON


def deserialize_snapshot(text: str) -> HealthSnapshot:
    return HealthSnapshot.model_validate_json(text)

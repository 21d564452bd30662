"""Variant record serialization for tool responses.

Records are opaque: they are rendered to compact JSON text exactly as the
store sent them, never inspected or reshaped.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any


def serialize_record(record: Any) -> str:
    """Render one store record as compact JSON text."""
    return json.dumps(record, separators=(",", ":"), ensure_ascii=False)


def serialize_records(records: Iterable[Any]) -> list[str]:
    return [serialize_record(r) for r in records]

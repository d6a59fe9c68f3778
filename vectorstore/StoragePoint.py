# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: StoragePoint
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class StoragePoint:
    """Unique key + schemaless payload + named vectors."""
    key: str
    payload: Dict[str, Any] = field(default_factory=dict)
    vectors: Dict[str, List[float]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.key, "payload": self.payload, "vectors": self.vectors}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "StoragePoint":
        return StoragePoint(
            key=str(data["id"]),
            payload=dict(data.get("payload") or {}),
            vectors={k: list(v) for k, v in (data.get("vectors") or {}).items()},
        )


@dataclass
class ScoredPoint:
    point: StoragePoint
    score: float

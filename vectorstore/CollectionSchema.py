# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: CollectionSchema
# -----------------------------------------------------------------------------
import hashlib
import json
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple

SCHEMA_METADATA_KEY = "etw:schema"
VECTOR_FIELD_METADATA_KEY = "etw:vector_field"
DIMENSIONS_METADATA_KEY = "etw:dimensions"

# Chroma's HNSW distance setting; "cosine" means distance = 1 - cosine similarity
DISTANCE_SPACES = {
    "cosine_similarity": "cosine",
    "euclidean": "l2",
    "dot_product": "ip",
}


@dataclass(frozen=True)
class KeyField:
    name: str
    type: str = "uuid"


@dataclass(frozen=True)
class DataField:
    name: str
    type: str
    is_filterable: bool = False
    is_full_text_searchable: bool = False


@dataclass(frozen=True)
class VectorField:
    name: str
    dimensions: int
    index_kind: str = "hnsw"
    distance_function: str = "cosine_similarity"


@dataclass(frozen=True)
class CollectionSchema:
    """
    Record definition a collection is created with. The fingerprint is stored
    with the collection so an incompatible definition is detected on open.
    """
    key: KeyField
    vector: VectorField
    data_fields: Tuple[DataField, ...] = field(default_factory=tuple)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.data_fields]

    @property
    def document_field(self) -> Optional[str]:
        """The full-text searchable field kept as the Chroma document, if any."""
        for f in self.data_fields:
            if f.is_full_text_searchable:
                return f.name
        return None

    def fingerprint(self) -> str:
        blob = json.dumps(asdict(self), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(blob.encode("utf-8")).hexdigest()[:16]

    def to_collection_metadata(self) -> Dict[str, Any]:
        space = DISTANCE_SPACES.get(self.vector.distance_function)
        if space is None:
            raise ValueError(f"Unsupported distance function '{self.vector.distance_function}'")
        return {
            "hnsw:space": space,
            SCHEMA_METADATA_KEY: self.fingerprint(),
            VECTOR_FIELD_METADATA_KEY: self.vector.name,
            DIMENSIONS_METADATA_KEY: self.vector.dimensions,
        }

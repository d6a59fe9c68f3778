# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: PointStore
# -----------------------------------------------------------------------------

from typing import Any, Dict, Iterator, List, Protocol, Sequence, runtime_checkable

from vectorstore.CollectionSchema import CollectionSchema
from vectorstore.StoragePoint import ScoredPoint, StoragePoint


@runtime_checkable
class PointStore(Protocol):
    def test_connection(self) -> bool:
        ...

    def list_collection_names(self) -> List[str]:
        ...

    def collection_exists(self, name: str) -> bool:
        ...

    def create_collection(self, name: str, schema: CollectionSchema) -> None:
        ...

    def delete_collection(self, name: str) -> bool:
        ...

    def count(self, name: str) -> int:
        ...

    def upsert(
            self,
            name: str,
            schema: CollectionSchema,
            points: Sequence[StoragePoint],
    ) -> None:
        ...

    def query(
            self,
            name: str,
            schema: CollectionSchema,
            vector_field: str,
            vector: Sequence[float],
            top_k: int = 1,
            where: Dict[str, Any] | None = None,
    ) -> List[ScoredPoint]:
        ...

    def scroll(
            self,
            name: str,
            schema: CollectionSchema,
            batch_size: int = 256,
            include_vectors: bool = True,
    ) -> Iterator[List[StoragePoint]]:
        ...

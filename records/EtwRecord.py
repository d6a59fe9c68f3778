# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: EtwRecord
# -----------------------------------------------------------------------------
import uuid
from typing import Any, List, Protocol, TypeVar, runtime_checkable

from embedding.EmbeddingService import EmbeddingService
from vectorstore.CollectionSchema import CollectionSchema
from vectorstore.StoragePoint import StoragePoint

DESCRIPTION_FIELD = "Description"
DESCRIPTION_EMBEDDING_FIELD = "DescriptionEmbedding"


@runtime_checkable
class EtwRecord(Protocol):
    id: uuid.UUID
    description: str
    description_embedding: List[float]

    @classmethod
    def record_definition(cls, dimensions: int) -> CollectionSchema:
        ...

    @classmethod
    def from_domain_object(cls, obj: Any, embedding_service: EmbeddingService) -> "EtwRecord":
        ...

    @classmethod
    def from_stored_point(cls, point: StoragePoint) -> "EtwRecord":
        ...


R = TypeVar("R", bound=EtwRecord)


@runtime_checkable
class RecordMapper(Protocol[R]):
    def to_storage_point(self, record: R) -> StoragePoint:
        ...

    def from_storage_point(self, point: StoragePoint) -> R:
        ...

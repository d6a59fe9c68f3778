# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: EtwVectorDb
# -----------------------------------------------------------------------------
import dataclasses
import logging
import threading
from pathlib import Path
from typing import Any, Dict, Iterable, List, Tuple

import settings
from embedding.EmbeddingService import EmbeddingService
from records.EtwEventRecord import EtwEventRecord, EtwEventRecordMapper
from records.EtwProviderManifestRecord import (
    EtwProviderManifestRecord,
    EtwProviderManifestRecordMapper,
)
from utility.Progress import LoggingProgress, ProgressSink
from utility.logging_utils import get_class_logger
from vectorstore.EtwCollection import EtwCollection, VectorSearchOptions
from vectorstore.EtwCollectionFactory import EtwCollectionFactory
from vectorstore.PointStore import PointStore
from vectorstore.Topic import Topic
from vectorstore.VectorStoreErrors import ConfigurationError

# Every Topic needs an entry here; initialize() refuses to run otherwise.
TOPIC_RECORD_TYPES: Dict[Topic, type] = {
    Topic.MANIFESTS: EtwProviderManifestRecord,
    Topic.EVENT_DATA: EtwEventRecord,
}

PROBE_TEXT = "This is a test sentence."


def build_collection_factory(dimensions: int = settings.VECTOR_DIMENSIONS) -> EtwCollectionFactory:
    factory = EtwCollectionFactory()
    factory.register(
        EtwProviderManifestRecord.collection_name(dimensions),
        EtwProviderManifestRecord,
        EtwProviderManifestRecordMapper(),
    )
    factory.register(
        EtwEventRecord.collection_name(dimensions),
        EtwEventRecord,
        EtwEventRecordMapper(),
    )
    return factory


class EtwVectorDb:
    """
    Owns the manifest and event collections and routes every operation to
    one of them by Topic.
    """

    def __init__(
        self,
        *,
        dimensions: int = settings.VECTOR_DIMENSIONS,
        batch_size: int = settings.IMPORT_BATCH_SIZE,
        factory: EtwCollectionFactory | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.dimensions = dimensions
        self.batch_size = batch_size
        self.factory = factory or build_collection_factory(dimensions)
        self.logger = logger or get_class_logger(self.__class__)
        self.initialized = False
        self._collections: Dict[Topic, EtwCollection] = {}

    def initialize(
        self,
        embedding_service: EmbeddingService,
        store: PointStore,
        progress: ProgressSink | None = None,
    ) -> None:
        if self.initialized:
            self.logger.debug("EtwVectorDb already initialized")
            return

        progress = progress or LoggingProgress()
        progress.update_message("Initializing vector store service...")

        missing = [t for t in Topic if t not in TOPIC_RECORD_TYPES]
        if missing:
            raise ConfigurationError(f"No record type registered for topics: {[t.value for t in missing]}")

        # The embeddings model must produce vectors the collections were defined for
        probe = embedding_service.generate_embedding(PROBE_TEXT)
        if len(probe) != self.dimensions:
            raise ConfigurationError(
                f"Embedding service produces {len(probe)}-dimensional vectors, "
                f"collections expect {self.dimensions}"
            )
        progress.update_value()

        collections: Dict[Topic, EtwCollection] = {}
        for topic, record_type in TOPIC_RECORD_TYPES.items():
            collections[topic] = self.factory.create_collection(
                record_type.collection_name(self.dimensions),
                record_type,
                store=store,
                embedding_service=embedding_service,
                dimensions=self.dimensions,
                progress=progress,
                batch_size=self.batch_size,
            )

        existing = store.list_collection_names()
        for topic, collection in collections.items():
            if collection.get_name() not in existing:
                progress.update_message(f"Creating collection {collection.get_name()}...")
                collection.create(recreate_if_exists=False)
            progress.update_value()

        self._collections = collections
        self.initialized = True
        self.logger.info(
            "EtwVectorDb initialized with collections %s",
            {t.value: c.get_name() for t, c in collections.items()},
        )

    def _collection(self, topic: Topic | str) -> EtwCollection:
        if not self.initialized:
            raise RuntimeError("EtwVectorDb.initialize() must be called before use")
        try:
            topic = Topic(topic)
        except ValueError as e:
            raise ValueError(f"Unrecognized topic {topic!r}") from e
        return self._collections[topic]

    def collection_name(self, topic: Topic | str) -> str:
        return self._collection(topic).get_name()

    def get_record_count(self, topic: Topic | str) -> int:
        return self._collection(topic).get_record_count()

    def search(
        self,
        topic: Topic | str,
        query: str,
        options: VectorSearchOptions | None = None,
    ) -> str:
        """Description of the single best match, or "" when nothing matches."""
        options = dataclasses.replace(options or VectorSearchOptions(), top=1)
        results = self._collection(topic).vector_search(query, options)
        if not results:
            return ""
        record, _score = results[0]
        return record.description

    def search_records(
        self,
        topic: Topic | str,
        query: str,
        options: VectorSearchOptions | None = None,
    ) -> List[Tuple[str, float]]:
        results = self._collection(topic).vector_search(query, options)
        return [(record.description, score) for record, score in results]

    def erase(self, topic: Topic | str) -> None:
        self._collection(topic).erase()

    def import_data(
        self,
        topic: Topic | str,
        data: Iterable[Any],
        cancel_event: threading.Event | None = None,
    ) -> int:
        return self._collection(topic).import_data(data, cancel_event)

    def save_collection(self, topic: Topic | str, path: str | Path) -> Path:
        return self._collection(topic).save(path)

    def restore_collection(self, topic: Topic | str, path: str | Path) -> int:
        return self._collection(topic).restore(path)

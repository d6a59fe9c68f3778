# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: EtwCollectionService.py
# -----------------------------------------------------------------------------
import logging
import threading
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

import settings
from plugins.EtwVectorSearchPlugin import EtwVectorSearchPlugin
from utility.logging_utils import get_class_logger
from vectorstore.EtwCollection import VectorSearchOptions
from vectorstore.EtwVectorDb import EtwVectorDb
from vectorstore.Topic import Topic


class EtwCollectionService:
    """
    API-facing service over EtwVectorDb.

    Responsibilities:
      - import parsed manifests / events into their collection
      - counts, erase, save and restore per topic
      - best-match search through the search plugin, top-k search through the facade
    """

    def __init__(
        self,
        *,
        vector_db: EtwVectorDb,
        plugin: EtwVectorSearchPlugin,
        snapshot_dir: str = settings.SNAPSHOT_DIR,
        logger: logging.Logger | None = None,
    ) -> None:
        self.vector_db = vector_db
        self.plugin = plugin
        self.snapshot_dir = snapshot_dir
        self.logger = logger or get_class_logger(self.__class__)
        self._cancel_event = threading.Event()

    def collection_name(self, topic: Topic) -> str:
        return self.vector_db.collection_name(topic)

    def count(self, topic: Topic) -> int:
        return self.vector_db.get_record_count(topic)

    def import_data(self, topic: Topic, items: Sequence[Any]) -> int:
        # a fresh import clears any earlier cancellation request
        self._cancel_event.clear()
        self.logger.info("Importing %d items into topic '%s'", len(items), topic.value)
        return self.vector_db.import_data(topic, items, self._cancel_event)

    def cancel_import(self) -> None:
        self.logger.info("Cancellation requested for running import")
        self._cancel_event.set()

    def erase(self, topic: Topic) -> None:
        self.vector_db.erase(topic)

    def save(self, topic: Topic, path: Optional[str] = None) -> Path:
        target = Path(path) if path else Path(self.snapshot_dir)
        if not path:
            target.mkdir(parents=True, exist_ok=True)
        return self.vector_db.save_collection(topic, target)

    def restore(self, topic: Topic, path: str) -> int:
        return self.vector_db.restore_collection(topic, path)

    def search_best(self, topic: Topic, query: str) -> str:
        if topic == Topic.MANIFESTS:
            return self.plugin.search_etw_provider_manifests(query)
        return self.plugin.search_etw_events(query)

    def search_records(
        self,
        topic: Topic,
        query: str,
        *,
        top: int,
        score_threshold: int = 0,
        where: Optional[dict] = None,
    ) -> List[Tuple[str, float]]:
        options = VectorSearchOptions(top=top, score_threshold=score_threshold, where=where)
        return self.vector_db.search_records(topic, query, options)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: EtwCollection
# -----------------------------------------------------------------------------
from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Generic, Iterable, List, Optional, Tuple, Type

import settings
from embedding.EmbeddingService import EmbeddingService
from records.EtwRecord import DESCRIPTION_EMBEDDING_FIELD, R, RecordMapper
from utility.Progress import LoggingProgress, ProgressSink
from utility.logging_utils import get_class_logger
from vectorstore.CollectionSchema import CollectionSchema
from vectorstore.PointStore import PointStore
from vectorstore.StoragePoint import StoragePoint
from vectorstore.VectorStoreErrors import CollectionNotFoundError, SchemaMismatchError

SNAPSHOT_FORMAT_VERSION = 1


@dataclass
class VectorSearchOptions:
    vector_field: str = DESCRIPTION_EMBEDDING_FIELD
    top: int = settings.SEARCH_TOP
    score_threshold: int = 0  # 0 - 100, 0 = keep everything
    where: Optional[Dict[str, Any]] = None


class EtwCollection(Generic[R]):
    """
    One vector collection holding a single record type.

    Responsibilities:
      - create / erase the collection with its record definition
      - turn domain objects into records (embedding each description) and upsert them in batches
      - nearest-neighbour search on the description embedding
      - save / restore every point to a JSON-lines snapshot file
    """

    def __init__(
        self,
        *,
        name: str,
        record_type: Type[R],
        schema: CollectionSchema,
        mapper: RecordMapper[R],
        store: PointStore,
        embedding_service: EmbeddingService,
        progress: ProgressSink | None = None,
        batch_size: int = settings.IMPORT_BATCH_SIZE,
        logger: logging.Logger | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        self.name = name
        self.record_type = record_type
        self.schema = schema
        self.mapper = mapper
        self.store = store
        self.embedding_service = embedding_service
        self.progress = progress or LoggingProgress()
        self.batch_size = batch_size
        self.logger = logger or get_class_logger(self.__class__)

    def get_name(self) -> str:
        return self.name

    def exists(self) -> bool:
        return self.store.collection_exists(self.name)

    def create(self, recreate_if_exists: bool = False) -> bool:
        if self.exists():
            if not recreate_if_exists:
                self.logger.debug("Collection '%s' already exists", self.name)
                return True
            self.logger.info("Recreating collection '%s'", self.name)
            self.store.delete_collection(self.name)

        self.store.create_collection(self.name, self.schema)
        return True

    def get_record_count(self) -> int:
        if not self.exists():
            return 0
        return self.store.count(self.name)

    def vector_search(
        self,
        query_text: str,
        options: VectorSearchOptions | None = None,
    ) -> List[Tuple[R, float]]:
        """
        Embed ``query_text`` and return (record, score) pairs, best match first.
        Score is cosine similarity; an empty list means no match.
        """
        options = options or VectorSearchOptions()
        self.logger.info(
            "Searching collection '%s' with query=%r (top=%d, threshold=%d)",
            self.name,
            query_text,
            options.top,
            options.score_threshold,
        )

        try:
            query_vector = self.embedding_service.generate_embedding(query_text)
            hits = self.store.query(
                self.name,
                self.schema,
                vector_field=options.vector_field,
                vector=query_vector,
                top_k=options.top,
                where=options.where,
            )
        except Exception as e:
            self.logger.error(
                "Error during vector search on '%s': %s",
                self.name,
                str(e),
                exc_info=True,
            )
            raise

        results: List[Tuple[R, float]] = []
        for hit in hits:
            if options.score_threshold > 0 and round(hit.score * 100) < options.score_threshold:
                continue
            results.append((self.mapper.from_storage_point(hit.point), hit.score))
        return results

    def get_records(self, top: int = -1) -> List[R]:
        """Page through stored records without a query vector. top <= 0 means all."""
        if not self.exists():
            raise CollectionNotFoundError(self.name)

        records: List[R] = []
        for page in self.store.scroll(self.name, self.schema, batch_size=self.batch_size, include_vectors=False):
            for point in page:
                records.append(self.mapper.from_storage_point(point))
                if 0 < top <= len(records):
                    return records
        return records

    def import_data(
        self,
        items: Iterable[Any],
        cancel_event: threading.Event | None = None,
    ) -> int:
        """
        Build a record for every item and upsert them batch by batch.

        Cancellation is checked between batches; batches already written stay
        written. Returns how many records were stored.
        """
        data = list(items)
        total = len(data)
        if total == 0:
            self.logger.warning("No data provided for collection '%s'; nothing to import", self.name)
            return 0

        if not self.exists():
            raise CollectionNotFoundError(self.name)

        self.progress.update_message(f"Populating collection {self.name} with {total} records...")
        written = 0

        for start in range(0, total, self.batch_size):
            if cancel_event is not None and cancel_event.is_set():
                self.logger.warning(
                    "Import into '%s' cancelled after %d/%d records",
                    self.name,
                    written,
                    total,
                )
                break

            batch = data[start:start + self.batch_size]
            points: List[StoragePoint] = []
            for item in batch:
                record = self.record_type.from_domain_object(item, self.embedding_service)
                points.append(self.mapper.to_storage_point(record))

            self.store.upsert(self.name, self.schema, points)
            written += len(points)
            self.progress.update_message(
                f"Importing vector data (record {written} of {total})..."
            )
            self.progress.update_value(len(points))

        self.logger.info("Imported %d/%d records into collection '%s'", written, total, self.name)
        return written

    def erase(self) -> None:
        if not self.exists():
            self.logger.info("Collection '%s' does not exist; nothing to erase", self.name)
            return
        # No "delete all points" call; drop and recreate
        self.store.delete_collection(self.name)
        self.store.create_collection(self.name, self.schema)
        self.logger.info("Erased collection '%s'", self.name)

    def _snapshot_target(self, path: str | Path) -> Path:
        target = Path(path)
        # a path without a suffix that does not exist yet names a directory
        if not target.exists() and target.suffix == "":
            target.mkdir(parents=True, exist_ok=True)
        if target.is_dir():
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
            target = target / f"{self.name}-{stamp}.snapshot.jsonl"
        target.parent.mkdir(parents=True, exist_ok=True)
        return target

    def save(self, path: str | Path) -> Path:
        """
        Write every point (payload and vector) to a JSON-lines snapshot.
        ``path`` may be a file or an existing directory. Returns the file written.
        """
        if not self.exists():
            raise CollectionNotFoundError(self.name)

        target = self._snapshot_target(path)
        self.progress.update_message(f"Generating snapshot of {self.name}....")

        header = {
            "format": SNAPSHOT_FORMAT_VERSION,
            "collection": self.name,
            "schema": self.schema.fingerprint(),
            "dimensions": self.schema.vector.dimensions,
            "vector_field": self.schema.vector.name,
            "count": self.store.count(self.name),
        }

        written = 0
        with target.open("w", encoding="utf-8") as fh:
            fh.write(json.dumps(header) + "\n")
            for page in self.store.scroll(self.name, self.schema, batch_size=self.batch_size, include_vectors=True):
                for point in page:
                    fh.write(json.dumps(point.to_dict()) + "\n")
                    written += 1

        self.progress.update_value()
        self.logger.info("Saved %d points from '%s' to %s", written, self.name, target)
        return target

    def _check_snapshot_point(self, point: StoragePoint, source: Path, line_no: int) -> None:
        vector_field = self.schema.vector
        vec = point.vectors.get(vector_field.name)
        if not vec:
            raise ValueError(
                f"Snapshot {source} line {line_no}: point '{point.key}' has no '{vector_field.name}' vector"
            )
        if len(vec) != vector_field.dimensions:
            raise ValueError(
                f"Snapshot {source} line {line_no}: point '{point.key}' vector has {len(vec)} "
                f"dimensions, collection '{self.name}' expects {vector_field.dimensions}"
            )

    def restore(self, path: str | Path) -> int:
        """
        Replace the collection contents with the points in a snapshot file.
        The whole file is validated first; a bad snapshot leaves the stored
        collection untouched. Returns the number of points restored.
        """
        source = Path(path)
        self.progress.update_message(f"Uploading snapshot {source.name}....")

        with source.open("r", encoding="utf-8") as fh:
            header_line = fh.readline()
            if not header_line.strip():
                raise ValueError(f"Snapshot {source} is empty")
            header = json.loads(header_line)

            if header.get("format") != SNAPSHOT_FORMAT_VERSION:
                raise ValueError(f"Unsupported snapshot format {header.get('format')!r} in {source}")

            expected = self.schema.fingerprint()
            if header.get("schema") != expected:
                raise SchemaMismatchError(self.name, expected, header.get("schema"))

            if header.get("collection") != self.name:
                self.logger.warning(
                    "Restoring snapshot of '%s' into collection '%s'",
                    header.get("collection"),
                    self.name,
                )

            # Read and check every point before touching the stored collection
            points: List[StoragePoint] = []
            for line_no, line in enumerate(fh, start=2):
                if not line.strip():
                    continue
                try:
                    point = StoragePoint.from_dict(json.loads(line))
                except (ValueError, KeyError, TypeError, AttributeError) as e:
                    raise ValueError(f"Snapshot {source} line {line_no} is not a valid point: {e}") from e
                self._check_snapshot_point(point, source, line_no)
                points.append(point)

        # Snapshot contents take priority over whatever is stored now
        self.create(recreate_if_exists=True)

        restored = 0
        for start in range(0, len(points), self.batch_size):
            batch = points[start:start + self.batch_size]
            self.store.upsert(self.name, self.schema, batch)
            restored += len(batch)

        self.progress.update_value()
        self.logger.info("Restored %d points into '%s' from %s", restored, self.name, source)
        return restored

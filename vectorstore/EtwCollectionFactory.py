# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: EtwCollectionFactory
# -----------------------------------------------------------------------------
import logging
from typing import Dict, List, Tuple, Type

from embedding.EmbeddingService import EmbeddingService
from records.EtwRecord import R, RecordMapper
from utility.Progress import ProgressSink
from utility.logging_utils import get_class_logger
from vectorstore.EtwCollection import EtwCollection
from vectorstore.PointStore import PointStore


class EtwCollectionFactory:
    """
    Explicit (collection name, record type) -> point mapper table.

    The point store is generic and cannot know how each record type maps to a
    point, so every pairing is registered at startup. Asking for an unknown
    pairing is a wiring bug and raises NotImplementedError.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._mappers: Dict[Tuple[str, type], RecordMapper] = {}
        self.logger = logger or get_class_logger(self.__class__)

    def register(self, name: str, record_type: Type[R], mapper: RecordMapper[R]) -> None:
        key = (name, record_type)
        if key in self._mappers:
            raise ValueError(f"Mapper already registered for {name!r}/{record_type.__name__}")
        self._mappers[key] = mapper
        self.logger.debug("Registered mapper %s for %s/%s", type(mapper).__name__, name, record_type.__name__)

    def registrations(self) -> List[Tuple[str, type]]:
        return list(self._mappers.keys())

    def get_mapper(self, name: str, record_type: Type[R]) -> RecordMapper[R]:
        mapper = self._mappers.get((name, record_type))
        if mapper is None:
            raise NotImplementedError(
                f"No point mapper registered for collection {name!r} "
                f"and record type {getattr(record_type, '__name__', record_type)!r}"
            )
        return mapper

    def create_collection(
        self,
        name: str,
        record_type: Type[R],
        *,
        store: PointStore,
        embedding_service: EmbeddingService,
        dimensions: int,
        progress: ProgressSink | None = None,
        batch_size: int | None = None,
    ) -> EtwCollection[R]:
        mapper = self.get_mapper(name, record_type)
        kwargs = {}
        if batch_size is not None:
            kwargs["batch_size"] = batch_size
        return EtwCollection(
            name=name,
            record_type=record_type,
            schema=record_type.record_definition(dimensions),
            mapper=mapper,
            store=store,
            embedding_service=embedding_service,
            progress=progress,
            **kwargs,
        )

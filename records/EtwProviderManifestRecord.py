# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: EtwProviderManifestRecord
# -----------------------------------------------------------------------------
import uuid
from dataclasses import dataclass, field
from typing import Any, List

import settings
from embedding.EmbeddingService import EmbeddingService
from etw.ParsedEtw import ParsedEtwManifest
from records.EtwRecord import DESCRIPTION_EMBEDDING_FIELD, DESCRIPTION_FIELD, RecordMapper
from vectorstore.CollectionSchema import CollectionSchema, DataField, KeyField, VectorField
from vectorstore.PayloadCodec import (
    extract_field_from_payload,
    extract_string_from_payload,
    int_list_value,
    string_list_value,
)
from vectorstore.StoragePoint import StoragePoint

UNNAMED = "(unnamed)"
UNKNOWN = "(unknown)"

# Collections are named by vector size so a different embeddings model never
# lands in an incompatible collection.
COLLECTION_PREFIX = "manifests"


def _join(values: List[str]) -> str:
    return ",".join(values)


@dataclass
class EtwProviderManifestRecord:
    """Searchable description of one ETW provider manifest."""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    name: str = UNNAMED
    source: str = UNKNOWN
    event_ids: List[str] = field(default_factory=list)
    channels: List[str] = field(default_factory=list)
    tasks: List[str] = field(default_factory=list)
    keywords: List[str] = field(default_factory=list)
    strings: List[str] = field(default_factory=list)
    template_fields: List[str] = field(default_factory=list)
    description: str = ""
    description_embedding: List[float] = field(default_factory=list)

    @classmethod
    def record_definition(cls, dimensions: int = settings.VECTOR_DIMENSIONS) -> CollectionSchema:
        return CollectionSchema(
            key=KeyField("Id", "uuid"),
            data_fields=(
                DataField("ProviderName", "str", is_filterable=True, is_full_text_searchable=False),
                DataField("ProviderSource", "str"),
                DataField("EventIds", "list[int]"),
                DataField("Channels", "list[str]"),
                DataField("Tasks", "list[str]"),
                DataField("Keywords", "list[str]"),
                DataField("Strings", "list[str]"),
                DataField("TemplateFields", "list[str]"),
                DataField(DESCRIPTION_FIELD, "str", is_filterable=True, is_full_text_searchable=True),
            ),
            vector=VectorField(
                DESCRIPTION_EMBEDDING_FIELD,
                dimensions=dimensions,
                index_kind="hnsw",
                distance_function="cosine_similarity",
            ),
        )

    @staticmethod
    def collection_name(dimensions: int = settings.VECTOR_DIMENSIONS) -> str:
        return f"{COLLECTION_PREFIX}_{dimensions}"

    def build_description(self) -> str:
        return (
            f"There is an ETW provider with Id={self.id} named "
            f"{self.name} whose events are formatted from source {self.source}. "
            f"The supported events have IDs {_join(self.event_ids)} and "
            f"among these events there are unique template fields named "
            f"{_join(self.template_fields)}. The provider further defines "
            f"channels: {_join(self.channels)}; keywords: {_join(self.keywords)}; "
            f"tasks/opcodes: {_join(self.tasks)}; strings: {_join(self.strings)}"
        )

    @classmethod
    def create_from_parsed_manifest(
            cls,
            manifest: ParsedEtwManifest,
            embedding_service: EmbeddingService,
    ) -> "EtwProviderManifestRecord":
        provider = manifest.provider
        record = cls(
            id=provider.id,
            name=provider.name or UNNAMED,
            source=provider.source or UNKNOWN,
            event_ids=[str(e.id) for e in manifest.events],
            channels=[f"{c}" for c in manifest.channels],
            keywords=[f"{k}" for k in manifest.keywords],
            strings=[s for s in manifest.string_table if s],
        )

        for task, opcodes in manifest.tasks:
            opcode_names = [f"{o.name}" for o in opcodes]
            record.tasks.append(
                f"task {task.name}(value={task.value:X}) has opcodes {_join(opcode_names)}"
            )

        for _template_id, fields in manifest.templates.items():
            for f in fields:
                if f.name not in record.template_fields:
                    record.template_fields.append(f.name)

        record.description = record.build_description()
        record.description_embedding = list(embedding_service.generate_embedding(record.description))
        return record

    @classmethod
    def from_domain_object(cls, obj: Any, embedding_service: EmbeddingService) -> "EtwProviderManifestRecord":
        if not isinstance(obj, ParsedEtwManifest):
            raise TypeError(
                f"Unrecognized input object type for EtwProviderManifestRecord: {type(obj).__name__}"
            )
        return cls.create_from_parsed_manifest(obj, embedding_service)

    @classmethod
    def from_stored_point(cls, point: StoragePoint) -> "EtwProviderManifestRecord":
        payload = point.payload
        record = cls(
            id=uuid.UUID(point.key),
            name=extract_string_from_payload(payload, "ProviderName", UNNAMED),
            source=extract_string_from_payload(payload, "ProviderSource", UNKNOWN),
            description=extract_string_from_payload(payload, DESCRIPTION_FIELD),
        )

        event_ids = extract_field_from_payload(payload, "EventIds")
        channels = extract_field_from_payload(payload, "Channels")
        tasks = extract_field_from_payload(payload, "Tasks")
        keywords = extract_field_from_payload(payload, "Keywords")
        strings = extract_field_from_payload(payload, "Strings")
        template_fields = extract_field_from_payload(payload, "TemplateFields")

        if event_ids:
            record.event_ids.extend(event_ids)
        if channels:
            record.channels.extend(channels)
        if tasks:
            record.tasks.extend(tasks)
        if keywords:
            record.keywords.extend(keywords)
        if strings:
            record.strings.extend(strings)
        if template_fields:
            record.template_fields.extend(template_fields)

        vector = point.vectors.get(DESCRIPTION_EMBEDDING_FIELD)
        if vector:
            record.description_embedding = list(vector)
        return record


class EtwProviderManifestRecordMapper(RecordMapper[EtwProviderManifestRecord]):
    def __init__(self, *, warn_dropped_ints: bool = settings.WARN_DROPPED_INTS) -> None:
        self.warn_dropped_ints = warn_dropped_ints

    def to_storage_point(self, record: EtwProviderManifestRecord) -> StoragePoint:
        return StoragePoint(
            key=str(record.id),
            payload={
                "ProviderName": record.name,
                "ProviderSource": record.source,
                "EventIds": int_list_value(record.event_ids, warn=self.warn_dropped_ints),
                "Channels": string_list_value(record.channels),
                "Tasks": string_list_value(record.tasks),
                "Keywords": string_list_value(record.keywords),
                "Strings": string_list_value(record.strings),
                "TemplateFields": string_list_value(record.template_fields),
                DESCRIPTION_FIELD: record.description,
            },
            vectors={DESCRIPTION_EMBEDDING_FIELD: list(record.description_embedding)},
        )

    def from_storage_point(self, point: StoragePoint) -> EtwProviderManifestRecord:
        return EtwProviderManifestRecord.from_stored_point(point)

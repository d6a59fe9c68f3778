# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: EtwEventRecord
# -----------------------------------------------------------------------------
import json
import uuid
from dataclasses import dataclass, field
from typing import Any, List

import settings
from embedding.EmbeddingService import EmbeddingService
from etw.ParsedEtw import ParsedEtwEvent
from records.EtwRecord import DESCRIPTION_EMBEDDING_FIELD, DESCRIPTION_FIELD, RecordMapper
from vectorstore.CollectionSchema import CollectionSchema, DataField, KeyField, VectorField
from vectorstore.PayloadCodec import (
    extract_field_from_payload,
    extract_int_from_payload,
    extract_string_from_payload,
    string_list_value,
)
from vectorstore.StoragePoint import StoragePoint

UNNAMED = "(unnamed)"
UNKNOWN = "(unknown)"

COLLECTION_PREFIX = "events"


@dataclass
class EtwEventRecord:
    """Searchable description of a single decoded ETW event."""
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    provider_name: str = UNNAMED
    provider_id: str = UNKNOWN
    event_id: int = 0
    event_version: int = 0
    process_id: int = 0
    process_start_key: int = 0
    thread_id: int = 0
    user_sid: str = UNKNOWN
    activity_id: str = UNKNOWN
    timestamp: str = UNKNOWN
    task: str = UNKNOWN
    opcode: str = UNKNOWN
    level: str = UNKNOWN
    channel: str = UNKNOWN
    keywords: List[str] = field(default_factory=list)
    template_fields: List[str] = field(default_factory=list)
    template_values: List[str] = field(default_factory=list)
    event_json: str = ""
    description: str = ""
    description_embedding: List[float] = field(default_factory=list)

    @classmethod
    def record_definition(cls, dimensions: int = settings.VECTOR_DIMENSIONS) -> CollectionSchema:
        return CollectionSchema(
            key=KeyField("Id", "uuid"),
            data_fields=(
                DataField("ProviderName", "str", is_filterable=True),
                DataField("ProviderId", "str", is_filterable=True),
                DataField("EventId", "int", is_filterable=True),
                DataField("EventVersion", "int", is_filterable=True),
                DataField("ProcessId", "int", is_filterable=True),
                DataField("ProcessStartKey", "int", is_filterable=True),
                DataField("ThreadId", "int", is_filterable=True),
                DataField("UserSid", "str", is_filterable=True),
                DataField("ActivityId", "str", is_filterable=True),
                DataField("Timestamp", "str", is_filterable=True),
                DataField("Task", "str", is_filterable=True),
                DataField("Opcode", "str", is_filterable=True),
                DataField("Level", "str", is_filterable=True),
                DataField("Channel", "str", is_filterable=True),
                DataField("Keywords", "list[str]"),
                DataField("TemplateFields", "list[str]"),
                DataField("TemplateValues", "list[str]"),
                DataField("EventJson", "str"),
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
        template = ",".join(
            f"{name}={value}" for name, value in zip(self.template_fields, self.template_values)
        )
        return (
            f"There is an ETW event with Id={self.event_id} version {self.event_version} "
            f"from provider {self.provider_name} (Id={self.provider_id}) raised by process "
            f"{self.process_id} (start key {self.process_start_key}) on thread {self.thread_id} "
            f"for user {self.user_sid} in activity {self.activity_id} at {self.timestamp}. "
            f"The event belongs to task {self.task} with opcode {self.opcode}, level {self.level} "
            f"and channel {self.channel}, carries keywords {','.join(self.keywords)} and has "
            f"template data {template}"
        )

    @classmethod
    def create_from_parsed_event(
            cls,
            event: ParsedEtwEvent,
            embedding_service: EmbeddingService,
    ) -> "EtwEventRecord":
        provider = event.provider
        record = cls(
            provider_name=provider.name or UNNAMED,
            provider_id=str(provider.id) if provider.id else UNKNOWN,
            event_id=int(event.event_id),
            event_version=int(event.version),
            process_id=int(event.process_id),
            process_start_key=int(event.process_start_key),
            thread_id=int(event.thread_id),
            user_sid=event.user_sid or UNKNOWN,
            activity_id=str(event.activity_id) if event.activity_id else UNKNOWN,
            timestamp=event.timestamp or UNKNOWN,
            task=event.task or UNKNOWN,
            opcode=event.opcode or UNKNOWN,
            level=event.level or UNKNOWN,
            channel=event.channel or UNKNOWN,
            keywords=[k for k in event.keywords if k],
            template_fields=[str(k) for k in event.template_data.keys()],
            template_values=[str(v) for v in event.template_data.values()],
            event_json=json.dumps(event.to_dict(), sort_keys=True, default=str),
        )
        record.description = record.build_description()
        record.description_embedding = list(embedding_service.generate_embedding(record.description))
        return record

    @classmethod
    def from_domain_object(cls, obj: Any, embedding_service: EmbeddingService) -> "EtwEventRecord":
        if not isinstance(obj, ParsedEtwEvent):
            raise TypeError(
                f"Unrecognized input object type for EtwEventRecord: {type(obj).__name__}"
            )
        return cls.create_from_parsed_event(obj, embedding_service)

    @classmethod
    def from_stored_point(cls, point: StoragePoint) -> "EtwEventRecord":
        payload = point.payload
        record = cls(
            id=uuid.UUID(point.key),
            provider_name=extract_string_from_payload(payload, "ProviderName", UNNAMED),
            provider_id=extract_string_from_payload(payload, "ProviderId", UNKNOWN),
            event_id=extract_int_from_payload(payload, "EventId"),
            event_version=extract_int_from_payload(payload, "EventVersion"),
            process_id=extract_int_from_payload(payload, "ProcessId"),
            process_start_key=extract_int_from_payload(payload, "ProcessStartKey"),
            thread_id=extract_int_from_payload(payload, "ThreadId"),
            user_sid=extract_string_from_payload(payload, "UserSid", UNKNOWN),
            activity_id=extract_string_from_payload(payload, "ActivityId", UNKNOWN),
            timestamp=extract_string_from_payload(payload, "Timestamp", UNKNOWN),
            task=extract_string_from_payload(payload, "Task", UNKNOWN),
            opcode=extract_string_from_payload(payload, "Opcode", UNKNOWN),
            level=extract_string_from_payload(payload, "Level", UNKNOWN),
            channel=extract_string_from_payload(payload, "Channel", UNKNOWN),
            event_json=extract_string_from_payload(payload, "EventJson"),
            description=extract_string_from_payload(payload, DESCRIPTION_FIELD),
        )

        keywords = extract_field_from_payload(payload, "Keywords")
        template_fields = extract_field_from_payload(payload, "TemplateFields")
        template_values = extract_field_from_payload(payload, "TemplateValues")
        if keywords:
            record.keywords.extend(keywords)
        if template_fields:
            record.template_fields.extend(template_fields)
        if template_values:
            record.template_values.extend(template_values)

        vector = point.vectors.get(DESCRIPTION_EMBEDDING_FIELD)
        if vector:
            record.description_embedding = list(vector)
        return record


class EtwEventRecordMapper(RecordMapper[EtwEventRecord]):
    def to_storage_point(self, record: EtwEventRecord) -> StoragePoint:
        return StoragePoint(
            key=str(record.id),
            payload={
                "ProviderName": record.provider_name,
                "ProviderId": record.provider_id,
                "EventId": record.event_id,
                "EventVersion": record.event_version,
                "ProcessId": record.process_id,
                "ProcessStartKey": record.process_start_key,
                "ThreadId": record.thread_id,
                "UserSid": record.user_sid,
                "ActivityId": record.activity_id,
                "Timestamp": record.timestamp,
                "Task": record.task,
                "Opcode": record.opcode,
                "Level": record.level,
                "Channel": record.channel,
                "Keywords": string_list_value(record.keywords),
                "TemplateFields": string_list_value(record.template_fields),
                "TemplateValues": string_list_value(record.template_values),
                "EventJson": record.event_json,
                DESCRIPTION_FIELD: record.description,
            },
            vectors={DESCRIPTION_EMBEDDING_FIELD: list(record.description_embedding)},
        )

    def from_storage_point(self, point: StoragePoint) -> EtwEventRecord:
        return EtwEventRecord.from_stored_point(point)

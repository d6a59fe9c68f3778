# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: collections.py
# -----------------------------------------------------------------------------
import uuid
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from etw.ParsedEtw import (
    EtwChannel,
    EtwEventDescriptor,
    EtwKeyword,
    EtwOpcode,
    EtwProvider,
    EtwTask,
    EtwTemplateField,
    ParsedEtwEvent,
    ParsedEtwManifest,
)


class ProviderModel(BaseModel):
    id: uuid.UUID
    name: Optional[str] = None
    source: Optional[str] = None

    def to_parsed(self) -> EtwProvider:
        return EtwProvider(id=self.id, name=self.name, source=self.source)


class EventDescriptorModel(BaseModel):
    id: str
    version: int = 0
    task: Optional[str] = None
    opcode: Optional[str] = None
    level: Optional[str] = None
    template: Optional[str] = None


class NamedValueModel(BaseModel):
    name: str
    value: int = 0
    description: Optional[str] = None


class TaskModel(BaseModel):
    name: str
    value: int = 0
    opcodes: List[NamedValueModel] = []


class TemplateFieldModel(BaseModel):
    name: str
    type: str = "UnicodeString"


class ManifestModel(BaseModel):
    provider: ProviderModel
    events: List[EventDescriptorModel] = []
    channels: List[NamedValueModel] = []
    keywords: List[NamedValueModel] = []
    tasks: List[TaskModel] = []
    global_opcodes: List[NamedValueModel] = []
    templates: Dict[str, List[TemplateFieldModel]] = {}
    string_table: List[str] = []

    def to_parsed(self) -> ParsedEtwManifest:
        return ParsedEtwManifest(
            provider=self.provider.to_parsed(),
            events=[EtwEventDescriptor(**e.model_dump()) for e in self.events],
            channels=[EtwChannel(**c.model_dump()) for c in self.channels],
            keywords=[EtwKeyword(**k.model_dump()) for k in self.keywords],
            tasks=[
                (EtwTask(name=t.name, value=t.value), [EtwOpcode(name=o.name, value=o.value) for o in t.opcodes])
                for t in self.tasks
            ],
            global_opcodes=[EtwOpcode(name=o.name, value=o.value) for o in self.global_opcodes],
            templates={
                tid: [EtwTemplateField(name=f.name, type=f.type) for f in fields]
                for tid, fields in self.templates.items()
            },
            string_table=list(self.string_table),
        )


class EventModel(BaseModel):
    provider: ProviderModel
    event_id: int
    version: int = 0
    process_id: int = 0
    process_start_key: int = 0
    thread_id: int = 0
    user_sid: Optional[str] = None
    activity_id: Optional[uuid.UUID] = None
    timestamp: Optional[str] = None
    task: Optional[str] = None
    opcode: Optional[str] = None
    level: Optional[str] = None
    channel: Optional[str] = None
    keywords: List[str] = []
    template_data: Dict[str, Any] = {}

    def to_parsed(self) -> ParsedEtwEvent:
        data = self.model_dump()
        data["provider"] = self.provider.to_parsed()
        return ParsedEtwEvent(**data)


class ImportManifestsRequest(BaseModel):
    manifests: List[ManifestModel] = Field(..., min_length=1)


class ImportEventsRequest(BaseModel):
    events: List[EventModel] = Field(..., min_length=1)


class ImportResponse(BaseModel):
    topic: str
    collection_name: str
    requested: int
    imported: int


class CountResponse(BaseModel):
    topic: str
    collection_name: str
    count: int


class EraseResponse(BaseModel):
    topic: str
    collection_name: str
    erased: bool


class SaveRequest(BaseModel):
    # blank means "use ETW_SNAPSHOT_DIR"
    path: Optional[str] = None


class SaveResponse(BaseModel):
    topic: str
    collection_name: str
    path: str


class RestoreRequest(BaseModel):
    path: str = Field(..., min_length=1)


class RestoreResponse(BaseModel):
    topic: str
    collection_name: str
    restored: int

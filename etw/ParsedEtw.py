# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: ParsedEtw
# -----------------------------------------------------------------------------
import uuid
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class EtwProvider:
    id: uuid.UUID
    name: Optional[str] = None
    source: Optional[str] = None


@dataclass
class EtwEventDescriptor:
    """Event declared in a provider manifest."""
    id: str
    version: int = 0
    task: Optional[str] = None
    opcode: Optional[str] = None
    level: Optional[str] = None
    template: Optional[str] = None


@dataclass
class EtwChannel:
    name: str
    value: int = 0
    description: Optional[str] = None

    def __str__(self) -> str:
        return self.name


@dataclass
class EtwKeyword:
    name: str
    value: int = 0
    description: Optional[str] = None

    def __str__(self) -> str:
        return self.name


@dataclass
class EtwOpcode:
    name: str
    value: int = 0


@dataclass
class EtwTask:
    name: str
    value: int = 0


@dataclass
class EtwTemplateField:
    name: str
    type: str = "UnicodeString"


@dataclass
class ParsedEtwManifest:
    """
    A provider manifest as produced by the manifest parser.

    ``tasks`` keeps (task, opcodes) pairs in manifest order; ``templates`` maps
    a template id to its ordered field list.
    """
    provider: EtwProvider
    events: List[EtwEventDescriptor] = field(default_factory=list)
    channels: List[EtwChannel] = field(default_factory=list)
    keywords: List[EtwKeyword] = field(default_factory=list)
    tasks: List[Tuple[EtwTask, List[EtwOpcode]]] = field(default_factory=list)
    global_opcodes: List[EtwOpcode] = field(default_factory=list)
    templates: Dict[str, List[EtwTemplateField]] = field(default_factory=dict)
    string_table: List[str] = field(default_factory=list)


@dataclass
class ParsedEtwEvent:
    """A single decoded trace event."""
    provider: EtwProvider
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
    keywords: List[str] = field(default_factory=list)
    template_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["provider"]["id"] = str(self.provider.id)
        data["activity_id"] = str(self.activity_id) if self.activity_id else None
        return data

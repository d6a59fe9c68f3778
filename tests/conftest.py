# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: conftest.py
# -----------------------------------------------------------------------------

import hashlib
import os
import re
import sys
import uuid
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# keep test runs from writing ./logs
os.environ.setdefault("ETW_LOG_TO_FILE", "0")

import chromadb  # noqa: E402
from chromadb.config import Settings  # noqa: E402

from etw.ParsedEtw import (  # noqa: E402
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
from vectorstore.ChromaPointStore import ChromaPointStore  # noqa: E402

DIMENSIONS = 384


class StubEmbeddingService:
    """
    Deterministic bag-of-words embedder: each token bumps one hashed slot,
    the vector is L2-normalised. Identical text -> identical vector.
    """

    def __init__(self, dimensions: int = DIMENSIONS, on_call: Optional[Callable[[int, str], None]] = None):
        self.dimensions = dimensions
        self.on_call = on_call
        self.calls: List[str] = []

    def generate_embedding(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.on_call is not None:
            self.on_call(len(self.calls), text)

        vec = np.zeros(self.dimensions, dtype=np.float32)
        for token in re.findall(r"\w+", text.lower()):
            slot = int(hashlib.md5(token.encode("utf-8")).hexdigest(), 16) % self.dimensions
            vec[slot] += 1.0
        norm = float(np.linalg.norm(vec))
        if norm == 0.0:
            vec[0] = 1.0
        else:
            vec /= norm
        return vec.tolist()

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.generate_embedding(t) for t in texts]

    def test_connection(self) -> bool:
        return True


class FailingEmbeddingService:
    def __init__(self):
        self.calls = 0

    def generate_embedding(self, text: str) -> List[float]:
        self.calls += 1
        raise ConnectionError("embedding service unreachable")

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self.generate_embedding(t) for t in texts]


def make_manifest(
    name: Optional[str] = "Microsoft-Windows-Kernel-Process",
    *,
    provider_id: Optional[uuid.UUID] = None,
    source: Optional[str] = "Xml",
    event_ids: Sequence[str] = ("1", "2", "3"),
) -> ParsedEtwManifest:
    return ParsedEtwManifest(
        provider=EtwProvider(id=provider_id or uuid.uuid4(), name=name, source=source),
        events=[EtwEventDescriptor(id=e, version=0) for e in event_ids],
        channels=[EtwChannel("Microsoft-Windows-Kernel-Process/Analytic", 16)],
        keywords=[EtwKeyword("WINEVENT_KEYWORD_PROCESS", 0x10), EtwKeyword("WINEVENT_KEYWORD_THREAD", 0x20)],
        tasks=[
            (EtwTask("ProcessStart", 1), [EtwOpcode("win:Start", 1)]),
            (EtwTask("ThreadWork", 26), [EtwOpcode("win:Start", 1), EtwOpcode("win:Stop", 2)]),
        ],
        templates={
            "ProcessStartArgs": [
                EtwTemplateField("ProcessID", "UInt32"),
                EtwTemplateField("ImageName", "UnicodeString"),
            ],
            "ThreadArgs": [
                EtwTemplateField("ProcessID", "UInt32"),
                EtwTemplateField("ThreadID", "UInt32"),
            ],
        },
        string_table=["Process started", ""],
    )


def make_event(
    event_id: int = 1,
    *,
    provider_name: Optional[str] = "Microsoft-Windows-Kernel-Process",
    process_id: int = 4242,
) -> ParsedEtwEvent:
    return ParsedEtwEvent(
        provider=EtwProvider(id=uuid.UUID("22fb2cd6-0e7b-422b-a0c7-2fad1fd0e716"), name=provider_name),
        event_id=event_id,
        version=2,
        process_id=process_id,
        process_start_key=281474976710700,
        thread_id=7788,
        user_sid="S-1-5-18",
        activity_id=uuid.UUID("00000000-0000-0000-0000-000000000001"),
        timestamp="2026-01-15T10:20:30.0000000Z",
        task="ProcessStart",
        opcode="win:Start",
        level="win:Informational",
        channel="Microsoft-Windows-Kernel-Process/Analytic",
        keywords=["WINEVENT_KEYWORD_PROCESS"],
        template_data={"ProcessID": process_id, "ImageName": "notepad.exe"},
    )


@pytest.fixture
def embedder() -> StubEmbeddingService:
    return StubEmbeddingService()


@pytest.fixture
def chroma_client():
    client = chromadb.EphemeralClient(settings=Settings(allow_reset=True, anonymized_telemetry=False))
    client.reset()
    yield client
    client.reset()


@pytest.fixture
def store(chroma_client) -> ChromaPointStore:
    return ChromaPointStore(client=chroma_client)

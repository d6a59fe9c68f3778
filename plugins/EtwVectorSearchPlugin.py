# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: EtwVectorSearchPlugin
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from records.EtwRecord import DESCRIPTION_EMBEDDING_FIELD
from vectorstore.EtwCollection import VectorSearchOptions
from vectorstore.EtwVectorDb import EtwVectorDb
from vectorstore.Topic import Topic

SEARCH_MANIFESTS_DESCRIPTION = (
    "Search ETW provider manifests for information similar to the given query. A typical use "
    "of this search routine is to locate a particular ETW provider given parameters that relate "
    "to information produced by that provider such as event names, tasks, opcodes, keywords, "
    "channels or template fields."
)

SEARCH_EVENTS_DESCRIPTION = (
    "Search ETW events for information similar to the given query. A typical use of this search "
    "routine is to locate ETW events whose ID, provider, task, keyword, etc relate to a particular "
    "process, thread, activity or user of interest."
)


@dataclass
class EtwVectorSearchPlugin:
    """Named search functions an orchestrator can call; no logic of its own."""
    vector_db: EtwVectorDb

    def search_etw_provider_manifests(self, query: str) -> str:
        options = VectorSearchOptions(vector_field=DESCRIPTION_EMBEDDING_FIELD)
        return self.vector_db.search(Topic.MANIFESTS, query, options)

    def search_etw_events(self, query: str) -> str:
        options = VectorSearchOptions(vector_field=DESCRIPTION_EMBEDDING_FIELD)
        return self.vector_db.search(Topic.EVENT_DATA, query, options)

    def functions(self) -> List[Dict[str, Any]]:
        entries: List[Dict[str, Any]] = [
            {
                "name": "SearchEtwProviderManifests",
                "description": SEARCH_MANIFESTS_DESCRIPTION,
                "parameters": {"query": "string"},
                "callable": self.search_etw_provider_manifests,
            },
            {
                "name": "SearchEtwEvents",
                "description": SEARCH_EVENTS_DESCRIPTION,
                "parameters": {"query": "string"},
                "callable": self.search_etw_events,
            },
        ]
        return entries

    def get_function(self, name: str) -> Callable[[str], str]:
        for entry in self.functions():
            if entry["name"] == name:
                return entry["callable"]
        raise KeyError(f"Unknown plugin function {name!r}")

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: EtwHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict

from api.schemas.health import DeepHealthResponse, SmokeTestSummary
from vectorstore.EtwVectorDb import EtwVectorDb
from vectorstore.Topic import Topic


@dataclass
class EtwHealthService:
    """
    Runs connectivity checks on the vector store and embedding service
    and reports per-topic record counts.
    Returns DeepHealthResponse for API layer
    """

    store: Any
    embedder: Any
    vector_db: EtwVectorDb

    def deep_health(self) -> DeepHealthResponse:
        results: Dict[str, bool] = {
            "chroma": bool(self.store.test_connection()),
            "embeddings": bool(self.embedder.test_connection()),
            "initialized": self.vector_db.initialized,
        }

        counts: Dict[str, int] = {}
        if self.vector_db.initialized and results["chroma"]:
            for topic in Topic:
                counts[topic.value] = self.vector_db.get_record_count(topic)

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        overall_status = "ok" if failed == 0 else "error"

        return DeepHealthResponse(
            status=overall_status,
            results=results,
            counts=counts,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
        )

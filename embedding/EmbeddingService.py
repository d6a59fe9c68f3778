# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: EmbeddingService
# -----------------------------------------------------------------------------
from typing import List, Protocol, Sequence, runtime_checkable


@runtime_checkable
class EmbeddingService(Protocol):
    def generate_embedding(self, text: str) -> List[float]:
        ...

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        ...

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: EtwEmbedder
# -----------------------------------------------------------------------------
import time
from typing import List, Sequence

import numpy as np
from openai import AzureOpenAI, OpenAI

import settings
from config.Config import Config
from embedding.EmbeddingService import EmbeddingService
from utility.logging_utils import get_class_logger


class EtwEmbedder(EmbeddingService):
    def __init__(
            self,
            cfg: Config,
            *,
            dimensions: int = settings.VECTOR_DIMENSIONS,
            batch_size: int = 64,
            normalize: bool = True,
            max_retries: int = 5,
            logger=None,
    ):
        self.cfg = cfg
        self.dimensions = dimensions
        self.batch_size = batch_size
        self.normalize = normalize
        self.max_retries = max_retries
        self.logger = logger or get_class_logger(self.__class__)

        self.model = cfg.openai_azure_embed_deployment or "text-embedding-3-small"
        self._init_client()
        self.logger.info(
            "OpenAI Azure Embedder initialized '%s', dimensions=%d",
            self.model,
            self.dimensions,
        )

    def _init_client(self) -> None:
        """
        Tries classic AzureOpenAI(...) first; if the installed SDK signature
        is incompatible, falls back to OpenAI(base_url=.../deployments/<model>).
        Sets self._use_deployment_param accordingly.
        """
        endpoint = self.cfg.openai_azure_endpoint.rstrip("/")
        key = self.cfg.openai_azure_api_key

        try:
            self.client = AzureOpenAI(
                api_key=key,
                azure_endpoint=endpoint,
                api_version=self.cfg.openai_api_version,
            )
            self._use_deployment_param = True
            return
        except TypeError as e:
            self.logger.debug(f"AzureOpenAI init fell through to base_url mode: {e}")

        # Fallback: deployment encoded in base_url; do not pass model= on each call
        self.client = OpenAI(
            api_key=key,
            base_url=f"{endpoint}/openai/deployments/{self.model}",
        )
        self._use_deployment_param = False

    def _embed_batch(self, texts: List[str]) -> np.ndarray:
        delay = 0.8
        for attempt in range(1, self.max_retries + 1):
            try:
                if self._use_deployment_param:
                    resp = self.client.embeddings.create(
                        model=self.model, input=texts, dimensions=self.dimensions
                    )
                else:
                    resp = self.client.embeddings.create(input=texts, dimensions=self.dimensions)

                arr = np.asarray([d.embedding for d in resp.data], dtype=np.float32)

                # Normalize vectors (cosine-friendly)
                if self.normalize:
                    norms = np.linalg.norm(arr, axis=1, keepdims=True) + 1e-12
                    arr = arr / norms
                return arr

            except Exception as e:
                self.logger.warning(f"Embedding batch failed (attempt {attempt}/{self.max_retries}): {e}")
                if attempt == self.max_retries:
                    raise
                time.sleep(delay)
                delay *= 1.7  # backoff

        # Unreachable and include for type checkers
        return np.empty((0, 0), dtype=np.float32)

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        items = list(texts)
        out: List[List[float]] = []
        for i in range(0, len(items), self.batch_size):
            arr = self._embed_batch(items[i:i + self.batch_size])
            out.extend(row.tolist() for row in arr)
        return out

    def generate_embedding(self, text: str) -> List[float]:
        vectors = self.embed_texts([text])
        if not vectors:
            raise RuntimeError("Embedding service returned no vectors")
        return vectors[0]

    def test_connection(self) -> bool:
        try:
            vec = self.generate_embedding("healthcheck")
            return len(vec) == self.dimensions
        except Exception as e:
            self.logger.error("Embedding connection failed: %s", e)
            return False

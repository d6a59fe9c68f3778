# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: ChromaPointStore
# -----------------------------------------------------------------------------
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Sequence, Tuple

import chromadb
from chromadb import ClientAPI
from chromadb.api.models import Collection
from chromadb.config import Settings

from config.Config import Config
from utility.logging_utils import get_class_logger
from vectorstore.CollectionSchema import CollectionSchema, SCHEMA_METADATA_KEY
from vectorstore.PointStore import PointStore
from vectorstore.StoragePoint import ScoredPoint, StoragePoint
from vectorstore.VectorStoreErrors import CollectionNotFoundError, SchemaMismatchError

# Chroma metadata only holds scalars; list payload values are stored as JSON
# strings and the names of those keys are recorded under this key.
LIST_FIELDS_KEY = "etw:list_fields"


def _as_list(vec: Any) -> List[float]:
    if hasattr(vec, "tolist"):
        vec = vec.tolist()
    return [float(x) for x in vec]


def _first(res: Dict[str, Any], key: str) -> List[Any]:
    # query() returns one inner list per query vector; we only ever send one
    outer = res.get(key)
    if outer is None or len(outer) == 0:
        return []
    inner = outer[0]
    return list(inner) if inner is not None else []


@dataclass
class ChromaPointStore(PointStore):
    client: ClientAPI
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    @staticmethod
    def from_config(cfg: Config, logger: Any = None) -> "ChromaPointStore":
        log = logger or get_class_logger(ChromaPointStore)
        mode = cfg.chroma_mode
        log.info("Initialising Chroma client (mode=%s, summary=%s)", mode, cfg.summary())

        if mode == "cloud":
            client = chromadb.CloudClient(
                tenant=cfg.chroma_tenant,
                database=cfg.chroma_database,
                api_key=cfg.chroma_api_key,
            )
        elif mode == "http":
            client = chromadb.HttpClient(
                host=cfg.chroma_host,
                port=cfg.chroma_port,
                ssl=cfg.chroma_ssl,
                settings=Settings(anonymized_telemetry=False),
            )
        else:
            client = chromadb.PersistentClient(
                path=cfg.chroma_path,
                settings=Settings(anonymized_telemetry=False),
            )
        return ChromaPointStore(client=client, logger=logger)

    def test_connection(self) -> bool:
        """
        Simple health check: can we talk to Chroma?
        """
        try:
            self.client.heartbeat()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------
    def list_collection_names(self) -> List[str]:
        collections = self.client.list_collections()
        # Depending on the chromadb release this is a list of names or of Collection objects
        names = [c if isinstance(c, str) else c.name for c in collections]
        self.logger.debug("Found %d collection(s): %s", len(names), names)
        return names

    def collection_exists(self, name: str) -> bool:
        return name in self.list_collection_names()

    def create_collection(self, name: str, schema: CollectionSchema) -> None:
        self.logger.info(
            "Creating Chroma collection '%s' (vector=%s, dimensions=%d, fingerprint=%s)",
            name,
            schema.vector.name,
            schema.vector.dimensions,
            schema.fingerprint(),
        )
        self.client.create_collection(
            name=name,
            metadata=schema.to_collection_metadata(),
            embedding_function=None,
        )

    def delete_collection(self, name: str) -> bool:
        if not self.collection_exists(name):
            self.logger.info("Collection '%s' not found, nothing to delete.", name)
            return False
        self.client.delete_collection(name)
        self.logger.info("Deleted collection '%s'", name)
        return True

    def count(self, name: str) -> int:
        if not self.collection_exists(name):
            return 0
        collection = self.client.get_collection(name=name, embedding_function=None)
        return int(collection.count())

    def _open(self, name: str, schema: CollectionSchema) -> Collection:
        if not self.collection_exists(name):
            raise CollectionNotFoundError(name)

        collection = self.client.get_collection(name=name, embedding_function=None)
        actual = (collection.metadata or {}).get(SCHEMA_METADATA_KEY)
        expected = schema.fingerprint()
        if actual != expected:
            self.logger.error(
                "Collection '%s' schema fingerprint %r does not match expected %r",
                name,
                actual,
                expected,
            )
            raise SchemaMismatchError(name, expected, actual)
        return collection

    # ------------------------------------------------------------------
    # Payload <-> Chroma document/metadata
    # ------------------------------------------------------------------
    @staticmethod
    def _encode_payload(schema: CollectionSchema, payload: Dict[str, Any]) -> Tuple[str, Dict[str, Any]]:
        document_field = schema.document_field
        document = ""
        metadata: Dict[str, Any] = {}
        list_fields: List[str] = []

        for key, value in payload.items():
            if key == document_field:
                document = "" if value is None else str(value)
            elif value is None:
                continue
            elif isinstance(value, (list, tuple)):
                metadata[key] = json.dumps(list(value))
                list_fields.append(key)
            else:
                metadata[key] = value

        metadata[LIST_FIELDS_KEY] = ",".join(list_fields)
        return document, metadata

    @staticmethod
    def _decode_payload(
            schema: CollectionSchema,
            document: str | None,
            metadata: Dict[str, Any] | None,
    ) -> Dict[str, Any]:
        metadata = dict(metadata or {})
        list_fields = [f for f in str(metadata.pop(LIST_FIELDS_KEY, "") or "").split(",") if f]

        payload: Dict[str, Any] = {}
        for key, value in metadata.items():
            if key in list_fields:
                try:
                    decoded = json.loads(value)
                except (TypeError, ValueError):
                    decoded = []
                payload[key] = decoded if isinstance(decoded, list) else []
            else:
                payload[key] = value

        if schema.document_field is not None and document is not None:
            payload[schema.document_field] = document
        return payload

    # ------------------------------------------------------------------
    # Points
    # ------------------------------------------------------------------
    def upsert(
            self,
            name: str,
            schema: CollectionSchema,
            points: Sequence[StoragePoint],
    ) -> None:
        if not points:
            return

        collection = self._open(name, schema)
        vector_name = schema.vector.name

        ids: List[str] = []
        documents: List[str] = []
        embeddings: List[List[float]] = []
        metadatas: List[Dict[str, Any]] = []

        for point in points:
            vec = point.vectors.get(vector_name)
            if vec is None or len(vec) == 0:
                raise ValueError(f"Point '{point.key}' has no '{vector_name}' vector")
            if len(vec) != schema.vector.dimensions:
                raise ValueError(
                    f"Point '{point.key}' vector has {len(vec)} dimensions, "
                    f"collection '{name}' expects {schema.vector.dimensions}"
                )

            document, metadata = self._encode_payload(schema, point.payload)
            ids.append(point.key)
            documents.append(document)
            embeddings.append(_as_list(vec))
            metadatas.append(metadata)

        collection.upsert(
            ids=ids,
            documents=documents,
            embeddings=embeddings,
            metadatas=metadatas,
        )
        self.logger.info("Upserted %d points into Chroma collection '%s'", len(ids), name)

    def query(
            self,
            name: str,
            schema: CollectionSchema,
            vector_field: str,
            vector: Sequence[float],
            top_k: int = 1,
            where: Dict[str, Any] | None = None,
    ) -> List[ScoredPoint]:
        if vector_field != schema.vector.name:
            raise ValueError(
                f"Collection '{name}' has no vector field '{vector_field}' "
                f"(expected '{schema.vector.name}')"
            )

        collection = self._open(name, schema)
        total = collection.count()
        if total == 0:
            self.logger.info("Collection '%s' is empty; skipping query", name)
            return []

        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [_as_list(vector)],
            "n_results": min(top_k, total),
            "include": ["documents", "metadatas", "distances"],
        }
        if where:
            self.logger.debug("Applying metadata filter (where=%s)", where)
            query_kwargs["where"] = where

        self.logger.debug("Issuing Chroma query against collection '%s' (top_k=%d)", name, top_k)
        res = collection.query(**query_kwargs)

        ids = _first(res, "ids")
        docs = _first(res, "documents")
        metas = _first(res, "metadatas")
        dists = _first(res, "distances")

        hits: List[ScoredPoint] = []
        for i, key in enumerate(ids):
            document = docs[i] if i < len(docs) else None
            metadata = metas[i] if i < len(metas) else None
            distance = dists[i] if i < len(dists) else None
            point = StoragePoint(
                key=str(key),
                payload=self._decode_payload(schema, document, metadata),
            )
            # cosine space: distance = 1 - similarity
            score = 1.0 - float(distance) if distance is not None else 0.0
            hits.append(ScoredPoint(point=point, score=score))

        hits.sort(key=lambda h: h.score, reverse=True)
        self.logger.info(
            "Chroma search complete: returned %d results (requested %d)",
            len(hits),
            top_k,
        )
        return hits

    def scroll(
            self,
            name: str,
            schema: CollectionSchema,
            batch_size: int = 256,
            include_vectors: bool = True,
    ) -> Iterator[List[StoragePoint]]:
        collection = self._open(name, schema)
        include = ["documents", "metadatas"]
        if include_vectors:
            include.append("embeddings")

        offset = 0
        while True:
            res = collection.get(include=include, limit=batch_size, offset=offset)
            ids = list(res.get("ids") or [])
            if not ids:
                return

            docs = res.get("documents")
            metas = res.get("metadatas")
            embeddings = res.get("embeddings")

            page: List[StoragePoint] = []
            for i, key in enumerate(ids):
                document = docs[i] if docs is not None and i < len(docs) else None
                metadata = metas[i] if metas is not None and i < len(metas) else None
                vectors: Dict[str, List[float]] = {}
                if embeddings is not None and i < len(embeddings) and embeddings[i] is not None:
                    vectors[schema.vector.name] = _as_list(embeddings[i])
                page.append(StoragePoint(
                    key=str(key),
                    payload=self._decode_payload(schema, document, metadata),
                    vectors=vectors,
                ))

            yield page
            offset += len(ids)
            if len(ids) < batch_size:
                return

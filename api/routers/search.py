# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: search router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_collection_service
from api.errors import to_http_exception
from api.schemas.search import (
    SearchHit,
    SearchRecordsRequest,
    SearchRecordsResponse,
    SearchRequest,
    SearchResponse,
)
from services.EtwCollectionService import EtwCollectionService
from vectorstore.Topic import Topic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


def _best(topic: Topic, req: SearchRequest, svc: EtwCollectionService) -> SearchResponse:
    query_text = (req.query or "").strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        description = svc.search_best(topic, query_text)
    except Exception as e:
        logger.exception("Search failed: %s", e)
        raise to_http_exception(e, "Search")
    return SearchResponse(query=query_text, topic=topic.value, description=description)


@router.post("/manifests", response_model=SearchResponse)
def search_manifests(
    req: SearchRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> SearchResponse:
    return _best(Topic.MANIFESTS, req, svc)


@router.post("/events", response_model=SearchResponse)
def search_events(
    req: SearchRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> SearchResponse:
    return _best(Topic.EVENT_DATA, req, svc)


@router.post("/{topic}/records", response_model=SearchRecordsResponse)
def search_records(
    topic: Topic,
    req: SearchRecordsRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> SearchRecordsResponse:
    query_text = (req.query or "").strip()
    if not query_text:
        raise HTTPException(status_code=400, detail="query must not be empty")

    try:
        hits = svc.search_records(
            topic,
            query_text,
            top=req.top,
            score_threshold=req.score_threshold,
            where=req.where,
        )
    except Exception as e:
        logger.exception("Search failed: %s", e)
        raise to_http_exception(e, "Search")

    return SearchRecordsResponse(
        query=query_text,
        topic=topic.value,
        results=[SearchHit(description=d, score=s) for d, s in hits],
    )

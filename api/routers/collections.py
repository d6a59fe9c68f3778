# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: collections router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends

from api.dependencies import get_collection_service
from api.errors import to_http_exception
from api.schemas.collections import (
    CountResponse,
    EraseResponse,
    ImportEventsRequest,
    ImportManifestsRequest,
    ImportResponse,
    RestoreRequest,
    RestoreResponse,
    SaveRequest,
    SaveResponse,
)
from services.EtwCollectionService import EtwCollectionService
from vectorstore.Topic import Topic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/collections", tags=["collections"])


@router.get("/{topic}/count", response_model=CountResponse)
def get_count(
    topic: Topic,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> CountResponse:
    try:
        count = svc.count(topic)
    except Exception as e:
        logger.exception("Count failed for topic '%s': %s", topic.value, e)
        raise to_http_exception(e, "Count")
    return CountResponse(topic=topic.value, collection_name=svc.collection_name(topic), count=count)


@router.post("/manifests/import", response_model=ImportResponse)
def import_manifests(
    req: ImportManifestsRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> ImportResponse:
    items = [m.to_parsed() for m in req.manifests]
    try:
        imported = svc.import_data(Topic.MANIFESTS, items)
    except Exception as e:
        logger.exception("Manifest import failed: %s", e)
        raise to_http_exception(e, "Import")
    return ImportResponse(
        topic=Topic.MANIFESTS.value,
        collection_name=svc.collection_name(Topic.MANIFESTS),
        requested=len(items),
        imported=imported,
    )


@router.post("/events/import", response_model=ImportResponse)
def import_events(
    req: ImportEventsRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> ImportResponse:
    items = [e.to_parsed() for e in req.events]
    try:
        imported = svc.import_data(Topic.EVENT_DATA, items)
    except Exception as e:
        logger.exception("Event import failed: %s", e)
        raise to_http_exception(e, "Import")
    return ImportResponse(
        topic=Topic.EVENT_DATA.value,
        collection_name=svc.collection_name(Topic.EVENT_DATA),
        requested=len(items),
        imported=imported,
    )


@router.post("/import/cancel")
def cancel_import(svc: EtwCollectionService = Depends(get_collection_service)) -> dict:
    svc.cancel_import()
    return {"cancelled": True}


@router.delete("/{topic}", response_model=EraseResponse)
def erase_collection(
    topic: Topic,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> EraseResponse:
    logger.info("Erasing collection for topic '%s'", topic.value)
    try:
        svc.erase(topic)
    except Exception as e:
        logger.exception("Erase failed for topic '%s': %s", topic.value, e)
        raise to_http_exception(e, "Erase")
    return EraseResponse(topic=topic.value, collection_name=svc.collection_name(topic), erased=True)


@router.post("/{topic}/save", response_model=SaveResponse)
def save_collection(
    topic: Topic,
    req: SaveRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> SaveResponse:
    try:
        target = svc.save(topic, req.path)
    except Exception as e:
        logger.exception("Save failed for topic '%s': %s", topic.value, e)
        raise to_http_exception(e, "Save")
    return SaveResponse(topic=topic.value, collection_name=svc.collection_name(topic), path=str(target))


@router.post("/{topic}/restore", response_model=RestoreResponse)
def restore_collection(
    topic: Topic,
    req: RestoreRequest,
    svc: EtwCollectionService = Depends(get_collection_service),
) -> RestoreResponse:
    try:
        restored = svc.restore(topic, req.path)
    except Exception as e:
        logger.exception("Restore failed for topic '%s': %s", topic.value, e)
        raise to_http_exception(e, "Restore")
    return RestoreResponse(topic=topic.value, collection_name=svc.collection_name(topic), restored=restored)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: dependencies.py
# -----------------------------------------------------------------------------
import threading
from functools import lru_cache
from typing import Optional

from api.AppContainer import AppContainer
from config.Config import Config
from plugins.EtwVectorSearchPlugin import EtwVectorSearchPlugin
from services.EtwCollectionService import EtwCollectionService
from services.EtwHealthService import EtwHealthService

_container_lock = threading.Lock()
_app_container: Optional[AppContainer] = None


@lru_cache
def get_cfg() -> Config:
    return Config.from_env()

def get_app_container() -> AppContainer:
    # built on first request so importing the app does not need credentials;
    # sync handlers run in a threadpool, so construction is serialised
    global _app_container
    if _app_container is None:
        with _container_lock:
            if _app_container is None:
                _app_container = AppContainer(cfg=get_cfg())
    return _app_container

def get_health_service() -> EtwHealthService:
    # use the singleton service from the container
    return get_app_container().health_service

def get_collection_service() -> EtwCollectionService:
    # use the singleton service from the container
    return get_app_container().collection_service

def get_search_plugin() -> EtwVectorSearchPlugin:
    return get_app_container().search_plugin

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from config.Config import Config
from embedding.EtwEmbedder import EtwEmbedder
from plugins.EtwVectorSearchPlugin import EtwVectorSearchPlugin
from services.EtwCollectionService import EtwCollectionService
from services.EtwHealthService import EtwHealthService
from utility.Progress import LoggingProgress
from vectorstore.ChromaPointStore import ChromaPointStore
from vectorstore.EtwVectorDb import EtwVectorDb


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(self, cfg: Config | None = None) -> None:
        # Configuration
        self.cfg = cfg or Config.from_env()

        # Core infrastructure
        self.embedder = EtwEmbedder(cfg=self.cfg)
        self.store = ChromaPointStore.from_config(self.cfg)
        self.progress = LoggingProgress()

        # Routing facade; creates both collections if they are missing
        self.vector_db = EtwVectorDb()
        self.vector_db.initialize(self.embedder, self.store, self.progress)

        # Orchestrator-facing search functions
        self.search_plugin = EtwVectorSearchPlugin(vector_db=self.vector_db)

        # Return a singleton EtwCollectionService instance
        self.collection_service = EtwCollectionService(
            vector_db=self.vector_db,
            plugin=self.search_plugin,
        )

        # Return a singleton EtwHealthService instance
        self.health_service = EtwHealthService(
            store=self.store,
            embedder=self.embedder,
            vector_db=self.vector_db,
        )

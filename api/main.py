# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: main.py
# -----------------------------------------------------------------------------
import logging

from fastapi import FastAPI

from api.routers import health, collections, search

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",)
app = FastAPI(title="ETW Vector API")
app.include_router(health.router)
app.include_router(collections.router)
app.include_router(search.router)


if __name__ == "__main__":
    import os
    import uvicorn

    API_HOST = os.getenv("ETW_API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("ETW_API_PORT", "8000"))

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        log_level="info",
        reload=False,
    )

# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Admin API for reference sanitization

The store is opened once in the lifespan and shared through app.state.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import default_config
from logging_config import configure_logging
from routes.health import router as health_router
from routes.maintenance import router as maintenance_router
from store.connection import StoreConnectionError, connect_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan"""
    configure_logging(default_config.logging.level)
    try:
        app.state.store = connect_store(default_config.database)
    except StoreConnectionError as e:
        # Keep serving /health so the outage is visible
        logger.error("Starting without document store: %s", e)
        app.state.store = None
    yield
    _cleanup(app)


def _cleanup(app: FastAPI):
    store = getattr(app.state, 'store', None)
    if store is not None:
        store.close()
        app.state.store = None


app = FastAPI(
    title="Refguard Sanitization API",
    description="Reference integrity discovery, cleanup and verification",
    version="0.1.0",
    lifespan=lifespan
)

app.state.store = None

app.include_router(health_router)
app.include_router(maintenance_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)

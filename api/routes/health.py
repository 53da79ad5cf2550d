# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Health and info routes."""
from fastapi import APIRouter, Request
from pydantic import BaseModel

from config import default_config

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    database: str
    store_connected: bool


@router.get("/", include_in_schema=False)
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Refguard sanitization API",
        "docs": "/docs",
        "health": "/health"
    }


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """
    Health check endpoint

    Reports whether the document store connection is open
    """
    store = getattr(request.app.state, 'store', None)
    return HealthResponse(
        status="healthy" if store is not None else "degraded",
        database=default_config.database.database,
        store_connected=store is not None,
    )

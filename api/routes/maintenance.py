# Copyright (c) 2024 Refguard Contributors
# SPDX-License-Identifier: MIT

"""Maintenance API routes

Endpoints for reference sanitization: discovery, per-collection cleanup,
and integrity verification. Cleanup defaults to dry run.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from operations.operations_factory import OperationsFactory
from routes.deps import get_store
from store.interfaces import CollectionStore

router = APIRouter(prefix="/api/maintenance/sanitization", tags=["maintenance"])


# ============================================================================
# Request/Response Models
# ============================================================================

class SanitizeRequest(BaseModel):
    """Request for a single-collection sanitize operation"""
    dry_run: bool = True


class SanitizeResponse(BaseModel):
    """Response from a single-collection sanitize operation"""
    collection: str
    operation: str
    dry_run: bool
    records_scanned: int
    records_cleaned: int
    records_skipped: int
    errors: List[str]
    details: Dict[str, Any]
    message: str


class IntegrityCheckDetail(BaseModel):
    """Detail of a single integrity check"""
    name: str
    passed: bool
    message: str
    severity: str
    details: Dict[str, Any]


class VerifyIntegrityResponse(BaseModel):
    """Response from verify operation"""
    passed: bool
    hard_passed: bool
    checks: List[IntegrityCheckDetail]
    errors: List[str]


# ============================================================================
# Discovery Endpoint
# ============================================================================

@router.get("/issues")
async def discover_issues(store: CollectionStore = Depends(get_store)):
    """Run a read-only discovery pass

    Example:
        GET /api/maintenance/sanitization/issues

    Returns:
        Report with timestamp, issues and summary (camelCase keys)
    """
    try:
        issues = OperationsFactory.create_discovery(store).discover_all_issues()
        report = OperationsFactory.create_report_generator().generate_report(issues, dry_run=True)
        return report.to_dict()
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Discovery failed: {e}")


# ============================================================================
# Sanitize Endpoint
# ============================================================================

@router.post("/sanitize/{collection}", response_model=SanitizeResponse)
async def sanitize_collection(
    collection: str,
    request: Optional[SanitizeRequest] = None,
    store: CollectionStore = Depends(get_store),
):
    """Sanitize one collection

    Audit-trail collections are read-only and always report zero cleaned.

    Example:
        POST /api/maintenance/sanitization/sanitize/bookmarks
        {"dry_run": false}
    """
    dry_run = request.dry_run if request else True

    try:
        sanitizer = OperationsFactory.create_sanitizer(store, collection)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown collection: {collection}")

    result = sanitizer.sanitize(dry_run=dry_run)

    if dry_run:
        message = f"Dry run: {result.records_skipped} records would be cleaned"
    else:
        message = f"Cleaned {result.records_cleaned} of {result.records_scanned} records"

    return SanitizeResponse(
        collection=result.collection,
        operation=result.operation,
        dry_run=dry_run,
        records_scanned=result.records_scanned,
        records_cleaned=result.records_cleaned,
        records_skipped=result.records_skipped,
        errors=result.errors,
        details=result.details,
        message=message,
    )


# ============================================================================
# Verify Endpoint
# ============================================================================

@router.get("/verify", response_model=VerifyIntegrityResponse)
async def verify_integrity(store: CollectionStore = Depends(get_store)):
    """Run the integrity checks

    Returns:
        passed: True if every check passes
        hard_passed: True if every hard check passes
        checks: Detailed results for each check
    """
    result = OperationsFactory.create_integrity_checker(store).verify_database_integrity()

    return VerifyIntegrityResponse(
        passed=result.passed,
        hard_passed=result.hard_passed,
        checks=[
            IntegrityCheckDetail(
                name=c.name,
                passed=c.passed,
                message=c.message,
                severity=c.severity,
                details=c.details,
            ) for c in result.checks
        ],
        errors=result.errors,
    )

"""
Admin Pricing API - FastAPI router for pricing structure management.

Access control is expected to sit in front of this router (reverse proxy
or gateway); the routes themselves do not authenticate.
"""
from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from pydantic import BaseModel

from ..engine import RulesTableError
from ..rules import price_list
from ..services.rules_store import RulesStore, validate_pricing
from .state import get_store

router = APIRouter(prefix="/api/admin/pricing", tags=["admin"])


class UpdateResponse(BaseModel):
    """Response model for a pricing update."""
    success: bool
    backup: str | None
    warnings: list[str]


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


class BackupResponse(BaseModel):
    """Response model for a backup file."""
    filename: str
    size: int
    created_at: str


@router.get("")
def get_pricing(store: RulesStore = Depends(get_store)):
    """Current pricing structure."""
    return store.snapshot().to_dict()


@router.put("", response_model=UpdateResponse)
def update_pricing(data: Any = Body(...), store: RulesStore = Depends(get_store)):
    """Replace the pricing structure. The previous file is backed up first."""
    result = store.update(data)
    return UpdateResponse(success=True, backup=result.backup, warnings=result.warnings)


@router.post("/validate", response_model=ValidationResponse)
def validate_structure(data: Any = Body(...)):
    """Validate a pricing structure without saving."""
    result = validate_pricing(data)
    return ValidationResponse(valid=result.valid, errors=result.errors, warnings=result.warnings)


@router.get("/backups", response_model=list[BackupResponse])
def list_backups(store: RulesStore = Depends(get_store)):
    """List backups of replaced pricing files, newest first."""
    return [BackupResponse(**b.__dict__) for b in store.list_backups()]


@router.post("/reload")
def reload_pricing(store: RulesStore = Depends(get_store)):
    """Re-read the pricing file from disk."""
    table = store.reload()
    return {"success": True, "loaded_at": store.loaded_at, "counts": table.counts()}


@router.get("/price-list")
def export_price_list(store: RulesStore = Depends(get_store)):
    """Current pricing structure as a flat CSV price list."""
    return Response(
        content=price_list.to_csv_text(store.snapshot()),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="price-list.csv"'},
    )


@router.put("/price-list", response_model=UpdateResponse)
async def import_price_list(request: Request, store: RulesStore = Depends(get_store)):
    """Replace the pricing structure from a CSV price list (request body)."""
    text = (await request.body()).decode('utf-8-sig')
    aliases = dict(store.snapshot().template_aliases)
    structure, errors = await run_in_threadpool(price_list.from_csv_text, text, aliases)
    if errors:
        raise RulesTableError(errors)

    # File writes stay off the event loop
    result = await run_in_threadpool(store.update, structure)
    return UpdateResponse(success=True, backup=result.backup, warnings=result.warnings)

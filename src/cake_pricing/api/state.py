"""
Shared service instances for the API.

Routes receive these through FastAPI dependencies so tests can swap in a
store backed by a temporary rules file.
"""
from typing import Optional

from fastapi import Depends

from ..config.settings import get_settings
from ..engine import PricingEngine
from ..services.rules_store import RulesStore

_store: Optional[RulesStore] = None


def get_store() -> RulesStore:
    """The process-wide rules store, created on first use."""
    global _store
    if _store is None:
        settings = get_settings()
        _store = RulesStore(settings.pricing_structure, settings.backups_dir)
    return _store


def get_engine(store: RulesStore = Depends(get_store)) -> PricingEngine:
    return PricingEngine(store)

import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from .. import __version__
from ..config.settings import get_settings
from ..engine import PricingEngine, RulesTableError, ValidationError
from ..services.rules_store import RulesStore
from .admin_api import router as admin_router
from .state import get_engine, get_store

settings = get_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Cake Pricing API",
    description="Price calculation and pricing structure management for the cake storefront",
    version=__version__
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Pricing structure management
app.include_router(admin_router)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"message": exc.message})


@app.exception_handler(RulesTableError)
async def rules_table_error_handler(request: Request, exc: RulesTableError):
    return JSONResponse(
        status_code=400,
        content={"message": "Invalid pricing structure", "errors": exc.errors, "warnings": exc.warnings}
    )


class CalculatePriceRequest(BaseModel):
    """
    Cake configuration as sent by the builder.

    Fields are deliberately untyped: the engine coerces strings, negatives
    and missing values itself instead of rejecting the request.
    """
    model_config = ConfigDict(extra="allow")

    sixInchCakes: Any = None
    eightInchCakes: Any = None
    layers: Any = None
    servings: Any = None
    shape: Any = None
    flavors: Any = None
    icingType: Any = None
    decorations: Any = None
    dietaryRestrictions: Any = None
    template: Optional[Any] = None


@app.get("/")
async def root():
    return {"status": "online", "message": "Cake Pricing API Active"}


@app.get("/health", tags=["Monitoring"])
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy"}


@app.post("/api/calculate-price", tags=["Pricing"])
async def calculate_price(req: CalculatePriceRequest, engine: PricingEngine = Depends(get_engine)):
    """Itemized price for one cake configuration (all amounts in cents)."""
    payload = req.model_dump(exclude_none=True)
    try:
        breakdown = engine.calculate_payload(payload)
    except ValidationError:
        raise
    except Exception:
        logger.exception("Pricing calculation error")
        return JSONResponse(status_code=500, content={"message": "Failed to calculate price"})
    return breakdown.to_dict()


@app.get("/api/pricing-structure", tags=["Pricing"])
async def get_pricing_structure(store: RulesStore = Depends(get_store)):
    """Current pricing rules table (read-only)."""
    return store.snapshot().to_dict()


@app.get("/system/status", tags=["Monitoring"])
def get_status(store: RulesStore = Depends(get_store)):
    stats = store.get_stats()
    return {
        "engine_active": True,
        "version": __version__,
        **stats,
    }

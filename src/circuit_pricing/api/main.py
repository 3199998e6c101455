import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ..config.logging_config import setup_logging
from ..config.settings import get_settings
from ..data.store import QuoteStore
from ..engine.models import CarrierQuote, Category, Viewer
from ..engine.pricing_engine import PricingEngine, resolve_price
from ..services.notification_service import NotificationService
from .categories_api import router as categories_router
from .state import get_engine, get_notification_service, get_store

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    log.info("Circuit Pricing API starting")
    yield


app = FastAPI(
    title="Circuit Pricing API",
    description="Carrier quote pricing and agent notifications",
    version="1.0.0",
    lifespan=lifespan,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include category management API
app.include_router(categories_router)


class CarrierQuoteIn(BaseModel):
    carrier: str = ""
    type: str = ""
    speed: str = ""
    price: Optional[float] = None
    term: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None
    install_fee: Optional[bool] = None
    install_fee_amount: Optional[float] = None
    static_ip: Optional[bool] = None
    static_ip_fee_amount: Optional[float] = None
    static_ip_5: Optional[bool] = None
    static_ip_5_fee_amount: Optional[float] = None
    other_costs: Optional[float] = None
    no_service: Optional[bool] = None
    site_survey_needed: Optional[bool] = None
    site_survey_priority: Optional[str] = None
    id: Optional[str] = None


class CategoryIn(BaseModel):
    name: str
    type: Optional[str] = None
    minimum_markup: Optional[float] = None
    is_active: bool = True


class PriceRequest(BaseModel):
    quote: CarrierQuoteIn
    viewer_is_admin: Optional[bool] = None
    viewer_email: Optional[str] = None
    # Overrides the stored category table when given
    categories: Optional[list[CategoryIn]] = None


class CompletionRequest(BaseModel):
    circuit_quote_id: str


class PriceAvailableRequest(BaseModel):
    carrier_quote_id: str


def _viewer(store: QuoteStore, viewer_email: Optional[str], viewer_is_admin: Optional[bool]) -> Viewer:
    if viewer_is_admin is None:
        viewer_is_admin = store.is_admin(viewer_email)
    return Viewer(is_admin=viewer_is_admin, email=viewer_email)


@app.get("/")
async def root():
    return {"status": "online", "message": "Circuit Pricing API Active"}


@app.post("/pricing/resolve")
async def resolve_quote_price(
    req: PriceRequest,
    engine: PricingEngine = Depends(get_engine),
    store: QuoteStore = Depends(get_store)
):
    """Price a single carrier quote for a viewer."""
    try:
        quote = CarrierQuote.from_record(req.quote.model_dump())
        viewer = _viewer(store, req.viewer_email, req.viewer_is_admin)
        if req.categories is not None:
            categories = [Category(**c.model_dump()) for c in req.categories]
            breakdown = resolve_price(quote, viewer.is_admin, categories)
        else:
            breakdown = engine.price(quote, viewer)
        return breakdown.to_dict()
    except Exception as e:
        log.exception("Pricing failed")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/circuit-quotes/{circuit_quote_id}/carriers")
async def list_priced_carriers(
    circuit_quote_id: str,
    viewer_email: Optional[str] = None,
    viewer_is_admin: Optional[bool] = None,
    engine: PricingEngine = Depends(get_engine),
    store: QuoteStore = Depends(get_store)
):
    """Every carrier quote of a circuit quote, priced for the viewer."""
    try:
        circuit_quote = store.get_circuit_quote(circuit_quote_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))

    viewer = _viewer(store, viewer_email, viewer_is_admin)
    carriers = store.list_carrier_quotes(circuit_quote_id)
    return {
        "circuit_quote": circuit_quote,
        "viewer_is_admin": viewer.is_admin,
        "carriers": [
            {
                "id": quote.id,
                "carrier": quote.carrier,
                "type": quote.type,
                "speed": quote.speed,
                "term": quote.term,
                "color": quote.color,
                "pricing": breakdown.to_dict(),
            }
            for quote, breakdown in zip(carriers, engine.price_many(carriers, viewer))
        ],
    }


@app.post("/notifications/completion")
def send_completion_notification(
    req: CompletionRequest,
    service: NotificationService = Depends(get_notification_service)
):
    try:
        result = service.send_completion_notification(req.circuit_quote_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except Exception as e:
        log.exception("Completion notification failed for %s", req.circuit_quote_id)
        raise HTTPException(status_code=500, detail=str(e))
    return jsonable_encoder(result)


@app.post("/notifications/price-available")
def send_price_available_notification(
    req: PriceAvailableRequest,
    service: NotificationService = Depends(get_notification_service)
):
    try:
        result = service.send_price_available_notification(req.carrier_quote_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]))
    except Exception as e:
        log.exception("Price notification failed for %s", req.carrier_quote_id)
        raise HTTPException(status_code=500, detail=str(e))
    return jsonable_encoder(result)


@app.get("/system/status")
def get_status(engine: PricingEngine = Depends(get_engine)):
    settings = get_settings()
    has_report = settings.build_report.exists()
    return {
        "engine_active": True,
        "categories_loaded": len(engine.categories),
        "categories_with_markup": sum(
            1 for c in engine.categories if c.minimum_markup and c.minimum_markup > 0
        ),
        "category_last_build": settings.build_report.stat().st_mtime if has_report else None,
        "smtp_configured": settings.smtp_configured,
    }


@app.post("/system/reload")
def reload_data(engine: PricingEngine = Depends(get_engine)):
    engine.reload_data()
    return {"success": True, "categories_loaded": len(engine.categories)}

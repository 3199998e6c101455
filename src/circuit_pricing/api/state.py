"""
Shared service instances for the API.

Built on first use so importing the app never touches the data files.
Tests swap them through FastAPI dependency overrides.
"""
from typing import Optional

from ..config.settings import get_settings
from ..data.store import QuoteStore
from ..engine.pricing_engine import PricingEngine
from ..services.category_service import CategoryService
from ..services.email_sender import build_sender
from ..services.notification_service import NotificationService

_store: Optional[QuoteStore] = None
_engine: Optional[PricingEngine] = None
_notifications: Optional[NotificationService] = None


def get_store() -> QuoteStore:
    global _store
    if _store is None:
        _store = QuoteStore(get_settings())
    return _store


def get_engine() -> PricingEngine:
    global _engine
    if _engine is None:
        _engine = PricingEngine(store=get_store())
    return _engine


def get_category_service() -> CategoryService:
    return CategoryService(get_settings().categories_csv)


def get_notification_service() -> NotificationService:
    global _notifications
    if _notifications is None:
        settings = get_settings()
        _notifications = NotificationService(get_store(), build_sender(settings), settings)
    return _notifications

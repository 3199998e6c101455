"""Engine subpackage - carrier quote price resolution."""
from .pricing_engine import PricingEngine, resolve_price, parse_term_months
from .models import CarrierQuote, Category, Viewer, PriceBreakdown, SiteSurveyColor

__all__ = [
    'PricingEngine', 'resolve_price', 'parse_term_months',
    'CarrierQuote', 'Category', 'Viewer', 'PriceBreakdown', 'SiteSurveyColor',
]

"""
Data models for the circuit pricing engine.

Uses dataclasses for structured, type-safe data representation. Records
coming from the store or an HTTP body are loosely typed, so every model
has a ``from_record`` constructor that coerces instead of failing.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def parse_bool(value: Any) -> bool:
    """Parse a boolean from a CSV/JSON value."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    if isinstance(value, (int, float)):
        return not math.isnan(value) and value != 0
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


def parse_number(value: Any) -> float:
    """Parse a number; missing, blank, NaN or malformed values become 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def parse_optional_number(value: Any) -> Optional[float]:
    """Parse optional number (blank/NaN = None)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip() == '':
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def parse_optional_str(value: Any) -> Optional[str]:
    """Parse optional string (empty/NaN = None)."""
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


class SiteSurveyColor(str, Enum):
    """Construction-risk priority of a site survey."""
    RED = "red"
    YELLOW = "yellow"
    ORANGE = "orange"
    GREEN = "green"

    @classmethod
    def parse(cls, value: Any) -> Optional['SiteSurveyColor']:
        text = parse_optional_str(value)
        if not text:
            return None
        try:
            return cls(text.lower())
        except ValueError:
            return None


@dataclass
class TraceStep:
    """A single step in the price resolution trace."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class CarrierQuote:
    """One vendor's offer for one circuit at one location."""
    carrier: str
    type: str
    speed: str = ""
    price: float = 0.0
    term: Optional[str] = None
    notes: Optional[str] = None
    color: Optional[str] = None

    # Add-ons, each independently toggleable
    install_fee: bool = False
    install_fee_amount: float = 0.0
    static_ip: bool = False  # one usable IP, /30
    static_ip_fee_amount: float = 0.0
    static_ip_5: bool = False  # five usable IPs, /29
    static_ip_5_fee_amount: float = 0.0
    other_costs: float = 0.0

    # Status flags
    no_service: bool = False
    site_survey_needed: bool = False
    site_survey_priority: Optional[SiteSurveyColor] = None

    # Persistence identity
    id: Optional[str] = None
    circuit_quote_id: Optional[str] = None
    display_order: Optional[int] = None

    @classmethod
    def from_record(cls, record: dict) -> 'CarrierQuote':
        """Create a CarrierQuote from a store row or request body."""
        order = parse_optional_number(record.get('display_order'))
        return cls(
            carrier=parse_optional_str(record.get('carrier')) or "",
            type=parse_optional_str(record.get('type')) or "",
            speed=parse_optional_str(record.get('speed')) or "",
            price=parse_number(record.get('price')),
            term=parse_optional_str(record.get('term')),
            notes=parse_optional_str(record.get('notes')),
            color=parse_optional_str(record.get('color')),
            install_fee=parse_bool(record.get('install_fee')),
            install_fee_amount=parse_number(record.get('install_fee_amount')),
            static_ip=parse_bool(record.get('static_ip')),
            static_ip_fee_amount=parse_number(record.get('static_ip_fee_amount')),
            static_ip_5=parse_bool(record.get('static_ip_5')),
            static_ip_5_fee_amount=parse_number(record.get('static_ip_5_fee_amount')),
            other_costs=parse_number(record.get('other_costs')),
            no_service=parse_bool(record.get('no_service')),
            site_survey_needed=parse_bool(record.get('site_survey_needed')),
            site_survey_priority=SiteSurveyColor.parse(record.get('site_survey_priority')),
            id=parse_optional_str(record.get('id')),
            circuit_quote_id=parse_optional_str(record.get('circuit_quote_id')),
            display_order=int(order) if order is not None else None,
        )

    @property
    def is_pending(self) -> bool:
        """A zero or missing price means the vendor has not priced yet."""
        return not self.price


@dataclass
class Category:
    """Circuit-type classification with its minimum markup policy."""
    name: str
    type: Optional[str] = None
    minimum_markup: Optional[float] = None  # percent
    is_active: bool = True
    description: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_record(cls, record: dict) -> 'Category':
        """Create a Category from a store row or request body."""
        active = record.get('is_active')
        return cls(
            name=parse_optional_str(record.get('name')) or "",
            type=parse_optional_str(record.get('type')),
            minimum_markup=parse_optional_number(record.get('minimum_markup')),
            is_active=True if parse_optional_str(active) is None else parse_bool(active),
            description=parse_optional_str(record.get('description')),
            id=parse_optional_str(record.get('id')),
        )

    def to_record(self) -> dict:
        return {
            'id': self.id or '',
            'name': self.name,
            'type': self.type or '',
            'minimum_markup': '' if self.minimum_markup is None else self.minimum_markup,
            'is_active': 'true' if self.is_active else 'false',
            'description': self.description or '',
        }


@dataclass
class Viewer:
    """Who is looking at a price."""
    is_admin: bool = False
    email: Optional[str] = None
    # Stored on the agent record but not applied to carrier pricing
    commission_rate: Optional[float] = None


@dataclass
class PriceBreakdown:
    """Complete result of resolving one carrier quote's display price."""
    display_price: float
    base_price_without_add_ons: float
    ticked_options: list[str] = field(default_factory=list)

    term_months: int = 36
    add_on_total: float = 0.0
    base_price_with_add_ons: float = 0.0
    markup_percent: float = 0.0
    category_name: Optional[str] = None
    is_pending: bool = False
    no_service: bool = False
    trace: list[TraceStep] = field(default_factory=list)

    def add_trace(self, step: str, description: str, value: str = None):
        """Add a step to the trace for this price."""
        self.trace.append(TraceStep(step=step, description=description, value=value))

    def get_trace_text(self) -> str:
        """Get human-readable trace as formatted text."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"→ {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"→ {t.step}: {t.description}")
        return "\n".join(lines)

    @property
    def has_add_on_delta(self) -> bool:
        """True when the before-extras figure differs from the display price."""
        return abs(self.display_price - self.base_price_without_add_ons) >= 0.005

    def to_dict(self) -> dict:
        return {
            "display_price": self.display_price,
            "base_price_without_add_ons": self.base_price_without_add_ons,
            "ticked_options": list(self.ticked_options),
            "term_months": self.term_months,
            "add_on_total": self.add_on_total,
            "base_price_with_add_ons": self.base_price_with_add_ons,
            "markup_percent": self.markup_percent,
            "category_name": self.category_name,
            "is_pending": self.is_pending,
            "no_service": self.no_service,
            "trace": [
                {"step": t.step, "description": t.description, "value": t.value}
                for t in self.trace
            ],
        }

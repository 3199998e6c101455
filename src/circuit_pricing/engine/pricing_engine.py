"""
Pricing Engine - Resolves the monthly price shown for a carrier quote.

One implementation serves every call site (API, Streamlit viewer and the
agent notifications) so the figures they show cannot drift apart:
- Term parsing and install fee amortization
- Add-on aggregation (static IPs, install fee, other MRC)
- Category markup for non-admin viewers
- Ticked option labels and an execution trace
"""
import math
import re
from typing import Iterable, Optional

from .category_matcher import find_matching_category
from .models import CarrierQuote, Category, PriceBreakdown, Viewer
from .site_survey import site_survey_color

DEFAULT_TERM_MONTHS = 36

_MONTHS_PATTERN = re.compile(r"(\d+)\s*month", re.IGNORECASE)
_YEARS_PATTERN = re.compile(r"(\d+)\s*year", re.IGNORECASE)


def parse_term_months(term: Optional[str]) -> int:
    """
    Contract length in months from a free-text term.

    "24 months" -> 24, "3 years" -> 36, anything else -> 36.
    """
    if not term:
        return DEFAULT_TERM_MONTHS

    text = str(term)
    months = None
    match = _MONTHS_PATTERN.search(text)
    if match:
        months = int(match.group(1))
    else:
        match = _YEARS_PATTERN.search(text)
        if match:
            months = int(match.group(1)) * 12

    # "0 months" cannot amortize anything
    if not months:
        return DEFAULT_TERM_MONTHS
    return months


def compute_add_on_total(quote: CarrierQuote, term_months: int) -> float:
    """Monthly value of every active add-on, install fee amortized over the term."""
    total = 0.0
    if quote.static_ip and quote.static_ip_fee_amount:
        total += quote.static_ip_fee_amount
    if quote.static_ip_5 and quote.static_ip_5_fee_amount:
        total += quote.static_ip_5_fee_amount
    if quote.install_fee and quote.install_fee_amount:
        total += quote.install_fee_amount / term_months
    if quote.other_costs and quote.other_costs > 0:
        total += quote.other_costs
    return total


def apply_markup(amount: float, markup_percent: float) -> float:
    """Sell price = cost * (1 + markup), rounded half-up to the cent."""
    return math.floor(amount * (1 + markup_percent / 100) * 100 + 0.5) / 100


def resolve_markup_percent(
    quote_type: Optional[str],
    categories: Iterable[Category]
) -> tuple[float, Optional[Category]]:
    """
    Markup percentage for a circuit type.

    Returns (percent, matched category). Percent is 0.0 when nothing
    matches or the matched category has no positive minimum markup.
    """
    matched = find_matching_category(quote_type, categories)
    if matched is None:
        return 0.0, None
    return matched.markup_percent, matched.category


def _format_fee(amount: float) -> str:
    if float(amount).is_integer():
        return f"${amount:,.0f}"
    return f"${amount:,.2f}"


def ticked_options(quote: CarrierQuote) -> list[str]:
    """Human-readable labels for the options ticked on a quote."""
    options = []
    if quote.no_service:
        options.append("No Service")
    if quote.install_fee:
        options.append(f"Install Fee ({_format_fee(quote.install_fee_amount)})")
    if quote.static_ip:
        options.append(f"1 Static IP (/30) ({_format_fee(quote.static_ip_fee_amount)})")
    if quote.static_ip_5:
        options.append(f"5 Static IPs (/29) ({_format_fee(quote.static_ip_5_fee_amount)})")
    if quote.other_costs and quote.other_costs > 0:
        options.append(f"Other MRC Cost ({_format_fee(quote.other_costs)})")
    if quote.site_survey_needed:
        options.append(f"Site Survey ({site_survey_color(quote).value.upper()})")
    return options


def resolve_price(
    quote: CarrierQuote,
    viewer_is_admin: bool,
    categories: Optional[Iterable[Category]] = None
) -> PriceBreakdown:
    """
    Resolve the display price of a carrier quote for a viewer.

    Resolution order:
    1. Parse the term into months (default 36)
    2. Sum the active add-ons, amortizing the install fee over the term
    3. Add them to the base monthly price
    4. Admins, pending prices and no-service quotes see raw cost
    5. Everyone else sees cost marked up by the matching category's
       minimum markup, rounded to the cent

    Never raises: malformed numbers are treated as 0 by the model layer.
    """
    categories = list(categories or [])
    base_price = quote.price or 0.0

    term_months = parse_term_months(quote.term)
    add_on_total = compute_add_on_total(quote, term_months)
    base_with_add_ons = base_price + add_on_total

    breakdown = PriceBreakdown(
        display_price=base_with_add_ons,
        base_price_without_add_ons=base_price,
        ticked_options=ticked_options(quote),
        term_months=term_months,
        add_on_total=add_on_total,
        base_price_with_add_ons=base_with_add_ons,
        is_pending=quote.is_pending,
        no_service=quote.no_service,
    )

    breakdown.add_trace("Term", f"Parsed '{quote.term or ''}'", f"{term_months} months")
    breakdown.add_trace("Add-ons", "Monthly add-on total", f"${add_on_total:.2f}")
    breakdown.add_trace("Base", "Price with add-ons", f"${base_with_add_ons:.2f}")

    if viewer_is_admin:
        breakdown.add_trace("Markup", "Admin viewer sees raw cost")
        return breakdown
    if quote.is_pending:
        breakdown.add_trace("Markup", "Price pending, no markup")
        return breakdown
    if quote.no_service:
        breakdown.add_trace("Markup", "No service at location, no markup")
        return breakdown

    markup_percent, category = resolve_markup_percent(quote.type, categories)
    if category is not None:
        breakdown.category_name = category.name
        breakdown.add_trace("Category", f"Matched circuit type '{quote.type}'", category.name)
    else:
        breakdown.add_trace("Category", f"No category for circuit type '{quote.type}'")

    if markup_percent > 0:
        breakdown.markup_percent = markup_percent
        breakdown.display_price = apply_markup(base_with_add_ons, markup_percent)
        breakdown.base_price_without_add_ons = apply_markup(base_price, markup_percent)
        breakdown.add_trace(
            "Markup",
            f"Applied {markup_percent:g}% minimum markup",
            f"${breakdown.display_price:.2f}"
        )
    else:
        breakdown.add_trace("Markup", "No markup policy, showing cost")

    return breakdown


class PricingEngine:
    """
    Prices carrier quotes against the active category markup table.

    Holds the category list so callers only supply the quote and viewer;
    all arithmetic is delegated to ``resolve_price``.
    """

    def __init__(self, categories: Optional[Iterable[Category]] = None, store=None):
        self.store = store
        if categories is not None:
            self.categories = list(categories)
        elif store is not None:
            self.categories = store.list_categories(active_only=True)
        else:
            self.categories = []

    def reload_data(self):
        """Reload the category table from the store."""
        if self.store is not None:
            self.store.reload()
            self.categories = self.store.list_categories(active_only=True)

    def price(self, quote: CarrierQuote, viewer: Viewer) -> PriceBreakdown:
        """Price one quote for a viewer."""
        return resolve_price(quote, viewer.is_admin, self.categories)

    def price_many(self, quotes: Iterable[CarrierQuote], viewer: Viewer) -> list[PriceBreakdown]:
        """Price a list of quotes for the same viewer, preserving order."""
        return [self.price(quote, viewer) for quote in quotes]

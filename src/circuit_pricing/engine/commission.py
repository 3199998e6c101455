"""
Markup / commission check for quote line items.

An agent may sell below a category's minimum markup, but every point of
markup given up comes out of the agent's commission, up to the agent's
full rate. Carrier display pricing does not use this.
"""
from dataclasses import dataclass
from typing import Optional

from .models import Category


@dataclass
class MarkupCommission:
    """Result of checking a sell price against the category minimum."""
    minimum_markup: float
    current_markup: float
    max_markup_reduction: float
    commission_reduction: float
    final_commission_rate: float
    is_valid: bool
    error_message: Optional[str] = None


def calculate_markup_and_commission(
    cost: float,
    sell_price: float,
    agent_commission_rate: float,
    category: Optional[Category] = None
) -> MarkupCommission:
    """Compute markup, commission reduction and validity for a sell price."""
    minimum_markup = (category.minimum_markup or 0.0) if category else 0.0
    current_markup = ((sell_price - cost) / cost) * 100 if cost > 0 else 0.0

    max_markup_reduction = min(minimum_markup, agent_commission_rate)

    markup_reduction = max(0.0, minimum_markup - current_markup)
    commission_reduction = min(markup_reduction, agent_commission_rate)
    final_commission_rate = max(0.0, agent_commission_rate - commission_reduction)

    is_valid = current_markup >= 0 and commission_reduction <= agent_commission_rate

    error_message = None
    if current_markup < 0:
        error_message = "Sell price cannot be below cost"
    elif commission_reduction > agent_commission_rate:
        error_message = (
            f"Reducing markup below {minimum_markup:g}% would require more commission "
            f"reduction than available ({agent_commission_rate:g}%)"
        )

    return MarkupCommission(
        minimum_markup=minimum_markup,
        current_markup=current_markup,
        max_markup_reduction=max_markup_reduction,
        commission_reduction=commission_reduction,
        final_commission_rate=final_commission_rate,
        is_valid=is_valid,
        error_message=error_message,
    )


def markup_validation_message(
    cost: float,
    sell_price: float,
    agent_commission_rate: float,
    category: Optional[Category] = None
) -> Optional[str]:
    """Warning to show next to a line item, or None when nothing to report."""
    calc = calculate_markup_and_commission(cost, sell_price, agent_commission_rate, category)

    if not calc.is_valid:
        return calc.error_message or "Invalid markup configuration"

    if calc.commission_reduction > 0:
        return (
            f"Commission reduced by {calc.commission_reduction:.1f}% due to markup "
            f"below minimum ({calc.minimum_markup:g}%)"
        )

    return None

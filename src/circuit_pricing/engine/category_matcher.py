"""
Category Matcher - Finds the markup policy that applies to a circuit type.

Used by the pricing engine to look up the minimum markup for a
carrier quote's circuit type.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from .models import Category


@dataclass
class MatchedCategory:
    """A category that matched with context."""
    category: Category
    position: int
    match_reason: str

    @property
    def markup_percent(self) -> float:
        """Positive minimum markup, or 0.0 when the category has no policy."""
        markup = self.category.minimum_markup
        if markup is None or markup <= 0:
            return 0.0
        return float(markup)


def category_matches(category: Category, quote_type: str) -> Optional[str]:
    """
    Test one category against a circuit type.

    Returns the match reason, or None when the category does not apply.
    """
    if not category.is_active:
        return None

    wanted = quote_type.lower()

    # Type equality
    if category.type is not None and category.type.lower() == wanted:
        return f"type={wanted}"

    # Circuit type named inside the category name
    if wanted in (category.name or "").lower():
        return f"name contains {wanted}"

    return None


def find_matching_category(
    quote_type: Optional[str],
    categories: Iterable[Category]
) -> Optional[MatchedCategory]:
    """
    Find the category whose markup applies to ``quote_type``.

    Categories are scanned in list order and the first one satisfying
    either predicate wins. Neither predicate outranks the other, so
    callers control precedence through the order of ``categories``.

    Types are compared as stored, without trimming. A blank type is a
    substring of every name, so it takes the first active category.
    """
    if quote_type is None:
        return None

    for position, category in enumerate(categories or []):
        reason = category_matches(category, quote_type)
        if reason:
            return MatchedCategory(
                category=category,
                position=position,
                match_reason=reason,
            )

    return None

"""
Quote Store - CSV-backed tables for categories, quotes and profiles.

Stands in for the hosted database. Every table is optional: a missing
file loads as an empty table so pricing still works (without markup
when the category table is absent).
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from ..config.settings import get_settings, Settings
from ..engine.models import CarrierQuote, Category

log = logging.getLogger(__name__)

CATEGORY_COLUMNS = ['id', 'name', 'type', 'minimum_markup', 'is_active', 'description']

CARRIER_QUOTE_COLUMNS = [
    'id', 'circuit_quote_id', 'display_order', 'carrier', 'type', 'speed', 'price',
    'term', 'notes', 'color', 'install_fee', 'install_fee_amount', 'static_ip',
    'static_ip_fee_amount', 'static_ip_5', 'static_ip_5_fee_amount', 'other_costs',
    'no_service', 'site_survey_needed', 'site_survey_priority',
]

CIRCUIT_QUOTE_COLUMNS = [
    'id', 'client_name', 'location', 'suite', 'deal_name', 'status',
    'agent_email', 'agent_first_name', 'agent_last_name',
]

PROFILE_COLUMNS = ['email', 'role']


def load_table(path: Optional[Path], columns: list[str]) -> pd.DataFrame:
    """Read a CSV as strings with stripped cells; missing file -> empty table."""
    if path is None or not path.exists():
        return pd.DataFrame(columns=columns)

    try:
        df = pd.read_csv(path, dtype=str).fillna('')
    except pd.errors.EmptyDataError:
        return pd.DataFrame(columns=columns)
    df.columns = [c.strip() for c in df.columns]
    for col in df.columns:
        df[col] = df[col].astype(str).str.strip()
    for col in columns:
        if col not in df.columns:
            df[col] = ''
    return df


def _row_dict(row: pd.Series) -> dict:
    return {k: (None if v == '' else v) for k, v in row.to_dict().items()}


class QuoteStore:
    """Read access to the circuit quote tables."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.reload()

    def reload(self):
        """Reload every table from disk."""
        self.categories = self._load_categories()
        self.carrier_quotes = load_table(self.settings.carrier_quotes_csv, CARRIER_QUOTE_COLUMNS)
        self.circuit_quotes = load_table(self.settings.circuit_quotes_csv, CIRCUIT_QUOTE_COLUMNS)
        self.profiles = load_table(self.settings.profiles_csv, PROFILE_COLUMNS)

    def _load_categories(self) -> pd.DataFrame:
        # A broken category table means "no markup policy", not an outage
        try:
            return load_table(self.settings.categories_csv, CATEGORY_COLUMNS)
        except (OSError, pd.errors.ParserError) as e:
            log.error("Failed to load categories from %s: %s", self.settings.categories_csv, e)
            return pd.DataFrame(columns=CATEGORY_COLUMNS)

    def list_categories(self, active_only: bool = True) -> list[Category]:
        """Categories in file order, optionally only the active ones."""
        categories = [Category.from_record(_row_dict(row)) for _, row in self.categories.iterrows()]
        if active_only:
            categories = [c for c in categories if c.is_active]
        return categories

    def get_circuit_quote(self, circuit_quote_id: str) -> dict:
        """Get a circuit quote row; raises KeyError when unknown."""
        circuit_quote_id = str(circuit_quote_id).strip()
        match = self.circuit_quotes[self.circuit_quotes['id'] == circuit_quote_id]
        if match.empty:
            raise KeyError(f"Circuit quote '{circuit_quote_id}' not found")
        return _row_dict(match.iloc[0])

    def list_carrier_quotes(self, circuit_quote_id: str) -> list[CarrierQuote]:
        """Carrier quotes of a circuit quote, ordered by display_order."""
        circuit_quote_id = str(circuit_quote_id).strip()
        rows = self.carrier_quotes[self.carrier_quotes['circuit_quote_id'] == circuit_quote_id]
        quotes = [CarrierQuote.from_record(_row_dict(row)) for _, row in rows.iterrows()]
        # Unordered rows keep file order after the ordered ones
        return sorted(
            quotes,
            key=lambda q: (q.display_order is None, q.display_order or 0)
        )

    def get_carrier_quote(self, carrier_quote_id: str) -> CarrierQuote:
        """Get a single carrier quote; raises KeyError when unknown."""
        carrier_quote_id = str(carrier_quote_id).strip()
        match = self.carrier_quotes[self.carrier_quotes['id'] == carrier_quote_id]
        if match.empty:
            raise KeyError(f"Carrier quote '{carrier_quote_id}' not found")
        return CarrierQuote.from_record(_row_dict(match.iloc[0]))

    def is_admin(self, email: Optional[str]) -> bool:
        """True when the profile for ``email`` has the admin role."""
        if not email:
            return False
        email = email.strip().lower()
        match = self.profiles[self.profiles['email'].str.lower() == email]
        if match.empty:
            return False
        return match.iloc[0]['role'].lower() == 'admin'

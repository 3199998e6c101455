"""
Site survey priority decoding.

Older carrier quotes carry the survey priority inside free-text notes as
``"Site Survey: <color>"``. Newer ones set ``site_survey_priority``
directly. The priority never affects price.
"""
import re
from dataclasses import dataclass
from typing import Optional

from .models import CarrierQuote, SiteSurveyColor

SITE_SURVEY_MARKER = "Site Survey:"

SITE_SURVEY_LABELS = {
    SiteSurveyColor.RED: "Construction needed",
    SiteSurveyColor.ORANGE: "Construction likely",
    SiteSurveyColor.YELLOW: "Possible Construction",
    SiteSurveyColor.GREEN: "No Construction",
}

# (text color, background color) used in notification rows
SITE_SURVEY_COLORS = {
    SiteSurveyColor.RED: ("#dc2626", "#fef2f2"),
    SiteSurveyColor.ORANGE: ("#ea580c", "#fff7ed"),
    SiteSurveyColor.YELLOW: ("#ca8a04", "#fefce8"),
    SiteSurveyColor.GREEN: ("#16a34a", "#f0fdf4"),
}

_MARKER_SEGMENT = re.compile(r"\s*\|?\s*Site Survey:\s*\S*")


@dataclass
class SiteSurveyStatus:
    """Display data for the site survey column."""
    text: str = ""
    color: str = ""
    bg_color: str = ""


def decode_site_survey_color(notes: Optional[str]) -> SiteSurveyColor:
    """Read the encoded survey color from notes, defaulting to red."""
    if not notes or SITE_SURVEY_MARKER not in notes:
        return SiteSurveyColor.RED

    remainder = notes.split(SITE_SURVEY_MARKER, 1)[1].strip().lower()
    tokens = remainder.split()
    if not tokens:
        return SiteSurveyColor.RED

    return SiteSurveyColor.parse(tokens[0]) or SiteSurveyColor.RED


def site_survey_color(quote: CarrierQuote) -> SiteSurveyColor:
    """Explicit priority first, then the legacy notes encoding."""
    if quote.site_survey_priority is not None:
        return quote.site_survey_priority
    return decode_site_survey_color(quote.notes)


def site_survey_label(color: SiteSurveyColor) -> str:
    return SITE_SURVEY_LABELS.get(color, SITE_SURVEY_LABELS[SiteSurveyColor.RED])


def site_survey_status(quote: CarrierQuote) -> SiteSurveyStatus:
    """Label and colors for a quote; blank when no survey is needed."""
    if not quote.site_survey_needed:
        return SiteSurveyStatus()

    color = site_survey_color(quote)
    text_color, bg_color = SITE_SURVEY_COLORS[color]
    return SiteSurveyStatus(
        text=site_survey_label(color),
        color=text_color,
        bg_color=bg_color,
    )


def strip_site_survey_marker(notes: Optional[str]) -> Optional[str]:
    """Notes with the encoded survey segment removed (None if nothing is left)."""
    if not notes:
        return notes
    cleaned = _MARKER_SEGMENT.sub("", notes).strip(" |")
    return cleaned or None

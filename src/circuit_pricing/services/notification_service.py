"""
Notification Service - Agent e-mails that carry carrier prices.

Two notifications exist:
- completion: every carrier of a circuit quote has been priced
- price available: one new carrier price was added

Prices come from the same resolver the interactive views use, for the
agent's own role, so the e-mail always matches what the agent sees on
the platform.
"""
import logging
from dataclasses import dataclass, field
from html import escape
from typing import Iterable, Optional

from ..config.settings import get_settings, Settings
from ..engine.models import CarrierQuote, Category, PriceBreakdown
from ..engine.pricing_engine import resolve_price
from ..engine.site_survey import SiteSurveyStatus, site_survey_status
from .email_sender import OutgoingEmail

log = logging.getLogger(__name__)

NO_AGENT_MESSAGE = "No agent notification needed - no agent found"


@dataclass
class CompletionRow:
    """One carrier line of the completion e-mail."""
    carrier: str
    type: str
    speed: str
    price: float
    term: Optional[str]
    site_survey_needed: bool
    site_survey_status: SiteSurveyStatus
    breakdown: PriceBreakdown
    carrier_quote_id: Optional[str] = None


@dataclass
class CompletionSummary:
    """Priced, filtered and sorted carriers for one circuit quote."""
    client_name: str
    location: str
    rows: list[CompletionRow] = field(default_factory=list)
    suite: Optional[str] = None
    deal_name: Optional[str] = None

    @property
    def site_survey_required(self) -> bool:
        return any(row.site_survey_needed for row in self.rows)


@dataclass
class NotificationResult:
    """Outcome of a notification request."""
    sent: bool
    message: str
    recipient: Optional[str] = None
    email_id: Optional[str] = None
    carriers_analyzed: int = 0
    rows: list[dict] = field(default_factory=list)


def format_usd(amount: float) -> str:
    """$1,234.56"""
    return f"${amount:,.2f}"


def build_completion_summary(
    circuit_quote: dict,
    carriers: Iterable[CarrierQuote],
    categories: Iterable[Category],
    viewer_is_admin: bool
) -> CompletionSummary:
    """
    Price every serviceable carrier for the recipient's role.

    No-service carriers are dropped; rows are sorted by carrier name,
    then by price from lowest to highest.
    """
    categories = list(categories or [])
    summary = CompletionSummary(
        client_name=circuit_quote.get('client_name') or "",
        location=circuit_quote.get('location') or "",
        suite=circuit_quote.get('suite'),
        deal_name=circuit_quote.get('deal_name'),
    )

    for carrier in carriers:
        if carrier.no_service:
            continue
        breakdown = resolve_price(carrier, viewer_is_admin, categories)
        summary.rows.append(CompletionRow(
            carrier=carrier.carrier,
            type=carrier.type,
            speed=carrier.speed,
            price=breakdown.display_price,
            term=carrier.term,
            site_survey_needed=carrier.site_survey_needed,
            site_survey_status=site_survey_status(carrier),
            breakdown=breakdown,
            carrier_quote_id=carrier.id,
        ))

    summary.rows.sort(key=lambda row: (row.carrier.casefold(), row.price))
    return summary


def _cell(content: str, extra_style: str = "") -> str:
    return f'<td style="padding: 8px; border: 1px solid #ddd;{extra_style}">{content}</td>'


def _render_row(row: CompletionRow) -> str:
    status = row.site_survey_status
    survey_style = ""
    if status.bg_color:
        survey_style = f" background-color: {status.bg_color}; color: {status.color}; font-weight: bold;"
    return "<tr>" + "".join([
        _cell(escape(row.carrier), " font-weight: bold;"),
        _cell(escape(row.type)),
        _cell(escape(row.speed)),
        _cell(f"${row.price:.2f}"),
        _cell(escape(row.term or 'N/A')),
        _cell(escape(status.text), survey_style),
    ]) + "</tr>"


def render_completion_email(
    summary: CompletionSummary,
    agent_name: str,
    platform_url: str
) -> tuple[str, str]:
    """Subject and HTML body of the completion e-mail."""
    subject = f"Circuit Pricing Complete - {summary.client_name}"

    details = [
        f"<p><strong>Client:</strong> {escape(summary.client_name)}</p>",
        f"<p><strong>Location:</strong> {escape(summary.location)}</p>",
    ]
    if summary.suite:
        details.append(f"<p><strong>Suite:</strong> {escape(summary.suite)}</p>")
    if summary.deal_name:
        details.append(f"<p><strong>Deal:</strong> {escape(summary.deal_name)}</p>")

    survey_warning = ""
    if summary.site_survey_required:
        survey_warning = (
            '<div style="background-color: #fef3c7; padding: 20px; border-left: 4px solid #f59e0b;">'
            '<h3 style="margin-top: 0; color: #92400e;">Site Survey Required</h3>'
            '<p style="color: #92400e;">One or more circuit options require a site survey. '
            'This may result in additional construction costs and extended installation timelines.</p>'
            '</div>'
        )

    headers = ["Carrier", "Type", "Speed", "Monthly Price", "Term", "Site Survey"]
    header_html = "".join(
        f'<th style="padding: 10px; border: 1px solid #ddd; text-align: left;">{h}</th>'
        for h in headers
    )
    rows_html = "".join(_render_row(row) for row in summary.rows)

    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto;">'
        '<h2 style="color: #333;">Circuit Pricing Complete</h2>'
        f"<p>Hello {escape(agent_name)},</p>"
        "<p>We have completed pricing all circuits for your client and are ready for your review:</p>"
        '<div style="background-color: #f5f5f5; padding: 20px;">'
        '<h3 style="margin-top: 0; color: #666;">Client Details</h3>'
        f"{''.join(details)}</div>"
        f"{survey_warning}"
        '<h3 style="color: #333;">Available Circuit Options</h3>'
        '<table style="width: 100%; border-collapse: collapse;">'
        f'<thead><tr style="background-color: #f0f0f0;">{header_html}</tr></thead>'
        f"<tbody>{rows_html}</tbody></table>"
        f'<p><a href="{escape(platform_url)}">View Details on Platform</a></p>'
        '<p style="color: #666; font-size: 14px;">This is an automated notification from the Universal Platform.<br>'
        "All pricing includes applicable markups and add-on costs.</p>"
        "</div>"
    )
    return subject, html


def build_price_available_notification(
    circuit_quote: dict,
    carrier_quote: CarrierQuote,
    categories: Iterable[Category],
    viewer_is_admin: bool,
    agent_name: str,
    platform_url: str
) -> tuple[str, str, PriceBreakdown]:
    """Subject, HTML body and breakdown of the single-carrier price notice."""
    client_name = circuit_quote.get('client_name') or ""
    breakdown = resolve_price(carrier_quote, viewer_is_admin, categories)
    subject = f"New Carrier Quote Price Available - {client_name}"

    lines = [
        f"<p><strong>Client:</strong> {escape(client_name)}</p>",
        f"<p><strong>Location:</strong> {escape(circuit_quote.get('location') or '')}</p>",
        f"<p><strong>Carrier:</strong> {escape(carrier_quote.carrier)}</p>",
        f"<p><strong>Speed:</strong> {escape(carrier_quote.speed)}</p>",
        f"<p><strong>Monthly Cost:</strong> {format_usd(breakdown.display_price)}</p>",
    ]
    if carrier_quote.term:
        lines.append(f"<p><strong>Term:</strong> {escape(carrier_quote.term)}</p>")

    html = (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #333;">New Carrier Quote Price Available</h2>'
        f"<p>Hello {escape(agent_name)},</p>"
        "<p>A new carrier quote price has been added and is ready for your review:</p>"
        f'<div style="background-color: #f5f5f5; padding: 20px;">{"".join(lines)}</div>'
        f'<p><a href="{escape(platform_url)}">View Quote on Platform</a></p>'
        '<p style="color: #666; font-size: 14px;">This is an automated notification from the Universal Platform.</p>'
        "</div>"
    )
    return subject, html, breakdown


def _agent(circuit_quote: dict) -> tuple[Optional[str], str]:
    email = (circuit_quote.get('agent_email') or "").strip() or None
    name = " ".join(
        part for part in (circuit_quote.get('agent_first_name'), circuit_quote.get('agent_last_name'))
        if part
    )
    return email, name


class NotificationService:
    """Compose and dispatch agent notifications for circuit quotes."""

    def __init__(self, store, sender, settings: Optional[Settings] = None):
        self.store = store
        self.sender = sender
        self.settings = settings or get_settings()

    def send_completion_notification(self, circuit_quote_id: str) -> NotificationResult:
        """E-mail the agent every priced carrier of a circuit quote."""
        circuit_quote = self.store.get_circuit_quote(circuit_quote_id)
        agent_email, agent_name = _agent(circuit_quote)
        if not agent_email:
            log.info(
                "Circuit quote %s has no agent; skipping completion notice", circuit_quote_id,
                extra={"circuit_quote_id": circuit_quote_id}
            )
            return NotificationResult(sent=False, message=NO_AGENT_MESSAGE)

        carriers = self.store.list_carrier_quotes(circuit_quote_id)
        categories = self.store.list_categories(active_only=True)
        is_admin = self.store.is_admin(agent_email)
        log.info(
            "Composing completion notice for %s (%d carriers, admin=%s)",
            circuit_quote_id, len(carriers), is_admin,
            extra={"circuit_quote_id": circuit_quote_id, "recipient": agent_email, "carriers": len(carriers)}
        )

        summary = build_completion_summary(circuit_quote, carriers, categories, is_admin)
        subject, html = render_completion_email(summary, agent_name, self.settings.platform_url)
        receipt = self.sender.send(OutgoingEmail(to=[agent_email], subject=subject, html=html))

        return NotificationResult(
            sent=True,
            message="Completion notification sent successfully",
            recipient=agent_email,
            email_id=receipt.message_id,
            carriers_analyzed=len(summary.rows),
            rows=[
                {
                    "carrier_quote_id": row.carrier_quote_id,
                    "carrier": row.carrier,
                    "type": row.type,
                    "speed": row.speed,
                    "price": row.price,
                    "term": row.term,
                    "site_survey": row.site_survey_status.text,
                }
                for row in summary.rows
            ],
        )

    def send_price_available_notification(self, carrier_quote_id: str) -> NotificationResult:
        """E-mail the agent one newly priced carrier quote."""
        carrier_quote = self.store.get_carrier_quote(carrier_quote_id)
        circuit_quote = self.store.get_circuit_quote(carrier_quote.circuit_quote_id)
        agent_email, agent_name = _agent(circuit_quote)
        if not agent_email:
            log.info(
                "Carrier quote %s has no agent; skipping price notice", carrier_quote_id,
                extra={"carrier_quote_id": carrier_quote_id}
            )
            return NotificationResult(sent=False, message=NO_AGENT_MESSAGE)

        categories = self.store.list_categories(active_only=True)
        is_admin = self.store.is_admin(agent_email)
        log.info(
            "Composing price notice for %s (admin=%s)", carrier_quote_id, is_admin,
            extra={"carrier_quote_id": carrier_quote_id, "recipient": agent_email}
        )
        subject, html, breakdown = build_price_available_notification(
            circuit_quote, carrier_quote, categories, is_admin,
            agent_name, self.settings.platform_url
        )
        receipt = self.sender.send(OutgoingEmail(to=[agent_email], subject=subject, html=html))

        return NotificationResult(
            sent=True,
            message="Agent notification sent successfully",
            recipient=agent_email,
            email_id=receipt.message_id,
            carriers_analyzed=1,
            rows=[{
                "carrier_quote_id": carrier_quote.id,
                "carrier": carrier_quote.carrier,
                "price": breakdown.display_price,
            }],
        )

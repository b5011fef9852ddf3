"""
Invoice document rendering: one self-contained A4 HTML page per invoice.

Everything is inlined (styles, SVG brand mark, QR code as a PNG data URI) so
the headless browser never has to fetch anything before printing.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from html import escape
from typing import Any, List, Optional, Tuple
from urllib.parse import quote

import segno

from app.config import settings
from app.services.billing_service import BillingSummary, status_value
from app.utils.money import format_inr, format_weight

BRAND_COLOR = "#1d4ed8"
BRAND_ACCENT = "#7c3aed"
SUCCESS_COLOR = "#16a34a"
DANGER_COLOR = "#dc2626"
MUTED_TEXT = "#6b7280"
BORDER_COLOR = "#e5e7eb"

TERMS_AND_CONDITIONS = (
    "The consignee must declare the contents, value and condition of the items before booking.",
    "Fragile items will be considered as shipment at owner's risk unless booked under special arrangement.",
    "Company will not be responsible for leakage or perishable damage.",
    "Any consignment found damaged, lost or misdelivered will be compensated by the weight of the "
    "items with regard to value of goods.",
    "Consignment not taken delivery within 30 days may be treated as unclaimed and disposed as per company norms.",
)

BRAND_MARK_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="44" height="44" viewBox="0 0 44 44" '
    'role="img" aria-label="logo">'
    '<rect width="44" height="44" rx="10" fill="#ffffff" fill-opacity="0.15"/>'
    '<path d="M8 15h17v13H8z" fill="#ffffff"/>'
    '<path d="M25 19h6l5 5v4H25z" fill="#ffffff" fill-opacity="0.85"/>'
    '<circle cx="13" cy="30" r="3" fill="#ffffff"/>'
    '<circle cx="31" cy="30" r="3" fill="#ffffff"/>'
    "</svg>"
)


@dataclass(frozen=True)
class CompanyProfile:
    name: str
    gstin: str
    state: str
    address_lines: Tuple[str, ...]
    phone: str
    email: str

    @classmethod
    def from_settings(cls) -> "CompanyProfile":
        return cls(
            name=settings.COMPANY_NAME,
            gstin=settings.COMPANY_GSTIN,
            state=settings.COMPANY_STATE,
            address_lines=tuple(settings.COMPANY_ADDRESS_LINES),
            phone=settings.COMPANY_PHONE,
            email=settings.COMPANY_EMAIL,
        )


@dataclass(frozen=True)
class BankDetails:
    bank_name: str
    branch: str
    account_name: str
    account_number: str
    ifsc: str

    @classmethod
    def from_settings(cls) -> "BankDetails":
        return cls(
            bank_name=settings.BANK_NAME,
            branch=settings.BANK_BRANCH,
            account_name=settings.BANK_ACCOUNT_NAME,
            account_number=settings.BANK_ACCOUNT_NUMBER,
            ifsc=settings.BANK_IFSC,
        )


@dataclass(frozen=True)
class PaymentConfig:
    upi_vpa: str
    payee_name: str
    currency: str = "INR"

    @classmethod
    def from_settings(cls) -> "PaymentConfig":
        return cls(
            upi_vpa=settings.UPI_VPA,
            payee_name=settings.UPI_PAYEE_NAME,
            currency=settings.UPI_CURRENCY,
        )


def invoice_label(invoice: Any) -> str:
    """Human reference, falling back to the row id."""
    return str(invoice.invoice_ref or invoice.id)


def build_upi_uri(payment: PaymentConfig, amount_due: Decimal, reference: str) -> str:
    """
    UPI payment request, e.g.
    upi://pay?pa=tapan%40upi&pn=TAPAN&am=7000.00&cu=INR&tn=Invoice%20INV-001
    """
    return (
        f"upi://pay?pa={quote(payment.upi_vpa, safe='')}"
        f"&pn={quote(payment.payee_name, safe='')}"
        f"&am={amount_due:.2f}"
        f"&cu={payment.currency}"
        f"&tn={quote(f'Invoice {reference}', safe='')}"
    )


def qr_data_uri(payload: str) -> str:
    """Encode payload as a QR code PNG data URI."""
    qr = segno.make_qr(payload, error="m")
    return qr.png_data_uri(scale=5, border=2)


def status_badge_colors(status: Any) -> Tuple[str, str]:
    """(background, text) for the status badge."""
    value = status_value(status)
    if value == "paid":
        return SUCCESS_COLOR, "#ffffff"
    if value == "overdue":
        return DANGER_COLOR, "#ffffff"
    return BRAND_COLOR, "#ffffff"


def format_document_date(value: Optional[date]) -> str:
    return value.strftime("%d/%m/%Y") if value else ""


def _section_label(text: str) -> str:
    return (
        f'<div style="font-size:10px; letter-spacing:0.08em; color:{MUTED_TEXT}; '
        f'text-transform:uppercase; margin-bottom:6px;">{escape(text)}</div>'
    )


def _render_header(company: CompanyProfile) -> str:
    address = "".join(f"<div>{escape(line)}</div>" for line in company.address_lines)
    return f"""
    <header style="display:flex; justify-content:space-between; align-items:flex-start; padding:20px 28px; background:linear-gradient(135deg,{BRAND_COLOR},{BRAND_ACCENT}); color:#fff;">
      <div style="display:flex; gap:12px; align-items:center;">
        {BRAND_MARK_SVG}
        <div>
          <h1 style="margin:0 0 4px 0; font-size:20px; letter-spacing:0.06em; text-transform:uppercase;">{escape(company.name)}</h1>
          <div style="font-size:10px; opacity:0.9;">GSTIN: {escape(company.gstin)}</div>
          <div style="font-size:10px; opacity:0.9; margin-top:2px;">State: {escape(company.state)}</div>
        </div>
      </div>
      <div style="text-align:right; font-size:10px; max-width:280px; line-height:1.45;">
        {address}
        <div style="margin-top:6px;">Phone: {escape(company.phone)} &middot; Email: {escape(company.email)}</div>
      </div>
    </header>"""


def _render_parties(summary: BillingSummary) -> str:
    invoice = summary.invoice
    customer = summary.customer
    name = escape(customer.name or "") if customer else ""
    city = escape(customer.city or "") if customer else ""
    phone = escape(customer.phone or "") if customer else ""
    badge_bg, badge_fg = status_badge_colors(invoice.status)
    status_text = escape(status_value(invoice.status).replace("_", " ").upper() or "PENDING")
    due = format_document_date(invoice.due_date) or "-"
    return f"""
    <section style="display:flex; gap:24px; padding:16px 28px; border-bottom:1px solid {BORDER_COLOR};">
      <div style="flex:1; font-size:12px; line-height:1.5;">
        {_section_label("Invoice To")}
        <div style="font-weight:600; font-size:14px;">{name}</div>
        <div>{city}</div>
        <div>{phone}</div>
      </div>
      <div style="flex:1; font-size:12px; text-align:right; line-height:1.6;">
        {_section_label("Invoice Details")}
        <div><strong>Invoice No:</strong> {escape(invoice_label(invoice))}</div>
        <div><strong>Issue Date:</strong> {format_document_date(invoice.invoice_date)}</div>
        <div><strong>Due Date:</strong> {due}</div>
        <div style="margin-top:4px;"><span style="display:inline-block; padding:2px 10px; border-radius:999px; font-size:10px; font-weight:700; letter-spacing:0.06em; background:{badge_bg}; color:{badge_fg};">{status_text}</span></div>
      </div>
    </section>"""


def _render_total_callout(summary: BillingSummary) -> str:
    return f"""
    <section style="padding:14px 28px; border-bottom:1px solid {BORDER_COLOR};">
      <div style="display:flex; justify-content:space-between; align-items:center; background:#eef2ff; border-radius:8px; padding:12px 18px;">
        <div style="font-size:11px; letter-spacing:0.08em; text-transform:uppercase; color:{MUTED_TEXT};">Total Amount Due</div>
        <div style="font-size:24px; font-weight:800; color:{BRAND_COLOR};">{format_inr(summary.amount_due)}</div>
      </div>
    </section>"""


def _render_line_items(summary: BillingSummary) -> str:
    cell = "padding:7px 8px; border-bottom:1px solid #f3f4f6;"
    head = f"padding:7px 8px; border-bottom:1px solid {BORDER_COLOR}; background:#f9fafb;"
    if summary.line_items:
        rows = "".join(
            f"""
          <tr>
            <td style="{cell}">{index}</td>
            <td style="{cell}">{escape(line.description)}</td>
            <td style="{cell} text-align:right;">{format_weight(line.weight)}</td>
            <td style="{cell} text-align:right;">{format_inr(line.amount)}</td>
          </tr>"""
            for index, line in enumerate(summary.line_items, start=1)
        )
    else:
        rows = f'<tr><td style="{cell}" colspan="4">No line items recorded for this invoice.</td></tr>'
    return f"""
    <section style="padding:14px 28px; border-bottom:1px solid {BORDER_COLOR};">
      {_section_label("Items")}
      <table style="width:100%; border-collapse:collapse; font-size:11px;">
        <thead>
          <tr>
            <th style="{head} text-align:left; width:36px;">#</th>
            <th style="{head} text-align:left;">Description</th>
            <th style="{head} text-align:right; width:100px;">Weight (kg)</th>
            <th style="{head} text-align:right; width:120px;">Amount</th>
          </tr>
        </thead>
        <tbody>{rows}
        </tbody>
      </table>
    </section>"""


def _render_payment_and_totals(
    summary: BillingSummary, bank: BankDetails, qr_src: str
) -> str:
    row = "padding:6px 8px; border-bottom:1px solid #f3f4f6;"
    return f"""
    <section style="display:flex; gap:24px; padding:14px 28px; border-bottom:1px solid {BORDER_COLOR}; align-items:flex-start;">
      <div style="flex:1; display:flex; gap:14px; align-items:flex-start;">
        <div style="text-align:center;">
          {_section_label("Scan to Pay")}
          <div style="background:#f9fafb; padding:6px; border-radius:8px; border:1px solid {BORDER_COLOR}; display:inline-block;">
            <img src="{qr_src}" alt="UPI payment QR" style="width:120px; height:120px; display:block;" />
          </div>
          <div style="font-size:9px; color:{MUTED_TEXT}; margin-top:4px;">UPI / QR payment</div>
        </div>
        <div style="font-size:10px; line-height:1.6;">
          {_section_label("Pay by Bank Transfer")}
          <div><strong>Bank:</strong> {escape(bank.bank_name)}</div>
          <div><strong>Account Name:</strong> {escape(bank.account_name)}</div>
          <div><strong>Account No:</strong> {escape(bank.account_number)}</div>
          <div><strong>IFSC:</strong> {escape(bank.ifsc)}</div>
        </div>
      </div>
      <div style="flex:1;">
        {_section_label("Summary")}
        <table style="width:100%; border-collapse:collapse; font-size:11px;">
          <tbody>
            <tr><td style="{row}">Subtotal</td><td style="{row} text-align:right;">{format_inr(summary.subtotal)}</td></tr>
            <tr><td style="{row}">Previous balance</td><td style="{row} text-align:right;">{format_inr(summary.previous_balance)}</td></tr>
            <tr><td style="padding:8px; font-weight:700;">Total</td><td style="padding:8px; font-weight:800; text-align:right; color:{SUCCESS_COLOR};">{format_inr(summary.amount_due)}</td></tr>
          </tbody>
        </table>
      </div>
    </section>"""


def _render_footer(company: CompanyProfile, bank: BankDetails) -> str:
    terms = "".join(f"<li>{escape(term)}</li>" for term in TERMS_AND_CONDITIONS)
    return f"""
    <section style="display:flex; gap:24px; padding:14px 28px; border-bottom:1px solid {BORDER_COLOR}; font-size:10px;">
      <div style="flex:1; line-height:1.6;">
        {_section_label("Bank Details")}
        <div><strong>Bank:</strong> {escape(bank.bank_name)}</div>
        <div><strong>Branch:</strong> {escape(bank.branch)}</div>
        <div><strong>Account Name:</strong> {escape(bank.account_name)}</div>
        <div><strong>Account No:</strong> {escape(bank.account_number)}</div>
        <div><strong>IFSC:</strong> {escape(bank.ifsc)}</div>
      </div>
      <div style="flex:2; color:#4b5563;">
        {_section_label("Terms & Conditions")}
        <ol style="margin:0; padding-left:16px; line-height:1.45;">{terms}</ol>
      </div>
    </section>
    <section style="display:flex; justify-content:space-between; align-items:flex-end; padding:16px 28px 20px; font-size:10px;">
      <div>
        <div>For: {escape(company.name)}</div>
        <div style="margin-top:30px; border-top:1px solid #d1d5db; width:170px; padding-top:4px;">Authorised Signatory</div>
      </div>
      <div style="text-align:right; color:{MUTED_TEXT};">
        <div style="font-size:12px; font-weight:600; color:{BRAND_COLOR};">Thank you for your business!</div>
      </div>
    </section>"""


def render_invoice_html(
    summary: BillingSummary,
    company: Optional[CompanyProfile] = None,
    bank: Optional[BankDetails] = None,
    payment: Optional[PaymentConfig] = None,
) -> str:
    """Build the complete invoice document for one billing summary."""
    company = company or CompanyProfile.from_settings()
    bank = bank or BankDetails.from_settings()
    payment = payment or PaymentConfig.from_settings()

    reference = invoice_label(summary.invoice)
    qr_src = qr_data_uri(build_upi_uri(payment, summary.amount_due, reference))

    sections: List[str] = [
        _render_header(company),
        _render_parties(summary),
        _render_total_callout(summary),
        _render_line_items(summary),
        _render_payment_and_totals(summary, bank, qr_src),
        _render_footer(company, bank),
    ]
    return f"""<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>Invoice {escape(reference)}</title>
    <style>
      @page {{ size: A4; margin: 0; }}
      * {{ box-sizing: border-box; }}
      html, body {{ margin: 0; padding: 0; }}
      body {{ font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif; color: #111827; -webkit-print-color-adjust: exact; print-color-adjust: exact; }}
      .page {{ width: 210mm; min-height: 297mm; margin: 0 auto; background: #ffffff; }}
    </style>
  </head>
  <body>
    <div class="page">{"".join(sections)}
    </div>
  </body>
</html>
"""

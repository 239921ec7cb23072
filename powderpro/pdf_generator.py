"""
PDF Quote Generator: printable quote documents for customers.

Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Company header + quote number / date / status
2. Prepared for (contact info)
3. Items
4. Coating
5. Additional services
6. Discounts + quote total
7. Terms
"""

from datetime import datetime

from fpdf import FPDF


SERVICE_NAMES = {
    "sandblasting": "Sandblasting",
    "priming": "Priming",
}


def _fmt(amount) -> str:
    """Format a number as $X,XXX.XX"""
    try:
        return f"${float(amount):,.2f}"
    except (ValueError, TypeError):
        return "$0.00"


def _fmt_dims(item: dict) -> str:
    dims = [item.get("height"), item.get("width"), item.get("depth")]
    if not all(dims):
        return "-"
    return " x ".join(f"{float(d):g}" for d in dims) + " in"


def _safe(text) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("•", "-")    # bullet
        .replace("—", " - ")  # em dash
        .replace("–", "-")    # en dash
        .replace("“", '"')
        .replace("”", '"')
        .replace("‘", "'")
        .replace("’", "'")
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class QuotePDF(FPDF):
    """Custom PDF class for quote documents."""

    def __init__(self):
        super().__init__()
        self.set_auto_page_break(auto=True, margin=20)

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(45, 55, 72)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(240, 240, 240)
        for label, width in cols:
            align = "R" if label in ("Qty", "Unit Price", "Total") else "L"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths):
        self.set_font("Helvetica", "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            align = "R" if i >= len(widths) - 3 else "L"
            self.cell(width, 5.5, _safe(val), align=align)
        self.ln()

    def amount_row(self, label, amount, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 10)
        self.cell(130, 6, _safe(label))
        self.cell(60, 6, amount, align="R")
        self.ln()


def generate_quote_pdf(quote: dict, company: dict) -> bytes:
    """
    Generate a PDF quote document.

    Args:
        quote: quote dict as returned by the quotes API
        company: {name, email, phone}

    Returns:
        PDF bytes
    """
    pdf = QuotePDF()
    pdf.alias_nb_pages()
    pdf.add_page()
    pw = pdf.w - pdf.l_margin - pdf.r_margin

    # ── Header ──
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _safe(company.get("name") or "Quote"), new_x="LMARGIN", new_y="NEXT")
    company_info = " | ".join(p for p in [company.get("email"), company.get("phone")] if p)
    if company_info:
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 5, _safe(company_info), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    created = quote.get("created_at") or ""
    try:
        date_str = datetime.fromisoformat(created.replace("Z", "+00:00")).strftime("%B %d, %Y")
    except (ValueError, AttributeError):
        date_str = datetime.utcnow().strftime("%B %d, %Y")

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, f"QUOTE #{_safe(quote.get('quote_number'))}", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(0, 5, f"Date: {date_str}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Status: {_safe(quote.get('status_label'))}", new_x="LMARGIN", new_y="NEXT")
    if quote.get("tracking_number"):
        pdf.cell(0, 5, f"Tracking: {_safe(quote['tracking_number'])}", new_x="LMARGIN", new_y="NEXT")

    contact = quote.get("contact_info") or {}
    if contact.get("name"):
        pdf.ln(2)
        pdf.cell(0, 5, f"Prepared for: {_safe(contact['name'])}", new_x="LMARGIN", new_y="NEXT")
        details = " | ".join(p for p in [contact.get("email"), contact.get("phone")] if p)
        if details:
            pdf.cell(0, 5, _safe(details), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(6)

    # ── Items ──
    pdf.section_header("ITEMS")
    cols = [("Item", 55), ("Size", 25), ("Dimensions", 40), ("Qty", 15), ("Unit Price", 25), ("Total", 30)]
    widths = [w for _, w in cols]
    pdf.table_header(cols)
    for item in quote.get("items", []):
        label = item.get("item_type") or ""
        if item.get("description"):
            label = f"{label} - {item['description']}"
        pdf.table_row(
            [label[:40], item.get("size") or "-", _fmt_dims(item),
             str(item.get("quantity", 0)), _fmt(item.get("price")), _fmt(item.get("line_total"))],
            widths,
        )
    pdf.ln(4)

    # ── Coating ──
    coating = quote.get("coating") or {}
    pdf.section_header("COATING")
    pdf.set_font("Helvetica", "", 9)
    pdf.cell(0, 5, f"Type: {_safe(coating.get('type'))}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Color: {_safe(coating.get('color'))}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Finish: {_safe(coating.get('finish'))}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    # ── Additional services ──
    services = [name for name, selected in (quote.get("additional_services") or {}).items()
                if selected and name in SERVICE_NAMES]
    if services:
        pdf.section_header("ADDITIONAL SERVICES")
        pdf.set_font("Helvetica", "", 9)
        for name in services:
            pdf.set_x(pdf.l_margin)
            pdf.cell(pw, 5, f"  - {SERVICE_NAMES[name]}", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

    # ── Totals ──
    pdf.section_header("QUOTE TOTAL")
    pdf.amount_row("Items Subtotal", _fmt(quote.get("subtotal")))
    if quote.get("services_total"):
        pdf.amount_row("Additional Services", f"+{_fmt(quote['services_total'])}")
    if quote.get("discount_amount"):
        pdf.amount_row(
            f"Discount ({quote.get('discount_percent', 0):g}%)",
            f"-{_fmt(quote['discount_amount'])}",
        )

    pdf.ln(1)
    pdf.set_fill_color(45, 55, 72)
    pdf.set_text_color(255, 255, 255)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(130, 10, "  TOTAL", fill=True)
    pdf.cell(60, 10, f"{_fmt(quote.get('total'))}  ", fill=True, align="R")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(14)

    # ── Terms ──
    pdf.set_font("Helvetica", "I", 8)
    pdf.set_text_color(100, 100, 100)
    pdf.set_x(pdf.l_margin)
    pdf.cell(pw, 4, "This quote is an estimate based on the dimensions and options provided.", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(pw, 4, "Final pricing is confirmed after inspection of the parts.", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)

    return pdf.output()

# backend/utils/pdf.py
import logging
from pathlib import Path
from typing import Optional

from config import settings
from models.sale import PosSale

logger = logging.getLogger(__name__)

FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

# Built-in ReportLab fonts, replaced by DejaVu when the TTF files are present
FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"


def ensure_storage_dir() -> Path:
    storage = Path(settings.INVOICE_STORAGE_DIR)
    storage.mkdir(parents=True, exist_ok=True)
    return storage


def get_pdf_path(admin_id: int, sale_id: int, invoice_number: str) -> Path:
    """Path of the rendered invoice for a tenant's sale.

    Keyed on the sale id as well, since fallback invoice numbers can repeat.
    """
    return ensure_storage_dir() / f"{admin_id}-{sale_id}-{invoice_number}.pdf"


_fonts_inited = False
def _init_fonts():
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if not FONT_REGULAR_PATH.exists():
        logger.info("Font file not found at %s, using Helvetica", FONT_REGULAR_PATH)
        return
    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    else:
        FONT_BOLD_NAME = FONT_REGULAR_NAME


def generate_sale_invoice_pdf(sale: PosSale, out_path: Path, seller: Optional[dict] = None) -> None:
    """
    Render a sale invoice:
    - header with invoice number and date
    - seller (left) and customer (right)
    - item table from the sale's frozen snapshot
    - totals and payment method
    """
    from reportlab.lib.pagesizes import A4
    from reportlab.pdfgen import canvas
    from reportlab.lib.units import mm

    _init_fonts()
    currency = settings.CURRENCY_SYMBOL

    c = canvas.Canvas(str(out_path), pagesize=A4)
    width, height = A4

    def draw_text(x, y, text, font=None, size=10, align="left"):
        c.setFont(font or FONT_REGULAR_NAME, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)

    # --- Header ---
    y = height - 20 * mm
    draw_text(190 * mm, y, f"Invoice: {sale.invoice_number}", font=FONT_BOLD_NAME, size=16, align="right")
    y -= 8 * mm
    sale_date = sale.sale_date.strftime("%Y-%m-%d %H:%M") if sale.sale_date else ""
    draw_text(190 * mm, y, f"Date: {sale_date}", align="right")
    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 10 * mm

    # --- Seller / customer ---
    draw_text(20 * mm, y, "SELLER:", font=FONT_BOLD_NAME)
    draw_text(110 * mm, y, "CUSTOMER:", font=FONT_BOLD_NAME)
    y -= 5 * mm
    seller = seller or {}
    draw_text(20 * mm, y, seller.get("name") or "", font=FONT_BOLD_NAME)
    draw_text(110 * mm, y, sale.customer_name, font=FONT_BOLD_NAME)
    y -= 5 * mm
    if seller.get("email"):
        draw_text(20 * mm, y, seller["email"])
    draw_text(110 * mm, y, f"Payment: {sale.payment_method}")
    y -= 15 * mm

    # --- Items ---
    c.setFillColorRGB(0.95, 0.95, 0.95)
    c.rect(20 * mm, y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
    c.setFillColorRGB(0, 0, 0)
    c.setFont(FONT_BOLD_NAME, 9)
    c.drawString(22 * mm, y, "#")
    c.drawString(30 * mm, y, "Product")
    c.drawString(100 * mm, y, "SKU")
    c.drawRightString(135 * mm, y, "Qty")
    c.drawRightString(160 * mm, y, "Price")
    c.drawRightString(185 * mm, y, "Amount")
    y -= 8 * mm

    c.setFont(FONT_REGULAR_NAME, 9)
    for idx, item in enumerate(sale.items or [], start=1):
        c.drawString(22 * mm, y, str(idx))
        c.drawString(30 * mm, y, str(item.get("product_name", ""))[:40])
        c.drawString(100 * mm, y, str(item.get("product_sku", ""))[:16])
        c.drawRightString(135 * mm, y, f"{item.get('quantity', 0)}")
        c.drawRightString(160 * mm, y, f"{currency}{float(item.get('sell_price', 0)):.2f}")
        c.drawRightString(185 * mm, y, f"{currency}{float(item.get('total_amount', 0)):.2f}")
        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm
        if y < 40 * mm:
            c.showPage()
            y = height - 20 * mm
            c.setFont(FONT_REGULAR_NAME, 9)

    # --- Totals ---
    y -= 5 * mm
    if y < 40 * mm:
        c.showPage()
        y = height - 30 * mm
    c.setFont(FONT_BOLD_NAME, 10)
    c.drawRightString(150 * mm, y, "Items:")
    c.drawRightString(185 * mm, y, f"{sale.total_items} ({sale.total_quantity} units)")
    y -= 6 * mm
    c.setFont(FONT_BOLD_NAME, 12)
    c.drawRightString(150 * mm, y, "TOTAL:")
    c.drawRightString(185 * mm, y, f"{currency}{sale.total_amount:.2f}")

    if sale.notes:
        y -= 10 * mm
        draw_text(20 * mm, y, f"Notes: {sale.notes[:90]}", size=9)

    c.showPage()
    c.save()

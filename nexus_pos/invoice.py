"""Paginated PDF invoices for finalized sales, rendered with Pillow."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence, TypeVar

from nexus_pos.amounts import format_money
from nexus_pos.config import TAX_RATE
from nexus_pos.constant import INVOICE_FOOTER, MERCHANT_IDENTITY, MERCHANT_NAME
from nexus_pos.models import Sale
from nexus_pos.printer import load_font

T = TypeVar("T")

# A4 at 150 dpi.
PAGE_DPI = 150.0
PAGE_WIDTH_PX = 1240
PAGE_HEIGHT_PX = 1754
MARGIN_PX = 118
HEADER_BAND_PX = 236
TABLE_TOP_FIRST_PX = 502
TABLE_HEAD_PX = 48
ROW_HEIGHT_PX = 42
TOTALS_BLOCK_PX = 420

PRIMARY_RGB = (99, 102, 241)
TEXT_RGB = (50, 50, 50)
MUTED_RGB = (150, 150, 150)
STRIPE_RGB = (248, 250, 252)
WHITE_RGB = (255, 255, 255)

_COLUMNS = ("Description", "Qty", "Unit price", "Subtotal")
# Right edge of each numeric column, as a share of the table width.
_COLUMN_RIGHT_EDGES = (None, 0.58, 0.79, 1.0)


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: float
    tax: float
    total: float


def invoice_totals(sale: Sale) -> InvoiceTotals:
    """Back the tax out of the stored total rather than re-summing the lines."""
    subtotal = sale.total / (1 + TAX_RATE)
    return InvoiceTotals(subtotal=subtotal, tax=sale.total - subtotal, total=sale.total)


def invoice_rows(sale: Sale) -> list[tuple[str, str, str, str]]:
    return [
        (item.name, str(item.quantity), format_money(item.price), format_money(item.price * item.quantity))
        for item in sale.items
    ]


def paginate_rows(rows: Sequence[T], first_page: int, per_page: int) -> list[list[T]]:
    """Split rows into pages; the first page holds fewer rows below the header."""
    pages: list[list[T]] = [list(rows[:first_page])]
    rest = rows[first_page:]
    for start in range(0, len(rest), per_page):
        pages.append(list(rest[start : start + per_page]))
    return pages


def _first_page_capacity() -> int:
    return (PAGE_HEIGHT_PX - MARGIN_PX - TABLE_TOP_FIRST_PX - TABLE_HEAD_PX) // ROW_HEIGHT_PX


def _next_page_capacity() -> int:
    return (PAGE_HEIGHT_PX - 2 * MARGIN_PX - TABLE_HEAD_PX) // ROW_HEIGHT_PX


def _new_page() -> object:
    from PIL import Image

    return Image.new("RGB", (PAGE_WIDTH_PX, PAGE_HEIGHT_PX), color=WHITE_RGB)


def _text_right(draw: object, right_x: float, y: float, text: str, font: object, fill: tuple[int, int, int]) -> None:
    draw.text((right_x - draw.textlength(text, font=font), y), text, font=font, fill=fill)


def _text_center(draw: object, center_x: float, y: float, text: str, font: object, fill: tuple[int, int, int]) -> None:
    draw.text((center_x - draw.textlength(text, font=font) / 2, y), text, font=font, fill=fill)


def _draw_header(draw: object, sale: Sale, fonts: dict[str, object]) -> None:
    right = PAGE_WIDTH_PX - MARGIN_PX
    draw.rectangle((0, 0, PAGE_WIDTH_PX, HEADER_BAND_PX), fill=PRIMARY_RGB)
    draw.text((MARGIN_PX, 110), MERCHANT_NAME, font=fonts["title"], fill=WHITE_RGB)
    _text_right(draw, right, 98, "ELECTRONIC INVOICE", fonts["body"], WHITE_RGB)
    _text_right(draw, right, 140, f"Folio: #{sale.sale_id}", fonts["body"], WHITE_RGB)

    y = 312
    draw.text((MARGIN_PX, y), "Issuer:", font=fonts["body"], fill=TEXT_RGB)
    for idx, line in enumerate(MERCHANT_IDENTITY, start=1):
        draw.text((MARGIN_PX, y + idx * 30), line, font=fonts["body"], fill=TEXT_RGB)

    details_x = PAGE_WIDTH_PX - 472
    placed = sale.created_at.astimezone().strftime("%Y-%m-%d %H:%M:%S")
    details = [
        f"Date: {placed}",
        f"Payment method: {sale.payment_method.value}",
        "Customer: General Public",
        f"Table: {sale.table_number}",
    ]
    draw.text((details_x, y), "Sale details:", font=fonts["body"], fill=TEXT_RGB)
    for idx, line in enumerate(details, start=1):
        draw.text((details_x, y + idx * 30), line, font=fonts["body"], fill=TEXT_RGB)


def _draw_table(draw: object, top: int, rows: list[tuple[str, str, str, str]], fonts: dict[str, object]) -> int:
    """Draw the column head and ``rows`` from ``top``; return the y below the table."""
    left = MARGIN_PX
    width = PAGE_WIDTH_PX - 2 * MARGIN_PX
    pad = 12

    draw.rectangle((left, top, left + width, top + TABLE_HEAD_PX), fill=PRIMARY_RGB)
    for col, label in enumerate(_COLUMNS):
        edge = _COLUMN_RIGHT_EDGES[col]
        if edge is None:
            draw.text((left + pad, top + 12), label, font=fonts["body"], fill=WHITE_RGB)
        else:
            _text_right(draw, left + width * edge - pad, top + 12, label, fonts["body"], WHITE_RGB)

    y = top + TABLE_HEAD_PX
    for idx, row in enumerate(rows):
        if idx % 2 == 1:
            draw.rectangle((left, y, left + width, y + ROW_HEIGHT_PX), fill=STRIPE_RGB)
        for col, value in enumerate(row):
            edge = _COLUMN_RIGHT_EDGES[col]
            if edge is None:
                draw.text((left + pad, y + 10), value, font=fonts["body"], fill=TEXT_RGB)
            else:
                _text_right(draw, left + width * edge - pad, y + 10, value, fonts["body"], TEXT_RGB)
        y += ROW_HEIGHT_PX
    return y


def _draw_totals(draw: object, final_y: int, sale: Sale, fonts: dict[str, object]) -> None:
    totals = invoice_totals(sale)
    right = PAGE_WIDTH_PX - MARGIN_PX
    label_x = right - 236

    draw.text((label_x, final_y + 88), "Subtotal:", font=fonts["body"], fill=TEXT_RGB)
    _text_right(draw, right, final_y + 88, format_money(totals.subtotal), fonts["body"], TEXT_RGB)
    draw.text((label_x, final_y + 130), f"VAT ({TAX_RATE:.0%}):", font=fonts["body"], fill=TEXT_RGB)
    _text_right(draw, right, final_y + 130, format_money(totals.tax), fonts["body"], TEXT_RGB)
    draw.text((label_x, final_y + 180), "TOTAL:", font=fonts["total"], fill=PRIMARY_RGB)
    _text_right(draw, right, final_y + 180, format_money(totals.total), fonts["total"], PRIMARY_RGB)

    center = PAGE_WIDTH_PX / 2
    for idx, line in enumerate(INVOICE_FOOTER):
        _text_center(draw, center, final_y + 340 + idx * 30, line, fonts["footer"], MUTED_RGB)


def render_invoice_pages(sale: Sale) -> list[object]:
    """Render every page of the invoice as an RGB image."""
    from PIL import ImageDraw

    fonts = {
        "title": load_font(50),
        "body": load_font(21),
        "total": load_font(29),
        "footer": load_font(17),
    }
    chunks = paginate_rows(invoice_rows(sale), _first_page_capacity(), _next_page_capacity())

    pages: list[object] = []
    final_y = MARGIN_PX
    for idx, chunk in enumerate(chunks):
        page = _new_page()
        draw = ImageDraw.Draw(page)
        if idx == 0:
            _draw_header(draw, sale, fonts)
            final_y = _draw_table(draw, TABLE_TOP_FIRST_PX, chunk, fonts)
        else:
            final_y = _draw_table(draw, MARGIN_PX, chunk, fonts)
        pages.append(page)

    if final_y + TOTALS_BLOCK_PX > PAGE_HEIGHT_PX - MARGIN_PX // 2:
        pages.append(_new_page())
        final_y = MARGIN_PX
    _draw_totals(ImageDraw.Draw(pages[-1]), final_y, sale, fonts)
    return pages


def invoice_filename(sale: Sale) -> str:
    return f"Invoice_{sale.sale_id}.pdf"


def export_invoice_pdf(sale: Sale, directory: str | Path) -> Path:
    """Write the invoice for ``sale`` into ``directory`` and return the file path.

    Pages are embedded as images by Pillow's PDF writer, so the text cannot be
    selected or searched.
    """
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / invoice_filename(sale)

    pages = render_invoice_pages(sale)
    pages[0].save(path, "PDF", resolution=PAGE_DPI, save_all=True, append_images=pages[1:])
    return path

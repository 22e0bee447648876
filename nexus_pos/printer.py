"""Kitchen ticket printing on a USB ESC/POS thermal printer."""

from __future__ import annotations

import os
from pathlib import Path
from time import sleep

from nexus_pos.config import (
    PRINTER_FONT_PATH,
    PRINTER_FONT_SIZE,
    PRINTER_LEFT_INDENT_PX,
    PRINTER_SINGLE_ITEM_SPACER_PX,
    PRINTER_USB_PRODUCT_ID,
    PRINTER_USB_VENDOR_ID,
    PRINTER_WIDTH_PX,
)
from nexus_pos.models import CartItem, Category, Order

# Station divider between kitchen and bar sections.
_DIVIDER_MARGIN_PX = 8
_DIVIDER_THICKNESS_PX = 5
_DIVIDER_STRIPE_PX = 2
_DIVIDER_PAUSE_SECONDS = 0.1
_ITEM_LINE_HEIGHT_PX = PRINTER_FONT_SIZE + 30
_NOTE_PADDING_PX = 6
_HEADER_GUTTER_PX = 8
_FONT_OVERRIDE_ENV = "NEXUS_POS_PRINTER_FONT_PATH"
_LINUX_FONT_FALLBACKS = (
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
)

# Kitchen items print before the bar; anything else goes last.
_KITCHEN_CATEGORIES = (Category.FOOD, Category.SNACKS, Category.DESSERTS)
_BAR_CATEGORIES = (Category.DRINKS,)


def resolve_printer_font_path() -> str:
    """First existing font file: the env override, then the configured path, then common Linux fonts."""
    override = os.environ.get(_FONT_OVERRIDE_ENV, "").strip()
    # dict.fromkeys keeps the order and drops repeats.
    candidates = [path for path in dict.fromkeys((override, PRINTER_FONT_PATH, *_LINUX_FONT_FALLBACKS)) if path]
    for path in candidates:
        if Path(path).is_file():
            return path
    raise RuntimeError(f"No printer font among {candidates}; point {_FONT_OVERRIDE_ENV} at a .ttf or .otf file")


def load_font(size: int) -> object:
    """TrueType font at ``size`` px, or Pillow's bundled font when none is installed."""
    from PIL import ImageFont

    try:
        return ImageFont.truetype(resolve_printer_font_path(), size)
    except (RuntimeError, OSError):
        return ImageFont.load_default(size=size)


def check_printer_dependencies() -> tuple[bool, str]:
    """Report whether a kitchen ticket could be printed: (ready, status message)."""
    try:
        import escpos.printer  # noqa: F401
        from PIL import ImageFont

        ImageFont.truetype(resolve_printer_font_path(), PRINTER_FONT_SIZE)
    except Exception as exc:
        return (False, f"Printer unavailable: {exc}")
    return (True, "Kitchen printer ready")


def _category_rank(category: Category) -> int:
    if category in _KITCHEN_CATEGORIES:
        return 0
    if category in _BAR_CATEGORIES:
        return 1
    return 2


def to_ticket_label(item: CartItem) -> str:
    return f"{item.quantity}x {item.name}"


def ticket_sections(order: Order) -> list[list[CartItem]]:
    """Order lines split into kitchen, bar and other sections, empty ones dropped."""
    sections: list[list[CartItem]] = [[], [], []]
    for item in order.items:
        sections[_category_rank(item.category)].append(item)
    return [section for section in sections if section]


def ticket_lines(order: Order) -> list[str]:
    """Plain-text rendition of the ticket body, one entry per printed line."""
    lines: list[str] = []
    for idx, section in enumerate(ticket_sections(order)):
        if idx > 0:
            lines.append("-" * 16)
        for item in section:
            lines.append(to_ticket_label(item))
            if item.note:
                lines.append(f"    {item.note}")
    return lines
def _measure(text: str, font: object) -> tuple[int, int, int, int]:
    from PIL import Image, ImageDraw

    return ImageDraw.Draw(Image.new("1", (1, 1), color=1)).textbbox((0, 0), text, font=font)


def _render_text(text: str, font: object, height_px: int | None = None) -> object:
    """One ticket row, left-indented and vertically centred.

    Without ``height_px`` the row hugs the text with a small padding.
    """
    from PIL import Image, ImageDraw

    left, top, _, bottom = _measure(text, font)
    text_height = bottom - top
    canvas_height = height_px if height_px is not None else max(12, text_height + _NOTE_PADDING_PX)
    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    # bbox top offsets the baseline so descenders stay on the canvas.
    y = (canvas_height - text_height) // 2 - top
    ImageDraw.Draw(img).text((PRINTER_LEFT_INDENT_PX - left, y), text, font=font, fill=0)
    return img


def _print_divider(printer: object) -> None:
    """Solid bar between stations, fed in thin stripes so the head stays cool."""
    from PIL import Image

    printer.image(Image.new("1", (PRINTER_WIDTH_PX, _DIVIDER_MARGIN_PX), color=1))
    stripes = range(0, _DIVIDER_THICKNESS_PX, _DIVIDER_STRIPE_PX)
    for idx, offset in enumerate(stripes):
        height = min(_DIVIDER_STRIPE_PX, _DIVIDER_THICKNESS_PX - offset)
        printer.image(Image.new("1", (PRINTER_WIDTH_PX, height), color=0))
        if idx < len(stripes) - 1:
            sleep(_DIVIDER_PAUSE_SECONDS)
    printer.image(Image.new("1", (PRINTER_WIDTH_PX, _DIVIDER_MARGIN_PX), color=1))


def _render_ticket_header(order: Order, table_number: int, font: object, small_font: object) -> object:
    """``TABLE n`` on the left; order id and dispatch time stacked on the right."""
    from PIL import Image, ImageDraw

    title = f"TABLE {table_number}"
    meta = (f"#{order.order_id}", order.created_at.astimezone().strftime("%H:%M"))
    title_box = _measure(title, font)
    meta_boxes = [_measure(line, small_font) for line in meta]
    meta_line_px = max(box[3] - box[1] for box in meta_boxes) + 4
    canvas_height = max(title_box[3] - title_box[1], meta_line_px * len(meta)) + 16

    img = Image.new("1", (PRINTER_WIDTH_PX, canvas_height), color=1)
    draw = ImageDraw.Draw(img)
    draw.text((PRINTER_LEFT_INDENT_PX, 4 - title_box[1]), title, font=font, fill=0)
    for idx, (line, box) in enumerate(zip(meta, meta_boxes)):
        x = PRINTER_WIDTH_PX - _HEADER_GUTTER_PX - box[2]
        draw.text((x, 4 + idx * meta_line_px - box[1]), line, font=small_font, fill=0)
    return img


def print_kitchen_ticket(order: Order, table_number: int) -> None:
    """Print every line of ``order`` grouped by station and cut the ticket."""
    if not order.items:
        return

    try:
        from escpos.printer import Usb
        from PIL import Image, ImageFont
    except Exception as exc:
        raise RuntimeError(f"Printer dependencies unavailable: {exc}") from exc

    font_path = resolve_printer_font_path()
    fonts = {
        "item": ImageFont.truetype(font_path, PRINTER_FONT_SIZE),
        "title": ImageFont.truetype(font_path, PRINTER_FONT_SIZE + 8),
        "note": ImageFont.truetype(font_path, max(14, PRINTER_FONT_SIZE - 12)),
        "meta": ImageFont.truetype(font_path, max(10, PRINTER_FONT_SIZE // 2)),
    }
    printer = Usb(PRINTER_USB_VENDOR_ID, PRINTER_USB_PRODUCT_ID)

    printer.image(_render_ticket_header(order, table_number, fonts["title"], fonts["meta"]))
    for idx, section in enumerate(ticket_sections(order)):
        if idx > 0:
            _print_divider(printer)
        for item in section:
            printer.image(_render_text(to_ticket_label(item), fonts["item"], _ITEM_LINE_HEIGHT_PX))
            if item.note:
                printer.image(_render_text(f"    {item.note}", fonts["note"]))

    # Single-line tickets get a short tail for easier tearing.
    if len(order.items) == 1:
        printer.image(Image.new("1", (PRINTER_WIDTH_PX, PRINTER_SINGLE_ITEM_SPACER_PX), color=1))

    printer.cut()

"""Runtime configuration defaults for persistence, pricing and printing."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("NEXUS_POS_DB_PATH", "data/nexus_pos.db")
INVOICE_DIR = os.environ.get("NEXUS_POS_INVOICE_DIR", "invoices")
DEBUG_LOG_PATH = "/tmp/nexus-pos-debug.log"

# Fixed surcharge applied to every cart; not configurable per product.
TAX_RATE = 0.16
LOW_STOCK_THRESHOLD = 10

# Completed sales leave catalog stock untouched unless this is switched on.
DECREMENT_STOCK_ON_SALE = False

# Durable key/value slots.
SESSION_IDENTITY_KEY = "session-identity"
ACTIVE_CASH_SESSION_KEY = "active-cash-session"

PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_WIDTH_PX = 384
PRINTER_FONT_SIZE = 40
PRINTER_FONT_PATH = "/System/Library/Fonts/SFNS.ttf"
PRINTER_LEFT_INDENT_PX = 16
PRINTER_SINGLE_ITEM_SPACER_PX = 70

"""
Workbook look for exported datasets: one header band, striped data rows.
"""
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# ---------------------------------------------------------------------------
# Palette
# ---------------------------------------------------------------------------
BAND = "2F5D50"
BAND_TEXT = "FFFFFF"
STRIPE = "EEF3F1"
INK = "202020"
RULE = "D0D7D4"

# ---------------------------------------------------------------------------
# Header band
# ---------------------------------------------------------------------------
HEADER_FONT = Font(name="Arial", size=10, bold=True, color=BAND_TEXT)
HEADER_FILL = PatternFill(fill_type="solid", start_color=BAND, end_color=BAND)
HEADER_ALIGN = Alignment(horizontal="center", vertical="center", wrap_text=True)
HEADER_BORDER = Border(bottom=Side(style="medium", color=INK))

# ---------------------------------------------------------------------------
# Data rows
# ---------------------------------------------------------------------------
CELL_FONT = Font(name="Arial", size=10, color=INK)
STRIPE_FILL = PatternFill(fill_type="solid", start_color=STRIPE, end_color=STRIPE)
CELL_BORDER = Border(bottom=Side(style="hair", color=RULE))
TEXT_ALIGN = Alignment(horizontal="left", vertical="top")
NUMBER_ALIGN = Alignment(horizontal="right", vertical="top")

"""
SheetDesk: Configuration: paths, storage keys, column conventions.
"""
import datetime as dt
import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Paths: override with SHEETDESK_DATA_DIR env var
# ---------------------------------------------------------------------------
_data_dir = Path(os.environ.get("SHEETDESK_DATA_DIR", str(Path.home() / ".sheetdesk")))
BASE_FOLDER = _data_dir
STORAGE_FOLDER = BASE_FOLDER / "storage"
EXPORTS_FOLDER = BASE_FOLDER / "exports"

# ---------------------------------------------------------------------------
# Persistence: one collection entry holding every dataset
# ---------------------------------------------------------------------------
STORAGE_KEY = "excelFiles"

# ---------------------------------------------------------------------------
# Accepted upload formats (matched case-insensitively on the filename)
# ---------------------------------------------------------------------------
ACCEPTED_EXTENSIONS = (".xlsx", ".xls", ".csv")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
CSV_MEDIA_TYPE = "text/csv"

# ---------------------------------------------------------------------------
# Column conventions
# ---------------------------------------------------------------------------
MEMBER_COLUMN = "MEMBER"      # numeric-ish row identifier
NAME_COLUMN = "NAME"          # display label
EMAIL_COLUMN = "EMAIL"        # mail form recipient
DATE_MARKER = "DOB"           # any header containing this holds a date

# Headers the table view offers sort controls for. The query engine sorts
# on any header; this only drives which columns show the toggle.
SORTABLE_COLUMNS = ("ADDRESS", "MEMBER")

# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------
DEFAULT_PAGE_SIZE = 20
PAGE_SIZE_CHOICES = (10, 20, 50, 100)

# ---------------------------------------------------------------------------
# Spreadsheet date serials count days from here (25569 is 1970-01-01 UTC)
# ---------------------------------------------------------------------------
EXCEL_EPOCH = dt.datetime(1899, 12, 30, tzinfo=dt.timezone.utc)

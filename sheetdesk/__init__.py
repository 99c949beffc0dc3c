"""SheetDesk: import, browse, edit and export spreadsheet files."""

__version__ = "1.0.0"

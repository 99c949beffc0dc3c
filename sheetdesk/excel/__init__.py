"""Workbook styling and writing for exports."""
from .writer import ExcelWriter

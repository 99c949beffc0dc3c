"""Tabular pipeline: parsing, storage, querying, mutation, export."""
from .schemas import Dataset, DatasetSummary, QuerySpec, SortDirection, Page, PageRow
from .normalize import normalize_date
from .storage import FileStorage, MemoryStorage
from .store import RecordStore
from .parser import parse_table, ingest
from .query import QueryEngine, run_query, total_pages, clamp_page
from .mutations import MutationOutcome, MutationResult, edit_row, delete_row, locate_row
from .exporter import export_dataset, export_media_type

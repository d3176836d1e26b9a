"""
Services package - Stateful orchestration around the pure domain.

Includes the invoice lifecycle store and CSV export.
"""

from .export import export_csv, export_filename
from .store import AddInvoiceResult, InvoiceStore

__all__ = ["InvoiceStore", "AddInvoiceResult", "export_csv", "export_filename"]

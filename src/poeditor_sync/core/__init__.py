"""POEditor API client and wire models."""

from .client import PoeditorClient
from .schema import AddResult, DeleteResult, ExportType, Term

__all__ = [
    "AddResult",
    "DeleteResult",
    "ExportType",
    "PoeditorClient",
    "Term",
]

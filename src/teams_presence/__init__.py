from .application.services import LookupSummary, PresenceLookupService
from .adapters.graph.client import GraphPresenceClient
from .adapters.console import ConsolePresenceSink
from .adapters.export.csv_file import CsvPresenceExporter
from .domain.models import PresenceRecord, RetryPolicy

__all__ = [
    "PresenceLookupService",
    "LookupSummary",
    "GraphPresenceClient",
    "ConsolePresenceSink",
    "CsvPresenceExporter",
    "PresenceRecord",
    "RetryPolicy",
]

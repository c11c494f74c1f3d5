from teams_presence.adapters.export.csv_file import CsvPresenceExporter

__all__ = ["CsvPresenceExporter"]

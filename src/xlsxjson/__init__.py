"""xlsxjson: read spreadsheet ranges as JSON records."""

__version__ = "0.1.0"

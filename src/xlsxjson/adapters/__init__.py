"""Spreadsheet library adapters."""

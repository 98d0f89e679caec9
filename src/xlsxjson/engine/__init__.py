"""Workbook loading, options, reading, and response dispatch."""

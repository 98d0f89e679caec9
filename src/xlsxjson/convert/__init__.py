"""Range conversion: parsing, coercion, headers, records."""

from xlsxjson.convert.coerce import coerce_body, coerce_header
from xlsxjson.convert.dates import DatePattern, DatePatternError, format_date
from xlsxjson.convert.headers import build_headers, ordinal_headers
from xlsxjson.convert.ranges import column_index, parse_range
from xlsxjson.convert.records import assemble_records

__all__ = [
    "DatePattern",
    "DatePatternError",
    "assemble_records",
    "build_headers",
    "coerce_body",
    "coerce_header",
    "column_index",
    "format_date",
    "ordinal_headers",
    "parse_range",
]

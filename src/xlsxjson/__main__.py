"""Allow running as ``python -m xlsxjson``."""

from xlsxjson.cli import main

main()

"""Sheet adapters: one row builder per workbook sheet kind."""
